"""
Configuration Management
========================

Configuration record, persistence and commit for the derivative action.
"""

from xslt_derivative.config.settings import (
    ActionConfig,
    DEFAULT_DEST_PATH,
    DEFAULT_SCHEME,
    DEFAULT_TRANSFORM_PATH,
    load_config,
    save_config,
)
from xslt_derivative.config.commit import (
    ConfigurationSubmission,
    check_config,
    commit_configuration,
)

__all__ = [
    "ActionConfig",
    "DEFAULT_DEST_PATH",
    "DEFAULT_SCHEME",
    "DEFAULT_TRANSFORM_PATH",
    "load_config",
    "save_config",
    "ConfigurationSubmission",
    "check_config",
    "commit_configuration",
]
