"""
Action Configuration
====================

Typed configuration record for the XSLT derivative action, with
YAML/JSON persistence.
"""

from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple
import json
import logging

import yaml

from xslt_derivative.exceptions import ConfigurationError
from xslt_derivative.writer.derivative_writer import SCHEME_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "public"
DEFAULT_TRANSFORM_PATH = "finding_aid.xsl"
DEFAULT_DEST_PATH = "[date:custom:Y]-[date:custom:m]/[node:nid]_transformed.html"


def _freeze_params(params: Any) -> Tuple[Tuple[str, str], ...]:
    """Normalize XSLT params to sorted (name, value) string pairs."""
    if isinstance(params, Mapping):
        items = params.items()
    else:
        try:
            items = [(name, value) for name, value in params]
        except (TypeError, ValueError):
            raise ConfigurationError("transform_params must be a mapping") from None
    return tuple(sorted((str(name), str(value)) for name, value in items))


@dataclass(frozen=True)
class ActionConfig:
    """
    Operator-supplied settings, read-only at execution time.

    Term references are stored as URIs rather than host ids so a
    configuration stays valid across environments.

    Example:
        config = ActionConfig.defaults("fedora")
        config = config.with_values(source_term_uri="urn:source", dest_term_uri="urn:dest")
        save_config(config, Path("action.yaml"))
    """

    transform_file: Optional[int] = None
    transform_scheme: str = DEFAULT_SCHEME
    transform_path: str = DEFAULT_TRANSFORM_PATH
    source_term_uri: str = ""
    dest_term_uri: str = ""
    dest_media_type: str = ""
    dest_scheme: str = DEFAULT_SCHEME
    dest_path: str = DEFAULT_DEST_PATH

    # Empty means: derive from the stylesheet's xsl:output, then the extension
    dest_mime_type: str = ""
    # Accepts a mapping; held as sorted (name, value) pairs
    transform_params: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'transform_params', _freeze_params(self.transform_params))

    @classmethod
    def defaults(cls, default_scheme: str = DEFAULT_SCHEME) -> 'ActionConfig':
        """Default configuration using the host's default storage scheme."""
        return cls(transform_scheme=default_scheme, dest_scheme=default_scheme)

    def with_values(self, **changes: Any) -> 'ActionConfig':
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    def validate(self) -> List[str]:
        """
        Check required fields and value formats.

        Returns:
            List of problems (empty when valid)
        """
        problems = []
        if not self.transform_file:
            problems.append("transform_file is required")
        for name in ('transform_path', 'source_term_uri', 'dest_term_uri',
                     'dest_media_type', 'dest_path'):
            if not str(getattr(self, name) or '').strip():
                problems.append(f"{name} is required")
        for name in ('transform_scheme', 'dest_scheme'):
            if not SCHEME_PATTERN.match(getattr(self, name) or ''):
                problems.append(f"{name} is not a valid scheme: {getattr(self, name)!r}")
        return problems

    def ensure_valid(self) -> 'ActionConfig':
        """
        Raise ConfigurationError listing every problem, else return self.
        """
        problems = self.validate()
        if problems:
            raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data['transform_params'] = dict(self.transform_params)
        return data

    @classmethod
    def from_dict(cls, data: dict, default_scheme: str = DEFAULT_SCHEME) -> 'ActionConfig':
        """
        Create from dictionary; missing keys take their defaults.

        Raises:
            ConfigurationError: On unknown keys or a non-numeric transform_file
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = dict(data)
        if values.get('transform_file') in ('', None):
            values['transform_file'] = None
        else:
            try:
                values['transform_file'] = int(values['transform_file'])
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"transform_file must be a file id: {values['transform_file']!r}"
                ) from None
        for key in ('transform_path', 'dest_path'):
            if key in values and values[key] is not None:
                values[key] = str(values[key]).strip()
        if values.get('transform_params') is None:
            values.pop('transform_params', None)

        return replace(cls.defaults(default_scheme), **values)


def load_config(config_path: Path, default_scheme: str = DEFAULT_SCHEME) -> ActionConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file
        default_scheme: Scheme used for scheme fields the file leaves out

    Returns:
        ActionConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
        ConfigurationError: If the file holds unknown keys or is not a mapping
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must hold a mapping: {config_path}")

    logger.info(f"Loaded configuration from {config_path}")
    return ActionConfig.from_dict(data, default_scheme)


def save_config(config: ActionConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")
