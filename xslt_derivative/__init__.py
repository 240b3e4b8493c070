"""
XSLT Derivative
===============

A configurable action that generates derivative files from source XML:

- Resolves classification terms by portable URI
- Locates the source media and file of a content item
- Expands token-based destination path templates
- Applies an XSLT stylesheet with structured diagnostics
- Stores the result as new media under a destination term

Architecture
------------

    xslt_derivative/
    ├── host/        - Host service interfaces and development backends
    ├── terms/       - Term URI resolution
    ├── tokens/      - Destination path templating
    ├── source/      - Source media/file location
    ├── transform/   - XSLT engine
    ├── writer/      - Derivative persistence
    ├── config/      - Action configuration
    └── action.py    - The execute() pipeline

Usage
-----

    from xslt_derivative import XsltDerivativeAction, load_config

    config = load_config(Path("action.yaml"))
    action = XsltDerivativeAction(config, terms, media, files)
    derivative = action.execute(node)

"""

__version__ = "1.0.0"

from xslt_derivative.action import (
    ExecutionStep,
    XsltDerivativeAction,
)

from xslt_derivative.config import (
    ActionConfig,
    ConfigurationSubmission,
    check_config,
    commit_configuration,
    load_config,
    save_config,
)

from xslt_derivative.exceptions import (
    AmbiguousSourceError,
    ConfigurationError,
    DerivativeError,
    NotFoundError,
    TransformError,
    WriteError,
)

from xslt_derivative.models import (
    ContentItem,
    FileStatus,
    MediaItem,
    StoredFile,
    Term,
    TransformContext,
)

from xslt_derivative.source import SourceLocator
from xslt_derivative.terms import TermResolver
from xslt_derivative.tokens import PathTokenExpander

from xslt_derivative.transform import (
    TransformPhase,
    TransformResult,
    XMLDiagnostic,
    XSLTTransformEngine,
)

from xslt_derivative.writer import (
    DerivativeWriter,
    build_storage_uri,
)

__all__ = [
    # Version
    "__version__",
    # Action
    "ExecutionStep",
    "XsltDerivativeAction",
    # Configuration
    "ActionConfig",
    "ConfigurationSubmission",
    "check_config",
    "commit_configuration",
    "load_config",
    "save_config",
    # Errors
    "AmbiguousSourceError",
    "ConfigurationError",
    "DerivativeError",
    "NotFoundError",
    "TransformError",
    "WriteError",
    # Records
    "ContentItem",
    "FileStatus",
    "MediaItem",
    "StoredFile",
    "Term",
    "TransformContext",
    # Components
    "SourceLocator",
    "TermResolver",
    "PathTokenExpander",
    "TransformPhase",
    "TransformResult",
    "XMLDiagnostic",
    "XSLTTransformEngine",
    "DerivativeWriter",
    "build_storage_uri",
]
