"""
Derivative Errors
=================

Error taxonomy for the derivative pipeline. Every failure aborts the
remaining steps and surfaces to the caller; nothing is retried or rolled back.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from xslt_derivative.transform.xslt import XMLDiagnostic


class DerivativeError(RuntimeError):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step


class NotFoundError(DerivativeError):
    """A configured term, media item, file or transform file is missing."""
    pass


class AmbiguousSourceError(DerivativeError):
    """More than one media item carries the source term (strict mode only)."""
    pass


class ConfigurationError(DerivativeError):
    """Configuration is incomplete or malformed."""
    pass


class WriteError(DerivativeError):
    """The storage layer failed while persisting the derivative."""
    pass


class TransformError(DerivativeError):
    """
    Stylesheet or source parsing, compilation or execution failed.

    Attributes:
        phase: One of stylesheet-parse, stylesheet-compile, source-parse, transform
        diagnostics: XML engine diagnostics collected during the failing run
    """

    def __init__(self,
                 phase: str,
                 diagnostics: Optional[List['XMLDiagnostic']] = None,
                 message: str = "",
                 step: Optional[str] = None):
        self.phase = phase
        self.diagnostics = list(diagnostics or [])
        base = message or f"XSLT {phase} failed"
        text = base
        if self.diagnostics:
            text += "\nLibXML errors:\n  " + "\n  ".join(d.raw for d in self.diagnostics)
        super().__init__(text, step=step)
        self.message = base
