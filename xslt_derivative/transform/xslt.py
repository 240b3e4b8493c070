"""
XSLT Transform Engine
=====================

Applies a stored XSLT stylesheet to a stored XML document with lxml.

Each run goes through four phases, any of which can fail:

    stylesheet-parse -> stylesheet-compile -> source-parse -> transform

Every lxml call is followed by an error-log check, so a call that returns
normally but logged errors still fails its phase. Diagnostics are collected
per run and never carried over to the next one.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from lxml import etree

from xslt_derivative.exceptions import TransformError
from xslt_derivative.host.base import FileStore, StorageError
from xslt_derivative.models import StoredFile

logger = logging.getLogger(__name__)

XSL_NAMESPACE = "http://www.w3.org/1999/XSL/Transform"

OUTPUT_METHOD_MEDIA_TYPES = {
    'html': 'text/html',
    'xhtml': 'application/xhtml+xml',
    'xml': 'application/xml',
    'text': 'text/plain',
}

_XML_DECLARATION = re.compile(rb'^\s*<\?xml[^>]*\?>')


class TransformPhase(str, Enum):
    """Steps of a transform run, in execution order."""
    STYLESHEET_PARSE = "stylesheet-parse"
    STYLESHEET_COMPILE = "stylesheet-compile"
    SOURCE_PARSE = "source-parse"
    TRANSFORM = "transform"


@dataclass
class XMLDiagnostic:
    """
    One warning or error reported by libxml2/libxslt.

    Attributes:
        level: 'WARNING', 'ERROR' or 'FATAL'
        domain: Reporting subsystem (PARSER, XSLT, IO, ...)
        type: libxml2 error type name
        message: Error description
        line: Line number (0 if unknown)
        column: Column number (0 if unknown)
        filename: Document the error refers to
        raw: The entry exactly as lxml renders it
    """
    level: str
    domain: str
    type: str
    message: str
    line: int = 0
    column: int = 0
    filename: Optional[str] = None
    raw: str = ""

    @classmethod
    def from_log_entry(cls, entry: Any) -> 'XMLDiagnostic':
        return cls(
            level=entry.level_name,
            domain=entry.domain_name,
            type=entry.type_name,
            message=(entry.message or "").strip(),
            line=entry.line or 0,
            column=entry.column or 0,
            filename=entry.filename,
            raw=str(entry),
        )

    @classmethod
    def from_exception(cls, error: Exception, domain: str, filename: Optional[str] = None) -> 'XMLDiagnostic':
        message = str(error) or error.__class__.__name__
        return cls(
            level="FATAL",
            domain=domain,
            type=error.__class__.__name__,
            message=message,
            line=getattr(error, 'lineno', None) or 0,
            filename=filename,
            raw=f"{filename or '<unknown>'}:{domain}: {message}",
        )

    @property
    def is_error(self) -> bool:
        return self.level in ("ERROR", "FATAL")

    def __str__(self) -> str:
        return self.raw


@dataclass
class TransformResult:
    """
    Outcome of one engine run.

    Attributes:
        success: Whether all four phases passed
        output: Serialized transform result (empty on failure)
        phase: Failing phase, None on success
        message: Failure description
        diagnostics: Errors that failed the run
        warnings: Warnings logged during the run
        media_type: MIME type declared by the stylesheet's xsl:output, if any
    """
    success: bool = True
    output: bytes = b""
    phase: Optional[str] = None
    message: str = ""
    diagnostics: List[XMLDiagnostic] = field(default_factory=list)
    warnings: List[XMLDiagnostic] = field(default_factory=list)
    media_type: Optional[str] = None

    def fail(self, error: TransformError) -> None:
        self.success = False
        self.output = b""
        self.phase = error.phase
        self.message = error.message
        self.diagnostics = list(error.diagnostics)

    def raise_for_error(self) -> None:
        """Raise TransformError if the run failed."""
        if not self.success:
            raise TransformError(self.phase, self.diagnostics, self.message)

    def summary(self) -> str:
        """Generate a text summary of the run."""
        if self.success:
            lines = [f"Transform: SUCCESS ({len(self.output)} bytes)"]
        else:
            lines = [f"Transform: FAILED in {self.phase}"]

        if self.diagnostics:
            lines.append(f"\nErrors ({len(self.diagnostics)}):")
            for diagnostic in self.diagnostics[:5]:
                lines.append(f"  - {diagnostic.raw}")

        if self.warnings:
            lines.append(f"\nWarnings ({len(self.warnings)}):")
            for warning in self.warnings[:3]:
                lines.append(f"  - {warning.raw}")

        return "\n".join(lines)


def output_media_type(stylesheet: Any) -> Optional[str]:
    """
    Read the MIME type a stylesheet declares through xsl:output.

    ``media-type`` wins over ``method``; None when neither is set.
    """
    output = stylesheet.find(f'{{{XSL_NAMESPACE}}}output')
    if output is None:
        return None
    media_type = (output.get('media-type') or '').strip()
    if media_type:
        return media_type
    method = (output.get('method') or '').strip().lower()
    return OUTPUT_METHOD_MEDIA_TYPES.get(method)


def is_empty_output(output: bytes) -> bool:
    """True when a serialized result holds nothing beyond an XML declaration."""
    return not _XML_DECLARATION.sub(b'', output or b'').strip()


class XSLTTransformEngine:
    """
    Stylesheet + source -> bytes, with structured error capture.

    The engine holds no per-run state; each run collects its diagnostics
    on the TransformResult it returns.

    Example:
        engine = XSLTTransformEngine(file_store)
        result = engine.run(stylesheet_file, source_file)
        if result.success:
            html = result.output
        else:
            print(result.summary())
    """

    def __init__(self,
                 file_store: FileStore,
                 extensions: Optional[Dict[Tuple[Optional[str], str], Callable]] = None,
                 strict_warnings: bool = False):
        """
        Initialize the engine.

        Args:
            file_store: Store used to read the stylesheet and source bytes
            extensions: XPath extension functions keyed by (namespace, name)
            strict_warnings: Fail a phase on warnings too, not only on errors
        """
        self.file_store = file_store
        self.extensions = dict(extensions or {})
        self.strict_warnings = strict_warnings

    def run(self,
            stylesheet_file: StoredFile,
            source_file: StoredFile,
            params: Optional[Dict[str, Any]] = None) -> TransformResult:
        """
        Transform ``source_file`` with ``stylesheet_file``.

        Never raises for parse, compile or transform failures; they are
        reported on the returned TransformResult.

        Args:
            stylesheet_file: Stored XSLT stylesheet
            source_file: Stored XML document
            params: XSLT parameters, passed as string parameters

        Returns:
            TransformResult with output bytes or the failing phase and diagnostics
        """
        etree.clear_error_log()
        result = TransformResult()

        try:
            stylesheet = self._parse(stylesheet_file, TransformPhase.STYLESHEET_PARSE, result)
            transform = self._compile(stylesheet, result)
            source = self._parse(source_file, TransformPhase.SOURCE_PARSE, result)
            result.output = self._apply(transform, source, params or {}, result)
            result.media_type = output_media_type(stylesheet)
        except TransformError as e:
            result.fail(e)
            logger.error(f"XSLT {e.phase} failed: {len(e.diagnostics)} diagnostic(s)")
            for diagnostic in e.diagnostics:
                logger.error(f"  {diagnostic}")
            return result

        for warning in result.warnings:
            logger.warning(f"XSLT warning: {warning}")
        logger.info(f"XSLT transformation completed ({len(result.output)} bytes)")
        return result

    def transform(self,
                  stylesheet_file: StoredFile,
                  source_file: StoredFile,
                  params: Optional[Dict[str, Any]] = None) -> bytes:
        """
        Transform and return the output bytes.

        Raises:
            TransformError: With the failing phase and its diagnostics
        """
        result = self.run(stylesheet_file, source_file, params)
        result.raise_for_error()
        return result.output

    def _read(self, file: StoredFile, phase: TransformPhase) -> bytes:
        try:
            with self.file_store.open(file.uri) as stream:
                return stream.read()
        except (OSError, StorageError) as e:
            raise TransformError(
                phase.value,
                [XMLDiagnostic.from_exception(e, "IO", file.uri)],
                f"Could not read {file.uri}",
            ) from e

    def _parse(self, file: StoredFile, phase: TransformPhase, result: TransformResult) -> Any:
        data = self._read(file, phase)
        logger.info(f"Parsing XML: {file.uri}")

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        base_url = self.file_store.realpath(file.uri) or file.uri
        try:
            root = etree.fromstring(data, parser, base_url=base_url)
        except etree.XMLSyntaxError as e:
            errors, _ = self._split(parser.error_log)
            raise TransformError(
                phase.value,
                errors or [XMLDiagnostic.from_exception(e, "PARSER", file.uri)],
                f"Could not parse {file.uri}",
            ) from e

        self._check(parser.error_log, phase, result, f"Errors while parsing {file.uri}")
        return root

    def _compile(self, stylesheet: Any, result: TransformResult) -> 'etree.XSLT':
        phase = TransformPhase.STYLESHEET_COMPILE
        try:
            transform = etree.XSLT(
                stylesheet,
                extensions=self.extensions or None,
                access_control=etree.XSLTAccessControl.DENY_WRITE,
            )
        except etree.XSLTParseError as e:
            errors, _ = self._split(e.error_log)
            raise TransformError(
                phase.value,
                errors or [XMLDiagnostic.from_exception(e, "XSLT")],
                "Could not compile stylesheet",
            ) from e

        self._check(transform.error_log, phase, result, "Errors while compiling stylesheet")
        return transform

    def _apply(self, transform: 'etree.XSLT', source: Any, params: Dict[str, Any],
               result: TransformResult) -> bytes:
        phase = TransformPhase.TRANSFORM
        xslt_params = {k: etree.XSLT.strparam(str(v)) for k, v in params.items()}

        logger.info("Applying XSLT transformation...")
        try:
            tree = transform(source.getroottree(), **xslt_params)
        except etree.XSLTApplyError as e:
            errors, _ = self._split(transform.error_log)
            raise TransformError(
                phase.value,
                errors or [XMLDiagnostic.from_exception(e, "XSLT")],
                "XSLT transformation failed",
            ) from e

        self._check(transform.error_log, phase, result, "Errors during XSLT transformation")

        output = bytes(tree)
        if is_empty_output(output):
            raise TransformError(phase.value, [], "XSLT transformation produced no output")
        return output

    def _split(self, error_log: Any) -> Tuple[List[XMLDiagnostic], List[XMLDiagnostic]]:
        """Partition an lxml error log into (errors, warnings)."""
        errors: List[XMLDiagnostic] = []
        warnings: List[XMLDiagnostic] = []
        for entry in error_log:
            diagnostic = XMLDiagnostic.from_log_entry(entry)
            if diagnostic.is_error or self.strict_warnings:
                errors.append(diagnostic)
            else:
                warnings.append(diagnostic)
        return errors, warnings

    def _check(self, error_log: Any, phase: TransformPhase, result: TransformResult, message: str) -> None:
        """Fail ``phase`` if the call logged errors, even though it returned."""
        errors, warnings = self._split(error_log)
        result.warnings.extend(warnings)
        if errors:
            raise TransformError(phase.value, errors, message)
