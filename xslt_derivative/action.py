"""
XSLT Derivative Action
======================

Generates a derivative of a content item's source XML:

    resolve source term -> locate source media -> locate source file
    -> resolve destination term -> expand destination path
    -> load stylesheet -> parse/compile stylesheet -> parse source
    -> execute transform -> write derivative

The first failing step ends the execution. Nothing is retried and side
effects of earlier steps are left in place.
"""

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from xslt_derivative.config.commit import check_config
from xslt_derivative.config.settings import ActionConfig, load_config
from xslt_derivative.exceptions import DerivativeError, NotFoundError
from xslt_derivative.host.base import FileStore, MediaService, TermService, TokenService
from xslt_derivative.models import ContentItem, MediaItem, TransformContext
from xslt_derivative.source.locator import SourceLocator
from xslt_derivative.terms.resolver import TermResolver
from xslt_derivative.tokens.expander import PathTokenExpander
from xslt_derivative.transform.xslt import TransformPhase, XSLTTransformEngine
from xslt_derivative.writer.derivative_writer import DerivativeWriter, guess_mime_type

logger = logging.getLogger(__name__)


class ExecutionStep(str, Enum):
    """States of one execution, in order."""
    START = "start"
    RESOLVE_SOURCE_TERM = "resolve-source-term"
    LOCATE_SOURCE_MEDIA = "locate-source-media"
    LOCATE_SOURCE_FILE = "locate-source-file"
    RESOLVE_DEST_TERM = "resolve-dest-term"
    EXPAND_DEST_PATH = "expand-dest-path"
    LOAD_STYLESHEET = "load-stylesheet"
    PARSE_STYLESHEET = "parse-stylesheet"
    COMPILE_STYLESHEET = "compile-stylesheet"
    PARSE_SOURCE = "parse-source"
    EXECUTE_TRANSFORM = "execute-transform"
    WRITE_DERIVATIVE = "write-derivative"
    DONE = "done"


PHASE_STEPS = {
    TransformPhase.STYLESHEET_PARSE.value: ExecutionStep.PARSE_STYLESHEET,
    TransformPhase.STYLESHEET_COMPILE.value: ExecutionStep.COMPILE_STYLESHEET,
    TransformPhase.SOURCE_PARSE.value: ExecutionStep.PARSE_SOURCE,
    TransformPhase.TRANSFORM.value: ExecutionStep.EXECUTE_TRANSFORM,
}


class XsltDerivativeAction:
    """
    Configurable action that turns a source XML media into a derivative.

    Collaborators are passed in explicitly; the action keeps no state
    between executions, so one instance may serve concurrent calls.

    Example:
        action = XsltDerivativeAction(config, terms, media, files)
        derivative = action.execute(node)
    """

    def __init__(self,
                 config: ActionConfig,
                 terms: TermService,
                 media: MediaService,
                 files: FileStore,
                 tokens: Optional[TokenService] = None,
                 engine: Optional[XSLTTransformEngine] = None,
                 strict_source: bool = False,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the action.

        Args:
            config: Committed action configuration
            terms: Host taxonomy service
            media: Host media service
            files: Host file store
            tokens: Token service for destination paths (default: PathTokenExpander)
            engine: Transform engine (default: a new XSLTTransformEngine on ``files``)
            strict_source: Refuse to pick when several media carry the source term
            clock: Returns the execution timestamp used by date tokens
        """
        self.config = config
        self.files = files
        self.resolver = TermResolver(terms)
        self.locator = SourceLocator(media, strict=strict_source)
        self.tokens = tokens or PathTokenExpander()
        self.engine = engine or XSLTTransformEngine(files)
        self.writer = DerivativeWriter(media)
        self.clock = clock or datetime.now

    @classmethod
    def from_file(cls,
                  config_path: Path,
                  terms: TermService,
                  media: MediaService,
                  files: FileStore,
                  **kwargs) -> 'XsltDerivativeAction':
        """Load, check and wrap a stored configuration."""
        config = load_config(config_path, files.default_scheme)
        check_config(config, terms, files)
        return cls(config, terms, media, files, **kwargs)

    def execute(self, content_item: ContentItem) -> MediaItem:
        """
        Run the pipeline for one content item.

        Returns:
            The media item holding the derivative

        Raises:
            ConfigurationError: If the configuration is incomplete
            NotFoundError: If a term, media, file or the transform file is missing
            TransformError: If parsing, compiling or transforming fails
            WriteError: If storing the derivative fails
        """
        step = ExecutionStep.START
        try:
            config = self.config.ensure_valid()
            logger.info(f"Generating XSLT derivative for node {content_item.nid}")

            step = ExecutionStep.RESOLVE_SOURCE_TERM
            source_term = self.resolver.resolve(config.source_term_uri, "source term")

            step = ExecutionStep.LOCATE_SOURCE_MEDIA
            source_media = self.locator.locate_media(content_item, source_term)

            step = ExecutionStep.LOCATE_SOURCE_FILE
            source_file = self.locator.locate_file(source_media)

            step = ExecutionStep.RESOLVE_DEST_TERM
            dest_term = self.resolver.resolve(config.dest_term_uri, "destination term")

            step = ExecutionStep.EXPAND_DEST_PATH
            context = TransformContext(
                node=content_item,
                media=source_media,
                term=dest_term,
                timestamp=self.clock(),
            )
            dest_path = self.tokens.replace(config.dest_path, context.as_token_data())

            step = ExecutionStep.LOAD_STYLESHEET
            transform_file = self.files.load(config.transform_file)
            if transform_file is None:
                raise NotFoundError("Could not load transform file.")

            step = ExecutionStep.PARSE_STYLESHEET
            result = self.engine.run(transform_file, source_file, dict(config.transform_params))
            if not result.success:
                step = PHASE_STEPS.get(result.phase, ExecutionStep.EXECUTE_TRANSFORM)
                result.raise_for_error()

            step = ExecutionStep.WRITE_DERIVATIVE
            mime_type = config.dest_mime_type or result.media_type or guess_mime_type(dest_path)
            return self.writer.write(
                content_item,
                config.dest_media_type,
                dest_term,
                result.output,
                mime_type,
                config.dest_scheme,
                dest_path,
            )
        except DerivativeError as e:
            if e.step is None:
                e.step = step.value
            logger.error(f"XSLT derivative for node {content_item.nid} failed at {e.step}: {e.message}")
            raise
