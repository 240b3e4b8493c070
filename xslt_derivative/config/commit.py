"""
Configuration Commit
====================

Turns operator-submitted settings into a stored ActionConfig:

1. The uploaded stylesheet is moved from its temporary location to
   ``transform_scheme://transform_path``, marked permanent and saved.
2. Source/destination terms chosen by host id are stored by URI.

A stylesheet move that succeeded is not undone if a later check fails.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional
import logging

from xslt_derivative.config.settings import ActionConfig, DEFAULT_SCHEME
from xslt_derivative.exceptions import ConfigurationError, NotFoundError
from xslt_derivative.host.base import FileStore, MediaService, TermService
from xslt_derivative.terms.resolver import TermResolver

logger = logging.getLogger(__name__)

STYLESHEET_EXTENSIONS = ('.xsl', '.xslt')


@dataclass
class ConfigurationSubmission:
    """
    Values an operator submits when saving the action.

    Attributes:
        transform_file: Id of the uploaded (temporary) stylesheet file
        transform_scheme: Scheme to store the stylesheet under
        transform_path: Path for the stylesheet within the scheme
        source_term: Host id of the source term
        dest_term: Host id of the destination term
        dest_media_type: Media bundle for the derivative
        dest_scheme: Scheme for derivatives
        dest_path: Destination path template
        dest_mime_type: Optional explicit MIME type
    """
    transform_file: int
    source_term: int
    dest_term: int
    dest_media_type: str
    transform_scheme: str = DEFAULT_SCHEME
    transform_path: str = ""
    dest_scheme: str = DEFAULT_SCHEME
    dest_path: str = ""
    dest_mime_type: str = ""


def commit_configuration(submission: ConfigurationSubmission,
                         files: FileStore,
                         terms: TermService,
                         media: Optional[MediaService] = None,
                         current: Optional[ActionConfig] = None) -> ActionConfig:
    """
    Validate a submission, relocate the stylesheet and build the config.

    Args:
        submission: Submitted values
        files: File store holding the uploaded stylesheet
        terms: Term service for id -> URI conversion
        media: Optional media service used to check the media type exists
        current: Configuration being edited; unchanged fields are kept

    Returns:
        The new ActionConfig

    Raises:
        ConfigurationError: If a value is invalid
        NotFoundError: If the uploaded file or a term does not exist
    """
    base = current or ActionConfig.defaults(files.default_scheme)
    transform_path = (submission.transform_path or base.transform_path).strip()
    dest_path = (submission.dest_path or base.dest_path).strip()

    schemes = files.schemes()
    for label, scheme in (('transform', submission.transform_scheme),
                          ('destination', submission.dest_scheme)):
        if scheme not in schemes:
            raise ConfigurationError(f"Unknown {label} scheme: {scheme}")

    if media is not None and not media.has_media_type(submission.dest_media_type):
        raise ConfigurationError(f"Unknown media type: {submission.dest_media_type}")

    upload = files.load(submission.transform_file)
    if upload is None:
        raise NotFoundError(f"Could not load uploaded transform file {submission.transform_file}")
    if PurePosixPath(upload.filename).suffix.lower() not in STYLESHEET_EXTENSIONS:
        raise ConfigurationError(
            f"Transform file must have one of the extensions: {' '.join(STYLESHEET_EXTENSIONS)}"
        )

    resolver = TermResolver(terms)
    source_term = resolver.load(submission.source_term, "source term")
    dest_term = resolver.load(submission.dest_term, "destination term")

    transform_uri = f"{submission.transform_scheme}://{transform_path}"
    transform_file = files.move(upload, transform_uri)
    transform_file.set_permanent()
    files.save(transform_file)
    logger.info(f"Stored transform file {transform_file.fid} at {transform_uri}")

    config = base.with_values(
        transform_file=transform_file.fid,
        transform_scheme=submission.transform_scheme,
        transform_path=transform_path,
        source_term_uri=resolver.uri_of(source_term),
        dest_term_uri=resolver.uri_of(dest_term),
        dest_media_type=submission.dest_media_type,
        dest_scheme=submission.dest_scheme,
        dest_path=dest_path,
        dest_mime_type=submission.dest_mime_type.strip(),
    )
    return config.ensure_valid()


def check_config(config: ActionConfig, terms: TermService, files: FileStore) -> ActionConfig:
    """
    Load-time check that a stored configuration can execute.

    Raises:
        ConfigurationError: If required fields are missing or malformed
        NotFoundError: If a term URI or the transform file no longer resolves
    """
    config.ensure_valid()
    resolver = TermResolver(terms)
    resolver.resolve(config.source_term_uri, "source term")
    resolver.resolve(config.dest_term_uri, "destination term")
    if files.load(config.transform_file) is None:
        raise NotFoundError("Could not load transform file.")
    return config
