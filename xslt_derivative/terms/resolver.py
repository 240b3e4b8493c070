"""
Term Resolver
=============

Translates portable term URIs to live term records and back.
A configured URI that no longer resolves is fatal: configuration is
presumed stale and nothing is retried.
"""

import logging

from xslt_derivative.exceptions import NotFoundError
from xslt_derivative.host.base import TermService
from xslt_derivative.models import Term

logger = logging.getLogger(__name__)


class TermResolver:
    """
    Strict wrapper around a host TermService.

    Example:
        resolver = TermResolver(term_service)
        term = resolver.resolve("http://pcdm.org/use#OriginalFile")
    """

    def __init__(self, terms: TermService):
        self._terms = terms

    def resolve(self, uri: str, label: str = "term") -> Term:
        """
        Resolve a URI to exactly one live term.

        Args:
            uri: Term URI from configuration
            label: Role of the term, used in the error message

        Raises:
            NotFoundError: If no term carries the URI
        """
        term = self._terms.get_term_for_uri(uri) if uri else None
        if term is None:
            raise NotFoundError(f"Could not locate {label} with uri: {uri}")
        logger.debug(f"Resolved {label} {uri} -> tid {term.tid}")
        return term

    def uri_of(self, term: Term) -> str:
        uri = self._terms.get_uri_for_term(term)
        if not uri:
            raise NotFoundError(f"Term {term.tid} ({term.name}) has no uri")
        return uri

    def load(self, tid: int, label: str = "term") -> Term:
        """Load a term by host-internal id."""
        term = self._terms.load_term(tid)
        if term is None:
            raise NotFoundError(f"Could not load {label} with id: {tid}")
        return term
