"""
Term Resolution
===============

Maps classification term URIs to live term records.
"""

from xslt_derivative.terms.resolver import TermResolver

__all__ = [
    "TermResolver",
]
