"""
Derivative Writing
==================

Stores transform output as media attached to the content item.
"""

from xslt_derivative.writer.derivative_writer import (
    DerivativeWriter,
    build_storage_uri,
    guess_mime_type,
)

__all__ = [
    "DerivativeWriter",
    "build_storage_uri",
    "guess_mime_type",
]
