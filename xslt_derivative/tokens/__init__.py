"""
Path Tokens
===========

Placeholder expansion for destination path templates.
"""

from xslt_derivative.tokens.expander import (
    PathTokenExpander,
    find_tokens,
    format_date,
)

__all__ = [
    "PathTokenExpander",
    "find_tokens",
    "format_date",
]
