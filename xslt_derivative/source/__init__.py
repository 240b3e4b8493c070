"""
Source Location
===============

Finds the source media and file for a content item.
"""

from xslt_derivative.source.locator import SourceLocator

__all__ = [
    "SourceLocator",
]
