"""
Transformation Framework
========================

XSLT transformation with per-run diagnostics.

Components:
- XSLTTransformEngine: stylesheet + source -> bytes
- TransformResult: success/failure record of one run
- XMLDiagnostic: one libxml2/libxslt log entry
- TransformPhase: the four steps a run can fail in
"""

from xslt_derivative.transform.xslt import (
    TransformPhase,
    TransformResult,
    XMLDiagnostic,
    XSLTTransformEngine,
    is_empty_output,
    output_media_type,
)

__all__ = [
    "TransformPhase",
    "TransformResult",
    "XMLDiagnostic",
    "XSLTTransformEngine",
    "is_empty_output",
    "output_media_type",
]
