"""
esmigrate.core: shared span/diagnostic types used across passes.

Modules:
  - span: Span source locations
  - diagnostics: Diagnostic records and the DiagnosticSink accumulator
"""

__all__ = [
    "diagnostics",
    "span",
]
