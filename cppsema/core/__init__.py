"""
cppsema.core: shared diagnostics/spans/errors used by every component.

Modules:
  - span: Span source locations
  - diagnostics: Diagnostic records rendered by the harness
  - errors: SemaError hierarchy for structural failures
"""

__all__ = [
    "span",
    "diagnostics",
    "errors",
]
