# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structural errors raised by the engine.

Every error is locally recoverable: it aborts the registration or query that
raised it and leaves the fact base untouched. Ambiguity and no-match are not
errors; they come back as verdicts (see cppsema.verdicts).
"""

from __future__ import annotations

from .diagnostics import Diagnostic
from .span import Span


class SemaError(ValueError):
	"""Base class; carries a stable diagnostic code and an optional span."""

	code = "E-SEMA"
	phase = "graph"

	def __init__(self, message: str, *, span: Span | None = None, code: str | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span if span is not None else Span()
		if code is not None:
			self.code = code

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=self.message, code=self.code, phase=self.phase, span=self.span)


class DuplicateClass(SemaError):
	code = "E-CLASS-DUP"


class DuplicateDirectBase(SemaError):
	code = "E-BASE-DUP"


class UnknownBase(SemaError):
	code = "E-BASE-UNKNOWN"


class UnknownClass(SemaError):
	code = "E-CLASS-UNKNOWN"


class CyclicInheritance(SemaError):
	code = "E-CLASS-CYCLE"

	def __init__(self, cycle: tuple[str, ...], *, span: Span | None = None) -> None:
		self.cycle = cycle
		super().__init__(f"cyclic inheritance: {' -> '.join(cycle)}", span=span)


class UnknownMember(SemaError):
	code = "E-MEMBER-UNKNOWN"
	phase = "lookup"


class AmbiguousBase(SemaError):
	"""Qualified lookup names a base that does not denote one sub-object/declaration."""

	code = "E-BASE-AMBIGUOUS"
	phase = "lookup"


__all__ = [
	"SemaError",
	"DuplicateClass",
	"DuplicateDirectBase",
	"UnknownBase",
	"UnknownClass",
	"CyclicInheritance",
	"UnknownMember",
	"AmbiguousBase",
]
