# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the engine and the fixture harness.

A message plus optional code/phase/span/notes. The harness turns structural
errors and non-unique verdicts into Diagnostics; the engine itself returns
verdicts and raises SemaError subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .span import Span


@dataclass
class Diagnostic:
	"""Represents an engine diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Phase label: "parse", "graph", "layout", "lookup", "overload", "disambiguate", "config".
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		head = f"{self.span.label()}: {self.severity}"
		if self.code:
			head += f"[{self.code}]"
		lines = [f"{head}: {self.message}"]
		lines.extend(f"  note: {n}" for n in self.notes)
		return "\n".join(lines)

	def to_json(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
