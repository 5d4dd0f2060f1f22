# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span attached to declarations, queries and diagnostics.

Declarations built by hand (tests, embedding code) carry the empty Span();
declarations produced by the fixture parser carry the lark position metadata
in `raw` together with line/column info.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser location object (lark `Meta` or `Token`).

		If `loc` is already a Span it is returned unchanged (with `file` filled in
		when it was missing).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(file, loc.line, loc.column, loc.end_line, loc.end_column, loc.raw)
			return loc
		# lark Meta objects raise AttributeError for positions when the tree is empty.
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def label(self) -> str:
		"""Render as `file:line:col` (parts that are unknown are omitted)."""
		parts = [self.file or "<input>"]
		if self.line is not None:
			parts.append(str(self.line))
			if self.column is not None:
				parts.append(str(self.column))
		return ":".join(parts)

	def to_json(self) -> dict[str, Any]:
		return {"file": self.file, "line": self.line, "column": self.column}


__all__ = ["Span"]
