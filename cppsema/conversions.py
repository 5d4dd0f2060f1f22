# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type compatibility used by overload ranking.

Types are identified by name. Three relations are understood:

- identity;
- derived-to-base: a class converts (and binds by reference) to a base class
  when that base is a unique sub-object of it;
- standard conversions: registered (from, to) pairs. The default table holds
  the arithmetic conversions among the builtin scalar types.

User-defined conversions (converting constructors, conversion operators) are
not part of the table.
"""

from __future__ import annotations

from itertools import permutations
from typing import Iterable, Optional, Set, Tuple

from cppsema.layout import LayoutResolver

ARITHMETIC_TYPES: Tuple[str, ...] = (
	"bool",
	"char",
	"short",
	"int",
	"long",
	"long long",
	"unsigned",
	"float",
	"double",
)


def default_standard_conversions() -> Set[Tuple[str, str]]:
	return set(permutations(ARITHMETIC_TYPES, 2))


class ConversionTable:
	def __init__(
		self,
		layouts: Optional[LayoutResolver] = None,
		*,
		standard: Optional[Iterable[Tuple[str, str]]] = None,
	) -> None:
		self._layouts = layouts
		self._standard: Set[Tuple[str, str]] = (
			default_standard_conversions() if standard is None else set(standard)
		)

	def add(self, src: str, dst: str) -> None:
		self._standard.add((src, dst))

	def is_derived_to_base(self, src: str, dst: str) -> bool:
		if self._layouts is None:
			return False
		graph = self._layouts.graph
		if not graph.is_base_of(dst, src):
			return False
		return self._layouts.instance_count(src, dst) == 1

	def binds_reference(self, src: str, dst: str) -> bool:
		"""A reference to `dst` can bind directly to an object of type `src`."""
		return src == dst or self.is_derived_to_base(src, dst)

	def is_convertible(self, src: str, dst: str) -> bool:
		return self.binds_reference(src, dst) or (src, dst) in self._standard


__all__ = ["ARITHMETIC_TYPES", "ConversionTable", "default_standard_conversions"]
