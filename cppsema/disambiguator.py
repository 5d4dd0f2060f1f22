# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration-vs-construction classification ("most vexing parse").

A statement `B b(A());` can be read as a variable `b` of type B built from a
temporary A, or as a declaration of a function `b` returning B that takes a
(pointer to a) function returning A. The grammar settles it: anything that
can be a declaration is a declaration. The rule is fixed precedence, so the
classifier is a pure function of the statement shape; no lookahead or
backtracking state is involved.

Escape hatches that force a construction:
- an extra paren group around the argument: `B b((A()));`
- brace initialization of the argument or the variable:
  `B b(A{});`, `B b{A()};`, `B b{A{}};`

The module also classifies the `~x` spelling: applied to an object it is the
complement operator, never a destructor call. Only the member form
`x.~T()` calls a destructor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import AbstractSet, Optional, Tuple


class Delim(Enum):
	PAREN = auto()
	BRACE = auto()

	def wrap(self, inner: str) -> str:
		return f"({inner})" if self is Delim.PAREN else f"{{{inner}}}"


class InitKind(Enum):
	EMPTY = auto()  # B b();
	NAME = auto()  # B b(A);  / B b(a);
	TYPE_CALL = auto()  # B b(A());  / B b(A{});
	GROUP = auto()  # B b((A()));


@dataclass(frozen=True)
class InitExpr:
	kind: InitKind
	name: Optional[str] = None
	delim: Delim = Delim.PAREN  # call delimiter for TYPE_CALL
	inner: Optional["InitExpr"] = None  # wrapped expression for GROUP

	def render(self) -> str:
		if self.kind is InitKind.EMPTY:
			return ""
		if self.kind is InitKind.NAME:
			return self.name or ""
		if self.kind is InitKind.TYPE_CALL:
			return f"{self.name}{self.delim.wrap('')}"
		assert self.inner is not None
		return f"({self.inner.render()})"


def empty_init() -> InitExpr:
	return InitExpr(kind=InitKind.EMPTY)


def name_init(name: str) -> InitExpr:
	return InitExpr(kind=InitKind.NAME, name=name)


def type_call(name: str, delim: Delim = Delim.PAREN) -> InitExpr:
	return InitExpr(kind=InitKind.TYPE_CALL, name=name, delim=delim)


def group(inner: InitExpr) -> InitExpr:
	return InitExpr(kind=InitKind.GROUP, inner=inner)


@dataclass(frozen=True)
class StatementShape:
	"""`<type_name> <declarator><outer>( init )`, e.g. `B b(A())`."""

	type_name: str
	declarator: str
	init: InitExpr
	outer: Delim = Delim.PAREN

	def render(self) -> str:
		return f"{self.type_name} {self.declarator}{self.outer.wrap(self.init.render())};"


class Interpretation(Enum):
	FUNCTION_DECLARATION = auto()
	VALUE_CONSTRUCTION = auto()


@dataclass(frozen=True)
class FunctionReading:
	name: str
	return_type: str
	param_types: Tuple[str, ...]

	def render(self) -> str:
		return f"{self.return_type} {self.name}({', '.join(self.param_types)})"


@dataclass(frozen=True)
class Classification:
	interpretation: Interpretation
	shape: StatementShape
	function: Optional[FunctionReading] = None
	reason: str = ""

	@property
	def is_function_declaration(self) -> bool:
		return self.interpretation is Interpretation.FUNCTION_DECLARATION


def classify(shape: StatementShape, *, type_names: AbstractSet[str] = frozenset()) -> Classification:
	"""
	Classify a `Type name(...)` statement.

	`type_names` lists the identifiers known to name types; it only matters for
	the bare-name form `B b(A);`, which declares a function when `A` is a type
	and constructs from a variable otherwise.
	"""
	if shape.outer is Delim.BRACE:
		return _construction(shape, "brace-initialized declarator")
	init = shape.init
	if init.kind is InitKind.EMPTY:
		return _function(shape, (), "empty parentheses declare a nullary function")
	if init.kind is InitKind.GROUP:
		return _construction(shape, "parenthesized expression cannot be a parameter declaration")
	if init.kind is InitKind.TYPE_CALL:
		if init.delim is Delim.BRACE:
			return _construction(shape, f"'{init.render()}' is a braced temporary")
		param = f"{init.name} (*)()"
		return _function(shape, (param,), f"'{init.render()}' reads as a parameter of function type returning '{init.name}'")
	if init.name in type_names:
		return _function(shape, (init.name or "",), f"'{init.name}' names a type")
	return _construction(shape, f"'{init.name}' is not a type name")


def _function(shape: StatementShape, params: Tuple[str, ...], reason: str) -> Classification:
	return Classification(
		interpretation=Interpretation.FUNCTION_DECLARATION,
		shape=shape,
		function=FunctionReading(name=shape.declarator, return_type=shape.type_name, param_types=params),
		reason=reason,
	)


def _construction(shape: StatementShape, reason: str) -> Classification:
	return Classification(interpretation=Interpretation.VALUE_CONSTRUCTION, shape=shape, reason=reason)


@dataclass(frozen=True)
class Disambiguation:
	"""Rewrites of a statement that force the construction reading."""

	extra_parens: StatementShape
	brace_init: StatementShape
	alternatives: Tuple[StatementShape, ...] = ()

	def all(self) -> Tuple[StatementShape, ...]:
		return (self.extra_parens, self.brace_init) + self.alternatives


def suggest_disambiguation(shape: StatementShape) -> Disambiguation:
	"""
	Offer construction-forcing rewrites of `shape`.

	For `B b(A());` this gives `B b((A()));`, `B b(A{});` and the
	uniform-initialization variants `B b{A()};` and `B b{A{}};`.
	"""
	init = shape.init
	while init.kind is InitKind.GROUP and init.inner is not None:
		init = init.inner
	if init.kind is InitKind.EMPTY:
		# `B b();` has no argument to wrap; value-initialize instead.
		braced = StatementShape(shape.type_name, shape.declarator, empty_init(), Delim.BRACE)
		return Disambiguation(extra_parens=braced, brace_init=braced)
	extra = StatementShape(shape.type_name, shape.declarator, group(init), Delim.PAREN)
	if init.kind is not InitKind.TYPE_CALL:
		brace = StatementShape(shape.type_name, shape.declarator, init, Delim.BRACE)
		return Disambiguation(extra_parens=extra, brace_init=brace)
	braced_arg = type_call(init.name or "", Delim.BRACE)
	brace = StatementShape(shape.type_name, shape.declarator, braced_arg, Delim.PAREN)
	alternatives = (
		StatementShape(shape.type_name, shape.declarator, type_call(init.name or ""), Delim.BRACE),
		StatementShape(shape.type_name, shape.declarator, braced_arg, Delim.BRACE),
	)
	return Disambiguation(extra_parens=extra, brace_init=brace, alternatives=alternatives)


class TildeReading(Enum):
	COMPLEMENT = auto()
	DESTRUCTOR_CALL = auto()


@dataclass(frozen=True)
class TildeShape:
	"""`~operand` (member_access False) or `operand.~type_name()` (member_access True)."""

	operand: str
	member_access: bool = False
	type_name: Optional[str] = None

	def render(self) -> str:
		if self.member_access:
			return f"{self.operand}.~{self.type_name}();"
		return f"~{self.operand};"


def classify_tilde(shape: TildeShape) -> TildeReading:
	"""`~obj` applies operator~ to obj; only `obj.~T()` calls the destructor."""
	if shape.member_access:
		return TildeReading.DESTRUCTOR_CALL
	return TildeReading.COMPLEMENT


__all__ = [
	"Delim",
	"InitKind",
	"InitExpr",
	"StatementShape",
	"Interpretation",
	"FunctionReading",
	"Classification",
	"Disambiguation",
	"TildeReading",
	"TildeShape",
	"classify",
	"suggest_disambiguation",
	"classify_tilde",
	"empty_init",
	"name_init",
	"type_call",
	"group",
]
