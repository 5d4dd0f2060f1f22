# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Class declarations and the inheritance graph (fact base).

Classes live in an arena keyed by name; a BaseRef names its target instead of
holding it, so shared (virtual) ancestors are plain repeated keys and the
graph can be walked by any number of concurrent queries. Registration is the
only mutation and must happen base-before-derived.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from cppsema.core.errors import (
	CyclicInheritance,
	DuplicateClass,
	DuplicateDirectBase,
	UnknownBase,
	UnknownClass,
)
from cppsema.core.span import Span


class Access(Enum):
	PUBLIC = auto()
	PROTECTED = auto()
	PRIVATE = auto()


class MemberKind(Enum):
	DATA = auto()
	FUNCTION = auto()


class RefCategory(Enum):
	"""What a parameter accepts: a copy, an lvalue reference or an rvalue reference."""

	BY_VALUE = auto()
	LVALUE_REF = auto()
	RVALUE_REF = auto()


@dataclass(frozen=True)
class ParamSpec:
	type_name: str
	category: RefCategory = RefCategory.BY_VALUE
	is_const: bool = False

	def render(self) -> str:
		text = f"const {self.type_name}" if self.is_const else self.type_name
		if self.category is RefCategory.LVALUE_REF:
			return text + "&"
		if self.category is RefCategory.RVALUE_REF:
			return text + "&&"
		return text


@dataclass(frozen=True)
class MemberDecl:
	"""A data member or (member/free) function declaration."""

	name: str
	declaring_class: Optional[str]  # None for free functions
	kind: MemberKind = MemberKind.DATA
	params: Tuple[ParamSpec, ...] = ()
	result_type: Optional[str] = None
	is_constructor: bool = False
	explicit: bool = False
	is_static: bool = False
	is_virtual: bool = False
	span: Span = field(default=Span(), compare=False)

	@property
	def qualified_name(self) -> str:
		if self.declaring_class is None:
			return self.name
		return f"{self.declaring_class}::{self.name}"

	def signature(self) -> str:
		"""Human-readable signature used in verdict rendering and ordering."""
		if self.kind is MemberKind.DATA:
			return self.qualified_name
		params = ", ".join(p.render() for p in self.params)
		prefix = "explicit " if self.explicit else ""
		return f"{prefix}{self.qualified_name}({params})"


@dataclass(frozen=True)
class BaseRef:
	"""One entry of a base-specifier list. `target` is the base class name."""

	target: str
	virtual: bool = False
	access: Access = Access.PUBLIC
	span: Span = field(default=Span(), compare=False)


@dataclass(frozen=True)
class ClassDecl:
	name: str
	bases: Tuple[BaseRef, ...] = ()
	members: Tuple[MemberDecl, ...] = ()
	is_struct: bool = False
	span: Span = field(default=Span(), compare=False)

	def declares(self, member_name: str) -> Tuple[MemberDecl, ...]:
		return tuple(m for m in self.members if m.name == member_name and not m.is_constructor)

	def constructors(self) -> Tuple[MemberDecl, ...]:
		return tuple(m for m in self.members if m.is_constructor)


@dataclass(frozen=True)
class InheritanceEdge:
	derived: str
	base: BaseRef

	@property
	def virtual(self) -> bool:
		return self.base.virtual


def data_member(owner: str, name: str, type_name: str = "int", **kwargs) -> MemberDecl:
	return MemberDecl(name=name, declaring_class=owner, kind=MemberKind.DATA, result_type=type_name, **kwargs)


def member_function(owner: Optional[str], name: str, params: Iterable[ParamSpec] = (), **kwargs) -> MemberDecl:
	return MemberDecl(name=name, declaring_class=owner, kind=MemberKind.FUNCTION, params=tuple(params), **kwargs)


def constructor(owner: str, params: Iterable[ParamSpec] = (), *, explicit: bool = False, **kwargs) -> MemberDecl:
	return MemberDecl(
		name=owner,
		declaring_class=owner,
		kind=MemberKind.FUNCTION,
		params=tuple(params),
		result_type=owner,
		is_constructor=True,
		explicit=explicit,
		**kwargs,
	)


class ClassGraph:
	"""
	Arena of registered ClassDecls plus inheritance queries.

	`register` enforces base-before-derived order, so a graph built only through
	it cannot contain cycles; `register_all` accepts declarations in any order,
	sorts them, and reports cycles. `graph_of` still walks with a visiting-set
	so a cycle can never turn into an unbounded walk.
	"""

	def __init__(self) -> None:
		self._classes: Dict[str, ClassDecl] = {}

	def __contains__(self, name: object) -> bool:
		return name in self._classes

	def __iter__(self) -> Iterator[ClassDecl]:
		return iter(self._classes.values())

	def __len__(self) -> int:
		return len(self._classes)

	def register(self, decl: ClassDecl) -> ClassDecl:
		if decl.name in self._classes:
			raise DuplicateClass(f"class '{decl.name}' is already declared", span=decl.span)
		seen: set[str] = set()
		for base in decl.bases:
			if base.target not in self._classes:
				raise UnknownBase(
					f"base '{base.target}' of class '{decl.name}' is not declared",
					span=base.span if base.span.line is not None else decl.span,
				)
			if base.target in seen:
				raise DuplicateDirectBase(
					f"'{base.target}' is listed more than once as a direct base of '{decl.name}'",
					span=base.span if base.span.line is not None else decl.span,
				)
			seen.add(base.target)
		self._classes[decl.name] = decl
		logger.debug("registered class {} (bases: {})", decl.name, [b.target for b in decl.bases])
		return decl

	def register_all(self, decls: Iterable[ClassDecl]) -> List[ClassDecl]:
		"""
		Register a batch of declarations given in any order.

		Declarations are ordered bases-first with a depth-first walk; reaching a
		class that is still being visited reports the cycle. Names that are neither
		in the batch nor already registered raise UnknownBase.
		"""
		pending: Dict[str, ClassDecl] = {}
		for decl in decls:
			if decl.name in pending or decl.name in self._classes:
				raise DuplicateClass(f"class '{decl.name}' is already declared", span=decl.span)
			targets = [b.target for b in decl.bases]
			for target in targets:
				if targets.count(target) > 1:
					raise DuplicateDirectBase(
						f"'{target}' is listed more than once as a direct base of '{decl.name}'",
						span=decl.span,
					)
			pending[decl.name] = decl

		ordered: List[ClassDecl] = []
		done: set[str] = set()
		visiting: List[str] = []

		def visit(name: str) -> None:
			if name in done or name in self._classes:
				return
			if name in visiting:
				cycle = tuple(visiting[visiting.index(name):]) + (name,)
				raise CyclicInheritance(cycle, span=pending[name].span)
			visiting.append(name)
			decl = pending[name]
			for base in decl.bases:
				if base.target not in pending and base.target not in self._classes:
					raise UnknownBase(
						f"base '{base.target}' of class '{decl.name}' is not declared",
						span=decl.span,
					)
				visit(base.target)
			visiting.pop()
			done.add(name)
			ordered.append(decl)

		for name in pending:
			visit(name)
		return [self.register(decl) for decl in ordered]

	def get(self, name: str) -> ClassDecl:
		decl = self._classes.get(name)
		if decl is None:
			raise UnknownClass(f"class '{name}' is not declared")
		return decl

	def graph_of(self, name: str) -> Tuple[InheritanceEdge, ...]:
		"""
		Transitive closure of inheritance edges reachable from `name`, in pre-order.

		Each class is expanded the first time it is reached, so every
		(derived, base) edge appears once however many paths lead to it.
		"""
		self.get(name)
		edges: List[InheritanceEdge] = []
		done: set[str] = set()
		visiting: List[str] = []

		def walk(cls_name: str) -> None:
			if cls_name in visiting:
				cycle = tuple(visiting[visiting.index(cls_name):]) + (cls_name,)
				raise CyclicInheritance(cycle, span=self._classes[cls_name].span)
			if cls_name in done:
				return
			visiting.append(cls_name)
			for base in self.get(cls_name).bases:
				edges.append(InheritanceEdge(derived=cls_name, base=base))
				walk(base.target)
			visiting.pop()
			done.add(cls_name)

		walk(name)
		return tuple(edges)

	def ancestors_of(self, name: str) -> set[str]:
		return {edge.base.target for edge in self.graph_of(name)}

	def is_base_of(self, base: str, derived: str) -> bool:
		"""True when `base` is a proper ancestor of `derived` (either may be unregistered)."""
		if base not in self._classes or derived not in self._classes:
			return False
		return base in self.ancestors_of(derived)


__all__ = [
	"Access",
	"MemberKind",
	"RefCategory",
	"ParamSpec",
	"MemberDecl",
	"BaseRef",
	"ClassDecl",
	"InheritanceEdge",
	"ClassGraph",
	"data_member",
	"member_function",
	"constructor",
]
