# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Query nodes and the parsed fixture container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from cppsema.class_graph import ClassDecl, MemberDecl
from cppsema.core.span import Span
from cppsema.disambiguator import StatementShape, TildeShape
from cppsema.overload_resolver import Argument


@dataclass(frozen=True)
class LayoutQuery:
	class_name: str
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		return f"layout {self.class_name}"


@dataclass(frozen=True)
class LookupQuery:
	class_name: str
	member_name: str
	qualifier: Optional[str] = None  # `lookup D::B::m` pins the B sub-object
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		if self.qualifier is not None:
			return f"lookup {self.class_name}::{self.qualifier}::{self.member_name}"
		return f"lookup {self.class_name}.{self.member_name}"


@dataclass(frozen=True)
class CallQuery:
	callee: str
	args: Tuple[Argument, ...] = ()
	receiver: Optional[str] = None  # class whose member function is called
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		args = ", ".join(a.render() for a in self.args)
		target = f"{self.receiver}.{self.callee}" if self.receiver else self.callee
		return f"call {target}({args})"


@dataclass(frozen=True)
class ConstructQuery:
	class_name: str
	args: Tuple[Argument, ...] = ()
	direct: bool = True
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		args = ", ".join(a.render() for a in self.args)
		if self.direct:
			return f"construct {self.class_name}({args})"
		return f"construct {self.class_name} = {args}"


@dataclass(frozen=True)
class ClassifyQuery:
	shape: Union[StatementShape, TildeShape]
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		return f"classify {self.shape.render()}"


Query = Union[LayoutQuery, LookupQuery, CallQuery, ConstructQuery, ClassifyQuery]


@dataclass
class Fixture:
	classes: List[ClassDecl] = field(default_factory=list)
	functions: List[MemberDecl] = field(default_factory=list)
	queries: List[Query] = field(default_factory=list)
	file: Optional[str] = None
