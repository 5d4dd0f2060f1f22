# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Overload resolution for function and constructor calls.

Rules:
- Candidates whose arity differs from the argument count are not viable.
- Each parameter/argument pair gets a rank (lower is better):
    rvalue-ref param  <- xvalue/prvalue arg   0
    lvalue-ref param  <- lvalue arg           0
    rvalue-ref param  <- lvalue arg           not viable
    lvalue-ref param  <- xvalue/prvalue arg   1 if const, else not viable
    by-value param    <- convertible arg      2
- A candidate's score is the sum of its ranks; any non-viable pair removes the
  candidate outright.
- The strictly lowest score wins. A tie is ambiguous; no survivor is no-match.
- `explicit` candidates are only considered for direct initialization.

Verdicts do not depend on candidate order: ties and rejections are reported in
signature order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from cppsema.callable_registry import CallableRegistry
from cppsema.class_graph import MemberDecl, ParamSpec, RefCategory
from cppsema.conversions import ConversionTable
from cppsema.core.span import Span
from cppsema.verdicts import Ambiguous, NoMatch, Rejection, ResolutionVerdict, Unique


class ValueCategory(Enum):
	LVALUE = auto()  # names a persistent object
	XVALUE = auto()  # expiring object (std::move result)
	PRVALUE = auto()  # temporary

	@property
	def is_rvalue(self) -> bool:
		return self is not ValueCategory.LVALUE


@dataclass(frozen=True)
class Argument:
	type_name: str
	category: ValueCategory = ValueCategory.PRVALUE

	def render(self) -> str:
		return f"{self.category.name.lower()} {self.type_name}"


@dataclass(frozen=True)
class CallSite:
	"""
	A call to resolve. `direct` is False for copy-initialization contexts
	(`B b = a;`, passing/returning by value), where explicit constructors are
	not candidates.
	"""

	callee: str
	args: Tuple[Argument, ...] = ()
	direct: bool = True
	span: Span = field(default=Span(), compare=False)

	def render(self) -> str:
		args = ", ".join(a.render() for a in self.args)
		return f"{self.callee}({args})" if self.direct else f"{self.callee} = {args}"


class BindingError(Exception):
	"""Internal: a parameter cannot bind its argument. Carries the reason."""


RANK_EXACT_REF = 0
RANK_CONST_REF_TEMPORARY = 1
RANK_BY_VALUE = 2


def rank_binding(param: ParamSpec, arg: Argument, conversions: ConversionTable) -> int:
	"""Rank one parameter/argument pair; raise BindingError when it cannot bind."""
	if param.category is RefCategory.RVALUE_REF:
		if not arg.category.is_rvalue:
			raise BindingError(f"rvalue reference '{param.render()}' cannot bind an lvalue of type '{arg.type_name}'")
		if not conversions.binds_reference(arg.type_name, param.type_name):
			raise BindingError(f"cannot bind '{param.render()}' to a value of type '{arg.type_name}'")
		return RANK_EXACT_REF
	if param.category is RefCategory.LVALUE_REF:
		if arg.category.is_rvalue:
			if not param.is_const:
				raise BindingError(f"non-const lvalue reference '{param.render()}' cannot bind a temporary")
			if not conversions.is_convertible(arg.type_name, param.type_name):
				raise BindingError(f"no conversion from '{arg.type_name}' to '{param.render()}'")
			return RANK_CONST_REF_TEMPORARY
		if conversions.binds_reference(arg.type_name, param.type_name):
			return RANK_EXACT_REF
		if param.is_const and conversions.is_convertible(arg.type_name, param.type_name):
			return RANK_CONST_REF_TEMPORARY
		raise BindingError(f"cannot bind '{param.render()}' to an lvalue of type '{arg.type_name}'")
	if not conversions.is_convertible(arg.type_name, param.type_name):
		raise BindingError(f"no conversion from '{arg.type_name}' to '{param.type_name}'")
	return RANK_BY_VALUE


def _order_key(decl: MemberDecl) -> Tuple[str, str, bool, bool]:
	return (decl.signature(), decl.result_type or "", decl.is_static, decl.is_virtual)


def score_candidate(decl: MemberDecl, call_site: CallSite, conversions: ConversionTable) -> int:
	if decl.explicit and not call_site.direct:
		raise BindingError("explicit constructor is not a candidate for copy-initialization")
	if len(decl.params) != len(call_site.args):
		raise BindingError(f"expects {len(decl.params)} argument(s), {len(call_site.args)} given")
	return sum(rank_binding(p, a, conversions) for p, a in zip(decl.params, call_site.args))


def resolve(
	candidates: Iterable[MemberDecl],
	call_site: CallSite,
	*,
	conversions: Optional[ConversionTable] = None,
) -> ResolutionVerdict:
	conversions = conversions or ConversionTable()
	unique_decls = sorted(dict.fromkeys(candidates), key=_order_key)
	scored: List[Tuple[int, MemberDecl]] = []
	rejected: List[Rejection] = []
	for decl in unique_decls:
		try:
			scored.append((score_candidate(decl, call_site, conversions), decl))
		except BindingError as err:
			rejected.append(Rejection(candidate=decl, reason=str(err)))
	if not scored:
		verdict: ResolutionVerdict = NoMatch(rejected=tuple(rejected))
	else:
		best = min(score for score, _ in scored)
		winners = tuple(decl for score, decl in scored if score == best)
		verdict = Unique(target=winners[0]) if len(winners) == 1 else Ambiguous(candidates=winners)
	logger.debug("resolve {} -> {}", call_site.render(), verdict.render())
	return verdict


def resolve_call(
	registry: CallableRegistry,
	call_site: CallSite,
	*,
	conversions: Optional[ConversionTable] = None,
) -> ResolutionVerdict:
	"""Resolve a call to a free function named `call_site.callee`."""
	return resolve(registry.get_function_candidates(call_site.callee), call_site, conversions=conversions)


def resolve_constructor(
	registry: CallableRegistry,
	class_name: str,
	call_site: CallSite,
	*,
	conversions: Optional[ConversionTable] = None,
) -> ResolutionVerdict:
	"""Resolve construction of `class_name`; explicit constructors need `call_site.direct`."""
	return resolve(registry.get_constructor_candidates(class_name), call_site, conversions=conversions)


__all__ = [
	"ValueCategory",
	"Argument",
	"CallSite",
	"BindingError",
	"rank_binding",
	"score_candidate",
	"resolve",
	"resolve_call",
	"resolve_constructor",
]
