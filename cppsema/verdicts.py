# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolution verdicts shared by member lookup and overload resolution.

Verdicts are plain frozen values produced per query and owned by the caller.
Ambiguity and no-match are outcomes, not exceptions: the engine never picks a
"closest" answer on the caller's behalf.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple, Union

from cppsema.class_graph import MemberDecl
from cppsema.layout import LayoutInstance


class VerdictKind(Enum):
	UNIQUE = "unique"
	AMBIGUOUS = "ambiguous"
	HIDDEN = "hidden"
	NO_MATCH = "no-match"


@dataclass(frozen=True)
class ResolvedMember:
	"""A member declaration as seen through one sub-object of the queried class."""

	member: MemberDecl
	instance: LayoutInstance
	# Every same-named declaration of the declaring class (an overload set for functions).
	overloads: Tuple[MemberDecl, ...] = ()
	# Set when several sub-objects of one class name the same static member.
	shared: bool = False

	def label(self) -> str:
		return f"{self.instance.class_name}.{self.member.name}"

	def detailed_label(self) -> str:
		return f"{self.member.signature()} in {self.instance.label()}"


Target = Union[ResolvedMember, MemberDecl]


def target_label(target: Target) -> str:
	if isinstance(target, ResolvedMember):
		return target.label()
	return target.signature()


@dataclass(frozen=True)
class Rejection:
	"""Why an overload candidate was not viable."""

	candidate: MemberDecl
	reason: str

	def render(self) -> str:
		return f"{self.candidate.signature()}: {self.reason}"


class ResolutionVerdict:
	kind: ClassVar[VerdictKind]

	@property
	def is_unique(self) -> bool:
		return self.kind is VerdictKind.UNIQUE

	def render(self) -> str:
		raise NotImplementedError


@dataclass(frozen=True)
class Unique(ResolutionVerdict):
	kind: ClassVar[VerdictKind] = VerdictKind.UNIQUE
	target: Target

	def render(self) -> str:
		return f"unique: {target_label(self.target)}"


@dataclass(frozen=True)
class Ambiguous(ResolutionVerdict):
	kind: ClassVar[VerdictKind] = VerdictKind.AMBIGUOUS
	candidates: Tuple[Target, ...]

	@property
	def target(self) -> None:
		return None

	def labels(self) -> Tuple[str, ...]:
		return tuple(target_label(c) for c in self.candidates)

	def render(self) -> str:
		return f"ambiguous: {', '.join(self.labels())}"


@dataclass(frozen=True)
class Hidden(ResolutionVerdict):
	"""`winner` shadows every declaration in `hidden`."""

	kind: ClassVar[VerdictKind] = VerdictKind.HIDDEN
	winner: Target
	hidden: Tuple[Target, ...] = ()

	@property
	def target(self) -> Target:
		return self.winner

	def render(self) -> str:
		shadowed = ", ".join(target_label(h) for h in self.hidden)
		return f"hidden: {target_label(self.winner)} (shadows {shadowed})"


@dataclass(frozen=True)
class NoMatch(ResolutionVerdict):
	kind: ClassVar[VerdictKind] = VerdictKind.NO_MATCH
	rejected: Tuple[Rejection, ...] = ()

	@property
	def target(self) -> None:
		return None

	def render(self) -> str:
		if not self.rejected:
			return "no-match: no candidates"
		return "no-match: " + "; ".join(r.render() for r in self.rejected)


__all__ = [
	"VerdictKind",
	"ResolvedMember",
	"Rejection",
	"ResolutionVerdict",
	"Unique",
	"Ambiguous",
	"Hidden",
	"NoMatch",
	"target_label",
]
