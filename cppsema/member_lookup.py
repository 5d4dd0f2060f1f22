# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Unqualified and qualified member-name lookup over an object layout.

Lookup works on sub-objects, not on classes, so the answer depends on how the
layout resolver shared or duplicated bases:

1. Shadowing. A sub-object whose class declares the name stops the search
   below it. A declaration also disappears when it lives in a base
   sub-object of another surviving declaration (a virtual base reached both
   directly and through an overriding class is hidden on every path).
2. Breadth. If declarations survive in two or more distinct sub-objects the
   access is ambiguous. Signatures play no part: `foo(int)` in one base and
   `foo()` in another still collide by name.
3. Otherwise the surviving sub-object is the unique answer. It is reported as
   Hidden when some other declaration of the name was shadowed.

Static members found through several sub-objects of the same class denote one
entity and do not make the access ambiguous.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

from loguru import logger

from cppsema.class_graph import ClassGraph, MemberDecl
from cppsema.core.errors import AmbiguousBase, UnknownBase, UnknownClass, UnknownMember
from cppsema.layout import InstanceId, LayoutResolver, ObjectLayout
from cppsema.verdicts import Ambiguous, Hidden, ResolutionVerdict, ResolvedMember, Unique


class MemberLookup:
	"""Answer (class, member) queries; stateless apart from the layout cache it reads."""

	def __init__(self, layouts: LayoutResolver) -> None:
		self._layouts = layouts
		self._graph: ClassGraph = layouts.graph

	def lookup(self, class_name: str, member_name: str) -> ResolutionVerdict:
		layout = self._layouts.layout_of(class_name)
		found, hidden = self._search(layout, 0, member_name)
		if not found:
			raise UnknownMember(f"no member named '{member_name}' in '{class_name}'")
		winners = self._merge_static(layout, found, member_name)
		if len(winners) > 1:
			verdict: ResolutionVerdict = Ambiguous(candidates=tuple(winners))
		elif hidden:
			verdict = Hidden(winner=winners[0], hidden=tuple(hidden))
		else:
			verdict = Unique(target=winners[0])
		logger.debug("lookup {}.{} -> {}", class_name, member_name, verdict.render())
		return verdict

	def lookup_qualified(self, class_name: str, ancestor_name: str, member_name: str) -> ResolutionVerdict:
		"""
		Lookup of `obj.Ancestor::member`: the search starts at the Ancestor sub-object.

		Returns Unique or raises one of UnknownClass, UnknownBase, UnknownMember
		and AmbiguousBase; it never produces an Ambiguous verdict. AmbiguousBase
		covers a qualifier that does not denote exactly one sub-object and a
		qualifier whose own scope cannot name a single declaration (for example
		`Derived::j` when `j` reaches Derived from two unrelated bases).
		"""
		layout = self._layouts.layout_of(class_name)
		if ancestor_name not in self._graph:
			raise UnknownClass(f"class '{ancestor_name}' is not declared")
		if ancestor_name == class_name:
			start = 0
		else:
			pinned = layout.instances_of(ancestor_name)
			if not pinned:
				raise UnknownBase(f"'{ancestor_name}' is not a base of '{class_name}'")
			if len(pinned) > 1:
				paths = ", ".join("->".join(inst.path) for inst in pinned)
				raise AmbiguousBase(
					f"'{ancestor_name}' is an ambiguous base of '{class_name}' (sub-objects: {paths})"
				)
			start = pinned[0].instance_id
		found, _hidden = self._search(layout, start, member_name)
		if not found:
			raise UnknownMember(f"no member named '{member_name}' in '{ancestor_name}'")
		winners = self._merge_static(layout, found, member_name)
		if len(winners) > 1:
			raise AmbiguousBase(
				f"'{ancestor_name}::{member_name}' does not name a single member "
				f"(found in {', '.join(w.label() for w in winners)})"
			)
		return Unique(target=winners[0])

	def _search(
		self, layout: ObjectLayout, start: InstanceId, member_name: str
	) -> Tuple[List[InstanceId], List[ResolvedMember]]:
		"""
		Return (surviving declaring sub-objects, shadowed declarations) below `start`.

		Survivors come back in layout (pre-order) order so verdicts are stable.
		"""
		memo: Dict[InstanceId, FrozenSet[InstanceId]] = {}

		def declares(iid: InstanceId) -> bool:
			return bool(self._graph.get(layout.instances[iid].class_name).declares(member_name))

		def collect(iid: InstanceId) -> FrozenSet[InstanceId]:
			cached = memo.get(iid)
			if cached is not None:
				return cached
			if declares(iid):
				result = frozenset((iid,))
			else:
				merged: set[InstanceId] = set()
				for child in layout.base_links[iid]:
					merged |= collect(child)
				result = frozenset(merged)
			memo[iid] = result
			return result

		candidates = collect(start)
		subtrees = {iid: {inst.instance_id for inst in layout.subtree(iid)} for iid in candidates}
		survivors = sorted(
			iid
			for iid in candidates
			if not any(other != iid and iid in subtrees[other] for other in candidates)
		)
		shadowed = [
			self._resolved(layout, inst.instance_id, member_name)
			for inst in layout.subtree(start)
			if inst.instance_id not in survivors and declares(inst.instance_id)
		]
		shadowed.sort(key=lambda r: r.instance.instance_id)
		return survivors, shadowed

	def _merge_static(self, layout: ObjectLayout, found: List[InstanceId], member_name: str) -> List[ResolvedMember]:
		resolved = [self._resolved(layout, iid, member_name) for iid in found]
		if len(resolved) > 1:
			classes = {r.instance.class_name for r in resolved}
			if len(classes) == 1 and all(m.is_static for r in resolved for m in r.overloads):
				first = resolved[0]
				return [ResolvedMember(member=first.member, instance=first.instance, overloads=first.overloads, shared=True)]
		return resolved

	def _resolved(self, layout: ObjectLayout, iid: InstanceId, member_name: str) -> ResolvedMember:
		inst = layout.instances[iid]
		decls: Tuple[MemberDecl, ...] = self._graph.get(inst.class_name).declares(member_name)
		return ResolvedMember(member=decls[0], instance=inst, overloads=decls)


__all__ = ["MemberLookup"]
