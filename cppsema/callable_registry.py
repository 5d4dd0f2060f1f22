# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Callable registry: candidate sets for overload resolution.

This stores function declarations (free functions, member functions and
constructors). The registry itself does not perform overload resolution; it
only returns candidate sets bucketed by name or by class. The resolver in
`cppsema.overload_resolver` ranks the candidates and picks the winner.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Dict, List, Tuple

from cppsema.class_graph import ClassDecl, MemberDecl, MemberKind

# Opaque identifiers, assigned in registration order.
CallableId = int


class CallableKind(Enum):
	FREE_FUNCTION = auto()
	MEMBER_FUNCTION = auto()
	CONSTRUCTOR = auto()


def callable_kind(decl: MemberDecl) -> CallableKind:
	if decl.is_constructor:
		return CallableKind.CONSTRUCTOR
	if decl.declaring_class is None:
		return CallableKind.FREE_FUNCTION
	return CallableKind.MEMBER_FUNCTION


class CallableRegistry:
	"""
	Store callable declarations and provide candidate retrieval.

	Redeclaring an identical signature is allowed (a function may be declared
	many times) and returns the id of the first declaration.
	"""

	def __init__(self) -> None:
		self._free_by_name: Dict[str, List[MemberDecl]] = {}
		self._ctors_by_class: Dict[str, List[MemberDecl]] = {}
		# (class name, member name) -> overloads declared in that class
		self._methods: Dict[Tuple[str, str], List[MemberDecl]] = {}
		self._by_id: Dict[CallableId, MemberDecl] = {}
		self._ids: Dict[MemberDecl, CallableId] = {}

	def register_function(self, decl: MemberDecl) -> CallableId:
		if decl.kind is not MemberKind.FUNCTION:
			raise ValueError(f"'{decl.qualified_name}' is not a function")
		existing = self._ids.get(decl)
		if existing is not None:
			return existing
		callable_id = len(self._by_id) + 1
		self._by_id[callable_id] = decl
		self._ids[decl] = callable_id
		kind = callable_kind(decl)
		if kind is CallableKind.CONSTRUCTOR:
			self._ctors_by_class.setdefault(decl.declaring_class or decl.name, []).append(decl)
		elif kind is CallableKind.MEMBER_FUNCTION:
			self._methods.setdefault((decl.declaring_class or "", decl.name), []).append(decl)
		else:
			self._free_by_name.setdefault(decl.name, []).append(decl)
		return callable_id

	def register_class_members(self, decl: ClassDecl) -> List[CallableId]:
		return [self.register_function(m) for m in decl.members if m.kind is MemberKind.FUNCTION]

	def get_function_candidates(self, name: str) -> List[MemberDecl]:
		return list(self._free_by_name.get(name, []))

	def get_constructor_candidates(self, class_name: str) -> List[MemberDecl]:
		return list(self._ctors_by_class.get(class_name, []))

	def get_method_candidates(self, class_name: str, name: str) -> List[MemberDecl]:
		return list(self._methods.get((class_name, name), []))

	def get_by_id(self, callable_id: CallableId) -> MemberDecl:
		return self._by_id[callable_id]

	def id_of(self, decl: MemberDecl) -> CallableId:
		return self._ids[decl]


__all__ = ["CallableRegistry", "CallableKind", "CallableId", "callable_kind"]
