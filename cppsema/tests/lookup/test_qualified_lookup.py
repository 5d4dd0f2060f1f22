# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Qualified lookup (`obj.Base::member`) never yields an ambiguous verdict."""

import pytest

from cppsema.class_graph import BaseRef, ClassDecl, ClassGraph, data_member, member_function, ParamSpec
from cppsema.core.errors import AmbiguousBase, UnknownBase, UnknownClass, UnknownMember
from cppsema.layout import LayoutResolver
from cppsema.member_lookup import MemberLookup
from cppsema.verdicts import Ambiguous, Unique


def _lookup(*decls: ClassDecl) -> MemberLookup:
	graph = ClassGraph()
	graph.register_all(decls)
	return MemberLookup(LayoutResolver(graph))


def _two_bases() -> MemberLookup:
	return _lookup(
		ClassDecl("Base1", members=(data_member("Base1", "i"), data_member("Base1", "j"), member_function("Base1", "foo", [ParamSpec("int")]))),
		ClassDecl("Base2", members=(data_member("Base2", "j"), member_function("Base2", "foo"))),
		ClassDecl(
			"Derived",
			bases=(BaseRef("Base1", virtual=True), BaseRef("Base2", virtual=True)),
			members=(data_member("Derived", "i"),),
		),
	)


def test_qualifier_resolves_ambiguous_name() -> None:
	lookup = _two_bases()
	assert isinstance(lookup.lookup("Derived", "j"), Ambiguous)
	verdict = lookup.lookup_qualified("Derived", "Base1", "j")
	assert isinstance(verdict, Unique)
	assert verdict.target.label() == "Base1.j"
	foo = lookup.lookup_qualified("Derived", "Base2", "foo")
	assert isinstance(foo, Unique)
	assert foo.target.member.params == ()


def test_qualifier_reaches_hidden_declaration() -> None:
	lookup = _two_bases()
	verdict = lookup.lookup_qualified("Derived", "Base1", "i")
	assert verdict.target.label() == "Base1.i"
	# Qualifying with the class itself reports the winner, never Hidden.
	own = lookup.lookup_qualified("Derived", "Derived", "i")
	assert isinstance(own, Unique)
	assert own.target.label() == "Derived.i"


def test_qualified_search_continues_into_bases() -> None:
	lookup = _lookup(
		ClassDecl("A", members=(data_member("A", "x"),)),
		ClassDecl("B", bases=(BaseRef("A"),)),
		ClassDecl("C", bases=(BaseRef("A"),)),
		ClassDecl("D", bases=(BaseRef("B"), BaseRef("C"))),
	)
	via_b = lookup.lookup_qualified("D", "B", "x")
	via_c = lookup.lookup_qualified("D", "C", "x")
	assert via_b.target.instance.path == ("D", "B", "A")
	assert via_c.target.instance.path == ("D", "C", "A")


def test_repeated_base_qualifier_raises() -> None:
	lookup = _lookup(
		ClassDecl("A", members=(data_member("A", "x"),)),
		ClassDecl("B", bases=(BaseRef("A"),)),
		ClassDecl("C", bases=(BaseRef("A"),)),
		ClassDecl("D", bases=(BaseRef("B"), BaseRef("C"))),
	)
	with pytest.raises(AmbiguousBase) as excinfo:
		lookup.lookup_qualified("D", "A", "x")
	assert "D->B->A" in str(excinfo.value)


def test_ambiguous_scope_raises_instead_of_ambiguous_verdict() -> None:
	lookup = _two_bases()
	with pytest.raises(AmbiguousBase):
		lookup.lookup_qualified("Derived", "Derived", "j")


def test_qualifier_errors() -> None:
	lookup = _lookup(
		ClassDecl("Base2", members=(data_member("Base2", "j"),)),
		ClassDecl("Derived", bases=(BaseRef("Base2"),)),
		ClassDecl("Other"),
	)
	with pytest.raises(UnknownBase):
		lookup.lookup_qualified("Derived", "Other", "j")
	with pytest.raises(UnknownClass):
		lookup.lookup_qualified("Derived", "Missing", "j")
	with pytest.raises(UnknownClass):
		lookup.lookup_qualified("Missing", "Base1", "j")
	with pytest.raises(UnknownMember):
		lookup.lookup_qualified("Derived", "Base2", "i")


def test_qualified_lookup_is_never_ambiguous() -> None:
	lookup = _two_bases()
	for qualifier in ("Base1", "Base2", "Derived"):
		for member in ("i", "j", "foo"):
			try:
				verdict = lookup.lookup_qualified("Derived", qualifier, member)
			except (AmbiguousBase, UnknownMember):
				continue
			assert isinstance(verdict, Unique)
