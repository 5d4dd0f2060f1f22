# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Fixture parser: declarations, queries and error reporting."""

from pathlib import Path

import pytest

from cppsema.class_graph import Access, MemberKind, RefCategory
from cppsema.disambiguator import Delim, InitKind, StatementShape, TildeShape
from cppsema.overload_resolver import ValueCategory
from cppsema.parser import (
	CallQuery,
	ClassifyQuery,
	ConstructQuery,
	FixtureParseError,
	LayoutQuery,
	LookupQuery,
	parse_fixture,
	parse_fixture_file,
	parse_statement,
)

DECLS = """\
// base of the hierarchy
class A { public: int x; void foo(); };
struct B : virtual A {
	int y;
	static int count;
	B(const A& a);
	explicit B(int v);
	virtual void put(int&& v, const B&);
};
class C : public B, private virtual A { };
int f(int& x);
"""


def test_parses_classes_and_bases() -> None:
	fixture = parse_fixture(DECLS, file="decls.cxs")
	assert [c.name for c in fixture.classes] == ["A", "B", "C"]
	a, b, c = fixture.classes
	assert not a.is_struct and b.is_struct
	assert a.span.line == 2
	assert a.span.file == "decls.cxs"
	# struct bases default to public, class bases to private.
	assert b.bases[0].target == "A" and b.bases[0].virtual
	assert b.bases[0].access is Access.PUBLIC
	assert [(r.target, r.virtual, r.access) for r in c.bases] == [
		("B", False, Access.PUBLIC),
		("A", True, Access.PRIVATE),
	]


def test_parses_members_and_flags() -> None:
	fixture = parse_fixture(DECLS)
	a, b, _c = fixture.classes
	assert [(m.name, m.kind) for m in a.members] == [("x", MemberKind.DATA), ("foo", MemberKind.FUNCTION)]
	assert a.members[0].result_type == "int"
	count = b.declares("count")[0]
	assert count.is_static
	ctors = b.constructors()
	assert [c.explicit for c in ctors] == [False, True]
	assert ctors[0].params[0].category is RefCategory.LVALUE_REF
	assert ctors[0].params[0].is_const
	assert ctors[0].signature() == "B::B(const A&)"
	put = b.declares("put")[0]
	assert put.is_virtual
	assert put.signature() == "B::put(int&&, const B&)"
	assert put.span.line == 8


def test_parses_free_functions() -> None:
	fixture = parse_fixture(DECLS)
	(f,) = fixture.functions
	assert f.declaring_class is None
	assert f.result_type == "int"
	assert f.signature() == "f(int&)"


def test_parses_queries() -> None:
	source = """\
layout C;
lookup C.x;
lookup C::A::x;
call f(lvalue int, 2);
call C.put(xvalue int, lvalue B);
construct B(prvalue A);
construct B = prvalue A;
classify B b(A());
classify ~clsArray[i];
classify obj.~T();
"""
	queries = parse_fixture(source).queries
	assert queries[0] == LayoutQuery("C")
	assert queries[1] == LookupQuery("C", "x")
	assert queries[2] == LookupQuery("C", "x", qualifier="A")
	call = queries[3]
	assert isinstance(call, CallQuery) and call.receiver is None
	assert [(a.type_name, a.category) for a in call.args] == [
		("int", ValueCategory.LVALUE),
		("int", ValueCategory.PRVALUE),
	]
	member_call = queries[4]
	assert member_call.receiver == "C" and member_call.callee == "put"
	assert member_call.args[0].category is ValueCategory.XVALUE
	assert queries[5] == ConstructQuery("B", queries[5].args, direct=True)
	assert queries[6].direct is False
	assert queries[6].render() == "construct B = prvalue A"
	shape = queries[7].shape
	assert isinstance(queries[7], ClassifyQuery)
	assert isinstance(shape, StatementShape)
	assert shape.init.kind is InitKind.TYPE_CALL and shape.outer is Delim.PAREN
	assert queries[8].shape == TildeShape("clsArray[i]")
	assert queries[9].shape == TildeShape("obj", member_access=True, type_name="T")
	assert [q.span.line for q in queries] == list(range(1, 11))


def test_parse_statement_shapes() -> None:
	assert parse_statement("B b(A());").render() == "B b(A());"
	assert parse_statement("B b((A()))").init.kind is InitKind.GROUP
	braced = parse_statement("B b{A{}};")
	assert braced.outer is Delim.BRACE and braced.init.delim is Delim.BRACE
	assert parse_statement("B b();").init.kind is InitKind.EMPTY
	assert parse_statement("B b(a)").init.kind is InitKind.NAME
	assert parse_statement("~x") == TildeShape("x")


def test_syntax_error_carries_location() -> None:
	with pytest.raises(FixtureParseError) as excinfo:
		parse_fixture("class A {\n\tint x\n};\n", file="bad.cxs")
	err = excinfo.value
	assert err.code == "E-PARSE"
	assert err.span.file == "bad.cxs"
	assert err.span.line == 3
	assert err.to_diagnostic().phase == "parse"


def test_constructor_name_must_match_class() -> None:
	with pytest.raises(FixtureParseError) as excinfo:
		parse_fixture("class A { Other(int v); };")
	assert "not a constructor" in str(excinfo.value)


def test_explicit_only_on_constructors() -> None:
	with pytest.raises(FixtureParseError):
		parse_fixture("class A { explicit void f(); };")


def test_statement_syntax_error() -> None:
	with pytest.raises(FixtureParseError):
		parse_statement("B b(A(;")


def test_parse_fixture_file_sets_file(tmp_path: Path) -> None:
	path = tmp_path / "one.cxs"
	path.write_text("class A {};\nlayout A;\n")
	fixture = parse_fixture_file(path)
	assert fixture.file == str(path)
	assert fixture.queries[0].span.file == str(path)
