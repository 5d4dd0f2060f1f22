# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Checked-in fixtures modelled on classic inheritance/overloading puzzles."""

from pathlib import Path

import pytest

from cppsema.session import Session

FIXTURES = Path(__file__).with_name("fixtures")


def _outcomes(name: str) -> list[str]:
	session = Session.from_path(FIXTURES / name)
	assert session.diagnostics == []
	return [r.outcome for r in session.run()]


def test_virtual_diamond() -> None:
	layout, a, foo = _outcomes("virtual_diamond.cxs")
	assert layout == "4 sub-object(s)"
	assert a == "unique: ClassA.a"
	assert foo == "unique: ClassA.foo"


def test_multipath_override() -> None:
	showdata, qualified, show_data = _outcomes("multipath_override.cxs")
	assert showdata == "ambiguous: B.showdata, C.showdata"
	assert qualified == "unique: B.showdata"
	assert show_data == "unique: D::show_data()"


def test_base_member_clash() -> None:
	assert _outcomes("base_member_clash.cxs") == [
		"hidden: Derived.i (shadows Base1.i)",
		"ambiguous: Base1.j, Base2.j",
		"unique: Base1.j",
		"ambiguous: Base1.foo, Base2.foo",
		"unique: Base2.foo",
	]


def test_vexing_parse() -> None:
	outcomes = _outcomes("vexing_parse.cxs")
	assert outcomes[0] == "function declaration: B b(A (*)())"
	assert outcomes[1:5] == ["value construction"] * 4
	assert outcomes[5] == "unique: explicit B::B(A)"
	assert outcomes[6].startswith("no-match: explicit B::B(A)")


def test_reference_overloads() -> None:
	assert _outcomes("reference_overloads.cxs") == ["unique: foo(int&)", "unique: foo(int&&)"]


def test_complement_on_element() -> None:
	assert _outcomes("complement_on_element.cxs") == [
		"complement operator",
		"destructor call",
		"unique: cls::cls(int)",
	]


@pytest.mark.parametrize("path", sorted(FIXTURES.glob("*.cxs")), ids=lambda p: p.stem)
def test_fixtures_load_cleanly(path: Path) -> None:
	session = Session.from_path(path)
	results = session.run()
	assert results
	assert all(r.query.span.file == str(path) for r in results)
	assert not any(d.code and d.code.startswith("E-") and d.severity == "error" for r in results for d in r.diagnostics)
