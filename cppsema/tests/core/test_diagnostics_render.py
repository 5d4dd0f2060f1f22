# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Span/Diagnostic rendering and SemaError conversion."""

from lark import Token

from cppsema.core.diagnostics import Diagnostic
from cppsema.core.errors import CyclicInheritance, SemaError, UnknownBase, UnknownMember
from cppsema.core.span import Span


def test_span_label_omits_unknown_parts() -> None:
	assert Span().label() == "<input>"
	assert Span(file="a.cxs").label() == "a.cxs"
	assert Span(file="a.cxs", line=3, column=5).label() == "a.cxs:3:5"


def test_span_from_token_keeps_position_and_file() -> None:
	tok = Token("NAME", "Derived", line=2, column=7, end_line=2, end_column=14)
	span = Span.from_loc(tok, file="x.cxs")
	assert (span.file, span.line, span.column) == ("x.cxs", 2, 7)
	assert span.end_column == 14
	assert Span.from_loc(None, file="x.cxs") == Span(file="x.cxs")


def test_span_from_span_fills_missing_file() -> None:
	span = Span(line=4, column=1)
	filled = Span.from_loc(span, file="y.cxs")
	assert filled.file == "y.cxs"
	assert filled.line == 4
	assert Span.from_loc(filled, file="other.cxs") is filled


def test_diagnostic_render_and_json() -> None:
	diag = Diagnostic(
		message="'lookup D.j' is ambiguous",
		code="E-AMBIGUOUS",
		phase="lookup",
		span=Span(file="d.cxs", line=9, column=1),
		notes=["candidate: B.j", "candidate: C.j"],
	)
	assert diag.render() == (
		"d.cxs:9:1: error[E-AMBIGUOUS]: 'lookup D.j' is ambiguous\n"
		"  note: candidate: B.j\n"
		"  note: candidate: C.j"
	)
	payload = diag.to_json()
	assert payload["code"] == "E-AMBIGUOUS"
	assert payload["phase"] == "lookup"
	assert payload["line"] == 9
	assert payload["notes"] == ["candidate: B.j", "candidate: C.j"]


def test_sema_errors_convert_to_diagnostics() -> None:
	err = UnknownBase("base 'Z' of class 'D' is not declared", span=Span(file="f.cxs", line=2))
	assert isinstance(err, ValueError)
	diag = err.to_diagnostic()
	assert diag.code == "E-BASE-UNKNOWN"
	assert diag.phase == "graph"
	assert diag.span.line == 2

	lookup_diag = UnknownMember("no member named 'q' in 'D'").to_diagnostic()
	assert lookup_diag.phase == "lookup"
	assert lookup_diag.span == Span()

	custom = SemaError("boom", code="E-CUSTOM")
	assert custom.code == "E-CUSTOM"
	assert SemaError.code == "E-SEMA"


def test_cyclic_inheritance_message_lists_cycle() -> None:
	err = CyclicInheritance(("A", "B", "A"))
	assert err.cycle == ("A", "B", "A")
	assert str(err) == "cyclic inheritance: A -> B -> A"
	assert err.code == "E-CLASS-CYCLE"
