"""
Fixture front end: parses `.cxs` declaration fixtures into engine declarations
and queries. The grammar is in `grammar.lark`; tree building in `parser.py`.
"""

from __future__ import annotations

from pathlib import Path

from . import ast as parser_ast
from .parser import FixtureParseError, parse_fixture, parse_statement
from .ast import (
	CallQuery,
	ClassifyQuery,
	ConstructQuery,
	Fixture,
	LayoutQuery,
	LookupQuery,
	Query,
)


def parse_fixture_file(path: Path) -> Fixture:
	"""Read and parse one fixture file; spans carry the path as given."""
	return parse_fixture(path.read_text(encoding="utf-8"), file=str(path))


__all__ = [
	"parser_ast",
	"parse_fixture",
	"parse_fixture_file",
	"parse_statement",
	"FixtureParseError",
	"Fixture",
	"Query",
	"LayoutQuery",
	"LookupQuery",
	"CallQuery",
	"ConstructQuery",
	"ClassifyQuery",
]
