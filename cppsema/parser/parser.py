# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixture parser: declarations plus queries, built on lark.

The grammar lives next to this module (`grammar.lark`). Parsing is two-step:
lark produces a parse tree, then the `_build_*` helpers walk it into the
engine's own declaration types (`ClassDecl`, `MemberDecl`) and query nodes.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from cppsema.class_graph import (
	Access,
	BaseRef,
	ClassDecl,
	MemberDecl,
	MemberKind,
	ParamSpec,
	RefCategory,
)
from cppsema.core.errors import SemaError
from cppsema.core.span import Span
from cppsema.disambiguator import (
	Delim,
	InitExpr,
	StatementShape,
	TildeShape,
	empty_init,
	group,
	name_init,
	type_call,
)
from cppsema.overload_resolver import Argument, ValueCategory

from .ast import (
	CallQuery,
	ClassifyQuery,
	ConstructQuery,
	Fixture,
	LayoutQuery,
	LookupQuery,
	Query,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

# Standalone statements (`B b(A());`, `~x`, `x.~T()`) for the `classify` command.
_STATEMENT_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="classify_target",
	propagate_positions=True,
	maybe_placeholders=False,
)


class FixtureParseError(SemaError):
	"""
	Syntax or shape error in a fixture.

	Raised for lark parse failures and for trees the grammar accepts but the
	builder rejects (e.g. a constructor whose name is not its class).
	"""

	code = "E-PARSE"
	phase = "parse"


_CATEGORY = {
	"LVALUE": ValueCategory.LVALUE,
	"XVALUE": ValueCategory.XVALUE,
	"PRVALUE": ValueCategory.PRVALUE,
}

_ACCESS = {
	"PUBLIC": Access.PUBLIC,
	"PROTECTED": Access.PROTECTED,
	"PRIVATE": Access.PRIVATE,
}


def parse_fixture(source: str, *, file: Optional[str] = None) -> Fixture:
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise _parse_error(err, file) from err
	return _build_fixture(tree, file)


def parse_statement(text: str) -> Union[StatementShape, TildeShape]:
	"""Parse one statement shape; a trailing `;` is optional."""
	source = text.strip()
	if source.endswith(";"):
		source = source[:-1]
	try:
		tree = _STATEMENT_PARSER.parse(source)
	except UnexpectedInput as err:
		raise _parse_error(err, None) from err
	if _name(tree) == "classify_target":
		tree = tree.children[0]
	return _build_classify_target(tree)


def _parse_error(err: UnexpectedInput, file: Optional[str]) -> FixtureParseError:
	lines = str(err).strip().splitlines()
	message = lines[0] if lines else "syntax error"
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	# lark reports end-of-input as line -1.
	if line is not None and line < 1:
		line = column = None
	span = Span(file=file, line=line, column=column)
	return FixtureParseError(message, span=span)


def _build_fixture(tree: Tree, file: Optional[str]) -> Fixture:
	fixture = Fixture(file=file)
	for child in tree.children:
		if not isinstance(child, Tree):
			continue
		kind = _name(child)
		if kind == "class_def":
			fixture.classes.append(_build_class(child, file))
		elif kind == "function_decl":
			fixture.functions.append(_build_function(child, None, file))
		else:
			fixture.queries.append(_build_query(child, file))
	return fixture


def _build_class(tree: Tree, file: Optional[str]) -> ClassDecl:
	keyword, name_tok = tree.children[0], tree.children[1]
	is_struct = isinstance(keyword, Token) and keyword.type == "STRUCT"
	class_name = name_tok.value
	# Default member and base access differ between `class` and `struct`.
	default_access = Access.PUBLIC if is_struct else Access.PRIVATE
	bases: Tuple[BaseRef, ...] = ()
	members: List[MemberDecl] = []
	for child in tree.children[2:]:
		if not isinstance(child, Tree):
			continue
		kind = _name(child)
		if kind == "base_clause":
			bases = tuple(_build_base(spec, default_access, file) for spec in child.children if isinstance(spec, Tree))
		elif kind == "member_decl":
			members.append(_build_member(child, class_name, file))
	return ClassDecl(
		name=class_name,
		bases=bases,
		members=tuple(members),
		is_struct=is_struct,
		span=_span(tree, file),
	)


def _build_base(tree: Tree, default_access: Access, file: Optional[str]) -> BaseRef:
	virtual = False
	access = default_access
	target = ""
	for tok in tree.children:
		if not isinstance(tok, Token):
			continue
		if tok.type == "VIRTUAL":
			virtual = True
		elif tok.type in _ACCESS:
			access = _ACCESS[tok.type]
		elif tok.type == "NAME":
			target = tok.value
	return BaseRef(target=target, virtual=virtual, access=access, span=_span(tree, file))


def _build_member(tree: Tree, class_name: str, file: Optional[str]) -> MemberDecl:
	specs = {tok.type for tok in tree.children if isinstance(tok, Token)}
	body = next(c for c in tree.children if isinstance(c, Tree))
	kind = _name(body)
	span = _span(tree, file)
	if kind == "ctor_body":
		name_tok = body.children[0]
		if name_tok.value != class_name:
			raise FixtureParseError(
				f"'{name_tok.value}' in class '{class_name}' has no return type and is not a constructor",
				span=Span.from_loc(name_tok, file=file),
			)
		return MemberDecl(
			name=class_name,
			declaring_class=class_name,
			kind=MemberKind.FUNCTION,
			params=_build_params(body.children[1:]),
			result_type=class_name,
			is_constructor=True,
			explicit="EXPLICIT" in specs,
			span=span,
		)
	if "EXPLICIT" in specs:
		raise FixtureParseError("only constructors can be declared 'explicit'", span=span)
	if kind == "data_body":
		type_param = _build_type_ref(body.children[0])
		return MemberDecl(
			name=body.children[1].value,
			declaring_class=class_name,
			kind=MemberKind.DATA,
			result_type=type_param.render(),
			is_static="STATIC" in specs,
			span=span,
		)
	decl = _build_function(body, class_name, file)
	return MemberDecl(
		name=decl.name,
		declaring_class=class_name,
		kind=MemberKind.FUNCTION,
		params=decl.params,
		result_type=decl.result_type,
		is_static="STATIC" in specs,
		is_virtual="VIRTUAL" in specs,
		span=span,
	)


def _build_function(tree: Tree, class_name: Optional[str], file: Optional[str]) -> MemberDecl:
	result = _build_type_ref(tree.children[0])
	name_tok = tree.children[1]
	return MemberDecl(
		name=name_tok.value,
		declaring_class=class_name,
		kind=MemberKind.FUNCTION,
		params=_build_params(tree.children[2:]),
		result_type=result.render(),
		span=_span(tree, file),
	)


def _build_params(nodes) -> Tuple[ParamSpec, ...]:
	for node in nodes:
		if isinstance(node, Tree) and _name(node) == "params":
			return tuple(_build_type_ref(param.children[0]) for param in node.children if isinstance(param, Tree))
	return ()


def _build_type_ref(tree: Tree) -> ParamSpec:
	is_const = False
	type_name = ""
	category = RefCategory.BY_VALUE
	for tok in tree.children:
		if tok.type == "CONST":
			is_const = True
		elif tok.type == "NAME":
			type_name = tok.value
		elif tok.type == "AMP":
			category = RefCategory.LVALUE_REF
		elif tok.type == "AMPAMP":
			category = RefCategory.RVALUE_REF
	return ParamSpec(type_name=type_name, category=category, is_const=is_const)


def _build_query(tree: Tree, file: Optional[str]) -> Query:
	kind = _name(tree)
	span = _span(tree, file)
	names = [tok.value for tok in tree.children if isinstance(tok, Token) and tok.type == "NAME"]
	if kind == "layout_query":
		return LayoutQuery(class_name=names[0], span=span)
	if kind == "lookup_query":
		return LookupQuery(class_name=names[0], member_name=names[1], span=span)
	if kind == "qualified_lookup_query":
		return LookupQuery(class_name=names[0], qualifier=names[1], member_name=names[2], span=span)
	if kind == "call_query":
		return CallQuery(callee=names[0], args=_build_args(tree), span=span)
	if kind == "member_call_query":
		return CallQuery(receiver=names[0], callee=names[1], args=_build_args(tree), span=span)
	if kind == "construct_query":
		return ConstructQuery(class_name=names[0], args=_build_args(tree), direct=True, span=span)
	if kind == "copy_init_query":
		arg = next(c for c in tree.children if isinstance(c, Tree))
		return ConstructQuery(class_name=names[0], args=(_build_arg(arg),), direct=False, span=span)
	if kind == "classify_query":
		target = next(c for c in tree.children if isinstance(c, Tree))
		return ClassifyQuery(shape=_build_classify_target(target), span=span)
	raise FixtureParseError(f"unsupported query node: {kind}", span=span)


def _build_args(tree: Tree) -> Tuple[Argument, ...]:
	for child in tree.children:
		if isinstance(child, Tree) and _name(child) == "args":
			return tuple(_build_arg(arg) for arg in child.children if isinstance(arg, Tree))
	return ()


def _build_arg(tree: Tree) -> Argument:
	if _name(tree) == "int_literal":
		return Argument(type_name="int", category=ValueCategory.PRVALUE)
	category_tok, name_tok = tree.children[0], tree.children[1]
	return Argument(type_name=name_tok.value, category=_CATEGORY[category_tok.type])


def _build_classify_target(tree: Tree) -> Union[StatementShape, TildeShape]:
	kind = _name(tree)
	if kind == "statement_shape":
		type_tok, decl_tok, outer = tree.children
		delim = Delim.BRACE if _name(outer) == "brace_outer" else Delim.PAREN
		inner = next((c for c in outer.children if isinstance(c, Tree)), None)
		init = _build_init(inner) if inner is not None else empty_init()
		return StatementShape(type_name=type_tok.value, declarator=decl_tok.value, init=init, outer=delim)
	if kind == "tilde_shape":
		return TildeShape(operand=_render_operand(tree.children[0]))
	if kind == "destructor_call":
		operand, type_tok = tree.children[0], tree.children[1]
		return TildeShape(operand=_render_operand(operand), member_access=True, type_name=type_tok.value)
	raise FixtureParseError(f"unsupported statement node: {kind}")


def _build_init(tree: Tree) -> InitExpr:
	kind = _name(tree)
	if kind == "name_init":
		return name_init(tree.children[0].value)
	if kind == "paren_call":
		return type_call(tree.children[0].value, Delim.PAREN)
	if kind == "brace_call":
		return type_call(tree.children[0].value, Delim.BRACE)
	return group(_build_init(tree.children[0]))


def _render_operand(tree: Tree) -> str:
	text = tree.children[0].value
	for index in tree.children[1:]:
		text += f"[{index.children[0].value}]"
	return text


def _span(tree: Tree, file: Optional[str]) -> Span:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return Span(file=file)
	return Span.from_loc(meta, file=file)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["parse_fixture", "parse_statement", "FixtureParseError"]
