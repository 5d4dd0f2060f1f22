# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixture session: wires the engine components together for one fixture.

A session owns one fact base (class graph, layout cache, callable registry,
conversion table). `load` registers the fixture's declarations; `run`
answers its queries in order. Structural errors become Diagnostics and abort
only the registration or query that raised them. Non-unique verdicts are
reported as diagnostics too:

  E-AMBIGUOUS     lookup or call is ambiguous
  E-NO-MATCH      no viable overload
  N-HIDDEN        a declaration shadows base declarations (note)
  W-VEXING-PARSE  a `Type name(...)` statement declares a function

Ambiguous/no-match are reported as warnings unless their verdict kind is in
`EngineConfig.fail_on`, in which case they are errors and fail the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from cppsema.callable_registry import CallableRegistry
from cppsema.class_graph import ClassDecl, ClassGraph, MemberDecl, MemberKind
from cppsema.config import EngineConfig
from cppsema.conversions import ConversionTable
from cppsema.core.diagnostics import Diagnostic
from cppsema.core.errors import SemaError
from cppsema.disambiguator import (
	Classification,
	StatementShape,
	TildeReading,
	classify,
	classify_tilde,
	suggest_disambiguation,
)
from cppsema.layout import LayoutResolver, ObjectLayout
from cppsema.member_lookup import MemberLookup
from cppsema.overload_resolver import CallSite, resolve, resolve_call, resolve_constructor
from cppsema.parser import (
	CallQuery,
	ClassifyQuery,
	ConstructQuery,
	Fixture,
	LayoutQuery,
	LookupQuery,
	Query,
	parse_fixture,
)
from cppsema.verdicts import (
	Ambiguous,
	Hidden,
	NoMatch,
	Rejection,
	ResolutionVerdict,
	ResolvedMember,
	target_label,
)


@dataclass
class QueryResult:
	"""Outcome of one query: a one-line summary plus the engine value behind it."""

	query: Query
	outcome: str
	details: List[str] = field(default_factory=list)
	verdict: Optional[ResolutionVerdict] = None
	layout: Optional[ObjectLayout] = None
	classification: Optional[Classification] = None
	tilde: Optional[TildeReading] = None
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not any(d.severity == "error" for d in self.diagnostics)

	def render(self) -> str:
		lines = [f"{self.query.span.label()}: {self.query.render()} -> {self.outcome}"]
		lines.extend(f"  {d}" for d in self.details)
		return "\n".join(lines)

	def to_json(self) -> Dict[str, Any]:
		return {
			"query": self.query.render(),
			"line": self.query.span.line,
			"outcome": self.outcome,
			"kind": self.verdict.kind.value if self.verdict is not None else None,
			"details": list(self.details),
		}


class Session:
	def __init__(self, config: Optional[EngineConfig] = None) -> None:
		self.config = config or EngineConfig()
		self.graph = ClassGraph()
		self.layouts = LayoutResolver(self.graph)
		self.lookup = MemberLookup(self.layouts)
		self.registry = CallableRegistry()
		self.conversions = ConversionTable(self.layouts)
		for src, dst in self.config.standard_conversions:
			self.conversions.add(src, dst)
		self.diagnostics: List[Diagnostic] = []
		self.queries: List[Query] = []
		self.results: List[QueryResult] = []

	@classmethod
	def from_source(
		cls,
		source: str,
		*,
		file: Optional[str] = None,
		config: Optional[EngineConfig] = None,
	) -> "Session":
		"""Parse and load a fixture. Syntax errors raise FixtureParseError."""
		session = cls(config)
		session.load(parse_fixture(source, file=file))
		return session

	@classmethod
	def from_path(cls, path: Path, *, config: Optional[EngineConfig] = None) -> "Session":
		return cls.from_source(path.read_text(encoding="utf-8"), file=str(path), config=config)

	@property
	def exit_code(self) -> int:
		diags = self.diagnostics + [d for r in self.results for d in r.diagnostics]
		return 1 if any(d.severity == "error" for d in diags) else 0

	def load(self, fixture: Fixture) -> None:
		for decl in self._register_classes(fixture.classes):
			self.registry.register_class_members(decl)
		for fn in fixture.functions:
			self.registry.register_function(fn)
		self.queries.extend(fixture.queries)
		logger.debug(
			"loaded {} class(es), {} function(s), {} quer(ies) from {}",
			len(self.graph),
			len(fixture.functions),
			len(fixture.queries),
			fixture.file or "<input>",
		)

	def _register_classes(self, decls: List[ClassDecl]) -> List[ClassDecl]:
		"""
		Register classes base-first, keeping every class that can be registered.

		Each pass registers the classes whose bases are all known. What is left
		when a pass makes no progress depends on a missing or cyclic class;
		`register_all` on that remainder reports the reason.
		"""
		registered: List[ClassDecl] = []
		pending = list(decls)
		while pending:
			waiting: List[ClassDecl] = []
			for decl in pending:
				if any(base.target not in self.graph for base in decl.bases):
					waiting.append(decl)
					continue
				try:
					registered.append(self.graph.register(decl))
				except SemaError as err:
					self.diagnostics.append(err.to_diagnostic())
			if len(waiting) == len(pending):
				break
			pending = waiting
		else:
			return registered
		try:
			registered.extend(self.graph.register_all(pending))
		except SemaError as err:
			self.diagnostics.append(err.to_diagnostic())
		return registered

	def run(self) -> List[QueryResult]:
		return [self.run_query(q) for q in self.queries]

	def run_query(self, query: Query) -> QueryResult:
		try:
			result = self._dispatch(query)
		except SemaError as err:
			diag = err.to_diagnostic()
			if diag.span.line is None:
				diag.span = query.span
			result = QueryResult(query=query, outcome=f"error: {err.message}", diagnostics=[diag])
		self.results.append(result)
		return result

	def _dispatch(self, query: Query) -> QueryResult:
		if isinstance(query, LayoutQuery):
			return self._run_layout(query)
		if isinstance(query, LookupQuery):
			return self._run_lookup(query)
		if isinstance(query, CallQuery):
			return self._run_call(query)
		if isinstance(query, ConstructQuery):
			return self._run_construct(query)
		if isinstance(query, ClassifyQuery):
			return self._run_classify(query)
		raise TypeError(f"unsupported query type: {type(query).__name__}")

	def _run_layout(self, query: LayoutQuery) -> QueryResult:
		layout = self.layouts.layout_of(query.class_name)
		return QueryResult(
			query=query,
			outcome=f"{len(layout)} sub-object(s)",
			details=[inst.label() for inst in layout],
			layout=layout,
		)

	def _run_lookup(self, query: LookupQuery) -> QueryResult:
		if query.qualifier is not None:
			verdict = self.lookup.lookup_qualified(query.class_name, query.qualifier, query.member_name)
		else:
			verdict = self.lookup.lookup(query.class_name, query.member_name)
		return self._verdict_result(query, verdict, "lookup")

	def _run_call(self, query: CallQuery) -> QueryResult:
		if query.receiver is None:
			site = CallSite(callee=query.callee, args=query.args, span=query.span)
			verdict = resolve_call(self.registry, site, conversions=self.conversions)
			return self._verdict_result(query, verdict, "overload")
		# Name lookup first; overload resolution only runs on an unambiguous name.
		found = self.lookup.lookup(query.receiver, query.callee)
		if isinstance(found, Ambiguous):
			return self._verdict_result(query, found, "lookup")
		member = found.target
		assert isinstance(member, ResolvedMember)
		site = CallSite(callee=f"{query.receiver}.{query.callee}", args=query.args, span=query.span)
		if member.member.kind is MemberKind.DATA:
			reason = f"'{member.member.qualified_name}' is a data member, not a function"
			verdict: ResolutionVerdict = NoMatch(rejected=(Rejection(candidate=member.member, reason=reason),))
		else:
			verdict = resolve(member.overloads, site, conversions=self.conversions)
		return self._verdict_result(query, verdict, "overload")

	def _run_construct(self, query: ConstructQuery) -> QueryResult:
		self.graph.get(query.class_name)
		site = CallSite(callee=query.class_name, args=query.args, direct=query.direct, span=query.span)
		verdict = resolve_constructor(self.registry, query.class_name, site, conversions=self.conversions)
		return self._verdict_result(query, verdict, "overload")

	def _run_classify(self, query: ClassifyQuery) -> QueryResult:
		shape = query.shape
		if not isinstance(shape, StatementShape):
			reading = classify_tilde(shape)
			outcome = "destructor call" if reading is TildeReading.DESTRUCTOR_CALL else "complement operator"
			return QueryResult(query=query, outcome=outcome, tilde=reading)
		result = classify(shape, type_names=frozenset(decl.name for decl in self.graph))
		if not result.is_function_declaration:
			return QueryResult(
				query=query,
				outcome="value construction",
				details=[result.reason],
				classification=result,
			)
		assert result.function is not None
		rewrites = [s.render() for s in suggest_disambiguation(shape).all()]
		diag = Diagnostic(
			message=f"'{shape.render()}' declares a function '{result.function.render()}'",
			code="W-VEXING-PARSE",
			phase="disambiguate",
			severity="warning",
			span=query.span,
			notes=[result.reason] + [f"to construct an object, write '{r}'" for r in rewrites],
		)
		return QueryResult(
			query=query,
			outcome=f"function declaration: {result.function.render()}",
			details=[result.reason] + rewrites,
			classification=result,
			diagnostics=[diag],
		)

	def _verdict_result(self, query: Query, verdict: ResolutionVerdict, phase: str) -> QueryResult:
		details: List[str] = []
		diagnostics: List[Diagnostic] = []
		severity = "error" if verdict.kind in self.config.fail_on else "warning"
		if isinstance(verdict, Ambiguous):
			details = [_detail(c) for c in verdict.candidates]
			diagnostics.append(
				Diagnostic(
					message=f"'{query.render()}' is ambiguous",
					code="E-AMBIGUOUS",
					phase=phase,
					severity=severity,
					span=query.span,
					notes=[f"candidate: {d}" for d in details],
				)
			)
		elif isinstance(verdict, NoMatch):
			details = [r.render() for r in verdict.rejected]
			diagnostics.append(
				Diagnostic(
					message=f"no viable candidate for '{query.render()}'",
					code="E-NO-MATCH",
					phase=phase,
					severity=severity,
					span=query.span,
					notes=details or ["no candidates declared"],
				)
			)
		elif isinstance(verdict, Hidden):
			details = [f"hides {_detail(h)}" for h in verdict.hidden]
			diagnostics.append(
				Diagnostic(
					message=f"{target_label(verdict.winner)} hides base declarations",
					code="N-HIDDEN",
					phase=phase,
					severity="error" if verdict.kind in self.config.fail_on else "note",
					span=query.span,
					notes=details,
				)
			)
		return QueryResult(
			query=query,
			outcome=verdict.render(),
			details=details,
			verdict=verdict,
			diagnostics=diagnostics,
		)


def _detail(target) -> str:
	if isinstance(target, ResolvedMember):
		return target.detailed_label()
	assert isinstance(target, MemberDecl)
	return target.signature()


def run_source(
	source: str,
	*,
	file: Optional[str] = None,
	config: Optional[EngineConfig] = None,
) -> Tuple[Session, List[QueryResult]]:
	"""Convenience: build a session for `source` and answer all its queries."""
	session = Session.from_source(source, file=file, config=config)
	return session, session.run()


__all__ = ["Session", "QueryResult", "run_source"]
