# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line front end.

  cppsema check FILE... [--json] [--config PATH] [--log-level L] [--fail-on KINDS]
  cppsema classify STATEMENT [--type NAME]... [--json]

`check` loads each fixture into its own session and answers its queries.
Exit codes: 0 success, 1 structural errors or a verdict kind listed in
`fail_on`, 2 usage errors (bad flags, unreadable input, bad config).
With --json a single payload `{"exit_code", "results", "diagnostics"}` is
printed; otherwise results go to stdout and diagnostics to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from cppsema.config import ConfigError, discover_config, parse_fail_on
from cppsema.core.diagnostics import Diagnostic
from cppsema.core.span import Span
from cppsema.disambiguator import StatementShape, classify, classify_tilde, suggest_disambiguation
from cppsema.logging_config import setup_logging
from cppsema.parser import FixtureParseError, parse_statement
from cppsema.session import Session


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="cppsema", description="Class hierarchy and call resolution checks")
	sub = p.add_subparsers(dest="cmd", required=True)

	check = sub.add_parser("check", help="Load declaration fixtures (.cxs) and answer their queries")
	check.add_argument("files", nargs="+", type=Path, help="Fixture file(s)")
	check.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	check.add_argument("--config", type=Path, default=None, help="Config file (default: ./cppsema.json if present)")
	check.add_argument("--log-level", default=None, help="loguru level (default: CPPSEMA_LOG_LEVEL or WARNING)")
	check.add_argument(
		"--fail-on",
		default=None,
		help="Comma-separated verdict kinds that fail the run (ambiguous,hidden,no-match)",
	)

	cls = sub.add_parser("classify", help="Classify one statement (declaration vs construction, ~x)")
	cls.add_argument("statement", help="e.g. 'B b(A());' or '~obj'")
	cls.add_argument(
		"--type",
		dest="type_names",
		action="append",
		default=[],
		help="Identifier known to name a type (repeatable)",
	)
	cls.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
	return p


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)
	if args.cmd == "check":
		return _cmd_check(args)
	if args.cmd == "classify":
		return _cmd_classify(args)
	raise AssertionError("unreachable")


def _cmd_check(args: argparse.Namespace) -> int:
	try:
		config = discover_config(args.config)
		fail_on = parse_fail_on(args.fail_on) if args.fail_on is not None else None
		config = config.with_overrides(
			log_level=args.log_level,
			fail_on=fail_on,
			json=True if args.json else None,
		)
	except ConfigError as err:
		_emit([], [err.to_diagnostic()], 2, as_json=bool(args.json))
		return 2
	setup_logging(config.log_level, force=True)

	results: List[Dict[str, Any]] = []
	diagnostics: List[Diagnostic] = []
	exit_code = 0
	for path in args.files:
		try:
			session = Session.from_path(path, config=config)
		except OSError as err:
			diagnostics.append(
				Diagnostic(
					message=f"cannot read '{path}': {err.strerror or err}",
					code="E-IO",
					phase="parse",
					span=Span(file=str(path)),
				)
			)
			exit_code = 2
			continue
		except FixtureParseError as err:
			diagnostics.append(err.to_diagnostic())
			exit_code = max(exit_code, 1)
			continue
		for result in session.run():
			entry = result.to_json()
			entry["file"] = str(path)
			results.append(entry)
			if not config.json:
				print(result.render())
		diagnostics.extend(session.diagnostics)
		diagnostics.extend(d for r in session.results for d in r.diagnostics)
		exit_code = max(exit_code, session.exit_code)

	_emit(results, diagnostics, exit_code, as_json=config.json)
	return exit_code


def _cmd_classify(args: argparse.Namespace) -> int:
	try:
		shape = parse_statement(args.statement)
	except FixtureParseError as err:
		_emit([], [err.to_diagnostic()], 1, as_json=bool(args.json))
		return 1
	if isinstance(shape, StatementShape):
		result = classify(shape, type_names=frozenset(args.type_names))
		entry: Dict[str, Any] = {
			"statement": shape.render(),
			"interpretation": result.interpretation.name.lower(),
			"reason": result.reason,
		}
		if result.function is not None:
			entry["function"] = result.function.render()
			entry["rewrites"] = [s.render() for s in suggest_disambiguation(shape).all()]
	else:
		reading = classify_tilde(shape)
		entry = {"statement": shape.render(), "interpretation": reading.name.lower()}
	if args.json:
		print(json.dumps(entry, sort_keys=True))
		return 0
	print(f"{entry['statement']} -> {entry['interpretation']}")
	if "function" in entry:
		print(f"  declares: {entry['function']}")
		for rewrite in entry["rewrites"]:
			print(f"  construct with: {rewrite}")
	return 0


def _emit(results: List[Dict[str, Any]], diagnostics: List[Diagnostic], exit_code: int, *, as_json: bool) -> None:
	if as_json:
		payload = {
			"exit_code": exit_code,
			"results": results,
			"diagnostics": [d.to_json() for d in diagnostics],
		}
		print(json.dumps(payload))
		return
	for diag in diagnostics:
		print(diag.render(), file=sys.stderr)


__all__ = ["main"]
