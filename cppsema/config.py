# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Engine configuration (v0).

Pinned policy:
- the project file is `./cppsema.json` unless `--config PATH` names another,
- a missing project file means defaults; a present but malformed one is an
  error (E-CONFIG), never silently ignored,
- command-line flags override file values.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, FrozenSet, Optional, Tuple

from cppsema.core.errors import SemaError
from cppsema.verdicts import VerdictKind

CONFIG_FILENAME = "cppsema.json"
CONFIG_FORMAT = "cppsema-config"
CONFIG_VERSION = 0

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(SemaError):
	code = "E-CONFIG"
	phase = "config"


@dataclass(frozen=True)
class EngineConfig:
	log_level: Optional[str] = None  # None: CPPSEMA_LOG_LEVEL or the logging default
	fail_on: FrozenSet[VerdictKind] = frozenset()
	json: bool = False
	standard_conversions: Tuple[Tuple[str, str], ...] = ()

	def with_overrides(
		self,
		*,
		log_level: Optional[str] = None,
		fail_on: Optional[FrozenSet[VerdictKind]] = None,
		json: Optional[bool] = None,
	) -> "EngineConfig":
		config = self
		if log_level is not None:
			config = replace(config, log_level=parse_log_level(log_level))
		if fail_on is not None:
			config = replace(config, fail_on=fail_on)
		if json is not None:
			config = replace(config, json=json)
		return config


def parse_log_level(value: Any) -> str:
	if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
		raise ConfigError(f"unknown log level: {value!r}")
	return value.upper()


def parse_fail_on(values: Any) -> FrozenSet[VerdictKind]:
	"""Parse `["ambiguous", "no-match"]` (or a comma-separated string) into verdict kinds."""
	if isinstance(values, str):
		values = [v for v in (part.strip() for part in values.split(",")) if v]
	if not isinstance(values, list):
		raise ConfigError("fail_on must be a list of verdict kinds")
	kinds = set()
	for value in values:
		try:
			kind = VerdictKind(value)
		except ValueError:
			raise ConfigError(f"unknown verdict kind in fail_on: {value!r}") from None
		if kind is VerdictKind.UNIQUE:
			raise ConfigError("fail_on cannot include 'unique'")
		kinds.add(kind)
	return frozenset(kinds)


def load_config(path: Path) -> EngineConfig:
	"""
	Load a config file.

	Format (pinned for v0, JSON):
	{
	  "format": "cppsema-config",
	  "version": 0,
	  "log_level": "DEBUG",                     // optional
	  "fail_on": ["ambiguous", "no-match"],     // optional
	  "json": false,                            // optional
	  "standard_conversions": [["int", "Meters"]]  // optional
	}
	"""
	try:
		obj = json.loads(path.read_text(encoding="utf-8"))
	except OSError as err:
		raise ConfigError(f"cannot read config file '{path}': {err.strerror or err}") from err
	except json.JSONDecodeError as err:
		raise ConfigError(f"config file '{path}' is not valid JSON: {err.msg}") from err
	if not isinstance(obj, dict):
		raise ConfigError("config must be a JSON object")
	if obj.get("format") != CONFIG_FORMAT or obj.get("version") != CONFIG_VERSION:
		raise ConfigError("unsupported config format/version")

	log_level = None
	if obj.get("log_level") is not None:
		log_level = parse_log_level(obj["log_level"])

	fail_on = parse_fail_on(obj.get("fail_on") or [])

	json_out = obj.get("json", False)
	if not isinstance(json_out, bool):
		raise ConfigError("json must be a boolean")

	pairs = []
	conv_obj = obj.get("standard_conversions") or []
	if not isinstance(conv_obj, list):
		raise ConfigError("standard_conversions must be a list of [from, to] pairs")
	for pair in conv_obj:
		if not (isinstance(pair, list) and len(pair) == 2 and all(isinstance(p, str) for p in pair)):
			raise ConfigError(f"invalid standard conversion entry: {pair!r}")
		pairs.append((pair[0], pair[1]))

	return EngineConfig(
		log_level=log_level,
		fail_on=fail_on,
		json=json_out,
		standard_conversions=tuple(pairs),
	)


def discover_config(explicit: Optional[Path] = None, *, cwd: Optional[Path] = None) -> EngineConfig:
	"""Load `explicit` if given, else `./cppsema.json` when it exists, else defaults."""
	if explicit is not None:
		return load_config(explicit)
	candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
	if candidate.is_file():
		return load_config(candidate)
	return EngineConfig()


__all__ = [
	"EngineConfig",
	"ConfigError",
	"load_config",
	"discover_config",
	"parse_fail_on",
	"parse_log_level",
	"CONFIG_FILENAME",
]
