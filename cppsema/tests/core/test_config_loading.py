# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""cppsema.json loading (pinned v0 format) and overrides."""

import json
from pathlib import Path

import pytest

from cppsema.config import ConfigError, EngineConfig, discover_config, load_config, parse_fail_on
from cppsema.verdicts import VerdictKind


def _write(tmp_path: Path, obj) -> Path:
	path = tmp_path / "cppsema.json"
	path.write_text(json.dumps(obj))
	return path


def test_load_full_config(tmp_path: Path) -> None:
	path = _write(
		tmp_path,
		{
			"format": "cppsema-config",
			"version": 0,
			"log_level": "debug",
			"fail_on": ["ambiguous", "no-match"],
			"json": True,
			"standard_conversions": [["int", "Meters"]],
		},
	)
	config = load_config(path)
	assert config.log_level == "DEBUG"
	assert config.fail_on == {VerdictKind.AMBIGUOUS, VerdictKind.NO_MATCH}
	assert config.json is True
	assert config.standard_conversions == (("int", "Meters"),)


def test_minimal_config_uses_defaults(tmp_path: Path) -> None:
	config = load_config(_write(tmp_path, {"format": "cppsema-config", "version": 0}))
	assert config == EngineConfig()


@pytest.mark.parametrize(
	"obj",
	[
		[],
		{"format": "cppsema-config", "version": 1},
		{"format": "drift-trust", "version": 0},
		{"format": "cppsema-config", "version": 0, "fail_on": ["sometimes"]},
		{"format": "cppsema-config", "version": 0, "fail_on": ["unique"]},
		{"format": "cppsema-config", "version": 0, "log_level": "LOUD"},
		{"format": "cppsema-config", "version": 0, "json": "yes"},
		{"format": "cppsema-config", "version": 0, "standard_conversions": [["int"]]},
	],
)
def test_invalid_config_raises(tmp_path: Path, obj) -> None:
	with pytest.raises(ConfigError) as excinfo:
		load_config(_write(tmp_path, obj))
	assert excinfo.value.code == "E-CONFIG"


def test_unreadable_or_malformed_config(tmp_path: Path) -> None:
	with pytest.raises(ConfigError):
		load_config(tmp_path / "missing.json")
	bad = tmp_path / "bad.json"
	bad.write_text("{not json")
	with pytest.raises(ConfigError):
		load_config(bad)


def test_discover_config(tmp_path: Path) -> None:
	assert discover_config(cwd=tmp_path) == EngineConfig()
	_write(tmp_path, {"format": "cppsema-config", "version": 0, "json": True})
	assert discover_config(cwd=tmp_path).json is True


def test_overrides_and_fail_on_strings() -> None:
	assert parse_fail_on("ambiguous, hidden") == {VerdictKind.AMBIGUOUS, VerdictKind.HIDDEN}
	base = EngineConfig(log_level="INFO", fail_on=frozenset({VerdictKind.HIDDEN}))
	merged = base.with_overrides(log_level="trace", fail_on=frozenset(), json=True)
	assert merged.log_level == "TRACE"
	assert merged.fail_on == frozenset()
	assert merged.json is True
	assert base.with_overrides() == base
