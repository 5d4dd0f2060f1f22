# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""loguru wiring: engine traces stay quiet until setup_logging enables them."""

import pytest
from loguru import logger

from cppsema import logging_config
from cppsema.class_graph import ClassDecl, ClassGraph
from cppsema.layout import LayoutResolver


@pytest.fixture
def _restore_logging():
	yield
	logging_config.setup_logging("WARNING", force=True)
	logger.disable("cppsema")


def _trace_layout() -> None:
	graph = ClassGraph()
	graph.register(ClassDecl("Solo"))
	LayoutResolver(graph).layout_of("Solo")


def test_debug_traces_reach_stderr(capsys: pytest.CaptureFixture[str], _restore_logging) -> None:
	logging_config.setup_logging("DEBUG", force=True)
	_trace_layout()
	err = capsys.readouterr().err
	assert "registered class Solo" in err
	assert "layout of Solo" in err


def test_level_from_environment(
	capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, _restore_logging
) -> None:
	monkeypatch.setenv(logging_config.LEVEL_ENV, "ERROR")
	logging_config.setup_logging(force=True)
	_trace_layout()
	assert "layout of Solo" not in capsys.readouterr().err


def test_setup_is_applied_once_without_force(capsys: pytest.CaptureFixture[str], _restore_logging) -> None:
	logging_config.setup_logging("ERROR", force=True)
	logging_config.setup_logging("DEBUG")
	_trace_layout()
	assert "layout of Solo" not in capsys.readouterr().err


def test_default_level_is_warning(
	capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, _restore_logging
) -> None:
	monkeypatch.delenv(logging_config.LEVEL_ENV, raising=False)
	logging_config.setup_logging(force=True)
	_trace_layout()
	logger.warning("visible at the default level")
	err = capsys.readouterr().err
	assert "layout of Solo" not in err
	assert "visible at the default level" in err
