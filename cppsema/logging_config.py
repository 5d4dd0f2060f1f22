# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
loguru setup for the command line tools.

The package disables its own loguru records on import so embedding code stays
quiet; `setup_logging` turns them back on and installs one stderr sink.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from loguru import logger

DEFAULT_LEVEL = "WARNING"
LEVEL_ENV = "CPPSEMA_LOG_LEVEL"

_FORMAT = (
	"<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
	"<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

_logging_configured = False


def setup_logging(level: Optional[str] = None, *, force: bool = False) -> None:
	"""
	Configure the global logger once.

	`level` falls back to CPPSEMA_LOG_LEVEL, then WARNING. `force` replaces the
	sink even when logging was configured already.
	"""
	global _logging_configured
	if _logging_configured and not force:
		return
	_logging_configured = True

	if level is None:
		level = os.getenv(LEVEL_ENV) or DEFAULT_LEVEL

	logger.remove()
	logger.add(sys.stderr, level=str(level).upper(), format=_FORMAT, colorize=True)
	logger.enable("cppsema")


__all__ = ["setup_logging", "DEFAULT_LEVEL", "LEVEL_ENV"]
