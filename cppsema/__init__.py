# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
cppsema: class hierarchy and call resolution engine.

Engine modules (class_graph -> layout -> member_lookup; overload_resolver;
disambiguator) consume structured declarations. The fixture parser, session
and CLI (`cppsema.cli:main`) form the harness around them.

Engine modules log through loguru; records stay disabled until
`cppsema.logging_config.setup_logging` turns them on.
"""

from loguru import logger

logger.disable("cppsema")

__version__ = "0.1.0"

__all__ = ["__version__"]
