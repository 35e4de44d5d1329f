"""
Utility functions for the web test agent
"""
from .response_parser import Recovered, Unrecoverable, parse_json_object
from .run_registry import (
	register_run,
	unregister_run,
	get_run,
	list_runs,
	run_count,
)
from .definition_parser import TestDefinitionError, TestParser

__all__ = [
	"Recovered",
	"Unrecoverable",
	"parse_json_object",
	"register_run",
	"unregister_run",
	"get_run",
	"list_runs",
	"run_count",
	"TestDefinitionError",
	"TestParser",
]
