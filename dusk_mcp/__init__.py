"""Dusk MCP - Model Context Protocol server for Laravel Dusk browser tests."""

from dusk_mcp.commands import TestRunOptions, build_dusk_command
from dusk_mcp.context import ActiveProject, resolve_initial_project
from dusk_mcp.dispatcher import ToolDispatcher
from dusk_mcp.exceptions import (
    CommandExecutionError,
    DuskMCPError,
    ExecutionError,
    InvalidProjectError,
    ResourceReadError,
    UnknownResourceError,
    UnknownToolError,
    ValidationError,
)
from dusk_mcp.parser import FailureRecord, TestResultSummary, parse_test_results
from dusk_mcp.projects import ProjectContext, find_laravel_projects, is_laravel_project
from dusk_mcp.version import __version__

__all__ = [
    "__version__",
    "ActiveProject",
    "resolve_initial_project",
    "ToolDispatcher",
    "TestRunOptions",
    "build_dusk_command",
    "TestResultSummary",
    "FailureRecord",
    "parse_test_results",
    "ProjectContext",
    "find_laravel_projects",
    "is_laravel_project",
    "DuskMCPError",
    "ValidationError",
    "InvalidProjectError",
    "ExecutionError",
    "CommandExecutionError",
    "UnknownToolError",
    "UnknownResourceError",
    "ResourceReadError",
]
