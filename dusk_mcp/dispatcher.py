"""Tool dispatch.

ToolDispatcher owns the active project and routes tool calls to handlers.
Unknown tools raise UnknownToolError; every other failure is returned as a
text content item so a failed call never ends the session.
"""

import logging
import time
from typing import Any

from mcp.types import TextContent

from dusk_mcp.config import ServerConfig
from dusk_mcp.context import ActiveProject
from dusk_mcp.exceptions import DuskMCPError, UnknownToolError, ValidationError
from dusk_mcp.handlers import HANDLERS, ToolContext, ToolHandler
from dusk_mcp.tools import TOOL_DEFINITIONS, ToolDefinition, get_tool, parse_arguments

logger = logging.getLogger(__name__)


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


class ToolDispatcher:
    """Routes tool calls to handlers and holds the active project.

    Usage:
        dispatcher = ToolDispatcher(project)

        # Default handlers for the eight catalog tools are registered
        content = await dispatcher.invoke("run_dusk_test", {"filter": "Login"})

        # set_laravel_project replaces dispatcher.project for later calls
        await dispatcher.invoke("set_laravel_project", {"path": "/srv/app"})
    """

    def __init__(self, project: ActiveProject, config: ServerConfig | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            project: Initial active project.
            config: Server configuration passed to handlers.
        """
        self.project = project
        self.config = config or ServerConfig()
        self._handlers: dict[str, tuple[ToolHandler, str]] = dict(HANDLERS)

    def register(self, name: str, handler: ToolHandler, error_label: str = "Error") -> None:
        """Register or replace the handler for a catalog tool.

        Args:
            name: Tool name; must exist in the catalog.
            handler: Async handler function.
            error_label: Prefix for error text produced by this handler.

        Raises:
            UnknownToolError: If the tool is not in the catalog.
        """
        get_tool(name)
        self._handlers[name] = (handler, error_label)

    def list_tools(self) -> list[ToolDefinition]:
        """Return the tool catalog in declaration order."""
        return list(TOOL_DEFINITIONS)

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> list[TextContent]:
        """Run a tool and return its response content.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            A single text content item with the handler output or error.

        Raises:
            UnknownToolError: If the tool does not exist.
        """
        get_tool(name)
        if name not in self._handlers:
            raise UnknownToolError(name)
        handler, error_label = self._handlers[name]

        try:
            args = parse_arguments(name, arguments)
        except ValidationError as e:
            logger.info(f"Rejected arguments for {name}: {e.message}")
            return _text(f"Error: {e.message}")

        t0 = time.monotonic()
        try:
            result = await handler(ToolContext(project=self.project, config=self.config), args)
        except DuskMCPError as e:
            logger.warning(f"Tool {name} failed: {e.to_dict()}")
            return _text(f"{error_label}: {e.message}")
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return _text(f"{error_label}: {e}")

        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        logger.info(f"Tool {name} completed in {duration_ms}ms")

        if result.project is not None:
            self.project = result.project
        return _text(result.text)
