"""MCP server wiring.

Binds the ToolDispatcher and the resource catalog to an mcp.server.Server and
runs it over stdio.
"""

import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool

from dusk_mcp.config import SERVER_NAME
from dusk_mcp.dispatcher import ToolDispatcher
from dusk_mcp.resources import list_resources, read_resource
from dusk_mcp.version import __version__

logger = logging.getLogger(__name__)


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server backed by a dispatcher.

    Resources are always read from the dispatcher's current project, so a
    set_laravel_project call takes effect for later resource requests too.

    The SDK catches the UnknownToolError raised for an unknown tool name and
    returns it as a tool result with isError set. Handler failures come back
    as ordinary text results with isError unset.
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
    async def handle_list_tools() -> list[Tool]:
        return [
            Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in dispatcher.list_tools()
        ]

    # Required arguments are checked by the dispatcher so that a missing one
    # comes back as tool text rather than a schema error.
    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        return await dispatcher.invoke(name, arguments)

    @server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
    async def handle_list_resources() -> list[Resource]:
        descriptors = await asyncio.to_thread(list_resources, dispatcher.project)
        return [
            Resource(
                uri=descriptor.uri,  # type: ignore[arg-type]
                name=descriptor.name,
                mimeType=descriptor.mime_type,
            )
            for descriptor in descriptors
        ]

    @server.read_resource()  # type: ignore[untyped-decorator,no-untyped-call]
    async def handle_read_resource(uri: Any) -> list[ReadResourceContents]:
        content = await asyncio.to_thread(read_resource, dispatcher.project, str(uri))
        # The SDK base64-encodes bytes into a blob and passes str through as text
        return [ReadResourceContents(content=content.data, mime_type=content.mime_type)]

    return server


async def serve(dispatcher: ToolDispatcher) -> None:
    """Run the MCP server on stdin/stdout until the client disconnects."""
    server = create_server(dispatcher)
    logger.info(f"Laravel Dusk MCP server started (project: {dispatcher.project.path})")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
