"""Tool catalog and typed tool arguments.

Each tool has a hand-written JSON schema (what clients see) and a pydantic
model (what handlers receive). parse_arguments() turns a raw argument dict
into the tool's model or a MissingArgumentError / InvalidArgumentError.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dusk_mcp.commands import TestRunOptions
from dusk_mcp.config import DEFAULT_SERVER_PORT
from dusk_mcp.exceptions import InvalidArgumentError, MissingArgumentError, UnknownToolError

SET_PROJECT = "set_laravel_project"
LIST_PROJECTS = "list_laravel_projects"
RUN_TESTS = "run_dusk_test"
LIST_TESTS = "list_dusk_tests"
CHECK_ENVIRONMENT = "check_dusk_environment"
CLEAR_SCREENSHOTS = "clear_dusk_screenshots"
INSTALL_CHROME_DRIVER = "install_chrome_driver"
START_DEV_SERVER = "start_dev_server"


@dataclass(frozen=True)
class ToolDefinition:
    """Static description of one tool."""

    name: str
    description: str
    input_schema: dict[str, Any]

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))


class NoArgs(BaseModel):
    """Arguments for tools that take none."""

    model_config = ConfigDict(extra="ignore")


class SetProjectArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: str = Field(..., min_length=1, description="Absolute path to the Laravel project")


class ChromeDriverArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str | None = Field(None, description="Specific ChromeDriver version")


class DevServerArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    port: int = Field(default=DEFAULT_SERVER_PORT, ge=1, le=65535, description="Port number")


_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}

TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name=SET_PROJECT,
        description="Set the Laravel project path to work with",
        input_schema={
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Absolute path to the Laravel project",
                },
            },
            "required": ["path"],
        },
    ),
    ToolDefinition(
        name=LIST_PROJECTS,
        description="List available Laravel projects on the system",
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDefinition(
        name=RUN_TESTS,
        description="Run Laravel Dusk browser tests",
        input_schema={
            "type": "object",
            "properties": {
                "test": {
                    "type": "string",
                    "description": "Specific test file or method to run (optional)",
                },
                "filter": {
                    "type": "string",
                    "description": "Filter tests by name pattern",
                },
                "group": {
                    "type": "string",
                    "description": "Run tests in a specific group",
                },
                "headless": {
                    "type": "boolean",
                    "description": "Run tests in headless mode (default: true)",
                    "default": True,
                },
            },
        },
    ),
    ToolDefinition(
        name=LIST_TESTS,
        description="List all available Dusk test files",
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDefinition(
        name=CHECK_ENVIRONMENT,
        description="Check if Dusk environment is properly configured",
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDefinition(
        name=CLEAR_SCREENSHOTS,
        description="Clear all Dusk screenshot files",
        input_schema=_EMPTY_SCHEMA,
    ),
    ToolDefinition(
        name=INSTALL_CHROME_DRIVER,
        description="Install or update ChromeDriver for Dusk",
        input_schema={
            "type": "object",
            "properties": {
                "version": {
                    "type": "string",
                    "description": "Specific ChromeDriver version (optional)",
                },
            },
        },
    ),
    ToolDefinition(
        name=START_DEV_SERVER,
        description="Start Laravel development server for Dusk tests",
        input_schema={
            "type": "object",
            "properties": {
                "port": {
                    "type": "number",
                    "description": "Port number (default: 8000)",
                    "default": DEFAULT_SERVER_PORT,
                },
            },
        },
    ),
)

TOOLS_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOL_DEFINITIONS}

ARGUMENT_MODELS: dict[str, type[BaseModel]] = {
    SET_PROJECT: SetProjectArgs,
    LIST_PROJECTS: NoArgs,
    RUN_TESTS: TestRunOptions,
    LIST_TESTS: NoArgs,
    CHECK_ENVIRONMENT: NoArgs,
    CLEAR_SCREENSHOTS: NoArgs,
    INSTALL_CHROME_DRIVER: ChromeDriverArgs,
    START_DEV_SERVER: DevServerArgs,
}


def get_tool(name: str) -> ToolDefinition:
    """Look up a tool definition.

    Raises:
        UnknownToolError: If no tool has this name.
    """
    try:
        return TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def parse_arguments(name: str, arguments: dict[str, Any] | None) -> BaseModel:
    """Validate raw tool arguments into the tool's typed payload.

    Required arguments are checked against the tool's declared schema first,
    then the payload is validated by the tool's model. Null values count as
    absent, and so does an empty string for a required argument.

    Args:
        name: Tool name.
        arguments: Raw arguments from the client (may be None).

    Returns:
        An instance of the tool's argument model.

    Raises:
        UnknownToolError: If the tool does not exist.
        MissingArgumentError: If a required argument is absent.
        InvalidArgumentError: If an argument has the wrong type or value.
    """
    tool = get_tool(name)
    raw = {key: value for key, value in (arguments or {}).items() if value is not None}

    for required in tool.required:
        if raw.get(required) in (None, ""):
            raise MissingArgumentError(name, required)

    try:
        return ARGUMENT_MODELS[name].model_validate(raw)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        if error["type"] == "missing":
            raise MissingArgumentError(name, field) from None
        raise InvalidArgumentError(name, field, error["msg"]) from None
