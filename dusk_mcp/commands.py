"""Artisan command lines for the Dusk runner tools."""

from pydantic import BaseModel, ConfigDict, Field

from dusk_mcp.config import DEFAULT_SERVER_PORT

DUSK_COMMAND = "php artisan dusk"
CHROME_DRIVER_COMMAND = "php artisan dusk:chrome-driver"
SERVE_COMMAND = "php artisan serve"


class TestRunOptions(BaseModel):
    """Options for a single Dusk test run."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(extra="ignore")

    test: str | None = Field(None, description="Specific test file or method to run")
    filter: str | None = Field(None, description="Filter tests by name pattern")
    group: str | None = Field(None, description="Run tests in a specific group")
    headless: bool = Field(default=True, description="Run tests in headless mode")


def build_dusk_command(options: TestRunOptions) -> str:
    """Build the `php artisan dusk` invocation for a test run.

    Arguments are appended in a fixed order: the positional test, then
    --filter, --group and --headed.

    Args:
        options: Validated run options.

    Returns:
        The full command line.
    """
    parts = [DUSK_COMMAND]

    if options.test:
        parts.append(options.test)
    if options.filter:
        parts.append(f'--filter="{options.filter}"')
    if options.group:
        parts.append(f"--group={options.group}")
    if not options.headless:
        parts.append("--headed")

    return " ".join(parts)


def build_chrome_driver_command(version: str | None = None) -> str:
    """Build the ChromeDriver install command, auto-detecting the version if none is given."""
    if version:
        return f"{CHROME_DRIVER_COMMAND} {version}"
    return f"{CHROME_DRIVER_COMMAND} --detect"


def build_serve_command(port: int = DEFAULT_SERVER_PORT) -> str:
    return f"{SERVE_COMMAND} --port={port}"
