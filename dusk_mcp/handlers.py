"""Tool handlers.

Each handler receives the current ToolContext and its validated arguments and
returns a ToolResult. Handlers raise DuskMCPError subclasses for failures; the
dispatcher turns those into text responses using the handler's error label.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable

from dusk_mcp import tools
from dusk_mcp.commands import (
    TestRunOptions,
    build_chrome_driver_command,
    build_dusk_command,
    build_serve_command,
)
from dusk_mcp.config import BROWSER_TESTS_PATH, DUSK_ENV_FILE, ServerConfig
from dusk_mcp.context import ActiveProject
from dusk_mcp.exceptions import ArtifactError, CommandExecutionError, DuskMCPError
from dusk_mcp.parser import TestResultSummary, parse_test_results
from dusk_mcp.projects import (
    default_search_paths,
    find_laravel_projects,
    is_dusk_installed,
    is_laravel_project,
)
from dusk_mcp.resources import SCREENSHOT_EXTENSION
from dusk_mcp.runner import run_command, spawn_background

logger = logging.getLogger(__name__)

OK = "✅"
FAIL = "❌"
WARN = "⚠️"

DUSK_INSTALL_HINT = "composer require laravel/dusk --dev"


@dataclass(frozen=True)
class ToolContext:
    """Everything a handler may read: the active project and server config."""

    project: ActiveProject
    config: ServerConfig = field(default_factory=ServerConfig)


@dataclass
class ToolResult:
    """Handler output. project, when set, replaces the active project."""

    text: str
    project: ActiveProject | None = None


ToolHandler = Callable[[ToolContext, Any], Awaitable[ToolResult]]


def format_test_results(summary: TestResultSummary, stderr: str = "") -> str:
    """Render a TestResultSummary as the run_dusk_test response text.

    The failure count and the itemised failures are shown as parsed, even
    when they disagree.
    """
    lines = [
        "Dusk Test Results:",
        f"- Total Tests: {summary.total}",
        f"- Passed: {summary.passed}",
        f"- Failed: {summary.failed}",
        f"- Duration: {summary.duration}",
        "",
    ]

    if summary.failed > 0 or summary.failures:
        lines.append("Failures:")
        if summary.failures:
            items = []
            for failure in summary.failures:
                item = f"- {failure.test}"
                if failure.message:
                    item += "\n  " + failure.message.replace("\n", "\n  ")
                items.append(item)
            lines.append("\n\n".join(items))
        else:
            lines.append("(no failure details found in the runner output)")
    elif summary.total == 0:
        lines.append("No test summary found in the runner output.")
    else:
        lines.append(f"All tests passed! {OK}")

    if stderr.strip():
        lines.extend(["", "Warnings/Errors:", stderr.strip()])

    return "\n".join(lines)


async def set_laravel_project(ctx: ToolContext, args: tools.SetProjectArgs) -> ToolResult:
    absolute_path = Path(args.path).expanduser().resolve()

    if not await is_laravel_project(absolute_path):
        return ToolResult(
            f"Error: {absolute_path} is not a valid Laravel project. Please ensure the path "
            "contains a Laravel installation with composer.json and artisan files."
        )

    dusk_installed = await asyncio.to_thread(is_dusk_installed, absolute_path)
    status = (
        f"{OK} Laravel Dusk is installed"
        if dusk_installed
        else f"{WARN}  Laravel Dusk is not installed. Run: {DUSK_INSTALL_HINT}"
    )
    logger.info(f"Active project set to {absolute_path}")
    return ToolResult(
        f"Laravel project set to: {absolute_path}\n{status}",
        project=ctx.project.with_path(absolute_path),
    )


async def list_laravel_projects(ctx: ToolContext, args: tools.NoArgs) -> ToolResult:
    projects = await find_laravel_projects(default_search_paths(ctx.config.search_paths))

    if not projects:
        return ToolResult(
            "No Laravel projects found in common locations. "
            "Use set_laravel_project to specify a custom path."
        )

    installed = await asyncio.gather(
        *(asyncio.to_thread(is_dusk_installed, project) for project in projects)
    )
    entries = [
        f"- {project} (Dusk {OK if has_dusk else FAIL})"
        for project, has_dusk in zip(projects, installed)
    ]
    return ToolResult(
        "Found Laravel projects:\n"
        + "\n".join(entries)
        + f"\n\nCurrent project: {ctx.project.path}"
    )


async def run_dusk_test(ctx: ToolContext, args: TestRunOptions) -> ToolResult:
    """Run Dusk and summarise the results.

    A non-zero exit is reported as an error, with the parsed results appended
    when the captured output still contains a test summary.
    """
    command = build_dusk_command(args)

    try:
        result = await run_command(command, default_path=ctx.project.path)
    except CommandExecutionError as e:
        text = f"Error running Dusk tests: {e.message}"
        summary = parse_test_results(e.stdout)
        if summary.total > 0:
            text += "\n\n" + format_test_results(summary)
        return ToolResult(text)

    summary = parse_test_results(result.stdout)
    return ToolResult(format_test_results(summary, result.stderr))


def _collect_browser_tests(tests_dir: Path) -> list[str]:
    if not tests_dir.is_dir():
        return []
    return sorted(str(path.relative_to(tests_dir)) for path in tests_dir.rglob("*.php"))


async def list_dusk_tests(ctx: ToolContext, args: tools.NoArgs) -> ToolResult:
    tests_dir = ctx.project.browser_tests_path
    try:
        test_files = await asyncio.to_thread(_collect_browser_tests, tests_dir)
    except OSError as e:
        raise ArtifactError(str(e), path=str(tests_dir)) from e

    if not test_files:
        return ToolResult(f"No Dusk tests found in {BROWSER_TESTS_PATH}.")
    return ToolResult("Available Dusk Tests:\n" + "\n".join(f"- {t}" for t in test_files))


async def check_dusk_environment(ctx: ToolContext, args: tools.NoArgs) -> ToolResult:
    project_path = ctx.project.path
    checks = []

    if await asyncio.to_thread(is_dusk_installed, project_path):
        checks.append(f"{OK} Laravel Dusk is installed")
    else:
        checks.append(f"{FAIL} Laravel Dusk is not installed (run: {DUSK_INSTALL_HINT})")

    if await asyncio.to_thread((project_path / DUSK_ENV_FILE).exists):
        checks.append(f"{OK} {DUSK_ENV_FILE} file exists")
    else:
        checks.append(f"{WARN}  {DUSK_ENV_FILE} file not found (optional but recommended)")

    try:
        await run_command(build_chrome_driver_command(), default_path=project_path)
        checks.append(f"{OK} ChromeDriver is properly configured")
    except DuskMCPError as e:
        logger.debug(f"ChromeDriver check failed: {e}")
        checks.append(f"{FAIL} ChromeDriver not found or outdated (run: php artisan dusk:install)")

    if await asyncio.to_thread(ctx.project.browser_tests_path.is_dir):
        checks.append(f"{OK} Browser tests directory exists")
    else:
        checks.append(f"{FAIL} Browser tests directory not found")

    return ToolResult("Dusk Environment Check:\n" + "\n".join(checks))


def _delete_screenshots(directory: Path) -> int:
    deleted = 0
    for path in sorted(directory.iterdir()):
        if path.name.endswith(SCREENSHOT_EXTENSION) and path.is_file():
            path.unlink()
            deleted += 1
    return deleted


async def clear_dusk_screenshots(ctx: ToolContext, args: tools.NoArgs) -> ToolResult:
    directory = ctx.project.screenshots_path
    try:
        deleted = await asyncio.to_thread(_delete_screenshots, directory)
    except OSError as e:
        raise ArtifactError(f"{e.strerror or e}: {directory}", path=str(directory)) from e

    logger.info(f"Deleted {deleted} screenshot(s) from {directory}")
    return ToolResult(f"Cleared {deleted} screenshot(s) from the Dusk screenshots directory.")


async def install_chrome_driver(ctx: ToolContext, args: tools.ChromeDriverArgs) -> ToolResult:
    command = build_chrome_driver_command(args.version)
    result = await run_command(command, default_path=ctx.project.path)

    text = f"ChromeDriver Installation:\n{result.stdout}"
    if result.stderr.strip():
        text += f"\n\nWarnings: {result.stderr.strip()}"
    return ToolResult(text)


async def start_dev_server(ctx: ToolContext, args: tools.DevServerArgs) -> ToolResult:
    """Start `php artisan serve` detached and return without waiting.

    The process handle is not kept, so no tool can stop this server.
    """
    handle = spawn_background(build_serve_command(args.port), ctx.project.path)
    return ToolResult(
        f"Laravel development server starting on port {args.port} (pid {handle.pid})...\n"
        "Note: The server is running in the background. Make sure to stop it when done."
    )


# tool name -> (handler, label used when rendering handler errors)
HANDLERS: dict[str, tuple[ToolHandler, str]] = {
    tools.SET_PROJECT: (set_laravel_project, "Error setting project"),
    tools.LIST_PROJECTS: (list_laravel_projects, "Error listing projects"),
    tools.RUN_TESTS: (run_dusk_test, "Error running Dusk tests"),
    tools.LIST_TESTS: (list_dusk_tests, "Error listing tests"),
    tools.CHECK_ENVIRONMENT: (check_dusk_environment, "Error checking environment"),
    tools.CLEAR_SCREENSHOTS: (clear_dusk_screenshots, "Error clearing screenshots"),
    tools.INSTALL_CHROME_DRIVER: (install_chrome_driver, "Error installing ChromeDriver"),
    tools.START_DEV_SERVER: (start_dev_server, "Error starting server"),
}
