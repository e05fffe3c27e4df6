"""Active project context.

The ActiveProject is an immutable value owned by the ToolDispatcher. Selecting
a different project produces a new ActiveProject rather than mutating shared
state.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dusk_mcp.config import (
    BROWSER_TESTS_PATH,
    LARAVEL_PATH,
    LOGS_PATH,
    SCREENSHOTS_PATH,
    ServerConfig,
)
from dusk_mcp.projects import default_search_paths, find_laravel_projects, is_laravel_project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveProject:
    """The project every tool targets by default.

    Attributes:
        path: Absolute project root.
        screenshots_dir: Screenshot directory, relative to the root.
        logs_dir: Dusk log directory, relative to the root.
    """

    path: Path
    screenshots_dir: str = SCREENSHOTS_PATH
    logs_dir: str = LOGS_PATH

    @property
    def screenshots_path(self) -> Path:
        return self.path / self.screenshots_dir

    @property
    def logs_path(self) -> Path:
        return self.path / self.logs_dir

    @property
    def browser_tests_path(self) -> Path:
        return self.path / BROWSER_TESTS_PATH

    def with_path(self, path: Path) -> "ActiveProject":
        """Return a copy of this context targeting a different project root."""
        return dataclasses.replace(self, path=path)


async def resolve_initial_project(
    config: ServerConfig | None = None,
    project_path: Path | str | None = None,
) -> ActiveProject:
    """Determine the project to use when the server starts.

    Order of precedence: explicit project_path, LARAVEL_PATH, the current
    working directory. If that directory is not a Laravel project, the first
    discovered project is used instead. If discovery finds nothing the
    configured path is kept so set_laravel_project can fix it later.

    Args:
        config: Loaded server configuration (artifact paths, extra roots).
        project_path: Path given on the command line.

    Returns:
        The initial ActiveProject.
    """
    config = config or ServerConfig()
    configured = Path(project_path or LARAVEL_PATH or os.getcwd()).expanduser().resolve()
    project = ActiveProject(
        path=configured,
        screenshots_dir=config.screenshots_path,
        logs_dir=config.logs_path,
    )

    if await is_laravel_project(configured):
        logger.info(f"Using Laravel project: {configured}")
        return project

    projects = await find_laravel_projects(default_search_paths(config.search_paths))
    if projects:
        logger.info(f"No Laravel project in {configured}. Using: {projects[0]}")
        return project.with_path(projects[0])

    logger.warning(
        "No Laravel project found. Use set_laravel_project to specify a project path."
    )
    return project
