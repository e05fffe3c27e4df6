"""Laravel project detection and discovery.

A directory qualifies as a Laravel project when it has both a composer.json
and an artisan script, and composer.json declares laravel/framework under
"require" or "require-dev". Every check here fails closed: an unreadable or
malformed project is simply not a project.
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dusk_mcp.config import DUSK_VENDOR_PATH

logger = logging.getLogger(__name__)

COMPOSER_FILE = "composer.json"
ARTISAN_FILE = "artisan"
FRAMEWORK_PACKAGE = "laravel/framework"
DEPENDENCY_SECTIONS = ("require", "require-dev")

# Conventional project folders under the user's home directory
HOME_PROJECT_DIRS = ("Sites", "projects", "workspace", "dev", "code")
# Conventional system-wide web roots
SYSTEM_WEB_ROOTS = (Path("/var/www"), Path("/var/www/html"))


@dataclass
class ProjectContext:
    """Validation result for a candidate project directory."""

    path: Path
    is_valid: bool
    has_test_runner: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": str(self.path),
            "is_valid": self.is_valid,
            "has_test_runner": self.has_test_runner,
        }


def _declares_framework(composer: Any) -> bool:
    if not isinstance(composer, dict):
        return False
    for section in DEPENDENCY_SECTIONS:
        dependencies = composer.get(section)
        if isinstance(dependencies, dict) and FRAMEWORK_PACKAGE in dependencies:
            return True
    return False


def check_laravel_project(path: Path | str) -> bool:
    """Check whether a directory is a Laravel project.

    Args:
        path: Directory to check.

    Returns:
        True if composer.json and artisan exist and composer.json declares
        laravel/framework. False otherwise, including on any read or parse error.
    """
    project = Path(path)
    composer_path = project / COMPOSER_FILE

    try:
        if not composer_path.is_file() or not (project / ARTISAN_FILE).exists():
            return False
        composer = json.loads(composer_path.read_text(encoding="utf-8"))
    except (OSError, ValueError, RecursionError) as e:
        logger.debug(f"Rejecting {project}: {e}")
        return False

    return _declares_framework(composer)


async def is_laravel_project(path: Path | str) -> bool:
    """Async wrapper around check_laravel_project that keeps disk I/O off the loop."""
    return await asyncio.to_thread(check_laravel_project, path)


def is_dusk_installed(path: Path | str) -> bool:
    """Check whether Laravel Dusk is installed in the project's vendor directory."""
    try:
        return (Path(path) / DUSK_VENDOR_PATH).exists()
    except OSError:
        return False


async def inspect_project(path: Path | str) -> ProjectContext:
    """Build a ProjectContext for a directory.

    Args:
        path: Directory to inspect.

    Returns:
        ProjectContext with the validation and Dusk installation results.
    """
    project = Path(path)
    is_valid = await is_laravel_project(project)
    has_dusk = await asyncio.to_thread(is_dusk_installed, project) if is_valid else False
    return ProjectContext(path=project, is_valid=is_valid, has_test_runner=has_dusk)


def default_search_paths(extra: list[Path] | None = None) -> list[Path]:
    """Return the ordered list of roots scanned for Laravel projects.

    Args:
        extra: Additional roots (e.g. from config.yaml), appended last.

    Returns:
        Search roots: cwd, common home folders, system web roots, then extras.
    """
    home = Path.home()
    paths = [Path.cwd()]
    paths.extend(home / name for name in HOME_PROJECT_DIRS)
    paths.extend(SYSTEM_WEB_ROOTS)
    if extra:
        paths.extend(extra)
    return paths


def _list_subdirectories(root: Path) -> list[Path]:
    """List immediate subdirectories of root in name order.

    Returns an empty list if root is missing or not accessible.
    """
    try:
        with os.scandir(root) as entries:
            names = sorted(entry.name for entry in entries)
    except OSError as e:
        logger.debug(f"Skipping search root {root}: {e}")
        return []

    subdirs = []
    for name in names:
        candidate = root / name
        try:
            if candidate.is_dir():
                subdirs.append(candidate)
        except OSError:
            continue
    return subdirs


async def _scan_root(root: Path) -> list[Path]:
    """Return the Laravel projects found directly under one search root."""
    subdirs = await asyncio.to_thread(_list_subdirectories, root)
    if not subdirs:
        return []

    results = await asyncio.gather(
        *(is_laravel_project(subdir) for subdir in subdirs),
        return_exceptions=True,
    )
    return [subdir for subdir, valid in zip(subdirs, results) if valid is True]


async def find_laravel_projects(search_paths: list[Path] | None = None) -> list[Path]:
    """Discover Laravel projects in the immediate subdirectories of search roots.

    Roots are scanned concurrently. A root that does not exist or cannot be
    read contributes nothing and does not affect the others.

    Args:
        search_paths: Roots to scan. Defaults to default_search_paths().

    Returns:
        Project paths in root order then name order, duplicates removed
        (first occurrence wins).
    """
    roots = search_paths if search_paths is not None else default_search_paths()
    per_root = await asyncio.gather(*(_scan_root(root) for root in roots), return_exceptions=True)

    projects: list[Path] = []
    for root, found in zip(roots, per_root):
        if isinstance(found, BaseException):
            logger.debug(f"Discovery failed under {root}: {found}")
            continue
        projects.extend(found)

    return list(dict.fromkeys(projects))
