"""Shared fixtures for dusk-mcp tests.

These fixtures build throwaway Laravel project skeletons on disk: a
composer.json declaring laravel/framework plus an artisan script, with
optional Dusk vendor directory and artifact folders.
"""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from dusk_mcp.context import ActiveProject


def write_laravel_project(
    path: Path,
    *,
    dev_only: bool = False,
    with_dusk: bool = False,
    with_artisan: bool = True,
) -> Path:
    """Create a minimal Laravel project at path and return it."""
    path.mkdir(parents=True, exist_ok=True)
    section = "require-dev" if dev_only else "require"
    composer = {"name": "acme/app", section: {"php": "^8.2", "laravel/framework": "^11.0"}}
    (path / "composer.json").write_text(json.dumps(composer))
    if with_artisan:
        (path / "artisan").write_text("#!/usr/bin/env php\n<?php\n")
    if with_dusk:
        (path / "vendor" / "laravel" / "dusk").mkdir(parents=True)
    return path


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture creating Laravel projects under tmp_path."""

    def _make(name: str = "app", **kwargs: bool) -> Path:
        return write_laravel_project(tmp_path / name, **kwargs)

    return _make


@pytest.fixture
def laravel_project(make_project: Callable[..., Path]) -> Path:
    """A valid Laravel project with Dusk installed."""
    return make_project("app", with_dusk=True)


@pytest.fixture
def active_project(laravel_project: Path) -> ActiveProject:
    """ActiveProject pointing at the laravel_project fixture."""
    return ActiveProject(path=laravel_project)
