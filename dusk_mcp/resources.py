"""Screenshot and log resources for the active project.

Screenshots are exposed as ``screenshot://<filename>`` (PNG, served as a
base64 blob) and Dusk logs as ``log://<filename>`` (plain text). Listings are
rebuilt from disk on every request.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dusk_mcp.context import ActiveProject
from dusk_mcp.exceptions import ResourceReadError, UnknownResourceError

logger = logging.getLogger(__name__)

SCREENSHOT_SCHEME = "screenshot://"
LOG_SCHEME = "log://"
SCREENSHOT_EXTENSION = ".png"
LOG_EXTENSION = ".log"
SCREENSHOT_MIME_TYPE = "image/png"
LOG_MIME_TYPE = "text/plain"


@dataclass
class ResourceDescriptor:
    """A listed artifact."""

    uri: str
    name: str
    mime_type: str


@dataclass
class ResourceContent:
    """Content of a read artifact. data is bytes for screenshots, str for logs."""

    uri: str
    mime_type: str
    data: bytes | str


def _list_files(directory: Path, extension: str) -> list[str]:
    """List file names with the given extension, sorted. Missing dirs yield []."""
    try:
        with os.scandir(directory) as entries:
            names = [
                entry.name
                for entry in entries
                if entry.name.endswith(extension) and entry.is_file()
            ]
    except OSError as e:
        logger.debug(f"Cannot list {directory}: {e}")
        return []
    return sorted(names)


def list_resources(project: ActiveProject) -> list[ResourceDescriptor]:
    """List screenshots then logs of the active project as resources."""
    resources = [
        ResourceDescriptor(
            uri=f"{SCREENSHOT_SCHEME}{name}",
            name=f"Screenshot: {name}",
            mime_type=SCREENSHOT_MIME_TYPE,
        )
        for name in _list_files(project.screenshots_path, SCREENSHOT_EXTENSION)
    ]
    resources.extend(
        ResourceDescriptor(
            uri=f"{LOG_SCHEME}{name}",
            name=f"Log: {name}",
            mime_type=LOG_MIME_TYPE,
        )
        for name in _list_files(project.logs_path, LOG_EXTENSION)
    )
    return resources


def _resolve_file(uri: str, directory: Path, filename: str) -> Path:
    """Map a resource filename onto its directory, rejecting path traversal."""
    if not filename or filename in (".", "..") or "/" in filename or "\\" in filename:
        raise ResourceReadError(uri, reason=f"invalid file name '{filename}'")
    return directory / filename


def read_resource(project: ActiveProject, uri: str) -> ResourceContent:
    """Read a screenshot or log resource.

    Args:
        project: Active project whose artifact directories are read.
        uri: ``screenshot://<file>`` or ``log://<file>``.

    Returns:
        ResourceContent with bytes for screenshots and text for logs.

    Raises:
        UnknownResourceError: If the URI scheme is not supported.
        ResourceReadError: If the file is missing, unreadable or the name is invalid.
    """
    if uri.startswith(SCREENSHOT_SCHEME):
        path = _resolve_file(uri, project.screenshots_path, uri[len(SCREENSHOT_SCHEME):])
        try:
            data: bytes | str = path.read_bytes()
        except OSError as e:
            raise ResourceReadError(uri, path=str(path), reason=e.strerror or str(e)) from e
        return ResourceContent(uri=uri, mime_type=SCREENSHOT_MIME_TYPE, data=data)

    if uri.startswith(LOG_SCHEME):
        path = _resolve_file(uri, project.logs_path, uri[len(LOG_SCHEME):])
        try:
            data = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ResourceReadError(uri, path=str(path), reason=e.strerror or str(e)) from e
        return ResourceContent(uri=uri, mime_type=LOG_MIME_TYPE, data=data)

    raise UnknownResourceError(uri)
