"""Configuration for the Dusk MCP server."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

# Server identity reported to MCP clients
SERVER_NAME = "laravel-dusk-mcp"

# Initial project path (falls back to cwd, then discovery)
LARAVEL_PATH = os.environ.get("LARAVEL_PATH")

# State directory for the log file and optional config.yaml
DUSK_MCP_HOME = Path(os.environ.get("DUSK_MCP_HOME", str(Path.home() / ".dusk-mcp")))
CONFIG_FILE = DUSK_MCP_HOME / "config.yaml"
SERVER_LOG_FILE = DUSK_MCP_HOME / "server.log"

# Project-relative layout consumed by the tools
SCREENSHOTS_PATH = "tests/Browser/screenshots"
LOGS_PATH = "storage/logs/dusk"
BROWSER_TESTS_PATH = "tests/Browser"
DUSK_VENDOR_PATH = "vendor/laravel/dusk"
DUSK_ENV_FILE = ".env.dusk.local"

DEFAULT_SERVER_PORT = 8000

# Logging configuration
# Log level can be set via DUSK_MCP_LOG_LEVEL environment variable
# Valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_LEVEL_STR = os.environ.get("DUSK_MCP_LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_STR, logging.INFO)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ServerConfig:
    """Settings loaded from the optional YAML config file.

    Example config.yaml:

        search_paths:
          - ~/clients
        screenshots_path: tests/Browser/screenshots
        logs_path: storage/logs/dusk
        log_level: DEBUG
    """

    search_paths: list[Path] = field(default_factory=list)
    screenshots_path: str = SCREENSHOTS_PATH
    logs_path: str = LOGS_PATH
    log_level: str | None = None


def load_config(config_path: Path | None = None) -> ServerConfig:
    """Load server settings from a YAML file.

    A missing file yields the defaults. An unreadable or malformed file is
    reported as a warning and also yields the defaults, so a bad config never
    prevents the server from starting.

    Args:
        config_path: Path to the YAML file. Defaults to ~/.dusk-mcp/config.yaml.

    Returns:
        The loaded ServerConfig.
    """
    path = config_path or CONFIG_FILE
    if not path.exists():
        return ServerConfig()

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not load config file %s: %s", path, e)
        return ServerConfig()

    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping at top level", path)
        return ServerConfig()

    search_paths = data.get("search_paths") or []
    if not isinstance(search_paths, list):
        logger.warning("Ignoring search_paths in %s: expected a list", path)
        search_paths = []

    log_level = data.get("log_level")
    return ServerConfig(
        search_paths=[Path(str(p)).expanduser() for p in search_paths],
        screenshots_path=str(data.get("screenshots_path") or SCREENSHOTS_PATH),
        logs_path=str(data.get("logs_path") or LOGS_PATH),
        log_level=str(log_level).upper() if log_level else None,
    )


def setup_logging(level: str | None = None, log_file: Path | None = None) -> logging.Logger:
    """Configure logging for the dusk_mcp package.

    Console output goes to stderr because stdout carries the MCP protocol.
    A file handler is added when the log file can be opened.

    Args:
        level: Level name overriding DUSK_MCP_LOG_LEVEL.
        log_file: Log file path. Defaults to ~/.dusk-mcp/server.log.

    Returns:
        The dusk_mcp package logger.
    """
    log_level = getattr(logging, level.upper(), LOG_LEVEL) if level else LOG_LEVEL
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    package_logger = logging.getLogger("dusk_mcp")
    package_logger.setLevel(log_level)

    # Avoid duplicate handlers if setup is called multiple times
    if package_logger.handlers:
        return package_logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_path = log_file or SERVER_LOG_FILE
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    except OSError as e:
        package_logger.warning("Could not set up file logging to %s: %s", log_path, e)

    package_logger.propagate = False

    return package_logger
