"""Process execution for artisan commands.

Commands are run through the shell in the target project's directory. Foreground
commands are awaited and their output captured in full; background commands
(the development server) are detached and returned as a handle.
"""

import asyncio
import logging
import os
import signal
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from dusk_mcp.exceptions import CommandExecutionError, InvalidProjectError
from dusk_mcp.projects import is_laravel_project

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    return_code: int = 0


@dataclass
class BackgroundProcess:
    """Handle for a detached process.

    Nothing in the server keeps these handles today, so a spawned process runs
    until it exits on its own or is stopped outside the server.
    """

    command: str
    cwd: Path
    process: subprocess.Popen[bytes] = field(repr=False)
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_running(self) -> bool:
        """Check if the process is still running."""
        return self.process.poll() is None

    def terminate(self, force: bool = False) -> bool:
        """Stop the process and its session.

        Args:
            force: If True, use SIGKILL instead of SIGTERM.

        Returns:
            True if a signal was sent, False if the process had already exited.
        """
        if not self.is_running():
            return False
        sig = signal.SIGKILL if force else signal.SIGTERM
        try:
            os.killpg(self.process.pid, sig)
        except OSError:
            return False
        return True


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def run_command(
    command: str,
    project_path: Path | str | None = None,
    *,
    default_path: Path | str,
) -> CommandResult:
    """Run a shell command inside a Laravel project and capture its output.

    The working directory is validated first; the command is never started
    in a directory that is not a Laravel project.

    Args:
        command: Full command line to run through the shell.
        project_path: Explicit project directory override.
        default_path: Directory used when no override is given (the active project).

    Returns:
        CommandResult with stdout and stderr. Output on stderr with a zero exit
        code is not an error.

    Raises:
        InvalidProjectError: If the working directory is not a Laravel project.
        CommandExecutionError: If the command cannot start or exits non-zero.
    """
    cwd = Path(project_path or default_path)

    if not await is_laravel_project(cwd):
        raise InvalidProjectError(str(cwd))

    logger.info(f"Running '{command}' in {cwd}")
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout_data, stderr_data = await process.communicate()
    except OSError as e:
        raise CommandExecutionError(command, message=f"Command failed: {command}\n{e}") from e

    stdout = _decode(stdout_data)
    stderr = _decode(stderr_data)
    return_code = process.returncode if process.returncode is not None else 0

    if return_code != 0:
        logger.warning(f"Command '{command}' exited with code {return_code}")
        raise CommandExecutionError(command, stdout=stdout, stderr=stderr, return_code=return_code)

    return CommandResult(stdout=stdout, stderr=stderr, return_code=return_code)


def spawn_background(command: str, cwd: Path | str) -> BackgroundProcess:
    """Start a long-running shell command detached from the server.

    The process gets its own session and its output is discarded, so it keeps
    running independently of the MCP connection.

    Args:
        command: Full command line to run through the shell.
        cwd: Working directory.

    Returns:
        Handle for the spawned process.

    Raises:
        CommandExecutionError: If the process cannot be started.
    """
    workdir = Path(cwd)
    try:
        process = subprocess.Popen(
            command,
            shell=True,
            cwd=str(workdir),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise CommandExecutionError(command, message=f"Failed to start '{command}': {e}") from e

    logger.info(f"Started background process {process.pid}: {command}")
    return BackgroundProcess(command=command, cwd=workdir, process=process)
