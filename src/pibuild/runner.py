"""
External command execution.

Every make invocation goes through a CommandRunner. The real runner hands
the command to subprocess with the terminal attached, so the build output
streams straight through; tests plug in a runner that only records.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Exception raised when an external command fails."""

    def __init__(self, args: list[str], returncode: int | None, reason: str = ""):
        self.command = list(args)
        self.returncode = returncode
        text = shlex.join(self.command)
        if returncode is None:
            message = f"Could not run `{text}`: {reason}"
        else:
            message = f"Command `{text}` failed with exit code {returncode}"
        super().__init__(message)


class CommandRunner(Protocol):
    """Anything that can run a command in a directory."""

    def run(self, args: list[str], cwd: Path, env: dict[str, str] | None = None) -> None:
        ...


class SubprocessRunner:
    """
    Runs commands with subprocess.

    Usage:
        runner = SubprocessRunner()
        runner.run(["make", "submodules"], cwd=Path("."))
    """

    def run(self, args: list[str], cwd: Path, env: dict[str, str] | None = None) -> None:
        """
        Run a command and wait for it.

        Args:
            args: Command and arguments
            cwd: Working directory
            env: Environment (defaults to the current one)

        Raises:
            CommandError: If the command is missing or exits non-zero
        """
        logger.debug(f"Running: {shlex.join(args)} (in {cwd})")

        try:
            result = subprocess.run(args, cwd=cwd, env=env, check=False)
        except OSError as e:
            raise CommandError(args, None, e.strerror or str(e)) from e

        if result.returncode != 0:
            raise CommandError(args, result.returncode)


def make(*targets: str, jobs: int | None = None, directory: Path | None = None) -> list[str]:
    """
    Build a make command line.

    Args:
        targets: Targets and VAR=value assignments, in order
        jobs: Parallel jobs (-jN)
        directory: Directory for -C

    Returns:
        The argument list, e.g. ["make", "-j4", "BOARD=pi2"]
    """
    args = ["make"]
    if directory is not None:
        args += ["-C", str(directory)]
    if jobs is not None:
        args.append(f"-j{jobs}")
    args.extend(targets)
    return args
