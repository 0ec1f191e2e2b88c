"""
Cross-compiler toolchain discovery.

The firmware build needs both the 32-bit (arm-none-eabi) and 64-bit
(aarch64-none-elf) bare-metal toolchains. Nothing is downloaded: whatever
is first on PATH, real compilers or ccache wrappers, is what make will use.
"""

import logging
import os
import shutil

from .config import BuildConfig

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    """Exception raised when a required tool is not on PATH."""

    pass


REQUIRED_TOOLS = (
    "arm-none-eabi-gcc",
    "arm-none-eabi-g++",
    "aarch64-none-elf-gcc",
    "aarch64-none-elf-g++",
)


def build_environment(
    config: BuildConfig, base_env: dict[str, str] | None = None
) -> dict[str, str]:
    """
    Create the environment for make invocations.

    The optional toolchain directories are prepended to PATH, ARM first and
    AArch64 second, so the AArch64 directory is searched first.

    Args:
        config: Build configuration
        base_env: Environment to start from (defaults to os.environ)

    Returns:
        A new environment dictionary
    """
    env = dict(os.environ if base_env is None else base_env)

    for directory in (config.arm_eabi_bin, config.aarch64_bin):
        if directory is None:
            continue
        current = env.get("PATH", "")
        env["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)
        logger.debug(f"Prepended {directory} to PATH")

    return env


def check_tools(env: dict[str, str], tools: tuple[str, ...] = REQUIRED_TOOLS) -> dict[str, str]:
    """
    Verify that every tool resolves on the environment's PATH.

    Args:
        env: Environment whose PATH is searched
        tools: Tool names to look up

    Returns:
        Mapping of tool name to resolved path

    Raises:
        ToolchainError: For the first tool that cannot be found
    """
    logger.info("Checking external toolchains (from PATH)")

    search_path = env.get("PATH", "")
    found: dict[str, str] = {}
    for tool in tools:
        location = shutil.which(tool, path=search_path)
        if location is None:
            raise ToolchainError(f"Missing tool on PATH: {tool}")
        logger.debug(f"  {tool}: {location}")
        found[tool] = location

    return found
