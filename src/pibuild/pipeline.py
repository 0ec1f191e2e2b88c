"""
End-to-end build pipeline.

Runs the whole build as one linear pass:

    validate -> toolchains -> submodules -> kernels -> firmware
             -> sdcard directory -> zip archive

Every check that can fail without building anything runs before the first
kernel build, and every firmware file is verified before the SD-card
directory is touched.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .config import BuildConfig
from .firmware import check_firmware_dirs, collect_firmware
from .matrix import KernelArtifact, build_kernels
from .package import create_archive
from .runner import CommandRunner, make
from .sdcard import check_soundfont, stage_sdcard
from .toolchain import build_environment, check_tools

logger = logging.getLogger(__name__)


class ProjectError(Exception):
    """Exception raised when the project root is not a buildable checkout."""

    pass


@dataclass
class BuildResult:
    """
    Artifacts of a successful build.

    Attributes:
        kernels_dir: Plain kernel images
        hdmi_kernels_dir: HDMI console kernel images (None when not built)
        sdcard_dir: Staged SD-card directory
        archive: Zip of the SD-card directory
        kernels: Every kernel image that was built
    """

    kernels_dir: Path
    hdmi_kernels_dir: Path | None
    sdcard_dir: Path
    archive: Path
    kernels: list[KernelArtifact] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        """Artifact locations in display order."""
        paths = [self.kernels_dir]
        if self.hdmi_kernels_dir is not None:
            paths.append(self.hdmi_kernels_dir)
        paths += [self.sdcard_dir, self.archive]
        return paths


def run_build(
    config: BuildConfig,
    runner: CommandRunner,
    base_env: dict[str, str] | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """
    Build all kernels and package the SD card.

    Args:
        config: Build configuration (boards are already validated)
        runner: Runs external commands
        base_env: Environment to derive the build environment from
        now: Timestamp for the archive name

    Returns:
        The produced artifacts

    Raises:
        ProjectError: If the root has no Makefile
        ToolchainError: If a cross-compiler is missing
        FirmwareError: If firmware directories or files are missing
        BuildError: If a board build produces no kernel image
        StagingError: If the soundfont is missing
        CommandError: If any make invocation fails
    """
    if not config.makefile.is_file():
        raise ProjectError(f"Run from repo root (Makefile not found in {config.root}).")
    check_soundfont(config)

    env = build_environment(config, base_env)
    check_tools(env)

    logger.info("Fetching submodules")
    runner.run(make("submodules"), cwd=config.root, env=env)
    check_firmware_dirs(config)

    kernels = build_kernels(config, runner, env)
    firmware = collect_firmware(config, runner, env)
    sdcard = stage_sdcard(config, firmware, kernels)
    archive = create_archive(sdcard, config.out_dir, now)

    logger.info("Done.")
    return BuildResult(
        kernels_dir=config.kernels_dir,
        hdmi_kernels_dir=config.hdmi_kernels_dir if config.with_hdmi else None,
        sdcard_dir=sdcard,
        archive=archive,
        kernels=kernels,
    )
