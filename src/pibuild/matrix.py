"""
Kernel build matrix.

Builds every selected board with the external make build and collects the
resulting kernel images. Each board is built from a fully reset tree
(`make mrproper`), since the build output of one board is not valid for
another. With HDMI variants enabled the board is rebuilt once more with
HDMI_CONSOLE=1 after a `make clean`.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .boards import Board
from .config import BuildConfig
from .runner import CommandRunner, make

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Exception raised when a build does not produce its kernel image."""

    pass


PLAIN = "plain"
HDMI = "hdmi"


@dataclass(frozen=True)
class KernelArtifact:
    """
    A kernel image copied out of the build tree.

    Attributes:
        board: Board the image was built for
        variant: PLAIN or HDMI
        path: Location of the copy in the output directory
    """

    board: Board
    variant: str
    path: Path


def build_kernels(
    config: BuildConfig,
    runner: CommandRunner,
    env: dict[str, str] | None = None,
) -> list[KernelArtifact]:
    """
    Build all boards in the configured order.

    Args:
        config: Build configuration
        runner: Runs the make commands
        env: Environment for make (toolchain PATH)

    Returns:
        One artifact per board, plus one HDMI artifact per board when
        HDMI variants are enabled

    Raises:
        BuildError: If a build finishes without producing its image.
            Remaining boards are not built.
        CommandError: If make fails
    """
    config.kernels_dir.mkdir(parents=True, exist_ok=True)
    config.hdmi_kernels_dir.mkdir(parents=True, exist_ok=True)

    artifacts: list[KernelArtifact] = []
    for board in config.boards:
        logger.info(f"Resetting state for {board.name}")
        runner.run(make("mrproper"), cwd=config.root, env=env)

        logger.info(f"Build: BOARD={board.name}")
        runner.run(make(f"BOARD={board.name}", jobs=config.jobs), cwd=config.root, env=env)
        artifacts.append(_collect(config, board, PLAIN, config.kernels_dir))

        if config.with_hdmi:
            logger.info(f"Build (HDMI console): BOARD={board.name}")
            runner.run(make("clean"), cwd=config.root, env=env)
            runner.run(
                make(f"BOARD={board.name}", "HDMI_CONSOLE=1", jobs=config.jobs),
                cwd=config.root,
                env=env,
            )
            artifacts.append(_collect(config, board, HDMI, config.hdmi_kernels_dir))

    return artifacts


def _collect(config: BuildConfig, board: Board, variant: str, dest_dir: Path) -> KernelArtifact:
    """Copy the freshly built image for a board into dest_dir."""
    image = config.root / board.image_filename
    if not image.is_file():
        label = " (HDMI)" if variant == HDMI else ""
        raise BuildError(
            f"Expected {board.image_filename}{label} not produced for {board.name}"
        )

    dest = dest_dir / board.image_filename
    try:
        shutil.copy2(image, dest)
    except OSError as e:
        raise BuildError(f"Could not copy {image} to {dest}: {e.strerror or e}") from e
    logger.debug(f"'{image}' -> '{dest}'")
    return KernelArtifact(board=board, variant=variant, path=dest)
