"""
SD-card directory staging.

Lays out the directory that is copied onto the FAT boot partition:

    <sdcard>/
        <project sdcard/ template>
        <boot firmware files>
        kernel*.img
        firmware/      WLAN firmware
        docs/          LICENSE, README.md
        soundfonts/    optional soundfont
"""

import logging
import shutil
from pathlib import Path

from .config import BuildConfig
from .firmware import FirmwareSet
from .matrix import HDMI, PLAIN, KernelArtifact

logger = logging.getLogger(__name__)


class StagingError(Exception):
    """Exception raised when the SD-card directory cannot be assembled."""

    pass


SOUNDFONT_NAME = "GeneralUser GS v1.511.sf2"
DOC_FILES = ("LICENSE", "README.md")
SUBDIRS = ("firmware", "docs", "soundfonts")


def check_soundfont(config: BuildConfig):
    """
    Verify a configured soundfont exists.

    Raises:
        StagingError: If a soundfont was given but is not a file
    """
    if config.soundfont is not None and not config.soundfont.is_file():
        raise StagingError(f"Soundfont not found: {config.soundfont}")


def stage_sdcard(
    config: BuildConfig,
    firmware: FirmwareSet,
    kernels: list[KernelArtifact],
) -> Path:
    """
    Assemble the SD-card directory from scratch.

    Any previous SD-card directory is removed first. HDMI kernels are
    copied after the plain ones and replace them, so the card boots the
    HDMI console build whenever one was made.

    Args:
        config: Build configuration
        firmware: Verified boot and WLAN firmware
        kernels: Kernel images from the build matrix

    Returns:
        Path to the SD-card directory

    Raises:
        StagingError: If the configured soundfont is missing or a file
            operation fails
    """
    check_soundfont(config)
    sdcard = config.sdcard_dir

    logger.info("Preparing sdcard/")
    try:
        if sdcard.exists():
            shutil.rmtree(sdcard)
        for name in SUBDIRS:
            (sdcard / name).mkdir(parents=True, exist_ok=True)

        if config.sdcard_template.is_dir():
            shutil.copytree(config.sdcard_template, sdcard, symlinks=True, dirs_exist_ok=True)
        else:
            logger.warning(f"No sdcard template directory at {config.sdcard_template}")
    except OSError as e:
        raise StagingError(f"Could not prepare {sdcard}: {e}") from e

    _copy_all(firmware.boot_files, sdcard)
    _copy_all(firmware.wlan_files, sdcard / "firmware")

    logger.info("Adding kernels")
    _copy_all([k.path for k in kernels if k.variant == PLAIN], sdcard)
    if config.with_hdmi:
        hdmi = [k.path for k in kernels if k.variant == HDMI]
        if hdmi:
            _copy_all(hdmi, sdcard)
        else:
            logger.warning("HDMI kernels not found")

    logger.info("Adding docs")
    docs = [config.root / name for name in DOC_FILES]
    present = [path for path in docs if path.is_file()]
    if len(present) < len(docs):
        logger.warning("LICENSE/README not found")
    _copy_all(present, sdcard / "docs")

    if config.soundfont is not None:
        logger.info(f"Including soundfont: {config.soundfont}")
        _copy(config.soundfont, sdcard / "soundfonts" / SOUNDFONT_NAME)
    else:
        logger.warning(
            f"No soundfont included (optional). Use --soundfont '/path/to/{SOUNDFONT_NAME}'"
        )

    return sdcard


def _copy(src: Path, dest: Path):
    try:
        shutil.copy2(src, dest)
    except OSError as e:
        raise StagingError(f"Could not copy {src} to {dest}: {e.strerror or e}") from e
    logger.debug(f"'{src}' -> '{dest}'")


def _copy_all(sources: list[Path], dest_dir: Path):
    for src in sources:
        _copy(src, dest_dir / src.name)
