"""
Boot and WLAN firmware collection.

The Raspberry Pi boot firmware (GPU bootloader, device trees, ARM stub)
and the Broadcom WLAN firmware blobs are fetched and prepared by make
targets inside the circle library. This module runs those targets and
verifies that every file the SD card needs is present before anything is
staged.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import BOOT_HOME, WLAN_HOME, BuildConfig
from .runner import CommandRunner, make

logger = logging.getLogger(__name__)


class FirmwareError(Exception):
    """Exception raised when firmware directories or files are missing."""

    pass


# Copied to the root of the SD card
BOOT_FILES = (
    "armstub8-rpi4.bin",
    "bcm2711-rpi-4-b.dtb",
    "bcm2711-rpi-400.dtb",
    "bcm2711-rpi-cm4.dtb",
    "bootcode.bin",
    "COPYING.linux",
    "fixup_cd.dat",
    "fixup4cd.dat",
    "LICENCE.broadcom",
    "start_cd.elf",
    "start4cd.elf",
)

# Copied to firmware/ on the SD card
WLAN_FILES = (
    "LICENCE.broadcom_bcm43xx",
    "brcmfmac43430-sdio.bin",
    "brcmfmac43430-sdio.txt",
    "brcmfmac43436-sdio.bin",
    "brcmfmac43436-sdio.txt",
    "brcmfmac43436-sdio.clm_blob",
    "brcmfmac43455-sdio.bin",
    "brcmfmac43455-sdio.txt",
    "brcmfmac43455-sdio.clm_blob",
    "brcmfmac43456-sdio.bin",
    "brcmfmac43456-sdio.txt",
    "brcmfmac43456-sdio.clm_blob",
)


@dataclass
class FirmwareSet:
    """
    Verified firmware files ready to be staged.

    Attributes:
        boot_files: Boot firmware files (SD card root)
        wlan_files: WLAN firmware files (SD card firmware/)
    """

    boot_files: list[Path]
    wlan_files: list[Path]


def check_firmware_dirs(config: BuildConfig):
    """
    Verify the firmware source directories exist.

    They are provided by the circle submodule, so this is only meaningful
    after `make submodules`.

    Raises:
        FirmwareError: If either directory is missing
    """
    if not config.boot_home.is_dir():
        raise FirmwareError(f"Boot path not found: {BOOT_HOME}")
    if not config.wlan_firmware_dir.is_dir():
        raise FirmwareError(f"WLAN firmware path not found: {WLAN_HOME / 'firmware'}")


def collect_firmware(
    config: BuildConfig,
    runner: CommandRunner,
    env: dict[str, str] | None = None,
) -> FirmwareSet:
    """
    Prepare the boot and WLAN firmware and verify every required file.

    Args:
        config: Build configuration
        runner: Runs the make commands
        env: Environment for make

    Returns:
        The verified firmware files

    Raises:
        FirmwareError: Listing every missing file
        CommandError: If make fails
    """
    check_firmware_dirs(config)

    logger.info("Building/collecting boot files")
    runner.run(make("firmware", "armstub64", directory=BOOT_HOME), cwd=config.root, env=env)

    logger.info("Collecting WLAN firmware")
    runner.run(make(directory=WLAN_HOME / "firmware"), cwd=config.root, env=env)

    boot_files = [config.boot_home / name for name in BOOT_FILES]
    wlan_files = [config.wlan_firmware_dir / name for name in WLAN_FILES]

    missing = [path for path in boot_files + wlan_files if not path.is_file()]
    if missing:
        listing = "\n".join(f"  {path}" for path in missing)
        raise FirmwareError(f"Missing firmware files:\n{listing}")

    return FirmwareSet(boot_files=boot_files, wlan_files=wlan_files)
