"""
Shared fixtures: a fake project checkout and a make that only records.
"""

from pathlib import Path

import pytest

from pibuild.boards import get_board
from pibuild.config import BOOT_HOME, WLAN_HOME, BuildConfig
from pibuild.firmware import BOOT_FILES, WLAN_FILES
from pibuild.runner import CommandError
from pibuild.toolchain import REQUIRED_TOOLS


class FakeMake:
    """
    Records make invocations and fakes their output files.

    - `make ... BOARD=<b>` writes <kernel>.img in the project root
    - `make mrproper` / `make clean` delete kernel images
    - `make -C <boot> ...` / `make -C <wlan>/firmware` write firmware files

    Attributes:
        broken_boards: Boards whose build "succeeds" without an image
        missing_files: Firmware file names never written
        fail_on: A target that makes the command exit non-zero
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.broken_boards: set[str] = set()
        self.missing_files: set[str] = set()
        self.fail_on: str | None = None

    def run(self, args, cwd, env=None):
        args = list(args)
        cwd = Path(cwd)
        self.calls.append(args)

        if self.fail_on is not None and self.fail_on in args:
            raise CommandError(args, 2)

        if "-C" in args:
            directory = cwd / args[args.index("-C") + 1]
            names = BOOT_FILES if directory.name == "boot" else WLAN_FILES
            for name in names:
                if name not in self.missing_files:
                    (directory / name).write_bytes(b"firmware")
            return

        if "mrproper" in args or "clean" in args:
            for image in cwd.glob("kernel*.img"):
                image.unlink()
            return

        for arg in args:
            if arg.startswith("BOARD="):
                name = arg.split("=", 1)[1]
                if name in self.broken_boards:
                    return
                variant = "hdmi" if "HDMI_CONSOLE=1" in args else "plain"
                image = cwd / get_board(name).image_filename
                image.write_text(f"{name} {variant}")

    def builds(self) -> list[list[str]]:
        """Only the kernel build invocations."""
        return [c for c in self.calls if any(a.startswith("BOARD=") for a in c)]


@pytest.fixture
def fake_make() -> FakeMake:
    return FakeMake()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A checkout with a Makefile, sdcard template, docs and firmware dirs."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "Makefile").write_text("all:\n")
    (root / "LICENSE").write_text("license")
    (root / "README.md").write_text("readme")

    template = root / "sdcard"
    (template / "mt32-pi").mkdir(parents=True)
    (template / "config.txt").write_text("arm_64bit=1\n")
    (template / "mt32-pi" / "mt32-pi.cfg").write_text("[system]\n")

    (root / BOOT_HOME).mkdir(parents=True)
    (root / WLAN_HOME / "firmware").mkdir(parents=True)
    return root


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    """A directory holding executable stand-ins for the cross-compilers."""
    directory = tmp_path / "toolchain" / "bin"
    directory.mkdir(parents=True)
    for tool in REQUIRED_TOOLS:
        path = directory / tool
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o755)
    return directory


@pytest.fixture
def config(project: Path, tools_dir: Path) -> BuildConfig:
    return BuildConfig.create(
        boards="pi2 pi3-64 pi4-64",
        jobs=4,
        root=project,
        arm_eabi_bin=tools_dir,
    )
