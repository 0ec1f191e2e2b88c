"""
Build configuration.

All options of a build run live in a single BuildConfig. The CLI fills it
from flags and environment variables; the pipeline and its steps only read
it.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from .boards import DEFAULT_BOARDS, Board, parse_boards


class ConfigError(Exception):
    """Exception raised for invalid build options."""

    pass


# Locations inside the project, relative to its root
BOOT_HOME = Path("external/circle-stdlib/libs/circle/boot")
WLAN_HOME = Path("external/circle-stdlib/libs/circle/addon/wlan")

DEFAULT_OUT_DIR = "out"
PACKAGE_PREFIX = "mt32-pi-local"


def default_jobs() -> int:
    """Number of parallel make jobs when none is given."""
    return os.cpu_count() or 4


@dataclass
class BuildConfig:
    """
    Options for one build run.

    Attributes:
        boards: Boards to build, in order
        jobs: Parallel make jobs (make -j)
        with_hdmi: Also build the HDMI_CONSOLE=1 variant of each board
        root: Project root containing the Makefile
        out_dir: Output directory for kernels and the archive
        sdcard_dir: Staged SD-card directory (defaults to <out_dir>/sdcard)
        arm_eabi_bin: Directory prepended to PATH for arm-none-eabi-*
        aarch64_bin: Directory prepended to PATH for aarch64-none-elf-*
        soundfont: Optional soundfont copied into the SD-card directory
    """

    boards: list[Board]
    jobs: int
    with_hdmi: bool = True
    root: Path = Path(".")
    out_dir: Path = Path(DEFAULT_OUT_DIR)
    sdcard_dir: Path | None = None
    arm_eabi_bin: Path | None = None
    aarch64_bin: Path | None = None
    soundfont: Path | None = None

    def __post_init__(self):
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")
        if not self.boards:
            raise ConfigError("No boards selected")

        # root is absolute, so the joins below are idempotent
        self.root = Path(self.root).absolute()
        self.out_dir = self._under_root(self.out_dir)
        if self.sdcard_dir is None:
            self.sdcard_dir = self.out_dir / "sdcard"
        else:
            self.sdcard_dir = self._under_root(self.sdcard_dir)

        # Relative tool and soundfont paths are taken from the root, where make runs
        if self.arm_eabi_bin is not None:
            self.arm_eabi_bin = self._under_root(self.arm_eabi_bin)
        if self.aarch64_bin is not None:
            self.aarch64_bin = self._under_root(self.aarch64_bin)
        if self.soundfont is not None:
            self.soundfont = self._under_root(self.soundfont)

        self._check_sdcard_dir()

    def _check_sdcard_dir(self):
        """
        Reject SD-card directories that staging would wipe out.

        The directory is deleted before every run, so it must not be the
        project root, one of its parents, or the sdcard/ template it is
        filled from.

        Raises:
            ConfigError: If the directory overlaps the root or the template
        """
        card = self.sdcard_dir.resolve()
        root = self.root.resolve()
        template = self.sdcard_template.resolve()

        if root.is_relative_to(card):
            raise ConfigError(
                f"SD-card directory {self.sdcard_dir} would replace the project root {self.root}"
            )
        if card.is_relative_to(template):
            raise ConfigError(
                f"SD-card directory {self.sdcard_dir} overlaps the sdcard template "
                f"{self.sdcard_template}; choose a different --out or --sdcard-dir"
            )

    @classmethod
    def create(
        cls,
        boards: str = DEFAULT_BOARDS,
        jobs: int | None = None,
        with_hdmi: bool = True,
        root: str | Path = ".",
        out_dir: str | Path = DEFAULT_OUT_DIR,
        sdcard_dir: str | Path | None = None,
        arm_eabi_bin: str | Path | None = None,
        aarch64_bin: str | Path | None = None,
        soundfont: str | Path | None = None,
    ) -> "BuildConfig":
        """
        Build a config from plain option values.

        Empty strings for the optional paths count as unset, matching how
        an exported but empty environment variable behaves.

        Raises:
            BoardError: If the board list contains an unknown board
            ConfigError: If an option is out of range
        """
        return cls(
            boards=parse_boards(boards),
            jobs=default_jobs() if jobs is None else jobs,
            with_hdmi=with_hdmi,
            root=Path(root),
            out_dir=Path(out_dir),
            sdcard_dir=_optional_path(sdcard_dir),
            arm_eabi_bin=_optional_path(arm_eabi_bin),
            aarch64_bin=_optional_path(aarch64_bin),
            soundfont=_optional_path(soundfont),
        )

    def _under_root(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    @property
    def makefile(self) -> Path:
        return self.root / "Makefile"

    @property
    def kernels_dir(self) -> Path:
        return self.out_dir / "kernels"

    @property
    def hdmi_kernels_dir(self) -> Path:
        return self.out_dir / "kernels-hdmi"

    @property
    def boot_home(self) -> Path:
        return self.root / BOOT_HOME

    @property
    def wlan_home(self) -> Path:
        return self.root / WLAN_HOME

    @property
    def wlan_firmware_dir(self) -> Path:
        return self.wlan_home / "firmware"

    @property
    def sdcard_template(self) -> Path:
        """Project-provided files copied verbatim onto the SD card."""
        return self.root / "sdcard"


def _optional_path(value: str | Path | None) -> Path | None:
    if value is None or str(value) == "":
        return None
    return Path(value)
