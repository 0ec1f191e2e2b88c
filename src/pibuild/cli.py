"""
Command-line interface for pibuild.

This module defines all CLI commands using the Typer library.
"""

from typing import Annotated

import typer

from pibuild import __version__
from pibuild.boards import DEFAULT_BOARDS

app = typer.Typer(
    name="pibuild",
    help="pibuild - Build Raspberry Pi firmware kernels and package an SD card",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pibuild {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show commands and copied files"),
    ] = False,
) -> None:
    """pibuild - Build Raspberry Pi firmware kernels and package an SD card."""
    from pibuild.terminal import setup_logging, teardown_logging

    handler = setup_logging(verbose=verbose)
    ctx.call_on_close(lambda: teardown_logging(handler))


@app.command("boards")
def list_boards() -> None:
    """
    List the supported boards and the kernel image each one produces.
    """
    from pibuild.boards import BOARDS

    default = DEFAULT_BOARDS.split()

    print(f"{'Board':<10} {'Kernel image':<20} {'Arch':<8}")
    print("-" * 44)
    for board in BOARDS.values():
        marker = "*" if board.name in default else ""
        print(f"{board.name:<10} {board.image_filename:<20} {board.arch:<8} {marker}".rstrip())
    print()
    print("* built by default")


@app.command("build")
def build(
    boards: str = typer.Option(
        DEFAULT_BOARDS,
        "--boards",
        envvar="BOARDS",
        help="Boards to build, space separated",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        envvar="JOBS",
        min=1,
        help="Parallel build jobs (default: CPU count)",
    ),
    with_hdmi: int = typer.Option(
        1,
        "--with-hdmi",
        envvar="WITH_HDMI",
        min=0,
        max=1,
        help=(
            "Also build the HDMI_CONSOLE variant: 1 builds it, 0 skips it. "
            "Other values (true, yes) are rejected"
        ),
    ),
    arm_eabi_bin: str | None = typer.Option(
        None,
        "--arm-eabi-bin",
        envvar="ARM_EABI_BIN",
        help="Prepend DIR to PATH for arm-none-eabi-*",
    ),
    aarch64_bin: str | None = typer.Option(
        None,
        "--aarch64-bin",
        envvar="AARCH64_BIN",
        help="Prepend DIR to PATH for aarch64-none-elf-*",
    ),
    soundfont: str | None = typer.Option(
        None,
        "--soundfont",
        envvar="SOUNDFONT_PATH",
        help="Include GeneralUser GS v1.511.sf2 from PATH",
    ),
    out: str = typer.Option(
        "out",
        "--out",
        "-o",
        envvar="OUT_DIR",
        help="Output directory",
    ),
    sdcard_dir: str | None = typer.Option(
        None,
        "--sdcard-dir",
        envvar="SDCARD_DIR",
        help="SD-card staging directory (default: <out>/sdcard)",
    ),
    root: str = typer.Option(
        ".",
        "--root",
        help="Project root containing the Makefile",
    ),
):
    """
    Build kernels for every board and package the SD card.

    Toolchains must already be on PATH (directly or via ccache wrappers).
    No downloads are performed.

    Example:
        pibuild build
        pibuild build --boards "pi3-64 pi4-64" --with-hdmi 0 -j 8
    """
    import logging

    from pibuild.boards import BoardError
    from pibuild.config import BuildConfig, ConfigError
    from pibuild.firmware import FirmwareError
    from pibuild.matrix import BuildError
    from pibuild.package import PackagingError
    from pibuild.pipeline import ProjectError, run_build
    from pibuild.runner import CommandError, SubprocessRunner
    from pibuild.sdcard import StagingError
    from pibuild.toolchain import ToolchainError

    logger = logging.getLogger("pibuild.cli")

    try:
        config = BuildConfig.create(
            boards=boards,
            jobs=jobs,
            with_hdmi=bool(with_hdmi),
            root=root,
            out_dir=out,
            sdcard_dir=sdcard_dir,
            arm_eabi_bin=arm_eabi_bin,
            aarch64_bin=aarch64_bin,
            soundfont=soundfont,
        )
        result = run_build(config, SubprocessRunner())

    except (
        BoardError,
        ConfigError,
        ProjectError,
        ToolchainError,
        CommandError,
        BuildError,
        FirmwareError,
        StagingError,
        PackagingError,
    ) as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    print("Artifacts:")
    for path in result.paths:
        suffix = "/" if path.is_dir() else ""
        print(f"  {path}{suffix}")


if __name__ == "__main__":
    app()
