"""
Supported Raspberry Pi boards.

Each board the firmware can be built for maps to exactly one kernel image
name. The external build writes `<kernel>.img` to the project root when
invoked with `make BOARD=<board>`, and the Pi boot firmware picks the image
to load by that name.
"""

from dataclasses import dataclass


class BoardError(Exception):
    """Exception raised for unknown or malformed board selections."""

    pass


DEFAULT_BOARDS = "pi2 pi3-64 pi4-64"


@dataclass(frozen=True)
class Board:
    """
    A target hardware configuration.

    Attributes:
        name: Board name as passed to make (e.g. "pi3-64")
        kernel: Kernel image base name (e.g. "kernel8")
        arch: "arm" for 32-bit builds, "aarch64" for 64-bit builds
    """

    name: str
    kernel: str
    arch: str

    @property
    def image_filename(self) -> str:
        """File name the build produces for this board."""
        return f"{self.kernel}.img"


BOARDS: dict[str, Board] = {
    board.name: board
    for board in (
        Board("pi2", "kernel7", "arm"),
        Board("pi3", "kernel8-32", "arm"),
        Board("pi3-64", "kernel8", "aarch64"),
        Board("pi4", "kernel7l", "arm"),
        Board("pi4-64", "kernel8-rpi4", "aarch64"),
    )
}


def get_board(name: str) -> Board:
    """
    Look up a board by name.

    Raises:
        BoardError: If the board is not supported
    """
    try:
        return BOARDS[name]
    except KeyError:
        known = ", ".join(BOARDS)
        raise BoardError(f"Unknown board: {name} (known boards: {known})") from None


def kernel_name_for_board(name: str) -> str:
    """Return the kernel image base name for a board."""
    return get_board(name).kernel


def parse_boards(text: str) -> list[Board]:
    """
    Parse a whitespace-separated board list.

    Every name is validated before anything is returned, so a typo in the
    last board stops the run before the first one is built.

    Args:
        text: Board names, e.g. "pi2 pi3-64 pi4-64"

    Returns:
        Boards in the given order, duplicates removed

    Raises:
        BoardError: If the list is empty or contains an unknown board
    """
    names = text.split()
    if not names:
        raise BoardError("No boards selected")

    boards: list[Board] = []
    for name in names:
        board = get_board(name)
        if board not in boards:
            boards.append(board)
    return boards
