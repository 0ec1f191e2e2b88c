"""
Tests for board selection and kernel image names.
"""

import pytest

from pibuild.boards import (
    BOARDS,
    DEFAULT_BOARDS,
    BoardError,
    get_board,
    kernel_name_for_board,
    parse_boards,
)


class TestKernelNames:
    @pytest.mark.parametrize(
        "board, kernel",
        [
            ("pi2", "kernel7"),
            ("pi3", "kernel8-32"),
            ("pi3-64", "kernel8"),
            ("pi4", "kernel7l"),
            ("pi4-64", "kernel8-rpi4"),
        ],
    )
    def test_mapping(self, board, kernel):
        assert kernel_name_for_board(board) == kernel

    def test_mapping_covers_every_board(self):
        assert set(BOARDS) == {"pi2", "pi3", "pi3-64", "pi4", "pi4-64"}

    @pytest.mark.parametrize("board", ["pi5", "PI2", "", "pi3_64", "kernel7"])
    def test_unknown_board(self, board):
        with pytest.raises(BoardError, match="Unknown board"):
            kernel_name_for_board(board)

    def test_image_filename(self):
        assert get_board("pi4-64").image_filename == "kernel8-rpi4.img"

    def test_arch(self):
        assert get_board("pi3").arch == "arm"
        assert get_board("pi3-64").arch == "aarch64"


class TestParseBoards:
    def test_default_list(self):
        names = [b.name for b in parse_boards(DEFAULT_BOARDS)]
        assert names == ["pi2", "pi3-64", "pi4-64"]

    def test_keeps_order(self):
        names = [b.name for b in parse_boards("pi4 pi2  pi3\tpi3-64")]
        assert names == ["pi4", "pi2", "pi3", "pi3-64"]

    def test_drops_duplicates(self):
        names = [b.name for b in parse_boards("pi2 pi4 pi2")]
        assert names == ["pi2", "pi4"]

    def test_empty(self):
        with pytest.raises(BoardError):
            parse_boards("   ")

    def test_unknown_board_anywhere_fails(self):
        # The typo is last, but nothing is returned
        with pytest.raises(BoardError, match="pi9"):
            parse_boards("pi2 pi3-64 pi9")
