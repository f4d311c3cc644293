import pytest

from gridtac.core.board import EMPTY, Board


def test_index_maps_to_row_and_col():
    board = Board(4)
    assert board.position(0) == (0, 0)
    assert board.position(7) == (1, 3)
    assert board.position(13) == (3, 1)
    with pytest.raises(ValueError):
        board.position(16)


def test_place_and_lookup():
    board = Board(3)
    board.place(2, "X")
    board.place(6, "O")
    assert board.get(2) == "X"
    assert board.cells_of("X") == [2]
    assert board.empty_cells() == [0, 1, 3, 4, 5, 7, 8]
    assert list(board.iter_marks()) == [(2, "X"), (6, "O")]
    assert board.moves == 2


@pytest.mark.parametrize("index,mark", [(2, "O"), (9, "X"), (0, EMPTY)])
def test_place_rejects_bad_claims(index, mark):
    board = Board(3)
    board.place(2, "X")
    with pytest.raises(ValueError):
        board.place(index, mark)
    assert board.moves == 1


def test_from_cells_and_full_board():
    cells = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    board = Board.from_cells(3, cells)
    assert board.cells() == cells
    assert board.is_full()
    with pytest.raises(ValueError):
        Board.from_cells(3, cells[:-1])
