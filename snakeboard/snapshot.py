from __future__ import annotations

import numpy as np

from snakeboard.board import Board, Cell

GLYPHS = {
    Cell.EMPTY: ".",
    Cell.OCCUPIED: "o",
    Cell.FOOD: "*",
}
HEAD_GLYPH = "@"


def as_grid(board: Board) -> np.ndarray:
    """(height, width) view of the cell buffer, indexed ``[row, column]``.

    Shares memory with :meth:`Board.cells`, so it is read-only and goes stale
    on the next tick.
    """
    return board.cells().reshape(board.height, board.width)


def render_text(board: Board) -> str:
    grid = as_grid(board)
    rows = [[GLYPHS[Cell(value)] for value in row] for row in grid]
    head_x, head_y = board.snake[0]
    rows[head_y][head_x] = HEAD_GLYPH
    return "\n".join("".join(row) for row in rows)
