from typing import Optional, Sequence, Union

from rules.rules import BLOCK_SIZE

from .state import Board, Cell
from .types import Grid, SolvedGrid


BORDER = "|" + "=" * 35 + "|"
SEPARATOR = "|" + ("-" * 11 + "|") * BLOCK_SIZE


def format_board(board: Union[Board, Grid, SolvedGrid]) -> str:
    """Render a board as a bordered table; '=' borders mark block bands."""
    lines: list[str] = []
    for row_index, row in enumerate(board):
        lines.append(BORDER if row_index % BLOCK_SIZE == 0 else SEPARATOR)
        line = "|"
        for value in _row_values(row):
            line += f" {value} |" if value is not None else "   |"
        lines.append(line)
    lines.append(BORDER)
    return "\n".join(lines)


def format_grid_rows(board: Union[Board, Grid, SolvedGrid]) -> list[str]:
    return [" ".join(str(value) if value is not None else "." for value in _row_values(row)) for row in board]


def _row_values(row: Sequence) -> list[Optional[int]]:
    values: list[Optional[int]] = []
    for item in row:
        if isinstance(item, Cell):
            values.append(item.solution)
        elif item:
            values.append(item)
        else:
            values.append(None)
    return values
