from typing import Union

from rules.rules import GRID_SIZE

from .state import Board, build_board
from .types import Grid
from .validation import validate_and_normalize_known_grid


CLASSIC_PUZZLE: Grid = [
    [0, 0, 5, 0, 0, 8, 0, 0, 0],
    [0, 2, 0, 0, 0, 0, 5, 0, 0],
    [7, 9, 0, 3, 4, 5, 6, 2, 0],
    [0, 0, 0, 6, 0, 4, 7, 1, 0],
    [0, 4, 9, 5, 0, 7, 8, 3, 0],
    [0, 1, 7, 8, 0, 2, 0, 0, 0],
    [0, 5, 4, 7, 8, 3, 0, 9, 6],
    [0, 0, 6, 0, 0, 0, 0, 5, 0],
    [0, 0, 0, 1, 0, 0, 4, 0, 0],
]

_EMPTY_CHARS = {"0", "."}
_SEPARATOR_CHARS = {"|", "-", "+", "="}


def parse_puzzle(source: Union[str, Grid]) -> Grid:
    """
    Build a normalized grid from nested lists or from a string of 81 cells.

    In the string form digits 1-9 are givens, "0" or "." mark empty cells, and
    whitespace plus the separators | - + = are ignored, so rows may be written
    with block dividers.
    """
    if isinstance(source, str):
        return _parse_puzzle_string(source)
    return validate_and_normalize_known_grid(source)


def _parse_puzzle_string(source: str) -> Grid:
    values: list[int] = []
    for char in source:
        if char.isspace() or char in _SEPARATOR_CHARS:
            continue
        if char in _EMPTY_CHARS:
            values.append(0)
        elif char.isdigit():
            values.append(int(char))
        else:
            raise ValueError(f"unexpected character in puzzle: {char!r}")

    cell_count = GRID_SIZE * GRID_SIZE
    if len(values) != cell_count:
        raise ValueError(f"puzzle string must describe {cell_count} cells, got {len(values)}")

    rows = [values[start:start + GRID_SIZE] for start in range(0, cell_count, GRID_SIZE)]
    return validate_and_normalize_known_grid(rows)


def default_board() -> Board:
    return build_board(validate_and_normalize_known_grid(CLASSIC_PUZZLE))
