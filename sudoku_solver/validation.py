from typing import Optional

from rules.rules import EMPTY_VALUE, GRID_SIZE, MAX_DIGIT, MIN_DIGIT

from .types import Conflict, Grid
from .utils import block_index


def validate_and_normalize_known_grid(known_grid: Optional[Grid]) -> Grid:
    if known_grid is None:
        return [[None for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]

    if not isinstance(known_grid, list) or len(known_grid) != GRID_SIZE:
        raise ValueError(f"grid must be a list of {GRID_SIZE} rows")

    normalized_grid: Grid = []
    for row in known_grid:
        if not isinstance(row, list) or len(row) != GRID_SIZE:
            raise ValueError(f"every grid row must be a list of {GRID_SIZE} values")

        normalized_row = []
        for value in row:
            if value is None or value == EMPTY_VALUE:
                normalized_row.append(None)
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("grid entries must be integers or None")
            if value < MIN_DIGIT or value > MAX_DIGIT:
                raise ValueError(f"grid digits must be between {MIN_DIGIT} and {MAX_DIGIT}, or {EMPTY_VALUE} for empty")
            normalized_row.append(value)

        normalized_grid.append(normalized_row)

    return normalized_grid


def find_conflicts(grid: Grid) -> list[Conflict]:
    """
    Return every (unit, unit index, digit) where a given digit appears more
    than once. Units are reported as "row", "column" or "block".
    """
    conflicts: list[Conflict] = []
    seen: dict[tuple[str, int], set[int]] = {}

    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            value = grid[r][c]
            if value is None or value == EMPTY_VALUE:
                continue
            for unit in (("row", r), ("column", c), ("block", block_index(r, c))):
                digits = seen.setdefault(unit, set())
                if value in digits:
                    conflict = (unit[0], unit[1], value)
                    if conflict not in conflicts:
                        conflicts.append(conflict)
                else:
                    digits.add(value)

    return conflicts
