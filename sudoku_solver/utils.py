from typing import Optional

from rules.rules import BLOCK_COUNT, BLOCK_SIZE, GRID_SIZE

from .types import Position, TraceLog


def block_index(row: int, col: int) -> int:
    index = (row // BLOCK_SIZE) * BLOCK_SIZE + col // BLOCK_SIZE
    assert index < BLOCK_COUNT
    return index


def block_origin(row: int, col: int) -> Position:
    return (row // BLOCK_SIZE) * BLOCK_SIZE, (col // BLOCK_SIZE) * BLOCK_SIZE


def row_positions(row: int) -> list[Position]:
    return [(row, col) for col in range(GRID_SIZE)]


def col_positions(col: int) -> list[Position]:
    return [(row, col) for row in range(GRID_SIZE)]


def block_positions(row: int, col: int) -> list[Position]:
    start_row, start_col = block_origin(row, col)
    return [
        (block_row, block_col)
        for block_row in range(start_row, start_row + BLOCK_SIZE)
        for block_col in range(start_col, start_col + BLOCK_SIZE)
    ]


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        print(message)


def indent(depth: int) -> str:
    return "  " * depth
