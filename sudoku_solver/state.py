import copy
from dataclasses import dataclass, field
from typing import Optional

from rules.rules import BLOCK_COUNT, EMPTY_VALUE, MAX_DIGIT

from .types import Grid, SolvedGrid
from .utils import block_index


@dataclass
class Cell:
    """
    One of the 81 board positions.

    A solved cell carries ``solution`` and nothing else. An unsolved cell keeps
    the digits propagation could not rule out in ``candidates``; during search
    ``candidate`` is the digit being tried and ``candidate_idx`` points at the
    next candidate to try when the search returns to this cell.
    """
    solution: Optional[int] = None
    candidates: set[int] = field(default_factory=set)
    candidate: Optional[int] = None
    candidate_idx: Optional[int] = None

    @classmethod
    def solved(cls, solution: int) -> "Cell":
        return cls(solution=solution)

    @classmethod
    def unsolved(cls) -> "Cell":
        return cls()

    @property
    def is_solved(self) -> bool:
        return self.solution is not None


@dataclass
class Block:
    """Digits already solved inside one 3x3 block."""
    solutions: set[int] = field(default_factory=set)


Board = list[list[Cell]]


def make_blocks(board: Board) -> list[Block]:
    blocks = [Block() for _ in range(BLOCK_COUNT)]

    for row_index, row in enumerate(board):
        for col_index, cell in enumerate(row):
            if cell.solution is None:
                continue
            block = blocks[block_index(row_index, col_index)]
            block.solutions.add(cell.solution)
            # Duplicate givens are caught by find_conflicts; a set of digits cannot outgrow nine.
            assert len(block.solutions) <= MAX_DIGIT, "block holds more than nine solved digits"

    return blocks


def build_board(grid: Grid) -> Board:
    return [
        [Cell.unsolved() if value is None or value == EMPTY_VALUE else Cell.solved(value) for value in row]
        for row in grid
    ]


def board_to_grid(board: Board) -> Grid:
    return [[cell.solution for cell in row] for row in board]


def board_to_solved_grid(board: Board) -> SolvedGrid:
    grid: SolvedGrid = []
    for row in board:
        solved_row = []
        for cell in row:
            assert cell.solution is not None, "board is not fully solved"
            solved_row.append(cell.solution)
        grid.append(solved_row)
    return grid


def copy_board(board: Board) -> Board:
    return copy.deepcopy(board)


def reset_search_state(board: Board) -> None:
    for row in board:
        for cell in row:
            if not cell.is_solved:
                cell.candidate = None
                cell.candidate_idx = None


def board_snapshot(board: Board) -> Grid:
    """Solved digits plus the digits the search is currently trying."""
    return [[cell.solution if cell.is_solved else cell.candidate for cell in row] for row in board]
