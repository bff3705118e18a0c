from typing import Optional

from rules.rules import DIGITS, GRID_SIZE, MAX_DIGIT

from .state import Block, Board, Cell
from .types import TraceLog
from .utils import block_index, block_positions, col_positions, row_positions, trace


def find_candidates(
    board: Board,
    blocks: list[Block],
    until_fixed_point: bool = False,
    trace_enabled: bool = False,
    trace_log: Optional[TraceLog] = None,
) -> int:
    """
    Sweep the board once in row-major order and narrow every unsolved cell to
    the digits no solved peer already uses. Cells left with a single candidate
    are solved on the spot, so cells later in the same sweep see the smaller
    search space. Earlier cells are not revisited unless ``until_fixed_point``
    is set, in which case sweeps repeat until one solves nothing.

    Returns the number of cells solved.
    """
    solved_total = 0
    sweep = 0
    while True:
        sweep += 1
        solved_in_sweep = 0
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                cell = board[row][col]
                if cell.is_solved:
                    continue

                candidates = find_cell_candidates(board, blocks, row, col)
                if len(candidates) == 1:
                    solution = next(iter(candidates))
                    found_solution(board, blocks, row, col, solution)
                    solved_in_sweep += 1
                    trace(trace_enabled, trace_log, f"Propagate {solution} at ({row}, {col})")
                else:
                    cell.candidates = candidates

        solved_total += solved_in_sweep
        trace(trace_enabled, trace_log, f"Sweep {sweep} solved {solved_in_sweep} cells")
        if not until_fixed_point or solved_in_sweep == 0:
            return solved_total


def find_cell_candidates(board: Board, blocks: list[Block], row: int, col: int) -> set[int]:
    block = blocks[block_index(row, col)]
    assert len(block.solutions) < MAX_DIGIT, f"block of ({row}, {col}) is full but the cell is unsolved"

    column_solutions = {board[other_row][col].solution for other_row in range(GRID_SIZE)}
    row_solutions = {board[row][other_col].solution for other_col in range(GRID_SIZE)}

    return {
        digit
        for digit in DIGITS
        if digit not in block.solutions and digit not in column_solutions and digit not in row_solutions
    }


def found_solution(board: Board, blocks: list[Block], row: int, col: int, solution: int) -> None:
    cell = board[row][col]
    cell.solution = solution
    cell.candidates.clear()
    cell.candidate = None
    cell.candidate_idx = None
    blocks[block_index(row, col)].solutions.add(solution)

    for r, c in row_positions(row) + col_positions(col) + block_positions(row, col):
        eliminate_candidate(board[r][c], solution)


def eliminate_candidate(cell: Cell, digit: int) -> None:
    cell.candidates.discard(digit)


def can_choose_candidate(board: Board, row: int, col: int, candidate: int) -> bool:
    """
    Check ``candidate`` against the tentative choices of cells visited earlier
    in row-major order: the same row to the left, the same column above, and
    the rows of the same block above this one. Solved peers were already
    excluded when the candidates were computed.
    """
    for other_col in range(col):
        if _holds_tentative(board[row][other_col], candidate):
            return False

    for other_row in range(row):
        if _holds_tentative(board[other_row][col], candidate):
            return False

    # Row and column peers are covered above.
    for block_row, block_col in block_positions(row, col):
        if block_row >= row or block_col == col:
            continue
        if _holds_tentative(board[block_row][block_col], candidate):
            return False

    return True


def _holds_tentative(cell: Cell, candidate: int) -> bool:
    return cell.solution is None and cell.candidate == candidate
