import time
from typing import Callable, Optional

from .constraints import find_candidates
from .search import guess_solutions, unsolved_cells, use_final_candidates
from .state import (
    Block,
    Board,
    board_to_grid,
    board_to_solved_grid,
    build_board,
    copy_board,
    make_blocks,
    reset_search_state,
)
from .types import Grid, ProgressState, SolvedGrid, TraceLog, TraceStep
from .utils import trace
from .validation import find_conflicts, validate_and_normalize_known_grid


class Sudoku:
    """
    Solving engine for one 9x9 board.

    The board handed to the constructor is copied; ``solve`` mutates only the
    engine's own copy and returns a further copy of the solved board.
    """

    def __init__(self, board: Board) -> None:
        self.board: Board = copy_board(board)
        self.blocks: list[Block] = make_blocks(self.board)
        self.stats: ProgressState = {}

    def solve(
        self,
        until_fixed_point: bool = False,
        trace_enabled: bool = False,
        trace_log: Optional[TraceLog] = None,
        trace_steps: Optional[list[TraceStep]] = None,
        trace_meta: Optional[dict[str, bool]] = None,
        trace_max_steps: int = 1000,
        max_seconds: Optional[float] = None,
        stop_requested: Optional[Callable[[], bool]] = None,
    ) -> Optional[Board]:
        """Return the solved board, or None when the puzzle has no solution."""
        self.stats = {
            "givens": sum(1 for row in self.board for cell in row if cell.is_solved),
            "propagated_cells": 0,
            "searched_cells": 0,
            "nodes_visited": 0,
            "backtracks": 0,
        }

        conflicts = find_conflicts(board_to_grid(self.board))
        if conflicts:
            for unit, unit_index, digit in conflicts:
                trace(trace_enabled, trace_log, f"Conflict: digit {digit} repeats in {unit} {unit_index}")
            return None

        self.stats["propagated_cells"] = find_candidates(
            self.board,
            self.blocks,
            until_fixed_point=until_fixed_point,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
        )

        positions = unsolved_cells(self.board)
        self.stats["searched_cells"] = len(positions)
        trace(trace_enabled, trace_log, f"Initialized search: unsolved_cells={len(positions)}")

        deadline = None if max_seconds is None else time.monotonic() + max_seconds
        # Cursors left behind by an interrupted run would skip untried digits.
        reset_search_state(self.board)
        try:
            found = guess_solutions(
                board=self.board,
                positions=positions,
                trace_enabled=trace_enabled,
                trace_log=trace_log,
                trace_steps=trace_steps,
                trace_meta=trace_meta,
                trace_max_steps=trace_max_steps,
                deadline=deadline,
                stop_requested=stop_requested,
                progress_state=self.stats,
            )
        except TimeoutError:
            reset_search_state(self.board)
            raise

        if not found:
            trace(trace_enabled, trace_log, "No solution found")
            return None

        use_final_candidates(self.board)
        return copy_board(self.board)


def solve_sudoku(
    known_grid: Optional[Grid] = None,
    until_fixed_point: bool = False,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    max_seconds: Optional[float] = None,
) -> Optional[SolvedGrid]:
    grid = validate_and_normalize_known_grid(known_grid)
    sudoku = Sudoku(build_board(grid))
    solved_board = sudoku.solve(
        until_fixed_point=until_fixed_point,
        trace_enabled=trace,
        trace_log=trace_log,
        max_seconds=max_seconds,
    )
    if solved_board is None:
        return None
    return board_to_solved_grid(solved_board)
