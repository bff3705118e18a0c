import time
from typing import Callable, Optional

from rules.rules import GRID_SIZE

from .constraints import can_choose_candidate
from .state import Board, board_snapshot
from .types import Position, ProgressState, TraceLog, TraceStep
from .utils import indent, trace


def unsolved_cells(board: Board) -> list[Position]:
    return [(row, col) for row in range(GRID_SIZE) for col in range(GRID_SIZE) if not board[row][col].is_solved]


def guess_solutions(
    board: Board,
    positions: list[Position],
    index: int = 0,
    trace_enabled: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, bool]] = None,
    trace_max_steps: int = 1000,
    deadline: Optional[float] = None,
    stop_requested: Optional[Callable[[], bool]] = None,
    progress_state: Optional[ProgressState] = None,
) -> bool:
    """
    Depth-first search over ``positions`` in their fixed order.

    Every unsolved cell keeps its tentative digit in ``candidate`` and the
    position of the next digit to try in ``candidate_idx``. The cursor moves
    before descending, so coming back to a cell resumes with its next
    candidate. A cell that runs out of candidates resets both fields and hands
    control back to the previous cell. Running out at the first cell means the
    puzzle has no solution.

    Raises TimeoutError when ``deadline`` passes or ``stop_requested`` returns
    True.
    """
    depth = index

    def record_step(
        event: str,
        message: str,
        row: Optional[int] = None,
        col: Optional[int] = None,
        value: Optional[int] = None,
        candidates: Optional[list[int]] = None,
    ) -> None:
        if trace_steps is None:
            return
        if len(trace_steps) >= trace_max_steps:
            if trace_meta is not None:
                trace_meta["truncated"] = True
            return
        trace_steps.append(
            {
                "event": event,
                "message": message,
                "depth": depth,
                "row": row,
                "col": col,
                "value": value,
                "candidates": candidates,
                "grid": board_snapshot(board),
            }
        )

    if index == len(positions):
        message = f"{indent(depth)}All {len(positions)} unsolved cells assigned"
        trace(trace_enabled, trace_log, message)
        record_step("solved", message)
        return True

    row, col = positions[index]
    cell = board[row][col]
    ordered_candidates = sorted(cell.candidates)
    message = f"{indent(depth)}Select cell ({row}, {col}) with {len(ordered_candidates)} candidates"
    trace(trace_enabled, trace_log, message)
    record_step("select_cell", message, row=row, col=col, candidates=ordered_candidates)

    cursor = cell.candidate_idx if cell.candidate_idx is not None else 0
    while cursor < len(ordered_candidates):
        if stop_requested is not None and stop_requested():
            raise TimeoutError("search was stopped before a solution was found")
        if deadline is not None and time.monotonic() >= deadline:
            raise TimeoutError("search ran out of time before a solution was found")
        if progress_state is not None:
            progress_state["nodes_visited"] = progress_state.get("nodes_visited", 0) + 1

        candidate = ordered_candidates[cursor]
        cell.candidate = candidate
        cursor += 1
        cell.candidate_idx = cursor

        if not can_choose_candidate(board, row, col, candidate):
            message = f"{indent(depth)}Reject value {candidate} at ({row}, {col})"
            trace(trace_enabled, trace_log, message)
            record_step("reject_value", message, row=row, col=col, value=candidate)
            continue

        message = f"{indent(depth)}Try value {candidate} at ({row}, {col})"
        trace(trace_enabled, trace_log, message)
        record_step("try_value", message, row=row, col=col, value=candidate)

        if guess_solutions(
            board=board,
            positions=positions,
            index=index + 1,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            deadline=deadline,
            stop_requested=stop_requested,
            progress_state=progress_state,
        ):
            return True

    cell.candidate = None
    cell.candidate_idx = None
    if progress_state is not None:
        progress_state["backtracks"] = progress_state.get("backtracks", 0) + 1

    message = f"{indent(depth)}Backtrack from ({row}, {col}): no candidates left"
    trace(trace_enabled, trace_log, message)
    record_step("backtrack", message, row=row, col=col)
    return False


def use_final_candidates(board: Board) -> None:
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            cell = board[row][col]
            if cell.is_solved:
                continue
            assert cell.candidate is not None, f"no solution or chosen candidate at ({row}, {col})"
            cell.solution = cell.candidate
            cell.candidates.clear()
            cell.candidate = None
            cell.candidate_idx = None
