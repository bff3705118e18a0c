from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, StrictInt

from sudoku_solver.puzzles import parse_puzzle
from sudoku_solver.render import format_board, format_grid_rows
from sudoku_solver.solver import Sudoku
from sudoku_solver.state import board_to_solved_grid, build_board


class SolveRequest(BaseModel):
    grid: Union[str, list[list[Optional[StrictInt]]]] = Field(
        ...,
        description="Nine rows of nine values (0 or null for empty cells), or a string of 81 cells using 0 or . for empty",
    )
    until_fixed_point: bool = Field(
        default=False,
        description="Repeat candidate propagation until a sweep solves no new cell before searching.",
    )
    trace: bool = Field(default=False, description="Include solver trace output in the response")
    trace_steps: bool = Field(default=False, description="Include structured search steps for walkthrough/debugging.")
    trace_max_steps: int = Field(default=1000, ge=1, le=20000, description="Maximum number of trace steps to return.")
    max_seconds: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Time budget for the backtracking search. Use null to search until it completes.",
    )


class TraceStepResponse(BaseModel):
    event: str
    message: str
    depth: int
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    candidates: Optional[list[int]] = None
    grid: list[list[Optional[int]]]


class SolveStats(BaseModel):
    givens: int
    propagated_cells: int
    searched_cells: int
    nodes_visited: int
    backtracks: int


class SolveResponse(BaseModel):
    solution: list[list[int]]
    grid_rows: list[str]
    grid_text: str
    stats: SolveStats
    trace: Optional[list[str]] = None
    trace_steps: Optional[list[TraceStepResponse]] = None
    trace_truncated: bool = False


app = FastAPI(
    title="Sudoku Solver API",
    description="Solve 9x9 Sudoku puzzles with candidate propagation followed by backtracking search.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest) -> SolveResponse:
    try:
        grid = parse_puzzle(request.grid)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    trace_log: list[str] = []
    trace_steps: list[dict[str, object]] = []
    trace_meta = {"truncated": False}
    sudoku = Sudoku(build_board(grid))
    try:
        solved_board = sudoku.solve(
            until_fixed_point=request.until_fixed_point,
            trace_enabled=request.trace,
            trace_log=trace_log,
            trace_steps=trace_steps if request.trace_steps else None,
            trace_meta=trace_meta,
            trace_max_steps=request.trace_max_steps,
            max_seconds=request.max_seconds,
        )
    except TimeoutError as exc:
        raise HTTPException(status_code=408, detail=str(exc)) from exc

    if solved_board is None:
        raise HTTPException(status_code=422, detail="No solution found")

    solution = board_to_solved_grid(solved_board)
    return SolveResponse(
        solution=solution,
        grid_rows=format_grid_rows(solution),
        grid_text=format_board(solution),
        stats=SolveStats(**sudoku.stats),
        trace=trace_log if request.trace else None,
        trace_steps=trace_steps if request.trace_steps else None,
        trace_truncated=trace_meta["truncated"],
    )
