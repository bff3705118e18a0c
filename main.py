import argparse
import json
from pathlib import Path
from typing import Any, Optional

from sudoku_solver.puzzles import CLASSIC_PUZZLE, parse_puzzle
from sudoku_solver.render import format_board
from sudoku_solver.solver import solve_sudoku
from sudoku_solver.types import Grid, SolvedGrid


def run(known_grid: Grid, until_fixed_point: bool = False) -> Optional[SolvedGrid]:
    # boundary validation
    grid = parse_puzzle(known_grid)
    return solve_sudoku(known_grid=grid, until_fixed_point=until_fixed_point)


def run_with_trace(known_grid: Grid, until_fixed_point: bool = False) -> tuple[Optional[SolvedGrid], list[str]]:
    trace_log: list[str] = []
    result = solve_sudoku(
        known_grid=parse_puzzle(known_grid),
        until_fixed_point=until_fixed_point,
        trace=True,
        trace_log=trace_log,
    )
    return result, trace_log


def load_puzzle_from_file(input_path: str) -> tuple[Grid, bool]:
    path = Path(input_path)
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"input file not found: {input_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"input file is not valid JSON: {input_path}") from exc

    if not isinstance(payload, dict):
        raise ValueError("JSON root must be an object")

    grid = payload.get("grid")
    until_fixed_point = payload.get("until_fixed_point", False)
    if grid is None:
        raise ValueError("JSON must include 'grid'")
    if not isinstance(until_fixed_point, bool):
        raise ValueError("'until_fixed_point' must be true or false")

    return parse_puzzle(grid), until_fixed_point


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve a 9x9 Sudoku puzzle")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="Path to a JSON file with a 'grid' of 9 rows (0 or null for empty cells)")
    source.add_argument("--puzzle", help="81 cells as a string, using 0 or . for empty cells")
    source.add_argument("--classic", action="store_true", help="Solve the built-in example puzzle")
    parser.add_argument("--fixed-point", action="store_true", help="Repeat propagation until it stops solving cells")
    parser.add_argument("--trace", action="store_true", help="Include solver trace output")
    parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")
    return parser


if __name__ == "__main__":
    args = _build_parser().parse_args()

    try:
        until_fixed_point = args.fixed_point
        if args.input:
            known_grid, file_fixed_point = load_puzzle_from_file(args.input)
            until_fixed_point = until_fixed_point or file_fixed_point
        elif args.puzzle:
            known_grid = parse_puzzle(args.puzzle)
        else:
            known_grid = parse_puzzle(CLASSIC_PUZZLE)

        trace_log: Optional[list[str]] = None
        if args.trace:
            solution, trace_log = run_with_trace(known_grid, until_fixed_point=until_fixed_point)
        else:
            solution = run(known_grid, until_fixed_point=until_fixed_point)
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")

    if args.format == "json":
        output: dict[str, Any] = {"solution": solution}
        if trace_log is not None:
            output["trace"] = trace_log
        print(json.dumps(output, indent=2))
    else:
        if trace_log is not None:
            print("\n".join(trace_log))
        print(format_board(known_grid))
        print(format_board(solution) if solution is not None else "No solution found.")

    if solution is None:
        raise SystemExit(1)
