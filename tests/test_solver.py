import copy
import unittest

from rules.rules import DIGITS
from sudoku_solver.puzzles import CLASSIC_PUZZLE, default_board
from sudoku_solver.solver import Sudoku, solve_sudoku
from sudoku_solver.state import board_to_solved_grid, build_board
from sudoku_solver.validation import validate_and_normalize_known_grid


# Rows 0-2 are blank, so every blank cell keeps three candidates after
# propagation and the search has to back up out of wrong guesses.
THREE_BLANK_ROWS = [
    [0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0],
    [2, 3, 4, 5, 6, 7, 8, 9, 1],
    [5, 6, 7, 8, 9, 1, 2, 3, 4],
    [8, 9, 1, 2, 3, 4, 5, 6, 7],
    [3, 4, 5, 6, 7, 8, 9, 1, 2],
    [6, 7, 8, 9, 1, 2, 3, 4, 5],
    [9, 1, 2, 3, 4, 5, 6, 7, 8],
]


class TestSolveSudoku(unittest.TestCase):
    def test_solves_classic_puzzle(self) -> None:
        result = solve_sudoku(known_grid=CLASSIC_PUZZLE)
        self.assertIsNotNone(result)
        self.assert_sudoku_constraints(result)
        self.assert_givens_preserved(CLASSIC_PUZZLE, result)

    def test_solving_is_deterministic(self) -> None:
        first = solve_sudoku(known_grid=CLASSIC_PUZZLE)
        second = solve_sudoku(known_grid=CLASSIC_PUZZLE)
        self.assertEqual(first, second)

    def test_solves_with_fixed_point_propagation(self) -> None:
        result = solve_sudoku(known_grid=CLASSIC_PUZZLE, until_fixed_point=True)
        self.assertIsNotNone(result)
        self.assert_sudoku_constraints(result)
        self.assert_givens_preserved(CLASSIC_PUZZLE, result)

    def test_solves_empty_grid(self) -> None:
        result = solve_sudoku(known_grid=None)
        self.assertIsNotNone(result)
        self.assert_sudoku_constraints(result)

    def test_returns_fully_known_grid_when_already_solved(self) -> None:
        solved = [
            [1, 2, 3, 4, 5, 6, 7, 8, 9],
            [4, 5, 6, 7, 8, 9, 1, 2, 3],
            [7, 8, 9, 1, 2, 3, 4, 5, 6],
        ] + copy.deepcopy(THREE_BLANK_ROWS[3:])
        self.assertEqual(solve_sudoku(known_grid=solved), solved)

    def test_backtracking_recovers_from_wrong_guesses(self) -> None:
        sudoku = Sudoku(build_board(validate_and_normalize_known_grid(THREE_BLANK_ROWS)))
        trace_steps: list[dict[str, object]] = []
        solved_board = sudoku.solve(trace_steps=trace_steps, trace_max_steps=20000)

        self.assertIsNotNone(solved_board)
        result = board_to_solved_grid(solved_board)
        self.assert_sudoku_constraints(result)
        self.assert_givens_preserved(THREE_BLANK_ROWS, result)
        self.assertEqual(sudoku.stats["propagated_cells"], 0)
        self.assertEqual(sudoku.stats["searched_cells"], 27)
        self.assertGreater(sudoku.stats["backtracks"], 0)
        self.assertTrue(any(step["event"] == "backtrack" for step in trace_steps))
        self.assertTrue(any(step["event"] == "reject_value" for step in trace_steps))

    def test_returns_none_for_duplicate_in_row(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[0][0] = 5
        grid[0][8] = 5
        self.assertIsNone(solve_sudoku(known_grid=grid))

    def test_returns_none_for_duplicate_in_column(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[0][4] = 3
        grid[7][4] = 3
        self.assertIsNone(solve_sudoku(known_grid=grid))

    def test_returns_none_for_duplicate_in_block(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[3][3] = 7
        grid[5][5] = 7
        self.assertIsNone(solve_sudoku(known_grid=grid))

    def test_returns_none_when_a_cell_has_no_candidates(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
        grid[3][0] = 9
        self.assertIsNone(solve_sudoku(known_grid=grid))

    def test_trace_mode_records_search_steps(self) -> None:
        trace_log: list[str] = []
        result = solve_sudoku(known_grid=THREE_BLANK_ROWS, trace=True, trace_log=trace_log)
        self.assertIsNotNone(result)
        self.assertTrue(any("Select cell" in line for line in trace_log))
        self.assertTrue(any("Try value" in line for line in trace_log))
        self.assertTrue(any("Backtrack" in line for line in trace_log))

    def test_trace_mode_reports_conflicts(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[2][1] = 4
        grid[2][6] = 4
        trace_log: list[str] = []
        self.assertIsNone(solve_sudoku(known_grid=grid, trace=True, trace_log=trace_log))
        self.assertIn("Conflict: digit 4 repeats in row 2", trace_log)

    def test_trace_steps_are_truncated(self) -> None:
        sudoku = Sudoku(build_board(validate_and_normalize_known_grid(THREE_BLANK_ROWS)))
        trace_steps: list[dict[str, object]] = []
        trace_meta = {"truncated": False}
        sudoku.solve(trace_steps=trace_steps, trace_meta=trace_meta, trace_max_steps=5)
        self.assertEqual(len(trace_steps), 5)
        self.assertTrue(trace_meta["truncated"])

    def test_stop_request_interrupts_search(self) -> None:
        sudoku = Sudoku(build_board(validate_and_normalize_known_grid(THREE_BLANK_ROWS)))
        with self.assertRaises(TimeoutError):
            sudoku.solve(stop_requested=lambda: True)

    def test_solve_after_interrupted_search_matches_fresh_solve(self) -> None:
        board = build_board(validate_and_normalize_known_grid(THREE_BLANK_ROWS))
        expected = Sudoku(board).solve()

        sudoku = Sudoku(board)
        advances = [0]

        def stop_after_a_few_advances() -> bool:
            advances[0] += 1
            return advances[0] > 12

        with self.assertRaises(TimeoutError):
            sudoku.solve(stop_requested=stop_after_a_few_advances)
        self.assertTrue(all(cell.candidate_idx is None for row in sudoku.board for cell in row))

        retried = sudoku.solve()
        self.assertIsNotNone(retried)
        self.assertEqual(retried, expected)
        self.assert_sudoku_constraints(board_to_solved_grid(retried))

    def test_zero_time_budget_interrupts_search(self) -> None:
        with self.assertRaises(TimeoutError):
            solve_sudoku(known_grid=THREE_BLANK_ROWS, max_seconds=0.0)

    def test_engine_does_not_mutate_input_board(self) -> None:
        board = default_board()
        before = copy.deepcopy(board)
        Sudoku(board).solve()
        self.assertEqual(board, before)

    def test_stats_count_givens(self) -> None:
        sudoku = Sudoku(default_board())
        sudoku.solve()
        self.assertEqual(sudoku.stats["givens"], 36)
        self.assertEqual(sudoku.stats["givens"] + sudoku.stats["propagated_cells"] + sudoku.stats["searched_cells"], 81)

    def test_raises_when_grid_has_wrong_shape(self) -> None:
        with self.assertRaises(ValueError):
            solve_sudoku(known_grid=[[0] * 9 for _ in range(8)])

    def test_raises_when_grid_value_out_of_range(self) -> None:
        grid = [[0] * 9 for _ in range(9)]
        grid[4][4] = 10
        with self.assertRaises(ValueError):
            solve_sudoku(known_grid=grid)

    def assert_sudoku_constraints(self, grid: list[list[int]]) -> None:
        expected = set(DIGITS)
        for row in grid:
            self.assertEqual(set(row), expected)
        for column in zip(*grid):
            self.assertEqual(set(column), expected)
        for block_row in range(0, 9, 3):
            for block_col in range(0, 9, 3):
                block = {grid[r][c] for r in range(block_row, block_row + 3) for c in range(block_col, block_col + 3)}
                self.assertEqual(block, expected)

    def assert_givens_preserved(self, puzzle: list[list[int]], grid: list[list[int]]) -> None:
        for r in range(9):
            for c in range(9):
                if puzzle[r][c]:
                    self.assertEqual(grid[r][c], puzzle[r][c])


if __name__ == "__main__":
    unittest.main()
