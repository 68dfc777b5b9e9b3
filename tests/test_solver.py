import unittest
from unittest import mock

from kangourou.core.constants import DEFAULT_PIECE_COUNTS
from kangourou.core.exceptions import InvalidInput, ValidationError
from kangourou.core.models import Move
from kangourou.engine.board import KnotBoard
from kangourou.engine.solver import KnotSolver, SolverConfig, solve_board
from kangourou.engine.validator import SolutionValidator, ValidationResult


class SolverScenarioTests(unittest.TestCase):
    def setUp(self) -> None:
        self.square = KnotBoard(2, 2, [(0, 0), (1, 0), (0, 1), (1, 1)])

    def test_two_by_two_with_four_piece_twos(self) -> None:
        solutions = KnotSolver(self.square).solve([0, 0, 4, 0, 0])
        self.assertGreaterEqual(len(solutions), 1)
        validator = SolutionValidator(self.square)
        for solution in solutions:
            self.assertEqual(len(solution), 4)
            result = validator.validate(solution, [0, 0, 4, 0, 0])
            self.assertTrue(result.ok, result.messages)

    def test_first_solution_follows_enumeration_order(self) -> None:
        solutions = KnotSolver(self.square).solve([0, 0, 4, 0, 0])
        self.assertEqual(
            solutions[0],
            [Move(0, 0, 2, 0), Move(0, 0, 2, 3), Move(1, 0, 2, 2), Move(0, 1, 2, 1)],
        )

    def test_footprints_partition_the_board(self) -> None:
        for solution in KnotSolver(self.square).solve([0, 0, 4, 0, 0]):
            covered = 0
            for move in solution:
                mask = self.square.placement_mask(move.piece, move.rotation, move.x, move.y)
                self.assertEqual(mask & covered, 0)
                covered |= mask
            self.assertEqual(covered, self.square.mask)

    def test_search_is_deterministic(self) -> None:
        board = KnotBoard.from_text("XXX\nXXX")
        first = KnotSolver(board).solve([0, 0, 3, 3, 0])
        second = KnotSolver(board).solve([0, 0, 3, 3, 0])
        self.assertEqual(first, second)

    def test_each_tiling_is_reported_once(self) -> None:
        board = KnotBoard.from_text("XXX\nXXX")
        solutions = KnotSolver(board).solve([0, 0, 3, 3, 0])
        tilings = {frozenset(solution) for solution in solutions}
        self.assertEqual(len(tilings), len(solutions))

    def test_moves_at_one_tile_never_repeat_a_combination(self) -> None:
        board = KnotBoard.from_text("XXX\nXXX")
        for solution in KnotSolver(board).solve([0, 0, 3, 3, 0]):
            previous = None
            for move in solution:
                if previous is not None and (previous.x, previous.y) == (move.x, move.y):
                    self.assertLess(
                        (previous.piece, previous.rotation), (move.piece, move.rotation)
                    )
                previous = move

    def test_piece_counts_are_respected(self) -> None:
        board = KnotBoard.from_text("XXX\nXXX")
        for solution in KnotSolver(board).solve([0, 0, 3, 3, 0]):
            pieces = [move.piece for move in solution]
            self.assertEqual(pieces.count(2), 3)
            self.assertEqual(pieces.count(3), 3)
            self.assertEqual(len(pieces), 6)

    def test_default_preset_tiles_an_eighty_bit_board(self) -> None:
        board = KnotBoard.from_text(" XXX\n X X\nXX XX\nXXXXX")
        self.assertEqual(board.fine_cell_count, 56)
        self.assertGreater(board.mask.bit_length(), 64)

        solutions = KnotSolver(board, SolverConfig(validate_solutions=True)).solve()

        self.assertEqual(len(solutions), 1)
        self.assertEqual(len(solutions[0]), 16)
        first = solutions[0][0]
        self.assertEqual((first.x, first.y), (1, 0))
        pieces = [move.piece for move in solutions[0]]
        self.assertEqual([pieces.count(p) for p in range(5)], list(DEFAULT_PIECE_COUNTS))


class SolverEdgeCaseTests(unittest.TestCase):
    def test_area_mismatch_returns_empty_without_search(self) -> None:
        board = KnotBoard.from_text("XX\nXX")
        solver = KnotSolver(board)
        with mock.patch.object(solver, "_search") as search:
            with self.assertLogs("kangourou.engine.solver", level="WARNING") as logs:
                self.assertEqual(solver.solve([0, 0, 0, 0, 0]), [])
        search.assert_not_called()
        self.assertIn("16 tiles need to be covered, but the pieces cover 0", logs.output[0])
        self.assertEqual(solver.last_stats.nodes, 0)

    def test_empty_board_has_exactly_the_empty_solution(self) -> None:
        for board in (KnotBoard(0, 0, []), KnotBoard(3, 2, []), KnotBoard.from_text("  \n ")):
            with self.subTest(board=board):
                self.assertEqual(KnotSolver(board).solve([0, 0, 0, 0, 0]), [[]])

    def test_no_tiling_after_exhaustive_search(self) -> None:
        board = KnotBoard.from_text("X")
        solver = KnotSolver(board)
        self.assertEqual(solver.solve([2, 0, 0, 0, 0]), [])
        self.assertGreaterEqual(solver.last_stats.nodes, 1)

    def test_pieces_are_never_mirrored(self) -> None:
        # Two piece threes would fill a vertical domino only if one were flipped.
        board = KnotBoard.from_text("X\nX")
        self.assertEqual(KnotSolver(board).solve([0, 0, 0, 2, 0]), [])

    def test_default_counts_come_from_config(self) -> None:
        board = KnotBoard.from_text("XX\nXX")
        self.assertEqual(tuple(SolverConfig().piece_counts), DEFAULT_PIECE_COUNTS)
        with self.assertLogs("kangourou.engine.solver", level="WARNING"):
            self.assertEqual(KnotSolver(board).solve(), [])
        configured = KnotSolver(board, SolverConfig(piece_counts=(0, 0, 4, 0, 0)))
        self.assertTrue(configured.solve())

    def test_invalid_piece_counts(self) -> None:
        solver = KnotSolver(KnotBoard.from_text("XX\nXX"))
        for counts in ([1, 2], [0, 0, 4, 0, 0, 0], [-1, 0, 0, 0, 0], [0, 0, 4.0, 0, 0], "00400", 7):
            with self.subTest(counts=counts):
                with self.assertRaises(InvalidInput):
                    solver.solve(counts)

    def test_validating_solver_accepts_its_own_solutions(self) -> None:
        board = KnotBoard.from_text("XXX\nXXX")
        plain = KnotSolver(board).solve([0, 0, 3, 3, 0])
        checked = KnotSolver(board, SolverConfig(validate_solutions=True)).solve([0, 0, 3, 3, 0])
        self.assertEqual(plain, checked)

    def test_solve_board_helper(self) -> None:
        board = KnotBoard.from_text("XX\nXX")
        self.assertEqual(solve_board(board, [0, 0, 4, 0, 0]), KnotSolver(board).solve([0, 0, 4, 0, 0]))

    def test_stats_are_recorded(self) -> None:
        solver = KnotSolver(KnotBoard.from_text("XX\nXX"))
        solutions = solver.solve([0, 0, 4, 0, 0])
        stats = solver.last_stats
        self.assertEqual(stats.solutions, len(solutions))
        self.assertGreaterEqual(stats.placements, 4)
        self.assertGreater(stats.nodes, stats.placements)

    def test_stats_survive_a_failed_validation(self) -> None:
        solver = KnotSolver(KnotBoard.from_text("XX\nXX"), SolverConfig(validate_solutions=True))
        solver.solve([0, 0, 4, 0, 0])
        previous = solver.last_stats

        rejected = ValidationResult(ok=False, messages=["rejected"])
        with mock.patch.object(solver.validator, "validate", return_value=rejected):
            with self.assertRaises(ValidationError):
                solver.solve([0, 0, 4, 0, 0])

        self.assertIsNot(solver.last_stats, previous)
        self.assertGreaterEqual(solver.last_stats.placements, 4)
        self.assertEqual(solver.last_stats.solutions, 0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
