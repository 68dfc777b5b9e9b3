import unittest

from kangourou.core.models import Move
from kangourou.engine.board import KnotBoard
from kangourou.engine.validator import SolutionValidator

GOOD = [Move(0, 0, 2, 0), Move(0, 0, 2, 3), Move(1, 0, 2, 2), Move(0, 1, 2, 1)]


class SolutionValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = KnotBoard.from_text("XX\nXX")
        self.validator = SolutionValidator(self.board)

    def assertRejected(self, solution, counts, fragment: str) -> None:
        with self.assertLogs("kangourou.engine.validator", level="ERROR"):
            result = self.validator.validate(solution, counts)
        self.assertFalse(result.ok)
        self.assertIn(fragment, result.messages[0])

    def test_accepts_exact_tiling(self) -> None:
        result = self.validator.validate(GOOD, [0, 0, 4, 0, 0])
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_rejects_missing_cells(self) -> None:
        self.assertRejected(GOOD[:3], [0, 0, 3, 0, 0], "left uncovered")

    def test_rejects_overlap(self) -> None:
        self.assertRejected(GOOD + [Move(0, 0, 2, 0)], [0, 0, 5, 0, 0], "overlaps")

    def test_rejects_count_mismatch(self) -> None:
        self.assertRejected(GOOD, [0, 0, 3, 1, 0], "differ from requested")

    def test_rejects_spill_off_shape(self) -> None:
        board = KnotBoard.from_text("XX\nX ")
        validator = SolutionValidator(board)
        with self.assertLogs("kangourou.engine.validator", level="ERROR"):
            result = validator.validate([Move(1, 0, 2, 2)], [0, 0, 1, 0, 0])
        self.assertFalse(result.ok)
        self.assertIn("spills off the shape", result.messages[0])

    def test_rejects_wrapping_placement(self) -> None:
        self.assertRejected([Move(1, 0, 2, 3)], [0, 0, 1, 0, 0], "right board edge")

    def test_rejects_unknown_rotation(self) -> None:
        # Piece three is point symmetric and only has rotations 0 and 1.
        self.assertRejected([Move(0, 0, 3, 2)], [0, 0, 0, 1, 0], "unknown rotation")

    def test_rejects_anchor_outside_shape(self) -> None:
        self.assertRejected([Move(2, 0, 0, 0)], [1, 0, 0, 0, 0], "outside the shape")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
