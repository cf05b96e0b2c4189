import unittest

from wordclock.core.constants import LETTERS
from wordclock.core.exceptions import FrozenGridError, GridConflict
from wordclock.core.models import Token
from wordclock.engine.grid import AspectRatio, GridConfig, LetterGrid


class AspectRatioTests(unittest.TestCase):
    def test_parse(self) -> None:
        self.assertEqual(AspectRatio.parse("4:3"), AspectRatio(horizontal=4, vertical=3))
        with self.assertRaises(ValueError):
            AspectRatio.parse("43")
        with self.assertRaises(ValueError):
            AspectRatio.parse("0:3")

    def test_cover_prefers_widening(self) -> None:
        ratio = AspectRatio(horizontal=16, vertical=9)
        self.assertEqual(ratio.cover(16, 9), (16, 9))
        self.assertEqual(ratio.cover(17, 9), (17, 10))
        self.assertEqual(ratio.cover(16, 10), (18, 10))
        self.assertEqual(ratio.cover(17, 10), (18, 10))


class GridConfigTests(unittest.TestCase):
    def test_fixed_width_wins(self) -> None:
        self.assertEqual(GridConfig(width=11).resolve_width([Token(0, "TWENTY")]), 11)

    def test_auto_width_fits_longest_token(self) -> None:
        tokens = [Token(0, "TEN"), Token(1, "TENT")]
        self.assertEqual(GridConfig().resolve_width(tokens), 4)

    def test_auto_width_follows_aspect_ratio(self) -> None:
        tokens = [Token(i, text) for i, text in enumerate(["ABCD", "EFGH", "IJKL", "MNOP"])]
        config = GridConfig(aspect_ratio=AspectRatio(4, 1))
        self.assertEqual(config.resolve_width(tokens), 8)


class LetterGridTests(unittest.TestCase):
    def test_write_reuses_matching_letters(self) -> None:
        grid = LetterGrid(4)
        grid.add_row()
        self.assertEqual(grid.write(0, [(0, 0), (0, 1), (0, 2), (0, 3)], "TENT"), 0)
        self.assertEqual(grid.write(1, [(0, 0), (0, 1), (0, 2)], "TEN"), 3)
        self.assertEqual(grid.assigned_count, 4)
        self.assertEqual(grid.owners(0, 1), {0, 1})
        self.assertEqual(grid.read([(0, 0), (0, 1), (0, 2), (0, 3)]), "TENT")

    def test_conflicting_letter_raises(self) -> None:
        grid = LetterGrid(3)
        grid.write(0, [(0, 0), (0, 1), (0, 2)], "ONE")
        with self.assertRaises(GridConflict):
            grid.write(1, [(0, 0), (0, 1), (0, 2)], "TWO")
        # Nothing from the rejected write is kept
        self.assertEqual(grid.read([(0, 0), (0, 1), (0, 2)]), "ONE")
        self.assertEqual(grid.owners(0, 0), {0})

    def test_out_of_bounds_write_raises(self) -> None:
        grid = LetterGrid(2)
        with self.assertRaises(GridConflict):
            grid.write(0, [(0, 1), (0, 2)], "AB")
        with self.assertRaises(GridConflict):
            grid.write(0, [(-1, 0), (0, 0)], "AB")

    def test_vertical_write_grows_height(self) -> None:
        grid = LetterGrid(2)
        grid.write(0, [(0, 1), (1, 1), (2, 1)], "OAK")
        self.assertEqual(grid.height, 3)
        self.assertIsNone(grid.letter(1, 0))
        self.assertEqual(grid.letter(2, 1), "K")

    def test_can_write_respects_forbidden_owners(self) -> None:
        grid = LetterGrid(4)
        grid.write(7, [(0, 0), (0, 1), (0, 2), (0, 3)], "TENT")
        cells = [(0, 0), (0, 1), (0, 2)]
        self.assertTrue(grid.can_write(cells, "TEN"))
        self.assertFalse(grid.can_write(cells, "TEN", frozenset({7})))
        self.assertFalse(grid.can_write(cells, "TWO"))
        self.assertTrue(grid.can_write([(1, 0), (1, 1)], "IT", frozenset({7})))

    def test_frozen_grid_rejects_writes(self) -> None:
        grid = LetterGrid(2)
        grid.write(0, [(0, 0)], "A")
        grid.freeze()
        with self.assertRaises(FrozenGridError):
            grid.write(1, [(0, 1)], "B")
        with self.assertRaises(FrozenGridError):
            grid.add_row()

    def test_display_rows_cover_and_fill(self) -> None:
        grid = LetterGrid(2)
        grid.write(0, [(0, 0), (0, 1)], "AB")
        rows = grid.display_rows(AspectRatio(1, 1), seed=3)
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0], "AB")
        self.assertTrue(all(letter in LETTERS for letter in rows[1]))
        self.assertEqual(rows, grid.display_rows(AspectRatio(1, 1), seed=3))
        self.assertEqual(grid.minimal_rows(), [["A", "B"]])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
