import unittest
from pathlib import Path
import sys
import numpy as np

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from LYRA.src.core.overlay import PEAK_COLORS, OverlayState, color_of, peak_shapes
from LYRA.src.core.selection import SelectionTracker
from LYRA.src.core.types import CandidateResult

RESULTS = (
    CandidateResult("a", "Alpha", 0.9, (1000.0, 1001.0)),
    CandidateResult("b", "Beta", 0.7, (1500.0,)),
    CandidateResult("c", "Gamma", 0.2, (2000.0, 2001.0, 2002.0)),
)


class TestOverlay(unittest.TestCase):
    def test_toggle_on_off_on(self):
        state = OverlayState.for_results(RESULTS)
        state, first = state.toggle(0)
        state, second = state.toggle(1)
        state, third = state.toggle(0)

        self.assertTrue(first.shown)
        self.assertTrue(second.shown)
        self.assertFalse(third.shown)
        self.assertIsNone(third.color)
        self.assertEqual(state.shown_ids, ("b",))
        self.assertEqual(third.shapes, peak_shapes((1500.0,), PEAK_COLORS[1]))
        self.assertEqual(state.shapes(), third.shapes)

    def test_shape_geometry(self):
        state, update = OverlayState.for_results(RESULTS).toggle(0)
        self.assertEqual(update.color, "#ff7f0e")
        self.assertEqual(len(update.shapes), 2)
        for shape, mass in zip(update.shapes, (1000.0, 1001.0)):
            self.assertEqual((shape.x0, shape.x1), (mass, mass))
            self.assertEqual((shape.y0, shape.y1), (0.0, 1.0))
            self.assertEqual(shape.yref, "paper")
            self.assertEqual(shape.color, "#ff7f0e")

    def test_shapes_follow_registry_order(self):
        state = OverlayState.for_results(RESULTS)
        state, _ = state.toggle(2)
        state, update = state.toggle(0)
        self.assertEqual(state.shown_ids, ("c", "a"))
        self.assertEqual([s.x0 for s in update.shapes], [2000.0, 2001.0, 2002.0, 1000.0, 1001.0])

    def test_shown_iff_odd_toggle_count(self):
        rng = np.random.default_rng(3)
        state = OverlayState.for_results(RESULTS)
        counts = [0] * len(RESULTS)
        for index in rng.integers(0, len(RESULTS), 50):
            state, _ = state.toggle(int(index))
            counts[index] += 1
            for i, res in enumerate(RESULTS):
                self.assertEqual(state.is_shown(res.id), counts[i] % 2 == 1)

    def test_toggle_does_not_mutate_previous_state(self):
        before = OverlayState.for_results(RESULTS)
        after, _ = before.toggle(1)
        self.assertEqual(before.shown_ids, ())
        self.assertEqual(before.shapes(), ())
        self.assertEqual(after.shown_ids, ("b",))

    def test_new_results_clear_overlay(self):
        state, _ = OverlayState.for_results(RESULTS).toggle(0)
        self.assertTrue(state.is_shown("a"))

        fresh = OverlayState.for_results((RESULTS[1], RESULTS[0]))
        self.assertEqual(fresh.shown_ids, ())
        self.assertEqual(fresh.shapes(), ())

        fresh, update = fresh.toggle(1)
        self.assertEqual(update.candidate_id, "a")
        self.assertEqual(update.color, color_of(1))
        self.assertEqual(fresh.shown_ids, ("a",))
        self.assertEqual(update.shapes, peak_shapes(RESULTS[0].peaks, color_of(1)))

    def test_index_out_of_range(self):
        state = OverlayState.for_results(RESULTS)
        with self.assertRaises(IndexError):
            state.toggle(3)
        with self.assertRaises(IndexError):
            state.toggle(-1)
        with self.assertRaises(IndexError):
            OverlayState().toggle(0)

    def test_color_cycle(self):
        self.assertEqual(color_of(0), color_of(len(PEAK_COLORS)))
        self.assertEqual(color_of(8), "#17becf")
        self.assertEqual(len(set(color_of(i) for i in range(len(PEAK_COLORS)))), len(PEAK_COLORS))

    def test_candidate_without_peaks(self):
        results = (CandidateResult("z", "Empty", 0.1, ()),)
        state, update = OverlayState.for_results(results).toggle(0)
        self.assertTrue(update.shown)
        self.assertEqual(update.shapes, ())
        self.assertTrue(state.is_shown("z"))


class TestSelectionTracker(unittest.TestCase):
    def test_newer_selection_supersedes(self):
        tracker = SelectionTracker()
        first = tracker.begin("a.csv")
        second = tracker.begin("b.csv")
        self.assertFalse(tracker.is_current(first))
        self.assertTrue(tracker.is_current(second))
        self.assertEqual(tracker.label, "b.csv")

    def test_clear(self):
        tracker = SelectionTracker()
        token = tracker.begin("a.csv")
        tracker.clear()
        self.assertFalse(tracker.is_current(token))
        self.assertIsNone(tracker.current)


if __name__ == "__main__":
    unittest.main()
