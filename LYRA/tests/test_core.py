import math
import unittest
from pathlib import Path
import tempfile
import sys
import numpy as np

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from LYRA.config import Config
from LYRA.src.core.errors import InvalidConfig, InvalidInput
from LYRA.src.core.parsing import parse_trace_text, read_trace
from LYRA.src.core.processing import (
    Preprocessor,
    bin_trace,
    make_bin_edges,
    normalize,
    preprocess,
    preprocess_csv,
    preprocess_with_axis,
)
from LYRA.src.core.types import Trace


def make_trace(pairs):
    masses = np.array([p[0] for p in pairs], dtype=np.float64)
    intensities = np.array([p[1] for p in pairs], dtype=np.float64)
    return Trace(masses, intensities)


def make_csv(rows, header="mass,intensity"):
    return "\n".join([header] + [f"{m},{i}" for m, i in rows]) + "\n"


class TestConfig(unittest.TestCase):
    def test_save_load_roundtrip(self):
        cfg = Config()
        cfg.BIN_RESOLUTION = 0.25
        cfg.SCORING_URL = "http://scorer.local:8000/run_model"
        cfg.SCORE_DECIMALS = 2

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            cfg.save(path)
            loaded = Config.load(path)

        self.assertAlmostEqual(loaded.BIN_RESOLUTION, 0.25)
        self.assertEqual(loaded.SCORING_URL, "http://scorer.local:8000/run_model")
        self.assertEqual(loaded.SCORE_DECIMALS, 2)

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            loaded = Config.load(Path(td) / "nope.json")
        self.assertEqual(loaded, Config())

    def test_corrupt_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text("{not json")
            loaded = Config.load(path)
        self.assertEqual(loaded, Config())

    def test_invalid_value_is_ignored(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text('{"BIN_RESOLUTION": "wide", "BIN_STOP": 3000}')
            loaded = Config.load(path)
        self.assertEqual(loaded.BIN_RESOLUTION, 0.5)
        self.assertEqual(loaded.BIN_STOP, 3000.0)

    def test_normalize_swaps_inverted_range(self):
        cfg = Config()
        cfg.BIN_START, cfg.BIN_STOP = 3500.0, 899.9
        cfg.normalize()
        self.assertEqual((cfg.BIN_START, cfg.BIN_STOP), (899.9, 3500.0))


class TestParsing(unittest.TestCase):
    def test_header_is_discarded(self):
        trace = parse_trace_text("1000,2\n1001,3\n")
        np.testing.assert_array_equal(trace.masses, [1001.0])
        np.testing.assert_array_equal(trace.intensities, [3.0])

    def test_malformed_rows_are_skipped_and_recorded(self):
        text = "mass,intensity\n900.5,1\nabc,2\n901.0\n\n 902.0 , 4 \n903,nan\n"
        trace = parse_trace_text(text)

        np.testing.assert_array_equal(trace.masses, [900.5, 902.0])
        np.testing.assert_array_equal(trace.intensities, [1.0, 4.0])
        self.assertEqual([s.line_number for s in trace.skipped], [3, 4, 7])
        self.assertEqual(trace.skipped[0].text, "abc,2")

    def test_order_is_preserved(self):
        trace = parse_trace_text(make_csv([(1500, 1), (1000, 2), (1200, 3)]))
        np.testing.assert_array_equal(trace.masses, [1500.0, 1000.0, 1200.0])

    def test_extra_columns_are_ignored(self):
        trace = parse_trace_text("m,i,note\n1000,5,foo\n")
        np.testing.assert_array_equal(trace.intensities, [5.0])
        self.assertEqual(trace.skipped, ())

    def test_header_only(self):
        trace = parse_trace_text("mass,intensity\n")
        self.assertEqual(trace.size, 0)

    def test_read_trace(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "trace.csv"
            path.write_text(make_csv([(1000.0, 1.5), (1000.2, 2.5)]))
            trace = read_trace(path)
        np.testing.assert_array_equal(trace.intensities, [1.5, 2.5])


class TestBinning(unittest.TestCase):
    def test_edge_count(self):
        edges = make_bin_edges(0.5)
        self.assertEqual(edges.size, math.ceil((3500 - 899.9) / 0.5))
        self.assertEqual(edges[0], 899.9)
        self.assertLess(edges[-1], 3500.0)
        self.assertTrue(np.all(np.diff(edges) > 0))

    def test_output_lengths_match(self):
        for res in (0.5, 1.0, 7.3):
            binned = bin_trace([], [], resolution=res)
            n_edges = make_bin_edges(res).size
            self.assertEqual(binned.means.size, n_edges - 1)
            self.assertEqual(binned.midpoints.size, n_edges - 1)
            self.assertEqual(binned.counts.size, n_edges - 1)

    def test_empty_input_gives_zero_means(self):
        binned = bin_trace([], [])
        self.assertTrue(np.all(binned.means == 0.0))

    def test_midpoints(self):
        edges = make_bin_edges()
        binned = bin_trace([], [])
        self.assertAlmostEqual(binned.midpoints[0], (edges[0] + edges[1]) / 2)
        self.assertAlmostEqual(binned.midpoints[-1], (edges[-2] + edges[-1]) / 2)

    def test_scenario_first_and_last_bin(self):
        binned = bin_trace([900.0, 900.3, 3499.5], [5.0, 3.0, 10.0])
        self.assertEqual(binned.means[0], 4.0)
        self.assertEqual(binned.means[-1], 10.0)
        self.assertEqual(int(binned.counts.sum()), 3)
        self.assertTrue(np.all(binned.means[1:-1] == 0.0))

    def test_out_of_range_samples_are_dropped(self):
        edges = make_bin_edges()
        masses = [899.8, edges[-1], 3500.0, 4000.0, 100.0]
        binned = bin_trace(masses, np.ones(len(masses)))
        self.assertEqual(int(binned.counts.sum()), 0)

    def test_non_finite_values_are_dropped(self):
        masses = [np.nan, np.inf, -np.inf, 1000.0, 1000.1]
        intensities = [1.0, 1.0, 1.0, np.nan, 2.0]
        binned = bin_trace(masses, intensities)
        self.assertEqual(int(binned.counts.sum()), 1)
        self.assertEqual(float(binned.means.max()), 2.0)

    def test_count_never_exceeds_samples(self):
        rng = np.random.default_rng(7)
        masses = rng.uniform(500, 4000, 2000)
        intensities = rng.uniform(0, 100, 2000)
        binned = bin_trace(masses, intensities)
        inside = np.count_nonzero((masses >= 899.9) & (masses < make_bin_edges()[-1]))
        self.assertLessEqual(int(binned.counts.sum()), masses.size)
        self.assertEqual(int(binned.counts.sum()), inside)

    def test_all_inside_counts_everything(self):
        masses = np.linspace(900.0, 3400.0, 500)
        binned = bin_trace(masses, np.ones_like(masses))
        self.assertEqual(int(binned.counts.sum()), masses.size)

    def test_lower_edge_is_inclusive(self):
        edges = make_bin_edges()
        binned = bin_trace([edges[3]], [7.0])
        self.assertEqual(binned.means[3], 7.0)

    def test_unsorted_input(self):
        a = bin_trace([1500.0, 1000.0, 1000.1], [1.0, 2.0, 4.0])
        b = bin_trace([1000.1, 1500.0, 1000.0], [4.0, 1.0, 2.0])
        np.testing.assert_array_equal(a.counts, b.counts)
        np.testing.assert_allclose(a.means, b.means)

    def test_invalid_resolution(self):
        for res in (0.0, -0.5, float("nan")):
            with self.assertRaises(InvalidConfig):
                bin_trace([1000.0], [1.0], resolution=res)

    def test_grid_too_small(self):
        with self.assertRaises(InvalidConfig):
            make_bin_edges(10.0, start=100.0, stop=105.0)

    def test_length_mismatch(self):
        with self.assertRaises(InvalidInput):
            bin_trace([1000.0, 1001.0], [1.0])


class TestNormalize(unittest.TestCase):
    def test_constant_sequence_is_zero(self):
        for val in (0.0, 0.1, 42.0):
            out = normalize([val] * 5200)
            self.assertTrue(np.all(out == 0.0))

    def test_standard_score(self):
        out = normalize([1.0, 2.0, 3.0])
        expected = np.array([-1.0, 0.0, 1.0]) / math.sqrt(2.0 / 3.0)
        np.testing.assert_allclose(out, expected, rtol=1e-12)
        self.assertAlmostEqual(float(np.mean(out)), 0.0, places=12)
        self.assertAlmostEqual(float(np.std(out)), 1.0, places=12)

    def test_empty_input(self):
        with self.assertRaises(InvalidInput):
            normalize([])


class TestPreprocess(unittest.TestCase):
    def setUp(self):
        self.trace = make_trace([(900.0, 5), (900.3, 3), (3499.5, 10)])

    def test_feature_length(self):
        features = preprocess(self.trace)
        self.assertEqual(features.size, make_bin_edges().size - 1)

    def test_deterministic(self):
        a = preprocess(self.trace)
        b = preprocess(self.trace)
        self.assertEqual(a.tobytes(), b.tobytes())

    def test_scenario_outliers(self):
        features = preprocess(self.trace)
        self.assertGreater(features[0], 0.0)
        self.assertGreater(features[-1], 0.0)
        self.assertGreater(features[-1], features[0])
        bulk = features[1:-1]
        self.assertTrue(np.all(bulk == bulk[0]))
        self.assertLess(bulk[0], 0.0)

    def test_axis_matches_features(self):
        features, axis = preprocess_with_axis(self.trace)
        self.assertEqual(features.size, axis.size)

    def test_empty_trace(self):
        with self.assertRaises(InvalidInput):
            preprocess(make_trace([]))

    def test_trace_with_only_out_of_range_samples(self):
        features = preprocess(make_trace([(100.0, 1.0), (5000.0, 2.0)]))
        self.assertTrue(np.all(features == 0.0))

    def test_config_resolution(self):
        cfg = Config()
        cfg.BIN_RESOLUTION = 1.0
        features = Preprocessor(cfg).preprocess(self.trace)
        self.assertEqual(features.size, make_bin_edges(1.0).size - 1)

    def test_invalid_config_resolution(self):
        cfg = Config()
        cfg.BIN_RESOLUTION = 0.0
        with self.assertRaises(InvalidConfig):
            preprocess(self.trace, cfg)

    def test_csv_matches_trace(self):
        text = make_csv([(900.0, 5), (900.3, 3), ("bad", 1), (3499.5, 10)])
        np.testing.assert_array_equal(preprocess_csv(text), preprocess(self.trace))


if __name__ == "__main__":
    unittest.main()
