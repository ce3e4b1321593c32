"""
tests/test_statistics_engine.py
-------------------------------
Unit tests for StatisticsEngine.

Test coverage:
    dot() / mat_vec()       — values and dimension checks
    quadratic_form()        — wᵀΣw and shape preconditions
    standard_deviation()    — negative variance is clamped, not raised
    objective()             — λ·σ − return
    equal_weights()         — exact 1/k entries, empty selection
    asset_risks()           — per-asset σ from the diagonal
"""

import math
import unittest
from unittest.mock import patch

import numpy as np

from allocator.config import RISK_AVERSION
from allocator.errors import DimensionMismatch
from allocator.statistics_engine import StatisticsEngine


_COV_2 = [[0.04, 0.01],
          [0.01, 0.09]]


# ===========================================================================
# 1. Linear algebra
# ===========================================================================

class TestDot(unittest.TestCase):

    def test_simple_dot(self):
        self.assertAlmostEqual(StatisticsEngine.dot([1, 2, 3], [4, 5, 6]), 32.0)

    def test_returns_python_float(self):
        self.assertIsInstance(StatisticsEngine.dot([1.0], [2.0]), float)

    def test_empty_vectors_give_zero(self):
        self.assertEqual(StatisticsEngine.dot([], []), 0.0)

    def test_length_mismatch_raises(self):
        with self.assertRaises(DimensionMismatch):
            StatisticsEngine.dot([1, 2], [1, 2, 3])

    def test_dimension_mismatch_is_value_error(self):
        with self.assertRaises(ValueError):
            StatisticsEngine.dot([1], [1, 2])


class TestMatVec(unittest.TestCase):

    def test_product(self):
        out = StatisticsEngine.mat_vec([[1, 2], [3, 4]], [1, 1])
        np.testing.assert_allclose(out, [3.0, 7.0])

    def test_wrong_width_raises(self):
        with self.assertRaises(DimensionMismatch):
            StatisticsEngine.mat_vec([[1, 2], [3, 4]], [1, 1, 1])


class TestQuadraticForm(unittest.TestCase):

    def test_two_asset_variance(self):
        # 0.25·0.04 + 2·0.25·0.01 + 0.25·0.09 = 0.0375
        var = StatisticsEngine.quadratic_form([0.5, 0.5], _COV_2)
        self.assertAlmostEqual(var, 0.0375, places=12)

    def test_single_asset_is_its_variance(self):
        var = StatisticsEngine.quadratic_form([1.0, 0.0], _COV_2)
        self.assertAlmostEqual(var, 0.04, places=12)

    def test_zero_weights_give_zero(self):
        self.assertEqual(StatisticsEngine.quadratic_form([0.0, 0.0], _COV_2), 0.0)

    def test_non_square_matrix_raises(self):
        with self.assertRaises(DimensionMismatch):
            StatisticsEngine.quadratic_form([0.5, 0.5], [[1, 2, 3], [4, 5, 6]])

    def test_weight_length_mismatch_raises(self):
        with self.assertRaises(DimensionMismatch):
            StatisticsEngine.quadratic_form([1.0, 0.0, 0.0], _COV_2)

    def test_negative_result_is_returned_unclamped(self):
        var = StatisticsEngine.quadratic_form([0.5, 0.5], [[0.01, -0.5], [-0.5, 0.01]])
        self.assertLess(var, 0.0)

    def test_accepts_numpy_arrays(self):
        var = StatisticsEngine.quadratic_form(np.array([0.5, 0.5]), np.array(_COV_2))
        self.assertAlmostEqual(var, 0.0375, places=12)

    def test_uses_mat_vec(self):
        with patch.object(
            StatisticsEngine, "mat_vec", wraps=StatisticsEngine.mat_vec
        ) as mat_vec:
            var = StatisticsEngine.quadratic_form([0.5, 0.5], _COV_2)
        mat_vec.assert_called_once()
        self.assertAlmostEqual(var, 0.0375, places=12)


# ===========================================================================
# 2. Risk / objective
# ===========================================================================

class TestStandardDeviation(unittest.TestCase):

    def test_positive_variance(self):
        self.assertAlmostEqual(StatisticsEngine.standard_deviation(0.04), 0.2)

    def test_zero_variance(self):
        self.assertEqual(StatisticsEngine.standard_deviation(0.0), 0.0)

    def test_negative_variance_clamped(self):
        self.assertEqual(StatisticsEngine.standard_deviation(-0.5), 0.0)

    def test_nan_variance_clamped(self):
        self.assertEqual(StatisticsEngine.standard_deviation(float("nan")), 0.0)


class TestObjective(unittest.TestCase):

    def test_single_asset_objective(self):
        # 20 · sqrt(0.04) − 0.10 = 3.9
        obj = StatisticsEngine.objective([1.0, 0.0], _COV_2, [0.10, 0.20])
        self.assertAlmostEqual(obj, 3.9, places=12)

    def test_default_risk_aversion_is_twenty(self):
        self.assertEqual(RISK_AVERSION, 20.0)

    def test_custom_risk_aversion(self):
        obj = StatisticsEngine.objective([1.0, 0.0], _COV_2, [0.10, 0.20], risk_aversion=0.0)
        self.assertAlmostEqual(obj, -0.10, places=12)

    def test_lower_risk_scores_better(self):
        low = StatisticsEngine.objective([1.0, 0.0], _COV_2, [0.1, 0.1])
        high = StatisticsEngine.objective([0.0, 1.0], _COV_2, [0.1, 0.1])
        self.assertLess(low, high)

    def test_negative_variance_does_not_raise(self):
        obj = StatisticsEngine.objective(
            [0.5, 0.5], [[0.01, -0.5], [-0.5, 0.01]], [0.04, 0.06]
        )
        self.assertAlmostEqual(obj, -0.05, places=12)

    def test_returns_length_mismatch_raises(self):
        with self.assertRaises(DimensionMismatch):
            StatisticsEngine.objective([1.0, 0.0], _COV_2, [0.1])


# ===========================================================================
# 3. Weight vectors
# ===========================================================================

class TestEqualWeights(unittest.TestCase):

    def test_two_of_four(self):
        w = StatisticsEngine.equal_weights(4, [1, 3])
        self.assertEqual(list(w), [0.0, 0.5, 0.0, 0.5])

    def test_entries_are_exactly_one_over_k(self):
        w = StatisticsEngine.equal_weights(5, [0, 2, 4])
        for i in (0, 2, 4):
            self.assertEqual(w[i], 1.0 / 3)
        self.assertAlmostEqual(float(w.sum()), 1.0, delta=1e-9)

    def test_empty_selection_is_all_zero(self):
        w = StatisticsEngine.equal_weights(3, [])
        self.assertEqual(list(w), [0.0, 0.0, 0.0])

    def test_zero_length(self):
        self.assertEqual(len(StatisticsEngine.equal_weights(0, [])), 0)

    def test_order_of_indices_irrelevant(self):
        a = StatisticsEngine.equal_weights(4, [3, 0, 1])
        b = StatisticsEngine.equal_weights(4, [0, 1, 3])
        self.assertEqual(list(a), list(b))


class TestAssetRisks(unittest.TestCase):

    def test_diagonal_square_roots(self):
        risks = StatisticsEngine.asset_risks(_COV_2)
        self.assertAlmostEqual(risks[0], 0.2)
        self.assertAlmostEqual(risks[1], 0.3)

    def test_negative_diagonal_clamped(self):
        risks = StatisticsEngine.asset_risks([[-0.01]])
        self.assertEqual(risks, [0.0])

    def test_matches_math_sqrt(self):
        risks = StatisticsEngine.asset_risks([[0.02, 0.0], [0.0, 0.05]])
        self.assertAlmostEqual(risks[0], math.sqrt(0.02))
        self.assertAlmostEqual(risks[1], math.sqrt(0.05))


if __name__ == "__main__":
    unittest.main()
