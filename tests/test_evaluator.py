# tests/test_evaluator.py
import numpy as np

from wrsn_ga.evaluator import tour_length, near_neighbour_length, far_neighbour_length


def _line_coords():
    # base station at 0, nodes at x = 1..4
    return np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0], [4.0, 0.0]], dtype=np.float64)


def test_tour_length_closed():
    coords = _line_coords()
    assert abs(tour_length(coords, np.array([1, 2, 3, 4], dtype=np.int64)) - 8.0) < 1e-12
    assert abs(tour_length(coords, np.array([1, 3, 2, 4], dtype=np.int64)) - 10.0) < 1e-12
    assert tour_length(coords, np.array([], dtype=np.int64)) == 0.0


def test_greedy_anchors():
    coords = _line_coords()
    assert abs(near_neighbour_length(coords) - 8.0) < 1e-12
    # 0 -> 4 -> 1 -> 3 -> 2 -> 0
    assert abs(far_neighbour_length(coords) - 12.0) < 1e-12


def test_single_point_tours_are_zero():
    coords = np.array([[2.0, 3.0]], dtype=np.float64)
    assert near_neighbour_length(coords) == 0.0
    assert far_neighbour_length(coords) == 0.0
