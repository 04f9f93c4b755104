# tests/test_point.py
import numpy as np
from wrsn_ga.point import Point, distance, distance_matrix, to_array


def test_point_distance_symmetric():
    a, b = Point(0.0, 0.0), Point(3.0, 4.0)
    assert a.distance(b) == 5.0
    assert distance(b, a) == 5.0
    assert a.distance(a) == 0.0


def test_distance_matrix_and_array():
    pts = [Point(0, 0), Point(3, 4), Point(0, 1)]
    arr = to_array(pts)
    assert arr.shape == (3, 2)
    assert arr.dtype == np.float64
    dm = distance_matrix(pts)
    assert dm.shape == (3, 3)
    assert np.allclose(dm, dm.T)
    assert np.allclose(np.diag(dm), 0.0)
    assert abs(dm[0, 1] - 5.0) < 1e-12
