# wrsn_ga/evaluator.py
import math
import numpy as np
from numba import njit


# coords: (n, 2) float64, row 0 is the start/return point (base station)
@njit(cache=True)
def tour_length(coords, order):
    """Closed tour coords[0] -> coords[order[0]] -> ... -> coords[0]."""
    total = 0.0
    x0 = coords[0, 0]
    y0 = coords[0, 1]
    px = x0
    py = y0
    for k in range(order.shape[0]):
        i = order[k]
        total += math.hypot(coords[i, 0] - px, coords[i, 1] - py)
        px = coords[i, 0]
        py = coords[i, 1]
    total += math.hypot(x0 - px, y0 - py)
    return total


@njit(cache=True)
def _greedy_length(coords, farthest):
    n = coords.shape[0]
    visited = np.zeros(n, dtype=np.bool_)
    visited[0] = True
    cur = 0
    total = 0.0
    for _ in range(n - 1):
        best = -1
        best_d = 0.0
        for j in range(n):
            if visited[j]:
                continue
            d = math.hypot(coords[j, 0] - coords[cur, 0], coords[j, 1] - coords[cur, 1])
            if best < 0 or (farthest and d > best_d) or (not farthest and d < best_d):
                best = j
                best_d = d
        visited[best] = True
        total += best_d
        cur = best
    total += math.hypot(coords[0, 0] - coords[cur, 0], coords[0, 1] - coords[cur, 1])
    return total


@njit(cache=True)
def near_neighbour_length(coords):
    return _greedy_length(coords, False)


@njit(cache=True)
def far_neighbour_length(coords):
    return _greedy_length(coords, True)
