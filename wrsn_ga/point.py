# wrsn_ga/point.py
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self):
        return (self.x, self.y)


def distance(a: Point, b: Point) -> float:
    return a.distance(b)


def to_array(points: Sequence[Point]) -> np.ndarray:
    """(n, 2) float64 array, contiguous for the numba kernels."""
    arr = np.zeros((len(points), 2), dtype=np.float64)
    for i, p in enumerate(points):
        arr[i, 0] = p.x
        arr[i, 1] = p.y
    return np.ascontiguousarray(arr)


def distance_matrix(points: Sequence[Point]) -> np.ndarray:
    arr = to_array(points)
    diff = arr[:, None, :] - arr[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=2))
