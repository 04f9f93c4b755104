# tests/conftest.py
import sys
import os
import pytest

# --- make the package importable from the repo root ---
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


# 8 nodes on a 10 x 10 m field; nodes 0..5 are below SC_V_MIN and request a recharge
NODE_COORDS = [(1.0, 1.0), (1.5, 1.2), (3.0, 4.0), (4.0, 1.0),
               (5.0, 5.0), (2.0, 6.0), (8.0, 8.0), (1.3, 1.0)]
NODE_VOLTS = [3.32, 3.40, 3.45, 3.30, 3.36, 3.20, 4.80, 3.90]


@pytest.fixture
def nodes():
    from wrsn_ga.sensor_node import SensorNode
    return [SensorNode(x, y, v) for (x, y), v in zip(NODE_COORDS, NODE_VOLTS)]


@pytest.fixture
def request_idx():
    return [0, 1, 2, 3, 4, 5]


@pytest.fixture
def line_nodes():
    # collinear nodes at x = 1..4, handy for exact tour lengths
    from wrsn_ga.sensor_node import SensorNode
    return [SensorNode(float(x), 0.0, 3.4) for x in range(1, 5)]


# Provide a fast GA instance for testing with small sizes
@pytest.fixture
def engine():
    from wrsn_ga.ga import GeneticEngine
    return GeneticEngine(
        origin=(0.0, 0.0), pop_num=4, n_gen=5, cross_ratio=50,
        r_num=2, seed=1, n_workers=1, max_stagnation=10
    )
