# tests/test_simulation.py
import logging

from wrsn_ga.ga import GeneticEngine, EngineState
from wrsn_ga.sensor_node import SensorNode, acoustic_transfer
from wrsn_ga.simulation import random_network, apply_route, simulate
from wrsn_ga.constants import SC_V_MAX, SC_V_CRITICAL


def test_random_network_is_reproducible():
    a = random_network(10, seed=3)
    b = random_network(10, seed=3)
    assert [n.pos for n in a] == [n.pos for n in b]
    assert all(0.0 <= n.pos.x <= 10.0 and 0.0 <= n.pos.y <= 10.0 for n in a)
    assert all(SC_V_CRITICAL <= n.voltage <= SC_V_MAX for n in a)


def test_apply_route_recharges_visited_and_neighbours():
    nodes = [SensorNode(1.0, 1.0, 3.3), SensorNode(1.3, 1.0, 3.3), SensorNode(5.0, 5.0, 3.3)]
    nodes[0].add_fail()
    before = nodes[1].energy
    delivered = apply_route(nodes, [[0]])
    assert abs(nodes[0].voltage - SC_V_MAX) < 1e-12
    assert nodes[0].fails == 0
    assert abs(nodes[1].energy - before - acoustic_transfer(0.3)) < 1e-9
    assert nodes[2].voltage == 3.3
    assert delivered > 0.0


def test_simulate_runs_engine_when_enough_requests(nodes):
    engine = GeneticEngine(pop_num=4, n_gen=3, seed=1, min_requests=3)
    records = simulate(nodes, engine, n_ticks=2, dt=60.0)
    assert len(records) >= 1
    first = records[0]
    assert first["requests"] == 6
    visited = [i for lane in first["paths"] for i in lane]
    assert sorted(visited) == [0, 1, 2, 3, 4, 5]
    assert first["delivered"] > 0.0
    for i in visited:
        assert not nodes[i].needs_recharge


def test_simulate_waits_below_threshold(nodes):
    engine = GeneticEngine(pop_num=4, n_gen=3, seed=1, min_requests=50)
    assert simulate(nodes, engine, n_ticks=3, dt=60.0) == []


def test_simulate_skips_batch_when_nothing_is_reachable(caplog):
    far = [SensorNode(100.0 + i, 100.0, 3.45) for i in range(6)]
    engine = GeneticEngine(pop_num=4, n_gen=2, seed=1)
    with caplog.at_level(logging.WARNING, logger="wrsn_ga.simulation"):
        records = simulate(far, engine, n_ticks=2, dt=1.0)
    assert records == []
    assert "batch skipped" in caplog.text
    assert all(n.skips == 2 for n in far)
    assert engine.state == EngineState.UNINITIALIZED
