# wrsn_ga/simulation.py
import logging
import random
from typing import Dict, List, Sequence

from .cluster import Cluster
from .sensor_node import SensorNode
from .constants import SC_V_CRITICAL, SC_V_MAX

logger = logging.getLogger(__name__)


def random_network(n: int, width: float = 10.0, height: float = 10.0, seed: int = 0,
                   v_low: float = SC_V_CRITICAL, v_high: float = SC_V_MAX) -> List[SensorNode]:
    rng = random.Random(seed)
    return [
        SensorNode(rng.uniform(0, width), rng.uniform(0, height),
                   rng.uniform(v_low, v_high), rng.random() < 0.5)
        for _ in range(n)
    ]


def apply_route(nodes: Sequence[SensorNode], paths: Sequence[Sequence[int]]) -> float:
    """
    Execute the PDV routes: each visited node is docked and fully recharged,
    the nodes in its acoustic range receive energy by distance.
    """
    delivered = 0.0
    cluster = Cluster()
    for lane in paths:
        for i in lane:
            center = nodes[i]
            delivered += center.recharge_full()
            center.reset_fail()
            for m in cluster.assign_members(nodes, center.pos):
                delivered += nodes[m].receive_acoustic(center.pos.distance(nodes[m].pos))
    return delivered


def simulate(nodes: Sequence[SensorNode], engine, n_ticks: int, dt: float = 60.0) -> List[Dict]:
    records = []
    for tick in range(n_ticks):
        for node in nodes:
            node.consume(dt)
        if engine.check_task(nodes):
            continue
        request = engine.requesting(nodes)
        paths = engine.calc_final_path(nodes, request)
        if not paths:
            logger.warning("Tick %d: no reachable request among %d, batch skipped", tick, len(request))
            continue
        delivered = apply_route(nodes, paths)
        logger.info("Tick %d: %d requests, %d PDVs, fitness %.4f, delivered %.2f J",
                    tick, len(request), len(paths), engine.best_fitness, delivered)
        records.append({
            "tick": tick,
            "requests": len(request),
            "pdv_num": len(paths),
            "fitness": engine.best_fitness,
            "delivered": delivered,
            "paths": [lane[:] for lane in paths],
        })
    return records
