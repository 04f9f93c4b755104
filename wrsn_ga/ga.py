# wrsn_ga/ga.py
import math
import random
import time
import logging
from enum import Enum
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np

from .point import Point, to_array, distance_matrix
from .cluster import build_clusters
from .evaluator import tour_length, near_neighbour_length, far_neighbour_length
from .exceptions import InputInvalidError, PersistenceError
from .io_csv import save_guess, load_guess, save_best_paths
from .utils import (LRUCache, hash_lane, lane_lengths, split_lanes, flatten,
                    repair_partition, is_partition)
from .constants import *

logger = logging.getLogger(__name__)


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    SEEDING = "seeding"
    EVALUATING = "evaluating"
    EVOLVING = "evolving"
    CONVERGED = "converged"


class GeneticEngine:
    """
    Target/trail GA over PDV charging routes.

    A candidate is a list of lanes, one per PDV, each lane an ordered list of
    node indices into the caller's node registry. All lanes of a candidate
    together partition the request set.
    """
    def __init__(self, origin=ORIGIN, pop_num=DEFAULT_POP_NUM, n_gen=DEFAULT_N_GEN,
                 cross_ratio=DEFAULT_CROSS_RATIO, pdv_num: Optional[int] = None,
                 r_num=DEFAULT_R_NUM, min_requests=MIN_REQUESTS, seed=SEED,
                 n_workers=1, max_stagnation=MAX_STAGNATION,
                 guess_file: Optional[str] = None, best_path_file: Optional[str] = None,
                 verbose=False):
        if int(pop_num) <= 0:
            raise InputInvalidError(f"pop_num must be positive, got {pop_num}")
        if pdv_num is not None and int(pdv_num) <= 0:
            raise InputInvalidError(f"pdv_num must be positive, got {pdv_num}")
        if not 0 <= cross_ratio <= 100:
            raise InputInvalidError(f"cross_ratio is a percentage, got {cross_ratio}")
        self.origin = origin if isinstance(origin, Point) else Point(*origin)
        self.pop_num = int(pop_num)
        self.n_gen = int(n_gen)
        self.cross_ratio = cross_ratio
        self.fixed_pdv_num = pdv_num
        self.r_num = int(r_num)
        self.min_requests = int(min_requests)
        self.seed = seed
        self.n_workers = max(1, int(n_workers))
        self.max_stagnation = max_stagnation
        self.guess_file = guess_file
        self.best_path_file = best_path_file
        self.verbose = verbose
        self.log_interval = LOG_INTERVAL

        self.rng = random.Random(seed)
        self.fitness_cache = LRUCache(FIT_CACHE_MAX_ENTRIES)
        self.state = EngineState.UNINITIALIZED
        self.escalated = set()
        self._reset_buffers()

    def _reset_buffers(self):
        self.req_idx: List[int] = []
        self.req_ps: List[Point] = []
        self.dist: Optional[np.ndarray] = None
        self.targets = []
        self.trails = []
        self.targets_metric = []
        self.trails_metric = []
        self.pdv_num = 0
        self.is_match = True
        self.e_ref = None
        self.best_paths = []
        self.best_metric = []
        self.best_fitness = 0.0
        self.history = []
        self.alg_time = 0.0

    # ------------------------------------------------------------------
    # setup
    # ------------------------------------------------------------------
    def init_params(self, nodes: Sequence, request_idx: Sequence[int]):
        request_idx = [int(i) for i in request_idx]
        if not request_idx:
            raise InputInvalidError("Empty request set")
        if len(set(request_idx)) != len(request_idx):
            raise InputInvalidError(f"Duplicated node indices in request set: {list(request_idx)}")
        for i in request_idx:
            if not 0 <= i < len(nodes):
                raise InputInvalidError(f"Node index {i} out of range (registry has {len(nodes)} nodes)")

        self._reset_buffers()
        self.fitness_cache.clear()

        reachable = []
        for i in request_idx:
            d = self.origin.distance(nodes[i].pos)
            if 2 * d > PDV_MAX_FLIGHT_DIST:
                nodes[i].mark_unreachable()
                logger.warning("Node %d unreachable (%.2f m from base), skipped; skips=%d",
                               i, d, nodes[i].skips)
                continue
            reachable.append(i)
        if not reachable:
            logger.warning("None of the %d requested nodes is within PDV flight range; batch skipped",
                           len(request_idx))
            self.state = EngineState.UNINITIALIZED
            return

        self.req_idx = reachable
        self.req_ps = [nodes[i].pos for i in reachable]
        self.dist = distance_matrix(self.req_ps)
        self.e_ref = sum(nodes[i].calc_package() for i in reachable)
        self.state = EngineState.SEEDING

    def calc_opt_pdv_num(self, nodes: Sequence, request_idx: Sequence[int]) -> int:
        n = len(request_idx)
        if n == 0:
            raise InputInvalidError("Empty request set")
        total = sum(nodes[i].calc_package() for i in request_idx)
        coords = to_array([self.origin] + [nodes[i].pos for i in request_idx])
        d_nn = near_neighbour_length(coords)
        by_nodes = math.ceil(n / PDV_MAX_NODES)
        by_energy = math.ceil((total + PDV_FLIGHT_COST * d_nn) / PDV_ENERGY_BUDGET)
        return min(max(by_nodes, by_energy, 1), n)

    def calc_init_guess(self, r_num: int, pdv_num: int, pop_num: int,
                        nodes: Sequence, request_idx: Sequence[int]) -> bool:
        n = len(request_idx)
        if n == 0:
            raise InputInvalidError("Empty request set")
        if pdv_num <= 0 or pop_num <= 0 or r_num <= 0:
            raise InputInvalidError(f"r_num, pdv_num and pop_num must be positive "
                                    f"(got {r_num}, {pdv_num}, {pop_num})")
        if pdv_num > n:
            raise InputInvalidError(f"pdv_num={pdv_num} exceeds the {n} requested nodes")

        request_idx = list(request_idx)
        if self.dist is None or request_idx != self.req_idx:
            self.dist = distance_matrix([nodes[i].pos for i in request_idx])
        self.req_idx = request_idx
        self.pdv_num = pdv_num
        self.pop_num = pop_num
        self.is_match = n % pdv_num == 0
        total = sum(nodes[i].calc_package() for i in request_idx)
        self.e_ref = total / pdv_num

        population = None
        if self.guess_file:
            population = self._load_guess(pop_num, pdv_num)
        if population is None:
            population = self._generate_guess(r_num, pdv_num, pop_num, nodes)
            if self.guess_file:
                save_guess(self.guess_file, population)

        self.targets = population
        self.trails = []
        self.targets_metric = []
        self.trails_metric = []
        return self.is_match

    def _load_guess(self, pop_num, pdv_num):
        try:
            population = load_guess(self.guess_file, pop_num, pdv_num)
        except PersistenceError as e:
            logger.warning("%s; regenerating initial guess", e)
            return None
        for candidate in population:
            if not is_partition(candidate, self.req_idx):
                logger.warning("Stored guess %s does not match the request set; regenerating",
                               self.guess_file)
                return None
        return population

    def _generate_guess(self, r_num, pdv_num, pop_num, nodes):
        req = self.req_idx
        n = len(req)
        lengths = lane_lengths(n, pdv_num)
        dm = self.dist
        local = {node: j for j, node in enumerate(req)}
        clusters = build_clusters(nodes, req)
        neighbours = {
            i: sorted((m for m in clusters[i].members if m in local),
                      key=lambda m: (dm[local[i], local[m]], m))
            for i in req
        }
        by_origin = sorted(req, key=lambda i: (self.origin.distance(nodes[i].pos), i))
        r = min(r_num, n)

        population = []
        for p in range(pop_num):
            seq = self._cluster_chain(by_origin[p % r], neighbours, dm, local)
            for _ in range(p // r):
                if n < 2:
                    break
                a, b = self.rng.sample(range(n), 2)
                seq[a], seq[b] = seq[b], seq[a]
            population.append(split_lanes(seq, lengths))
        return population

    def _cluster_chain(self, start, neighbours, dm, local):
        # nearest-neighbour chain that keeps acoustic neighbours adjacent
        remaining = set(local)
        seq = []
        cur = start
        while True:
            seq.append(cur)
            remaining.discard(cur)
            for m in neighbours[cur]:
                if m in remaining:
                    seq.append(m)
                    remaining.discard(m)
            if not remaining:
                return seq
            last = local[seq[-1]]
            cur = min(remaining, key=lambda j: (dm[last, local[j]], j))

    # ------------------------------------------------------------------
    # operators
    # ------------------------------------------------------------------
    def crossover(self, cross_ratio, pop_num: int, is_match: bool, targets):
        n_cross = int(round(pop_num * cross_ratio / 100.0))
        # recombined slots are redrawn every generation
        cross_set = set(self.rng.sample(range(pop_num), n_cross))
        trails = []
        for p in range(pop_num):
            parent = targets[p]
            if p in cross_set and pop_num > 1:
                partner = self.rng.choice([q for q in range(pop_num) if q != p])
                if is_match:
                    lengths = [len(flatten(parent)) // len(parent)] * len(parent)
                else:
                    lengths = [len(lane) for lane in parent]
                child = self.order_crossover(parent, targets[partner], lengths)
            else:
                child = self.swap_mutation(parent)
            trails.append(repair_partition(child, self.req_idx or flatten(parent)))
        return trails

    def order_crossover(self, p1, p2, lengths):
        flat1, flat2 = flatten(p1), flatten(p2)
        size = len(flat1)
        if size < 2:
            return split_lanes(flat1, lengths)
        a, b = sorted(self.rng.sample(range(size + 1), 2))
        child = [None] * size
        child[a:b] = flat1[a:b]
        used = set(child[a:b])
        free = [(b + k) % size for k in range(size) if child[(b + k) % size] is None]
        genes = [g for g in flat2[b:] + flat2[:b] if g not in used]
        for pos, gene in zip(free, genes):
            child[pos] = gene
        return split_lanes([g for g in child if g is not None], lengths)

    def swap_mutation(self, parent):
        child = [lane[:] for lane in parent]
        lanes = [k for k, lane in enumerate(child) if len(lane) >= 2]
        if not lanes:
            return child
        lane = child[self.rng.choice(lanes)]
        i, j = self.rng.sample(range(len(lane)), 2)
        lane[i], lane[j] = lane[j], lane[i]
        return child

    # ------------------------------------------------------------------
    # fitness
    # ------------------------------------------------------------------
    def calc_far_neigh_dist(self, path) -> float:
        return float(far_neighbour_length(self._as_coords(path)))

    def calc_near_neigh_dist(self, path) -> float:
        return float(near_neighbour_length(self._as_coords(path)))

    @staticmethod
    def _as_coords(path) -> np.ndarray:
        if isinstance(path, np.ndarray):
            return np.ascontiguousarray(path, dtype=np.float64)
        return to_array([p if isinstance(p, Point) else Point(*p) for p in path])

    def fitness_func(self, nodes: Sequence, idx_list: Sequence[int]) -> float:
        if len(idx_list) == 0:
            return 0.0
        e_wsn = sum(nodes[i].calc_package() for i in idx_list)
        e_ref = self.e_ref if self.e_ref else sum(nodes[i].calc_max_energy() for i in idx_list)

        coords = to_array([self.origin] + [nodes[i].pos for i in idx_list])
        order = np.arange(1, len(idx_list) + 1, dtype=np.int64)
        d_pdv = float(tour_length(coords, order))
        d_near = self.calc_near_neigh_dist(coords)
        d_far = self.calc_far_neigh_dist(coords)
        span = d_far - d_near
        d_norm = max(0.0, (d_pdv - d_near) / span) if span > 1e-12 else 0.0

        e_pdv = PDV_FLIGHT_COST * d_pdv
        e_pdv_norm = e_pdv / PDV_ENERGY_BUDGET

        return (FIT_ALPHA * math.tanh(e_wsn / e_ref)
                + FIT_BETA * (1.0 - math.tanh(d_norm))
                + FIT_GAMMA * (1.0 - math.tanh(e_pdv_norm)))

    def _lane_fitness(self, nodes, lane):
        key = hash_lane(lane, digest_size=FIT_CACHE_DIGEST_BYTES)
        cached = self.fitness_cache.get(key)
        if cached is not None:
            return cached
        fit = self.fitness_func(nodes, lane)
        self.fitness_cache.set(key, fit)
        return fit

    def _evaluate_batch(self, nodes, population, slots):
        return [(p, k, self._lane_fitness(nodes, population[p][k])) for p, k in slots]

    def evaluate_population(self, nodes, population):
        metrics = [[0.0] * len(candidate) for candidate in population]
        slots = [(p, k) for p, candidate in enumerate(population) for k in range(len(candidate))]
        if self.n_workers <= 1:
            results = self._evaluate_batch(nodes, population, slots)
        else:
            batch_size = max(1, len(slots) // self.n_workers)
            results = []
            with ThreadPoolExecutor(max_workers=self.n_workers) as ex:
                futures = [ex.submit(self._evaluate_batch, nodes, population, slots[i:i + batch_size])
                           for i in range(0, len(slots), batch_size)]
                for f in futures:
                    results.extend(f.result())
        for p, k, fit in results:
            metrics[p][k] = fit
        return metrics

    # ------------------------------------------------------------------
    # selection
    # ------------------------------------------------------------------
    @staticmethod
    def _exchange_groups(target, trail):
        """Lane slots that must be swapped together to keep the partition valid."""
        parent = list(range(len(target)))

        def find(k):
            while parent[k] != k:
                parent[k] = parent[parent[k]]
                k = parent[k]
            return k

        owner = {node: k for k, lane in enumerate(target) for node in lane}
        for j, lane in enumerate(trail):
            for node in lane:
                a, b = find(j), find(owner[node])
                if a != b:
                    parent[b] = a
        groups = {}
        for k in range(len(target)):
            groups.setdefault(find(k), []).append(k)
        return list(groups.values())

    def select(self):
        next_targets, next_metric = [], []
        for p in range(len(self.targets)):
            tar, trl = self.targets[p], self.trails[p]
            tm, rm = self.targets_metric[p], self.trails_metric[p]
            cand = [lane[:] for lane in tar]
            metric = list(tm)
            for group in self._exchange_groups(tar, trl):
                if sum(rm[k] for k in group) > sum(tm[k] for k in group):
                    for k in group:
                        cand[k] = trl[k][:]
                        metric[k] = rm[k]
            next_targets.append(cand)
            next_metric.append(metric)
        self.targets, self.targets_metric = next_targets, next_metric

    def candidate_fitness(self, p: int, pdv_num: Optional[int] = None) -> float:
        pdv_num = self.pdv_num if pdv_num is None else pdv_num
        return float(sum(self.targets_metric[p][:pdv_num]))

    def get_best_sol(self, pdv_num: int) -> int:
        if not self.targets_metric:
            raise InputInvalidError("Population has not been evaluated")
        totals = [sum(m[:pdv_num]) for m in self.targets_metric]
        return max(range(len(totals)), key=lambda p: totals[p])

    # ------------------------------------------------------------------
    # main loop
    # ------------------------------------------------------------------
    def calc_final_path(self, nodes: Sequence, request_idx: Sequence[int]):
        start_time = time.time()
        self.init_params(nodes, request_idx)
        req = self.req_idx
        if not req:
            self.alg_time = time.time() - start_time
            return []

        pdv_num = self.fixed_pdv_num or self.calc_opt_pdv_num(nodes, req)
        if pdv_num > len(req):
            logger.warning("pdv_num=%d exceeds %d reachable requests; using %d",
                           pdv_num, len(req), len(req))
            pdv_num = len(req)
        is_match = self.calc_init_guess(self.r_num, pdv_num, self.pop_num, nodes, req)

        self.state = EngineState.EVALUATING
        self.targets_metric = self.evaluate_population(nodes, self.targets)
        best = self.candidate_fitness(self.get_best_sol(pdv_num))
        self.history = [best]
        stagnation = 0

        if self.verbose:
            logger.info("GA started: %d requests, %d PDVs, pop=%d, is_match=%s",
                        len(req), pdv_num, self.pop_num, is_match)

        self.state = EngineState.EVOLVING
        for gen in range(self.n_gen):
            self.trails = self.crossover(self.cross_ratio, self.pop_num, is_match, self.targets)
            self.trails_metric = self.evaluate_population(nodes, self.trails)
            self.select()

            current = self.candidate_fitness(self.get_best_sol(pdv_num))
            self.history.append(current)
            if current > best + 1e-12:
                best = current
                stagnation = 0
            else:
                stagnation += 1

            if self.verbose and (gen % self.log_interval == 0 or gen == self.n_gen - 1):
                logger.info("G%4d | Fit: %.5f | Stag: %d | Elap: %.2fs",
                            gen + 1, current, stagnation, time.time() - start_time)
            if self.max_stagnation and stagnation >= self.max_stagnation:
                if self.verbose:
                    logger.info("Plateau after %d generations, stopping at G%d", stagnation, gen + 1)
                break

        idx = self.get_best_sol(pdv_num)
        self.best_paths = [lane[:] for lane in self.targets[idx]]
        self.best_metric = list(self.targets_metric[idx])
        self.best_fitness = self.candidate_fitness(idx)
        if self.best_path_file:
            save_best_paths(self.best_path_file, self.best_paths, self.best_metric)

        self.alg_time = time.time() - start_time
        self.state = EngineState.CONVERGED
        return self.best_paths

    def check_task(self, nodes: Sequence) -> bool:
        for i, node in enumerate(nodes):
            if not node.is_escalated:
                self.escalated.discard(i)
            elif i not in self.escalated:
                self.escalated.add(i)
                logger.warning("Node %d escalated: over %d fails (fails=%d, skips=%d)",
                               i, MAX_FAILS, node.fails, node.skips)
        return len(self.requesting(nodes)) < self.min_requests

    @staticmethod
    def requesting(nodes: Sequence) -> List[int]:
        return [i for i, node in enumerate(nodes) if node.needs_recharge]
