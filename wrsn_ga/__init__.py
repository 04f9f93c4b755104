# wrsn_ga/__init__.py
"""
WRSN GA package - PDV charging route planning
"""
from .constants import *
from .exceptions import InputInvalidError, PersistenceError
from .utils import LRUCache, hash_lane, repair_partition, is_partition
from .point import Point, distance, distance_matrix
from .sensor_node import SensorNode, acoustic_transfer
from .cluster import Cluster, build_clusters
from .evaluator import tour_length, near_neighbour_length, far_neighbour_length
from .ga import GeneticEngine, EngineState
from .io_csv import save_guess, read_guess_data, load_guess, save_best_paths, load_nodes
from .simulation import random_network, apply_route, simulate

__all__ = [
    "Point", "SensorNode", "Cluster", "GeneticEngine", "EngineState",
    "acoustic_transfer", "build_clusters", "distance", "distance_matrix",
    "tour_length", "near_neighbour_length", "far_neighbour_length",
    "save_guess", "read_guess_data", "load_guess", "save_best_paths", "load_nodes",
    "random_network", "apply_route", "simulate",
    "InputInvalidError", "PersistenceError",
    "LRUCache", "hash_lane", "repair_partition", "is_partition",
]
