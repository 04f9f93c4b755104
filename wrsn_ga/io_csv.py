# wrsn_ga/io_csv.py
import csv
import os
from typing import List, Sequence

import pandas as pd

from .exceptions import PersistenceError
from .sensor_node import SensorNode
from .constants import SC_V_INIT

GUESS_COLUMNS = ["pop", "pdv", "order", "node"]


def save_guess(path: str, population) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(GUESS_COLUMNS)
        for p, candidate in enumerate(population):
            for k, lane in enumerate(candidate):
                for order, node in enumerate(lane):
                    writer.writerow([p, k, order, node])


def _read_guess_frame(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise PersistenceError(f"Guess file not found: {path}")
    try:
        df = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Corrupt guess file {path}: {e}") from e
    if list(df.columns) != GUESS_COLUMNS:
        raise PersistenceError(f"Unexpected guess file header in {path}: {list(df.columns)}")
    if df.isnull().values.any():
        raise PersistenceError(f"Guess file {path} has empty fields")
    try:
        return df.astype(int)
    except ValueError as e:
        raise PersistenceError(f"Non-integer entries in guess file {path}") from e


def read_guess_data(path: str, pop: int, pdv: int) -> List[int]:
    df = _read_guess_frame(path)
    rows = df[(df["pop"] == pop) & (df["pdv"] == pdv)].sort_values("order")
    return rows["node"].tolist()


def load_guess(path: str, pop_num: int, pdv_num: int):
    """Whole population stored in ``path``; must hold exactly pop_num x pdv_num lanes."""
    df = _read_guess_frame(path)
    population = []
    for p in range(pop_num):
        candidate = []
        for k in range(pdv_num):
            rows = df[(df["pop"] == p) & (df["pdv"] == k)].sort_values("order")
            if rows.empty:
                raise PersistenceError(f"Guess file {path} has no lane (pop={p}, pdv={k})")
            candidate.append(rows["node"].tolist())
        population.append(candidate)
    if df["pop"].max() >= pop_num or df["pdv"].max() >= pdv_num:
        raise PersistenceError(f"Guess file {path} does not match pop_num={pop_num}, pdv_num={pdv_num}")
    return population


def save_best_paths(path: str, paths: Sequence[Sequence[int]], metrics: Sequence[float]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["pdv", "length", "fitness", "path"])
        for k, (lane, fit) in enumerate(zip(paths, metrics)):
            writer.writerow([k, len(lane), f"{fit:.6f}", "-".join(str(i) for i in lane)])


def load_nodes(path: str) -> List[SensorNode]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Node file not found: {path}")
    df = pd.read_csv(path)
    df = df.rename(columns=lambda s: s.strip())
    nodes = []
    for _, row in df.iterrows():
        v = float(row["voltage"]) if "voltage" in df.columns else SC_V_INIT
        p_type = bool(int(row["p_type"])) if "p_type" in df.columns else True
        nodes.append(SensorNode(float(row["x"]), float(row["y"]), v, p_type))
    return nodes
