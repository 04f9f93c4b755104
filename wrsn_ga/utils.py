# wrsn_ga/utils.py
import threading
from collections import OrderedDict
import hashlib
from typing import Sequence

import numpy as np


class LRUCache:
    """Thread-safe LRU cache based on OrderedDict."""
    def __init__(self, maxsize: int = 50_000):
        self.maxsize = int(maxsize)
        self._od = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            try:
                val = self._od.pop(key)
                self._od[key] = val
                return val
            except KeyError:
                return None

    def set(self, key, value):
        with self._lock:
            if key in self._od:
                self._od.pop(key)
            self._od[key] = value
            if len(self._od) > self.maxsize:
                self._od.popitem(last=False)

    def clear(self):
        with self._lock:
            self._od.clear()

    def __len__(self):
        with self._lock:
            return len(self._od)


def hash_lane(lane: Sequence[int], digest_size: int = 8) -> bytes:
    h = hashlib.blake2b(digest_size=digest_size)
    h.update(np.asarray(lane, dtype=np.int64).tobytes())
    return h.digest()


def lane_lengths(n: int, pdv_num: int):
    """Lane sizes for n nodes over pdv_num lanes, remainder one each to the first lanes."""
    base, rem = divmod(n, pdv_num)
    return [base + 1 if k < rem else base for k in range(pdv_num)]


def split_lanes(seq: Sequence[int], lengths: Sequence[int]):
    lanes, pos = [], 0
    for ln in lengths:
        lanes.append(list(seq[pos:pos + ln]))
        pos += ln
    return lanes


def flatten(candidate):
    return [i for lane in candidate for i in lane]


def repair_partition(candidate, request_idx):
    """
    Restore the partition invariant of a candidate in place: duplicated
    indices are dropped (first occurrence kept), foreign indices removed and
    missing request indices appended to the shortest lane.
    """
    wanted = set(request_idx)
    seen = set()
    for lane in candidate:
        kept = []
        for i in lane:
            if i in wanted and i not in seen:
                kept.append(i)
                seen.add(i)
        lane[:] = kept
    for i in request_idx:
        if i not in seen:
            shortest = min(range(len(candidate)), key=lambda k: len(candidate[k]))
            candidate[shortest].append(i)
            seen.add(i)
    return candidate


def is_partition(candidate, request_idx) -> bool:
    flat = flatten(candidate)
    return len(flat) == len(set(flat)) and set(flat) == set(request_idx)
