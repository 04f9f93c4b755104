# wrsn_ga/cluster.py
from typing import List, Sequence

from .point import Point
from .constants import MAX_ACOUS_DIST, MIN_ACOUS_DIST


class Cluster:
    """A center position and the indices of the nodes inside its acoustic range."""
    def __init__(self, center: Point = None):
        self.center = center if center is not None else Point()
        self.members: List[int] = []

    def assign_members(self, nodes: Sequence, center: Point = None) -> List[int]:
        if center is not None:
            self.center = center
        self.members = []
        for i, node in enumerate(nodes):
            d = self.center.distance(node.pos)
            if MIN_ACOUS_DIST < d < MAX_ACOUS_DIST:
                self.members.append(i)
        return self.members

    def __contains__(self, idx: int) -> bool:
        return idx in self.members

    def __len__(self):
        return len(self.members)


def build_clusters(nodes: Sequence, centers_idx: Sequence[int]) -> dict:
    clusters = {}
    for c in centers_idx:
        cl = Cluster()
        cl.assign_members(nodes, nodes[c].pos)
        clusters[c] = cl
    return clusters
