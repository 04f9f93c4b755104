# wrsn_ga/plot.py
from typing import Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .point import Point


def plot_routes(nodes: Sequence, paths: Sequence[Sequence[int]], origin: Point, out_path: str = "routes.png",
                show: bool = False):
    fig = plt.figure(figsize=(8, 7))
    ax = plt.gca()

    xs = [n.pos.x for n in nodes]
    ys = [n.pos.y for n in nodes]
    ax.scatter(xs, ys, s=14, color='#9AA5B1', alpha=0.8, label='Sensor nodes')

    # one colour per PDV lane, closed at the base station
    cmap = plt.get_cmap('tab10')
    for k, lane in enumerate(paths):
        px = [origin.x] + [nodes[i].pos.x for i in lane] + [origin.x]
        py = [origin.y] + [nodes[i].pos.y for i in lane] + [origin.y]
        ax.plot(px, py, color=cmap(k % 10), linewidth=1.0, marker='o', markersize=4, label=f'PDV {k}')

    ax.scatter([origin.x], [origin.y], s=90, color='red', marker='s', edgecolor='k', label='Base')
    ax.set_xlabel('x [m]')
    ax.set_ylabel('y [m]')
    ax.set_title('PDV charging routes')
    ax.grid(True, linestyle='--', alpha=0.3)
    ax.legend()
    ax.set_aspect('equal', adjustable='box')

    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    if show:
        plt.show()
    plt.close(fig)
    return out_path
