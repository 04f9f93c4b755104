# run.py
import os
import logging

from wrsn_ga import GeneticEngine, Point, load_nodes, random_network, simulate, ORIGIN, WORKERS
from wrsn_ga.plot import plot_routes


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    arquivo_nodes = "nodes.csv"

    if os.path.exists(arquivo_nodes):
        nodes = load_nodes(arquivo_nodes)
    else:
        nodes = random_network(40, width=10.0, height=10.0, seed=7, v_low=3.35, v_high=3.7)

    engine = GeneticEngine(origin=ORIGIN, n_workers=WORKERS, guess_file="init_guess.csv",
                           best_path_file="best_path.csv", verbose=True)
    records = simulate(nodes, engine, n_ticks=10, dt=600.0)

    print("\n" + "=" * 70)
    print("CHARGING BATCHES")
    print("=" * 70)
    for rec in records:
        print(f"Tick {rec['tick']:3d} | Requests: {rec['requests']:3d} | PDVs: {rec['pdv_num']} "
              f"| Fitness: {rec['fitness']:.5f} | Delivered: {rec['delivered']:.2f} J")
    print("=" * 70)

    if records:
        plot_routes(nodes, records[-1]["paths"], Point(*ORIGIN), "routes.png")


if __name__ == "__main__":
    main()
