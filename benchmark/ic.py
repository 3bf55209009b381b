import cProfile
import pstats
import random
import time

import networkx as nx

from influence_seeds.network import Network
from influence_seeds.diffusion import IndependentCascade
from influence_seeds.influence_maximization import build_strategy

def make_network(num_nodes=500, avg_degree=6, seed=0):
    """Random graph with uniform edge probabilities in [0, 0.1)."""
    rnd = random.Random(seed)
    G = nx.gnm_random_graph(num_nodes, num_nodes * avg_degree // 2, seed=seed)
    for u, v in G.edges():
        G[u][v]['p'] = rnd.uniform(0, 0.1)
    return Network(graph=G)

def run_simulation(network, contagion_model, num_steps=5, max_outbreak=10):
    """Runs the contagion simulation for a number of steps."""

    for outbreak_size in range(2, max_outbreak + 1):
        initial_infected = random.sample(list(network.nodes()), outbreak_size)
        for _ in range(num_steps):
            out, history = contagion_model.run(network, set(initial_infected))

def run_selection(network, contagion_model, k=3):
    """Runs every strategy once."""
    for name in ["degree", "betweenness", "celf", "greedy"]:
        start = time.perf_counter()
        seeds = build_strategy(name, contagion_model, progress=False).select(network, k)
        print(f"{name:>12}: {seeds} in {time.perf_counter() - start:.2f}s")

def main():
    """Main function to run the benchmark."""
    # --- Setup ---
    G = make_network()
    contagion_model = IndependentCascade(seed=0)

    # --- Profiling ---
    profiler = cProfile.Profile()
    profiler.enable()

    run_simulation(G, contagion_model, num_steps=5_00)
    run_selection(G, contagion_model)

    profiler.disable()

    # --- Save and Print Stats ---
    stats_file = f"profile_{time.time()}.prof"
    profiler.dump_stats(stats_file)

    print("--- cProfile Stats ---")
    p = pstats.Stats(stats_file)
    p.sort_stats("cumulative").print_stats(20)

    print(f"\nProfiling data saved to '{stats_file}'.")
    print("To visualize with snakeviz, run the following command in your terminal:")
    print(f"snakeviz {stats_file}")

if __name__ == "__main__":
    main()
