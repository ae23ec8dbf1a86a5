#!/bin/python
"""
Unified entry point for comparing the Ant System with its Genetic Algorithm
Hybrid on a Traveling Salesperson Problem instance.

The instance comes from a TSPLIB file (`--tsp-file`), a precomputed distance
matrix (`--distance-file`) or, when neither is given, random cities on a
100x100 grid.
"""
import argparse
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ACO.ant_system import AntSystem
from Core.config import AntSystemConfig, HybridConfig, write_run_config
from Core.errors import DegenerateDistance, InvalidConfiguration
from Core.utils import setup_logging
from Hybrid.ga_hybrid import GAHybrid
from TSP.TSP import DistanceMatrix, TSPProblem
from TSP.plotting import plot_convergence, plot_route
from TSP.tsplib import load_distance_matrix, load_tsplib

ALGORITHMS = ("antSystem", "gaHybrid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve the TSP with the Ant System or the Ant System / GA hybrid."
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        default="gaHybrid",
        choices=ALGORITHMS,
        help="Algorithm to run (default: gaHybrid)"
    )

    # Instance source
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--tsp-file", type=str, default=None,
                        help="TSPLIB file with a NODE_COORD_SECTION")
    source.add_argument("--distance-file", type=str, default=None,
                        help="Precomputed distance matrix (.npy, .npz or text)")
    parser.add_argument("--cities", "-c", type=int, default=20,
                        help="Number of random cities when no file is given (default: 20)")
    parser.add_argument("--grid-size", type=float, default=100.0,
                        help="Side of the square random cities are placed in (default: 100)")

    # Ant System parameters
    parser.add_argument("--iterations", "-i", type=int, default=10,
                        help="Number of (outer) iterations (default: 10)")
    parser.add_argument("--ants", type=int, default=20, help="Number of ants (default: 20)")
    parser.add_argument("--alpha", type=float, default=1.5, help="Pheromone exponent (default: 1.5)")
    parser.add_argument("--beta", type=float, default=3.5, help="Distance exponent (default: 3.5)")
    parser.add_argument("--evaporation-factor", type=float, default=0.5,
                        help="Fraction of pheromone evaporating per update (default: 0.5)")

    # Hybrid-specific parameters
    parser.add_argument("--ant-system-rounds", type=int, default=10,
                        help="Ant System rounds per hybrid iteration (default: 10)")
    parser.add_argument("--ga-generations", type=int, default=10,
                        help="GA generations per hybrid iteration (default: 10)")
    parser.add_argument("--crossover-probability", type=float, default=0.9,
                        help="GA crossover probability (default: 0.9)")
    parser.add_argument("--mutation-probability", type=float, default=0.5,
                        help="GA mutation probability (default: 0.5)")

    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--log-dir", type=str, default="logs")
    parser.add_argument("--output-dir", type=str, default="results")
    parser.add_argument("--no-plots", action="store_true", help="Disable saving plot images")
    return parser


def load_problem(args: argparse.Namespace) -> Tuple[str, TSPProblem]:
    """Build the TSP instance described by the command line."""
    if args.tsp_file:
        instance = load_tsplib(args.tsp_file)
        return instance.name, TSPProblem(instance.distance_matrix(), instance.coords.tolist())
    if args.distance_file:
        distances = load_distance_matrix(args.distance_file)
        return Path(args.distance_file).stem, TSPProblem(distances)
    if args.cities < 2:
        raise InvalidConfiguration(f"--cities must be at least 2 (got {args.cities})")
    rng = np.random.default_rng(args.seed)
    coords = rng.random((args.cities, 2)) * args.grid_size
    return f"random{args.cities}", TSPProblem(DistanceMatrix.from_coordinates(coords), coords.tolist())


def config_from_args(args: argparse.Namespace) -> AntSystemConfig:
    values = {
        "num_ants": args.ants,
        "alpha": args.alpha,
        "beta": args.beta,
        "evaporation_factor": args.evaporation_factor,
        "num_iterations": args.iterations,
        "seed": args.seed,
        "ant_system_rounds": args.ant_system_rounds,
        "crossover_probability": args.crossover_probability,
        "mutation_probability": args.mutation_probability,
        "ga_generations": args.ga_generations,
    }
    if args.algorithm == "gaHybrid":
        return HybridConfig.from_mapping(values)
    return AntSystemConfig.from_mapping(values)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse command line arguments and run the selected algorithm."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
        instance_name, problem = load_problem(args)
    except (InvalidConfiguration, FileNotFoundError) as exc:
        parser.error(str(exc))

    logger = setup_logging(args.algorithm, instance_name, log_dir=args.log_dir)
    output_dir = Path(args.output_dir)
    config_path = write_run_config(
        output_dir,
        config,
        extra={"algorithm": args.algorithm, "instance": instance_name, "num_cities": problem.num_cities},
    )
    logger.info("Run configuration written to %s", config_path)

    if args.algorithm == "gaHybrid":
        solver = GAHybrid.from_config(problem, config, logger=logger)
    else:
        solver = AntSystem.from_config(problem, config, logger=logger)

    start_time = time.time()
    try:
        result = solver.run(config.num_iterations)
    except DegenerateDistance as exc:
        logger.error("Run aborted: %s", exc)
        return 1
    elapsed = time.time() - start_time

    logger.info("Time taken: %.2f seconds", elapsed)
    logger.info("Best Tour Length: %s", result.best_length)
    logger.info("Best Iteration: %d", result.best_iteration)

    if not args.no_plots:
        saved: List[Path] = []
        convergence = plot_convergence(result.history, output_dir / "convergence.png",
                                       title=f"{args.algorithm} on {instance_name}")
        if convergence is not None:
            saved.append(convergence)
        if result.best_tour is not None and problem.city_coords is not None:
            saved.append(plot_route(problem.city_coords, result.best_tour, output_dir / "route.png",
                                    length=result.best_length))
        for path in saved:
            logger.info("Plot saved to '%s'", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
