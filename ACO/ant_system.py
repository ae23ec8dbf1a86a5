"""
Plain Ant System: repeated colony rounds with evaporation and reinforcement.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ACO.colony import Colony
from Core.config import AntSystemConfig
from Core.problem import Solution
from Core.search_algorithm import RunResult, SearchAlgorithm
from Core.utils import make_rng
from TSP.TSP import TSPProblem


class AntSystem(SearchAlgorithm):
    """
    Ant System for the TSP.

    Each step is one round: every ant builds a tour, the round's best length
    is compared with the best so far, pheromone evaporates and is reinforced
    by all tours, and the ants restart from new random cities. The best tour
    length and the 1-based iteration that first reached it are tracked.
    """
    phase = "ant_system"

    def __init__(self, problem: TSPProblem, population_size: int = 20, alpha: float = 1.5, beta: float = 3.5,
                 evaporation_factor: float = 0.5, *, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None, logger: Optional[logging.Logger] = None, **kwargs):
        """
        Args:
            problem: The TSP instance; its distance matrix is shared with the colony.
            population_size: Number of ants.
            alpha: Pheromone exponent.
            beta: Heuristic (inverse distance) exponent.
            evaporation_factor: Fraction of pheromone removed per update, in [0, 1].
            rng: Random stream to draw from; built from `seed` when omitted.
        """
        super().__init__(problem, population_size, logger=logger, **kwargs)
        self.alpha = alpha
        self.beta = beta
        self.evaporation_factor = evaporation_factor
        self.rng = make_rng(rng if rng is not None else seed)
        self.num_iterations: Optional[int] = None
        # Fail fast on bad hyperparameters before any construction.
        self.colony = self._build_colony()

    @classmethod
    def from_config(cls, problem: TSPProblem, config: AntSystemConfig, *,
                    logger: Optional[logging.Logger] = None, **kwargs):
        return cls(
            problem,
            population_size=config.num_ants,
            alpha=config.alpha,
            beta=config.beta,
            evaporation_factor=config.evaporation_factor,
            seed=config.seed,
            logger=logger,
            **kwargs,
        )

    def _build_colony(self) -> Colony:
        return Colony(
            self.problem.distances,
            self.population_size,
            self.alpha,
            self.beta,
            self.evaporation_factor,
            rng=self.rng,
        )

    def initialize(self):
        """Fresh colony with seeded pheromone; clears best-so-far and history."""
        self.iteration = 0
        self.best_solution = None
        self.best_iteration = -1
        self.history = []
        self.population = []
        self.colony = self._build_colony()
        self.colony.initialize()

    def run(self, num_iterations: int) -> RunResult:
        self.num_iterations = int(num_iterations)
        return super().run(num_iterations)

    def ant_system_round(self, outer_iteration: int, round_index: int, *, reset: bool = True) -> float:
        """Run one colony round and return the best length among its ants."""
        if self.colony.tours_complete:
            self.colony.reset()
        self.colony.complete_tours()
        self.colony.get_best_tour_length()
        best_ant = self.colony.best_ant()
        round_best = best_ant.tour_length

        self.population = [Solution(tour, self.problem) for tour in self.colony.get_tours()]
        self._update_best_solution(Solution(best_ant.tour, self.problem), iteration=outer_iteration)

        self.colony.update_pheromone_levels()
        if reset:
            self.colony.reset()

        self.record_progress("ant_system", round_index, round_best, outer_iteration=outer_iteration)
        self.logger.info("Ant System Iteration %d, Best Tour Length: %.4f", round_index, self.best_fitness)
        return round_best

    def step(self):
        """One Ant System round."""
        if not self.colony.ants:
            self.colony.initialize()
        self.iteration += 1
        self.ant_system_round(self.iteration, self.iteration)
