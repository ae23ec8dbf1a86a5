"""
Genetic Algorithm Hybrid: Ant System rounds feed a GA, the GA feeds pheromone.

Each outer iteration:
  1. run `ant_system_rounds` colony rounds (the last one keeps its tours);
  2. turn the colony's tours into a Population and evolve it for
     `ga_generations` generations (selection -> crossover -> mutation);
  3. if more outer iterations follow, fold the GA's final tours into the
     pheromone field with the usual evaporate + reinforce rule and restart
     the ants.

The best tour length is tracked across both phases; the iteration recorded
for it is the 1-based outer iteration.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ACO.ant_system import AntSystem
from Core.config import HybridConfig
from Core.errors import InvalidConfiguration
from GA.population import Population
from TSP.TSP import TSPProblem


class GAHybrid(AntSystem):
    phase = "hybrid"

    def __init__(self, problem: TSPProblem, population_size: int = 20, alpha: float = 1.5, beta: float = 3.5,
                 evaporation_factor: float = 0.5, *, ant_system_rounds: int = 10,
                 crossover_probability: float = 0.9, mutation_probability: float = 0.5,
                 ga_generations: int = 10, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None, logger: Optional[logging.Logger] = None, **kwargs):
        if ant_system_rounds <= 0 or ga_generations <= 0:
            raise InvalidConfiguration(
                f"ant_system_rounds and ga_generations must be positive (got {ant_system_rounds}, {ga_generations})"
            )
        for name, value in (("crossover_probability", crossover_probability),
                            ("mutation_probability", mutation_probability)):
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must lie in [0, 1] (got {value})")
        super().__init__(problem, population_size, alpha, beta, evaporation_factor,
                         rng=rng, seed=seed, logger=logger, **kwargs)
        self.ant_system_rounds = int(ant_system_rounds)
        self.crossover_probability = float(crossover_probability)
        self.mutation_probability = float(mutation_probability)
        self.ga_generations = int(ga_generations)
        self.ga_population: Optional[Population] = None

    @classmethod
    def from_config(cls, problem: TSPProblem, config: HybridConfig, *,
                    logger: Optional[logging.Logger] = None, **kwargs):
        return super().from_config(
            problem,
            config,
            logger=logger,
            ant_system_rounds=config.ant_system_rounds,
            crossover_probability=config.crossover_probability,
            mutation_probability=config.mutation_probability,
            ga_generations=config.ga_generations,
            **kwargs,
        )

    def initialize(self):
        super().initialize()
        self.ga_population = None

    def _has_more_iterations(self) -> bool:
        return self.num_iterations is None or self.iteration < self.num_iterations

    def run_genetic_algorithm(self, outer_iteration: int) -> Population:
        """Evolve the colony's current tours and return the final population."""
        population = Population.from_tours(
            self.colony.get_tours(),
            self.problem,
            self.crossover_probability,
            self.mutation_probability,
            rng=self.rng,
        )
        for generation in range(1, self.ga_generations + 1):
            population = population.evolve()
            best = population.best_individual()
            self._update_best_solution(best, iteration=outer_iteration)
            self.record_progress("genetic_algorithm", generation, best.fitness, outer_iteration=outer_iteration)
            self.logger.info("Genetic Algorithm Generation %d, Best Tour Length: %.4f",
                             generation, self.best_fitness)
        return population

    def step(self):
        """One outer iteration: Ant System rounds, GA generations, pheromone feedback."""
        if not self.colony.ants:
            self.colony.initialize()
        self.iteration += 1
        outer = self.iteration

        for round_index in range(1, self.ant_system_rounds + 1):
            # Keep the last round's tours: they seed the GA.
            self.ant_system_round(outer, round_index, reset=round_index < self.ant_system_rounds)

        self.ga_population = self.run_genetic_algorithm(outer)
        self.population = list(self.ga_population)

        if self._has_more_iterations():
            self.colony.augment_pheromone_levels(self.ga_population.get_tours(),
                                                 self.ga_population.get_tour_lengths())
            self.colony.reset()

        self.logger.info("Hybrid Iteration %d, Best Tour Length: %.4f", outer, self.best_fitness)
