"""
Genetic operators over a population of tours.

Every operator returns a new Population and leaves its parent untouched;
tours are immutable values, so individuals are rebuilt rather than edited.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from Core.errors import InvalidConfiguration
from Core.utils import make_rng
from GA.individual import Individual
from TSP.TSP import TSPProblem
from TSP.tour import Tour


def order_crossover(parent_a: Tour, parent_b: Tour, cut: int) -> Tuple[Tour, Tour]:
    """One-point crossover with order-preserving repair.

    Child A keeps `parent_a[:cut]` and appends the remaining cities in the
    order they appear in `parent_b`; child B is built the other way round.
    """
    n = parent_a.num_cities
    if parent_b.num_cities != n:
        raise InvalidConfiguration("Parents must cover the same number of cities.")
    if not 1 <= cut <= n - 1:
        raise InvalidConfiguration(f"Cut point must lie in [1, {n - 1}] (got {cut})")

    def _child(head: np.ndarray, donor: np.ndarray) -> Tour:
        prefix = head[:cut]
        rest = donor[~np.isin(donor, prefix)]
        return Tour(np.concatenate([prefix, rest]))

    return _child(parent_a.order, parent_b.order), _child(parent_b.order, parent_a.order)


def swap_mutation(tour: Tour, first: int, second: int) -> Tour:
    """Return `tour` with the cities at positions `first` and `second` exchanged."""
    if first == second:
        raise InvalidConfiguration("Swap mutation needs two distinct positions.")
    order = tour.order.copy()
    order[first], order[second] = order[second], order[first]
    return Tour(order)


class Population:
    """
    A set of individuals plus the GA hyperparameters that act on them.

    Order of individuals carries no meaning. Selection, crossover and mutation
    each produce a new population of the same size sharing this one's problem,
    probabilities and random stream.
    """

    def __init__(self, individuals: Iterable[Individual], problem: TSPProblem,
                 crossover_probability: float, mutation_probability: float,
                 rng: Optional[np.random.Generator] = None):
        self.individuals: List[Individual] = list(individuals)
        if not self.individuals:
            raise InvalidConfiguration("A population needs at least one individual.")
        for name, value in (("crossover_probability", crossover_probability),
                            ("mutation_probability", mutation_probability)):
            if not 0.0 <= float(value) <= 1.0:
                raise InvalidConfiguration(f"{name} must lie in [0, 1] (got {value})")
        for ind in self.individuals:
            if ind.tour.num_cities != problem.num_cities:
                raise InvalidConfiguration(
                    f"Individual covers {ind.tour.num_cities} cities, problem has {problem.num_cities}"
                )
        self.problem = problem
        self.crossover_probability = float(crossover_probability)
        self.mutation_probability = float(mutation_probability)
        self.rng = make_rng(rng)

    @classmethod
    def from_tours(cls, tours: Iterable[Tour], problem: TSPProblem, crossover_probability: float,
                   mutation_probability: float, rng: Optional[np.random.Generator] = None) -> 'Population':
        return cls((Individual(tour, problem) for tour in tours), problem,
                   crossover_probability, mutation_probability, rng)

    def _spawn(self, individuals: Sequence[Individual]) -> 'Population':
        return Population(individuals, self.problem, self.crossover_probability,
                          self.mutation_probability, self.rng)

    @property
    def distances(self):
        return self.problem.distances

    @property
    def num_cities(self) -> int:
        return self.problem.num_cities

    def tournament_selection(self) -> 'Population':
        """Binary tournaments with replacement; the shorter tour wins, ties go to the second draw."""
        size = len(self.individuals)
        pool: List[Individual] = []
        for _ in range(size):
            first = self.individuals[int(self.rng.integers(size))]
            second = self.individuals[int(self.rng.integers(size))]
            winner = first if first.fitness < second.fitness else second
            pool.append(winner.copy(preserve_id=False))
        return self._spawn(pool)

    def one_point_crossover(self) -> 'Population':
        """Recombine disjoint random pairs; an odd individual out is carried over unchanged."""
        order = self.rng.permutation(len(self.individuals))
        children: List[Individual] = []
        for k in range(0, len(order) - 1, 2):
            parent_a = self.individuals[int(order[k])]
            parent_b = self.individuals[int(order[k + 1])]
            if self.rng.random() < self.crossover_probability:
                cut = int(self.rng.integers(1, self.num_cities))
                tour_a, tour_b = order_crossover(parent_a.tour, parent_b.tour, cut)
                children.append(parent_a.with_tour(tour_a))
                children.append(parent_b.with_tour(tour_b))
            else:
                children.append(parent_a.copy(preserve_id=False))
                children.append(parent_b.copy(preserve_id=False))
        if len(order) % 2:
            children.append(self.individuals[int(order[-1])].copy(preserve_id=False))
        return self._spawn(children)

    def mutation(self) -> 'Population':
        """Swap two distinct positions of each tour with probability `mutation_probability`."""
        mutated: List[Individual] = []
        for ind in self.individuals:
            if self.rng.random() < self.mutation_probability:
                first = int(self.rng.integers(self.num_cities))
                second = int(self.rng.integers(self.num_cities))
                while second == first:
                    second = int(self.rng.integers(self.num_cities))
                mutated.append(ind.with_tour(swap_mutation(ind.tour, first, second)))
            else:
                mutated.append(ind.copy(preserve_id=False))
        return self._spawn(mutated)

    def evolve(self) -> 'Population':
        """One generation: selection, then crossover, then mutation."""
        return self.tournament_selection().one_point_crossover().mutation()

    def best_individual(self) -> Individual:
        return min(self.individuals, key=lambda ind: ind.fitness)

    def get_best_fitness(self) -> float:
        return self.best_individual().fitness

    def get_tours(self) -> List[Tour]:
        return [ind.tour for ind in self.individuals]

    def get_tour_lengths(self) -> List[float]:
        return [ind.fitness for ind in self.individuals]

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]
