"""
Ant colony: owns the pheromone field and the ants that read it.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ACO.ant import Ant
from ACO.pheromone import PheromoneField
from Core.errors import DegenerateDistance, InvalidConfiguration
from Core.utils import make_rng
from TSP.TSP import DistanceMatrix
from TSP.tour import Tour

logger = logging.getLogger(__name__)


class Colony:
    """A colony of ants sharing one pheromone field.

    One Ant System round is ``complete_tours()``, ``get_best_tour_length()``,
    ``update_pheromone_levels()`` and ``reset()``. The pheromone field lives
    for the whole run; only this class writes to it.
    """

    def __init__(self, distances: DistanceMatrix, num_ants: int, alpha: float, beta: float,
                 evaporation_factor: float, *, rng: Optional[np.random.Generator] = None):
        if not isinstance(distances, DistanceMatrix):
            distances = DistanceMatrix(distances)
        if isinstance(num_ants, bool) or not isinstance(num_ants, (int, np.integer)) or num_ants <= 0:
            raise InvalidConfiguration(f"num_ants must be a positive integer (got {num_ants!r})")
        if alpha <= 0 or beta <= 0:
            raise InvalidConfiguration(f"alpha and beta must be positive (got {alpha}, {beta})")
        if not 0.0 <= evaporation_factor <= 1.0:
            raise InvalidConfiguration(f"evaporation_factor must lie in [0, 1] (got {evaporation_factor})")

        self.distances = distances
        self.num_cities = distances.num_cities
        self.num_ants = int(num_ants)
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.evaporation_factor = float(evaporation_factor)
        self.rng = make_rng(rng)
        self.pheromones = PheromoneField(self.num_cities)
        self.ants: List[Ant] = []
        self.best_tour_length = math.inf
        self.best_tour: Optional[Tour] = None

    def initialize(self) -> None:
        """Seed the pheromone field and create the ants."""
        self.initialize_pheromone_levels()
        view = self.pheromones.view()
        self.ants = [Ant(self.distances, view, self.alpha, self.beta, self.rng) for _ in range(self.num_ants)]
        self.best_tour_length = math.inf
        self.best_tour = None

    def nearest_neighbour_tour(self, start: Optional[int] = None) -> Tour:
        """Greedy tour: from `start` (random if None) always hop to the nearest unvisited city."""
        n = self.num_cities
        current = int(self.rng.integers(n)) if start is None else int(start)
        visited = np.zeros(n, dtype=bool)
        visited[current] = True
        order = [current]
        weights = self.distances.weights
        for _ in range(n - 1):
            # Ties resolve to the lowest index.
            masked = np.where(visited, np.inf, weights[current])
            current = int(np.argmin(masked))
            visited[current] = True
            order.append(current)
        return Tour(order)

    def initialize_pheromone_levels(self) -> float:
        """Set every entry to m / C_nn and return that level."""
        nn_length = self.nearest_neighbour_tour().length(self.distances)
        if nn_length <= 0.0:
            raise DegenerateDistance("Nearest-neighbour tour has zero length; cannot seed pheromone.")
        level = self.num_ants / nn_length
        self.pheromones.fill(level)
        logger.debug("Seeded pheromone at %.6g (C_nn=%.6g, m=%d)", level, nn_length, self.num_ants)
        return level

    def _require_ants(self) -> None:
        if not self.ants:
            raise RuntimeError("Colony has no ants; call initialize() first.")

    def complete_tours(self) -> None:
        """Advance every ant one leg at a time until all tours are closed."""
        self._require_ants()
        for step in range(self.num_cities):
            for ant in self.ants:
                if step < self.num_cities - 1:
                    ant.move()
                else:
                    ant.move_to_start()

    @property
    def tours_complete(self) -> bool:
        return bool(self.ants) and all(ant.is_complete for ant in self.ants)

    def best_ant(self) -> Ant:
        """The ant holding the shortest tour of the current round."""
        self._require_ants()
        return min(self.ants, key=lambda ant: ant.tour_length)

    def get_best_tour_length(self) -> float:
        """Best tour length seen among this colony's ants so far."""
        ant = self.best_ant()
        if ant.tour_length < self.best_tour_length:
            self.best_tour_length = ant.tour_length
            self.best_tour = ant.tour
        return self.best_tour_length

    def get_tours(self) -> List[Tour]:
        self._require_ants()
        return [ant.tour for ant in self.ants]

    def get_tour_lengths(self) -> List[float]:
        self._require_ants()
        return [ant.tour_length for ant in self.ants]

    def update_pheromone_levels(self) -> None:
        """Evaporate, then let every ant deposit 1 / length on each leg of its tour."""
        self.pheromones.evaporate_and_deposit(self.evaporation_factor, self.get_tours(), self.get_tour_lengths())

    def augment_pheromone_levels(self, tours: Sequence[Tour], tour_lengths: Optional[Sequence[float]] = None) -> None:
        """Same rule as `update_pheromone_levels`, driven by externally supplied tours."""
        tours = list(tours)
        if tour_lengths is None:
            lengths = [tour.length(self.distances) for tour in tours]
        else:
            lengths = [float(length) for length in tour_lengths]
        if len(lengths) != len(tours):
            raise InvalidConfiguration(f"{len(tours)} tours given with {len(lengths)} lengths")
        for tour in tours:
            if tour.num_cities != self.num_cities:
                raise InvalidConfiguration(
                    f"Tour covers {tour.num_cities} cities, colony has {self.num_cities}"
                )
        self.pheromones.evaporate_and_deposit(self.evaporation_factor, tours, lengths)
        logger.debug("Augmented pheromone with %d external tours", len(tours))

    def reset(self) -> None:
        """Give every ant a new start city and the current pheromone view."""
        view = self.pheromones.view()
        for ant in self.ants:
            ant.reset(view)
