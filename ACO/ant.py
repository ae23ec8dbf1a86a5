"""
A single ant building one tour by pheromone- and distance-weighted sampling.

Construction is stepwise so a colony can advance all of its ants in lock
step: `move()` adds one leg, `move_to_start()` closes the cycle. The ant keeps
its start city, current city, the successor of every city it has left (UNVISITED
for the rest) and the tour length accumulated leg by leg.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ACO.pheromone import PheromoneView
from Core.errors import InvalidConfiguration
from Core.utils import make_rng
from TSP.TSP import DistanceMatrix
from TSP.tour import UNVISITED, Tour


class Ant:
    """Stepwise Ant System tour constructor.

    From city i each unvisited city j gets weight
    ``pheromone(i, j) ** alpha * (1 / distance(i, j)) ** beta``; the next city
    is drawn by roulette wheel over the unvisited cities in index order.

    Edge handling:
    - unvisited cities at distance zero (coincident cities) are maximally
      desirable: only they are eligible, weighted by ``pheromone ** alpha``;
    - when the eligible mass is zero or not finite the draw is uniform over the
      eligible cities;
    - a draw beyond the accumulated mass (rounding) picks the last candidate.
    """

    def __init__(self, distances: DistanceMatrix, pheromones: PheromoneView, alpha: float, beta: float,
                 rng: Optional[np.random.Generator] = None):
        if alpha <= 0 or beta <= 0:
            raise InvalidConfiguration(f"alpha and beta must be positive (got {alpha}, {beta})")
        if pheromones.num_cities != distances.num_cities:
            raise InvalidConfiguration("Pheromone field and distance matrix sizes differ.")
        self.distances = distances
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.num_cities = distances.num_cities
        self._rng = make_rng(rng)
        self._pheromones = pheromones
        self.start_city = 0
        self.current_city = 0
        self._successors = np.full(self.num_cities, UNVISITED, dtype=np.int64)
        self._visited = np.zeros(self.num_cities, dtype=bool)
        self._order: List[int] = []
        self._tour_length = 0.0
        self._closed = False
        self.reset()

    def reset(self, pheromones: Optional[PheromoneView] = None) -> None:
        """Start over from a new random city, optionally with a fresh pheromone view."""
        if pheromones is not None:
            self._pheromones = pheromones
        self.start_city = int(self._rng.integers(self.num_cities))
        self.current_city = self.start_city
        self._successors.fill(UNVISITED)
        self._visited.fill(False)
        self._visited[self.start_city] = True
        self._order = [self.start_city]
        self._tour_length = 0.0
        self._closed = False

    @property
    def tour_length(self) -> float:
        return self._tour_length

    @property
    def successors(self) -> np.ndarray:
        """Copy of the successor array; UNVISITED marks cities not yet left."""
        return self._successors.copy()

    @property
    def all_visited(self) -> bool:
        return len(self._order) == self.num_cities

    @property
    def is_complete(self) -> bool:
        return self._closed

    @property
    def tour(self) -> Tour:
        if not self._closed:
            raise RuntimeError("Tour is not complete; call move_to_start() after the last move().")
        return Tour(self._order)

    def city_probabilities(self) -> np.ndarray:
        """Probability of moving from the current city to each city (zero if visited)."""
        probabilities = np.zeros(self.num_cities, dtype=float)
        candidates = np.flatnonzero(~self._visited)
        if candidates.size == 0:
            return probabilities

        dist = self.distances.weights[self.current_city, candidates]
        tau = self._pheromones.row(self.current_city)[candidates]
        coincident = dist == 0.0

        with np.errstate(over="ignore", under="ignore", divide="ignore", invalid="ignore"):
            if coincident.any():
                eligible = coincident
                weights = np.where(coincident, tau ** self.alpha, 0.0)
            else:
                eligible = np.ones(candidates.size, dtype=bool)
                weights = tau ** self.alpha * (1.0 / dist) ** self.beta
            weights = np.where(np.isnan(weights), 0.0, weights)
            if np.isinf(weights).any():
                weights = np.isinf(weights).astype(float)
            total = weights.sum()

        if not np.isfinite(total) or total <= 0.0:
            weights = eligible.astype(float)
            total = weights.sum()

        probabilities[candidates] = weights / total
        return probabilities

    def _select_next_city(self, probabilities: np.ndarray) -> int:
        candidates = np.flatnonzero(probabilities > 0.0)
        cumulative = np.cumsum(probabilities[candidates])
        draw = self._rng.random()
        pick = int(np.searchsorted(cumulative, draw, side="left"))
        if pick >= candidates.size:
            pick = candidates.size - 1
        return int(candidates[pick])

    def move(self) -> int:
        """Probabilistically select and take the next leg; returns the new city."""
        if self.all_visited:
            raise RuntimeError("Every city has been visited; call move_to_start() to close the tour.")
        nxt = self._select_next_city(self.city_probabilities())
        self._successors[self.current_city] = nxt
        self._tour_length += float(self.distances.weights[self.current_city, nxt])
        self._visited[nxt] = True
        self._order.append(nxt)
        self.current_city = nxt
        return nxt

    def move_to_start(self) -> None:
        """Take the closing leg from the last city back to the start city."""
        if not self.all_visited:
            raise RuntimeError("Cannot close the tour before every city has been visited.")
        if self._closed:
            raise RuntimeError("Tour is already closed.")
        self._successors[self.current_city] = self.start_city
        self._tour_length += float(self.distances.weights[self.current_city, self.start_city])
        self.current_city = self.start_city
        self._closed = True

    def construct(self) -> Tour:
        """Build a full tour in one call."""
        while not self.all_visited:
            self.move()
        self.move_to_start()
        return self.tour


def construct_tour(distances: DistanceMatrix, pheromones: PheromoneView, alpha: float, beta: float,
                   rng: Optional[np.random.Generator] = None) -> Tour:
    """One-shot construction from a uniformly random start city."""
    return Ant(distances, pheromones, alpha, beta, rng).construct()
