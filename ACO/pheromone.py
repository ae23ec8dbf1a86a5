"""
Pheromone matrix shared between a colony and its ants.

Ants only read pheromone while they build tours; the colony alone writes it.
That split is expressed as two types over one array: `PheromoneView` exposes
reads, and `PheromoneField` (owned by the colony) adds seeding, evaporation
and deposit. Views observe every write made through their field.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from Core.errors import DegenerateDistance, InvalidConfiguration
from TSP.tour import Tour


class PheromoneView:
    """Read-only access to a pheromone matrix."""

    __slots__ = ("_matrix",)

    def __init__(self, matrix: np.ndarray):
        self._matrix = matrix

    @property
    def num_cities(self) -> int:
        return int(self._matrix.shape[0])

    @property
    def matrix(self) -> np.ndarray:
        """Non-writeable view of the current levels."""
        view = self._matrix.view()
        view.flags.writeable = False
        return view

    def row(self, city: int) -> np.ndarray:
        return self.matrix[city]

    def snapshot(self) -> np.ndarray:
        """Detached copy, for tests and reporting."""
        return self._matrix.copy()

    def __getitem__(self, index):
        return self.matrix[index]


class PheromoneField(PheromoneView):
    """Owner of the pheromone matrix; the only type allowed to change it.

    Entries never go below zero: seeding requires a non-negative level,
    evaporation scales by `1 - factor` with factor in [0, 1], and deposits
    are reciprocals of positive tour lengths.
    """

    __slots__ = ()

    def __init__(self, num_cities: int, initial_level: float = 0.0):
        if num_cities < 2:
            raise InvalidConfiguration("A pheromone field needs at least two cities.")
        super().__init__(np.zeros((num_cities, num_cities), dtype=float))
        self.fill(initial_level)

    def view(self) -> PheromoneView:
        return PheromoneView(self._matrix)

    def fill(self, level: float) -> None:
        level = float(level)
        if not np.isfinite(level) or level < 0.0:
            raise InvalidConfiguration(f"Pheromone level must be finite and non-negative (got {level})")
        self._matrix.fill(level)

    def evaporate(self, evaporation_factor: float) -> None:
        """Multiply every entry by (1 - evaporation_factor)."""
        factor = float(evaporation_factor)
        if not 0.0 <= factor <= 1.0:
            raise InvalidConfiguration(f"evaporation_factor must lie in [0, 1] (got {factor})")
        self._matrix *= (1.0 - factor)

    def deposit(self, tour: Tour, tour_length: float) -> float:
        """Add 1 / tour_length to both directions of every leg of `tour`.

        Returns the amount deposited per leg.
        """
        length = float(tour_length)
        if not np.isfinite(length) or length <= 0.0:
            raise DegenerateDistance(f"Cannot deposit pheromone for a tour of length {tour_length}")
        if tour.num_cities != self.num_cities:
            raise InvalidConfiguration(
                f"Tour covers {tour.num_cities} cities, pheromone field has {self.num_cities}"
            )
        amount = 1.0 / length
        src = tour.order
        dst = np.roll(src, -1)
        # add.at accumulates repeated legs (two-city tours traverse one pair twice).
        np.add.at(self._matrix, (src, dst), amount)
        np.add.at(self._matrix, (dst, src), amount)
        return amount

    def evaporate_and_deposit(self, evaporation_factor: float, tours: Iterable[Tour],
                              tour_lengths: Iterable[float]) -> None:
        """Ant System update: evaporate once, then reinforce with every tour."""
        pairs = list(zip(tours, tour_lengths))
        # Validate all lengths before touching the matrix.
        for _, length in pairs:
            if not np.isfinite(float(length)) or float(length) <= 0.0:
                raise DegenerateDistance(f"Cannot deposit pheromone for a tour of length {length}")
        self.evaporate(evaporation_factor)
        for tour, length in pairs:
            self.deposit(tour, length)
