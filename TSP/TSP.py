# Built-in Python packages
from typing import Any, Dict, Iterable, Optional, Sequence

# Third-party packages
import numpy as np

# Local project modules
from Core.errors import InvalidConfiguration
from Core.problem import ProblemInterface, Solution
from Core.utils import make_rng
from TSP.tour import Tour


class TSPProblem(ProblemInterface):
    """
    Represents the Traveling Salesperson Problem (TSP).
    Conforms to the ProblemInterface for use with the search algorithms.
    """
    def __init__(self, distances: 'DistanceMatrix', city_coords: Optional[Sequence[Sequence[float]]] = None,
                 *, rng: Optional[np.random.Generator] = None):
        """
        Initializes the TSP problem instance.

        Args:
            distances: A DistanceMatrix (or anything convertible to one).
            city_coords: Optional (x, y) coordinates for each city, used for plotting only.
            rng: Random stream for random initial tours.
        """
        self.distances = distances if isinstance(distances, DistanceMatrix) else DistanceMatrix(distances)
        if city_coords is not None and len(city_coords) != self.distances.num_cities:
            raise InvalidConfiguration(
                f"{len(city_coords)} coordinates given for {self.distances.num_cities} cities"
            )
        self.city_coords = city_coords
        self.rng = make_rng(rng)

    @property
    def num_cities(self) -> int:
        return self.distances.num_cities

    def evaluate(self, solution: Solution) -> float:
        """
        Calculates the total distance of the tour represented by the solution.
        Lower distance is better fitness.
        """
        return self.calculate_path_distance(solution.representation)

    def get_initial_solution(self) -> Solution:
        """Generates a uniformly random tour."""
        return Solution(representation=Tour(self.rng.permutation(self.num_cities)), problem=self)

    def get_problem_info(self) -> Dict[str, Any]:
        """
        Provides essential information about the TSP instance.
        """
        return {
            'dimension': self.num_cities,
            'problem_type': 'permutation',
            'symmetric': self.distances.is_symmetric,
            'cities': self.city_coords,
        }

    def calculate_path_distance(self, tour: Tour) -> float:
        """
        Calculates the total distance of a tour, including the leg that returns
        from the last city to the first.
        """
        if not isinstance(tour, Tour):
            tour = Tour(tour)
        if tour.num_cities != self.num_cities:
            raise InvalidConfiguration(
                f"Tour covers {tour.num_cities} cities, problem has {self.num_cities}"
            )
        return tour.length(self.distances)


class DistanceMatrix:
    """Validated, read-only square matrix of tour-leg costs.

    Shared by reference between every component of a run. Entries must be
    finite and non-negative with a zero diagonal; off-diagonal zeros
    (coincident cities) are allowed.
    """

    def __init__(self, weights: Iterable[Iterable[float]]):
        arr = np.array(weights, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise InvalidConfiguration(f"Distance matrix must be square (got shape {arr.shape})")
        if arr.shape[0] < 2:
            raise InvalidConfiguration("At least two cities are required.")
        if not np.all(np.isfinite(arr)):
            raise InvalidConfiguration("Distance matrix contains non-finite entries.")
        if np.any(arr < 0.0):
            raise InvalidConfiguration("Distance matrix contains negative entries.")
        if np.any(np.diag(arr) != 0.0):
            raise InvalidConfiguration("Distance matrix diagonal must be zero.")
        arr.flags.writeable = False
        self.weights = arr
        self.is_symmetric = bool(np.allclose(arr, arr.T))

    @classmethod
    def from_coordinates(cls, coords: Iterable[Iterable[float]]) -> 'DistanceMatrix':
        """Euclidean distances between (x, y) points."""
        pts = np.asarray(coords, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise InvalidConfiguration("coords must have shape (N, 2)")
        diff = pts[:, None, :] - pts[None, :, :]
        return cls(np.linalg.norm(diff, axis=2))

    @property
    def num_cities(self) -> int:
        return int(self.weights.shape[0])

    @property
    def has_coincident_cities(self) -> bool:
        off_diagonal = ~np.eye(self.num_cities, dtype=bool)
        return bool(np.any(self.weights[off_diagonal] == 0.0))

    def __getitem__(self, index):
        return self.weights[index]

    def __len__(self) -> int:
        return self.num_cities
