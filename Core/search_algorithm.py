import abc
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .problem import ProblemInterface, Solution  # Use relative import


@dataclass(frozen=True)
class ProgressRecord:
    """One best-length observation emitted while a search runs."""
    phase: str
    outer_iteration: int
    step: int
    round_best: float
    best_so_far: float


@dataclass
class RunResult:
    """Outcome of a complete run.

    `best_iteration` is 1-based and stays -1 when no iteration ever ran.
    """
    best_length: float = math.inf
    best_iteration: int = -1
    best_tour: Optional[Any] = None
    history: List[ProgressRecord] = field(default_factory=list)

    def as_tuple(self) -> Tuple[float, int]:
        return self.best_length, self.best_iteration


class SearchAlgorithm(abc.ABC):
    """
    Abstract base class for search algorithms.
    """
    # Optional metadata describing the solver's phase label in progress records.
    phase: Optional[str] = None

    def __init__(self, problem: ProblemInterface, population_size: int, *,
                 logger: Optional[logging.Logger] = None, **kwargs):
        """
        Initializes the search algorithm.

        Args:
            problem: An object implementing ProblemInterface.
            population_size: The size of the population to maintain.
            logger: Optional logger for progress lines; defaults to the module logger.
            **kwargs: Algorithm-specific hyperparameters.
        """
        self.problem = problem
        self.population_size = population_size
        self.population: List[Solution] = []
        self.best_solution: Optional[Solution] = None
        self.best_iteration = -1
        self.iteration = 0
        self.history: List[ProgressRecord] = []
        self.logger = logger if logger is not None else logging.getLogger(type(self).__module__)
        # Store kwargs for algorithm-specific use
        self._config = kwargs

    def initialize(self):
        """
        Sets up the algorithm's initial state, including the population.
        Should be called before starting the search steps.
        """
        self.iteration = 0
        self.best_solution = None
        self.best_iteration = -1
        self.history = []
        self.population = self.problem.get_initial_population(self.population_size)

    @abc.abstractmethod
    def step(self):
        """
        Performs a single step (iteration/generation) of the search algorithm.
        This method should update the internal population and potentially the best_solution.
        """

    def run(self, num_iterations: int) -> RunResult:
        """Initializes the search and performs `num_iterations` steps."""
        self.initialize()
        for _ in range(num_iterations):
            self.step()
        return self.get_result()

    def _update_best_solution(self, candidate: Optional[Solution] = None,
                              iteration: Optional[int] = None) -> bool:
        """Updates the overall best solution found so far.

        Returns True when the candidate strictly improved on the previous best.
        """
        if candidate is None:
            candidate = min(self.population, default=None)
        if candidate is None:
            return False
        if self.best_solution is None or candidate < self.best_solution:
            # Detach from the population so later steps cannot change it.
            self.best_solution = candidate.copy(preserve_id=False)
            self.best_iteration = self.iteration if iteration is None else int(iteration)
            return True
        return False

    def record_progress(self, phase: str, step: int, round_best: float,
                        outer_iteration: Optional[int] = None) -> ProgressRecord:
        """Appends a best-length observation to `history` and returns it."""
        record = ProgressRecord(
            phase=phase,
            outer_iteration=self.iteration if outer_iteration is None else int(outer_iteration),
            step=int(step),
            round_best=float(round_best),
            best_so_far=self.best_fitness,
        )
        self.history.append(record)
        return record

    @property
    def best_fitness(self) -> float:
        return math.inf if self.best_solution is None else self.best_solution.fitness

    def get_best_solution(self) -> Optional[Solution]:
        """
        Returns the best solution found by the algorithm so far, or None if the
        search hasn't started/found any.
        """
        return self.best_solution

    def get_results(self) -> Tuple[float, int]:
        """Best fitness and the 1-based iteration in which it was first found."""
        return self.best_fitness, self.best_iteration

    def get_result(self) -> RunResult:
        best = self.best_solution
        return RunResult(
            best_length=self.best_fitness,
            best_iteration=self.best_iteration,
            best_tour=None if best is None else best.representation,
            history=list(self.history),
        )
