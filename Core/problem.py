import abc
from itertools import count
from typing import Any, Dict, Optional


class Solution:
    """Represents a candidate solution to a minimisation problem.

    Fitness is never cached: representations can be swapped out between
    queries, so every read of `fitness` asks the problem again.
    """
    _id_counter = count()

    def __init__(self, representation: Any, problem: 'ProblemInterface', *, solution_id: Optional[int] = None):
        self.representation = representation
        self.problem = problem
        # Stable identifier so downstream components can track individuals cheaply.
        self.id: int = int(next(self._id_counter) if solution_id is None else solution_id)

    def evaluate(self) -> float:
        """Calculates the fitness of the current representation."""
        return float(self.problem.evaluate(self))

    @property
    def fitness(self) -> float:
        return self.evaluate()

    def copy(self, *, preserve_id: bool = True) -> 'Solution':
        """Creates a copy of this solution.

        Args:
            preserve_id: When True (default), the clone keeps the same `id`.
                Set to False if the copy represents a genuinely new individual.
        """
        new_id = self.id if preserve_id else None
        # Value-type representations (Tour) are immutable and safe to share.
        return type(self)(self.representation, self.problem, solution_id=new_id)

    def __lt__(self, other: 'Solution') -> bool:
        """Allows comparison based on fitness (minimization)."""
        return self.fitness < other.fitness

    def __gt__(self, other: 'Solution') -> bool:
        return self.fitness > other.fitness

    def __eq__(self, other: object) -> bool:
        """Checks if two solutions are equal based on representation."""
        if not isinstance(other, Solution):
            return NotImplemented
        return self.representation == other.representation

    __hash__ = object.__hash__

    def __str__(self) -> str:
        return f"Solution({self.representation}, Fitness: {self.fitness})"


class ProblemInterface(abc.ABC):
    """
    Abstract base class defining the interface for an optimization problem.
    """

    @abc.abstractmethod
    def evaluate(self, solution: Solution) -> float:
        """
        Evaluates the fitness of a given solution. Lower values are better.

        Args:
            solution: The Solution object to evaluate.

        Returns:
            The fitness value (float).
        """

    @abc.abstractmethod
    def get_initial_solution(self) -> Solution:
        """
        Generates a single, potentially random, valid initial solution.
        """

    @abc.abstractmethod
    def get_problem_info(self) -> Dict[str, Any]:
        """
        Returns a dictionary containing essential information about the problem,
        e.g. 'dimension' and 'problem_type'.
        """

    def get_initial_population(self, population_size: int) -> list[Solution]:
        """
        Generates an initial population of solutions.
        Can be overridden by subclasses for more sophisticated initialization.
        """
        return [self.get_initial_solution() for _ in range(population_size)]
