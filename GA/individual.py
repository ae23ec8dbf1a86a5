from typing import Optional

from Core.problem import Solution
from TSP.TSP import TSPProblem
from TSP.tour import Tour


class Individual(Solution):
    """A tour in a GA population.

    Fitness is the tour length, recomputed on every query from the tour the
    individual currently holds.
    """

    def __init__(self, tour: Tour, problem: TSPProblem, *, solution_id: Optional[int] = None):
        if not isinstance(tour, Tour):
            tour = Tour(tour)
        super().__init__(tour, problem, solution_id=solution_id)

    @property
    def tour(self) -> Tour:
        return self.representation

    def with_tour(self, tour: Tour) -> 'Individual':
        """New individual holding `tour`; this one is left untouched."""
        return Individual(tour, self.problem)

    def __repr__(self) -> str:
        return f"Individual({self.tour.tolist()}, fitness={self.fitness:.4f})"
