import math
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Core.errors import InvalidConfiguration
from TSP.TSP import DistanceMatrix, TSPProblem
from TSP.tour import Tour, is_permutation

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def square():
    return DistanceMatrix.from_coordinates(UNIT_SQUARE)


class TestDistanceMatrix:

    def test_from_coordinates_is_euclidean(self, square):
        assert square.num_cities == 4
        assert square[0, 1] == pytest.approx(1.0)
        assert square[0, 2] == pytest.approx(math.sqrt(2))
        assert square.is_symmetric

    def test_weights_are_read_only(self, square):
        with pytest.raises(ValueError):
            square.weights[0, 1] = 5.0

    def test_copy_of_input(self):
        raw = np.array([[0.0, 2.0], [2.0, 0.0]])
        matrix = DistanceMatrix(raw)
        raw[0, 1] = 9.0
        assert matrix[0, 1] == 2.0

    @pytest.mark.parametrize(
        "weights",
        [
            [[0.0, 1.0, 2.0], [1.0, 0.0, 1.0]],
            [[0.0]],
            [[0.0, -1.0], [-1.0, 0.0]],
            [[0.0, float("nan")], [1.0, 0.0]],
            [[0.0, float("inf")], [1.0, 0.0]],
            [[1.0, 1.0], [1.0, 0.0]],
        ],
    )
    def test_rejects_invalid_matrices(self, weights):
        with pytest.raises(InvalidConfiguration):
            DistanceMatrix(weights)

    def test_coincident_cities_are_allowed(self):
        matrix = DistanceMatrix([[0.0, 0.0, 1.0], [0.0, 0.0, 1.0], [1.0, 1.0, 0.0]])
        assert matrix.has_coincident_cities

    def test_asymmetric_matrix_is_flagged(self):
        matrix = DistanceMatrix([[0.0, 1.0], [2.0, 0.0]])
        assert not matrix.is_symmetric


class TestTour:

    @pytest.mark.parametrize("order", [[0, 0, 1], [1, 2, 3], [0, 2], [], [[0, 1], [1, 0]]])
    def test_rejects_non_permutations(self, order):
        with pytest.raises(InvalidConfiguration):
            Tour(order)

    def test_order_is_immutable(self):
        tour = Tour([2, 0, 1])
        with pytest.raises(ValueError):
            tour.order[0] = 1

    def test_successors_close_the_cycle(self):
        tour = Tour([2, 0, 3, 1])
        assert tour.successors().tolist() == [3, 2, 0, 1]
        assert list(tour.edges()) == [(2, 0), (0, 3), (3, 1), (1, 2)]

    def test_from_successors_rebuilds_order(self):
        tour = Tour.from_successors([3, 2, 0, 1], start=2)
        assert tour == Tour([2, 0, 3, 1])

    @pytest.mark.parametrize("successors", [[1, 0, 3, 2], [1, 2, 2, 0], [-1, 0, 1, 2]])
    def test_from_successors_rejects_broken_cycles(self, successors):
        with pytest.raises(InvalidConfiguration):
            Tour.from_successors(successors)

    def test_length_includes_closing_edge(self, square):
        assert Tour([0, 1, 2, 3]).length(square) == pytest.approx(4.0)
        assert Tour([0, 2, 1, 3]).length(square) == pytest.approx(2 + 2 * math.sqrt(2))

    def test_length_matches_successor_sum(self, square):
        tour = Tour([3, 1, 0, 2])
        succ = tour.successors()
        expected = sum(square[i, succ[i]] for i in range(4))
        assert tour.length(square) == pytest.approx(expected)

    def test_equality_and_hash(self):
        assert Tour([1, 0, 2]) == Tour(np.array([1, 0, 2]))
        assert hash(Tour([1, 0, 2])) == hash(Tour([1, 0, 2]))
        assert Tour([1, 0, 2]) != Tour([0, 1, 2])

    def test_is_permutation(self):
        assert is_permutation([2, 0, 1])
        assert not is_permutation([2, 0, 0])
        assert not is_permutation([0.0, 1.0])


class TestTSPProblem:

    def test_evaluate_uses_tour_length(self, square):
        problem = TSPProblem(square, UNIT_SQUARE)
        sol = problem.get_initial_solution()
        assert is_permutation(sol.representation.order)
        assert problem.evaluate(sol) == pytest.approx(sol.representation.length(square))

    def test_problem_info(self, square):
        info = TSPProblem(square).get_problem_info()
        assert info["dimension"] == 4
        assert info["problem_type"] == "permutation"

    def test_rejects_mismatched_coordinates(self, square):
        with pytest.raises(InvalidConfiguration):
            TSPProblem(square, UNIT_SQUARE[:3])

    def test_rejects_tour_of_wrong_size(self, square):
        with pytest.raises(InvalidConfiguration):
            TSPProblem(square).calculate_path_distance(Tour([0, 1, 2]))

    def test_accepts_raw_matrix(self):
        problem = TSPProblem([[0.0, 3.0], [3.0, 0.0]])
        assert problem.calculate_path_distance([1, 0]) == pytest.approx(6.0)
