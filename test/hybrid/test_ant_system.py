import logging
import math
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ACO.ant_system import AntSystem
from Core.config import AntSystemConfig
from Core.errors import InvalidConfiguration
from TSP.TSP import DistanceMatrix, TSPProblem
from TSP.tour import is_permutation

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def square_problem():
    return TSPProblem(DistanceMatrix.from_coordinates(UNIT_SQUARE), UNIT_SQUARE)


@pytest.fixture
def random_problem():
    rng = np.random.default_rng(7)
    coords = rng.random((12, 2)) * 100
    return TSPProblem(DistanceMatrix.from_coordinates(coords), coords.tolist())


class TestAntSystem:

    def test_finds_unit_square_perimeter(self, square_problem):
        solver = AntSystem(square_problem, population_size=3, seed=0)
        result = solver.run(50)
        assert result.best_length == pytest.approx(4.0)
        assert solver.get_results() == result.as_tuple()
        assert 1 <= result.best_iteration <= 50
        assert result.best_tour.length(square_problem.distances) == pytest.approx(4.0)

    def test_zero_iterations_reports_sentinels(self, square_problem):
        result = AntSystem(square_problem, seed=0).run(0)
        assert result.as_tuple() == (math.inf, -1)
        assert result.best_tour is None
        assert result.history == []

    def test_same_seed_same_result(self, random_problem):
        first = AntSystem(random_problem, population_size=5, seed=42).run(8)
        second = AntSystem(random_problem, population_size=5, seed=42).run(8)
        assert first.as_tuple() == second.as_tuple()
        assert first.best_tour == second.best_tour

    def test_history_has_one_record_per_round(self, random_problem):
        result = AntSystem(random_problem, population_size=4, seed=1).run(6)
        assert [r.step for r in result.history] == [1, 2, 3, 4, 5, 6]
        assert all(r.phase == "ant_system" for r in result.history)
        best = [r.best_so_far for r in result.history]
        assert all(b <= a for a, b in zip(best, best[1:]))
        assert result.best_length == pytest.approx(min(r.round_best for r in result.history))

    def test_best_iteration_is_first_round_reaching_the_best(self, random_problem):
        result = AntSystem(random_problem, population_size=4, seed=9).run(10)
        first = next(r for r in result.history if r.best_so_far == result.best_length)
        assert result.best_iteration == first.outer_iteration
        assert is_permutation(result.best_tour.order)

    def test_full_evaporation_keeps_only_last_round_deposits(self, square_problem):
        solver = AntSystem(square_problem, population_size=3, evaporation_factor=1.0, seed=5)
        solver.initialize()
        solver.step()
        expected = np.zeros((4, 4))
        for sol in solver.population:
            for a, b in sol.representation.edges():
                expected[a, b] += 1.0 / sol.fitness
                expected[b, a] += 1.0 / sol.fitness
        assert np.allclose(solver.colony.pheromones.snapshot(), expected)

    def test_from_config(self, square_problem):
        cfg = AntSystemConfig(num_ants=4, alpha=2.0, beta=3.0, evaporation_factor=0.2, seed=3)
        solver = AntSystem.from_config(square_problem, cfg)
        assert solver.population_size == 4
        assert solver.colony.alpha == 2.0
        assert solver.colony.evaporation_factor == 0.2

    @pytest.mark.parametrize("kwargs", [{"population_size": 0}, {"alpha": -1.0}, {"evaporation_factor": 2.0}])
    def test_invalid_parameters_fail_at_construction(self, square_problem, kwargs):
        with pytest.raises(InvalidConfiguration):
            AntSystem(square_problem, **kwargs)

    def test_logs_round_progress(self, square_problem, caplog):
        caplog.set_level(logging.INFO)
        AntSystem(square_problem, population_size=2, seed=0).run(2)
        assert "Ant System Iteration 2, Best Tour Length" in caplog.text
