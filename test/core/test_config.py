import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Core.config import AntSystemConfig, HybridConfig, write_run_config
from Core.errors import DegenerateDistance, InvalidConfiguration
from Core.problem import Solution
from TSP.TSP import DistanceMatrix, TSPProblem
from TSP.tour import Tour


class TestAntSystemConfig:

    def test_defaults_match_reference_experiments(self):
        cfg = AntSystemConfig()
        assert cfg.num_ants == 20
        assert cfg.alpha == 1.5
        assert cfg.beta == 3.5
        assert cfg.evaporation_factor == 0.5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"num_ants": 0},
            {"num_ants": -3},
            {"num_ants": 2.5},
            {"alpha": 0.0},
            {"beta": -1.0},
            {"evaporation_factor": 1.5},
            {"evaporation_factor": -0.1},
            {"num_iterations": -1},
            {"seed": "abc"},
        ],
    )
    def test_invalid_values_fail_fast(self, overrides):
        with pytest.raises(InvalidConfiguration):
            AntSystemConfig(**overrides)

    @pytest.mark.parametrize("factor", [0.0, 1.0])
    def test_evaporation_bounds_are_valid(self, factor):
        assert AntSystemConfig(evaporation_factor=factor).evaporation_factor == factor

    def test_zero_iterations_allowed(self):
        assert AntSystemConfig(num_iterations=0).num_iterations == 0

    def test_from_mapping_ignores_unknown_and_none(self):
        cfg = AntSystemConfig.from_mapping({"num_ants": 5, "seed": None, "crossover_probability": 0.3})
        assert cfg.num_ants == 5
        assert cfg.seed is None

    def test_invalid_configuration_is_a_value_error(self):
        assert issubclass(InvalidConfiguration, ValueError)
        assert issubclass(DegenerateDistance, ArithmeticError)


class TestHybridConfig:

    def test_hybrid_defaults(self):
        cfg = HybridConfig()
        assert cfg.ant_system_rounds == 10
        assert cfg.ga_generations == 10
        assert cfg.crossover_probability == 0.9
        assert cfg.mutation_probability == 0.5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"crossover_probability": 1.01},
            {"mutation_probability": -0.5},
            {"ga_generations": 0},
            {"ant_system_rounds": 0},
            {"num_ants": 0},
        ],
    )
    def test_invalid_values_fail_fast(self, overrides):
        with pytest.raises(InvalidConfiguration):
            HybridConfig(**overrides)

    def test_from_mapping_reads_hybrid_fields(self):
        cfg = HybridConfig.from_mapping({"ga_generations": 3, "mutation_probability": 0.1, "junk": 1})
        assert cfg.ga_generations == 3
        assert cfg.mutation_probability == 0.1


def test_write_run_config_creates_json(tmp_path: Path):
    cfg = HybridConfig(num_ants=4, seed=7)
    path = write_run_config(tmp_path / "run", cfg, extra={"algorithm": "gaHybrid", "instance": Path("a.tsp")})

    assert path.name == "run_config.json"
    payload = json.loads(path.read_text())
    assert payload["config_type"] == "HybridConfig"
    assert payload["config"]["num_ants"] == 4
    assert payload["config"]["seed"] == 7
    assert payload["algorithm"] == "gaHybrid"
    assert payload["instance"] == "a.tsp"


def test_solution_fitness_tracks_current_representation():
    problem = TSPProblem(DistanceMatrix.from_coordinates([(0, 0), (3, 0), (3, 4), (0, 4)]))
    sol = Solution(Tour([0, 1, 2, 3]), problem)
    assert sol.fitness == pytest.approx(14.0)

    sol.representation = Tour([0, 2, 1, 3])
    assert sol.fitness == pytest.approx(5 + 4 + 5 + 4)
