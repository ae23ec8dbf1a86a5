"""
Run configuration for the Ant System and its genetic-algorithm hybrid.

Defaults follow the reference experiments: 20 ants, alpha 1.5, beta 3.5, half of
the pheromone evaporating per round, and for the hybrid ten Ant System rounds
plus ten GA generations per outer iteration.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidConfiguration


def _require_positive_int(name: str, value: Any, *, allow_zero: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer (got {value!r})")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidConfiguration(f"{name} must be {bound} (got {value})")


def _require_unit_interval(name: str, value: Any) -> None:
    try:
        val = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{name} must be a number (got {value!r})") from exc
    if not 0.0 <= val <= 1.0:
        raise InvalidConfiguration(f"{name} must lie in [0, 1] (got {value})")


def _require_positive_real(name: str, value: Any) -> None:
    try:
        val = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{name} must be a number (got {value!r})") from exc
    if not math.isfinite(val) or val <= 0.0:
        raise InvalidConfiguration(f"{name} must be a positive finite number (got {value})")


@dataclass(frozen=True)
class AntSystemConfig:
    """Hyperparameters of the plain Ant System loop."""
    num_ants: int = 20
    alpha: float = 1.5
    beta: float = 3.5
    evaporation_factor: float = 0.5
    num_iterations: int = 10
    seed: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        _require_positive_int("num_ants", self.num_ants)
        _require_positive_real("alpha", self.alpha)
        _require_positive_real("beta", self.beta)
        _require_unit_interval("evaporation_factor", self.evaporation_factor)
        _require_positive_int("num_iterations", self.num_iterations, allow_zero=True)
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidConfiguration(f"seed must be an integer or None (got {self.seed!r})")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]):
        """Build a config from a mapping, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known and v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HybridConfig(AntSystemConfig):
    """Adds the genetic-algorithm phase run after each block of Ant System rounds."""
    ant_system_rounds: int = 10
    crossover_probability: float = 0.9
    mutation_probability: float = 0.5
    ga_generations: int = 10

    def validate(self) -> None:
        super().validate()
        _require_positive_int("ant_system_rounds", self.ant_system_rounds)
        _require_positive_int("ga_generations", self.ga_generations)
        _require_unit_interval("crossover_probability", self.crossover_probability)
        _require_unit_interval("mutation_probability", self.mutation_probability)


def write_run_config(path: Path | str, config: AntSystemConfig,
                     extra: Optional[Mapping[str, Any]] = None) -> Path:
    """Write `run_config.json` describing a run and return its path."""
    config_path = Path(path).expanduser()
    if config_path.suffix != ".json":
        config_path = config_path / "run_config.json"
    config_path.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, Any] = {
        "config_type": type(config).__name__,
        "config": _json_sanitize(config.to_dict()),
    }
    if extra:
        payload.update({str(k): _json_sanitize(v) for k, v in extra.items()})
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True))
    return config_path


def _json_sanitize(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _json_sanitize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_sanitize(v) for v in value]
    return str(value)
