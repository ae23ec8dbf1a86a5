"""
Loading TSP instances from disk.

TSPLIB files carry `KEY : VALUE` header lines, then a `NODE_COORD_SECTION` of
`id x y` rows terminated by `EOF`. Plain distance matrices can be loaded from
`.npy`/`.npz` or whitespace-separated text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from Core.errors import InvalidConfiguration
from TSP.TSP import DistanceMatrix

logger = logging.getLogger(__name__)

_COORD_SECTION = "NODE_COORD_SECTION"
_SUPPORTED_EDGE_WEIGHTS = {"EUC_2D", "CEIL_2D", "ATT", ""}


@dataclass
class TSPInstance:
    name: str
    coords: np.ndarray
    header: Dict[str, str] = field(default_factory=dict)

    @property
    def num_cities(self) -> int:
        return int(self.coords.shape[0])

    def distance_matrix(self) -> DistanceMatrix:
        return DistanceMatrix.from_coordinates(self.coords)


def parse_tsplib(text: str, name: str = "instance") -> TSPInstance:
    """Parse TSPLIB text holding a 2-D node coordinate section."""
    header: Dict[str, str] = {}
    coords: List[Tuple[float, float]] = []
    in_coords = False

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line == "EOF":
            break
        if not in_coords:
            if line.startswith(_COORD_SECTION):
                in_coords = True
                continue
            if ":" in line:
                key, value = line.split(":", 1)
                header[key.strip().upper()] = value.strip()
            continue
        parts = line.split()
        if len(parts) < 3:
            raise InvalidConfiguration(f"{name}:{line_no}: expected 'id x y', got {line!r}")
        try:
            coords.append((float(parts[1]), float(parts[2])))
        except ValueError as exc:
            raise InvalidConfiguration(f"{name}:{line_no}: non-numeric coordinate in {line!r}") from exc

    if not in_coords:
        raise InvalidConfiguration(f"{name}: missing {_COORD_SECTION}")
    edge_type = header.get("EDGE_WEIGHT_TYPE", "").upper()
    if edge_type not in _SUPPORTED_EDGE_WEIGHTS:
        logger.warning("%s: EDGE_WEIGHT_TYPE %s treated as plain Euclidean distance", name, edge_type)
    dimension = header.get("DIMENSION")
    if dimension is not None and dimension.isdigit() and int(dimension) != len(coords):
        raise InvalidConfiguration(
            f"{name}: DIMENSION is {dimension} but {len(coords)} coordinates were read"
        )

    return TSPInstance(name=header.get("NAME", name), coords=np.asarray(coords, dtype=float), header=header)


def load_tsplib(path: Path | str) -> TSPInstance:
    file_path = Path(path).expanduser()
    if not file_path.exists():
        raise FileNotFoundError(f"TSP file not found: {file_path}")
    instance = parse_tsplib(file_path.read_text(), name=file_path.stem)
    logger.debug("Loaded %s with %d cities", instance.name, instance.num_cities)
    return instance


def load_distance_matrix(path: Optional[Path | str]) -> Optional[DistanceMatrix]:
    """Load a precomputed matrix from `.npy`, `.npz` (`arr_0`) or text."""
    if not path:
        return None
    file_path = Path(path).expanduser()
    if not file_path.exists():
        raise FileNotFoundError(f"Distance matrix file not found: {file_path}")
    suffix = file_path.suffix.lower()
    if suffix in {".npy", ".npz"}:
        data = np.load(file_path)
        if isinstance(data, np.lib.npyio.NpzFile):
            if "arr_0" not in data:
                raise InvalidConfiguration(f"NPZ file {file_path} must contain array 'arr_0'")
            arr = np.asarray(data["arr_0"], dtype=float)
        else:
            arr = np.asarray(data, dtype=float)
    else:
        arr = np.loadtxt(file_path, dtype=float, ndmin=2)
    return DistanceMatrix(arr)
