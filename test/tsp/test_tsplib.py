import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Core.errors import InvalidConfiguration
from TSP.tsplib import load_distance_matrix, load_tsplib, parse_tsplib

SQUARE_TSP = """NAME : square4
COMMENT : unit square
TYPE : TSP
DIMENSION : 4
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0.0 0.0
2 1.0 0.0
3 1.0 1.0
4 0.0 1.0
EOF
"""


def test_parse_reads_header_and_coordinates():
    instance = parse_tsplib(SQUARE_TSP)
    assert instance.name == "square4"
    assert instance.num_cities == 4
    assert instance.header["EDGE_WEIGHT_TYPE"] == "EUC_2D"
    assert instance.coords.tolist() == [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]


def test_distance_matrix_from_instance():
    matrix = parse_tsplib(SQUARE_TSP).distance_matrix()
    assert matrix[0, 2] == pytest.approx(np.sqrt(2))
    assert matrix[1, 2] == pytest.approx(1.0)


def test_missing_coordinate_section_is_rejected():
    with pytest.raises(InvalidConfiguration):
        parse_tsplib("NAME : x\nDIMENSION : 2\nEOF\n")


def test_dimension_mismatch_is_rejected():
    text = SQUARE_TSP.replace("DIMENSION : 4", "DIMENSION : 5")
    with pytest.raises(InvalidConfiguration):
        parse_tsplib(text)


def test_malformed_coordinate_line_is_rejected():
    text = SQUARE_TSP.replace("3 1.0 1.0", "3 one 1.0")
    with pytest.raises(InvalidConfiguration):
        parse_tsplib(text)


def test_load_tsplib_from_file(tmp_path: Path):
    path = tmp_path / "square4.tsp"
    path.write_text(SQUARE_TSP)
    assert load_tsplib(path).num_cities == 4


def test_load_tsplib_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_tsplib(tmp_path / "nope.tsp")


def test_load_distance_matrix_npy_and_text(tmp_path: Path):
    raw = np.array([[0.0, 2.0, 3.0], [2.0, 0.0, 4.0], [3.0, 4.0, 0.0]])
    npy = tmp_path / "d.npy"
    np.save(npy, raw)
    txt = tmp_path / "d.txt"
    np.savetxt(txt, raw)

    assert np.array_equal(load_distance_matrix(npy).weights, raw)
    assert np.array_equal(load_distance_matrix(txt).weights, raw)
    assert load_distance_matrix(None) is None
