# tests/test_io_csv.py
import csv
import pytest

from wrsn_ga.io_csv import (save_guess, read_guess_data, load_guess, save_best_paths,
                            load_nodes)
from wrsn_ga.exceptions import PersistenceError


POPULATION = [
    [[3, 1, 2], [0, 5, 4]],
    [[0, 1], [2, 3, 4, 5]],
]


def test_save_and_read_guess(tmp_path):
    path = tmp_path / "guess.csv"
    save_guess(str(path), POPULATION)
    with open(path, newline='', encoding='utf-8') as f:
        header = next(csv.reader(f))
    assert header == ["pop", "pdv", "order", "node"]
    assert read_guess_data(str(path), 0, 0) == [3, 1, 2]
    assert read_guess_data(str(path), 1, 1) == [2, 3, 4, 5]
    assert read_guess_data(str(path), 5, 0) == []
    assert load_guess(str(path), 2, 2) == POPULATION


def test_load_guess_shape_mismatch(tmp_path):
    path = tmp_path / "guess.csv"
    save_guess(str(path), POPULATION)
    with pytest.raises(PersistenceError):
        load_guess(str(path), 3, 2)
    with pytest.raises(PersistenceError):
        load_guess(str(path), 1, 2)


def test_missing_and_corrupt_guess(tmp_path):
    with pytest.raises(PersistenceError):
        read_guess_data(str(tmp_path / "nope.csv"), 0, 0)
    bad = tmp_path / "bad.csv"
    bad.write_text("a,b\n1,2\n", encoding="utf-8")
    with pytest.raises(PersistenceError):
        read_guess_data(str(bad), 0, 0)
    holes = tmp_path / "holes.csv"
    holes.write_text("pop,pdv,order,node\n0,0,0,\n", encoding="utf-8")
    with pytest.raises(PersistenceError):
        load_guess(str(holes), 1, 1)
    # PersistenceError is an OSError
    with pytest.raises(OSError):
        load_guess(str(tmp_path / "nope.csv"), 1, 1)


def test_save_best_paths(tmp_path):
    out = tmp_path / "best.csv"
    save_best_paths(str(out), [[3, 1, 2], [0]], [0.812345678, 0.5])
    with open(out, newline='', encoding='utf-8') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["pdv", "length", "fitness", "path"]
    assert rows[1] == ["0", "3", "0.812346", "3-1-2"]
    assert rows[2] == ["1", "1", "0.500000", "0"]


def test_load_nodes(tmp_path):
    path = tmp_path / "nodes.csv"
    path.write_text("x, y, voltage, p_type\n0.0,1.0,3.3,1\n2.5,3.0,4.1,0\n", encoding="utf-8")
    nodes = load_nodes(str(path))
    assert len(nodes) == 2
    assert nodes[0].pos.y == 1.0 and nodes[0].voltage == 3.3 and nodes[0].p_sensor_type
    assert nodes[1].voltage == 4.1 and not nodes[1].p_sensor_type

    minimal = tmp_path / "min.csv"
    minimal.write_text("x,y\n1,1\n", encoding="utf-8")
    assert load_nodes(str(minimal))[0].voltage == 3.4

    with pytest.raises(FileNotFoundError):
        load_nodes(str(tmp_path / "nope.csv"))
