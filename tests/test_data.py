import random

import pytest

from data.replay import load_series
from data.sim_shift import draw_two_normals, simulate


def test_draw_two_normals_uses_callers_generator():
    a = draw_two_normals(random.Random(1), 10, 5)
    b = draw_two_normals(random.Random(1), 10, 5)
    assert a == b
    assert len(a) == 15


def test_simulate_marks_first_index_after_shift():
    df = simulate(n_before=30, n_after=20, seed=3)
    assert len(df) == 50
    assert list(df.columns) == ["t", "x", "cp"]
    assert df["cp"].sum() == 1
    assert int(df.index[df["cp"] == 1][0]) == 30


def test_load_series_roundtrip_csv(tmp_path):
    df = simulate(n_before=12, n_after=8, seed=4)
    p = tmp_path / "series.csv"
    df.to_csv(p, index=False)
    xs = load_series(p)
    assert xs == pytest.approx(df["x"].tolist())


def test_load_series_other_column_and_missing_column(tmp_path):
    p = tmp_path / "v.csv"
    p.write_text("value\n1.5\n2.5\n", encoding="utf-8")
    assert load_series(p, column="value") == [1.5, 2.5]
    with pytest.raises(KeyError):
        load_series(p)


def test_load_series_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_series(tmp_path / "absent.csv")
