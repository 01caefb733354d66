"""Arrow rendering, trajectory sampling and CSV export."""
from __future__ import annotations

import math

import matplotlib.pyplot as plt
import pandas as pd
import pytest
import sympy as sp

import config as cfg
from diagnostics.plots import plot_vector, plot_vectors, save_figure
from diagnostics.telemetry import sample, save_csv
from physics.basis import Basis
from utils.errors import UndefinedSymbolicPreconditionError
from utils.vector import Vector

t = sp.Symbol("t")


def test_plot_vector_draws_one_arrow_with_forwarded_style() -> None:
    fig = plt.figure()
    ax = fig.add_subplot(111, projection="3d")
    handle = plot_vector(Vector(1, 2, 3), Vector(1, 0, 0), ax=ax, linewidth=2.5, color="r")
    assert handle in ax.collections
    assert handle.get_linewidth()[0] == pytest.approx(2.5)
    plt.close(fig)


def test_vector_plot_reuses_current_3d_axes() -> None:
    fig = plt.figure()
    Vector(1, 0, 0).plot()
    Vector(0, 1, 0).plot()
    assert len(fig.axes) == 1
    assert fig.axes[0].name == "3d"
    assert len(fig.axes[0].collections) == 2
    plt.close(fig)


def test_plot_vectors_and_save_figure(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cfg, "OUTPUT_DIR", tmp_path / "figures")
    fig = plt.figure()
    handles = plot_vectors(Basis().vectors())
    assert len(handles) == 3
    path = save_figure(fig, "basis.png")
    assert path.exists()


def test_plotting_an_unresolved_symbolic_vector_fails() -> None:
    fig = plt.figure()
    with pytest.raises(UndefinedSymbolicPreconditionError):
        Vector(t, 0, 0).plot()
    plt.close(fig)


def test_sample_tabulates_components_over_time() -> None:
    df = sample(Vector(sp.cos(t), sp.sin(t), 0), [0.0, math.pi / 2, math.pi])
    assert list(df.columns) == ["t", "x", "y", "z"]
    assert df["x"].tolist() == pytest.approx([1.0, 0.0, -1.0], abs=1e-12)
    assert df["y"].tolist() == pytest.approx([0.0, 1.0, 0.0], abs=1e-12)


def test_sample_in_a_rotating_basis() -> None:
    rotating = Basis.from_axis_angle([0, 0, 1], t)
    df = sample(Vector(1, 0, 0), [0.0, math.pi / 2], basis=rotating)
    assert df["x"].tolist() == pytest.approx([1.0, 0.0], abs=1e-12)
    assert df["y"].tolist() == pytest.approx([0.0, -1.0], abs=1e-12)


def test_save_csv_writes_under_output_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cfg, "OUTPUT_DIR", tmp_path)
    df = sample(Vector(t, 2 * t, 0), [0.0, 1.0, 2.0])
    path = save_csv(df, stem="line")
    assert path.parent == tmp_path
    assert path.name.startswith("line_")
    loaded = pd.read_csv(path)
    assert loaded["y"].tolist() == [0.0, 2.0, 4.0]
