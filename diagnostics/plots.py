# diagnostics/plots.py
import logging

import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401

import config as cfg
from utils.vector import Vector

LOGGER = logging.getLogger(__name__)


def _axes_3d():
    """Reuse the first 3D axes of the current figure, or add one."""
    fig = plt.gcf()
    for ax in fig.axes:
        if ax.name == "3d":
            return ax
    return fig.add_subplot(111, projection="3d")


def plot_vector(v, origin=None, ax=None, **style):
    """
    Draw ``v`` as a 3D arrow whose tail sits at ``origin`` (null vector by default).
    Extra keyword arguments go to ``Axes3D.quiver`` unchanged; the arrow is
    drawn at true length and coloured ``cfg.ARROW_COLOR`` unless overridden.
    Symbolic vectors must be fully numeric (see ``Vector.subs``).
    """
    origin = Vector() if origin is None else origin
    ax = _axes_3d() if ax is None else ax
    o = origin.to_numpy()
    d = v.to_numpy()
    options = {"color": cfg.ARROW_COLOR}
    options.update(style)
    return ax.quiver(o[0], o[1], o[2], d[0], d[1], d[2], **options)


def plot_vectors(vectors, origin=None, ax=None, **style):
    """Draw several arrows from a shared origin on one axes."""
    ax = _axes_3d() if ax is None else ax
    return [plot_vector(v, origin, ax=ax, **style) for v in vectors]


def save_figure(fig, name):
    outdir = cfg.OUTPUT_DIR
    outdir.mkdir(parents=True, exist_ok=True)
    p = outdir / name
    fig.tight_layout()
    fig.savefig(p, dpi=150)
    plt.close(fig)
    LOGGER.debug("Saved figure %s", p)
    return p.resolve()
