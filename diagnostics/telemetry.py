# diagnostics/telemetry.py
import datetime as dt
import logging

import numpy as np
import pandas as pd

import config as cfg
from utils.layers import layer_for

LOGGER = logging.getLogger(__name__)


def sample(vector, times, t=None, basis=None) -> pd.DataFrame:
    """
    Evaluate ``vector`` at each value in ``times`` and tabulate the result.

    Components are read in ``basis`` (canonical when omitted). ``t`` is the
    time symbol; when omitted the components must depend on a single free
    symbol. Returns a DataFrame with columns t, x, y, z.
    """
    comps = vector.components(basis)
    layer = layer_for(comps)
    if t is None:
        t = layer.time_symbol(comps)
    times = np.asarray(times, dtype=float).reshape(-1)
    rows = [
        layer.evaluate(layer.substitute(comps, {t: value} if t is not None else {}))
        for value in times
    ]
    df = pd.DataFrame(np.reshape(rows, (len(times), 3)), columns=["x", "y", "z"])
    df.insert(0, "t", times)
    LOGGER.debug("Sampled %d points of %r", len(df), vector)
    return df


def save_csv(df: pd.DataFrame, stem="vector_samples"):
    outdir = cfg.OUTPUT_DIR
    outdir.mkdir(parents=True, exist_ok=True)
    stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    out = outdir / f"{stem}_{stamp}.csv"
    df.to_csv(out, index=False)
    LOGGER.debug("Wrote %d rows to %s", len(df), out)
    return out
