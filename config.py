import pathlib

import numpy as np


# === Comparison Tolerances ===
EPS_FACTOR = 10  # multiples of float spacing accepted by numeric equality
ANGLE_DOMAIN_SLACK = 10 * np.finfo(float).eps  # acos ratios this far past ±1 are clamped
ORTHONORMAL_TOLERANCE = 1e-9  # max |MᵀM - I| entry for a numeric basis matrix

# === Symbolic Switches ===
SIMPLIFY_SYMBOLIC = True  # simplify symbolic components on every assignment

# === Plotting / Output ===
ARROW_COLOR = "k"
OUTPUT_DIR = pathlib.Path("out")
