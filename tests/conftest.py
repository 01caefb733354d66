"""Pytest configuration for the vector test-suite."""
from __future__ import annotations

import sys
from pathlib import Path

import matplotlib

# Headless backend for rendering tests.
matplotlib.use("Agg")

# Repository root holds the top-level packages and config.py.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
