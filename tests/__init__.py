"""Test package for teammaker."""

from __future__ import annotations

import sys
from pathlib import Path


# Make ``teammaker`` importable from src/ when the project is not installed.
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if SRC_ROOT.exists() and str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))
