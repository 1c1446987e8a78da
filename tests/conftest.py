"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where
# ``radio_export`` sits at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SEED_PATH = ROOT / "data" / "seed.json"


@pytest.fixture
def seed_catalogue():
    """Canonical catalogue loaded from the bundled seed data."""

    from radio_export.store import load_catalogue

    return load_catalogue(SEED_PATH)
