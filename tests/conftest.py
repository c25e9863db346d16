import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from impairnet.emulation.random_source import RandomSource


@pytest.fixture
def rng() -> RandomSource:
    """Seeded random source so generator runs are reproducible."""

    return RandomSource(seed=1050)
