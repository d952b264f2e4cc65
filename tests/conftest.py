"""
Pytest configuration.

Puts the repository root on sys.path so the top-level modules import
without installation, and provides shared fixtures.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from parameters import PhysicalParameters  # noqa: E402


@pytest.fixture
def deep_water():
    """Deep-water wind sea: 10 m/s over 50 km fetch on a 64 m patch."""
    return PhysicalParameters(
        surface_tension=0.072,
        water_density=1000.0,
        water_depth=1000.0,
        gravity=9.81,
        wind_speed=10.0,
        fetch=50000.0,
        swell=0.0,
        domain_size=64.0,
    )


@pytest.fixture
def swell_sea(deep_water):
    """Same sea state with a strong swell elongation."""
    values = {name: getattr(deep_water, name) for name in deep_water.__dataclass_fields__}
    values["swell"] = 1.0
    return PhysicalParameters(**values)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
