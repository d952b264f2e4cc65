"""
Physical parameter object and parameter-file loader tests.
"""

import dataclasses
import math

import pytest

from parameters import EPSILON, PhysicalParameters

PARAM_TEXT = """
# test sea state
surface_tension = ("value": 0.072,  "unit": [N/m])
water_density   = ("value": 1000.0, "unit": [kg/m^3])
water_depth     = ("value": 30.0,   "unit": [m])
gravity         = ("value": 9.81,   "unit": [m / s^2])
wind_speed      = ("value": 12.5,   "unit": [m/s])
fetch           = (
    "value": 80000.0,
    "unit": "[m]"
)
swell           = ("value": 0.5,    "unit": [-])
domain_size     = ("value": 128.0,  "unit": [m])
unused_key      = ("value": 1.0,    "unit": [s])
"""


def _write(tmp_path, text):
    path = tmp_path / "OceanParams.txt"
    path.write_text(text)
    return str(path)


def test_parameters_are_immutable(deep_water):
    with pytest.raises(dataclasses.FrozenInstanceError):
        deep_water.wind_speed = 20.0


def test_values_are_stored_as_float():
    params = PhysicalParameters(0, 1000, 10, 9, 5, 100, 0, 64)
    assert isinstance(params.water_density, float)
    assert isinstance(params.swell, float)


@pytest.mark.parametrize("name", ["gravity", "domain_size", "water_density"])
def test_positive_quantities_are_checked(deep_water, name):
    values = dataclasses.asdict(deep_water)
    values[name] = 0.0
    with pytest.raises(ValueError, match=name):
        PhysicalParameters(**values)


def test_non_finite_values_are_rejected(deep_water):
    values = dataclasses.asdict(deep_water)
    values["fetch"] = math.inf
    with pytest.raises(ValueError, match="fetch"):
        PhysicalParameters(**values)


def test_epsilon_is_float64_machine_epsilon():
    assert EPSILON == 2.0**-52


def test_load_from_file(tmp_path):
    """Multi-line entries, quoted and bare units, unknown keys ignored."""
    params = PhysicalParameters.from_file(_write(tmp_path, PARAM_TEXT))

    assert params.water_depth == 30.0
    assert params.gravity == 9.81
    assert params.fetch == 80000.0
    assert params.swell == 0.5
    assert params.domain_size == 128.0


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        PhysicalParameters.from_file(str(tmp_path / "nope.txt"))


def test_missing_key_is_reported(tmp_path):
    text = "\n".join(line for line in PARAM_TEXT.splitlines() if not line.startswith("swell"))
    with pytest.raises(RuntimeError, match="swell"):
        PhysicalParameters.from_file(_write(tmp_path, text))


def test_wrong_unit_is_reported(tmp_path):
    text = PARAM_TEXT.replace('("value": 30.0,   "unit": [m])', '("value": 30.0, "unit": [ft])')
    with pytest.raises(RuntimeError, match="water_depth"):
        PhysicalParameters.from_file(_write(tmp_path, text))


def test_bad_syntax_is_reported(tmp_path):
    text = PARAM_TEXT.replace('("value": 0.5,    "unit": [-])', '("val": 0.5, "unit": [-])')
    with pytest.raises(RuntimeError, match="swell"):
        PhysicalParameters.from_file(_write(tmp_path, text))


def test_invalid_value_in_file_is_rejected(tmp_path):
    text = PARAM_TEXT.replace('("value": 9.81,   "unit": [m / s^2])', '("value": -9.81, "unit": [m/s^2])')
    with pytest.raises(ValueError, match="gravity"):
        PhysicalParameters.from_file(_write(tmp_path, text))
