# parameters.py
from dataclasses import dataclass, fields
import ast
import math

import numpy as np

PARAM_FILE = "OceanParams.txt"

# All near-zero guards in the wave model compare against this.
EPSILON = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class PhysicalParameters:
    """
    Physical quantities shared by the spectrum, dispersion and directional
    models. Immutable: build a new instance to change the sea state.
    """

    # --- water ---
    surface_tension: float      # [N/m]
    water_density: float        # [kg/m^3]
    water_depth: float          # [m]
    gravity: float              # [m/s^2]

    # --- wind / sea state ---
    wind_speed: float           # [m/s] at 10 m
    fetch: float                # [m]
    swell: float                # [-] directional elongation factor

    # --- domain ---
    domain_size: float          # [m] side length of the simulated patch

    def __post_init__(self):
        # compiled kernels are specialised on float64 arguments
        for f in fields(self):
            object.__setattr__(self, f.name, float(getattr(self, f.name)))

        bad = [f.name for f in fields(self) if not math.isfinite(getattr(self, f.name))]
        if bad:
            raise ValueError(f"Non-finite physical parameter(s): {', '.join(bad)}")

        for name in ("gravity", "domain_size", "water_density"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

    @classmethod
    def from_file(cls, filename: str = PARAM_FILE) -> "PhysicalParameters":
        """
        Load the physical parameters from a text file.

        Each key is written as:
            key = ("value": ..., "unit": [units])

        Requirements:
        - All known keys must be present.
        - Units must match exactly (ignoring spaces).
        - Unknown keys are ignored.
        - On missing parameter or wrong unit: raise RuntimeError.
        """
        # human-readable name -> (attribute name, expected_unit_string)
        keymap = {
            "surface_tension":  ("surface_tension", "N/m"),
            "water_density":    ("water_density",   "kg/m^3"),
            "water_depth":      ("water_depth",     "m"),
            "gravity":          ("gravity",         "m/s^2"),
            "wind_speed":       ("wind_speed",      "m/s"),
            "fetch":            ("fetch",           "m"),
            "swell":            ("swell",           "-"),
            "domain_size":      ("domain_size",     "m"),
        }

        all_parsed = _read_parameter_file(filename)

        missing = [k for k in keymap if k not in all_parsed]
        if missing:
            raise RuntimeError(
                f"Missing parameter(s) in '{filename}':\n"
                + "\n".join(f"  - {m}" for m in missing)
                + "\nPlease add them with correct syntax and units."
            )

        values = {}
        for key, (attr_name, expected_unit) in keymap.items():
            entry = all_parsed[key]
            if "value" not in entry or "unit" not in entry:
                raise RuntimeError(
                    f"Bad syntax for parameter '{key}' in {filename}.\n"
                    f"Expected: key = (\"value\": ..., \"unit\": [..])"
                )
            if not _units_match(str(entry["unit"]), expected_unit):
                raise RuntimeError(
                    f"Wrong unit for parameter '{key}' in '{filename}'.\n"
                    f"  Found:    {entry['unit']}\n"
                    f"  Expected: [{expected_unit}] (spaces inside brackets are allowed)"
                )
            values[attr_name] = float(entry["value"])

        return cls(**values)


def _read_parameter_file(filename: str) -> dict[str, dict]:
    try:
        with open(filename, "r") as f:
            lines = f.readlines()
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Physical parameters file '{filename}' not found. "
            f"Please create it before running the simulation."
        )

    all_parsed: dict[str, dict] = {}
    i = 0
    n = len(lines)
    while i < n:
        raw_line = lines[i].strip()
        i += 1

        if not raw_line or raw_line.startswith("#"):
            continue
        if "=" not in raw_line:
            continue

        key, rhs = [p.strip() for p in raw_line.split("=", 1)]

        # RHS may span several lines; accumulate until parentheses balance
        open_parens = rhs.count("(") - rhs.count(")")
        while open_parens > 0 and i < n:
            cont = lines[i].strip()
            i += 1
            rhs += " " + cont
            open_parens += cont.count("(") - cont.count(")")

        try:
            all_parsed[key] = _parse_rhs(rhs)
        except (ValueError, SyntaxError):
            raise RuntimeError(f"Cannot parse right-hand side of '{key}' in '{filename}': {rhs}")

    return all_parsed


def _parse_rhs(rhs: str) -> dict:
    """
    Convert RHS like:
        ("value": 1000.0, "unit": "[kg/m^3]")
    into a dict using ast.literal_eval.

    Units may also be written bare, e.g. [kg/m^3]; they are quoted first.
    """
    rhs = rhs.strip()
    if rhs.startswith("(") and rhs.endswith(")"):
        rhs = rhs[1:-1].strip()

    head, sep, unit = rhs.partition('"unit":')
    if sep and unit.strip().startswith("["):
        rhs = f'{head}"unit": "{unit.strip()}"'

    return ast.literal_eval("{" + rhs + "}")


def _units_match(found: str, expected: str) -> bool:
    """
    Check whether the units in 'found' match the expected units string,
    ignoring spaces and outer brackets.
    """
    s = found.strip().strip("'\"").strip()
    if s.startswith("[") and s.endswith("]"):
        s = s[1:-1]
    return s.replace(" ", "") == expected.replace(" ", "")


if __name__ == "__main__":
    try:
        params = PhysicalParameters.from_file()
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        print("\nERROR while loading physical parameters:")
        print(e)
        raise SystemExit(1)

    print(f"\nLoaded parameters from '{PARAM_FILE}':\n")
    for f in fields(params):
        print(f"  {f.name:16s} = {getattr(params, f.name):12g}")
