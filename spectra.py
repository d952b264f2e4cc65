# spectra.py
"""
Non-directional wave spectra S(omega).

- JONSWAP: fetch-limited wind sea,

      S(omega) = alpha * g^2 / omega^5 * exp(-5/4 * (omega_p / omega)^4) * gamma^r
      r        = exp(-(omega - omega_p)^2 / (2 * sigma^2 * omega_p^2))
      alpha    = 0.076 * (U^2 / (F * g))^0.22,  gamma = 3.3
      sigma    = 0.07 for omega <= omega_p, 0.09 above

- TMA: JONSWAP times the Kitaigorodskii depth attenuation, using the
  Thompson & Vincent (1983) piecewise approximation in
  omega_h = omega * sqrt(h / g).

The spectrum objects carry an integer model tag so the compiled sampling
kernel can dispatch on it (numba cannot take the objects themselves).
"""

from dataclasses import dataclass

import numpy as np
from numba import njit

from dispersion import dispersion_peak
from parameters import EPSILON, PhysicalParameters

SPECTRUM_JONSWAP = 0
SPECTRUM_TMA = 1

JONSWAP_GAMMA = 3.3


# ———————————————————— NUMBA FUNCTIONS ————————————————————

@njit(fastmath=True, cache=True)
def _jonswap_density(wind_speed, fetch, gravity, omega):
    if omega < EPSILON:
        return 0.0

    omega_peak = dispersion_peak(gravity, wind_speed, fetch)
    alpha = 0.076 * (wind_speed**2 / (fetch * gravity)) ** 0.22
    sigma = 0.07 if omega <= omega_peak else 0.09
    r = np.exp(-((omega - omega_peak) ** 2) / (2.0 * (sigma * omega_peak) ** 2))

    return (
        alpha * gravity**2 / omega**5
        * np.exp(-1.25 * (omega_peak / omega) ** 4)
        * JONSWAP_GAMMA**r
    )


@njit(fastmath=True, cache=True)
def _depth_attenuation(omega, depth, gravity):
    omega_h = omega * np.sqrt(depth / gravity)
    omega_h = min(max(omega_h, 0.0), 2.0)
    if omega_h <= 1.0:
        return 0.5 * omega_h**2
    return 1.0 - 0.5 * (2.0 - omega_h) ** 2


@njit(fastmath=True, cache=True)
def _spectrum_density(model, wind_speed, fetch, gravity, depth, omega):
    density = _jonswap_density(wind_speed, fetch, gravity, omega)
    if model == SPECTRUM_TMA:
        density *= _depth_attenuation(omega, depth, gravity)
    return density


def kitaigorodskii_depth_attenuation(omega: float, depth: float, gravity: float) -> float:
    """Depth attenuation factor in [0, 1]; equals 0.5 at omega_h = 1."""
    return _depth_attenuation(float(omega), float(depth), float(gravity))


# —————————————————————— SPECTRUM TYPES ——————————————————————

@dataclass(frozen=True)
class SpectrumJONSWAP:
    wind_speed: float   # [m/s]
    fetch: float        # [m]
    gravity: float      # [m/s^2]

    model = SPECTRUM_JONSWAP

    def evaluate(self, omega: float) -> float:
        """Spectral density at angular frequency omega; 0 below EPSILON."""
        _, wind_speed, fetch, gravity, _ = self.kernel_args()
        return _jonswap_density(wind_speed, fetch, gravity, float(omega))

    def kernel_args(self):
        """(model, wind_speed, fetch, gravity, depth) for the compiled kernels."""
        return (self.model, float(self.wind_speed), float(self.fetch), float(self.gravity), 0.0)


@dataclass(frozen=True)
class SpectrumTMA:
    jonswap: SpectrumJONSWAP
    depth: float        # [m]

    model = SPECTRUM_TMA

    def evaluate(self, omega: float) -> float:
        omega = float(omega)
        return self.jonswap.evaluate(omega) * kitaigorodskii_depth_attenuation(
            omega, self.depth, self.jonswap.gravity
        )

    def kernel_args(self):
        j = self.jonswap
        return (self.model, float(j.wind_speed), float(j.fetch), float(j.gravity), float(self.depth))


def spectrum_from_parameters(parameters: PhysicalParameters, model: str = "TMA"):
    """
    Build the named spectrum ("JONSWAP" or "TMA") from the shared physical
    parameters. TMA uses parameters.water_depth.
    """
    jonswap = SpectrumJONSWAP(
        wind_speed=parameters.wind_speed,
        fetch=parameters.fetch,
        gravity=parameters.gravity,
    )
    if model == "JONSWAP":
        return jonswap
    elif model == "TMA":
        return SpectrumTMA(jonswap=jonswap, depth=parameters.water_depth)
    else:
        raise ValueError(f"Unknown spectrum model: {model!r} (expected 'JONSWAP' or 'TMA')")
