# directional.py
"""
Directional spreading of wave energy.

The directional distribution is the Donelan-Banner base shape multiplied by
a frequency-dependent elongation term controlled by the swell factor, and
normalised so that it integrates to one over theta in [-pi, pi]:

    D(omega, theta) = D_base * D_elong / integral(D_base * D_elong dtheta)

The normalisation is recomputed for every (omega, theta) query.
"""

import numpy as np
from numba import njit

from dispersion import dispersion_peak
from parameters import EPSILON, PhysicalParameters

QUADRATURE_STEPS = 128


def trapezoidal_quadrature(lower, upper, steps, f):
    """Composite trapezoidal rule for f over [lower, upper] with 'steps' sub-intervals."""
    h = (upper - lower) / steps
    total = 0.5 * (f(lower) + f(upper))
    for n in range(1, steps):
        total += f(lower + n * h)
    return total * h


# ———————————————————— NUMBA FUNCTIONS ————————————————————

@njit(fastmath=True, cache=True)
def _elongation(gravity, wind_speed, fetch, swell, omega, theta):
    theta = min(max(theta, -np.pi), np.pi)
    if omega < EPSILON:
        # tanh(omega_p / omega) -> 1
        shaping = 16.0 * swell**2
    else:
        omega_peak = dispersion_peak(gravity, wind_speed, fetch)
        shaping = 16.0 * np.tanh(omega_peak / omega) * swell**2
    return abs(np.cos(0.5 * theta)) ** (2.0 * shaping)


@njit(fastmath=True, cache=True)
def _donelan_banner(gravity, wind_speed, fetch, omega, theta):
    if omega < EPSILON:
        # beta -> 0 limit: uniform over [-pi, pi]
        return 1.0 / (2.0 * np.pi)

    omega_peak = dispersion_peak(gravity, wind_speed, fetch)
    omega_ratio = omega / omega_peak

    if omega_ratio < 0.95:
        beta = 2.61 * omega_ratio**1.3
    elif omega_ratio < 1.6:
        beta = 2.28 * omega_ratio ** (-1.3)
    else:
        epsilon = -0.4 + 0.8393 * np.exp(-0.567 * np.log(omega_ratio**2))
        beta = 10.0**epsilon

    tanh_bt = np.tanh(beta * theta)
    sech2_bt = 1.0 - tanh_bt * tanh_bt
    return beta / (2.0 * np.tanh(beta * np.pi)) * sech2_bt


@njit(fastmath=True, cache=True)
def _directional_spreading_donelan_banner(gravity, wind_speed, fetch, swell, omega, theta):
    """
    Normalised Donelan-Banner spreading; same trapezoidal rule as
    trapezoidal_quadrature, inlined so the sampling kernel stays compiled.
    """
    lower = -np.pi
    h = 2.0 * np.pi / QUADRATURE_STEPS

    normalization = 0.5 * (
        _donelan_banner(gravity, wind_speed, fetch, omega, lower)
        * _elongation(gravity, wind_speed, fetch, swell, omega, lower)
        + _donelan_banner(gravity, wind_speed, fetch, omega, np.pi)
        * _elongation(gravity, wind_speed, fetch, swell, omega, np.pi)
    )
    for n in range(1, QUADRATURE_STEPS):
        t = lower + n * h
        normalization += (
            _donelan_banner(gravity, wind_speed, fetch, omega, t)
            * _elongation(gravity, wind_speed, fetch, swell, omega, t)
        )
    normalization *= h

    return (
        _donelan_banner(gravity, wind_speed, fetch, omega, theta)
        * _elongation(gravity, wind_speed, fetch, swell, omega, theta)
        / normalization
    )


# —————————————————————— PUBLIC API ——————————————————————

def directional_elongation(parameters: PhysicalParameters, omega: float, theta: float) -> float:
    """
    Swell elongation cos(theta/2)^(2s), s = 16 * tanh(omega_p / omega) * swell^2.

    theta is clamped to [-pi, pi]. With swell = 0 the weight is 1 everywhere.
    Below EPSILON, omega takes the omega -> 0 limit s = 16 * swell^2.
    """
    return _elongation(
        parameters.gravity, parameters.wind_speed, parameters.fetch,
        parameters.swell, float(omega), float(theta),
    )


def directional_base_donelan_banner(parameters: PhysicalParameters, omega: float, theta: float) -> float:
    """
    Donelan-Banner directional distribution

        beta / (2 * tanh(beta * pi)) * sech(beta * theta)^2

    with beta piecewise in omega / omega_p (< 0.95, [0.95, 1.6), >= 1.6).
    Below EPSILON the distribution is uniform, 1 / (2 pi).
    """
    return _donelan_banner(
        parameters.gravity, parameters.wind_speed, parameters.fetch,
        float(omega), float(theta),
    )


def directional_spreading(
    parameters: PhysicalParameters,
    omega: float,
    theta: float,
    base_fn=directional_base_donelan_banner,
) -> float:
    """
    Normalised directional weight base_fn * elongation at (omega, theta).

    base_fn is called as base_fn(parameters, omega, theta). The normaliser is
    a QUADRATURE_STEPS-interval trapezoidal integral over [-pi, pi].
    """
    def weight(t):
        return base_fn(parameters, omega, t) * directional_elongation(parameters, omega, t)

    normalization = trapezoidal_quadrature(-np.pi, np.pi, QUADRATURE_STEPS, weight)
    return weight(theta) / normalization
