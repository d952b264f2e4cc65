# dispersion.py
"""
Dispersion relation for gravity-capillary waves in water of finite depth.

    omega^2 = (g * k + (sigma / rho) * k^3) * tanh(h * k)

where:
    omega is angular frequency (rad/s)
    k is wavenumber (1/m)
    sigma is surface tension (N/m), rho water density (kg/m^3)
    h is water depth (m), g gravitational acceleration (m/s^2)

The compiled scalar versions take plain floats so they can be inlined into
the parallel grid kernels; the public wrappers take PhysicalParameters.
"""

import numpy as np
from numba import njit

from parameters import EPSILON, PhysicalParameters


@njit(fastmath=True, cache=True)
def dispersion_peak(gravity, wind_speed, fetch):
    """
    Peak angular frequency of a fetch-limited wind sea (JONSWAP):

        omega_p = 22 * (g^2 / (U * F))^(1/3)
    """
    return 22.0 * (gravity**2 / (wind_speed * fetch)) ** (1.0 / 3.0)


@njit(fastmath=True, cache=True)
def _dispersion_capillary(gravity, surface_tension, water_density, water_depth, k):
    if k < EPSILON:
        return 0.0, 0.0

    tension = surface_tension / water_density
    restoring = gravity * k + tension * k**3

    tanh_hk = np.tanh(water_depth * k)
    # sech^2 as 1 - tanh^2: no overflow in deep water
    sech2_hk = 1.0 - tanh_hk * tanh_hk

    omega = np.sqrt(restoring * tanh_hk)
    if omega < EPSILON:
        return 0.0, 0.0

    grad_omega = (
        water_depth * sech2_hk * restoring
        + tanh_hk * (gravity + 3.0 * tension * k**2)
    ) / (2.0 * omega)

    return omega, grad_omega


def dispersion_capillary(parameters: PhysicalParameters, wave_number: float):
    """
    Angular frequency and its derivative d(omega)/dk at wavenumber k.

    The derivative is the Jacobian factor between frequency-space and
    wavenumber-space integration. Returns (0, 0) for k below EPSILON.

    Returns
    -------
    omega, grad_omega : float
    """
    return _dispersion_capillary(
        parameters.gravity,
        parameters.surface_tension,
        parameters.water_density,
        parameters.water_depth,
        float(wave_number),
    )
