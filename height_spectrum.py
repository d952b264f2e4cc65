# height_spectrum.py
"""
Random initial height spectrum h0(k) on a centred wavevector grid.

Cell (j, i) of a resolution x resolution grid maps to

    k = pi / L * (2 * i - N - 1, 2 * j - N - 1)

and receives an independent complex amplitude

    h0 = z * sqrt(2 * D(omega, theta) * S(omega) * dk^2 * domega/dk / |k|) * exp(i * phase)

with z ~ N(0, 1), phase ~ U[0, 2 pi), dk = 2 pi / L.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np
from numba import njit, prange

from directional import _directional_spreading_donelan_banner
from dispersion import _dispersion_capillary
from parameters import EPSILON, PhysicalParameters
from spectra import _spectrum_density


@dataclass
class WaveField:
    """Base spectrum: complex amplitudes and angular frequencies, indexed [j, i]."""

    amplitudes: np.ndarray      # complex128, (N, N)
    frequencies: np.ndarray     # float64, (N, N) [rad/s]

    @property
    def resolution(self) -> int:
        return self.amplitudes.shape[0]


def _as_generator(rng) -> np.random.Generator:
    # Generator is passed through; int or None seeds a new one
    return np.random.default_rng(rng)


# ———————————————————— NUMBA FUNCTIONS ————————————————————

@njit(fastmath=True, cache=True)
def wave_vector(i, j, resolution, domain_size):
    """Centred wavevector of grid cell (j, i)."""
    kx = np.pi * (2 * i - resolution - 1) / domain_size
    ky = np.pi * (2 * j - resolution - 1) / domain_size
    return kx, ky


@njit(fastmath=True, cache=True)
def _sample(
    kx, ky, z, phase,
    gravity, surface_tension, water_density, water_depth,
    wind_speed, fetch, swell, domain_size,
    model, s_wind_speed, s_fetch, s_gravity, s_depth,
):
    k = np.sqrt(kx * kx + ky * ky)
    if k < EPSILON:
        return 0.0 + 0.0j, 0.0

    omega, grad_omega = _dispersion_capillary(
        gravity, surface_tension, water_density, water_depth, k
    )
    if omega < EPSILON:
        return 0.0 + 0.0j, omega

    theta = np.arctan2(ky, kx)
    grad_k = 2.0 * np.pi / domain_size

    spreading = _directional_spreading_donelan_banner(
        gravity, wind_speed, fetch, swell, omega, theta
    )
    density = _spectrum_density(model, s_wind_speed, s_fetch, s_gravity, s_depth, omega)

    amplitude = z * np.sqrt(2.0 * spreading * density * grad_k**2 * grad_omega / k)
    return amplitude * (np.cos(phase) + 1j * np.sin(phase)), omega


@njit(parallel=True, fastmath=True, cache=True)
def _build_height_spectrum_kernel(
    amplitudes,     # out, complex (N, N)
    frequencies,    # out, float (N, N)
    normals,        # standard-normal draw per cell
    phases,         # uniform phase per cell
    gravity, surface_tension, water_density, water_depth,
    wind_speed, fetch, swell, domain_size,
    model, s_wind_speed, s_fetch, s_gravity, s_depth,
):
    n = amplitudes.shape[0]

    for j in prange(n):
        for i in range(n):
            kx, ky = wave_vector(i, j, n, domain_size)
            amplitude, omega = _sample(
                kx, ky, normals[j, i], phases[j, i],
                gravity, surface_tension, water_density, water_depth,
                wind_speed, fetch, swell, domain_size,
                model, s_wind_speed, s_fetch, s_gravity, s_depth,
            )
            amplitudes[j, i] = amplitude
            frequencies[j, i] = omega


# —————————————————————— PUBLIC API ——————————————————————

def _physical_args(parameters: PhysicalParameters):
    p = parameters
    return (
        p.gravity, p.surface_tension, p.water_density, p.water_depth,
        p.wind_speed, p.fetch, p.swell, p.domain_size,
    )


def sample_spectrum(parameters: PhysicalParameters, spectrum, wavevector, rng=None):
    """
    Draw one complex Fourier amplitude for a wavevector.

    Parameters
    ----------
    parameters : PhysicalParameters
    spectrum : SpectrumJONSWAP or SpectrumTMA
    wavevector : (kx, ky) in [1/m]
    rng : numpy Generator, int seed or None
        Source of the normal magnitude and uniform phase draws (in that
        order). Nothing is drawn for |k| below EPSILON.

    Returns
    -------
    amplitude : complex
    omega : float
        Angular frequency of the wavevector; (0, 0) for |k| below EPSILON.
    """
    kx, ky = float(wavevector[0]), float(wavevector[1])
    if np.hypot(kx, ky) < EPSILON:
        return 0j, 0.0

    rng = _as_generator(rng)
    z = rng.standard_normal()
    phase = 2.0 * np.pi * rng.random()

    amplitude, omega = _sample(
        kx, ky, z, phase, *_physical_args(parameters), *spectrum.kernel_args()
    )
    return complex(amplitude), float(omega)


def build_height_spectrum(
    parameters: PhysicalParameters,
    spectrum,
    resolution: int,
    rng=None,
) -> WaveField:
    """
    Sample the full resolution x resolution base spectrum.

    All random draws are taken up front in row-major cell order, so a given
    seed yields the same field however the parallel rows are scheduled.
    """
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)) or resolution <= 0:
        raise ValueError(f"resolution must be a positive integer, got {resolution!r}")
    n = int(resolution)

    rng = _as_generator(rng)
    normals = rng.standard_normal((n, n))
    phases = 2.0 * np.pi * rng.random((n, n))

    amplitudes = np.zeros((n, n), dtype=np.complex128)
    frequencies = np.zeros((n, n), dtype=np.float64)

    _build_height_spectrum_kernel(
        amplitudes, frequencies, normals, phases,
        *_physical_args(parameters), *spectrum.kernel_args(),
    )

    return WaveField(amplitudes=amplitudes, frequencies=frequencies)
