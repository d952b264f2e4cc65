"""
Base height spectrum sampling tests.
"""

import numba
import numpy as np
import pytest

from directional import directional_spreading
from dispersion import dispersion_capillary
from height_spectrum import WaveField, build_height_spectrum, sample_spectrum, wave_vector
from spectra import SpectrumJONSWAP, SpectrumTMA


@pytest.fixture
def jonswap():
    return SpectrumJONSWAP(wind_speed=10.0, fetch=50000.0, gravity=9.81)


def _expected_amplitude(params, spectrum, kx, ky, z, phase):
    k = np.hypot(kx, ky)
    omega, grad_omega = dispersion_capillary(params, k)
    spreading = directional_spreading(params, omega, np.arctan2(ky, kx))
    density = spectrum.evaluate(omega)
    grad_k = 2.0 * np.pi / params.domain_size
    amplitude = z * np.sqrt(2.0 * spreading * density * grad_k**2 * grad_omega / k)
    return amplitude * np.exp(1j * phase), omega


def test_wave_vector_is_centred():
    L = 64.0
    assert wave_vector(0, 0, 8, L) == pytest.approx((-9 * np.pi / L, -9 * np.pi / L))
    assert wave_vector(7, 3, 8, L) == pytest.approx((5 * np.pi / L, -3 * np.pi / L))
    # odd resolution has a DC cell in the middle
    assert wave_vector(3, 3, 5, L) == (0.0, 0.0)


@pytest.mark.parametrize("k", [(0.0, 0.0), (1e-17, 0.0), (0.0, -1e-18)])
def test_zero_wavevector_gives_zero_sample(deep_water, jonswap, k):
    rng = np.random.default_rng(3)
    assert sample_spectrum(deep_water, jonswap, k, rng) == (0j, 0.0)
    # nothing drawn from the generator
    assert rng.standard_normal() == np.random.default_rng(3).standard_normal()


def test_sample_matches_closed_form(deep_water, jonswap):
    kx, ky = 0.3, -0.2
    amplitude, omega = sample_spectrum(deep_water, jonswap, (kx, ky), rng=np.random.default_rng(7))

    ref = np.random.default_rng(7)
    z = ref.standard_normal()
    phase = 2.0 * np.pi * ref.random()
    expected, expected_omega = _expected_amplitude(deep_water, jonswap, kx, ky, z, phase)

    assert omega == pytest.approx(expected_omega, rel=1e-12)
    assert abs(amplitude) > 0.0
    assert amplitude.real == pytest.approx(expected.real, rel=1e-9, abs=1e-15)
    assert amplitude.imag == pytest.approx(expected.imag, rel=1e-9, abs=1e-15)


def test_build_shapes_and_types(deep_water, jonswap):
    field = build_height_spectrum(deep_water, jonswap, 8, rng=1)

    assert isinstance(field, WaveField)
    assert field.resolution == 8
    assert field.amplitudes.shape == (8, 8)
    assert field.amplitudes.dtype == np.complex128
    assert field.frequencies.shape == (8, 8)
    assert field.frequencies.dtype == np.float64
    assert np.all(np.isfinite(field.amplitudes))
    assert np.any(field.amplitudes != 0.0)


def test_build_is_reproducible(deep_water, jonswap):
    first = build_height_spectrum(deep_water, jonswap, 16, rng=42)
    second = build_height_spectrum(deep_water, jonswap, 16, rng=np.random.default_rng(42))
    other = build_height_spectrum(deep_water, jonswap, 16, rng=43)

    assert np.array_equal(first.amplitudes, second.amplitudes)
    assert np.array_equal(first.frequencies, second.frequencies)
    assert not np.array_equal(first.amplitudes, other.amplitudes)
    # frequencies are not random
    assert np.array_equal(first.frequencies, other.frequencies)


def test_build_does_not_depend_on_thread_count(deep_water, jonswap):
    threads = numba.get_num_threads()
    try:
        numba.set_num_threads(1)
        serial = build_height_spectrum(deep_water, jonswap, 16, rng=9)
    finally:
        numba.set_num_threads(threads)
    parallel = build_height_spectrum(deep_water, jonswap, 16, rng=9)

    assert np.array_equal(serial.amplitudes, parallel.amplitudes)


def test_frequencies_follow_dispersion(deep_water, jonswap):
    n = 8
    field = build_height_spectrum(deep_water, jonswap, n, rng=0)
    for j in range(n):
        for i in range(n):
            kx, ky = wave_vector(i, j, n, deep_water.domain_size)
            omega, _ = dispersion_capillary(deep_water, np.hypot(kx, ky))
            assert field.frequencies[j, i] == pytest.approx(omega, rel=1e-9)


def test_cells_use_row_major_draws(deep_water):
    """Cell (j, i) consumes the (j, i) entries of the up-front draws."""
    n = 8
    spectrum = SpectrumTMA(SpectrumJONSWAP(10.0, 50000.0, 9.81), depth=20.0)
    field = build_height_spectrum(deep_water, spectrum, n, rng=11)

    ref = np.random.default_rng(11)
    normals = ref.standard_normal((n, n))
    phases = 2.0 * np.pi * ref.random((n, n))

    for j, i in [(0, 0), (2, 5), (7, 1), (4, 4)]:
        kx, ky = wave_vector(i, j, n, deep_water.domain_size)
        expected, _ = _expected_amplitude(deep_water, spectrum, kx, ky, normals[j, i], phases[j, i])
        assert field.amplitudes[j, i] == pytest.approx(expected, rel=1e-9, abs=1e-15)


def test_dc_cell_is_zero_for_odd_resolution(deep_water, jonswap):
    field = build_height_spectrum(deep_water, jonswap, 5, rng=2)
    assert field.amplitudes[3, 3] == 0.0
    assert field.frequencies[3, 3] == 0.0
    assert np.count_nonzero(field.frequencies) == 24


@pytest.mark.parametrize("resolution", [0, -4, 2.5, True, "8"])
def test_invalid_resolution(deep_water, jonswap, resolution):
    with pytest.raises(ValueError):
        build_height_spectrum(deep_water, jonswap, resolution, rng=0)
