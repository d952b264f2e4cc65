# ocean.py
import numpy as np
import scipy.fft as sp_fft
from numba import njit, prange

from height_spectrum import wave_vector
from parameters import EPSILON, PhysicalParameters

# displacement components: [..., 0] = x, [..., 1] = y, [..., 2] = z (up)
AXIS_X = 0
AXIS_Y = 1
AXIS_Z = 2


# ———————————————————— NUMBA FUNCTIONS ————————————————————

@njit(parallel=True, fastmath=True, cache=True)
def _propagate_spectrum(
    samples,        # base amplitudes h0, complex (N, N)
    omega,          # angular frequencies, (N, N)
    time,
    domain_size,
    out_x,          # -i * k_x/|k| * h(t), complex (N, N)
    out_y,          # -i * k_y/|k| * h(t)
    out_z,          # h(t)
):
    n = samples.shape[0]

    for j in prange(n):
        for i in range(n):
            kx, ky = wave_vector(i, j, n, domain_size)

            dispersion = omega[j, i] * time
            c = np.cos(dispersion)
            s = np.sin(dispersion)
            disp_pos = c + 1j * s
            disp_neg = c - 1j * s

            # negative-frequency term from the point-reflected cell
            sample = samples[j, i] * disp_pos + samples[n - j - 1, n - i - 1] * disp_neg

            k = np.sqrt(kx * kx + ky * ky)
            if k < EPSILON:
                ux = 0.0
                uy = 0.0
            else:
                ux = kx / k
                uy = ky / k

            out_x[j, i] = -1j * ux * sample
            out_y[j, i] = -1j * uy * sample
            out_z[j, i] = sample


@njit(parallel=True, fastmath=True, cache=True)
def _checkerboard_correction(spatial, displacement, axis):
    """
    Undo the (-1)^(i+j) modulation left by the centred frequency grid and
    keep the real part.
    """
    n = spatial.shape[0]

    for j in prange(n):
        for i in range(n):
            if (j + i) % 2 == 0:
                displacement[j, i, axis] = -spatial[j, i].real
            else:
                displacement[j, i, axis] = spatial[j, i].real


# —————————————————————— PROPAGATOR ——————————————————————

class Ocean:
    """
    Time propagation of a base height spectrum into a spatial displacement
    field (Tessendorf-style FFT ocean).

    Owns the per-axis spectral scratch grids and the transform buffer; they
    are allocated once and overwritten by every call to propagate(). One
    instance must not be propagated from several threads at once.
    """
    def __init__(self, resolution: int, workers: int | None = None):
        """
        Parameters
        ----------
        resolution : int
            Grid side N. Any positive integer; powers of two transform fastest.

        workers : int or None
            Worker count handed to scipy.fft for the row passes
            (-1 = all cores, None = single worker).
        """
        if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)) or resolution <= 0:
            raise ValueError(f"resolution must be a positive integer, got {resolution!r}")

        self.resolution = int(resolution)
        self.workers = workers

        self.fft_buffer = self._new_map()
        self.displacement_x = self._new_map()
        self.displacement_y = self._new_map()
        self.displacement_z = self._new_map()

    def _new_map(self) -> np.ndarray:
        return np.zeros((self.resolution, self.resolution), dtype=np.complex128)

    def new_displacement(self) -> np.ndarray:
        """Zeroed (N, N, 3) displacement field to be reused across frames."""
        return np.zeros((self.resolution, self.resolution, 3), dtype=np.float64)

    # ---------- public API ----------

    def propagate(
        self,
        time: float,
        parameters: PhysicalParameters,
        samples: np.ndarray,
        omega: np.ndarray,
        displacement: np.ndarray,
    ) -> None:
        """
        Evaluate the displacement field at 'time' into 'displacement' (in place).

        1. time evolution  h(t) = h0[j, i] e^{i w t} + h0[N-j-1, N-i-1] e^{-i w t}
        2. split into x, y (horizontal, -i k/|k| h) and z (vertical, h)
        3. inverse transform each axis: row pass, transpose, row pass
        4. checkerboard sign correction, real part -> displacement[..., axis]

        The result depends only on (time, samples, omega); nothing carries
        over between calls.
        """
        n = self.resolution
        shape = (n, n)

        samples = np.asarray(samples, dtype=np.complex128)
        omega = np.asarray(omega, dtype=np.float64)
        if samples.shape != shape or omega.shape != shape:
            raise ValueError(
                f"Base spectrum shape {samples.shape} / frequencies shape {omega.shape} "
                f"do not match ocean resolution {shape}"
            )
        if (not isinstance(displacement, np.ndarray)
                or displacement.shape != (n, n, 3)
                or displacement.dtype != np.float64):
            raise ValueError(
                f"displacement must be a float64 array of shape {(n, n, 3)}; "
                f"use Ocean.new_displacement()"
            )

        _propagate_spectrum(
            samples, omega, float(time), parameters.domain_size,
            self.displacement_x, self.displacement_y, self.displacement_z,
        )

        for axis, spectrum in (
            (AXIS_X, self.displacement_x),
            (AXIS_Y, self.displacement_y),
            (AXIS_Z, self.displacement_z),
        ):
            self.spectral_to_spatial(spectrum, self.fft_buffer)
            _checkerboard_correction(self.fft_buffer, displacement, axis)

    def spectral_to_spatial(self, spectrum: np.ndarray, output: np.ndarray) -> None:
        """
        Unnormalised inverse 2D transform as two row passes with a transpose
        in between. 'spectrum' is used as scratch; the result (axes swapped
        relative to ifft2) lands in 'output'.

        scipy.fft has no out= argument; overwrite_x lets it transform the
        scratch input in place where the backend can.
        """
        output[:] = sp_fft.ifft(
            spectrum, axis=1, norm="forward", overwrite_x=True, workers=self.workers
        )
        spectrum[:] = output.T
        output[:] = sp_fft.ifft(
            spectrum, axis=1, norm="forward", overwrite_x=True, workers=self.workers
        )


def displacement_diagnostics(displacement: np.ndarray) -> dict[str, float]:
    """
    Summary of one displacement frame, for the run monitor.

    Keys:
        - maximum crest height [m]
        - minimum trough [m]
        - rms elevation [m]
        - significant wave height [m]   (4 * std of elevation)
        - maximum horizontal displacement [m]
    """
    elevation = displacement[..., AXIS_Z]
    horizontal = np.hypot(displacement[..., AXIS_X], displacement[..., AXIS_Y])

    return {
        "maximum crest height [m]"           : float(elevation.max()),
        "minimum trough [m]"                 : float(elevation.min()),
        "rms elevation [m]"                  : float(np.sqrt(np.mean(elevation**2))),
        "significant wave height [m]"        : float(4.0 * np.std(elevation)),
        "maximum horizontal displacement [m]": float(horizontal.max()),
    }
