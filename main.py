# main.py
import os
import glob
import time
import argparse

import numpy as np

from parameters import PhysicalParameters, PARAM_FILE
from spectra import spectrum_from_parameters
from height_spectrum import build_height_spectrum
from ocean import Ocean, displacement_diagnostics


def next_run_history_filename(prefix="run_history_", suffix=".txt"):
    """
    Find the next run_history_XXXX.txt filename.
    If none present, returns run_history_0000.txt.
    If max XXXX == 9999, next is 10000 (more digits allowed).
    """
    max_idx = -1
    for f in glob.glob(f"{prefix}*{suffix}"):
        middle = os.path.basename(f)[len(prefix):-len(suffix)]
        if middle.isdigit():
            max_idx = max(max_idx, int(middle))

    next_idx = max_idx + 1
    idx_str = f"{next_idx:04d}" if next_idx <= 9999 else str(next_idx)
    return f"{prefix}{idx_str}{suffix}"


class RunLogger:
    """
    Buffer everything in memory; write to file on demand.
    Frame lines can be throttled on screen by simulation time.
    """
    def __init__(self, filename, screen_interval=10.0):
        self.filename = filename
        self.screen_interval = screen_interval
        self.buffer = []
        self.last_print_time = None  # simulation time [s]

    def log(self, msg, t_for_screen=None, always_print=False):
        """
        msg            : string to log.
        t_for_screen   : simulation time for frame lines (float) or None.
        always_print   : if True, always print to screen regardless of time.
        """
        line = msg if msg.endswith("\n") else msg + "\n"
        self.buffer.append(line)

        if always_print or t_for_screen is None:
            print(msg)
            if always_print and t_for_screen is not None:
                self.last_print_time = t_for_screen
        elif (self.last_print_time is None or
                (t_for_screen - self.last_print_time) >= self.screen_interval):
            print(msg)
            self.last_print_time = t_for_screen

    def flush(self):
        """Write buffered lines to file and clear the buffer."""
        if not self.buffer:
            return
        with open(self.filename, "a") as f:
            f.writelines(self.buffer)
        self.buffer = []


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Spectral (JONSWAP/TMA) ocean surface synthesis"
    )
    parser.add_argument("--params", default=PARAM_FILE,
                        help="Physical parameters file (default: %(default)s)")
    parser.add_argument("--resolution", type=int, default=64,
                        help="Grid side N; powers of two transform fastest")
    parser.add_argument("--spectrum", choices=("JONSWAP", "TMA"), default="TMA")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the random base spectrum")
    parser.add_argument("--t-start", type=float, default=0.0)
    parser.add_argument("--t-end", type=float, default=10.0)
    parser.add_argument("--dt", type=float, default=0.1)
    parser.add_argument("--workers", type=int, default=-1,
                        help="FFT worker threads (-1 = all cores)")
    parser.add_argument("--time-execution", action="store_true",
                        help="Report wall-clock time of field build and propagation")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)

    # ----- set up run history logging -----
    log_filename = next_run_history_filename()
    logger = RunLogger(log_filename)
    logger.log(f"Logging this run to {log_filename}", always_print=True)

    try:
        if not args.dt > 0.0:
            raise ValueError(f"--dt must be > 0, got {args.dt}")
        if args.t_end < args.t_start:
            raise ValueError(f"--t-end ({args.t_end}) is before --t-start ({args.t_start})")

        params = PhysicalParameters.from_file(args.params)
        spectrum = spectrum_from_parameters(params, args.spectrum)
        ocean = Ocean(args.resolution, workers=args.workers)
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        logger.log("ERROR while setting up the ocean:", always_print=True)
        logger.log(str(e), always_print=True)
        logger.flush()
        return 1

    logger.log(f"Parameters from '{args.params}': {params}")
    logger.log(f"Spectrum: {args.spectrum}, resolution {args.resolution}, seed {args.seed}")

    timers = {"build": 0.0, "propagate": 0.0}

    t0 = time.perf_counter()
    field = build_height_spectrum(params, spectrum, args.resolution, rng=args.seed)
    timers["build"] += time.perf_counter() - t0

    displacement = ocean.new_displacement()

    logger.log(
        f"{'frame':<10}"
        f"{'time[s]':<12}"
        f"{'max_crest[m]':<16}"
        f"{'min_trough[m]':<16}"
        f"{'rms[m]':<14}"
        f"{'Hs[m]':<14}"
        f"{'max_horiz[m]':<14}"
    )
    logger.log("-" * 96)

    def fmt(value, width, decimals):
        if abs(value) > 10000:
            return f"{value:<{width}.{decimals}e}"
        else:
            return f"{value:<{width}.{decimals}f}"

    frame_no = 0
    for t in np.arange(args.t_start, args.t_end + 0.5 * args.dt, args.dt):
        frame_no += 1

        t0 = time.perf_counter()
        ocean.propagate(t, params, field.amplitudes, field.frequencies, displacement)
        timers["propagate"] += time.perf_counter() - t0

        diag = displacement_diagnostics(displacement)
        line = (
            f"{frame_no:<10d}"
            f"{t:<12.3f}"
            f"{fmt(diag['maximum crest height [m]'], 16, 4)}"
            f"{fmt(diag['minimum trough [m]'], 16, 4)}"
            f"{fmt(diag['rms elevation [m]'], 14, 5)}"
            f"{fmt(diag['significant wave height [m]'], 14, 4)}"
            f"{fmt(diag['maximum horizontal displacement [m]'], 14, 4)}"
        )
        logger.log(line, t_for_screen=t)

        if not np.all(np.isfinite(displacement)):
            logger.log(
                f"*** Non-finite displacement at t = {t:.3f} s; stopping. ***",
                t_for_screen=t,
                always_print=True,
            )
            break

        if frame_no % 100 == 0:
            logger.flush()

    if args.time_execution:
        logger.log("Performance report:", always_print=True)
        logger.log(f"  build_height_spectrum : {timers['build']:.4f} s", always_print=True)
        if frame_no:
            logger.log(
                f"  propagate             : {timers['propagate'] / frame_no:.6f} s/frame "
                f"over {frame_no} frames",
                always_print=True,
            )

    logger.log("Simulation complete.", always_print=True)
    logger.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
