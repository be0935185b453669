"""
Post-run analysis of subthreshold voltage oscillations.
"""

import numpy as np
from typing import Optional


def _steady_part(time: np.ndarray, V: np.ndarray, discard: float):
    """Drop the initial transient of the given fraction of the run."""
    time = np.asarray(time, dtype=np.float64)
    V = np.asarray(V, dtype=np.float64)
    if not 0.0 <= discard < 1.0:
        raise ValueError(f"discard must be in [0, 1), got {discard}")
    t_cut = time[0] + discard * (time[-1] - time[0])
    mask = time >= t_cut
    return time[mask], V[mask]


def detect_crossings(V: np.ndarray, level: float) -> np.ndarray:
    """
    Indices of upward crossings of ``level`` (V[i] >= level and V[i-1] < level).
    """
    V = np.asarray(V)
    crossings = (V[1:] >= level) & (V[:-1] < level)
    return np.where(crossings)[0] + 1


def interpolate_crossing_times(V: np.ndarray, time: np.ndarray,
                               indices: np.ndarray, level: float) -> np.ndarray:
    """
    Interpolate crossing times using linear interpolation.
    """
    if len(indices) == 0:
        return np.array([])

    crossing_times = np.zeros(len(indices))
    for i, idx in enumerate(indices):
        v0, v1 = V[idx - 1], V[idx]
        t0, t1 = time[idx - 1], time[idx]
        if abs(v1 - v0) > 1e-15:
            crossing_times[i] = t0 + (level - v0) / (v1 - v0) * (t1 - t0)
        else:
            crossing_times[i] = t0
    return crossing_times


def oscillation_frequency(time: np.ndarray, V: np.ndarray,
                          discard: float = 0.2,
                          level: Optional[float] = None) -> float:
    """
    Mean oscillation frequency from upward crossings of the mean voltage.

    Args:
        time: Sample times
        V: Voltage trace
        discard: Fraction of the run treated as transient and ignored
        level: Crossing level (default: mean of the retained trace)

    Returns:
        Frequency in inverse time units of ``time`` (Hz for seconds,
        kHz for ms), or 0.0 if fewer than two cycles are found
    """
    t, v = _steady_part(time, V, discard)
    if level is None:
        level = float(np.mean(v))

    idx = detect_crossings(v, level)
    if len(idx) < 2:
        return 0.0

    crossing_times = interpolate_crossing_times(v, t, idx, level)
    periods = np.diff(crossing_times)
    return float(1.0 / np.mean(periods))


def oscillation_amplitude(time: np.ndarray, V: np.ndarray,
                          discard: float = 0.2) -> float:
    """Peak-to-peak voltage after the transient."""
    _, v = _steady_part(time, V, discard)
    return float(np.max(v) - np.min(v))
