"""Measured quantities over sampled waveforms."""

from __future__ import annotations

import numpy as np


def rms(x: np.ndarray) -> float:
    """RMS value: sqrt(mean(x^2))."""
    x = np.asarray(x)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(x ** 2)))


def crest_factor(x: np.ndarray) -> float:
    """Crest factor = peak / RMS."""
    x = np.asarray(x)
    r = rms(x)
    if r <= 1e-12:
        return 0.0
    return float(np.max(np.abs(x)) / r)


def ac_rms(x: np.ndarray) -> float:
    """RMS of the AC part only (mean removed)."""
    x = np.asarray(x)
    if x.size == 0:
        return 0.0
    return rms(x - np.mean(x))
