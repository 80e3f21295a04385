"""Waveform generation utilities.

This module generates instantaneous voltage and current values for the four
supported waveform shapes (sine, square, triangle, sawtooth).
Amplitudes are configured as RMS values; the sampler works on peak values, so
every caller converts with `rms_to_peak` first.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum

import numpy as np

from config import (
    DEFAULT_CURRENT_PHASE,
    DEFAULT_CURRENT_RMS,
    DEFAULT_FREQUENCY,
    DEFAULT_VOLTAGE_PHASE,
    DEFAULT_VOLTAGE_RMS,
    SAMPLE_COUNT,
    TIME_WINDOW_MS,
)


class Waveform(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    SAWTOOTH = "sawtooth"


WAVEFORMS = [w.value for w in Waveform]

# Crest factor (peak / RMS) per waveform family.
CREST_FACTORS = {
    Waveform.SINE: np.sqrt(2.0),
    Waveform.SQUARE: 1.0,
    Waveform.TRIANGLE: np.sqrt(3.0),
    Waveform.SAWTOOTH: np.sqrt(3.0),
}


def as_waveform(waveform: Waveform | str) -> Waveform:
    """Coerce a waveform label into the enum, rejecting unknown shapes."""
    try:
        return Waveform(waveform)
    except ValueError:
        raise ValueError(f"Unknown waveform: {waveform}") from None


@dataclass(frozen=True)
class SignalParams:
    amplitude: float      # RMS (V or A), never peak
    frequency: float      # Hz, > 0 by caller contract
    phase: float          # degrees, any range
    dc_offset: float = 0.0
    waveform: Waveform = Waveform.SINE

    def __post_init__(self) -> None:
        object.__setattr__(self, "waveform", as_waveform(self.waveform))

    @property
    def peak(self) -> float:
        return rms_to_peak(self.amplitude, self.waveform)

    def merged(self, **changes) -> "SignalParams":
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown signal parameter(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


DEFAULT_VOLTAGE = SignalParams(
    amplitude=DEFAULT_VOLTAGE_RMS,
    frequency=DEFAULT_FREQUENCY,
    phase=DEFAULT_VOLTAGE_PHASE,
)

DEFAULT_CURRENT = SignalParams(
    amplitude=DEFAULT_CURRENT_RMS,
    frequency=DEFAULT_FREQUENCY,
    phase=DEFAULT_CURRENT_PHASE,
)


def rms_to_peak(rms_amplitude: float, waveform: Waveform | str) -> float:
    """Convert an RMS amplitude to the peak amplitude of the given waveform."""
    return float(rms_amplitude * CREST_FACTORS[as_waveform(waveform)])


def _ac_component(t: np.ndarray, frequency_hz: float, phase_deg: float, waveform: Waveform) -> np.ndarray:
    """Unit-amplitude AC shape in [-1, 1]."""
    argument = 2.0 * np.pi * frequency_hz * t + np.deg2rad(phase_deg)

    if waveform is Waveform.SINE:
        return np.sin(argument)
    if waveform is Waveform.SQUARE:
        # np.sign(0) == 0, so zero crossings stay at zero
        return np.sign(np.sin(argument))
    if waveform is Waveform.TRIANGLE:
        return (2.0 / np.pi) * np.arcsin(np.sin(argument))
    if waveform is Waveform.SAWTOOTH:
        # (t + (phase / 360) * period) * f, written without dividing by f
        cycles = t * frequency_hz + phase_deg / 360.0
        return 2.0 * (cycles - np.floor(cycles + 0.5))
    raise ValueError(f"Unknown waveform: {waveform}")


def sample(
    t: float | np.ndarray,
    peak_amplitude: float,
    frequency_hz: float,
    phase_deg: float,
    dc_offset: float = 0.0,
    waveform: Waveform | str = Waveform.SINE,
) -> float | np.ndarray:
    """Instantaneous value of a waveform.

    Args:
        t: Time (s), scalar or array.
        peak_amplitude: Peak of the AC component (convert from RMS first).
        frequency_hz: Frequency (Hz).
        phase_deg: Phase shift (degrees).
        dc_offset: Added after the AC component.
        waveform: Shape of the AC component.

    Returns:
        Value(s) with the same shape as `t`.
    """
    shape = as_waveform(waveform)
    t_arr = np.asarray(t, dtype=float)
    with np.errstate(invalid="ignore", over="ignore"):
        value = peak_amplitude * _ac_component(t_arr, frequency_hz, phase_deg, shape) + dc_offset
    if np.ndim(t) == 0:
        return float(value)
    return value


def sample_params(t: float | np.ndarray, params: SignalParams) -> float | np.ndarray:
    """Sample a `SignalParams` (RMS amplitude) at time `t`."""
    return sample(t, params.peak, params.frequency, params.phase, params.dc_offset, params.waveform)


def time_axis(time_window_ms: float = TIME_WINDOW_MS, sample_count: int = SAMPLE_COUNT) -> np.ndarray:
    """Display time axis in milliseconds: sample_count + 1 points over [0, window]."""
    return np.linspace(0.0, time_window_ms, sample_count + 1)


def generate_signal_wave(
    params: SignalParams,
    time_offset_s: float = 0.0,
    time_window_ms: float = TIME_WINDOW_MS,
    sample_count: int = SAMPLE_COUNT,
) -> tuple[np.ndarray, np.ndarray]:
    """Generate one oscilloscope trace.

    Args:
        params: Signal description (RMS amplitude).
        time_offset_s: Simulated time added to every point (travelling wave).
        time_window_ms: Width of the displayed window (ms).
        sample_count: Number of intervals across the window.

    Returns:
        t_ms: Display time axis (ms).
        x: Instantaneous values.
    """
    t_ms = time_axis(time_window_ms, sample_count)
    effective_t = t_ms / 1000.0 + time_offset_s
    return t_ms, sample_params(effective_t, params)
