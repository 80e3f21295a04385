"""Phasor geometry at the fundamental frequency.

All phase differences in the project go through `normalize_angle_deg` and an
explicit `PhaseConvention`:

- VOLTAGE_REFERENCED (V - I) is the displayed angle and the sign used for
  power: positive means the current lags the voltage.
- CURRENT_REFERENCED (I - V) only decides which way the angle arc is drawn
  on the phasor diagram.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from signal_processing.waveform_generator import SignalParams

ARC_THRESHOLD_DEG = 0.1


class PhaseConvention(Enum):
    VOLTAGE_REFERENCED = "voltage_referenced"
    CURRENT_REFERENCED = "current_referenced"


def normalize_angle_deg(angle_deg: float) -> float:
    """Wrap an angle into (-180, 180].

    Infinite or NaN input has no direction on the circle and maps to NaN.
    """
    angle = float(angle_deg)
    if not math.isfinite(angle):
        return math.nan
    if abs(angle) > 720.0:
        angle = math.fmod(angle, 360.0)
    while angle <= -180.0:
        angle += 360.0
    while angle > 180.0:
        angle -= 360.0
    return angle


def phase_difference(
    voltage_phase_deg: float,
    current_phase_deg: float,
    convention: PhaseConvention = PhaseConvention.VOLTAGE_REFERENCED,
) -> float:
    """Normalized phase difference between voltage and current (degrees)."""
    if convention is PhaseConvention.VOLTAGE_REFERENCED:
        return normalize_angle_deg(voltage_phase_deg - current_phase_deg)
    if convention is PhaseConvention.CURRENT_REFERENCED:
        return normalize_angle_deg(current_phase_deg - voltage_phase_deg)
    raise ValueError(f"Unknown phase convention: {convention}")


def phasor_components(amplitude: float, phase_deg: float) -> tuple[float, float]:
    """Rectangular (real, imaginary) components of a phasor."""
    phase_rad = math.radians(phase_deg)
    return amplitude * math.cos(phase_rad), amplitude * math.sin(phase_rad)


@dataclass(frozen=True)
class Phasor:
    magnitude: float
    angle_deg: float

    @property
    def real(self) -> float:
        return phasor_components(self.magnitude, self.angle_deg)[0]

    @property
    def imag(self) -> float:
        return phasor_components(self.magnitude, self.angle_deg)[1]

    @classmethod
    def from_params(cls, params: SignalParams) -> "Phasor":
        return cls(magnitude=params.amplitude, angle_deg=params.phase)


@dataclass(frozen=True)
class PhasorSnapshot:
    voltage: Phasor
    current: Phasor
    phase_difference_deg: float  # V - I, displayed
    arc_delta_deg: float         # I - V, drawing only

    @property
    def show_arc(self) -> bool:
        return abs(self.arc_delta_deg) > ARC_THRESHOLD_DEG

    @property
    def arc_counterclockwise(self) -> bool:
        """True when the arc from the voltage to the current phasor turns counterclockwise."""
        return self.arc_delta_deg > 0

    @property
    def large_arc(self) -> bool:
        """Whether the arc sweeps more than half a turn.

        The arc delta is normalized to (-180, 180], so this stays False.
        """
        return abs(self.arc_delta_deg) > 180.0

    @property
    def arc_start_deg(self) -> float:
        return self.voltage.angle_deg

    @property
    def arc_end_deg(self) -> float:
        return self.voltage.angle_deg + self.arc_delta_deg

    @property
    def label_angle_deg(self) -> float:
        return self.voltage.angle_deg + self.arc_delta_deg / 2.0


def phasor_snapshot(voltage: SignalParams, current: SignalParams) -> PhasorSnapshot:
    """Build the phasor diagram data for a voltage/current pair."""
    return PhasorSnapshot(
        voltage=Phasor.from_params(voltage),
        current=Phasor.from_params(current),
        phase_difference_deg=phase_difference(voltage.phase, current.phase, PhaseConvention.VOLTAGE_REFERENCED),
        arc_delta_deg=phase_difference(voltage.phase, current.phase, PhaseConvention.CURRENT_REFERENCED),
    )


def impedance(voltage: SignalParams, current: SignalParams) -> tuple[float, float]:
    """Load impedance as (|Z| in ohm, angle in degrees).

    |Z| = Vrms / Irms (infinite for zero current); the angle is the
    voltage-referenced phase difference.
    """
    angle = phase_difference(voltage.phase, current.phase, PhaseConvention.VOLTAGE_REFERENCED)
    if current.amplitude <= 1e-12:
        return math.inf, angle
    return voltage.amplitude / current.amplitude, angle
