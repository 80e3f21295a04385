"""Power triangle analysis.

This module implements:
1. Apparent, active and reactive power from RMS values and phase difference.
2. Power factor and load classification (Resistive / Inductive / Capacitive).
3. Presentation formatting and power-triangle drawing geometry.

Power is always evaluated under the fundamental sinusoidal steady-state
assumption, whatever the waveform shape.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from signal_processing.phasor import PhaseConvention, normalize_angle_deg, phase_difference
from signal_processing.waveform_generator import SignalParams

IN_PHASE_THRESHOLD_DEG = 0.1


@dataclass(frozen=True)
class DerivedPowerState:
    apparent_power: float       # S (VA)
    active_power: float         # P (W)
    reactive_power: float       # Q (VAR)
    power_factor: float         # cos(phi), signed
    phase_difference_deg: float # V - I, in (-180, 180]
    load_type: str              # "Resistive", "Inductive", "Capacitive"
    relation: str               # "in phase", "lagging", "leading"

    @property
    def power_factor_magnitude(self) -> float:
        return abs(self.power_factor)


def classify_load(phase_difference_deg: float) -> tuple[str, str]:
    """Return (load type, current relation) for a voltage-referenced phase difference."""
    phi = normalize_angle_deg(phase_difference_deg)
    if abs(phi) < IN_PHASE_THRESHOLD_DEG:
        return "Resistive", "in phase"
    if phi > 0:
        return "Inductive", "lagging"
    return "Capacitive", "leading"


def compute_power_triangle(vrms: float, irms: float, phase_difference_deg: float) -> DerivedPowerState:
    """Power triangle for a voltage-referenced phase difference (V - I, degrees)."""
    phi = normalize_angle_deg(phase_difference_deg)
    phi_rad = math.radians(phi)

    s = vrms * irms
    p = s * math.cos(phi_rad)
    q = s * math.sin(phi_rad)
    pf = math.cos(phi_rad)

    load_type, relation = classify_load(phi)
    return DerivedPowerState(
        apparent_power=s,
        active_power=p,
        reactive_power=q,
        power_factor=pf,
        phase_difference_deg=phi,
        load_type=load_type,
        relation=relation,
    )


def derive_power_state(voltage: SignalParams, current: SignalParams) -> DerivedPowerState:
    """Derived power state for the current voltage/current parameters."""
    phi = phase_difference(voltage.phase, current.phase, PhaseConvention.VOLTAGE_REFERENCED)
    return compute_power_triangle(voltage.amplitude, current.amplitude, phi)


def format_power_state(state: DerivedPowerState) -> dict[str, str]:
    """Rounded strings for display."""
    return {
        "S": f"{state.apparent_power:.2f}",
        "P": f"{state.active_power:.2f}",
        "Q": f"{state.reactive_power:.2f}",
        "PF": f"{state.power_factor_magnitude:.3f}",
        "phase_difference": f"{state.phase_difference_deg:.1f}",
        "load_type": state.load_type,
        "relation": state.relation,
    }


def triangle_vertices(
    state: DerivedPowerState,
    max_radius: float = 1.0,
) -> tuple[tuple[float, float], tuple[float, float], tuple[float, float]]:
    """Vertices of the power triangle scaled so |S| spans `max_radius`.

    Returns:
        origin, P tip (on the real axis), S tip (P tip shifted by Q).
    """
    s = state.apparent_power
    scale = max_radius / s if s > 0 else 1.0
    p_len = state.active_power * scale
    q_len = state.reactive_power * scale
    return (0.0, 0.0), (p_len, 0.0), (p_len, q_len)
