"""Load presets.

Typical single-phase operating points, so the phasor diagram and power
triangle can be explored without dialing every parameter by hand.
"""

from __future__ import annotations

from dataclasses import dataclass

from config import DEFAULT_FREQUENCY
from signal_processing.waveform_generator import SignalParams, Waveform


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    voltage: SignalParams
    current: SignalParams


def _mains(phase: float = 0.0, dc_offset: float = 0.0, waveform: Waveform = Waveform.SINE) -> SignalParams:
    return SignalParams(amplitude=120.0, frequency=DEFAULT_FREQUENCY, phase=phase, dc_offset=dc_offset, waveform=waveform)


PRESETS = {
    "Resistive Heater": Preset(
        "Resistive Heater",
        "Pure resistance. Current in phase with voltage, unity PF.",
        _mains(),
        SignalParams(amplitude=12.5, frequency=DEFAULT_FREQUENCY, phase=0.0),
    ),
    "Induction Motor": Preset(
        "Induction Motor",
        "Magnetizing current makes the load inductive. PF 0.8 lagging.",
        _mains(),
        # acos(0.8) = 36.87 degrees
        SignalParams(amplitude=8.0, frequency=DEFAULT_FREQUENCY, phase=-36.87),
    ),
    "Capacitor Bank": Preset(
        "Capacitor Bank",
        "Ideal capacitor. Current leads voltage by 90 degrees, no active power.",
        _mains(),
        SignalParams(amplitude=4.0, frequency=DEFAULT_FREQUENCY, phase=90.0),
    ),
    "Over-excited Synchronous Motor": Preset(
        "Over-excited Synchronous Motor",
        "Field over-excitation supplies reactive power. Slightly leading PF.",
        _mains(),
        SignalParams(amplitude=6.0, frequency=DEFAULT_FREQUENCY, phase=25.0),
    ),
    "DC-biased Supply": Preset(
        "DC-biased Supply",
        "Rectifier fault adds a DC component on top of the AC signals.",
        _mains(dc_offset=20.0),
        SignalParams(amplitude=5.0, frequency=DEFAULT_FREQUENCY, phase=-15.0, dc_offset=1.5),
    ),
    "Square-wave Inverter": Preset(
        "Square-wave Inverter",
        "Low-cost inverter output. Power still evaluated at the fundamental.",
        _mains(waveform=Waveform.SQUARE),
        SignalParams(amplitude=5.0, frequency=DEFAULT_FREQUENCY, phase=-20.0, waveform=Waveform.TRIANGLE),
    ),
}


def get_preset_names() -> list[str]:
    return list(PRESETS.keys())


def get_preset(name: str) -> Preset:
    """Look up a preset by name."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}")
    return PRESETS[name]
