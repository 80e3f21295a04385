"""Input boundary for numeric controls.

Text typed into a control is parsed and clamped here; a value that does not
parse reverts to the last committed one. Nothing outside the configured range
reaches the orchestrator through the dashboard.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from config import AMPLITUDE_RANGE, DC_OFFSET_RANGE, FREQUENCY_RANGE, PHASE_RANGE


@dataclass(frozen=True)
class ControlSpec:
    label: str
    unit: str
    minimum: float
    maximum: float
    step: float = 1.0

    def clamp(self, value: float) -> float:
        return float(min(self.maximum, max(self.minimum, value)))


AMPLITUDE_V = ControlSpec("RMS value", "V", *AMPLITUDE_RANGE)
AMPLITUDE_A = ControlSpec("RMS value", "A", *AMPLITUDE_RANGE)
PHASE = ControlSpec("Phase", "°", *PHASE_RANGE)
FREQUENCY = ControlSpec("Frequency", "Hz", *FREQUENCY_RANGE)
DC_OFFSET_V = ControlSpec("DC offset", "V", *DC_OFFSET_RANGE)
DC_OFFSET_A = ControlSpec("DC offset", "A", *DC_OFFSET_RANGE)


def parse_number(text: str) -> float | None:
    """Parse user text as a finite float; None if it is not a number."""
    try:
        value = float(str(text).strip().replace(",", "."))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def commit_value(text: str, last_value: float, control: ControlSpec) -> float:
    """Value to commit for the given text: parsed and clamped, or the last value."""
    value = parse_number(text)
    if value is None:
        value = last_value
    return control.clamp(value)


def format_control_value(value: float) -> str:
    return f"{value:.2f}"
