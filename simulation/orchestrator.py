"""Simulation orchestrator.

Holds the voltage/current parameters and the simulated time offset, and
produces oscilloscope frames, phasor snapshots and power states from them.
The time offset only moves inside `advance` / `tick`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from config import DEFAULT_SPEED, MAX_SPEED, SAMPLE_COUNT, SPEED_DIVISOR, TIME_WINDOW_MS
from signal_processing.phasor import PhasorSnapshot, phasor_snapshot
from signal_processing.power_analysis import DerivedPowerState, derive_power_state
from signal_processing.scenarios import get_preset
from signal_processing.waveform_generator import (
    DEFAULT_CURRENT,
    DEFAULT_VOLTAGE,
    SignalParams,
    generate_signal_wave,
)
from .base import FrameSource, SampleFrame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationState:
    voltage: SignalParams
    current: SignalParams
    time_window_ms: float = TIME_WINDOW_MS
    is_playing: bool = True


INITIAL_STATE = SimulationState(voltage=DEFAULT_VOLTAGE, current=DEFAULT_CURRENT)


def speed_factor(speed: float) -> float:
    """Map the 0..MAX_SPEED speed slider to a simulated/wall-clock time ratio."""
    speed = min(max(float(speed), 0.0), float(MAX_SPEED))
    return speed / SPEED_DIVISOR


class SimulationOrchestrator(FrameSource):
    """Owns the simulation state and the simulated time offset."""

    def __init__(
        self,
        state: SimulationState = INITIAL_STATE,
        speed: float = DEFAULT_SPEED,
        sample_count: int = SAMPLE_COUNT,
    ) -> None:
        self.state = state
        self.speed = float(speed)
        self.sample_count = sample_count
        self._time_offset = 0.0
        self._last_tick: float | None = None

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    @property
    def time_offset(self) -> float:
        return self._time_offset

    @property
    def is_running(self) -> bool:
        return self.state.is_playing and self.speed > 0

    def advance(self, delta_seconds: float, factor: float | None = None) -> float:
        """Advance simulated time by a wall-clock delta.

        Args:
            delta_seconds: Elapsed wall-clock time (s). Negative deltas count as zero.
            factor: Simulated seconds per wall-clock second. Defaults to the slider mapping.

        Returns:
            The new time offset (s).
        """
        if factor is None:
            factor = speed_factor(self.speed)
        if self.state.is_playing and factor > 0:
            self._time_offset += max(float(delta_seconds), 0.0) * factor
        return self._time_offset

    def tick(self, now_seconds: float) -> float:
        """Scheduler callback: advance from the previous tick, then rebase the reference."""
        if self._last_tick is not None:
            self.advance(now_seconds - self._last_tick)
        self._last_tick = now_seconds
        return self._time_offset

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def set_playing(self, playing: bool) -> None:
        self.state = replace(self.state, is_playing=bool(playing))

    def toggle_playing(self) -> bool:
        self.set_playing(not self.state.is_playing)
        return self.state.is_playing

    def set_speed(self, speed: float) -> None:
        self.speed = min(max(float(speed), 0.0), float(MAX_SPEED))

    def set_time_window(self, time_window_ms: float) -> None:
        if time_window_ms <= 0:
            raise ValueError("time_window_ms must be > 0.")
        self.state = replace(self.state, time_window_ms=float(time_window_ms))

    def _update(self, which: str, changes: dict) -> None:
        frequency = changes.pop("frequency", None)
        signal = getattr(self.state, which).merged(**changes)
        self.state = replace(self.state, **{which: signal})
        if frequency is not None:
            self.update_frequency(frequency)

    def update_voltage(self, **changes) -> SignalParams:
        """Field-level merge into the voltage parameters."""
        self._update("voltage", changes)
        return self.state.voltage

    def update_current(self, **changes) -> SignalParams:
        """Field-level merge into the current parameters."""
        self._update("current", changes)
        return self.state.current

    def update_frequency(self, frequency_hz: float) -> None:
        """Set the system frequency on both signals."""
        self.state = replace(
            self.state,
            voltage=self.state.voltage.merged(frequency=frequency_hz),
            current=self.state.current.merged(frequency=frequency_hz),
        )

    def load_preset(self, name: str) -> None:
        preset = get_preset(name)
        self.state = replace(self.state, voltage=preset.voltage, current=preset.current)
        logger.info("Loaded preset %r", name)

    def reset(self) -> None:
        """Back to defaults: parameters, time offset and speed, running."""
        self.state = INITIAL_STATE
        self.speed = float(DEFAULT_SPEED)
        self._time_offset = 0.0
        logger.info("Simulation reset")

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------
    def sample_frame(self) -> SampleFrame:
        t_ms, v = generate_signal_wave(
            self.state.voltage, self._time_offset, self.state.time_window_ms, self.sample_count
        )
        _, i = generate_signal_wave(
            self.state.current, self._time_offset, self.state.time_window_ms, self.sample_count
        )
        return SampleFrame(time_ms=t_ms, voltage=v, current=i)

    def phasors(self) -> PhasorSnapshot:
        return phasor_snapshot(self.state.voltage, self.state.current)

    def power_state(self) -> DerivedPowerState:
        return derive_power_state(self.state.voltage, self.state.current)
