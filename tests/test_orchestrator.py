"""Test the simulation orchestrator."""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np
import pytest

from signal_processing.waveform_generator import Waveform, sample
from simulation.orchestrator import INITIAL_STATE, SimulationOrchestrator, speed_factor


def test_frame_shape():
    orch = SimulationOrchestrator()
    frame = orch.sample_frame()
    print(f"Frame of {len(frame)} points, {frame.time_ms[0]} to {frame.time_ms[-1]} ms")

    assert len(frame) == 201
    assert len(frame.voltage) == 201
    assert len(frame.current) == 201
    assert frame.time_ms[0] == 0.0
    assert frame.time_ms[-1] == 40.0

    points = frame.points()
    assert len(points) == 201
    assert points[0].time_ms == 0.0
    assert points[0].voltage == 0.0


def test_speed_mapping():
    assert speed_factor(0) == 0.0
    assert speed_factor(20) == 0.05
    assert speed_factor(100) == 0.25
    assert speed_factor(1000) == 0.25
    assert speed_factor(-3) == 0.0


def test_advance_with_synthetic_deltas():
    orch = SimulationOrchestrator()
    assert orch.advance(1.0) == pytest.approx(0.05)
    assert orch.advance(2.0, 0.5) == pytest.approx(1.05)
    # Time never moves backwards
    assert orch.advance(-10.0) == pytest.approx(1.05)

    orch.set_playing(False)
    assert orch.advance(5.0) == pytest.approx(1.05)

    orch.set_playing(True)
    orch.set_speed(0)
    assert not orch.is_running
    assert orch.advance(5.0) == pytest.approx(1.05)


def test_tick_rebases_while_stopped():
    orch = SimulationOrchestrator()
    assert orch.tick(100.0) == 0.0
    assert orch.tick(101.0) == pytest.approx(0.05)

    orch.toggle_playing()
    assert orch.tick(150.0) == pytest.approx(0.05)
    orch.toggle_playing()
    # Resuming only counts time since the last tick, no jump
    assert orch.tick(151.0) == pytest.approx(0.10)


def test_travelling_wave():
    orch = SimulationOrchestrator()
    orch.advance(0.002, 1.0)
    frame = orch.sample_frame()
    v = orch.state.voltage
    expected = sample(frame.time_ms / 1000.0 + 0.002, v.peak, v.frequency, v.phase, v.dc_offset, v.waveform)
    np.testing.assert_allclose(frame.voltage, expected)


def test_parameter_updates():
    orch = SimulationOrchestrator()
    orch.update_voltage(amplitude=230.0, waveform="square")
    assert orch.state.voltage.amplitude == 230.0
    assert orch.state.voltage.waveform is Waveform.SQUARE
    assert orch.state.voltage.phase == 0.0
    assert orch.state.current == INITIAL_STATE.current

    orch.update_frequency(50.0)
    assert orch.state.voltage.frequency == 50.0
    assert orch.state.current.frequency == 50.0

    # Frequency is system-wide even when set through one signal
    orch.update_current(frequency=25.0, phase=10.0)
    assert orch.state.voltage.frequency == 25.0
    assert orch.state.current.frequency == 25.0
    assert orch.state.current.phase == 10.0

    with pytest.raises(ValueError):
        orch.update_voltage(gain=2.0)
    with pytest.raises(ValueError):
        orch.update_current(waveform="noise")


def test_derived_outputs_follow_parameters():
    orch = SimulationOrchestrator()
    assert orch.power_state().load_type == "Inductive"
    orch.update_current(phase=20.0)
    ps = orch.power_state()
    assert ps.load_type == "Capacitive"
    assert ps.relation == "leading"
    assert orch.phasors().phase_difference_deg == -20.0


def test_time_window():
    orch = SimulationOrchestrator(sample_count=50)
    orch.set_time_window(100.0)
    frame = orch.sample_frame()
    assert len(frame) == 51
    assert frame.time_ms[-1] == 100.0
    with pytest.raises(ValueError):
        orch.set_time_window(0.0)


def test_presets_and_reset():
    orch = SimulationOrchestrator()
    orch.load_preset("Capacitor Bank")
    assert orch.power_state().load_type == "Capacitive"
    with pytest.raises(ValueError):
        orch.load_preset("Flux Capacitor")

    orch.set_speed(80)
    orch.advance(3.0)
    orch.set_playing(False)
    orch.reset()
    assert orch.state == INITIAL_STATE
    assert orch.time_offset == 0.0
    assert orch.speed == 20
    assert orch.state.is_playing


if __name__ == "__main__":
    try:
        test_frame_shape()
        test_speed_mapping()
        test_tick_rebases_while_stopped()
        test_parameter_updates()
        print("ORCHESTRATOR TESTS PASSED")
    except Exception as e:
        print(f"TEST FAILED: {e}")
        sys.exit(1)
