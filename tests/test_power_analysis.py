"""Test power triangle computation and load classification."""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import math

import numpy as np
import pytest

from main import report_operating_point
from signal_processing.power_analysis import (
    classify_load,
    compute_power_triangle,
    derive_power_state,
    format_power_state,
    triangle_vertices,
)
from signal_processing.waveform_generator import SignalParams, DEFAULT_VOLTAGE, DEFAULT_CURRENT
from simulation.orchestrator import SimulationOrchestrator


def test_default_operating_point():
    voltage = SignalParams(amplitude=120.0, frequency=60.0, phase=0.0)
    current = SignalParams(amplitude=5.0, frequency=60.0, phase=-30.0)
    ps = derive_power_state(voltage, current)
    print(f"S={ps.apparent_power:.2f} P={ps.active_power:.2f} Q={ps.reactive_power:.2f} PF={ps.power_factor:.3f}")

    assert ps.phase_difference_deg == 30.0
    assert abs(ps.apparent_power - 600.0) < 1e-9
    assert abs(ps.active_power - 519.615) < 1e-2
    assert abs(ps.reactive_power - 300.0) < 1e-9
    assert abs(ps.power_factor - 0.866) < 1e-3
    assert ps.load_type == "Inductive"
    assert ps.relation == "lagging"


def test_in_phase_is_resistive():
    for vrms, irms in [(230.0, 10.0), (1.0, 0.5), (0.0, 3.0)]:
        ps = compute_power_triangle(vrms, irms, 0.0)
        assert ps.reactive_power == 0.0
        assert ps.active_power == ps.apparent_power
        assert (ps.load_type, ps.relation) == ("Resistive", "in phase")


def test_half_turn_reverses_active_power():
    ps = compute_power_triangle(120.0, 5.0, 180.0)
    assert abs(ps.active_power - (-600.0)) < 1e-9
    assert abs(ps.reactive_power) < 1e-9
    # -180 normalizes onto the same boundary
    ps2 = compute_power_triangle(120.0, 5.0, -180.0)
    assert ps2.phase_difference_deg == 180.0
    assert abs(ps2.active_power - ps.active_power) < 1e-9


@pytest.mark.parametrize(
    "phi, expected",
    [
        (0.05, ("Resistive", "in phase")),
        (-0.05, ("Resistive", "in phase")),
        (0.0999, ("Resistive", "in phase")),
        (-0.0999, ("Resistive", "in phase")),
        (0.1, ("Inductive", "lagging")),
        (0.1001, ("Inductive", "lagging")),
        (-0.1, ("Capacitive", "leading")),
        (-0.1001, ("Capacitive", "leading")),
        (5.0, ("Inductive", "lagging")),
        (-5.0, ("Capacitive", "leading")),
        (355.0, ("Capacitive", "leading")),
    ],
)
def test_classification(phi, expected):
    assert classify_load(phi) == expected
    ps = compute_power_triangle(100.0, 1.0, phi)
    assert (ps.load_type, ps.relation) == expected


def test_triangle_is_right_angled():
    rng = np.random.default_rng(7)
    for _ in range(200):
        vrms = float(rng.uniform(0.0, 500.0))
        irms = float(rng.uniform(0.0, 100.0))
        phi = float(rng.uniform(-1000.0, 1000.0))
        ps = compute_power_triangle(vrms, irms, phi)
        assert ps.apparent_power >= 0.0
        assert math.isclose(ps.apparent_power ** 2, ps.active_power ** 2 + ps.reactive_power ** 2,
                            rel_tol=1e-9, abs_tol=1e-9)
        assert -180.0 < ps.phase_difference_deg <= 180.0


def test_format_power_state():
    shown = format_power_state(derive_power_state(DEFAULT_VOLTAGE, DEFAULT_CURRENT))
    assert shown["S"] == "600.00"
    assert shown["P"] == "519.62"
    assert shown["Q"] == "300.00"
    assert shown["PF"] == "0.866"
    assert shown["phase_difference"] == "30.0"

    # Magnitude only; the sign shows up in the classification
    leading = format_power_state(compute_power_triangle(100.0, 1.0, -120.0))
    assert leading["PF"] == "0.500"
    assert leading["relation"] == "leading"


def test_triangle_vertices():
    ps = derive_power_state(DEFAULT_VOLTAGE, DEFAULT_CURRENT)
    origin, p_tip, s_tip = triangle_vertices(ps, max_radius=120.0)
    assert origin == (0.0, 0.0)
    assert p_tip[1] == 0.0
    assert s_tip[0] == p_tip[0]
    assert abs(math.hypot(*s_tip) - 120.0) < 1e-9
    assert s_tip[1] > 0

    empty = compute_power_triangle(0.0, 5.0, 30.0)
    assert triangle_vertices(empty, max_radius=120.0) == ((0.0, 0.0), (0.0, 0.0), (0.0, 0.0))


def test_report_operating_point(capsys):
    shown = report_operating_point(SimulationOrchestrator())
    out = capsys.readouterr().out
    assert "[MAIN]" in out
    assert "Inductive" in out
    assert shown["S"] == "600.00"


def test_infinite_phase_gives_nan_not_error():
    for phi in (math.inf, -math.inf):
        ps = compute_power_triangle(120.0, 5.0, phi)
        assert ps.apparent_power == 600.0
        assert math.isnan(ps.active_power)
        assert math.isnan(ps.reactive_power)
        assert math.isnan(ps.power_factor)
        assert format_power_state(ps)["P"] == "nan"
