"""Matplotlib figures for the dashboard: oscilloscope, phasor diagram, power triangle."""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Arc

from signal_processing.phasor import PhasorSnapshot
from signal_processing.power_analysis import DerivedPowerState, triangle_vertices
from signal_processing.waveform_generator import SignalParams
from simulation.base import SampleFrame

VOLTAGE_COLOR = "#EAB308"
CURRENT_COLOR = "#22D3EE"
P_COLOR = "#4ADE80"
Q_COLOR = "#C084FC"
S_COLOR = "#60A5FA"
ANGLE_COLOR = "#FACC15"

VOLTAGE_AXIS_FLOOR = 10.0
CURRENT_AXIS_FLOOR = 1.0


def symmetric_limit(params: SignalParams, floor: float) -> float:
    """Half-height of a y axis centered on zero that never clips the trace."""
    return max(floor, (params.peak + abs(params.dc_offset)) * 1.1)


def plot_oscilloscope(frame: SampleFrame, voltage: SignalParams, current: SignalParams) -> plt.Figure:
    fig, ax_v = plt.subplots(figsize=(10, 3.6))
    ax_i = ax_v.twinx()

    ax_v.plot(frame.time_ms, frame.voltage, color=VOLTAGE_COLOR, lw=2, label="Voltage (V)")
    ax_i.plot(frame.time_ms, frame.current, color=CURRENT_COLOR, lw=2, label="Current (A)")
    ax_v.axhline(0.0, color="#6B7280", lw=1)

    v_lim = symmetric_limit(voltage, VOLTAGE_AXIS_FLOOR)
    i_lim = symmetric_limit(current, CURRENT_AXIS_FLOOR)
    ax_v.set_ylim(-v_lim, v_lim)
    ax_i.set_ylim(-i_lim, i_lim)
    ax_v.set_xlim(frame.time_ms[0], frame.time_ms[-1])

    ax_v.set_xlabel("Time (ms)")
    ax_v.set_ylabel("Voltage (V)", color=VOLTAGE_COLOR)
    ax_i.set_ylabel("Current (A)", color=CURRENT_COLOR)
    ax_v.grid(True, alpha=0.3)

    lines = ax_v.get_lines()[:1] + ax_i.get_lines()
    ax_v.legend(lines, [ln.get_label() for ln in lines], loc="upper right")
    fig.tight_layout()
    return fig


def _arrow(ax: plt.Axes, x: float, y: float, color: str, x0: float = 0.0, y0: float = 0.0, ls: str = "-") -> None:
    if np.hypot(x - x0, y - y0) < 1e-9:
        return
    ax.annotate(
        "",
        xy=(x, y),
        xytext=(x0, y0),
        arrowprops=dict(arrowstyle="-|>", color=color, lw=2.5, linestyle=ls, mutation_scale=16),
    )


def plot_phasor_diagram(snapshot: PhasorSnapshot) -> plt.Figure:
    """Voltage and current phasors drawn at fixed radii, with the angle arc between them."""
    v_radius, i_radius, arc_radius = 0.78, 0.56, 0.95
    fig, ax = plt.subplots(figsize=(4.2, 4.2))

    for r in (0.45, 0.9):
        ax.add_patch(plt.Circle((0, 0), r, fill=False, ls="--", color="#9CA3AF", alpha=0.4))
    ax.axhline(0, color="#9CA3AF", lw=1)
    ax.axvline(0, color="#9CA3AF", lw=1)

    for phasor, radius, color in (
        (snapshot.voltage, v_radius, VOLTAGE_COLOR),
        (snapshot.current, i_radius, CURRENT_COLOR),
    ):
        rad = np.deg2rad(phasor.angle_deg)
        _arrow(ax, radius * np.cos(rad), radius * np.sin(rad), color)

    if snapshot.show_arc:
        # Arc patches always run counterclockwise from theta1 to theta2
        if snapshot.arc_counterclockwise:
            lo, hi = snapshot.arc_start_deg, snapshot.arc_end_deg
        else:
            lo, hi = snapshot.arc_end_deg, snapshot.arc_start_deg
        ax.add_patch(Arc((0, 0), 2 * arc_radius, 2 * arc_radius, theta1=lo, theta2=hi,
                         color=ANGLE_COLOR, lw=2, ls="--"))
        label_rad = np.deg2rad(snapshot.label_angle_deg)
        ax.text(
            1.15 * np.cos(label_rad),
            1.15 * np.sin(label_rad),
            f"Δφ: {snapshot.phase_difference_deg:.1f}°",
            color=ANGLE_COLOR,
            ha="center",
            va="center",
            fontweight="bold",
        )

    ax.set_xlim(-1.35, 1.35)
    ax.set_ylim(-1.35, 1.35)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(
        f"V {snapshot.voltage.magnitude:.1f} V ∠ {snapshot.voltage.angle_deg:.1f}°   "
        f"I {snapshot.current.magnitude:.1f} A ∠ {snapshot.current.angle_deg:.1f}°",
        fontsize=9,
    )
    fig.tight_layout()
    return fig


def plot_power_triangle(state: DerivedPowerState) -> plt.Figure:
    """P along the real axis, Q vertical from the tip of P, S as the hypotenuse."""
    fig, ax = plt.subplots(figsize=(4.2, 4.2))
    origin, p_tip, s_tip = triangle_vertices(state, max_radius=1.0)

    ax.axhline(0, color="#9CA3AF", lw=1)
    ax.axvline(0, color="#9CA3AF", lw=1)
    _arrow(ax, *p_tip, P_COLOR, *origin)
    _arrow(ax, *s_tip, Q_COLOR, *p_tip, ls="--")
    _arrow(ax, *s_tip, S_COLOR, *origin)

    if state.apparent_power > 0:
        phi = state.phase_difference_deg
        ax.add_patch(Arc((0, 0), 0.4, 0.4, theta1=min(0.0, phi), theta2=max(0.0, phi), color=ANGLE_COLOR, lw=1.5))
        ax.text(0.3, 0.08 if phi >= 0 else -0.12, f"{phi:.1f}°", color=ANGLE_COLOR, fontsize=9)

    ax.text(1.2, -0.1, "Active (W)", ha="right", fontsize=8, color="#6B7280")
    ax.text(0.03, 1.15, "Reactive (j)", fontsize=8, color="#6B7280")
    ax.set_xlim(-1.25, 1.25)
    ax.set_ylim(-1.25, 1.25)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(
        f"P {state.active_power:.1f} W   Q {state.reactive_power:.1f} VAR   S {state.apparent_power:.1f} VA",
        fontsize=9,
    )
    fig.tight_layout()
    return fig
