"""Streamlit dashboard for the AC/DC Signal Lab."""

from __future__ import annotations

import logging
import math
import os
import sys
import time
from typing import Callable

# Add parent directory to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import matplotlib.pyplot as plt
import streamlit as st

from config import ANALYSIS_WORKERS, FRAME_INTERVAL_S, MAX_SPEED
from analysis.analysis_job import AnalysisJob, make_executor
from dashboard.plots import plot_oscilloscope, plot_phasor_diagram, plot_power_triangle
from data.capture_export import frame_to_dataframe
from signal_processing.phasor import impedance
from signal_processing.power_analysis import format_power_state
from signal_processing.pq_parameters import ac_rms, crest_factor
from signal_processing.scenarios import get_preset, get_preset_names
from signal_processing.waveform_generator import WAVEFORMS
from simulation.controls import (
    AMPLITUDE_A,
    AMPLITUDE_V,
    DC_OFFSET_A,
    DC_OFFSET_V,
    FREQUENCY,
    PHASE,
    ControlSpec,
    commit_value,
    format_control_value,
)
from simulation.orchestrator import SimulationOrchestrator


# ---------------------------------------------------------------------------
# Session objects
# ---------------------------------------------------------------------------
def _orchestrator() -> SimulationOrchestrator:
    if "orchestrator" not in st.session_state:
        st.session_state.orchestrator = SimulationOrchestrator()
    return st.session_state.orchestrator


@st.cache_resource
def _analysis_executor():
    return make_executor(max_workers=ANALYSIS_WORKERS)


def _analysis_job() -> AnalysisJob:
    if "analysis_job" not in st.session_state:
        st.session_state.analysis_job = AnalysisJob(executor=_analysis_executor())
    return st.session_state.analysis_job


def _knobs(orch: SimulationOrchestrator) -> dict[str, tuple[ControlSpec, float, Callable[[float], None]]]:
    """Widget key -> (control, committed value, setter)."""
    v, i = orch.state.voltage, orch.state.current
    return {
        "v_amplitude": (AMPLITUDE_V, v.amplitude, lambda x: orch.update_voltage(amplitude=x)),
        "v_phase": (PHASE, v.phase, lambda x: orch.update_voltage(phase=x)),
        "v_dc": (DC_OFFSET_V, v.dc_offset, lambda x: orch.update_voltage(dc_offset=x)),
        "i_amplitude": (AMPLITUDE_A, i.amplitude, lambda x: orch.update_current(amplitude=x)),
        "i_phase": (PHASE, i.phase, lambda x: orch.update_current(phase=x)),
        "i_dc": (DC_OFFSET_A, i.dc_offset, lambda x: orch.update_current(dc_offset=x)),
        "frequency": (FREQUENCY, v.frequency, orch.update_frequency),
    }


# ---------------------------------------------------------------------------
# Widget callbacks
# ---------------------------------------------------------------------------
def _sync_widgets() -> None:
    """Copy the orchestrator's committed values into every widget."""
    orch = _orchestrator()
    for key, (_, value, _) in _knobs(orch).items():
        st.session_state[f"{key}_text"] = format_control_value(value)
        st.session_state[f"{key}_slider"] = float(value)
    st.session_state["v_waveform"] = orch.state.voltage.waveform.value
    st.session_state["i_waveform"] = orch.state.current.waveform.value
    st.session_state["speed"] = int(orch.speed)
    st.session_state["time_window"] = float(orch.state.time_window_ms)


def _on_knob_text(key: str) -> None:
    control, last, setter = _knobs(_orchestrator())[key]
    setter(commit_value(st.session_state[f"{key}_text"], last, control))
    _sync_widgets()


def _on_knob_slider(key: str) -> None:
    control, _, setter = _knobs(_orchestrator())[key]
    setter(control.clamp(st.session_state[f"{key}_slider"]))
    _sync_widgets()


def _on_waveform(which: str) -> None:
    orch = _orchestrator()
    waveform = st.session_state[f"{which}_waveform"]
    if which == "v":
        orch.update_voltage(waveform=waveform)
    else:
        orch.update_current(waveform=waveform)


def _on_speed() -> None:
    _orchestrator().set_speed(st.session_state["speed"])


def _on_time_window() -> None:
    _orchestrator().set_time_window(st.session_state["time_window"])


def _on_reset() -> None:
    _orchestrator().reset()
    _sync_widgets()


def _on_preset() -> None:
    name = st.session_state["preset"]
    if name in get_preset_names():
        _orchestrator().load_preset(name)
        _sync_widgets()


def _knob(label: str, key: str, control: ControlSpec) -> None:
    st.text_input(f"{label} ({control.unit})", key=f"{key}_text", on_change=_on_knob_text, args=(key,))
    st.slider(
        label,
        min_value=float(control.minimum),
        max_value=float(control.maximum),
        step=float(control.step),
        key=f"{key}_slider",
        on_change=_on_knob_slider,
        args=(key,),
        label_visibility="collapsed",
    )


# ---------------------------------------------------------------------------
# Panels
# ---------------------------------------------------------------------------
@st.fragment(run_every=FRAME_INTERVAL_S)
def _oscilloscope_panel() -> None:
    orch = _orchestrator()
    orch.tick(time.perf_counter())
    frame = orch.sample_frame()

    status = "● LIVE CAPTURE" if orch.state.is_playing else "○ PAUSED"
    st.caption(f"{status} | WINDOW: {orch.state.time_window_ms:.0f} ms | t = {orch.time_offset:.4f} s")

    fig = plot_oscilloscope(frame, orch.state.voltage, orch.state.current)
    st.pyplot(fig, width="stretch")
    plt.close(fig)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Measured Vrms (AC)", f"{ac_rms(frame.voltage):.2f} V")
    c2.metric("Measured Irms (AC)", f"{ac_rms(frame.current):.2f} A")
    c3.metric("Crest Factor (V)", f"{crest_factor(frame.voltage):.3f}")
    c4.metric("Crest Factor (I)", f"{crest_factor(frame.current):.3f}")


@st.fragment(run_every=1.0)
def _analysis_panel() -> None:
    orch = _orchestrator()
    job = _analysis_job()

    if st.button("Analyze circuit", disabled=job.pending):
        job.submit(orch.state)

    result = job.poll(orch.state)
    if job.pending:
        st.info("Analysis in progress...")
    elif result is None:
        st.caption("Press the button to request an analysis of the current parameters.")
    else:
        a1, a2 = st.columns(2)
        a1.markdown(f"**Impedance:** {result.impedance_description}")
        a2.markdown(f"**Power Factor:** {result.power_factor_description}")
        a3, a4 = st.columns(2)
        a3.markdown(f"**Real Power:** {result.real_power_description}")
        a4.markdown(f"**Reactive Power:** {result.reactive_power_description}")
        st.info(result.explanation_text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main() -> None:
    logging.basicConfig(level=logging.INFO)
    st.set_page_config(page_title="AC/DC Signal Lab", layout="wide")

    orch = _orchestrator()
    if "v_amplitude_text" not in st.session_state:
        _sync_widgets()

    st.title("⚡ AC/DC Signal Lab")
    st.caption("Waveforms, phasors and the power triangle of a single-phase load")

    # ---- Sidebar ----
    st.sidebar.header("Simulation")
    s1, s2 = st.sidebar.columns(2)
    s1.button("Pause" if orch.state.is_playing else "Resume", on_click=orch.toggle_playing)
    s2.button("Reset", on_click=_on_reset)
    st.sidebar.slider("Speed", 0, MAX_SPEED, key="speed", on_change=_on_speed)
    st.sidebar.slider("Time window (ms)", 5.0, 200.0, step=5.0, key="time_window", on_change=_on_time_window)
    st.sidebar.selectbox(
        "Load preset",
        ["(custom)"] + get_preset_names(),
        key="preset",
        on_change=_on_preset,
    )
    if st.session_state["preset"] in get_preset_names():
        st.sidebar.caption(get_preset(st.session_state["preset"]).description)

    st.sidebar.header("Voltage Source")
    st.sidebar.selectbox("Waveform", WAVEFORMS, key="v_waveform", on_change=_on_waveform, args=("v",))
    with st.sidebar:
        _knob("RMS value", "v_amplitude", AMPLITUDE_V)
        _knob("Phase", "v_phase", PHASE)
        _knob("DC offset", "v_dc", DC_OFFSET_V)

    st.sidebar.header("Load Current")
    st.sidebar.selectbox("Waveform", WAVEFORMS, key="i_waveform", on_change=_on_waveform, args=("i",))
    with st.sidebar:
        _knob("RMS value", "i_amplitude", AMPLITUDE_A)
        _knob("Phase", "i_phase", PHASE)
        _knob("DC offset", "i_dc", DC_OFFSET_A)

    st.sidebar.header("System")
    with st.sidebar:
        _knob("Frequency", "frequency", FREQUENCY)

    # ====================================================================
    # OSCILLOSCOPE
    # ====================================================================
    st.subheader("Oscilloscope")
    _oscilloscope_panel()

    st.download_button(
        "Download capture (CSV)",
        frame_to_dataframe(orch.sample_frame()).to_csv(index=False),
        file_name="capture.csv",
        mime="text/csv",
    )

    # ====================================================================
    # PHASORS & POWER
    # ====================================================================
    snapshot = orch.phasors()
    power = orch.power_state()
    shown = format_power_state(power)
    z_mag, z_angle = impedance(orch.state.voltage, orch.state.current)

    col_phasor, col_stats, col_triangle = st.columns(3, gap="large")

    with col_phasor:
        st.subheader("Phasor Diagram")
        fig_p = plot_phasor_diagram(snapshot)
        st.pyplot(fig_p, width="stretch")
        plt.close(fig_p)
        st.caption(
            f"V = {snapshot.voltage.real:.2f} + j{snapshot.voltage.imag:.2f} V | "
            f"I = {snapshot.current.real:.2f} + j{snapshot.current.imag:.2f} A"
        )

    with col_stats:
        st.subheader("Power")
        c1, c2 = st.columns(2)
        c1.metric("Active Power", f"{shown['P']} W")
        c2.metric("Reactive Power", f"{shown['Q']} VAR")
        c3, c4 = st.columns(2)
        c3.metric("Apparent Power", f"{shown['S']} VA", delta=f"∠ {shown['phase_difference']}°", delta_color="off")
        c4.metric("Power Factor", shown["PF"], delta=shown["relation"], delta_color="off")
        st.markdown(f"**Load type:** {shown['load_type']} ({shown['relation']})")
        z_text = "∞" if math.isinf(z_mag) else f"{z_mag:.2f}"
        st.markdown(f"**Impedance:** {z_text} Ω ∠ {z_angle:.1f}°")

    with col_triangle:
        st.subheader("Power Triangle")
        fig_t = plot_power_triangle(power)
        st.pyplot(fig_t, width="stretch")
        plt.close(fig_t)

    # ====================================================================
    # AI ANALYSIS
    # ====================================================================
    st.markdown("---")
    st.header("🧠 Circuit Analysis")
    _analysis_panel()

    st.markdown("---")
    st.caption(
        "⚠️ **Note:** Power values assume sinusoidal steady state at the fundamental frequency, "
        "even when a non-sinusoidal waveform is selected."
    )


if __name__ == "__main__":
    main()
