"""Main execution flow.

- Print the default operating point (phasors, power triangle, load type)
- Launch Streamlit dashboard

Run:
    python main.py
or:
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import os
import sys
import subprocess

from signal_processing.phasor import impedance
from signal_processing.power_analysis import format_power_state
from simulation.orchestrator import SimulationOrchestrator


def report_operating_point(orch: SimulationOrchestrator) -> dict[str, str]:
    """Print the derived quantities of the orchestrator's current parameters."""
    v, i = orch.state.voltage, orch.state.current
    shown = format_power_state(orch.power_state())
    z_mag, z_angle = impedance(v, i)

    print(f"[MAIN] Voltage: {v.amplitude:.2f} V rms ∠ {v.phase:.1f}° ({v.waveform.value}, {v.frequency:g} Hz)")
    print(f"[MAIN] Current: {i.amplitude:.2f} A rms ∠ {i.phase:.1f}° ({i.waveform.value}, {i.frequency:g} Hz)")
    print(f"[MAIN] S = {shown['S']} VA, P = {shown['P']} W, Q = {shown['Q']} VAR")
    print(f"[MAIN] PF = {shown['PF']} {shown['relation']} ({shown['load_type']}), Δφ = {shown['phase_difference']}°")
    print(f"[MAIN] |Z| = {z_mag:.2f} Ω ∠ {z_angle:.1f}°")
    return shown


def launch_dashboard() -> None:
    """Launch Streamlit dashboard."""
    cmd = [sys.executable, "-m", "streamlit", "run", os.path.join("dashboard", "app.py")]
    print("[MAIN] Launching dashboard...")
    subprocess.run(cmd, check=False)


def main() -> None:
    report_operating_point(SimulationOrchestrator())
    launch_dashboard()


if __name__ == "__main__":
    main()
