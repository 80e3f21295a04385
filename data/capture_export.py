"""Oscilloscope capture export.

Turns a sampled frame into a table (time, voltage, current) and saves it as CSV.
"""

from __future__ import annotations

import os

import pandas as pd

from simulation.base import SampleFrame

CAPTURE_COLUMNS = ["time_ms", "voltage_v", "current_a"]


def frame_to_dataframe(frame: SampleFrame) -> pd.DataFrame:
    """Tabulate a frame, one row per sample point."""
    return pd.DataFrame(
        {
            "time_ms": frame.time_ms,
            "voltage_v": frame.voltage,
            "current_a": frame.current,
        },
        columns=CAPTURE_COLUMNS,
    )


def save_capture_csv(frame: SampleFrame, out_csv_path: str) -> pd.DataFrame:
    """Save a frame to CSV.

    Args:
        frame: Frame to export.
        out_csv_path: Output CSV path.

    Returns:
        The exported DataFrame.
    """
    df = frame_to_dataframe(frame)
    out_dir = os.path.dirname(out_csv_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    df.to_csv(out_csv_path, index=False)
    return df
