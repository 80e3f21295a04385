"""Abstract base class for oscilloscope frame sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


class SamplePoint(NamedTuple):
    time_ms: float
    voltage: float
    current: float


@dataclass(frozen=True)
class SampleFrame:
    """One oscilloscope frame: aligned time/voltage/current arrays."""

    time_ms: np.ndarray
    voltage: np.ndarray
    current: np.ndarray

    def __len__(self) -> int:
        return int(self.time_ms.size)

    def points(self) -> list[SamplePoint]:
        return [
            SamplePoint(float(t), float(v), float(i))
            for t, v, i in zip(self.time_ms, self.voltage, self.current)
        ]


class FrameSource(ABC):
    """Interface for producing voltage and current frames for display."""

    @abstractmethod
    def sample_frame(self) -> SampleFrame:
        """Produce the frame for the current simulated time.

        Returns:
            SampleFrame covering the configured time window.
        """
        pass

    @property
    @abstractmethod
    def time_offset(self) -> float:
        """Return the simulated time offset in seconds."""
        pass
