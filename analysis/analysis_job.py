"""Background runner for circuit analysis requests.

Requests run on a worker thread so the dashboard keeps animating; the
dashboard hands every session one process-wide executor. A result is only
handed back while the parameters it was computed for are still the current
ones.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable

from signal_processing.waveform_generator import SignalParams
from simulation.orchestrator import SimulationState
from .circuit_analyst import FALLBACK_ANALYSIS, AnalysisResult, analyze_circuit

logger = logging.getLogger(__name__)

ParamsKey = tuple[SignalParams, SignalParams]


def make_executor(max_workers: int = 1) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="circuit-analysis")


def params_key(state: SimulationState) -> ParamsKey:
    """The part of the state the analysis depends on."""
    return state.voltage, state.current


class AnalysisJob:
    """Submit analysis requests and collect results that are still current."""

    def __init__(
        self,
        analyze: Callable[[SimulationState], AnalysisResult] = analyze_circuit,
        executor: Executor | None = None,
    ) -> None:
        self._analyze = analyze
        # A caller-supplied executor is shared and outlives this job
        self._owns_executor = executor is None
        self._executor = executor or make_executor()
        self._future: Future | None = None
        self._key: ParamsKey | None = None
        self.result: AnalysisResult | None = None
        self.result_key: ParamsKey | None = None

    @property
    def pending(self) -> bool:
        return self._future is not None and not self._future.done()

    def submit(self, state: SimulationState) -> None:
        """Start an analysis for `state`, superseding any earlier request."""
        key = params_key(state)
        if self.pending and key == self._key:
            return
        self._key = key
        self._future = self._executor.submit(self._analyze, state)

    def poll(self, state: SimulationState) -> AnalysisResult | None:
        """Latest result matching `state`, or None if nothing current is available."""
        key = params_key(state)
        if self._future is not None and self._future.done():
            future, future_key = self._future, self._key
            self._future = None
            self._key = None
            if future_key == key:
                try:
                    self.result = future.result()
                except Exception as e:
                    logger.warning("Analysis job failed: %s", e)
                    self.result = FALLBACK_ANALYSIS
                self.result_key = future_key
            else:
                logger.info("Discarding stale analysis result")
        if self.result is not None and self.result_key == key:
            return self.result
        return None

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)
