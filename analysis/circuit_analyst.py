"""Natural-language circuit analysis through the Gemini API.

The request carries the same parameter set the dashboard shows; the reply is a
JSON object with five text fields. Any failure (no API key, network error,
malformed reply) returns `FALLBACK_ANALYSIS` instead of raising, so the
visualization never depends on this call.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass

from google import genai
from google.genai import types

from config import ANALYSIS_MODEL, ANALYSIS_MODEL_ENV_VAR, API_KEY_ENV_VARS
from signal_processing.waveform_generator import SignalParams
from simulation.orchestrator import SimulationState

logger = logging.getLogger(__name__)


class MissingCredentialError(RuntimeError):
    """No API key found in the environment."""


@dataclass(frozen=True)
class AnalysisResult:
    impedance_description: str
    power_factor_description: str
    real_power_description: str
    reactive_power_description: str
    explanation_text: str


FALLBACK_ANALYSIS = AnalysisResult(
    impedance_description="--",
    power_factor_description="--",
    real_power_description="--",
    reactive_power_description="--",
    explanation_text="Analysis unavailable. Make sure the API key is configured.",
)

# JSON field -> AnalysisResult attribute
RESPONSE_FIELDS = {
    "impedance": "impedance_description",
    "powerFactor": "power_factor_description",
    "realPower": "real_power_description",
    "reactivePower": "reactive_power_description",
    "explanation": "explanation_text",
}

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "impedance": types.Schema(type=types.Type.STRING, description="e.g. '24.00 Ω ∠ 30.0°'"),
        "powerFactor": types.Schema(type=types.Type.STRING, description="e.g. '0.866 lagging'"),
        "realPower": types.Schema(type=types.Type.STRING, description="e.g. '519.6 W (total)'"),
        "reactivePower": types.Schema(type=types.Type.STRING, description="e.g. '300 VAR'"),
        "explanation": types.Schema(
            type=types.Type.STRING,
            description="A concise paragraph on the circuit physics, the load type and the waveform effects.",
        ),
    },
    required=list(RESPONSE_FIELDS),
)


def get_api_key() -> str:
    for name in API_KEY_ENV_VARS:
        key = os.environ.get(name)
        if key:
            return key
    raise MissingCredentialError(f"API key is missing (set one of: {', '.join(API_KEY_ENV_VARS)})")


def get_model_name() -> str:
    return os.environ.get(ANALYSIS_MODEL_ENV_VAR) or ANALYSIS_MODEL


def _describe_signal(title: str, params: SignalParams, unit: str) -> str:
    return (
        f"{title}:\n"
        f"- Waveform: {params.waveform.value.upper()}\n"
        f"- RMS amplitude: {params.amplitude} {unit}\n"
        f"- Frequency: {params.frequency} Hz\n"
        f"- Phase angle: {params.phase}°\n"
        f"- DC offset: {params.dc_offset} {unit}\n"
    )


def build_prompt(state: SimulationState) -> str:
    """Prompt text for the analysis request."""
    return (
        "Act as an expert Electrical Engineering assistant.\n"
        "Analyze the following AC/DC signal simulation data.\n\n"
        "System setup:\n"
        "A generic load fed by a voltage source, resulting in a current.\n\n"
        + _describe_signal("VOLTAGE SOURCE", state.voltage, "V")
        + "\n"
        + _describe_signal("CURRENT SIGNAL", state.current, "A")
        + "\nTASK:\n"
        "Perform a circuit analysis based on these parameters.\n"
        "If the waveforms are not sinusoidal, discuss the implications of harmonics in your "
        "explanation, although standard phasor calculations apply mainly to the fundamental frequency.\n\n"
        "Please provide:\n"
        "1. Impedance (Z): magnitude and angle (V_ac / I_ac).\n"
        "2. Power factor: displacement power factor from the phase difference. State whether it is "
        "leading or lagging.\n"
        "3. Real power (P): average power including the DC contribution (P_dc + P_ac) where it applies.\n"
        "4. Reactive power (Q): at the fundamental frequency.\n"
        "5. Explanation: the nature of the load (resistive, inductive, capacitive), the effect of the DC "
        "offset on the load, and how the selected waveform changes power delivery compared with a pure sine.\n"
    )


def parse_response(text: str | None) -> AnalysisResult:
    """Build an AnalysisResult from the model's JSON reply."""
    if not text:
        raise ValueError("Empty response from analysis service.")
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Analysis response is not a JSON object.")
    missing = [k for k in RESPONSE_FIELDS if k not in payload]
    if missing:
        raise ValueError(f"Analysis response missing field(s): {', '.join(missing)}")
    return AnalysisResult(**{attr: str(payload[key]) for key, attr in RESPONSE_FIELDS.items()})


def analyze_circuit(state: SimulationState, client: genai.Client | None = None) -> AnalysisResult:
    """Ask the text-generation service for a circuit analysis.

    Args:
        state: Current simulation state; only the signal parameters are used.
        client: Optional pre-built client (a new one is created from the environment otherwise).

    Returns:
        The parsed analysis, or FALLBACK_ANALYSIS on any failure.
    """
    try:
        if client is None:
            client = genai.Client(api_key=get_api_key())
        response = client.models.generate_content(
            model=get_model_name(),
            contents=build_prompt(state),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        return parse_response(response.text)
    except Exception as e:
        logger.warning("Circuit analysis failed: %s", e)
        return FALLBACK_ANALYSIS
