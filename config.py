"""Global configuration for the AC/DC Signal Lab project."""

# Oscilloscope frame
SAMPLE_COUNT = 200            # intervals per frame (SAMPLE_COUNT + 1 points)
TIME_WINDOW_MS = 40.0         # 2 cycles at 50 Hz, 2.4 at 60 Hz
FRAME_INTERVAL_S = 0.1        # dashboard refresh period

# Default operating point (RMS values)
DEFAULT_VOLTAGE_RMS = 120.0   # V
DEFAULT_CURRENT_RMS = 5.0     # A
DEFAULT_FREQUENCY = 60.0      # Hz
DEFAULT_VOLTAGE_PHASE = 0.0   # deg
DEFAULT_CURRENT_PHASE = -30.0 # deg (lagging)

# Simulation speed slider (0 = frozen, factor = slider / SPEED_DIVISOR)
DEFAULT_SPEED = 20
MAX_SPEED = 100
SPEED_DIVISOR = 400.0

# Control ranges: (min, max, step)
AMPLITUDE_RANGE = (0.0, 200.0, 1.0)
PHASE_RANGE = (-180.0, 180.0, 1.0)
FREQUENCY_RANGE = (1.0, 200.0, 1.0)
DC_OFFSET_RANGE = (-100.0, 100.0, 1.0)

# External circuit analysis
ANALYSIS_MODEL = "gemini-3-pro-preview"
ANALYSIS_MODEL_ENV_VAR = "ANALYSIS_MODEL"
ANALYSIS_WORKERS = 4  # shared by all dashboard sessions
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
