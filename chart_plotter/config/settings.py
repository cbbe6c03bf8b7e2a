import os
from dotenv import load_dotenv

# --- Project paths ---
PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Expect .env one level ABOVE the package (e.g., the project root)
ENV_PATH = os.path.join(os.path.dirname(PACKAGE_DIR), ".env")
load_dotenv(dotenv_path=ENV_PATH)

# --- small helpers for env parsing ---
def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


# --- Logging Configuration ---
LOG_LEVEL = os.getenv("CHART_PLOTTER_LOG_LEVEL", "WARNING")  # options: DEBUG, INFO, WARNING, ERROR

# --- Zoom / scroll ---
MIN_ZOOM = _env_float("CHART_PLOTTER_MIN_ZOOM", 0.1)
MAX_ZOOM = _env_float("CHART_PLOTTER_MAX_ZOOM", 10.0)

# Segment widths below this are clamped so tick placement never divides by zero.
MIN_SEGMENT_WIDTH_PX = _env_float("CHART_PLOTTER_MIN_SEGMENT_WIDTH_PX", 1.0)

# Ranges shorter than this are widened when mapping values to pixels.
MIN_RANGE_LENGTH = 1e-9

# --- Axis defaults (dp / sp) ---
DEF_LABEL_COUNT = _env_int("CHART_PLOTTER_LABEL_COUNT", 99)
DEF_LABEL_SPACING_DP = 16.0

AXIS_LABEL_SIZE_SP = 12.0
AXIS_LABEL_HORIZONTAL_PADDING_DP = 4.0
AXIS_LABEL_VERTICAL_PADDING_DP = 2.0
AXIS_GUIDELINE_WIDTH_DP = 1.0
AXIS_LINE_WIDTH_DP = 1.0
AXIS_TICK_LENGTH_DP = 4.0

# --- Cartesian chart defaults (dp) ---
COLUMN_WIDTH_DP = 8.0
COLUMN_INSIDE_SPACING_DP = 8.0
COLUMN_OUTSIDE_SPACING_DP = 32.0

LINE_THICKNESS_DP = 2.0
POINT_SIZE_DP = 16.0
POINT_SPACING_DP = 16.0

# --- Pie defaults (dp) ---
PIE_LABEL_LINE_LENGTH_DP = 12.0

# --- Animation ---
ANIMATION_DURATION_MS = _env_int("CHART_PLOTTER_ANIMATION_DURATION_MS", 500)
ANIMATION_FRAME_INTERVAL_MS = _env_int("CHART_PLOTTER_ANIMATION_FRAME_INTERVAL_MS", 16)
RUN_INITIAL_ANIMATION = _env_bool("CHART_PLOTTER_RUN_INITIAL_ANIMATION", True)

# Labels switch from the old to the new value once the fraction reaches this point.
LABEL_SNAP_FRACTION = _env_float("CHART_PLOTTER_LABEL_SNAP_FRACTION", 0.5)

# --- Colors (matplotlib color specs) ---
AXIS_LABEL_COLOR = "#000000DE"
AXIS_GUIDELINE_COLOR = "#AAAAAA"
AXIS_LINE_COLOR = "#8A8A8A"
BACKGROUND_COLOR = "white"

SERIES_COLORS = [
    "tab:blue",
    "tab:orange",
    "tab:green",
    "tab:red",
    "tab:purple",
    "tab:brown",
    "tab:pink",
    "tab:gray",
]


if __name__ == "__main__":
    # Quick sanity check
    print(f"Package Directory: {PACKAGE_DIR}")
    print(f"Looking for .env at: {ENV_PATH}")
    print(f"Log level: {LOG_LEVEL}")
    print(f"Zoom range: {MIN_ZOOM}..{MAX_ZOOM}")
    print(f"Default label count: {DEF_LABEL_COUNT}")
    print(f"Animation: {ANIMATION_DURATION_MS} ms @ {ANIMATION_FRAME_INTERVAL_MS} ms/frame")
    print(f"Label snap fraction: {LABEL_SNAP_FRACTION}")
