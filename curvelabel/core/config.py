# curvelabel/core/config.py
"""
Central configuration for curved river label placement.
All tuning values live here; algorithm modules import them as keyword defaults.
These are heuristics, not derived constants.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Text footprint (fixed-pitch approximation) -----
CHAR_WIDTH_RATIO: float = 0.7
"""Character advance as a fraction of font size."""

LINE_HEIGHT_RATIO: float = 1.2
"""Text height as a fraction of font size."""

DEFAULT_FONT_SIZE: float = 12.0
DEFAULT_CURVE_TENSION: float = 0.8

# ----- Visual center (pole of inaccessibility approximation) -----
VISUAL_CENTER_GRID_STEPS: int = 40
"""Grid steps per axis over the bounding box."""

VISUAL_CENTER_REFINE_TRIALS: int = 60
"""Random local refinement trials around the best grid point."""

VISUAL_CENTER_DEFAULT_RADIUS: float = 10.0
"""Refinement radius when no grid point had positive clearance."""

# ----- Determinism -----
SEED: int | None = 42
"""Seed for the refinement generator; None for non-deterministic."""

# ----- Medial axis snapping -----
BOUNDARY_SEARCH_LIMIT: float = 2000.0
"""Doubling search stops once the probe distance reaches this value."""

BOUNDARY_REFINE_ITERATIONS: int = 12
"""Bisection steps; positional error <= boundary distance / 2**iterations."""

# ----- Medial axis tracing -----
TRACE_MIN_STEP: float = 1.5
TRACE_MAX_STEP: float = 20.0
TRACE_STEP_WIDTH_RATIO: float = 0.2
"""Step size = clamp(width * ratio, TRACE_MIN_STEP, TRACE_MAX_STEP)."""

TRACE_HEADING_SMOOTHING: float = 0.15
"""Fraction of the turn toward the local orientation applied per step."""

TRACE_MIN_MOVEMENT: float = 0.05
"""Trace stops when a step moves less than this (stagnation)."""

TRACE_MAX_STEPS: int = 1000
"""Hard cap on steps per trace."""

# ----- Seeds -----
SEED_INTERVAL_TEXT_RATIO: float = 0.2
SEED_MIN_INTERVAL: float = 20.0
"""Seed spacing along the master spine = max(text_width * ratio, min interval)."""

MAX_SEEDS: int = 60
"""Seed cap; larger seed lists are subsampled uniformly."""

# ----- Candidate windows -----
LOCAL_SPAN_TEXT_RATIO: float = 1.5
"""Local spine traced this many text widths in each direction."""

WINDOW_MIN_FILL_RATIO: float = 0.95
"""Clamped window must cover at least this fraction of the text width."""

SMOOTHING_PASSES: int = 5
"""Passes of the 0.25/0.5/0.25 moving average over the sub-spine."""

# ----- Clearance -----
COLLISION_THRESHOLD_RATIO: float = 0.7
"""Samples closer than ratio * text_height to the bank are collision points."""

HARD_CLEARANCE_FLOOR_RATIO: float = 0.6
"""Candidates with min clearance below ratio * text_height are rejected."""

FALLBACK_COLLISION_SAMPLES: int = 10
"""Equal steps along the fallback segment checked for collisions."""

# ----- Scoring -----
SCORE_WEIGHT_CLEARANCE: float = 10.0
SCORE_WEIGHT_WIDTH_BONUS: float = 8.0
SCORE_WEIGHT_CURVATURE: float = 5.0
SCORE_WEIGHT_CENTERING: float = 1.0

CLEARANCE_SCORE_CAP: float = 2.0
"""Clearance term saturates at this multiple of text height."""

WIDTH_BONUS_THRESHOLD_RATIO: float = 1.5
"""Width bonus only when min clearance exceeds ratio * text_height."""

CURVATURE_THRESHOLD_DEG: float = 45.0
CURVATURE_DECAY: float = 3.0
"""Penalty = exp(-decay * (max_turn - threshold)) above the threshold (radians)."""

CENTERING_FALLOFF: float = 0.02

# ----- Curve fitting -----
CURVE_MIN_SEGMENT_LENGTH: float = 25.0
CURVE_MAX_SEGMENT_LENGTH: float = 60.0
CURVE_SEGMENTS_PER_LABEL: float = 5.0
"""Ideal resampled segment length = clamp(label_width / n, min, max)."""

CURVE_MIN_FACTOR: float = 0.2
"""Lower clamp of the per-point control reach factor at sharp turns."""

# ----- Existing label avoidance (off unless requested) -----
EXISTING_LABEL_OVERLAP_WEIGHT: float = 5.0
"""Score penalty weight for overlap with already-placed label bounds."""

EXISTING_LABEL_MAX_OVERLAP: float = 0.5
"""Max allowed intersection area with already-placed bounds; above this the candidate is rejected."""

# ----- Rendering -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 600
DEFAULT_FONT_FAMILY: str = "DejaVu Sans"

# ----- Logging -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""Log level for the CLI. Set env LOG_LEVEL=DEBUG to trace candidates."""
