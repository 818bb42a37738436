"""Stone crack analysis package.

This package detects fracture lines in photographs of stone surfaces and
recommends where to place splitting wedges.  The whole pipeline is available
through :func:`analyze`; the individual stages can also be used on their own.

Modules:

- :mod:`preprocessing` – Grayscale conversion, smoothing and optional downscale.
- :mod:`edge_detection` – Sobel gradient magnitude edge map.
- :mod:`tracing` – Bounded flood fill grouping edge pixels into cracks.
- :mod:`validation` – Geometric and statistical crack filtering.
- :mod:`planning` – Wedge candidate generation and greedy placement.
- :mod:`pipeline` – The end‑to‑end :func:`analyze` entry point.
- :mod:`config` – Analysis parameters and the ``sensitive`` / ``strict`` presets.
- :mod:`synthetic` – Synthetic data generation for testing.
- :mod:`metrics` – Utility functions to evaluate results.

"""

from .config import AnalysisConfig, PRESETS
from .errors import InvalidConfig, InvalidInput
from .tracing import Crack, Point, trace_cracks
from .planning import CandidateKind, WedgeCandidate, HIGH_PRIORITY, priority_tier
from .pipeline import AnalysisResult, PixelBuffer, analyze
from .synthetic import generate_synthetic_stone, generate_mock_cracks
from .metrics import f1_score, summarize

__all__ = [
    "AnalysisConfig",
    "PRESETS",
    "InvalidConfig",
    "InvalidInput",
    "Crack",
    "Point",
    "trace_cracks",
    "CandidateKind",
    "WedgeCandidate",
    "HIGH_PRIORITY",
    "priority_tier",
    "AnalysisResult",
    "PixelBuffer",
    "analyze",
    "generate_synthetic_stone",
    "generate_mock_cracks",
    "f1_score",
    "summarize",
]
