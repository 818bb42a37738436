"""Analysis parameters and named presets.

Two parameter sets are in use, mirroring the two detector tunings the tool
has shipped with:

- ``sensitive`` – low edge threshold and relaxed validation, which keeps
  faint cracks at the cost of more noise.
- ``strict`` – higher edge threshold and tighter validation.  This is the
  default.

Neither set is considered authoritative.  Pick one with
:meth:`AnalysisConfig.from_preset` and override individual fields as needed::

    cfg = AnalysisConfig.from_preset("sensitive", max_wedge_points=6)
"""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from .errors import InvalidConfig

__all__ = ["AnalysisConfig", "PRESETS", "DEFAULT_PRESET"]


# ---------------------------------------------------------------
# PRESET PARAMETERS
# ---------------------------------------------------------------

SENSITIVE = {
    "edge_threshold": 25.0,
    "min_valid_points": 10,
    "min_length_fraction": 0.05,
    "min_strength": 50.0,
    "min_linearity": 0.5,
    "max_cracks": 15,
}

STRICT = {
    "edge_threshold": 50.0,
    "min_valid_points": 20,
    "min_length_fraction": 0.10,
    "min_strength": 100.0,
    "min_linearity": 0.7,
    "max_cracks": 10,
}

PRESETS = {"sensitive": SENSITIVE, "strict": STRICT}
DEFAULT_PRESET = "strict"


@dataclass(frozen=True)
class AnalysisConfig:
    """Parameters for one analysis run.

    The resource ceilings (``max_points_per_crack``, ``max_stack_depth``,
    ``max_visited``, ``max_cracks`` and ``max_wedge_points``) bound the work
    done on noisy images.  Changing them changes results.
    """

    # Preprocessing / edges
    blur_enabled: bool = True
    edge_threshold: float = STRICT["edge_threshold"]
    max_width: int | None = None

    # Tracing
    min_traced_points: int = 20
    max_points_per_crack: int = 1000
    max_stack_depth: int = 500
    max_visited: int = 100000

    # Validation
    min_valid_points: int = STRICT["min_valid_points"]
    min_length_fraction: float = STRICT["min_length_fraction"]
    min_strength: float = STRICT["min_strength"]
    min_linearity: float = STRICT["min_linearity"]
    max_cracks: int = STRICT["max_cracks"]

    # Wedge planning
    wedge_min_spacing: float = 80.0
    max_wedge_points: int = 8
    intersection_threshold: float = 10.0

    @classmethod
    def from_preset(cls, name: str = DEFAULT_PRESET, **overrides: Any) -> "AnalysisConfig":
        """Build a configuration from a named preset plus field overrides."""
        try:
            params = PRESETS[name]
        except KeyError:
            raise InvalidConfig(
                f"unknown preset {name!r}; expected one of {sorted(PRESETS)}"
            ) from None
        try:
            cfg = cls(**{**params, **overrides})
        except TypeError as exc:
            raise InvalidConfig(str(exc)) from exc
        return cfg.validate()

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        try:
            cfg = replace(self, **overrides)
        except TypeError as exc:
            raise InvalidConfig(str(exc)) from exc
        return cfg.validate()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> "AnalysisConfig":
        """Check every field and return ``self``.

        Raises
        ------
        InvalidConfig
            If a field is not a real number or is NaN, a threshold is
            negative, a count or cap is not positive, or a fraction lies
            outside ``[0, 1]``.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "blur_enabled" or (f.name == "max_width" and value is None):
                continue
            if not isinstance(value, numbers.Real) or math.isnan(value):
                raise InvalidConfig(f"{f.name} must be a number, got {value!r}")
        for name in ("edge_threshold", "min_strength", "wedge_min_spacing", "intersection_threshold"):
            if getattr(self, name) < 0:
                raise InvalidConfig(f"{name} must be non-negative, got {getattr(self, name)}")
        for name in (
            "max_points_per_crack",
            "max_stack_depth",
            "max_visited",
            "max_cracks",
            "max_wedge_points",
        ):
            if getattr(self, name) <= 0:
                raise InvalidConfig(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("min_traced_points", "min_valid_points"):
            if getattr(self, name) < 0:
                raise InvalidConfig(f"{name} must be non-negative, got {getattr(self, name)}")
        for name in ("min_length_fraction", "min_linearity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfig(f"{name} must lie in [0, 1], got {value}")
        if self.max_width is not None and self.max_width < 3:
            raise InvalidConfig(f"max_width must be at least 3 pixels, got {self.max_width}")
        return self
