"""Geometric and statistical filtering of traced cracks."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from .config import AnalysisConfig
from .tracing import Crack, Point, polyline_length

__all__ = ["linearity", "is_valid_crack", "validate_cracks"]

logger = logging.getLogger(__name__)


def linearity(points: Sequence[Point], length: float | None = None) -> float:
    """Ratio of the endpoint distance to the traversed length, capped at 1.

    Parameters
    ----------
    points : sequence of Point
        Points in traversal order.
    length : float, optional
        Precomputed traversal length.  Computed from ``points`` if omitted.

    Returns
    -------
    value : float
        A value in ``[0, 1]``.  Sequences with fewer than three points, or
        with zero length, are perfectly linear by convention.
    """
    if len(points) < 3:
        return 1.0
    if length is None:
        length = polyline_length(points)
    if length <= 0:
        return 1.0
    start, end = points[0], points[-1]
    ideal = math.hypot(end.x - start.x, end.y - start.y)
    return min(ideal / length, 1.0)


def is_valid_crack(crack: Crack, width: int, height: int, config: AnalysisConfig | None = None) -> bool:
    """Return ``True`` if ``crack`` passes every acceptance rule.

    A crack is rejected when it has fewer than ``min_valid_points`` points,
    is shorter than ``min(width, height) * min_length_fraction``, is weaker
    than ``min_strength`` or is less linear than ``min_linearity``.
    """
    cfg = config if config is not None else AnalysisConfig()
    if len(crack.points) < cfg.min_valid_points:
        return False
    if crack.length < min(width, height) * cfg.min_length_fraction:
        return False
    if crack.strength < cfg.min_strength:
        return False
    if linearity(crack.points, crack.length) < cfg.min_linearity:
        return False
    return True


def validate_cracks(
    candidates: Iterable[Crack],
    width: int,
    height: int,
    config: AnalysisConfig | None = None,
) -> list[Crack]:
    """Keep valid candidates in order, stopping at ``max_cracks``."""
    cfg = config if config is not None else AnalysisConfig()
    accepted: list[Crack] = []
    rejected = 0
    for crack in candidates:
        if is_valid_crack(crack, width, height, cfg):
            accepted.append(crack)
        else:
            rejected += 1
        if len(accepted) >= cfg.max_cracks:
            break
    logger.debug("Validated %d cracks, rejected %d", len(accepted), rejected)
    return accepted
