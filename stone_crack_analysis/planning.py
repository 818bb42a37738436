"""Wedge placement planning.

Wedge candidates come from two sources:

1. Points sampled along every sufficiently long crack.  Their numeric
   priority rises with crack strength and gets a bonus for long or strong
   cracks.
2. Crack intersections, i.e. places where two cracks pass within
   ``intersection_threshold`` pixels of each other.  These carry the sentinel
   priority ``"high"`` and always rank above numeric priorities.

The final plan is chosen greedily: candidates are visited in priority order
(stable with respect to generation order) and accepted when they keep at
least ``wedge_min_spacing`` pixels from every point accepted so far, until
``max_wedge_points`` are placed.  The result is maximal but not necessarily
optimal.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Literal, Sequence, Union

import numpy as np
from scipy.spatial import cKDTree

from .config import AnalysisConfig
from .tracing import Crack

__all__ = [
    "HIGH_PRIORITY",
    "CandidateKind",
    "WedgeCandidate",
    "point_priority",
    "sample_crack_points",
    "find_intersections",
    "optimize_layout",
    "plan_wedges",
    "priority_tier",
]

logger = logging.getLogger(__name__)

HIGH_PRIORITY: Literal["high"] = "high"
Priority = Union[float, Literal["high"]]

MIN_SAMPLE_LENGTH = 50.0
SAMPLES_PER_CRACK = 5
LONG_CRACK_LENGTH = 200.0
LONG_CRACK_BONUS = 0.3
STRONG_CRACK_STRENGTH = 150.0
STRONG_CRACK_BONUS = 0.2

HIGH_TIER_PRIORITY = 0.7
MEDIUM_TIER_PRIORITY = 0.4


class CandidateKind(str, enum.Enum):
    CRACK_POINT = "crack_point"
    INTERSECTION = "intersection"


@dataclass(frozen=True)
class WedgeCandidate:
    """A possible wedge location in analysis‑grid coordinates."""

    x: float
    y: float
    priority: Priority
    kind: CandidateKind
    angle: float | None = None

    @property
    def rank(self) -> float:
        """Sortable priority; the ``"high"`` sentinel maps to infinity."""
        if self.priority == HIGH_PRIORITY:
            return math.inf
        return float(self.priority)

    def distance_to(self, other: "WedgeCandidate") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def point_priority(crack: Crack) -> float:
    """Numeric priority shared by every point sampled from ``crack``."""
    priority = crack.strength / 255.0
    if crack.length > LONG_CRACK_LENGTH:
        priority += LONG_CRACK_BONUS
    if crack.strength > STRONG_CRACK_STRENGTH:
        priority += STRONG_CRACK_BONUS
    return min(priority, 1.0)


def sample_crack_points(crack: Crack) -> list[WedgeCandidate]:
    """Sample about five candidates along ``crack`` in traversal order.

    Cracks shorter than 50 pixels yield no candidates.
    """
    if crack.length < MIN_SAMPLE_LENGTH:
        return []
    stride = max(1, len(crack.points) // SAMPLES_PER_CRACK)
    priority = point_priority(crack)
    return [
        WedgeCandidate(
            x=float(p.x),
            y=float(p.y),
            priority=priority,
            kind=CandidateKind.CRACK_POINT,
            angle=crack.direction,
        )
        for p in crack.points[::stride]
    ]


def _first_close_pair(first: Crack, second_tree: cKDTree, second: Crack, threshold: float) -> WedgeCandidate | None:
    # The tree only narrows the search; the strict distance test and the
    # (outer point, inner point) order decide which pair is reported.
    coords = np.asarray(first.points, dtype=np.float64)
    neighbours = second_tree.query_ball_point(coords, r=threshold)
    for p1, idxs in zip(first.points, neighbours):
        for j in sorted(idxs):
            p2 = second.points[j]
            dx = p1.x - p2.x
            dy = p1.y - p2.y
            if math.sqrt(dx * dx + dy * dy) < threshold:
                return WedgeCandidate(
                    x=(p1.x + p2.x) / 2.0,
                    y=(p1.y + p2.y) / 2.0,
                    priority=HIGH_PRIORITY,
                    kind=CandidateKind.INTERSECTION,
                )
    return None


def find_intersections(cracks: Sequence[Crack], threshold: float = 10.0) -> list[WedgeCandidate]:
    """Return one intersection candidate per pair of cracks that come close.

    For each unordered pair ``(i, j)`` with ``i < j`` the first point pair
    closer than ``threshold``, scanning crack ``i`` in traversal order and,
    for each of its points, crack ``j`` in traversal order, gives a candidate
    at the midpoint of the two points.
    """
    if len(cracks) < 2:
        return []
    trees = [cKDTree(np.asarray(c.points, dtype=np.float64)) for c in cracks]
    found: list[WedgeCandidate] = []
    for i in range(len(cracks)):
        for j in range(i + 1, len(cracks)):
            candidate = _first_close_pair(cracks[i], trees[j], cracks[j], threshold)
            if candidate is not None:
                found.append(candidate)
    return found


def optimize_layout(
    candidates: Sequence[WedgeCandidate],
    min_spacing: float = 80.0,
    max_points: int = 8,
) -> list[WedgeCandidate]:
    """Greedy placement under a minimum spacing constraint.

    Candidates are ordered by priority, highest first; equal priorities keep
    their input order.
    """
    ordered = sorted(candidates, key=lambda c: c.rank, reverse=True)
    accepted: list[WedgeCandidate] = []
    for candidate in ordered:
        if len(accepted) >= max_points:
            break
        if all(candidate.distance_to(other) >= min_spacing for other in accepted):
            accepted.append(candidate)
    return accepted


def plan_wedges(cracks: Sequence[Crack], config: AnalysisConfig | None = None) -> list[WedgeCandidate]:
    """Build the wedge plan for a list of validated cracks."""
    cfg = config if config is not None else AnalysisConfig()
    candidates: list[WedgeCandidate] = []
    for crack in cracks:
        candidates.extend(sample_crack_points(crack))
    sampled = len(candidates)
    candidates.extend(find_intersections(cracks, cfg.intersection_threshold))
    plan = optimize_layout(candidates, cfg.wedge_min_spacing, cfg.max_wedge_points)
    logger.debug(
        "Placed %d wedge points from %d sampled and %d intersection candidates",
        len(plan),
        sampled,
        len(candidates) - sampled,
    )
    return plan


def priority_tier(candidate: WedgeCandidate) -> str:
    """Marker tier used by renderers: ``"high"``, ``"medium"`` or ``"low"``."""
    if candidate.kind is CandidateKind.INTERSECTION or candidate.rank > HIGH_TIER_PRIORITY:
        return "high"
    if candidate.rank > MEDIUM_TIER_PRIORITY:
        return "medium"
    return "low"
