"""Grouping of edge pixels into cracks by bounded flood fill.

The edge map is scanned in row‑major order.  Every edge pixel that has not
been visited yet seeds an iterative, stack based 8‑connected flood fill.  The
pixels are recorded in the order they are popped from the stack, and the
derived quantities of a crack depend on that order:

- ``length`` is the sum of Euclidean distances between consecutive
  *traversed* points.  Because the fill backtracks, this is generally longer
  than the geometric extent of the region.
- ``direction`` is ``atan2(dy, dx)`` from the first to the last traversed
  point.
- ``strength`` is the mean edge magnitude of the traversed points.

Neighbours are pushed row by row from ``(-1, -1)`` to ``(+1, +1)``, so the
down‑right neighbour is explored first.  Keeping this discipline is what
makes the numeric outputs reproducible.

Three ceilings bound the work on noisy images:

- a crack stops growing at ``max_points_per_crack`` points;
- neighbours are not pushed while the stack holds ``max_stack_depth`` or
  more entries, which can split or truncate wide structures;
- the whole scan stops once more than ``max_visited`` pixels have been
  visited.

Hitting any of them sets :attr:`TraceResult.truncated`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

import numpy as np
from numpy.typing import ArrayLike

from .config import AnalysisConfig

__all__ = ["Point", "Crack", "TraceResult", "trace_cracks", "polyline_length", "endpoint_direction"]

logger = logging.getLogger(__name__)

# Push order; the last entry is popped first.
NEIGHBOUR_OFFSETS = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0))


class Point(NamedTuple):
    x: int
    y: int


def polyline_length(points: Sequence[Point]) -> float:
    """Sum of distances between consecutive points, in the given order."""
    total = 0.0
    for prev, cur in zip(points, points[1:]):
        total += math.hypot(cur.x - prev.x, cur.y - prev.y)
    return total


def endpoint_direction(points: Sequence[Point]) -> float:
    """Angle in radians from the first to the last point; 0 for fewer than two."""
    if len(points) < 2:
        return 0.0
    start, end = points[0], points[-1]
    return math.atan2(end.y - start.y, end.x - start.x)


@dataclass(frozen=True)
class Crack:
    """A traced group of edge pixels.

    Attributes
    ----------
    points : tuple of Point
        Pixels in traversal order.
    length : float
        Traversal‑order polyline length; 0 for fewer than two points.
    direction : float
        Angle from the first to the last point in radians; 0 for fewer than
        two points.
    strength : float
        Mean edge magnitude over ``points``.
    """

    points: tuple[Point, ...]
    length: float
    direction: float
    strength: float

    @classmethod
    def from_points(cls, points: Sequence[tuple[int, int]], strength: float) -> "Crack":
        pts = tuple(Point(int(x), int(y)) for x, y in points)
        if not pts:
            raise ValueError("a crack needs at least one point")
        if len(pts) < 2:
            return cls(points=pts, length=0.0, direction=0.0, strength=float(strength))
        return cls(
            points=pts,
            length=polyline_length(pts),
            direction=endpoint_direction(pts),
            strength=float(strength),
        )

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class TraceResult:
    cracks: list[Crack]
    truncated: bool
    visited: int


class _Scan:
    """Mutable bookkeeping shared by all fills of one scan."""

    def __init__(self, edges: np.ndarray, cfg: AnalysisConfig) -> None:
        self.height, self.width = edges.shape
        self.values = edges.ravel().tolist()
        self.visited = bytearray(self.width * self.height)
        self.visited_count = 0
        self.cfg = cfg
        self.aborted = False
        self.truncated = False

    def fill(self, seed: int) -> tuple[list[Point], int]:
        width, height = self.width, self.height
        values, visited = self.values, self.visited
        max_points = self.cfg.max_points_per_crack
        max_stack = self.cfg.max_stack_depth
        max_visited = self.cfg.max_visited

        points: list[Point] = []
        magnitude_sum = 0
        stack = [(seed % width, seed // width)]
        while stack and len(points) < max_points:
            x, y = stack.pop()
            if x < 0 or x >= width or y < 0 or y >= height:
                continue
            idx = y * width + x
            if visited[idx] or values[idx] == 0:
                continue
            if self.visited_count > max_visited:
                self.aborted = True
                self.truncated = True
                break
            visited[idx] = 1
            self.visited_count += 1
            points.append(Point(x, y))
            magnitude_sum += values[idx]
            if len(stack) < max_stack:
                for dx, dy in NEIGHBOUR_OFFSETS:
                    stack.append((x + dx, y + dy))
            else:
                self.truncated = True
        if stack and len(points) >= max_points:
            self.truncated = True
        return points, magnitude_sum


def trace_cracks(edges: ArrayLike, config: AnalysisConfig | None = None) -> TraceResult:
    """Trace connected edge structures into cracks.

    Parameters
    ----------
    edges : array‑like of shape (h, w)
        Edge magnitude map; any non‑zero pixel is an edge pixel.
    config : AnalysisConfig, optional
        Supplies the ceilings and ``min_traced_points``.  Defaults to
        ``AnalysisConfig()``.

    Returns
    -------
    result : TraceResult
        Cracks with more than ``min_traced_points`` points, in seed order, and
        whether a ceiling truncated the scan.
    """
    edge_map = np.asarray(edges)
    if edge_map.ndim != 2:
        raise ValueError("edges must be a 2‑D array")
    cfg = config if config is not None else AnalysisConfig()
    if edge_map.size == 0:
        return TraceResult(cracks=[], truncated=False, visited=0)

    scan = _Scan(edge_map, cfg)
    cracks: list[Crack] = []
    discarded = 0
    for seed in np.flatnonzero(edge_map).tolist():
        if scan.aborted:
            break
        if scan.visited[seed]:
            continue
        points, magnitude_sum = scan.fill(seed)
        if len(points) <= cfg.min_traced_points:
            discarded += 1
            continue
        cracks.append(Crack.from_points(points, magnitude_sum / len(points)))

    if scan.truncated:
        logger.warning(
            "Crack tracing hit a resource ceiling after visiting %d pixels (scan aborted: %s)",
            scan.visited_count,
            scan.aborted,
        )
    logger.debug("Traced %d crack candidates, discarded %d small groups", len(cracks), discarded)
    return TraceResult(cracks=cracks, truncated=scan.truncated, visited=scan.visited_count)
