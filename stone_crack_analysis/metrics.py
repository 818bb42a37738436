"""Utility metrics for evaluating crack detection and wedge plans."""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike
from scipy.ndimage import binary_dilation

from .planning import WedgeCandidate, priority_tier
from .tracing import Crack

__all__ = ["crack_mask", "f1_score", "min_pairwise_distance", "PlanSummary", "summarize"]


def crack_mask(cracks: Sequence[Crack], shape: tuple[int, int], *, dilate: int = 0) -> np.ndarray:
    """Rasterise crack points into a boolean mask.

    Parameters
    ----------
    cracks : sequence of Crack
        Cracks in analysis‑grid coordinates.
    shape : tuple of two ints
        ``(height, width)`` of the mask.
    dilate : int, optional
        Number of binary dilation iterations applied afterwards.  Edge
        responses sit a pixel or two beside the true crack, so a small
        dilation makes the mask comparable with a ground truth.

    Returns
    -------
    mask : ndarray of bool
    """
    mask = np.zeros(shape, dtype=bool)
    for crack in cracks:
        for p in crack.points:
            mask[p.y, p.x] = True
    if dilate > 0:
        mask = binary_dilation(mask, iterations=dilate)
    return mask


def f1_score(pred: ArrayLike, gt: ArrayLike) -> float:
    """Compute the F1 score between a predicted crack mask and the ground truth.

    The F1 score is the harmonic mean of precision and recall.  Both inputs
    are interpreted as boolean masks.

    Parameters
    ----------
    pred : array‑like
        Predicted crack mask.
    gt : array‑like
        Ground‑truth crack mask.

    Returns
    -------
    f1 : float
        F1 score between 0 and 1.  If neither mask has positive pixels,
        returns 1.0 by convention.
    """
    p = np.asarray(pred, dtype=bool)
    g = np.asarray(gt, dtype=bool)
    if p.shape != g.shape:
        raise ValueError("pred and gt must have the same shape")
    tp = np.logical_and(p, g).sum()
    fp = np.logical_and(p, ~g).sum()
    fn = np.logical_and(~p, g).sum()
    if tp + fp + fn == 0:
        return 1.0
    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    if precision + recall == 0:
        return 0.0
    return float(2.0 * precision * recall / (precision + recall))


def min_pairwise_distance(plan: Sequence[WedgeCandidate]) -> float:
    """Smallest distance between two wedge points; ``inf`` for fewer than two."""
    best = math.inf
    for a, b in itertools.combinations(plan, 2):
        best = min(best, a.distance_to(b))
    return best


@dataclass(frozen=True)
class PlanSummary:
    crack_count: int
    high: int
    medium: int
    low: int
    recommended_splits: int


def summarize(cracks: Sequence[Crack], plan: Sequence[WedgeCandidate]) -> PlanSummary:
    """Count wedge points per marker tier and suggest a number of splits.

    The suggested split count is half the number of wedge points, rounded
    up, and never less than two.
    """
    tiers = [priority_tier(c) for c in plan]
    return PlanSummary(
        crack_count=len(cracks),
        high=tiers.count("high"),
        medium=tiers.count("medium"),
        low=tiers.count("low"),
        recommended_splits=max(2, math.ceil(len(plan) / 2)),
    )
