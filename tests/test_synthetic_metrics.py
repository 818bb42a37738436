"""Tests for synthetic data generation and evaluation metrics.

Synthetic stones are only useful as fixtures if they are reproducible, so
the generators are checked for determinism under a fixed seed.  The metric
helpers are checked on small hand‑made masks and plans.
"""

from __future__ import annotations

import math

import numpy as np

from stone_crack_analysis import (
    AnalysisConfig,
    CandidateKind,
    HIGH_PRIORITY,
    WedgeCandidate,
    analyze,
    f1_score,
    generate_mock_cracks,
    generate_synthetic_stone,
    summarize,
)
from stone_crack_analysis.metrics import crack_mask, min_pairwise_distance
from stone_crack_analysis.synthetic import draw_line, uniform_image


def test_synthetic_stone_is_reproducible():
    a_img, a_gt = generate_synthetic_stone((64, 80), num_cracks=2, texture_strength=5.0, noise_sigma=2.0, seed=9)
    b_img, b_gt = generate_synthetic_stone((64, 80), num_cracks=2, texture_strength=5.0, noise_sigma=2.0, seed=9)
    assert a_img.shape == (64, 80, 4) and a_img.dtype == np.uint8
    assert (a_img[..., 3] == 255).all()
    assert np.array_equal(a_img, b_img)
    assert np.array_equal(a_gt, b_gt)
    assert a_gt.any()


def test_crack_pixels_are_darker():
    image, gt = generate_synthetic_stone((64, 64), num_cracks=1, seed=1)
    assert (image[gt, 0] == 30).all()
    assert (image[~gt, 0] == 170).all()


def test_stone_without_cracks_gives_empty_result():
    image, gt = generate_synthetic_stone((50, 60), num_cracks=0, seed=0)
    assert not gt.any()
    result = analyze(image, AnalysisConfig.from_preset("sensitive"))
    assert result.cracks == [] and result.wedge_plan == []


def test_draw_line_mask():
    image = uniform_image((20, 20), value=200)
    mask = draw_line(image, (2, 10), (17, 10), value=0, thickness=1)
    assert mask.sum() == 16
    assert (image[10, 2:18, :3] == 0).all()
    assert (image[9, :, :3] == 200).all()


def test_mock_cracks_reproducible_and_in_bounds():
    first = generate_mock_cracks(640, 480, seed=42)
    assert first == generate_mock_cracks(640, 480, seed=42)
    assert 1 <= len(first) <= 9
    for crack in first:
        assert len(crack.points) > 10
        assert 50 <= crack.strength < 150
        assert all(0 <= p.x < 640 and 0 <= p.y < 480 for p in crack.points)


def test_f1_score_on_masks():
    gt = np.zeros((10, 10), dtype=bool)
    gt[5, :] = True
    assert f1_score(gt, gt) == 1.0
    assert f1_score(np.zeros_like(gt), np.zeros_like(gt)) == 1.0
    assert f1_score(np.roll(gt, 2, axis=0), gt) == 0.0


def test_crack_mask_round_trip():
    cracks = generate_mock_cracks(300, 200, seed=3)
    mask = crack_mask(cracks, (200, 300))
    assert mask.sum() == len({p for c in cracks for p in c.points})
    assert crack_mask(cracks, (200, 300), dilate=1).sum() >= mask.sum()


def test_min_pairwise_distance():
    plan = [
        WedgeCandidate(0, 0, 0.5, CandidateKind.CRACK_POINT),
        WedgeCandidate(3, 4, 0.5, CandidateKind.CRACK_POINT),
        WedgeCandidate(100, 0, 0.5, CandidateKind.CRACK_POINT),
    ]
    assert min_pairwise_distance(plan) == 5.0
    assert min_pairwise_distance(plan[:1]) == math.inf


def test_summary_counts_tiers_and_splits():
    plan = [
        WedgeCandidate(0, 0, HIGH_PRIORITY, CandidateKind.INTERSECTION),
        WedgeCandidate(100, 0, 0.8, CandidateKind.CRACK_POINT),
        WedgeCandidate(200, 0, 0.5, CandidateKind.CRACK_POINT),
        WedgeCandidate(300, 0, 0.2, CandidateKind.CRACK_POINT),
    ]
    summary = summarize([], plan)
    assert (summary.high, summary.medium, summary.low) == (2, 1, 1)
    assert summary.recommended_splits == 2
    plan.append(WedgeCandidate(400, 0, 0.9, CandidateKind.CRACK_POINT))
    assert summarize([], plan).recommended_splits == 3
    assert summarize([], []).recommended_splits == 2
