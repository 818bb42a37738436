"""Tests for the Sobel edge detector."""

from __future__ import annotations

import math

import numpy as np
import pytest

from stone_crack_analysis.edge_detection import detect_edges, sobel_magnitude


def _step(height: int, width: int, column: int, value: int) -> np.ndarray:
    img = np.zeros((height, width), dtype=np.uint8)
    img[:, column:] = value
    return img


def test_uniform_map_has_no_edges():
    edges = detect_edges(np.full((12, 12), 77, dtype=np.uint8), threshold=0)
    assert edges.dtype == np.uint8
    assert not edges.any()


def test_vertical_step_is_clamped_to_255():
    edges = detect_edges(_step(7, 8, 4, 100), threshold=50)
    # gx = (1 + 2 + 1) * 100 on both sides of the step
    assert (edges[1:-1, 3] == 255).all()
    assert (edges[1:-1, 4] == 255).all()
    assert not edges[:, [0, 1, 2, 5, 6, 7]].any()
    assert not edges[0].any() and not edges[-1].any()


def test_threshold_is_strict_and_values_are_graded():
    weak = _step(5, 6, 3, 5)  # magnitude 20
    assert not detect_edges(weak, threshold=25).any()
    assert detect_edges(weak, threshold=10)[2, 2] == 20
    exact = _step(5, 6, 3, 7)  # magnitude 28
    assert detect_edges(exact, threshold=28)[2, 2] == 0
    assert detect_edges(exact, threshold=25)[2, 2] == 28


def test_magnitude_combines_both_gradients():
    yy, xx = np.mgrid[0:6, 0:6]
    ramp = (xx + yy).astype(np.uint8)
    magnitude = sobel_magnitude(ramp)
    assert magnitude[2, 2] == pytest.approx(8 * math.sqrt(2))
    assert magnitude[0, 0] == 0
    # 11.31 is truncated to 11
    assert detect_edges(ramp, threshold=10)[3, 3] == 11


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        detect_edges(np.zeros((4, 4), dtype=np.uint8), threshold=-1)


def test_zero_border_of_smoothed_map_is_not_an_edge():
    blurred = np.full((10, 12), 128, dtype=np.uint8)
    blurred[0, :] = blurred[-1, :] = 0
    blurred[:, 0] = blurred[:, -1] = 0
    assert not detect_edges(blurred, threshold=0).any()


def test_border_of_unsmoothed_map_is_image_data():
    gray = np.full((20, 20), 200, dtype=np.uint8)
    gray[:, 0] = 0
    # gx = (1 + 2 + 1) * 200 next to the dark column
    assert sobel_magnitude(gray, smoothed=False)[5, 1] == 800
    edges = detect_edges(gray, threshold=50, smoothed=False)
    assert (edges[1:-1, 1] == 255).all()
    assert not edges[:, 2:].any()
