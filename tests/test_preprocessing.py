"""Tests for grayscale conversion, smoothing and downscaling.

The preprocessing stage uses integer arithmetic throughout, so most checks
compare exact pixel values computed by hand.
"""

from __future__ import annotations

import numpy as np
import pytest

from stone_crack_analysis.preprocessing import downscale, gaussian_blur, preprocess, to_grayscale
from stone_crack_analysis.synthetic import uniform_image


def test_grayscale_weights_and_alpha_ignored():
    image = np.zeros((1, 3, 4), dtype=np.uint8)
    image[0, 0] = (10, 20, 30, 255)
    image[0, 1] = (10, 20, 30, 0)
    image[0, 2] = (255, 255, 255, 17)
    gray = to_grayscale(image)
    # 0.299*10 + 0.587*20 + 0.114*30 = 18.15
    assert gray.dtype == np.uint8
    assert gray.tolist() == [[18, 18, 255]]


def test_grayscale_rejects_non_rgba():
    with pytest.raises(ValueError):
        to_grayscale(np.zeros((4, 4, 3), dtype=np.uint8))


def test_blur_uniform_interior_and_zero_border():
    gray = np.full((6, 7), 100, dtype=np.uint8)
    blurred = gaussian_blur(gray)
    assert (blurred[1:-1, 1:-1] == 100).all()
    assert (blurred[0, :] == 0).all() and (blurred[-1, :] == 0).all()
    assert (blurred[:, 0] == 0).all() and (blurred[:, -1] == 0).all()


def test_blur_impulse_response():
    gray = np.zeros((5, 5), dtype=np.uint8)
    gray[2, 2] = 160
    blurred = gaussian_blur(gray)
    assert blurred[2, 2] == 40
    assert blurred[1, 2] == blurred[2, 1] == blurred[3, 2] == blurred[2, 3] == 20
    assert blurred[1, 1] == blurred[3, 3] == 10


def test_blur_rounds_half_up():
    gray = np.zeros((3, 3), dtype=np.uint8)
    # kernel weight 1 at the corner: 8 / 16 = 0.5 rounds to 1
    gray[0, 0] = 8
    assert gaussian_blur(gray)[1, 1] == 1


def test_blur_tiny_image_is_zero():
    assert (gaussian_blur(np.full((2, 5), 200, dtype=np.uint8)) == 0).all()


def test_preprocess_without_blur_returns_grayscale():
    image = uniform_image((4, 4), value=90)
    assert (preprocess(image, blur=False) == 90).all()
    assert preprocess(image, blur=True)[0, 0] == 0


def test_downscale_limits_width_and_reports_scale():
    image = uniform_image((100, 200), value=128)
    resized, scale = downscale(image, 100)
    assert resized.shape == (50, 100, 4)
    assert resized.dtype == np.uint8
    assert scale == (0.5, 0.5)
    assert (resized[..., :3] == 128).all()


def test_downscale_noop_when_narrow():
    image = uniform_image((10, 20))
    resized, scale = downscale(image, 600)
    assert resized is image
    assert scale == (1.0, 1.0)
    resized, scale = downscale(image, None)
    assert scale == (1.0, 1.0)
