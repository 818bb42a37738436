"""Synthetic data generators for testing the crack pipeline.

This module builds RGBA images of stone surfaces with dark straight cracks
and returns a ground‑truth crack mask alongside.  The images are meant for
algorithm development and testing rather than photorealism.  Stone texture
is modelled as smoothed Gaussian noise, cracks as dark line segments with a
given thickness.

It also reproduces the random "mock" cracks that the demo front end once
padded its results with.  They are only available here, for fixtures, and
every generator takes an explicit ``seed`` so that runs are reproducible.

Example
-------

>>> image, gt = generate_synthetic_stone((200, 300), num_cracks=3, seed=1)
>>> result = analyze(image, AnalysisConfig.from_preset("sensitive"))
"""

from __future__ import annotations

import math

import numpy as np
from scipy.ndimage import gaussian_filter

from .tracing import Crack, Point, polyline_length

__all__ = ["draw_line", "generate_synthetic_stone", "generate_mock_cracks", "uniform_image"]


def uniform_image(shape: tuple[int, int], value: int = 128) -> np.ndarray:
    """Return an opaque RGBA image of a single gray level."""
    height, width = shape
    image = np.full((height, width, 4), value, dtype=np.uint8)
    image[..., 3] = 255
    return image


def _segment_distance(shape: tuple[int, int], start: tuple[float, float], end: tuple[float, float]) -> np.ndarray:
    """Distance of every pixel centre to the segment ``start``–``end``."""
    height, width = shape
    yy, xx = np.meshgrid(np.arange(height, dtype=np.float64), np.arange(width, dtype=np.float64), indexing="ij")
    x0, y0 = start
    x1, y1 = end
    dx, dy = x1 - x0, y1 - y0
    seg_len2 = dx * dx + dy * dy
    if seg_len2 == 0:
        return np.hypot(xx - x0, yy - y0)
    t = np.clip(((xx - x0) * dx + (yy - y0) * dy) / seg_len2, 0.0, 1.0)
    return np.hypot(xx - (x0 + t * dx), yy - (y0 + t * dy))


def draw_line(
    image: np.ndarray,
    start: tuple[float, float],
    end: tuple[float, float],
    value: int = 0,
    thickness: float = 1.0,
) -> np.ndarray:
    """Paint a line segment into an RGBA image in place.

    Parameters
    ----------
    image : ndarray of shape (h, w, 4)
        Target image; modified in place.
    start, end : tuple of two floats
        Segment endpoints as ``(x, y)``.
    value : int, optional
        Gray level written to the R, G and B channels.
    thickness : float, optional
        Line width in pixels.  A width of 1 paints the digital line through
        the two endpoints.

    Returns
    -------
    mask : ndarray of bool, shape (h, w)
        Pixels that were painted.
    """
    dist = _segment_distance(image.shape[:2], start, end)
    mask = dist <= max(thickness / 2.0, 0.5)
    image[mask, :3] = value
    return mask


def generate_synthetic_stone(
    shape: tuple[int, int] = (240, 320),
    *,
    num_cracks: int = 3,
    thickness: float = 2.0,
    background: int = 170,
    contrast: int = 140,
    texture_strength: float = 0.0,
    texture_smooth: float = 3.0,
    noise_sigma: float = 0.0,
    min_crack_length: float = 60.0,
    seed: int | None = 0,
) -> tuple[np.ndarray, np.ndarray]:
    """Generate a stone‑like RGBA image containing straight dark cracks.

    Parameters
    ----------
    shape : tuple of two ints
        Image size ``(height, width)``.
    num_cracks : int, optional
        Number of crack segments with random position and orientation.
    thickness : float, optional
        Crack width in pixels.
    background : int, optional
        Mean gray level of the stone.
    contrast : int, optional
        How much darker cracks are than the stone.
    texture_strength : float, optional
        Standard deviation, in gray levels, of a spatially correlated
        texture emulating mineral grains.  0 disables the texture.
    texture_smooth : float, optional
        Standard deviation of the Gaussian kernel used to smooth the texture
        field.  Larger values give coarser grains.
    noise_sigma : float, optional
        Standard deviation of additive per‑pixel Gaussian noise.
    min_crack_length : float, optional
        Lower bound on the length of each crack segment.
    seed : int or None, optional
        Seed for the random generator.

    Returns
    -------
    image : ndarray of shape (h, w, 4), dtype uint8
        Opaque RGBA image.
    gt_mask : ndarray of bool, shape (h, w)
        Ground‑truth crack pixels.
    """
    height, width = shape
    if height < 3 or width < 3:
        raise ValueError("shape must be at least 3x3")
    rng = np.random.default_rng(seed)
    gray = np.full(shape, float(background), dtype=np.float64)

    if texture_strength > 0.0:
        texture = gaussian_filter(rng.standard_normal(size=shape), sigma=texture_smooth)
        texture -= texture.mean()
        if texture.std() > 0:
            texture /= texture.std()
        gray += texture_strength * texture

    gt_mask = np.zeros(shape, dtype=bool)
    max_length = max(min_crack_length, 0.8 * min(height, width))
    for _ in range(num_cracks):
        length = rng.uniform(min_crack_length, max_length)
        angle = rng.uniform(0.0, math.pi)
        cx = rng.uniform(0.25 * width, 0.75 * width)
        cy = rng.uniform(0.25 * height, 0.75 * height)
        half_dx = 0.5 * length * math.cos(angle)
        half_dy = 0.5 * length * math.sin(angle)
        start = (cx - half_dx, cy - half_dy)
        end = (cx + half_dx, cy + half_dy)
        dist = _segment_distance(shape, start, end)
        gt_mask |= dist <= max(thickness / 2.0, 0.5)

    gray[gt_mask] -= contrast
    if noise_sigma > 0.0:
        gray += rng.normal(scale=noise_sigma, size=shape)

    gray = np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., 0] = gray
    image[..., 1] = gray
    image[..., 2] = gray
    image[..., 3] = 255
    return image, gt_mask


def generate_mock_cracks(width: int, height: int, *, seed: int | None = 0) -> list[Crack]:
    """Generate random straight cracks as used to pad demo output.

    Between 3 and 9 cracks are produced, each starting at least 50 pixels
    from the left and top edges with a random orientation and a length of
    50 to ``50 + 0.3 * min(width, height)`` pixels.  Points are placed every
    5 pixels; points falling outside the image are dropped and cracks with
    10 points or fewer are discarded.  ``direction`` is the generating angle.
    """
    if width <= 100 or height <= 100:
        raise ValueError("mock cracks need an image larger than 100x100")
    rng = np.random.default_rng(seed)
    count = max(3, int(rng.random() * 8) + 2)
    cracks: list[Crack] = []
    for _ in range(count):
        strength = rng.random() * 100 + 50
        start_x = int(rng.random() * (width - 100)) + 50
        start_y = int(rng.random() * (height - 100)) + 50
        angle = rng.random() * math.pi * 2
        length = rng.random() * min(width, height) * 0.3 + 50
        n = int(length / 5)
        points = []
        for j in range(n):
            t = j / n
            x = math.floor(start_x + math.cos(angle) * length * t)
            y = math.floor(start_y + math.sin(angle) * length * t)
            if 0 <= x < width and 0 <= y < height:
                points.append(Point(x, y))
        if len(points) > 10:
            cracks.append(
                Crack(
                    points=tuple(points),
                    length=polyline_length(points),
                    direction=angle,
                    strength=float(strength),
                )
            )
    return cracks
