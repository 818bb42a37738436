"""Grayscale conversion and smoothing of RGBA images.

The preprocessing stage turns an ``(h, w, 4)`` RGBA image into a single
channel intensity map that the edge detector operates on.  Arithmetic
follows an integer pipeline so that results are reproducible bit for bit:

1. Luma is computed as ``0.299 R + 0.587 G + 0.114 B`` and rounded half up to
   an 8‑bit value.  The alpha channel is ignored.
2. A 3×3 binomial kernel ``[1, 2, 1; 2, 4, 2; 1, 2, 1] / 16`` smooths the
   map.  Only interior pixels are convolved; the outermost rows and columns
   are left at zero.

Large photographs can optionally be reduced with :func:`downscale` before
analysis.  All coordinates produced downstream are then expressed in the
reduced grid.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike
from scipy.ndimage import correlate, zoom

__all__ = ["to_grayscale", "gaussian_blur", "preprocess", "downscale"]

GAUSSIAN_KERNEL = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.int64)
GAUSSIAN_KERNEL_SUM = 16


def _zero_border(arr: np.ndarray) -> np.ndarray:
    arr[0, :] = 0
    arr[-1, :] = 0
    arr[:, 0] = 0
    arr[:, -1] = 0
    return arr


def to_grayscale(image: ArrayLike) -> np.ndarray:
    """Convert an RGBA image to 8‑bit luma.

    Parameters
    ----------
    image : array‑like of shape (h, w, 4)
        Interleaved RGBA samples in the range 0–255.

    Returns
    -------
    gray : ndarray of shape (h, w), dtype uint8
        ``round(0.299 R + 0.587 G + 0.114 B)`` with halves rounded up.
    """
    rgba = np.asarray(image)
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("image must be an (h, w, 4) RGBA array")
    r = rgba[..., 0].astype(np.float64)
    g = rgba[..., 1].astype(np.float64)
    b = rgba[..., 2].astype(np.float64)
    luma = 0.299 * r + 0.587 * g + 0.114 * b
    return np.floor(luma + 0.5).astype(np.uint8)


def gaussian_blur(gray: ArrayLike) -> np.ndarray:
    """Smooth a grayscale map with the 3×3 binomial kernel.

    Border pixels are excluded from the convolution and set to zero.  Maps
    smaller than 3×3 have no interior and come back entirely zero.
    """
    src = np.asarray(gray)
    if src.ndim != 2:
        raise ValueError("gray must be a 2‑D array")
    out = np.zeros(src.shape, dtype=np.uint8)
    if src.shape[0] < 3 or src.shape[1] < 3:
        return out
    total = correlate(src.astype(np.int64), GAUSSIAN_KERNEL, mode="constant", cval=0)
    # (total + 8) // 16 rounds half up, matching round(total / 16) for non-negative sums
    blurred = (total + GAUSSIAN_KERNEL_SUM // 2) // GAUSSIAN_KERNEL_SUM
    out[1:-1, 1:-1] = blurred[1:-1, 1:-1]
    return _zero_border(out)


def preprocess(image: ArrayLike, *, blur: bool = True) -> np.ndarray:
    """Run grayscale conversion followed by optional smoothing."""
    gray = to_grayscale(image)
    if not blur:
        return gray
    return gaussian_blur(gray)


def downscale(image: ArrayLike, max_width: int | None) -> tuple[np.ndarray, tuple[float, float]]:
    """Shrink an RGBA image so that its width does not exceed ``max_width``.

    Parameters
    ----------
    image : array‑like of shape (h, w, 4)
        Source image.
    max_width : int or None
        Target maximum width in pixels.  ``None`` disables resizing.

    Returns
    -------
    resized : ndarray of shape (h', w', 4), dtype uint8
        The bilinearly resampled image, or the input unchanged when it is
        already narrow enough.
    scale : tuple of two floats
        ``(w' / w, h' / h)``; multiply source coordinates by these factors to
        obtain analysis coordinates.
    """
    rgba = np.asarray(image)
    height, width = rgba.shape[:2]
    if max_width is None or width <= max_width:
        return rgba, (1.0, 1.0)
    new_width = int(max_width)
    new_height = max(1, int(height * new_width / width))
    factors = (new_height / height, new_width / width, 1.0)
    resized = zoom(rgba.astype(np.float64), factors, order=1, mode="nearest", grid_mode=False)
    # zoom may be off by one pixel on either axis due to rounding
    resized = resized[:new_height, :new_width]
    resized = np.clip(np.rint(resized), 0, 255).astype(np.uint8)
    scale = (resized.shape[1] / width, resized.shape[0] / height)
    return resized, scale
