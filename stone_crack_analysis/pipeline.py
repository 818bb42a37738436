"""End‑to‑end crack detection and wedge planning.

:func:`analyze` is a pure function of its inputs: it keeps no state between
calls, so different images may be analysed concurrently from separate
threads or processes.  Acquiring the image and drawing the results are left
to the caller.

Example
-------

>>> from stone_crack_analysis import AnalysisConfig, analyze, generate_synthetic_stone
>>> image, _ = generate_synthetic_stone((240, 320), num_cracks=2, seed=7)
>>> result = analyze(image, AnalysisConfig.from_preset("sensitive"))
>>> len(result.wedge_plan) <= 8
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from .config import AnalysisConfig
from .edge_detection import detect_edges
from .errors import InvalidConfig, InvalidInput
from .planning import WedgeCandidate, plan_wedges
from .preprocessing import downscale, preprocess
from .tracing import Crack, trace_cracks
from .validation import validate_cracks

__all__ = ["PixelBuffer", "AnalysisResult", "analyze"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelBuffer:
    """Raw interleaved RGBA bytes with their dimensions."""

    width: int
    height: int
    pixels: bytes

    @classmethod
    def from_array(cls, image: ArrayLike) -> "PixelBuffer":
        arr = np.ascontiguousarray(np.asarray(image, dtype=np.uint8))
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise InvalidInput("image must be an (h, w, 4) RGBA array")
        return cls(width=arr.shape[1], height=arr.shape[0], pixels=arr.tobytes())

    def as_array(self) -> np.ndarray:
        """Return a read‑only ``(h, w, 4)`` view of the pixels."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidInput(f"image has zero area ({self.width}x{self.height})")
        if not isinstance(self.pixels, (bytes, bytearray, memoryview)):
            raise InvalidInput(f"pixels must be a bytes-like object, got {type(self.pixels).__name__}")
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise InvalidInput(
                f"pixel buffer holds {len(self.pixels)} bytes, expected {expected} "
                f"for a {self.width}x{self.height} RGBA image"
            )
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 4)


@dataclass(frozen=True)
class AnalysisResult:
    """Output of :func:`analyze`.

    Attributes
    ----------
    cracks : list of Crack
        Validated cracks in detection order.
    wedge_plan : list of WedgeCandidate
        Accepted wedge points in placement order.
    truncated : bool
        ``True`` if a resource ceiling cut the crack scan short.
    width, height : int
        Size of the grid the coordinates refer to.
    scale : tuple of two floats
        ``(sx, sy)`` factors mapping source pixels to the analysis grid.
        Both are 1.0 unless ``max_width`` caused a downscale.
    """

    cracks: list[Crack] = field(default_factory=list)
    wedge_plan: list[WedgeCandidate] = field(default_factory=list)
    truncated: bool = False
    width: int = 0
    height: int = 0
    scale: tuple[float, float] = (1.0, 1.0)

    def to_source(self, x: float, y: float) -> tuple[float, float]:
        """Map analysis‑grid coordinates back to the source image."""
        sx, sy = self.scale
        return x / sx, y / sy


ImageInput = Union[PixelBuffer, ArrayLike]


def _as_rgba(image: ImageInput | None) -> np.ndarray:
    if image is None:
        raise InvalidInput("no image supplied")
    if isinstance(image, PixelBuffer):
        return image.as_array()
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise InvalidInput(f"image must be an (h, w, 4) RGBA array, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidInput(f"image has zero area ({arr.shape[1]}x{arr.shape[0]})")
    if arr.dtype != np.uint8:
        if np.issubdtype(arr.dtype, np.floating) and not np.isfinite(arr).all():
            raise InvalidInput("image contains non-finite samples")
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidInput("RGBA samples must lie in 0–255")
        arr = arr.astype(np.uint8)
    return arr


def analyze(image: ImageInput | None, config: AnalysisConfig | None = None) -> AnalysisResult:
    """Detect cracks in an RGBA image and plan wedge positions.

    Parameters
    ----------
    image : PixelBuffer or array‑like of shape (h, w, 4)
        The stone surface photograph.
    config : AnalysisConfig, optional
        Parameters for the run.  Defaults to the ``strict`` preset.

    Returns
    -------
    result : AnalysisResult
        Cracks, the wedge plan and whether the scan was truncated.  An image
        without edges gives an empty result.

    Raises
    ------
    InvalidInput
        If the image is missing, has zero area or is not RGBA.
    InvalidConfig
        If ``config`` contains out‑of‑range values.
    """
    cfg = config if config is not None else AnalysisConfig()
    if not isinstance(cfg, AnalysisConfig):
        raise InvalidConfig(f"config must be an AnalysisConfig, got {type(cfg).__name__}")
    cfg.validate()
    rgba = _as_rgba(image)

    rgba, scale = downscale(rgba, cfg.max_width)
    height, width = rgba.shape[:2]
    logger.debug("Analysing %dx%d image (scale %.3f, %.3f)", width, height, *scale)

    blurred = preprocess(rgba, blur=cfg.blur_enabled)
    edges = detect_edges(blurred, cfg.edge_threshold, smoothed=cfg.blur_enabled)
    traced = trace_cracks(edges, cfg)
    cracks = validate_cracks(traced.cracks, width, height, cfg)
    plan = plan_wedges(cracks, cfg)

    logger.info(
        "Detected %d cracks (%d candidates) and %d wedge points%s",
        len(cracks),
        len(traced.cracks),
        len(plan),
        " [truncated]" if traced.truncated else "",
    )
    return AnalysisResult(
        cracks=cracks,
        wedge_plan=plan,
        truncated=traced.truncated,
        width=width,
        height=height,
        scale=scale,
    )
