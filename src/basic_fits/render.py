"""Terminal rendering of 2-D images as ASCII art.

Brightest pixels render as ``$``, the faintest as ``.`` (light text on a
dark terminal).
"""

from __future__ import annotations

import math
from typing import Literal

import numpy as np


GRAY_RAMP = (
    "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'."
)
MIN_GRAY = 0.0
MAX_GRAY = 255.0


def normalize(arr: np.ndarray, vmin: float | None = None, vmax: float | None = None) -> np.ndarray:
    """Linearly map ``[vmin, vmax]`` onto ``[0, 255]``.

    Limits default to the finite min/max of ``arr``. Values outside are
    clipped, NaNs become 0. A flat image maps to 0 everywhere.
    """

    a = np.asarray(arr, dtype=np.float64)
    finite = a[np.isfinite(a)]
    if finite.size == 0:
        return np.zeros_like(a)
    lo = float(np.min(finite)) if vmin is None else float(vmin)
    hi = float(np.max(finite)) if vmax is None else float(vmax)
    if not hi > lo:
        return np.zeros_like(a)
    x = (np.clip(a, lo, hi) - lo) / (hi - lo)
    x = np.nan_to_num(x, nan=0.0, posinf=1.0, neginf=0.0)
    return x * (MAX_GRAY - MIN_GRAY) + MIN_GRAY


def log_stretch(arr: np.ndarray, vmin: float, vmax: float) -> np.ndarray:
    """Clip to ``[vmin, vmax]`` then apply ``log10(1 + x)``.

    ``vmin`` must be > -1.
    """

    if vmin <= -1:
        raise ValueError(f"log stretch needs vmin > -1, got {vmin}")
    a = np.clip(np.asarray(arr, dtype=np.float64), vmin, vmax)
    return np.log10(1.0 + a)


def gray_to_char(value: float) -> str:
    """Character for one gray value in ``[0, 255]``."""

    v = min(max(float(value), MIN_GRAY), MAX_GRAY)
    n = len(GRAY_RAMP)
    idx = int(math.floor((1.0 - (v - MIN_GRAY) / (MAX_GRAY - MIN_GRAY)) * (n - 1)))
    return GRAY_RAMP[idx]


def to_ascii(
    image: np.ndarray,
    *,
    width: int = 80,
    vmin: float | None = None,
    vmax: float | None = None,
    origin: Literal["lower", "upper"] = "lower",
) -> list[str]:
    """Render a 2-D array (``shape == (NAXIS2, NAXIS1)``) as text lines.

    The image is subsampled to at most ``width`` columns; rows use twice the
    column step since terminal cells are about twice as tall as wide. With
    ``origin="lower"`` the first image row is printed last, as image viewers
    show FITS images.
    """

    a = np.asarray(image)
    if a.ndim != 2:
        raise ValueError(f"expected a 2-D image, got shape {a.shape}")
    if width < 1:
        raise ValueError("width must be >= 1")

    ny, nx = a.shape
    xstep = max(1, math.ceil(nx / width))
    ystep = 2 * xstep
    small = a[::ystep, ::xstep]
    gray = normalize(small, vmin, vmax)
    if origin == "lower":
        gray = gray[::-1]
    return ["".join(gray_to_char(v) for v in row) for row in gray]
