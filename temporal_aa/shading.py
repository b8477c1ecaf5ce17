"""
Shader-style math helpers over numpy arrays.

The filter is written as whole-frame array code, but its formulas come from
per-pixel shader math; these keep the formulas readable.
"""

import numpy as np


def saturate(x):
    """Clamp to [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def lerp(a, b, t):
    """Linear interpolation a + t * (b - a)."""
    return a + t * (b - a)


def safe_divide(num, den, eps: float = 1e-8):
    """num / den with |den| floored at eps (sign preserved, 0 treated as +)."""
    den = np.asarray(den, dtype=np.float64)
    den = np.where(den < 0.0, np.minimum(den, -eps), np.maximum(den, eps))
    return num / den


def pixel_centers(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Texture coordinates of every pixel centre.

    Returns:
        (u, v) arrays of shape (height, width), pixel (x, y) at
        ((x + 0.5) / width, (y + 0.5) / height).
    """
    u = (np.arange(width, dtype=np.float64) + 0.5) / width
    v = (np.arange(height, dtype=np.float64) + 0.5) / height
    return np.meshgrid(u, v)
