"""
Neighborhood bounds around the jittered sample position.

Nine bilinear taps of the captured frame (RGB + linear depth in alpha):
the centre, four orthogonal neighbours one pixel away, and four diagonals
pulled in to (0.7, 0.7) so every ring tap sits at roughly the same radius.

In YCbCr space the taps give a per-channel min/max box (the depth channel
included) that reprojected history is clipped into, and a local contrast

    contrast = saturate(|max.Y - min.Y| ^ 0.75)

that widens the blend weight and drives the sharpness carried to the final
pass.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .color import rgb_to_ycbcr
from .sampling import sample_linear
from .shading import saturate

DIAGONAL_SCALE = 0.7

# (dx, dy) in pixels, centre first
NEIGHBORHOOD_OFFSETS = (
    (0.0, 0.0),
    (-1.0, 0.0),
    (1.0, 0.0),
    (0.0, -1.0),
    (0.0, 1.0),
    (-DIAGONAL_SCALE, -DIAGONAL_SCALE),
    (DIAGONAL_SCALE, -DIAGONAL_SCALE),
    (-DIAGONAL_SCALE, DIAGONAL_SCALE),
    (DIAGONAL_SCALE, DIAGONAL_SCALE),
)

CONTRAST_EXPONENT = 0.75


@dataclass
class NeighborhoodBounds:
    """
    Per-pixel bounds for one filter evaluation.

    minimum / maximum: (H, W, 4) YCbCr + depth
    contrast: (H, W) local contrast
    center: (H, W, 4) centre tap, RGB + depth (not transformed)
    """
    minimum: np.ndarray
    maximum: np.ndarray
    contrast: np.ndarray
    center: np.ndarray

    @property
    def min_depth(self) -> np.ndarray:
        return self.minimum[..., 3]

    @property
    def center_depth(self) -> np.ndarray:
        return self.center[..., 3]

    def clip(self, ycc: np.ndarray) -> np.ndarray:
        """Clamp YCbCr colour (first three channels) into the box."""
        return np.clip(ycc[..., :3], self.minimum[..., :3], self.maximum[..., :3])


def analyze_neighborhood(current: np.ndarray, u: np.ndarray, v: np.ndarray) -> NeighborhoodBounds:
    """
    Sample the nine-tap stencil around (u, v) and build the bounds.

    Args:
        current: Captured frame, (H, W, 4) RGB + linear depth
        u, v: Jittered texture coordinates, (H, W)
    """
    h, w = current.shape[:2]
    center = None
    lo = hi = None

    for dx, dy in NEIGHBORHOOD_OFFSETS:
        tap = sample_linear(current, u + dx / w, v + dy / h)
        if center is None:
            center = tap
        ycc = rgb_to_ycbcr(tap)
        if lo is None:
            lo, hi = ycc, ycc.copy()
        else:
            lo = np.minimum(lo, ycc)
            hi = np.maximum(hi, ycc)

    contrast = saturate(np.abs(hi[..., 0] - lo[..., 0]) ** CONTRAST_EXPONENT)
    return NeighborhoodBounds(minimum=lo, maximum=hi, contrast=contrast, center=center)
