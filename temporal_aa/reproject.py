"""
History reprojection and colour clipping.

Follows the motion vector back into last frame's accumulation, resamples it
with the 5-tap bicubic filter and clips the result into the current
neighborhood box in YCbCr space. Clipping is what keeps stale history from
ghosting.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .color import rgb_to_ycbcr, ycbcr_to_rgb
from .neighborhood import NeighborhoodBounds
from .sampling import sample_bicubic5, sample_point


@dataclass
class Reprojection:
    """
    color: (H, W, 3) history RGB clipped into the neighborhood box
    sharpness: (H, W) sharpness carried by the history alpha channel
    last_depth: (H, W) history depth at the reprojected position
    """
    color: np.ndarray
    sharpness: np.ndarray
    last_depth: np.ndarray


def reproject_history(history_color: np.ndarray, history_depth: np.ndarray,
                      bounds: NeighborhoodBounds, motion: np.ndarray,
                      u: np.ndarray, v: np.ndarray) -> Reprojection:
    """
    Fetch and clip last frame's accumulation.

    Args:
        history_color: Previous accumulation, (H, W, 4) RGB + sharpness
        history_depth: Previous linear depth, (H, W)
        bounds: Current neighborhood bounds
        motion: Motion at the centre tap in texture coordinates, (H, W, 2)
        u, v: Jittered texture coordinates, (H, W)
    """
    last_u = u + motion[..., 0]
    last_v = v + motion[..., 1]

    # Point filtered: blending depth across an edge invents geometry
    last_depth = sample_point(history_depth, last_u, last_v)

    history = sample_bicubic5(history_color, last_u, last_v)
    clipped = bounds.clip(rgb_to_ycbcr(history[..., :3]))

    return Reprojection(
        color=ycbcr_to_rgb(clipped),
        sharpness=history[..., 3],
        last_depth=last_depth,
    )
