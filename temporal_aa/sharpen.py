"""
Contrast-adaptive sharpening of the accumulated frame.

Samples a 3x3-equivalent stencil (orthogonal taps at one pixel, diagonal taps
pulled in to 0.7) and limits the sharpening lobe by how much headroom the
local min/max box leaves:

    amp    = saturate(min(box_min, 1 - box_max) / box_max)
    cross  = -1 / (rsqrt(amp) * (-3 * contrast + 8))
    sharp  = saturate((sum_of_4_orthogonal * cross + center) / (4 * cross + 1))

The result is blended with the centre by the sharpness carried in the
accumulation alpha channel.
"""

import numpy as np

from .neighborhood import DIAGONAL_SCALE
from .sampling import sample_linear
from .shading import lerp, pixel_centers, safe_divide, saturate

SHARPEN_CONTRAST = 0.9

ORTHOGONAL_OFFSETS = ((0.0, -1.0), (-1.0, 0.0), (1.0, 0.0), (0.0, 1.0))
DIAGONAL_OFFSETS = (
    (-DIAGONAL_SCALE, -DIAGONAL_SCALE),
    (DIAGONAL_SCALE, -DIAGONAL_SCALE),
    (-DIAGONAL_SCALE, DIAGONAL_SCALE),
    (DIAGONAL_SCALE, DIAGONAL_SCALE),
)


def sharpen(accumulated: np.ndarray, contrast: float = SHARPEN_CONTRAST) -> np.ndarray:
    """
    Sharpen the accumulation for presentation.

    Args:
        accumulated: (H, W, 4) RGB + sharpness
        contrast: Sharpening contrast in [0, 1], higher gives a stronger lobe

    Returns:
        (H, W, 3) RGB in [0, 1]
    """
    h, w = accumulated.shape[:2]
    rgb = accumulated[..., :3]
    u, v = pixel_centers(w, h)

    def tap(dx: float, dy: float) -> np.ndarray:
        return sample_linear(rgb, u + dx / w, v + dy / h)

    center = rgb
    orthogonal = [tap(dx, dy) for dx, dy in ORTHOGONAL_OFFSETS]
    diagonal = [tap(dx, dy) for dx, dy in DIAGONAL_OFFSETS]

    box = np.stack([center] + orthogonal + diagonal)
    box_min = box.min(axis=0)
    box_max = box.max(axis=0)

    amp = saturate(safe_divide(np.minimum(box_min, 1.0 - box_max), box_max))
    peak = -3.0 * contrast + 8.0
    # -1 / (rsqrt(amp) * peak), written without the reciprocal square root
    cross = -np.sqrt(amp) / peak
    rcp_weight = 1.0 / (4.0 * cross + 1.0)

    window = (orthogonal[0] + orthogonal[1]) + (orthogonal[2] + orthogonal[3])
    sharp = saturate((window * cross + center) * rcp_weight)

    amount = saturate(accumulated[..., 3])[..., np.newaxis]
    return lerp(center, sharp, amount)
