"""Raw depth buffer to linear [0, 1] depth."""

import numpy as np

NEAR_PLANE = 1.0
DEFAULT_FAR_PLANE = 1000.0


def linearize_depth(raw: np.ndarray, far_plane: float = DEFAULT_FAR_PLANE,
                    reversed_depth: bool = False) -> np.ndarray:
    """
    Linearise a hardware depth buffer.

    Uses d / (far - d * (far - near)) with near = 1, which maps raw 0 to 0
    and raw 1 to 1. Reversed-Z buffers are flipped first.

    Args:
        raw: Raw depth values in [0, 1]
        far_plane: Far plane distance in near-plane units
        reversed_depth: Depth buffer stores 1 at the near plane

    Returns:
        Linear depth in [0, 1], same shape as raw
    """
    d = np.clip(np.asarray(raw, dtype=np.float64), 0.0, 1.0)
    if reversed_depth:
        d = 1.0 - d
    return d / (far_plane - d * (far_plane - NEAR_PLANE))
