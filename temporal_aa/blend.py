"""
Blend weight estimation and the current/history blend.

The history weight starts from the temporal strength, is widened by local
contrast, and is pulled toward the current frame by motion and by
disocclusion:

    weight = lerp(0.50, 0.99, strength)
    weight = lerp(weight, weight * (0.6 + 2 * contrast), 0.5)
    weight = clamp(weight * speed_factor * depth_mask, 0, 0.95)

The 0.95 ceiling keeps a pixel from ever locking onto its history.
"""

from __future__ import annotations

import numpy as np

from .shading import lerp, safe_divide, saturate

BASELINE_FPS = 48.0
WEIGHT_MIN = 0.50
WEIGHT_MAX = 0.99
WEIGHT_CEILING = 0.95
SPEED_SCALE = 20.0
DEPTH_FALLOFF = 4.0
BLEND_EXPONENT = 2.0
SHARPNESS_GAIN = 32.0
MIN_FPS_FIX = 1e-3


def fps_fix(frametime_ms: float) -> float:
    """Frame time relative to the 48 FPS baseline (1.0 at 20.83 ms)."""
    return float(frametime_ms) / (1000.0 / BASELINE_FPS)


def speed_factor(speed: np.ndarray) -> np.ndarray:
    """1 - sqrt(saturate(speed * 20)): fast pixels lean on the current frame."""
    return 1.0 - np.sqrt(saturate(speed * SPEED_SCALE))


def depth_mask(min_depth: np.ndarray, last_depth: np.ndarray,
               current_depth: np.ndarray) -> np.ndarray:
    """
    Disocclusion mask, 1 keeps history and 0 rejects it.

    History that is nearer than anything in the current neighborhood belongs
    to geometry that has since moved away:

        delta = max(0, saturate(min_depth - last_depth)) / current_depth
        mask  = saturate(1 - (4 * delta) ^ 4)
    """
    delta = safe_divide(np.maximum(0.0, saturate(min_depth - last_depth)), current_depth)
    return saturate(1.0 - (DEPTH_FALLOFF * delta) ** 4)


def blend_weight(strength: float, contrast: np.ndarray, speed_fac: np.ndarray,
                 mask: np.ndarray, fps: float | None = None) -> np.ndarray:
    """
    History weight per pixel.

    Args:
        strength: Temporal filter strength in [0, 1]
        contrast: Local contrast, (H, W)
        speed_fac: speed_factor() of the motion, (H, W)
        mask: depth_mask(), (H, W)
        fps: When given, the weight is raised to this fps_fix() power so the
             history decays at the same rate per second at any frame rate.
             Floored at MIN_FPS_FIX so a zero frame time cannot turn a
             rejected weight of 0 into 1. The ceiling still holds after.
    """
    weight = lerp(WEIGHT_MIN, WEIGHT_MAX, strength)
    weight = lerp(weight, weight * (0.6 + contrast * 2.0), 0.5)
    weight = np.clip(weight * speed_fac * mask, 0.0, WEIGHT_CEILING)
    if fps is not None:
        weight = np.minimum(weight ** max(fps, MIN_FPS_FIX), WEIGHT_CEILING)
    return weight


def weight_ceiling(strength: float, contrast: float = 0.0) -> float:
    """Weight reached by a static, fully valid pixel."""
    return float(blend_weight(strength, np.float64(contrast), np.float64(1.0), np.float64(1.0)))


def power_blend(current: np.ndarray, history: np.ndarray, weight: np.ndarray,
                exponent: float = BLEND_EXPONENT) -> np.ndarray:
    """
    Blend in a power-curve domain: saturate(lerp(c^p, h^p, w)^(1/p)).

    Blending squared values keeps highlights from drifting the way a plain
    linear blend does.
    """
    w = weight[..., np.newaxis] if np.ndim(weight) == current.ndim - 1 else weight
    c = saturate(current) ** exponent
    hist = saturate(history) ** exponent
    return saturate(lerp(c, hist, w) ** (1.0 / exponent))


def sharpness_carry(contrast: np.ndarray, speed: np.ndarray, previous: np.ndarray,
                    mask: np.ndarray, sharpening: float, strength: float) -> np.ndarray:
    """
    Sharpness stored in the accumulation alpha for the final pass.

    Moving detail gets blurred by reprojection, so the fresh estimate grows
    with contrast and speed; it is averaged with last frame's value so the
    amount does not flicker, and dropped where history was rejected.
    """
    fresh = (0.01 + contrast) * speed ** 0.3 * SHARPNESS_GAIN * sharpening * strength
    return 0.5 * (fresh + np.maximum(previous, 0.0)) * mask
