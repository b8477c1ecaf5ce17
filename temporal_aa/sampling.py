"""
Texture sampling with clamp-to-edge addressing.

Textures are (H, W) or (H, W, C) arrays, coordinates are normalised texture
coordinates (u, v) of any matching shape. Coordinates outside [0, 1] read
the edge texels, so motion vectors pointing off-screen need no extra checks.
"""

import numpy as np


def _texel_grid(texture: np.ndarray, u, v) -> tuple[np.ndarray, np.ndarray]:
    """Texture coordinates to continuous texel coordinates (texel centres on integers)."""
    h, w = texture.shape[:2]
    return (np.asarray(u, dtype=np.float64) * w - 0.5,
            np.asarray(v, dtype=np.float64) * h - 0.5)


def _expand(weight: np.ndarray, texture: np.ndarray) -> np.ndarray:
    weight = np.asarray(weight)
    return weight[..., np.newaxis] if texture.ndim == 3 else weight


def sample_point(texture: np.ndarray, u, v) -> np.ndarray:
    """Nearest-texel sample."""
    h, w = texture.shape[:2]
    x = np.clip(np.floor(np.asarray(u, dtype=np.float64) * w), 0, w - 1).astype(np.intp)
    y = np.clip(np.floor(np.asarray(v, dtype=np.float64) * h), 0, h - 1).astype(np.intp)
    return texture[y, x]


def sample_linear(texture: np.ndarray, u, v) -> np.ndarray:
    """Bilinear sample."""
    h, w = texture.shape[:2]
    px, py = _texel_grid(texture, u, v)

    x0 = np.floor(px)
    y0 = np.floor(py)
    fx = _expand(px - x0, texture)
    fy = _expand(py - y0, texture)

    x0i = np.clip(x0, 0, w - 1).astype(np.intp)
    x1i = np.clip(x0 + 1, 0, w - 1).astype(np.intp)
    y0i = np.clip(y0, 0, h - 1).astype(np.intp)
    y1i = np.clip(y0 + 1, 0, h - 1).astype(np.intp)

    top = texture[y0i, x0i] * (1.0 - fx) + texture[y0i, x1i] * fx
    bottom = texture[y1i, x0i] * (1.0 - fx) + texture[y1i, x1i] * fx
    return top * (1.0 - fy) + bottom * fy


def catmull_rom_weights(f: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Catmull-Rom weights for fractional position f in [0, 1).

    Returns (w0, w1, w2, w3) for the texels at -1, 0, +1, +2.
    """
    f2 = f * f
    f3 = f2 * f
    w0 = -0.5 * f3 + f2 - 0.5 * f
    w1 = 1.5 * f3 - 2.5 * f2 + 1.0
    w3 = 0.5 * f3 - 0.5 * f2
    w2 = 1.0 - w0 - w1 - w3
    return w0, w1, w2, w3


def sample_bicubic5(texture: np.ndarray, u, v) -> np.ndarray:
    """
    Catmull-Rom bicubic sample from five bilinear taps.

    The middle two texels of each axis are merged into one bilinear tap
    (weight w12 at offset w2 / w12), and the four corner taps of the 3x3
    tap grid are dropped. The dropped weight is exactly
    (w0 + w3)_x * (w0 + w3)_y = 0.25 * (f - f^2)_x * (f - f^2)_y,
    so the sum is rescaled by 1 / (1 - that). The denominator never drops
    below 1 - 1/64.

    Negative lobes can ring below zero, so the result is floored at 0.
    """
    h, w = texture.shape[:2]
    px = np.asarray(u, dtype=np.float64) * w
    py = np.asarray(v, dtype=np.float64) * h

    # Centre of the texel at or left/above of the sample point
    cx = np.floor(px - 0.5) + 0.5
    cy = np.floor(py - 0.5) + 0.5
    fx = px - cx
    fy = py - cy

    w0x, w1x, w2x, w3x = catmull_rom_weights(fx)
    w0y, w1y, w2y, w3y = catmull_rom_weights(fy)
    w12x = w1x + w2x
    w12y = w1y + w2y

    # Tap positions back in texture coordinates
    u0 = (cx - 1.0) / w
    u12 = (cx + w2x / w12x) / w
    u3 = (cx + 2.0) / w
    v0 = (cy - 1.0) / h
    v12 = (cy + w2y / w12y) / h
    v3 = (cy + 2.0) / h

    color = (sample_linear(texture, u12, v0) * _expand(w12x * w0y, texture)
             + sample_linear(texture, u0, v12) * _expand(w0x * w12y, texture)
             + sample_linear(texture, u12, v12) * _expand(w12x * w12y, texture)
             + sample_linear(texture, u3, v12) * _expand(w3x * w12y, texture)
             + sample_linear(texture, u12, v3) * _expand(w12x * w3y, texture))

    norm = 1.0 / (1.0 - (fx - fx * fx) * (fy - fy * fy) * 0.25)
    return np.maximum(color * _expand(norm, texture), 0.0)
