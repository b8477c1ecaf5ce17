"""
Luma/chroma colour transform used for neighborhood clamping.

Clamping and contrast measurement run on a luma-dominant axis so strongly
coloured but photometrically similar pixels are not mistaken for ghosts.

Forward (BT.601 luma, scaled colour differences):
    Y  = 0.299 R + 0.587 G + 0.114 B
    Cb = (B - Y) * 0.565
    Cr = (R - Y) * 0.713

Inverse, usually quoted as R = Y + 1.403 Cr, G = Y - 0.344 Cb - 0.714 Cr,
B = Y + 1.770 Cb. Those are the 3-decimal roundings of the exact inverse
below; the exact values keep the round trip within 1e-5.
"""

import numpy as np

LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

CB_SCALE = 0.565
CR_SCALE = 0.713

# Exact inverse of the forward transform
CR_TO_R = 1.0 / CR_SCALE                        # 1.40252...
CB_TO_B = 1.0 / CB_SCALE                        # 1.76991...
CB_TO_G = LUMA_B * CB_TO_B / LUMA_G             # 0.34369...
CR_TO_G = LUMA_R * CR_TO_R / LUMA_G             # 0.71417...


def rgb_to_ycbcr(rgb: np.ndarray) -> np.ndarray:
    """
    Convert RGB(A) to YCbCr(A) along the last axis.

    A fourth channel (alpha or depth) is passed through unchanged.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    y = LUMA_R * r + LUMA_G * g + LUMA_B * b
    cb = (b - y) * CB_SCALE
    cr = (r - y) * CR_SCALE

    out = np.empty_like(rgb)
    out[..., 0] = y
    out[..., 1] = cb
    out[..., 2] = cr
    if rgb.shape[-1] > 3:
        out[..., 3:] = rgb[..., 3:]
    return out


def ycbcr_to_rgb(ycc: np.ndarray) -> np.ndarray:
    """Inverse of rgb_to_ycbcr; a fourth channel is passed through unchanged."""
    ycc = np.asarray(ycc, dtype=np.float64)
    y, cb, cr = ycc[..., 0], ycc[..., 1], ycc[..., 2]

    out = np.empty_like(ycc)
    out[..., 0] = y + CR_TO_R * cr
    out[..., 1] = y - CB_TO_G * cb - CR_TO_G * cr
    out[..., 2] = y + CB_TO_B * cb
    if ycc.shape[-1] > 3:
        out[..., 3:] = ycc[..., 3:]
    return out
