"""
Synthetic frame sequences for experiments and tests.

Every generator returns stacked arrays keyed like the safetensors file
(color, depth, motion, frametime), so the result can go straight to
frame_io.save_sequence(**arrays) or FrameSequence.from_arrays(arrays).
"""

from __future__ import annotations

import numpy as np

from .pipeline import DEFAULT_FRAMETIME_MS


def _stack(colors, depths, motions, frametime_ms: float) -> dict[str, np.ndarray]:
    n = len(colors)
    return {
        'color': np.stack(colors),
        'depth': np.stack(depths),
        'motion': np.stack(motions),
        'frametime': np.full(n, frametime_ms, dtype=np.float64),
    }


def static_sequence(width: int, height: int, count: int,
                    color: tuple[float, float, float] = (0.6, 0.4, 0.2),
                    depth: float = 0.5,
                    frametime_ms: float = DEFAULT_FRAMETIME_MS) -> dict[str, np.ndarray]:
    """Constant colour, constant depth, no motion."""
    frame = np.broadcast_to(np.asarray(color, dtype=np.float64), (height, width, 3))
    depth_map = np.full((height, width), depth, dtype=np.float64)
    motion = np.zeros((height, width, 2), dtype=np.float64)
    return _stack([frame.copy() for _ in range(count)],
                  [depth_map.copy() for _ in range(count)],
                  [motion.copy() for _ in range(count)],
                  frametime_ms)


def gradient_background(width: int, height: int, checker: int = 4) -> np.ndarray:
    """Horizontal colour ramp with a faint checkerboard for detail."""
    x = np.linspace(0.0, 1.0, width)
    y = np.linspace(0.0, 1.0, height)
    xx, yy = np.meshgrid(x, y)

    img = np.empty((height, width, 3), dtype=np.float64)
    img[..., 0] = 0.2 + 0.6 * xx
    img[..., 1] = 0.3 + 0.4 * yy
    img[..., 2] = 0.8 - 0.6 * xx

    cy, cx = np.mgrid[0:height, 0:width]
    tiles = ((cx // checker) + (cy // checker)) % 2
    img += (tiles[..., np.newaxis] - 0.5) * 0.1
    return np.clip(img, 0.0, 1.0)


def moving_box_sequence(width: int = 64, height: int = 48, count: int = 16,
                        box_size: int = 12,
                        velocity_px: tuple[float, float] = (2.0, 1.0),
                        box_color: tuple[float, float, float] = (0.95, 0.9, 0.1),
                        background_depth: float = 0.9, box_depth: float = 0.3,
                        frametime_ms: float = DEFAULT_FRAMETIME_MS) -> dict[str, np.ndarray]:
    """
    A box sliding over a static gradient background.

    The box is nearer than the background, so the strip it uncovers each
    frame is disoccluded: its history holds the box at a nearer depth.
    Box pixels carry motion back to where they were last frame; background
    pixels carry none.
    """
    background = gradient_background(width, height)
    vx, vy = velocity_px
    x0 = (width - box_size) * 0.25
    y0 = (height - box_size) * 0.25
    cy, cx = np.mgrid[0:height, 0:width]

    colors, depths, motions = [], [], []
    for i in range(count):
        bx = x0 + vx * i
        by = y0 + vy * i
        inside = (cx >= bx) & (cx < bx + box_size) & (cy >= by) & (cy < by + box_size)

        color = background.copy()
        color[inside] = box_color
        depth = np.where(inside, box_depth, background_depth)

        motion = np.zeros((height, width, 2), dtype=np.float64)
        if i > 0:
            motion[inside] = (-vx / width, -vy / height)

        colors.append(color)
        depths.append(depth)
        motions.append(motion)

    return _stack(colors, depths, motions, frametime_ms)


SEQUENCES = {
    'static': static_sequence,
    'moving-box': moving_box_sequence,
}
