"""
Double-buffered history.

Two named slots per component, and an explicit read index that flips once
per frame. The filter reads the slot at the read index; commit() writes the
other slot in full and then flips. Reader and writer never share an array
within a frame.
"""

import numpy as np


class HistoryBuffer:
    """Accumulated RGB + sharpness and linear depth from the previous frame."""

    SLOT_NAMES = ('a', 'b')

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"History resolution must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.color = {name: np.zeros((height, width, 4), dtype=np.float64) for name in self.SLOT_NAMES}
        self.depth = {name: np.zeros((height, width), dtype=np.float64) for name in self.SLOT_NAMES}
        self.read_index = 0
        self.commits = 0

    @property
    def read_slot(self) -> str:
        return self.SLOT_NAMES[self.read_index]

    @property
    def write_slot(self) -> str:
        return self.SLOT_NAMES[1 - self.read_index]

    @property
    def previous_color(self) -> np.ndarray:
        return self.color[self.read_slot]

    @property
    def previous_depth(self) -> np.ndarray:
        return self.depth[self.read_slot]

    def commit(self, color: np.ndarray, depth: np.ndarray):
        """Write this frame's accumulation and depth, then make them the previous frame."""
        if color.shape != (self.height, self.width, 4):
            raise ValueError(f"History colour must be {(self.height, self.width, 4)}, got {color.shape}")
        if depth.shape != (self.height, self.width):
            raise ValueError(f"History depth must be {(self.height, self.width)}, got {depth.shape}")

        slot = self.write_slot
        np.copyto(self.color[slot], color)
        np.copyto(self.depth[slot], depth)
        self.read_index = 1 - self.read_index
        self.commits += 1

    def reset(self):
        for name in self.SLOT_NAMES:
            self.color[name].fill(0.0)
            self.depth[name].fill(0.0)
        self.read_index = 0
        self.commits = 0
