"""
Temporal accumulation filter.

Per displayed frame the passes run in a fixed order, each reading only what
earlier passes finished writing:

    capture  - sample colour and depth at the jittered position
    filter   - reproject, clip and blend history with the capture
    commit   - write accumulation and depth as next frame's history
    present  - contrast-adaptive sharpening for display

The producer of the next frame must render with next_jitter(); the filter
rebuilds the same offsets from the frame counter when it captures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

import numpy as np

from . import blend
from .config import DepthConfig, FilterConfig
from .depth import linearize_depth
from .history import HistoryBuffer
from .jitter import jitter_field
from .neighborhood import analyze_neighborhood
from .reproject import reproject_history
from .sampling import sample_linear, sample_point
from .shading import pixel_centers
from .sharpen import sharpen

DEFAULT_FRAMETIME_MS = 1000.0 / 60.0


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Frame:
    """
    One rendered frame.

    color: (H, W, 3) RGB
    depth: (H, W) raw depth buffer in [0, 1]
    """
    color: np.ndarray
    depth: np.ndarray

    def __post_init__(self):
        color = np.array(self.color, dtype=np.float64)
        depth = np.array(self.depth, dtype=np.float64)
        if color.ndim != 3 or color.shape[2] != 3:
            raise ValueError(f"Frame colour must be (H, W, 3), got {color.shape}")
        if depth.shape != color.shape[:2]:
            raise ValueError(f"Frame depth must be {color.shape[:2]}, got {depth.shape}")
        object.__setattr__(self, 'color', _readonly(color))
        object.__setattr__(self, 'depth', _readonly(depth))

    @property
    def width(self) -> int:
        return self.color.shape[1]

    @property
    def height(self) -> int:
        return self.color.shape[0]


@dataclass(frozen=True)
class MotionField:
    """
    Per-pixel displacement from the current to the previous position.

    vectors: (H, W, 2) in texture coordinates
    """
    vectors: np.ndarray

    def __post_init__(self):
        vectors = np.array(self.vectors, dtype=np.float64)
        if vectors.ndim != 3 or vectors.shape[2] != 2:
            raise ValueError(f"Motion vectors must be (H, W, 2), got {vectors.shape}")
        object.__setattr__(self, 'vectors', _readonly(vectors))

    @classmethod
    def zeros(cls, width: int, height: int) -> 'MotionField':
        return cls(np.zeros((height, width, 2)))

    @classmethod
    def from_pixels(cls, vectors_px: np.ndarray) -> 'MotionField':
        """Convert pixel-unit motion to texture coordinates."""
        vectors_px = np.asarray(vectors_px, dtype=np.float64)
        h, w = vectors_px.shape[:2]
        return cls(vectors_px / np.array([w, h], dtype=np.float64))


@dataclass
class FilterDiagnostics:
    """Intermediate per-pixel values of one filter pass."""
    weight: np.ndarray
    depth_mask: np.ndarray
    contrast: np.ndarray
    speed: np.ndarray
    fps_fix: float


@dataclass
class FrameResult:
    frame_index: int
    output: np.ndarray                  # (H, W, 3) sharpened colour
    accumulated: np.ndarray             # (H, W, 4) RGB + carried sharpness
    jitter: np.ndarray                  # (H, W, 2) offsets used for the capture
    diagnostics: FilterDiagnostics


@dataclass
class TemporalFilter:
    """
    Stateful driver of the four passes.

    The only state carried between frames is the history buffer and the
    frame counter; settings arrive as an immutable FilterConfig.
    """
    width: int
    height: int
    config: FilterConfig = field(default_factory=FilterConfig)
    depth_config: DepthConfig = field(default_factory=DepthConfig)
    frame_index: int = 0

    def __post_init__(self):
        self.history = HistoryBuffer(self.width, self.height)
        self._u, self._v = pixel_centers(self.width, self.height)

    def reset(self):
        """Forget all history and restart the jitter sequence."""
        self.history.reset()
        self.frame_index = 0

    def next_jitter(self, config: FilterConfig | None = None) -> np.ndarray:
        """Offsets (texture coordinates) the next captured frame uses."""
        config = config or self.config
        return jitter_field(self.width, self.height, self.frame_index,
                            config.jitter_pattern, config.jitter_strength,
                            config.jitter_centered)

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    def capture(self, frame: Frame, offsets: np.ndarray) -> np.ndarray:
        """
        Colour and linear depth at the jittered positions.

        Returns:
            (H, W, 4) RGB + linear depth
        """
        self._check_shape(frame.color.shape[:2], 'Frame')
        u = self._u + offsets[..., 0]
        v = self._v + offsets[..., 1]

        captured = np.empty((self.height, self.width, 4), dtype=np.float64)
        captured[..., :3] = sample_linear(frame.color, u, v)
        raw_depth = sample_point(frame.depth, u, v)
        captured[..., 3] = linearize_depth(raw_depth, self.depth_config.far_plane,
                                           self.depth_config.reversed)
        return captured

    def filter(self, captured: np.ndarray, motion: MotionField, offsets: np.ndarray,
               frametime_ms: float = DEFAULT_FRAMETIME_MS,
               config: FilterConfig | None = None) -> tuple[np.ndarray, FilterDiagnostics]:
        """
        Blend the capture with reprojected history.

        Returns:
            ((H, W, 4) accumulated RGB + sharpness, diagnostics)
        """
        config = config or self.config
        self._check_shape(motion.vectors.shape[:2], 'Motion field')

        u = self._u + offsets[..., 0]
        v = self._v + offsets[..., 1]

        bounds = analyze_neighborhood(captured, u, v)
        motion_at_center = sample_point(motion.vectors, u, v)
        history = reproject_history(self.history.previous_color, self.history.previous_depth,
                                    bounds, motion_at_center, u, v)

        fps = blend.fps_fix(frametime_ms)
        speed = np.linalg.norm(motion_at_center, axis=-1)
        mask = blend.depth_mask(bounds.min_depth, history.last_depth, bounds.center_depth)
        weight = blend.blend_weight(config.temporal_strength, bounds.contrast,
                                    blend.speed_factor(speed), mask,
                                    fps if config.frame_rate_compensation else None)

        accumulated = np.empty((self.height, self.width, 4), dtype=np.float64)
        accumulated[..., :3] = blend.power_blend(bounds.center[..., :3], history.color, weight)
        accumulated[..., 3] = blend.sharpness_carry(bounds.contrast, speed, history.sharpness, mask,
                                                    config.sharpening, config.temporal_strength)

        diagnostics = FilterDiagnostics(weight=weight, depth_mask=mask, contrast=bounds.contrast,
                                        speed=speed, fps_fix=fps)
        return accumulated, diagnostics

    def commit(self, accumulated: np.ndarray, captured: np.ndarray):
        self.history.commit(accumulated, captured[..., 3])

    def present(self, accumulated: np.ndarray) -> np.ndarray:
        return sharpen(accumulated)

    # -------------------------------------------------------------------------

    def process(self, frame: Frame, motion: MotionField | None = None,
                frametime_ms: float = DEFAULT_FRAMETIME_MS,
                config: FilterConfig | None = None) -> FrameResult:
        """Run all four passes for one frame and advance the frame counter."""
        config = config or self.config
        if motion is None:
            motion = MotionField.zeros(self.width, self.height)

        offsets = self.next_jitter(config)
        captured = self.capture(frame, offsets)
        accumulated, diagnostics = self.filter(captured, motion, offsets, frametime_ms, config)
        self.commit(accumulated, captured)
        output = self.present(accumulated)

        result = FrameResult(frame_index=self.frame_index, output=output, accumulated=accumulated,
                             jitter=offsets, diagnostics=diagnostics)
        self.frame_index += 1
        return result

    def _check_shape(self, shape: tuple, what: str):
        if tuple(shape) != (self.height, self.width):
            raise ValueError(f"{what} is {shape[1]}x{shape[0]}, filter was set up for "
                             f"{self.width}x{self.height} (use a new TemporalFilter per resolution)")


def run_sequence(frames: Iterable[Frame], motions: Iterable[MotionField | None] | None = None,
                 frametimes: Iterable[float] | None = None,
                 config: FilterConfig | None = None,
                 depth_config: DepthConfig | None = None) -> Iterator[FrameResult]:
    """
    Filter a whole sequence, yielding one result per frame.

    The filter is sized from the first frame.
    """
    frames = iter(frames)
    motions = iter(motions) if motions is not None else None
    frametimes = iter(frametimes) if frametimes is not None else None

    taa = None
    for frame in frames:
        if taa is None:
            taa = TemporalFilter(frame.width, frame.height,
                                 config=config or FilterConfig(),
                                 depth_config=depth_config or DepthConfig())
        motion = next(motions, None) if motions is not None else None
        frametime = next(frametimes, DEFAULT_FRAMETIME_MS) if frametimes is not None else DEFAULT_FRAMETIME_MS
        yield taa.process(frame, motion, frametime)
