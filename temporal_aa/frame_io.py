"""
Frame sequence storage.

Sequences live in one safetensors file, stored as FP32:

    color     (N, H, W, 3)  RGB in [0, 1]
    depth     (N, H, W)     raw depth in [0, 1]
    motion    (N, H, W, 2)  texture-coordinate displacement to previous frame
    frametime (N,)          milliseconds, optional

File metadata is a str -> str dict (safetensors only stores strings).

Output frames are written as 8-bit PNG through Pillow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from PIL import Image
from safetensors import SafetensorError, safe_open
from safetensors.numpy import save_file

from .pipeline import DEFAULT_FRAMETIME_MS, Frame, MotionField

REQUIRED_TENSORS = ('color', 'depth', 'motion')


@dataclass
class FrameSequence:
    frames: list[Frame]
    motions: list[MotionField]
    frametimes: list[float]
    metadata: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def width(self) -> int:
        return self.frames[0].width if self.frames else 0

    @property
    def height(self) -> int:
        return self.frames[0].height if self.frames else 0

    @classmethod
    def from_arrays(cls, tensors: dict[str, np.ndarray],
                    metadata: dict[str, str] | None = None) -> 'FrameSequence':
        """Build from stacked arrays keyed like the file tensors."""
        missing = [name for name in REQUIRED_TENSORS if name not in tensors]
        if missing:
            raise ValueError(f"missing tensors: {', '.join(missing)}")

        color, depth, motion = tensors['color'], tensors['depth'], tensors['motion']
        n = color.shape[0]
        if tensors.get('frametime') is not None:
            frametimes = [float(t) for t in tensors['frametime']]
        else:
            frametimes = [DEFAULT_FRAMETIME_MS] * n

        return cls(
            frames=[Frame(color[i], depth[i]) for i in range(n)],
            motions=[MotionField(motion[i]) for i in range(n)],
            frametimes=frametimes,
            metadata=dict(metadata or {}),
        )


def save_sequence(path: Path, color: np.ndarray, depth: np.ndarray, motion: np.ndarray,
                  frametime: np.ndarray | None = None, metadata: dict[str, str] | None = None):
    """Save stacked sequence arrays to a safetensors file."""
    n = color.shape[0]
    if color.ndim != 4 or color.shape[3] != 3:
        raise ValueError(f"color must be (N, H, W, 3), got {color.shape}")
    if depth.shape != color.shape[:3]:
        raise ValueError(f"depth must be {color.shape[:3]}, got {depth.shape}")
    if motion.shape != color.shape[:3] + (2,):
        raise ValueError(f"motion must be {color.shape[:3] + (2,)}, got {motion.shape}")

    tensors = {
        'color': np.ascontiguousarray(color, dtype=np.float32),
        'depth': np.ascontiguousarray(depth, dtype=np.float32),
        'motion': np.ascontiguousarray(motion, dtype=np.float32),
    }
    if frametime is not None:
        frametime = np.asarray(frametime, dtype=np.float32).reshape(-1)
        if frametime.shape != (n,):
            raise ValueError(f"frametime must have {n} entries, got {frametime.shape[0]}")
        tensors['frametime'] = np.ascontiguousarray(frametime)

    meta = {str(k): str(v) for k, v in (metadata or {}).items()}
    meta.setdefault('frames', str(n))
    save_file(tensors, str(path), metadata=meta)


def load_sequence(path: Path) -> FrameSequence:
    """Load a sequence written by save_sequence()."""
    tensors = {}
    try:
        with safe_open(str(path), framework="numpy") as f:
            metadata = dict(f.metadata() or {})
            for key in f.keys():
                tensors[key] = f.get_tensor(key)
    except (SafetensorError, OSError) as e:
        raise ValueError(f"{path}: not a readable safetensors file ({e})") from e

    try:
        return FrameSequence.from_arrays(tensors, metadata)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e


def to_uint8(color: np.ndarray) -> np.ndarray:
    """[0, 1] float to uint8 with rounding (truncation drifts dark)."""
    return np.clip(np.round(np.asarray(color, dtype=np.float64) * 255.0), 0, 255).astype(np.uint8)


def save_png(color: np.ndarray, path: Path):
    """Save an (H, W, 3) [0, 1] image as 8-bit RGB PNG."""
    Image.fromarray(to_uint8(color)).save(path)


def load_png(path: Path) -> np.ndarray:
    """Load a PNG as (H, W, 3) float in [0, 1]."""
    img = Image.open(path)
    if img.mode != 'RGB':
        img = img.convert('RGB')
    return np.array(img, dtype=np.float64) / 255.0
