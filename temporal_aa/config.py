"""
Filter settings.

A flat set of knobs with no interdependent validation: scalars are clamped
into range, the jitter pattern accepts the enum, its name or its index.
Configs are frozen and passed into every frame, so changing a setting means
building a new config.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .depth import DEFAULT_FAR_PLANE
from .jitter import JitterPattern


def _clamp01(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


@dataclass(frozen=True)
class FilterConfig:
    temporal_strength: float = 0.5
    sharpening: float = 0.5
    jitter_strength: float = 1.0
    jitter_pattern: JitterPattern = JitterPattern.SOBOL
    frame_rate_compensation: bool = False
    jitter_centered: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'temporal_strength', _clamp01(self.temporal_strength))
        object.__setattr__(self, 'sharpening', _clamp01(self.sharpening))
        object.__setattr__(self, 'jitter_strength', _clamp01(self.jitter_strength))
        object.__setattr__(self, 'jitter_pattern', JitterPattern.parse(self.jitter_pattern))
        object.__setattr__(self, 'frame_rate_compensation', bool(self.frame_rate_compensation))
        object.__setattr__(self, 'jitter_centered', bool(self.jitter_centered))

    def with_changes(self, **changes) -> 'FilterConfig':
        return replace(self, **changes)

    @classmethod
    def from_args(cls, args) -> 'FilterConfig':
        """Build from an argparse namespace (see cli.add_filter_arguments)."""
        return cls(
            temporal_strength=args.strength,
            sharpening=args.sharpening,
            jitter_strength=args.jitter_strength,
            jitter_pattern=args.pattern,
            frame_rate_compensation=args.fps_compensation,
            jitter_centered=args.centered_jitter,
        )


@dataclass(frozen=True)
class DepthConfig:
    far_plane: float = DEFAULT_FAR_PLANE
    reversed: bool = False

    def __post_init__(self):
        # Never nearer than the near plane (1.0)
        object.__setattr__(self, 'far_plane', max(float(self.far_plane), 1.0))
        object.__setattr__(self, 'reversed', bool(self.reversed))

    @classmethod
    def from_args(cls, args) -> 'DepthConfig':
        return cls(far_plane=args.far_plane, reversed=args.reversed_depth)
