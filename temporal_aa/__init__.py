"""Temporal accumulation filter: jittered capture, clipped history, adaptive sharpening."""

from .color import rgb_to_ycbcr, ycbcr_to_rgb
from .config import DepthConfig, FilterConfig
from .history import HistoryBuffer
from .jitter import JitterPattern, halton, jitter, jitter_field, sobol
from .pipeline import Frame, FrameResult, MotionField, TemporalFilter, run_sequence
from .sharpen import sharpen

__version__ = '0.1.0'

__all__ = [
    'DepthConfig',
    'FilterConfig',
    'Frame',
    'FrameResult',
    'HistoryBuffer',
    'JitterPattern',
    'MotionField',
    'TemporalFilter',
    'halton',
    'jitter',
    'jitter_field',
    'rgb_to_ycbcr',
    'run_sequence',
    'sharpen',
    'sobol',
    'ycbcr_to_rgb',
]
