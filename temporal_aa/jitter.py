"""
Sub-pixel jitter sequences.

Every pattern is a pure function of (x, y, frame): nothing is stored between
frames, so the offset used for a capture can always be rebuilt later.

Patterns:
    GRID     - no jitter, (0, 0)
    RANDOM   - sine hash of (x ^ y) + frame, sample (r, 1 - r)
    HALTON   - bases 2 and 3 from index (x ^ y) + frame, 8 digits max
    POISSON  - one of 32 disk samples, picked and rotated per pixel and frame
    SOBOL    - scrambled van der Corput over frame % 1024, sample (v, 1 - v)

Offsets are the raw samples, scaled by the jitter strength and the size of
one pixel: the unit-square patterns land in [0, 1] and the rotated disk
sample in [-1, 1]. With centered=True they are moved onto the pixel centre
instead (unit-square samples minus 0.5, the disk sample halved), keeping
every offset within half a pixel. GRID is (0, 0) either way.

All integer hashing is done in uint64 and masked back to 32 bits, which
gives the same results as 32-bit shader arithmetic.
"""

from __future__ import annotations

import enum
from typing import Callable

import numpy as np

MASK32 = np.uint64(0xFFFFFFFF)

SOBOL_PERIOD = 1024
HALTON_MAX_DIGITS = 8
POISSON_TABLE_SIZE = 32


class JitterPattern(enum.IntEnum):
    GRID = 1
    RANDOM = 2
    HALTON = 3
    POISSON = 4
    SOBOL = 5

    @classmethod
    def parse(cls, value) -> 'JitterPattern':
        """Accept a JitterPattern, its name (any case) or its 1-based index."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace('-', '_')
            if key.isdigit():
                return cls(int(key))
            aliases = {'GRID_ALIGNED': 'GRID', 'NONE': 'GRID', 'POISSON_DISK': 'POISSON'}
            key = aliases.get(key, key)
            if key not in cls.__members__:
                names = ', '.join(p.name.lower() for p in cls)
                raise ValueError(f"Unknown jitter pattern '{value}' (expected one of: {names})")
            return cls[key]
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Unknown jitter pattern: {value!r}") from None


# =============================================================================
# Integer hashing
# =============================================================================

def _u32(x) -> np.ndarray:
    return np.asarray(x, dtype=np.int64).astype(np.uint64) & MASK32


def lowbias32(x) -> np.ndarray:
    """Improved lowbias32 hash (bias 0.107)."""
    x = _u32(x)
    x ^= x >> np.uint64(16)
    x = (x * np.uint64(0x21f0aaad)) & MASK32
    x ^= x >> np.uint64(15)
    x = (x * np.uint64(0x735a2d97)) & MASK32
    x ^= x >> np.uint64(15)
    return x


def reverse_bits32(x) -> np.ndarray:
    """Reverse the bit order of 32-bit values."""
    x = _u32(x)
    x = ((x >> np.uint64(1)) & np.uint64(0x55555555)) | ((x & np.uint64(0x55555555)) << np.uint64(1))
    x = ((x >> np.uint64(2)) & np.uint64(0x33333333)) | ((x & np.uint64(0x33333333)) << np.uint64(2))
    x = ((x >> np.uint64(4)) & np.uint64(0x0F0F0F0F)) | ((x & np.uint64(0x0F0F0F0F)) << np.uint64(4))
    x = ((x >> np.uint64(8)) & np.uint64(0x00FF00FF)) | ((x & np.uint64(0x00FF00FF)) << np.uint64(8))
    x = ((x >> np.uint64(16)) & np.uint64(0xFFFF)) | ((x & np.uint64(0xFFFF)) << np.uint64(16))
    return x & MASK32


def laine_karras_permutation(x, seed) -> np.ndarray:
    """
    Laine-Karras XOR-shuffle.

    Each output bit depends only on the input bits below it, so applied to
    an index before bit reversal it acts as a nested uniform (Owen) scramble.
    """
    x = (_u32(x) + _u32(seed)) & MASK32
    x ^= (x * np.uint64(0x6c50b47c)) & MASK32
    x ^= (x * np.uint64(0xb82f1e52)) & MASK32
    x ^= (x * np.uint64(0xc7afe638)) & MASK32
    x ^= (x * np.uint64(0x8d22f6e6)) & MASK32
    return x


def _to_float(x, bits: int = 32) -> np.ndarray:
    return x.astype(np.float64) / float(1 << bits)


# =============================================================================
# Low-discrepancy and random sequences
# =============================================================================

def halton(index, base: int, max_digits: int = HALTON_MAX_DIGITS):
    """
    Radical inverse of index in the given base, at most max_digits digits.

    Stops early once every index has been reduced to zero.
    halton(0, base) == 0 and results lie in [0, 1).
    """
    i = np.asarray(index, dtype=np.int64)
    f = np.ones(i.shape, dtype=np.float64)
    r = np.zeros(i.shape, dtype=np.float64)

    for _ in range(max_digits):
        if not np.any(i > 0):
            break
        f = f / base
        r = r + f * (i % base)
        i = i // base

    return r if r.ndim else float(r)


def sobol(index, scramble):
    """First Sobol dimension, scrambled; value in [0, 1)."""
    bits = reverse_bits32(laine_karras_permutation(index, scramble))
    v = _to_float(bits)
    return v if v.ndim else float(v)


def sine_hash(n):
    """fract(sin(n) * 43758.5453) - the classic shader one-liner."""
    s = np.sin(np.asarray(n, dtype=np.float64)) * 43758.5453
    r = s - np.floor(s)
    return r if r.ndim else float(r)


# =============================================================================
# Poisson disk table
# =============================================================================

def best_candidate_disk(count: int, candidates: int = 24, seed: int = 0x7A5EED) -> np.ndarray:
    """
    Mitchell's best-candidate sampling of the unit disk.

    Each new point is the candidate farthest from all points so far, drawing
    candidates * len(points) candidates per step. Seeded, so the table is
    identical on every run.

    Returns:
        (count, 2) array of points with |p| <= 1.
    """
    rng = np.random.default_rng(seed)

    def uniform_disk(n: int) -> np.ndarray:
        radius = np.sqrt(rng.random(n))
        theta = rng.random(n) * 2.0 * np.pi
        return np.stack([radius * np.cos(theta), radius * np.sin(theta)], axis=-1)

    points = uniform_disk(1)
    while len(points) < count:
        cand = uniform_disk(candidates * len(points))
        dist = np.linalg.norm(cand[:, None, :] - points[None, :, :], axis=-1).min(axis=1)
        points = np.vstack([points, cand[np.argmax(dist)]])

    return points


POISSON_DISK_32 = best_candidate_disk(POISSON_TABLE_SIZE)


# =============================================================================
# Pattern samplers
# =============================================================================
#
# Each sampler maps integer arrays (x, y) and a frame index to offsets
# (sx, sy) in pixels. Centred offsets stay within [-0.5, 0.5].

def _centre(sx, sy, centered: bool):
    if centered:
        return sx - 0.5, sy - 0.5
    return sx, sy


def _grid_offsets(x, y, frame: int, centered: bool = False):
    zero = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    return zero, zero.copy()


def _random_offsets(x, y, frame: int, centered: bool = False):
    r = np.asarray(sine_hash((np.bitwise_xor(x, y) + frame).astype(np.float64)))
    return _centre(r, 1.0 - r, centered)


def _halton_offsets(x, y, frame: int, centered: bool = False):
    index = np.bitwise_xor(x, y) + frame
    return _centre(np.asarray(halton(index, 2)), np.asarray(halton(index, 3)), centered)


def _poisson_offsets(x, y, frame: int, centered: bool = False):
    seed = (_u32(x) * np.uint64(16807)
            + _u32(y) * np.uint64(331)
            + _u32(frame) * np.uint64(1122334455)) & MASK32
    h = lowbias32(seed)

    sample = POISSON_DISK_32[(h & np.uint64(POISSON_TABLE_SIZE - 1)).astype(np.intp)]
    angle = _to_float(h >> np.uint64(5), bits=27) * 2.0 * np.pi

    c, s = np.cos(angle), np.sin(angle)
    px, py = sample[..., 0], sample[..., 1]
    sx, sy = px * c - py * s, px * s + py * c
    if centered:
        # Disk of radius 1 into the square around the pixel centre
        return 0.5 * sx, 0.5 * sy
    return sx, sy


def _sobol_offsets(x, y, frame: int, centered: bool = False):
    scramble = np.bitwise_or(np.bitwise_xor(x, y), 1)
    v = np.asarray(sobol(frame % SOBOL_PERIOD, scramble))
    return _centre(v, 1.0 - v, centered)


JITTER_SAMPLERS: dict[JitterPattern, Callable] = {
    JitterPattern.GRID: _grid_offsets,
    JitterPattern.RANDOM: _random_offsets,
    JitterPattern.HALTON: _halton_offsets,
    JitterPattern.POISSON: _poisson_offsets,
    JitterPattern.SOBOL: _sobol_offsets,
}


def jitter(x: int, y: int, frame: int,
           pattern: JitterPattern | str | int = JitterPattern.SOBOL,
           strength: float = 1.0,
           pixel_size: tuple[float, float] = (1.0, 1.0),
           centered: bool = False) -> tuple[float, float]:
    """
    Jitter offset for a single pixel.

    Args:
        x, y: Pixel coordinates
        frame: Frame index
        pattern: Jitter pattern
        strength: Jitter strength, 0 disables jitter
        pixel_size: Size of one pixel in the target units; (1/W, 1/H) gives
                    texture coordinates, the default (1, 1) gives pixels
        centered: Move the offset onto the pixel centre, within half a pixel

    Returns:
        (dx, dy) offset
    """
    sampler = JITTER_SAMPLERS[JitterPattern.parse(pattern)]
    sx, sy = sampler(np.asarray(x, dtype=np.int64), np.asarray(y, dtype=np.int64), int(frame),
                     centered)
    return (float(sx) * strength * pixel_size[0],
            float(sy) * strength * pixel_size[1])


def jitter_field(width: int, height: int, frame: int,
                 pattern: JitterPattern | str | int = JitterPattern.SOBOL,
                 strength: float = 1.0, centered: bool = False) -> np.ndarray:
    """
    Jitter offsets for a whole frame in texture coordinates.

    The sampler is picked once for the frame and evaluated over every pixel.

    Returns:
        (height, width, 2) array of (du, dv) offsets.
    """
    sampler = JITTER_SAMPLERS[JitterPattern.parse(pattern)]
    y, x = np.mgrid[0:height, 0:width].astype(np.int64)
    sx, sy = sampler(x, y, int(frame), centered)

    field = np.empty((height, width, 2), dtype=np.float64)
    field[..., 0] = sx * (strength / width)
    field[..., 1] = sy * (strength / height)
    return field
