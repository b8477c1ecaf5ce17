"""
Test 8-bit PNG output.

Every uint8 level must survive uint8 -> float -> FP32 storage -> uint8 when
converting back rounds. Truncating instead drifts values down by one level,
and repeated cycles drift the image toward black.
"""

import numpy as np

from temporal_aa.frame_io import load_png, save_png, to_uint8


def _all_levels() -> np.ndarray:
    levels = np.arange(256, dtype=np.uint8)
    return np.stack([levels, levels[::-1], np.roll(levels, 77)], axis=-1).reshape(16, 16, 3)


def test_to_uint8_rounds():
    np.testing.assert_array_equal(to_uint8(np.array([0.0, 0.5 / 255, 0.49 / 255, 1.0])),
                                  [0, 1, 0, 255])


def test_to_uint8_clamps():
    np.testing.assert_array_equal(to_uint8(np.array([-0.3, 1.7])), [0, 255])


def test_fp32_cycle_is_lossless():
    levels = _all_levels()
    image = levels.astype(np.float32) / 255.0
    for _ in range(10):
        image = to_uint8(image.astype(np.float32)).astype(np.float32) / 255.0
    np.testing.assert_array_equal(to_uint8(image), levels)


def test_truncation_would_drift():
    # Half precision storage lands just below most levels
    values = (np.arange(256, dtype=np.float32) / 255.0).astype(np.float16).astype(np.float32)
    truncated = np.clip(values * 255.0, 0, 255).astype(np.uint8)
    assert (truncated != np.arange(256)).any()
    np.testing.assert_array_equal(to_uint8(values), np.arange(256))


def test_png_roundtrip(tmp_path):
    levels = _all_levels()
    path = tmp_path / "levels.png"
    save_png(levels / 255.0, path)

    loaded = load_png(path)
    assert loaded.shape == (16, 16, 3)
    np.testing.assert_array_equal(to_uint8(loaded), levels)
