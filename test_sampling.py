"""Tests for clamp-to-edge texture sampling and the 5-tap bicubic filter."""

import numpy as np
import pytest

from temporal_aa.sampling import catmull_rom_weights, sample_bicubic5, sample_linear, sample_point
from temporal_aa.shading import pixel_centers


@pytest.fixture
def texture():
    rng = np.random.default_rng(3)
    return rng.random((6, 8, 3))


def test_point_at_centers(texture):
    u, v = pixel_centers(8, 6)
    np.testing.assert_array_equal(sample_point(texture, u, v), texture)


def test_linear_at_centers(texture):
    u, v = pixel_centers(8, 6)
    np.testing.assert_allclose(sample_linear(texture, u, v), texture, atol=1e-12)


def test_linear_between_texels(texture):
    # Halfway between texel (2, 1) and (3, 1)
    u = np.array(3.0 / 8)
    v = np.array(1.5 / 6)
    expected = 0.5 * (texture[1, 2] + texture[1, 3])
    np.testing.assert_allclose(sample_linear(texture, u, v), expected, atol=1e-12)


def test_clamp_to_edge(texture):
    np.testing.assert_allclose(sample_linear(texture, np.array(-2.0), np.array(-2.0)), texture[0, 0])
    np.testing.assert_allclose(sample_linear(texture, np.array(5.0), np.array(0.5 / 6)), texture[0, -1])
    np.testing.assert_array_equal(sample_point(texture, np.array(1.5), np.array(1.5)), texture[-1, -1])


def test_single_channel_texture():
    depth = np.arange(12, dtype=np.float64).reshape(3, 4)
    u, v = pixel_centers(4, 3)
    np.testing.assert_allclose(sample_linear(depth, u, v), depth)
    np.testing.assert_allclose(sample_bicubic5(depth, u, v), depth, atol=1e-12)


def test_catmull_rom_weights_sum_to_one():
    f = np.linspace(0.0, 0.999, 50)
    np.testing.assert_allclose(sum(catmull_rom_weights(f)), 1.0, atol=1e-12)


def test_bicubic_at_centers(texture):
    u, v = pixel_centers(8, 6)
    np.testing.assert_allclose(sample_bicubic5(texture, u, v), texture, atol=1e-12)


def test_bicubic_preserves_constant():
    flat = np.full((5, 7, 4), 0.37)
    rng = np.random.default_rng(4)
    u = rng.uniform(-0.2, 1.2, (10, 10))
    v = rng.uniform(-0.2, 1.2, (10, 10))
    np.testing.assert_allclose(sample_bicubic5(flat, u, v), 0.37, atol=1e-12)


def test_bicubic_never_negative():
    # Hard edge rings below zero without the floor
    edge = np.zeros((4, 8, 3))
    edge[:, 4:] = 1.0
    u = np.linspace(0.0, 1.0, 97)[None, :].repeat(4, axis=0)
    v = np.full_like(u, 0.5)
    result = sample_bicubic5(edge, u, v)
    assert np.all(result >= 0.0)


def test_bicubic_overshoots_on_edge():
    """Catmull-Rom is sharper than bilinear: it overshoots past a hard edge."""
    edge = np.zeros((4, 8))
    edge[:, 4:] = 1.0
    u = np.linspace(0.3, 0.7, 81)
    v = np.full_like(u, 0.5)
    assert sample_bicubic5(edge, u, v).max() > 1.0
