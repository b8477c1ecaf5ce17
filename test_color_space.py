"""Tests for the RGB <-> YCbCr transform used for neighborhood clamping."""

import numpy as np
import pytest

from temporal_aa.color import rgb_to_ycbcr, ycbcr_to_rgb


def test_round_trip_in_range():
    rng = np.random.default_rng(1)
    rgb = rng.random((64, 64, 3))
    np.testing.assert_allclose(ycbcr_to_rgb(rgb_to_ycbcr(rgb)), rgb, atol=1e-5)


def test_round_trip_extremes():
    corners = np.array([[r, g, b] for r in (0.0, 1.0) for g in (0.0, 1.0) for b in (0.0, 1.0)])
    np.testing.assert_allclose(ycbcr_to_rgb(rgb_to_ycbcr(corners)), corners, atol=1e-5)


@pytest.mark.parametrize("rgb, expected", [
    ((1.0, 1.0, 1.0), (1.0, 0.0, 0.0)),
    ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
    ((1.0, 0.0, 0.0), (0.299, -0.299 * 0.565, 0.701 * 0.713)),
    ((0.0, 0.0, 1.0), (0.114, 0.886 * 0.565, -0.114 * 0.713)),
])
def test_forward_values(rgb, expected):
    np.testing.assert_allclose(rgb_to_ycbcr(np.array(rgb)), expected, atol=1e-12)


def test_grays_have_no_chroma():
    gray = np.linspace(0, 1, 11)[:, None].repeat(3, axis=1)
    ycc = rgb_to_ycbcr(gray)
    np.testing.assert_allclose(ycc[:, 0], gray[:, 0], atol=1e-12)
    np.testing.assert_allclose(ycc[:, 1:], 0.0, atol=1e-12)


def test_inverse_matches_published_coefficients():
    """The usual 3-decimal inverse agrees with the exact one to rounding precision."""
    rng = np.random.default_rng(2)
    ycc = rgb_to_ycbcr(rng.random((256, 3)))
    y, cb, cr = ycc[:, 0], ycc[:, 1], ycc[:, 2]
    published = np.stack([
        y + 1.403 * cr,
        y - 0.344 * cb - 0.714 * cr,
        y + 1.770 * cb,
    ], axis=-1)
    np.testing.assert_allclose(ycbcr_to_rgb(ycc), published, atol=2e-3)


def test_fourth_channel_passes_through():
    rgba = np.array([[0.2, 0.4, 0.6, 0.123]])
    ycc = rgb_to_ycbcr(rgba)
    assert ycc.shape == (1, 4)
    assert ycc[0, 3] == 0.123
    assert ycbcr_to_rgb(ycc)[0, 3] == 0.123
