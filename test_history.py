"""Tests for the double-buffered history."""

import numpy as np
import pytest

from temporal_aa.history import HistoryBuffer


def test_starts_empty():
    history = HistoryBuffer(4, 3)
    assert history.previous_color.shape == (3, 4, 4)
    assert history.previous_depth.shape == (3, 4)
    assert not history.previous_color.any()
    assert not history.previous_depth.any()


def test_commit_becomes_previous():
    history = HistoryBuffer(4, 3)
    color = np.full((3, 4, 4), 0.5)
    depth = np.full((3, 4), 0.25)
    history.commit(color, depth)

    np.testing.assert_array_equal(history.previous_color, color)
    np.testing.assert_array_equal(history.previous_depth, depth)
    assert history.commits == 1


def test_commit_copies():
    history = HistoryBuffer(2, 2)
    color = np.full((2, 2, 4), 0.5)
    history.commit(color, np.zeros((2, 2)))
    color[:] = 9.0
    assert history.previous_color.max() == 0.5


def test_slots_alternate_and_never_alias():
    history = HistoryBuffer(2, 2)
    seen = []
    for i in range(4):
        read_before = history.previous_color
        write_target = history.color[history.write_slot]
        assert not np.shares_memory(read_before, write_target)

        history.commit(np.full((2, 2, 4), float(i)), np.full((2, 2), float(i)))
        seen.append(history.read_slot)
        assert history.previous_color is write_target

    assert seen == ['b', 'a', 'b', 'a']


def test_full_overwrite():
    history = HistoryBuffer(3, 3)
    history.commit(np.ones((3, 3, 4)), np.ones((3, 3)))
    history.commit(np.zeros((3, 3, 4)), np.zeros((3, 3)))
    history.commit(np.full((3, 3, 4), 2.0), np.full((3, 3), 2.0))
    # Slot 'b' held frame 0's ones; frame 2 must replace every value
    np.testing.assert_array_equal(history.previous_color, 2.0)


@pytest.mark.parametrize("color_shape, depth_shape", [
    ((3, 4, 3), (3, 4)),
    ((4, 3, 4), (3, 4)),
    ((3, 4, 4), (4, 3)),
])
def test_commit_rejects_wrong_shapes(color_shape, depth_shape):
    history = HistoryBuffer(4, 3)
    with pytest.raises(ValueError):
        history.commit(np.zeros(color_shape), np.zeros(depth_shape))


def test_reset():
    history = HistoryBuffer(2, 2)
    history.commit(np.ones((2, 2, 4)), np.ones((2, 2)))
    history.reset()
    assert history.read_index == 0
    assert history.commits == 0
    assert not history.previous_color.any()
    assert not any(c.any() for c in history.color.values())


def test_rejects_empty_resolution():
    with pytest.raises(ValueError):
        HistoryBuffer(0, 10)
