"""
Test frame sequence storage through the safetensors library.

Sequences are written FP32 with string metadata and read back with
safe_open(framework="numpy"), the same path any other tool reading the
file would take.
"""

import numpy as np
import pytest
from safetensors import safe_open
from safetensors.numpy import save_file

from temporal_aa.frame_io import FrameSequence, load_sequence, save_sequence
from temporal_aa.synthetic import moving_box_sequence, static_sequence


@pytest.fixture
def box_arrays():
    return moving_box_sequence(width=20, height=16, count=4, box_size=6)


def test_roundtrip(tmp_path, box_arrays):
    path = tmp_path / "box.safetensors"
    save_sequence(path, metadata={'generator': 'moving-box'}, **box_arrays)
    sequence = load_sequence(path)

    assert len(sequence) == 4
    assert (sequence.width, sequence.height) == (20, 16)
    for i, frame in enumerate(sequence.frames):
        np.testing.assert_allclose(frame.color, box_arrays['color'][i], atol=1e-6)
        np.testing.assert_allclose(frame.depth, box_arrays['depth'][i], atol=1e-6)
        np.testing.assert_allclose(sequence.motions[i].vectors, box_arrays['motion'][i], atol=1e-6)
    np.testing.assert_allclose(sequence.frametimes, box_arrays['frametime'], rtol=1e-6)

    assert sequence.metadata['generator'] == 'moving-box'
    assert sequence.metadata['frames'] == '4'


def test_stored_as_fp32(tmp_path, box_arrays):
    path = tmp_path / "box.safetensors"
    save_sequence(path, **box_arrays)
    with safe_open(str(path), framework="numpy") as f:
        assert set(f.keys()) == {'color', 'depth', 'motion', 'frametime'}
        for key in f.keys():
            assert f.get_tensor(key).dtype == np.float32
        assert f.get_tensor('color').shape == (4, 16, 20, 3)


def test_frametime_is_optional(tmp_path):
    arrays = static_sequence(4, 3, 2)
    del arrays['frametime']
    path = tmp_path / "static.safetensors"
    save_sequence(path, **arrays)

    sequence = load_sequence(path)
    assert len(sequence.frametimes) == 2
    assert sequence.frametimes[0] == pytest.approx(1000.0 / 60.0)


def test_missing_tensor_is_reported(tmp_path):
    path = tmp_path / "broken.safetensors"
    save_file({'color': np.zeros((1, 2, 2, 3), dtype=np.float32),
               'depth': np.zeros((1, 2, 2), dtype=np.float32)}, str(path))

    with pytest.raises(ValueError, match="motion"):
        load_sequence(path)


@pytest.mark.parametrize("name, shape", [
    ('color', (2, 4, 4)),
    ('depth', (2, 4, 5)),
    ('motion', (2, 4, 4, 3)),
])
def test_save_rejects_bad_shapes(tmp_path, name, shape):
    arrays = static_sequence(4, 4, 2)
    arrays[name] = np.zeros(shape)
    with pytest.raises(ValueError):
        save_sequence(tmp_path / "bad.safetensors", **arrays)


def test_from_arrays_without_file():
    sequence = FrameSequence.from_arrays(static_sequence(5, 4, 3), {'note': 'memory'})
    assert len(sequence) == 3
    assert sequence.metadata == {'note': 'memory'}
    assert not sequence.frames[0].color.flags.writeable


def test_unreadable_file_is_reported(tmp_path):
    path = tmp_path / "garbage.safetensors"
    path.write_bytes(b"not a safetensors file")
    with pytest.raises(ValueError, match="garbage.safetensors"):
        load_sequence(path)
