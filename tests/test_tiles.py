import numpy as np
import pytest

from iiptiles.tiles import CompressionType, SampleType, Tile


def test_bytes_become_uint8_array():
    tile = Tile(width=2, height=1, channels=1, bpc=8, data=b"\x01\x02")
    assert tile.data.dtype == np.uint8
    assert tile.data.tolist() == [1, 2]
    assert tile.data_length == 2


def test_data_length_counts_bytes_for_wide_samples():
    data = np.zeros(6, dtype=np.uint16)
    tile = Tile(width=3, height=1, channels=2, bpc=16, data=data)
    assert tile.data_length == data.nbytes
    assert tile.sample_count() == data.size


def test_sample_count_for_floats():
    data = np.ones(12, dtype=np.float32)
    tile = Tile(
        width=2, height=2, channels=3, bpc=32, data=data,
        sample_type=SampleType.FLOATINGPOINT,
    )
    assert tile.sample_count() == data.size


def test_sample_count_without_bpc_raises():
    tile = Tile(data=b"abc")
    with pytest.raises(ValueError):
        tile.sample_count()


def test_copy_is_independent():
    tile = Tile(
        width=2, height=1, channels=1, bpc=8, data=b"\x05\x06",
        filename="image.tif", compression=CompressionType.JPEG, quality=75,
    )
    other = tile.copy()
    other.data[0] = 99
    other.width = 7
    assert tile.data.tolist() == [5, 6]
    assert tile.width == 2
    assert other.filename == "image.tif"
    assert other.compression is CompressionType.JPEG
    assert other.quality == 75