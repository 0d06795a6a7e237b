"""Tile data and the enumerations that describe it."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np


class SampleType(enum.IntEnum):
    """How the samples of a tile are stored."""

    FIXEDPOINT = 0
    FLOATINGPOINT = 1


class CompressionType(enum.IntEnum):
    """Encoding of the data held by a tile."""

    UNCOMPRESSED = 0
    JPEG = 1
    DEFLATE = 2
    PNG = 3


class ColourMap(enum.IntEnum):
    """Colour maps that can be applied to single-band data."""

    HOT = 0
    COLD = 1
    JET = 2
    BLUE = 3
    GREEN = 4
    RED = 5


def _as_array(data: Any) -> np.ndarray:
    if isinstance(data, np.ndarray):
        return data
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(data), dtype=np.uint8).copy()
    return np.asarray(data)


@dataclass(eq=False)
class Tile:
    """A block of pixel data with the metadata needed to cache and serve it.

    ``data`` is a flat array of samples, interleaved by channel, or the
    encoded bytes (as ``uint8``) when the tile is compressed.
    """

    width: int = 0
    height: int = 0
    channels: int = 0
    bpc: int = 0
    data: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.uint8))
    tile_num: int = 0
    resolution: int = 0
    h_sequence: int = 0
    v_sequence: int = 0
    compression: CompressionType = CompressionType.UNCOMPRESSED
    quality: int = 0
    filename: str = ""
    timestamp: float = 0.0
    padded: bool = False
    sample_type: SampleType = SampleType.FIXEDPOINT

    def __post_init__(self) -> None:
        self.data = _as_array(self.data)

    @property
    def data_length(self) -> int:
        """Number of bytes held in ``data``."""
        return int(self.data.nbytes)

    def copy(self) -> "Tile":
        """Return an independent copy, including the data buffer."""
        return replace(self, data=self.data.copy())

    def sample_count(self) -> int:
        """Number of samples in the buffer given the bits per channel."""
        if self.bpc <= 0:
            raise ValueError("tile has no bits per channel set")
        return self.data_length * 8 // self.bpc