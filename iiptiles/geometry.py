"""Geometric tile transforms: resampling, rotation, band stripping and flips."""

from __future__ import annotations

import math

import numpy as np

from .tiles import Tile


def _pixels(tile: Tile) -> np.ndarray:
    count = tile.width * tile.height * tile.channels
    return tile.data[:count].reshape(tile.height, tile.width, tile.channels)


def _store(tile: Tile, pixels: np.ndarray) -> None:
    tile.data = np.ascontiguousarray(pixels).ravel()


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError("target size must be positive")


def interpolate_nearest_neighbour(tile: Tile, width: int, height: int) -> Tile:
    """Resize the tile in place using nearest neighbour sampling."""
    _check_size(width, height)
    src = _pixels(tile)
    xscale = np.float32(tile.width) / np.float32(width)
    yscale = np.float32(tile.height) / np.float32(height)
    ii = np.floor(np.arange(width, dtype=np.float32) * xscale).astype(np.intp)
    jj = np.floor(np.arange(height, dtype=np.float32) * yscale).astype(np.intp)
    ii = np.minimum(ii, tile.width - 1)
    jj = np.minimum(jj, tile.height - 1)
    _store(tile, src[jj][:, ii])
    tile.width = width
    tile.height = height
    return tile


def interpolate_bilinear(tile: Tile, width: int, height: int) -> Tile:
    """Resize the tile in place using bilinear interpolation."""
    _check_size(width, height)
    src = _pixels(tile).astype(np.float32)
    dtype = tile.data.dtype
    xscale = np.float32(tile.width) / np.float32(width)
    yscale = np.float32(tile.height) / np.float32(height)

    xs = np.arange(width, dtype=np.float32) * xscale
    ys = np.arange(height, dtype=np.float32) * yscale
    ii = np.floor(xs).astype(np.intp)
    jj = np.floor(ys).astype(np.intp)

    a = ((ii + 1).astype(np.float32) - xs)[None, :, None]
    b = (xs - ii.astype(np.float32))[None, :, None]
    c = ((jj + 1).astype(np.float32) - ys)[:, None, None]
    d = (ys - jj.astype(np.float32))[:, None, None]

    i0 = np.minimum(ii, tile.width - 1)
    i1 = np.minimum(ii + 1, tile.width - 1)
    j0 = np.minimum(jj, tile.height - 1)
    j1 = np.minimum(jj + 1, tile.height - 1)

    top = src[j0]
    bottom = src[j1]
    tx = top[:, i0] * a + top[:, i1] * b
    ty = bottom[:, i0] * a + bottom[:, i1] * b
    result = c * tx + d * ty

    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        result = np.clip(result, info.min, info.max)
    _store(tile, result.astype(dtype))
    tile.width = width
    tile.height = height
    return tile


def rotate(tile: Tile, angle: float = 0.0) -> Tile:
    """Rotate clockwise by 90, 180 or 270 degrees; other angles leave the tile unchanged."""
    degrees = int(angle)
    turn = int(math.fmod(degrees, 360))
    if turn not in (90, 180, 270):
        return tile
    src = _pixels(tile)
    if turn == 90:
        rotated = src[::-1].transpose(1, 0, 2)
    elif turn == 270:
        rotated = src.transpose(1, 0, 2)[::-1]
    else:
        rotated = src[::-1, ::-1]
    _store(tile, rotated)
    if turn != 180:
        tile.width, tile.height = tile.height, tile.width
    return tile


def flatten(tile: Tile, bands: int) -> Tile:
    """Keep only the first ``bands`` channels; the channel count is never increased."""
    if bands >= tile.channels:
        return tile
    _store(tile, _pixels(tile)[:, :, :bands])
    tile.channels = bands
    return tile


def flip(tile: Tile, orientation: int) -> Tile:
    """Mirror the tile: orientation 2 flips vertically, anything else horizontally."""
    src = _pixels(tile)
    _store(tile, src[::-1] if orientation == 2 else src[:, ::-1])
    return tile