"""Pixel value transforms: normalisation, colour conversion and tone adjustments."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .tiles import ColourMap, SampleType, Tile

_D65_X0 = 95.0470
_D65_Y0 = 100.0
_D65_Z0 = 108.8827

_SRGB = np.array(
    [
        [3.240479, -1.537150, -0.498535],
        [-0.969256, 1.875992, 0.041556],
        [0.055648, -0.204043, 1.057311],
    ]
)


def _floats(tile: Tile) -> np.ndarray:
    return np.asarray(tile.data, dtype=np.float32)


def _raw_samples(tile: Tile) -> np.ndarray:
    """Interpret the buffer according to the tile's bit depth and sample type."""
    data = tile.data
    if tile.bpc == 32:
        wanted = np.float32 if tile.sample_type == SampleType.FLOATINGPOINT else np.uint32
    elif tile.bpc == 16:
        wanted = np.uint16
    else:
        wanted = np.uint8
    if data.dtype == wanted:
        return data
    if data.dtype == np.uint8 and wanted != np.uint8:
        return np.frombuffer(data.tobytes(), dtype=wanted)
    return data.astype(wanted)


def normalize(tile: Tile, maxima: Sequence[float], minima: Sequence[float]) -> Tile:
    """Scale each channel to floats in [0, 1] using per-channel minima and maxima."""
    nc = tile.channels
    if len(maxima) < nc or len(minima) < nc:
        raise ValueError("need a minimum and maximum for every channel")
    samples = _raw_samples(tile)
    is_float = tile.bpc == 32 and tile.sample_type == SampleType.FLOATINGPOINT
    out = np.zeros(samples.size, dtype=np.float32)

    for c in range(nc):
        minc = np.float32(minima[c])
        diffc = np.float32(np.float32(maxima[c]) - minc)
        inv = np.float32(1.0 / float(diffc)) if abs(float(diffc)) > 1e-30 else np.float32(1e30)
        values = samples[c::nc].astype(np.float32)
        scaled = (values - minc) * inv
        if is_float:
            scaled = np.where(np.isfinite(values), scaled, np.float32(0.0))
        out[c::nc] = scaled

    tile.data = out
    tile.bpc = 32
    tile.sample_type = SampleType.FLOATINGPOINT
    return tile


def shade(tile: Tile, h_angle: int, v_angle: int) -> Tile:
    """Hill-shade a tile of normal vectors lit from the given angles in degrees."""
    a = h_angle * 2 * math.pi / 360.0
    s_y = np.float32(math.cos(a))
    s_x = np.float32(math.sqrt(max(0.0, 1.0 - float(s_y) * float(s_y))))
    if h_angle > 180:
        s_x = -s_x
    a = v_angle * 2 * math.pi / 360.0
    s_z = np.float32(-math.sin(a))
    norm = np.float32(math.sqrt(float(s_x) ** 2 + float(s_y) ** 2 + float(s_z) ** 2))
    s_x, s_y, s_z = s_x / norm, s_y / norm, s_z / norm

    pixels = tile.width * tile.height
    data = _floats(tile)
    if tile.channels < 3 or data.size < pixels * tile.channels:
        raise ValueError("shading needs three channels of normal vectors")
    vectors = data[: pixels * tile.channels].reshape(pixels, tile.channels)[:, :3]

    zero = np.all(vectors == 0.0, axis=1)
    o = -(vectors - np.float32(0.5)) * np.float32(2.0)
    o[zero] = 0.0
    dot = (o[:, 0] * s_x + o[:, 1] * s_y + o[:, 2] * s_z) * np.float32(0.5)
    dot = np.clip(dot, 0.0, 1.0).astype(np.float32)

    tile.data = dot
    tile.channels = 1
    return tile


def lab_to_srgb(tile: Tile) -> Tile:
    """Convert 8-bit CIELAB pixels (L unsigned, a/b signed) to sRGB in place."""
    if tile.channels < 3:
        raise ValueError("CIELAB conversion needs at least three channels")
    count = tile.width * tile.height * tile.channels
    raw = np.asarray(tile.data, dtype=np.uint8)
    pixels = raw[:count].reshape(-1, tile.channels)

    L = (pixels[:, 0].astype(np.float64) / 2.55).astype(np.float32).astype(np.float64)
    a = pixels[:, 1].view(np.int8).astype(np.float64)
    b = pixels[:, 2].view(np.int8).astype(np.float64)

    low = L < 8.0
    Y_low = L * _D65_Y0 / 903.3
    cby = np.where(low, 7.787 * (Y_low / _D65_Y0) + 16.0 / 116.0, (L + 16.0) / 116.0)
    Y = np.where(low, Y_low, _D65_Y0 * cby ** 3)

    def _component(t: np.ndarray, white: float) -> np.ndarray:
        return np.where(t < 0.2069, white * (t - 0.13793) / 7.787, white * t ** 3)

    X = _component(a / 500.0 + cby, _D65_X0) / 100.0
    Z = _component(cby - b / 200.0, _D65_Z0) / 100.0
    Y = Y / 100.0

    rgb = np.stack([X, Y, Z], axis=1) @ _SRGB.T
    rgb = np.maximum(rgb, 0.0)
    rgb = np.where(
        rgb <= 0.0031308,
        rgb * 12.92,
        1.055 * np.power(rgb, 1.0 / 2.4) - 0.055,
    )
    rgb = np.minimum(rgb * 255.0, 255.0)

    result = raw.copy()
    view = result[:count].reshape(-1, tile.channels)
    view[:, :3] = rgb.astype(np.uint8)
    tile.data = result
    return tile


_THIRD = np.float32(1.0 / 3.0)
_EIGHTH = np.float32(1.0 / 8.0)


def _hot(v: np.ndarray) -> np.ndarray:
    conds = [v > 1.0, v <= 0.0, v < _THIRD, v < 2 * _THIRD, v < 1.0]
    r = np.select(conds, [1.0, 0.0, 3 * v, 1.0, 1.0], 1.0)
    g = np.select(conds, [1.0, 0.0, 0.0, 3 * v - 1, 1.0], 1.0)
    b = np.select(conds, [1.0, 0.0, 0.0, 0.0, 3 * v - 2], 1.0)
    return np.stack([r, g, b], axis=1)


def _cold(v: np.ndarray) -> np.ndarray:
    conds = [v > 1.0, v <= 0.0, v < _THIRD, v < 2 * _THIRD, v < 1.0]
    r = np.select(conds, [1.0, 0.0, 0.0, 0.0, 3 * v - 2], 1.0)
    g = np.select(conds, [1.0, 0.0, 0.0, 3 * v - 1, 1.0], 1.0)
    b = np.select(conds, [1.0, 0.0, 3 * v, 1.0, 1.0], 1.0)
    return np.stack([r, g, b], axis=1)


def _jet(v: np.ndarray) -> np.ndarray:
    conds = [v < 0.0, v < _EIGHTH, v < 3 * _EIGHTH, v < 5 * _EIGHTH, v < 7 * _EIGHTH, v < 1.0]
    r = np.select(conds, [0.0, 0.0, 0.0, 4 * v - 1.5, 1.0, 4.5 - 4 * v], 0.5)
    g = np.select(conds, [0.0, 0.0, 4 * v - 0.5, 1.0, 3.5 - 4 * v, 0.0], 0.0)
    b = np.select(conds, [0.0, 4 * v + 0.5, 1.0, 2.5 - 4 * v, 0.0, 0.0], 0.0)
    return np.stack([r, g, b], axis=1)


_COLOUR_MAPS = {ColourMap.HOT: _hot, ColourMap.COLD: _cold, ColourMap.JET: _jet}


def colour_map(tile: Tile, cmap: ColourMap) -> Tile:
    """Map the first channel of float data to three-channel colour.

    Maps without a defined ramp (BLUE, GREEN, RED) produce black.
    """
    data = _floats(tile)
    values = data[:: max(tile.channels, 1)].astype(np.float32)
    ramp = _COLOUR_MAPS.get(ColourMap(cmap))
    if ramp is None:
        out = np.zeros((values.size, 3), dtype=np.float32)
    else:
        out = ramp(values).astype(np.float32)
    tile.data = out.ravel()
    tile.channels = 3
    return tile


def invert(tile: Tile) -> Tile:
    """Replace every float sample ``v`` with ``1 - v``."""
    tile.data = (np.float32(1.0) - _floats(tile)).astype(np.float32)
    return tile


def contrast(tile: Tile, c: float) -> Tile:
    """Scale float data by ``255 * c`` and clip to 8-bit samples."""
    count = tile.width * tile.height * tile.channels
    v = _floats(tile)[:count] * np.float32(255.0) * np.float32(c)
    clipped = np.where(v < 255.0, np.where(v < 0.0, 0.0, v), 255.0)
    tile.data = clipped.astype(np.uint8)
    tile.bpc = 8
    tile.sample_type = SampleType.FIXEDPOINT
    return tile


def gamma(tile: Tile, g: float) -> Tile:
    """Raise float samples (negatives taken as zero) to the power ``g``."""
    if g == 1.0:
        return tile
    v = _floats(tile)
    tile.data = np.power(np.where(v < 0.0, np.float32(0.0), v), np.float32(g)).astype(np.float32)
    return tile


def greyscale(tile: Tile) -> Tile:
    """Convert 8-bit RGB to luminance; other tiles are left unchanged."""
    if tile.bpc != 8 or tile.channels != 3:
        return tile
    count = tile.width * tile.height
    rgb = np.asarray(tile.data, dtype=np.uint8)[: count * 3].reshape(count, 3).astype(np.int64)
    luminance = (1254097 * rgb[:, 0] + 2462056 * rgb[:, 1] + 478151 * rgb[:, 2]) >> 22
    tile.data = luminance.astype(np.uint8)
    tile.channels = 1
    return tile


def twist(tile: Tile, matrix: Sequence[Sequence[float]]) -> Tile:
    """Recombine float channels with a matrix whose rows give each output channel.

    Rows and columns beyond the channel count are ignored; channels without a
    row keep their values.
    """
    channels = tile.channels
    count = tile.width * tile.height
    data = _floats(tile).copy()
    pixels = data[: count * channels].reshape(count, channels)
    source = pixels.copy()

    for k, row in enumerate(matrix[:channels]):
        acc = np.zeros(count, dtype=np.float32)
        for j, m in enumerate(row[:channels]):
            weight = np.float32(m)
            if weight:
                acc += source[:, j] if weight == 1.0 else source[:, j] * weight
        pixels[:, k] = acc

    tile.data = data
    return tile