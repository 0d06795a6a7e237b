"""Wire formats of the TIL tile response and the Zoomify protocol."""

from __future__ import annotations

import math
import re
from typing import Callable, Iterator, Sequence, Tuple, Union

from .tiles import Tile

SERVER_VERSION = "1.1"

_INT = re.compile(r"\s*([+-]?\d+)")

# FlashPix compression sub-type: 8x8 block interleaving, 0x11 chroma
# subsampling, no internal colour conversion, tables in the data stream.
_COMPRESSION_SUBTYPE = bytes([0x00, 0x11, 0x00, 0x00])


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def _split_first(text: str, delimiter: str) -> Tuple[str, str]:
    """Split at the first delimiter; without one, both parts are the whole text."""
    index = text.find(delimiter)
    if index < 0:
        return text, text
    return text[:index], text[index + 1:]


def tiles_across(width: int, tile_width: int) -> int:
    """Number of tiles needed to cover ``width`` pixels."""
    if tile_width <= 0:
        raise ValueError("tile width must be positive")
    return width // tile_width + (1 if width % tile_width else 0)


def parse_til_argument(argument: str) -> Tuple[int, int, int]:
    """Parse a TIL argument ``resolution,start-end`` into its three numbers.

    A missing end tile, or one before the start, is taken as the start tile.
    """
    first, rest = _split_first(argument, ",")
    resolution = _atoi(first)
    start_text, rest = _split_first(rest, "-")
    start_tile = _atoi(start_text)
    end_tile = _atoi(rest) if rest else start_tile
    if end_tile < start_tile:
        end_tile = start_tile
    return resolution, start_tile, end_tile


def til_rectangle(start_tile: int, end_tile: int, ntlx: int) -> Tuple[int, int, int, int]:
    """Tile rectangle ``(startx, starty, endx, endy)`` spanned by two tile numbers."""
    if ntlx <= 0:
        raise ValueError("number of tiles across must be positive")
    startx, starty = start_tile % ntlx, start_tile // ntlx
    endx, endy = end_tile % ntlx, end_tile // ntlx
    if endx < startx:
        startx, endx = endx, startx
    return startx, starty, endx, endy


def til_tiles(start_tile: int, end_tile: int, ntlx: int) -> Iterator[Tuple[int, int, int]]:
    """Yield ``(number, column, row)`` for each tile of the rectangle, column by column."""
    startx, starty, endx, endy = til_rectangle(start_tile, end_tile, ntlx)
    for i in range(startx, endx + 1):
        for j in range(starty, endy + 1):
            yield i + j * ntlx, i, j


def til_header(timestamp: str, cache_control: str) -> str:
    """HTTP header block sent once before the tiles of a TIL response."""
    return (
        f"Server: iipsrv/{SERVER_VERSION}\r\n"
        "Content-Type: application/vnd.netfpx\r\n"
        f"Last-Modified: {timestamp}\r\n"
        f"{cache_control}\r\n"
        "\r\n"
    )


def encode_til_tile(resolution: int, number: int, tile: Tile) -> bytes:
    """Encode one tile of a TIL response, with its prefix, types and terminator."""
    data = tile.data.tobytes()
    compression = {8: 0x02, 16: 0x03}.get(tile.bpc, 0x00)
    prefix = f"Tile,{resolution},{number},0/{len(data) + 8}:".encode("ascii")
    return b"".join(
        (prefix, bytes([compression, 0, 0, 0]), _COMPRESSION_SUBTYPE, data, b"\r\n")
    )


def parse_zoomify(argument: str) -> Tuple[str, str]:
    """Split a Zoomify argument into the image path and the requested file name."""
    slash = argument.rfind("/")
    suffix = argument[slash + 1:]
    if suffix == "ImageProperties.xml":
        prefix = argument if slash < 0 else argument[:slash]
    else:
        group = argument.find("TileGroup")
        prefix = argument if group <= 0 else argument[:group - 1]
    return prefix, suffix


def zoomify_discard(widths: Sequence[int], heights: Sequence[int], tile_width: int) -> int:
    """Number of small resolutions to skip so the lowest level fits one tile."""
    small = sum(1 for w, h in zip(widths, heights) if w < tile_width and h < tile_width)
    return small - 1 if small > 0 else 0


def zoomify_properties(
    width: int, height: int, tile_width: int, timestamp: str, cache_control: str
) -> str:
    """The ``ImageProperties.xml`` response, headers included."""
    if tile_width <= 0:
        raise ValueError("tile width must be positive")
    ntiles = math.ceil(width / tile_width) * math.ceil(height / tile_width)
    return (
        f"Server: iipsrv/{SERVER_VERSION}\r\n"
        "Content-Type: application/xml\r\n"
        f"Last-Modified: {timestamp}\r\n"
        f"{cache_control}\r\n"
        "\r\n"
        f'<IMAGE_PROPERTIES WIDTH="{width}" HEIGHT="{height}" NUMTILES="{ntiles}" '
        f'NUMIMAGES="1" VERSION="1.8" TILESIZE="{tile_width}" />'
    )


LevelWidth = Union[int, Callable[[int], int]]


def zoomify_tile(
    suffix: str, discard: int, level_width: LevelWidth, tile_width: int
) -> Tuple[int, int]:
    """Resolve a ``r-x-y.jpg`` tile request to ``(resolution, tile number)``.

    ``level_width`` is the image width at the resolved resolution, or a
    function that returns it for a resolution number.
    """
    tokens = [token for token in suffix.split("-") if token]
    numbers = [_atoi(token) for token in tokens[:3]]
    numbers += [0] * (3 - len(numbers))
    resolution, x, y = numbers
    resolution += discard
    width = level_width(resolution) if callable(level_width) else level_width
    ntlx = tiles_across(width, tile_width)
    return resolution, y * ntlx + x