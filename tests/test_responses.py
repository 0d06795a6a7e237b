import re

import numpy as np
import pytest

from iiptiles.responses import (
    encode_til_tile,
    parse_til_argument,
    parse_zoomify,
    til_header,
    til_rectangle,
    til_tiles,
    tiles_across,
    zoomify_discard,
    zoomify_properties,
    zoomify_tile,
)
from iiptiles.tiles import Tile


@pytest.mark.parametrize("width,tile_width", [(256, 64), (257, 64), (1, 256), (1000, 256)])
def test_tiles_across_covers_width(width, tile_width):
    n = tiles_across(width, tile_width)
    assert n * tile_width >= width
    assert (n - 1) * tile_width < width


def test_tiles_across_exact_multiple():
    assert tiles_across(512, 256) == 512 // 256


def test_tiles_across_rejects_zero_tile():
    with pytest.raises(ValueError):
        tiles_across(100, 0)


def test_parse_til_range():
    assert parse_til_argument("2,5-9") == (2, 5, 9)


def test_parse_til_reversed_range_uses_start():
    assert parse_til_argument("2,9-5") == (2, 9, 9)


def test_parse_til_single_tile():
    assert parse_til_argument("3,7") == (3, 7, 7)


def test_til_rectangle_orders_columns():
    startx, starty, endx, endy = til_rectangle(3, 4, 4)
    assert startx <= endx
    assert starty <= endy


def test_til_tiles_cover_start_and_end():
    numbers = [n for n, _, _ in til_tiles(1, 6, 4)]
    assert numbers[0] == 1
    assert 6 in numbers
    assert len(numbers) == len(set(numbers))


def test_til_rectangle_rejects_zero_width():
    with pytest.raises(ValueError):
        til_rectangle(0, 1, 0)


def test_til_header_format():
    header = til_header("Mon", "Cache-Control: max-age=86400")
    assert header == (
        "Server: iipsrv/1.1\r\n"
        "Content-Type: application/vnd.netfpx\r\n"
        "Last-Modified: Mon\r\n"
        "Cache-Control: max-age=86400\r\n"
        "\r\n"
    )


def test_encode_til_tile_8bit():
    tile = Tile(width=1, height=1, channels=3, bpc=8, data=b"abc")
    encoded = encode_til_tile(0, 3, tile)
    expected = (
        f"Tile,0,3,0/{3 + 8}:".encode()
        + b"\x02\x00\x00\x00"
        + b"\x00\x11\x00\x00"
        + b"abc"
        + b"\r\n"
    )
    assert encoded == expected


def test_encode_til_tile_16bit_type():
    tile = Tile(width=1, height=1, channels=1, bpc=16, data=np.array([5], dtype=np.uint16))
    encoded = encode_til_tile(1, 0, tile)
    body = encoded.split(b":", 1)[1]
    assert body[:4] == b"\x03\x00\x00\x00"
    assert encoded.endswith(b"\r\n")


def test_parse_zoomify_properties():
    assert parse_zoomify("images/a.tif/ImageProperties.xml") == (
        "images/a.tif",
        "ImageProperties.xml",
    )


def test_parse_zoomify_tile():
    assert parse_zoomify("images/a.tif/TileGroup0/2-1-1.jpg") == ("images/a.tif", "2-1-1.jpg")


def test_zoomify_discard_small_levels():
    widths = [1024, 512, 256, 128, 64]
    assert zoomify_discard(widths, widths, 256) == 1


def test_zoomify_discard_none_small():
    assert zoomify_discard([1024, 512], [1024, 512], 256) == 0


def test_zoomify_properties():
    text = zoomify_properties(512, 256, 256, "Mon", "Cache-Control: no-cache")
    assert text.startswith("Server: iipsrv/1.1\r\nContent-Type: application/xml\r\n")
    match = re.search(r'WIDTH="(\d+)" HEIGHT="(\d+)" NUMTILES="(\d+)"', text)
    assert match.group(1) == "512"
    assert match.group(2) == "256"
    assert match.group(3) == "2"
    assert text.endswith('TILESIZE="256" />')


def test_zoomify_tile_with_width():
    assert zoomify_tile("2-1-1.jpg", 1, 512, 256) == (3, 3)


def test_zoomify_tile_with_callable_matches_int():
    widths = {3: 512}
    assert zoomify_tile("2-1-1.jpg", 1, widths.__getitem__, 256) == zoomify_tile(
        "2-1-1.jpg", 1, 512, 256
    )