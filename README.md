# iiptiles

Building blocks for a pyramidal image tile server speaking the IIP and
Zoomify protocols: a tile record, viewport and resolution calculation,
pixel transforms, and the byte-level TIL and Zoomify response formats.
All pixel work is done with numpy arrays.

## Installation

```
pip install iiptiles
```

To run the test suite:

```
pip install "iiptiles[test]"
pytest
```

## Modules

- `iiptiles.tiles` – the `Tile` dataclass (flat numpy sample buffer plus
  size, channels, bits per channel, cache key fields and timestamp), with
  `Tile.copy()`, `Tile.sample_count()` and the `data_length` property, and
  the `SampleType`, `CompressionType` and `ColourMap` enumerations.
- `iiptiles.view` – `View`, which holds the requested region (as fractions
  of the full image), output size, layers and adjustments, and turns them
  into a resolution level (`get_resolution`, `get_scale`) and a pixel
  viewport (`view_left_px`, `view_top_px`, `view_width_px`,
  `view_height_px`, `request_width`, `request_height`).
- `iiptiles.geometry` – in-place resizing (`interpolate_nearest_neighbour`,
  `interpolate_bilinear`), `rotate` by 90/180/270 degrees, `flip` and
  `flatten` (drop trailing bands).
- `iiptiles.colour` – `normalize` to floats in [0, 1], hill-shading with
  `shade`, `lab_to_srgb`, `colour_map` (HOT, COLD, JET), `invert`,
  `contrast` (back to 8 bit), `gamma`, `greyscale` and the channel `twist`.
- `iiptiles.responses` – TIL argument parsing, tile rectangles, headers and
  per-tile encoding (`parse_til_argument`, `til_rectangle`, `til_tiles`,
  `til_header`, `encode_til_tile`), and Zoomify request handling
  (`parse_zoomify`, `zoomify_discard`, `zoomify_properties`,
  `zoomify_tile`), plus `tiles_across`.
- `iiptiles.url` – `Url` for decoding request paths (`%00` is dropped and
  noted in `Url.warning`) and escaping for JSON.
- `iiptiles.timer` – `Timer` for microsecond timings.

## Examples

```python
from iiptiles.view import View

view = View()
view.set_image_size(4000, 3000)
view.set_max_resolutions(6)
view.max_size = 5000
view.set_view_left(0.25)
view.set_view_top(0.25)
view.set_view_width(0.5)
view.set_view_height(0.5)

level = view.get_resolution()
print(level, view.view_width_px(), view.view_height_px())
```

```python
from iiptiles.tiles import Tile
from iiptiles.geometry import rotate

tile = Tile(width=2, height=2, channels=1, bpc=8, data=bytes([1, 2, 3, 4]))
rotate(tile, 90)
tile.data.tolist()   # [3, 1, 4, 2]
```

```python
from iiptiles.responses import parse_til_argument, tiles_across
from iiptiles.url import Url

parse_til_argument("2,0-5")      # (2, 0, 5)
tiles_across(1000, 256)          # 4
Url("my%20image.tif").decode()   # 'my image.tif'
```

## What it does not do

The package does not read image files, keep a tile cache, fetch or
composite tiles from a source image, encode JPEG, apply watermarks or run
an HTTP/FastCGI server. It provides the calculations, transforms and
response formats that such a server is built from; reading pyramids,
caching and serving are left to the application.