"""Viewport, resolution selection and the image adjustments a request asks for."""

from __future__ import annotations

import math
from typing import List, Optional

from .tiles import ColourMap


def _round(value: float) -> int:
    """Round half away from zero."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return int(math.ceil(value - 0.5))


class View:
    """Holds the region, size and processing requested for an image.

    The region is kept in resolution-independent coordinates (fractions of
    the full image) and converted to pixels at the chosen resolution.
    """

    def __init__(self) -> None:
        self.view_left = 0.0
        self.view_top = 0.0
        self.view_width = 1.0
        self.view_height = 1.0

        self.resolution = 0
        self.max_resolutions = 0
        self.width = 0
        self.height = 0
        self.res_width = 0
        self.res_height = 0
        self.min_size = 1
        self.max_size = 0
        self.requested_width = 0
        self.requested_height = 0

        self.contrast = 1.0
        self.gamma = 1.0
        self.rotation = 0.0

        self.xangle = 0
        self.yangle = 90
        self.shaded = False
        self.shade: List[int] = [0, 0, 0]
        self.cmapped = False
        self.cmap = ColourMap.HOT
        self.inverted = False
        self.max_layers = 0
        self.layers = 0
        self.colourspace: Optional[str] = None
        self.ctw: List[List[float]] = []
        self.flip = 0
        self.maintain_aspect = True
        self.allow_upscaling = True

    def set_max_resolutions(self, r: int) -> None:
        """Set the number of resolutions available; selects the largest."""
        self.max_resolutions = r
        self.resolution = r - 1

    def set_image_size(self, width: int, height: int) -> None:
        """Set the full-resolution pixel size of the image."""
        self.width = width
        self.height = height

    def _calculate_resolution(self, dimension: int, requested_size: int) -> None:
        rs = max(requested_size, self.min_size)
        j = 1
        d = dimension
        while d >= rs:
            d //= 2
            j += 1

        j = min(j, self.max_resolutions + 1)

        candidate = self.max_resolutions - j + 1
        if self.resolution > candidate:
            self.resolution = candidate

        if self.resolution > self.max_resolutions - 1:
            self.resolution = self.max_resolutions - 1
        if self.resolution < 0:
            self.resolution = 0

    @staticmethod
    def _requested_size(requested: int, fraction: float) -> int:
        if fraction <= 0:
            return requested if requested == 0 else 2**63
        return int(math.floor(requested / fraction))

    def get_resolution(self) -> int:
        """Choose the smallest resolution that satisfies the requested size."""
        self.resolution = self.max_resolutions - 1

        if self.requested_width:
            self._calculate_resolution(
                self.width, self._requested_size(self.requested_width, self.view_width)
            )
        if self.requested_height:
            self._calculate_resolution(
                self.height, self._requested_size(self.requested_height, self.view_height)
            )

        self.res_width = self.width
        self.res_height = self.height
        for _ in range(1, self.max_resolutions - self.resolution):
            self.res_width //= 2
            self.res_height //= 2

        scale = self.get_scale()

        if (
            self.res_width * self.view_width * scale > self.max_size
            or self.res_height * self.view_height * scale > self.max_size
        ):
            if self.res_width * self.view_width > self.res_height * self.view_width:
                dimension = int(self.res_width * self.view_width * scale)
            else:
                dimension = int(self.res_height * self.view_height * scale)

            while dimension > self.max_size and self.resolution > 0:
                dimension //= 2
                self.res_width = self.width // 2
                self.res_height = self.height // 2
                self.resolution -= 1

        return self.resolution

    def get_scale(self) -> float:
        """Scaling needed when the requested size falls between resolutions."""
        if self.requested_width == 0 and self.requested_height > 0 and self.res_height:
            rw = self.res_width * self.requested_height // self.res_height
        else:
            rw = self.requested_width

        if self.requested_height == 0 and self.requested_width > 0 and self.res_width:
            rh = self.res_height * self.requested_width // self.res_width
        else:
            rh = self.requested_height

        if self.width == 0:
            return 1.0
        scale = rw / self.width
        if self.res_height and rh / self.res_height < scale:
            scale = rh / self.res_height

        if scale <= 0 or scale > 1.0:
            scale = 1.0
        return scale

    @staticmethod
    def _clamp_unit(value: float) -> float:
        return min(max(value, 0.0), 1.0)

    def set_view_left(self, x: float) -> None:
        """Set the left edge of the region as a fraction of the image width."""
        self.view_left = self._clamp_unit(x)

    def set_view_top(self, y: float) -> None:
        """Set the top edge of the region as a fraction of the image height."""
        self.view_top = self._clamp_unit(y)

    def set_view_width(self, w: float) -> None:
        """Set the region width, cropped so the region stays within the image."""
        if self.view_left + w > 1.0:
            w = 1.0 - self.view_left
        self.view_width = self._clamp_unit(w)

    def set_view_height(self, h: float) -> None:
        """Set the region height as a fraction of the image height."""
        self.view_height = self._clamp_unit(h)

    def viewport_set(self) -> bool:
        """Whether a region smaller than the whole image has been requested."""
        return (
            self.view_width < 1.0
            or self.view_height < 1.0
            or self.view_left > 0.0
            or self.view_top > 0.0
        )

    def _divisor(self) -> int:
        return 1 << max(self.max_resolutions - self.resolution - 1, 0)

    def view_left_px(self) -> int:
        """Left edge of the region in pixels at the current resolution."""
        return _round(self.width * self.view_left / self._divisor())

    def view_top_px(self) -> int:
        """Top edge of the region in pixels at the current resolution."""
        return _round(self.height * self.view_top / self._divisor())

    def view_width_px(self) -> int:
        """Width of the region in pixels at the current resolution."""
        rw = self.width // self._divisor()
        w = _round(self.view_width * rw)
        left = _round(self.view_left * rw)
        if w + left > rw:
            w = rw - left
        return max(w, self.min_size)

    def view_height_px(self) -> int:
        """Height of the region in pixels at the current resolution."""
        rh = self.height // self._divisor()
        h = _round(self.view_height * rh)
        top = _round(self.view_top * rh)
        if h + top > rh:
            h = rh - top
        return max(h, self.min_size)

    def request_width(self) -> int:
        """Output width, derived from the requested height if only that was given."""
        w = self.requested_width
        if self.requested_width == 0:
            if self.requested_height != 0:
                w = _round(self.view_width_px() * self.requested_height / self.view_height_px())
            else:
                w = self.width
        return min(w, self.max_size)

    def request_height(self) -> int:
        """Output height, derived from the requested width if only that was given."""
        h = self.requested_height
        if self.requested_height == 0:
            if self.requested_width != 0:
                h = _round(self.view_height_px() * self.requested_width / self.view_width_px())
            else:
                h = self.height
        return min(h, self.max_size)

    def effective_layers(self) -> int:
        """Number of quality layers to decode, limited by ``max_layers``."""
        if self.max_layers > 0:
            if 0 < self.layers < self.max_layers:
                return self.layers
            return self.max_layers
        if self.max_layers < 0 and self.layers == 0:
            return -1
        return self.layers

    def float_processing(self) -> bool:
        """Whether the requested adjustments need floating point data."""
        return bool(
            self.contrast != 1.0
            or self.gamma != 1.0
            or self.cmapped
            or self.shaded
            or self.inverted
            or self.ctw
        )