"""Software rasteriser drawing world-space shapes into a 32-bit pixel canvas."""

from __future__ import annotations

import math
import struct
from array import array
from dataclasses import dataclass, field
from os import PathLike
from typing import Union

from PIL import Image, ImageSequence

from .mathutil import (
    M2,
    V2,
    V2i,
    ceil_f,
    clamp,
    deg_to_rad,
    lerp,
    lerp_color,
    make_rect_center_half_size,
    map_into_range_normalized,
    trunc_f,
)

SCALE = 0.01
TARGET_ASPECT = 1.77
SHIELD_COLOR = 0xAFDFDF

# Segments of each digit as (dx, dy, half_w, half_h) in units of one square,
# plus how far the pen moves left afterwards.
_DIGITS: dict[int, tuple[tuple[tuple[float, float, float, float], ...], float]] = {
    0: (((-1, 0, .5, 2.5), (1, 0, .5, 2.5), (0, 2, .5, .5), (0, -2, .5, .5)), 4),
    1: (((1, 0, .5, 2.5),), 2),
    2: (((0, 2, 1.5, .5), (0, 0, 1.5, .5), (0, -2, 1.5, .5),
         (1, 1, .5, .5), (-1, -1, .5, .5)), 4),
    3: (((-.5, 2, 1, .5), (-.5, 0, 1, .5), (-.5, -2, 1, .5), (.5, 0, .5, 2.5)), 4),
    4: (((1, 0, .5, 2.5), (-1, 1, .5, 1.5), (0, 0, .5, .5)), 4),
    5: (((0, 2, 1.5, .5), (0, 0, 1.5, .5), (0, -2, 1.5, .5),
         (-1, 1, .5, .5), (1, -1, .5, .5)), 4),
    6: (((.5, 2, 1, .5), (.5, 0, 1, .5), (.5, -2, 1, .5),
         (-1, 0, .5, 2.5), (1, -1, .5, .5)), 4),
    7: (((1, 0, .5, 2.5), (-.5, 2, 1, .5)), 4),
    8: (((-1, 0, .5, 2.5), (.5, 0, .5, 2.5), (0, 2, .5, .5),
         (0, -2, .5, .5), (0, 0, .5, .5)), 4),
    9: (((-.5, 2, 1, .5), (-.5, 0, 1, .5), (-.5, -2, 1, .5),
         (1, 0, .5, 2.5), (-1, 1, .5, .5)), 4),
}


def _c_divmod10(n: int) -> tuple[int, int]:
    """Quotient and remainder by ten, truncating towards zero."""
    q = abs(n) // 10
    if n < 0:
        q = -q
    return q, n - q * 10


@dataclass
class Bitmap:
    """Animation frames stored bottom row first as 0xAARRGGBB pixels."""

    pixels: array
    width: int
    height: int
    n_frames: int


def load_gif(path: Union[str, PathLike]) -> Bitmap:
    """Load every frame of a GIF, flipped so the bottom row comes first."""
    pixels = array("I")
    width = height = 0
    n_frames = 0
    with Image.open(path) as image:
        for frame in ImageSequence.Iterator(image):
            rgba = frame.convert("RGBA").transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            width, height = rgba.size
            for (value,) in struct.iter_unpack("<I", rgba.tobytes()):
                red = value & 0xFF
                blue = (value >> 16) & 0xFF
                pixels.append((value & 0xFF00FF00) | (red << 16) | blue)
            n_frames += 1
    return Bitmap(pixels=pixels, width=width, height=height, n_frames=n_frames)


@dataclass
class Canvas:
    """A width x height buffer of 0xRRGGBB pixels, row 0 at the bottom."""

    width: int = 0
    height: int = 0
    pixels: array = field(default_factory=lambda: array("I"))

    def __post_init__(self) -> None:
        if len(self.pixels) != self.width * self.height:
            self.resize(self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("canvas size must not be negative")
        self.width = width
        self.height = height
        self.pixels = array("I", [0]) * (width * height)

    def clear(self, color: int) -> None:
        self.pixels = array("I", [color & 0xFFFFFFFF]) * (self.width * self.height)

    def _clip(self, x0: int, y0: int, x1: int, y1: int) -> tuple[int, int, int, int]:
        return (
            clamp(0, x0, self.width),
            clamp(0, y0, self.height),
            clamp(0, x1, self.width),
            clamp(0, y1, self.height),
        )

    def draw_rect_in_pixels(self, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        x0, y0, x1, y1 = self._clip(x0, y0, x1, y1)
        if x1 <= x0:
            return
        run = array("I", [color & 0xFFFFFFFF]) * (x1 - x0)
        for y in range(y0, y1):
            start = x0 + self.width * y
            self.pixels[start:start + len(run)] = run

    def _blend_row(self, y: int, x0: int, x1: int, color: int, alpha: float) -> None:
        row = self.width * y
        for index in range(row + x0, row + x1):
            self.pixels[index] = lerp_color(self.pixels[index], alpha, color)

    def draw_transparent_rect_in_pixels(
        self, x0: int, y0: int, x1: int, y1: int, color: int, alpha: float
    ) -> None:
        alpha = clamp(0.0, alpha, 1.0)
        x0, y0, x1, y1 = self._clip(x0, y0, x1, y1)
        for y in range(y0, y1):
            self._blend_row(y, x0, x1, color, alpha)

    def draw_progressive_transparent_rect_in_pixels(
        self, x0: int, y0: int, x1: int, y1: int, color: int
    ) -> None:
        """Blend color fully on the first row, fading out towards y1."""
        x0, y0, x1, y1 = self._clip(x0, y0, x1, y1)
        if y1 <= y0:
            return
        alpha = 1.0
        step = 1.0 / (y1 - y0)
        for y in range(y0, y1):
            self._blend_row(y, x0, x1, color, alpha)
            alpha -= step

    def aspect_multiplier(self) -> float:
        """Pixels per world unit before scaling, keeping a 16:9 playfield."""
        if self.height == 0:
            return 0.0
        multiplier = float(self.height)
        if self.width / self.height < TARGET_ASPECT:
            multiplier = self.width / TARGET_ASPECT
        return multiplier

    def _unit(self) -> float:
        return self.aspect_multiplier() * SCALE

    def pixels_dp_to_world(self, pixels: V2i) -> V2:
        aspect = self.aspect_multiplier()
        return V2(pixels.x / aspect / SCALE, pixels.y / aspect / SCALE)

    def pixels_to_world(self, pixels: V2i) -> V2:
        aspect = self.aspect_multiplier()
        x = pixels.x - self.width * 0.5
        y = pixels.y - self.height * 0.5
        return V2(x / aspect / SCALE, y / aspect / SCALE)

    def _to_pixels(self, p: V2) -> tuple[float, float]:
        unit = self._unit()
        return p.x * unit + self.width * 0.5, p.y * unit + self.height * 0.5

    def _pixel_box(self, p: V2, half_size: V2) -> tuple[int, int, int, int]:
        unit = self._unit()
        hx, hy = half_size.x * unit, half_size.y * unit
        px, py = self._to_pixels(p)
        return int(px - hx), int(py - hy), int(px + hx), int(py + hy)

    def draw_rect(self, p: V2, half_size: V2, color: int) -> None:
        self.draw_rect_in_pixels(*self._pixel_box(p, half_size), color)

    def draw_transparent_rect(self, p: V2, half_size: V2, color: int, alpha: float) -> None:
        alpha = clamp(0.0, alpha, 1.0)
        self.draw_transparent_rect_in_pixels(*self._pixel_box(p, half_size), color, alpha)

    def draw_number(self, number: int, p: V2, size: float, color: int) -> None:
        """Draw number right to left, its last digit centred on p."""
        square_size = size / 5.0
        x, y = p.x, p.y
        number, digit = _c_divmod10(number)
        first_digit = True
        remaining = number
        while remaining or first_digit or digit:
            first_digit = False
            shape = _DIGITS.get(digit)
            if shape is not None:
                segments, advance = shape
                for dx, dy, hw, hh in segments:
                    self.draw_rect(
                        V2(x + dx * square_size, y + dy * square_size),
                        V2(hw * square_size, hh * square_size),
                        color,
                    )
                x -= square_size * advance
            if not remaining:
                break
            remaining, digit = _c_divmod10(remaining)

    def clear_arena_screen(self, p: V2, top: float, left: float, right: float, color: int) -> None:
        unit = self._unit()
        px, py = self._to_pixels(p)
        x0 = int(px + left * unit)
        x1 = int(px + right * unit)
        y1 = int(py + top * unit)
        self.draw_rect_in_pixels(x0, 0, x1, y1, color)

    def draw_arena_rects(
        self,
        p: V2,
        bottom: float,
        top: float,
        left: float,
        right: float,
        color: int,
        invincibility_time: float,
        first_ball_movement: bool,
    ) -> None:
        """Draw the three walls and, while shielded, the glowing floor."""
        unit = self._unit()
        px, py = self._to_pixels(p)
        x0 = int(px + left * unit)
        y0 = int(py + bottom * unit)
        x1 = int(px + right * unit)
        y1 = int(py + top * unit)
        self.draw_rect_in_pixels(0, 0, x0, self.height, color)
        self.draw_rect_in_pixels(x1, 0, self.width, self.height, color)
        self.draw_rect_in_pixels(x0, y1, x1, self.height, color)
        if invincibility_time > 0 or first_ball_movement:
            self.draw_progressive_transparent_rect_in_pixels(x0, 0, x1, y0, SHIELD_COLOR)

    def draw_rotated_transparent_rect(
        self, p: V2, half_size: V2, angle: float, color: int, alpha: float
    ) -> None:
        """Blend a rectangle rotated by angle degrees about its centre."""
        alpha = clamp(0.0, alpha, 1.0)
        radians = deg_to_rad(angle)
        cos, sin = math.cos(radians), math.sin(radians)
        rotation = M2(cos, -sin, sin, cos)
        unit = self._unit()
        centre = V2(self.width * 0.5, self.height * 0.5)

        corners = []
        min_x, min_y = self.width, self.height
        max_x, max_y = 0, 0
        for corner in make_rect_center_half_size(V2(), half_size):
            point = (p + rotation.apply(corner)) * unit + centre
            corners.append(point)
            min_x = min(min_x, trunc_f(point.x))
            max_x = max(max_x, ceil_f(point.x))
            min_y = min(min_y, trunc_f(point.y))
            max_y = max(max_y, ceil_f(point.y))
        min_x, min_y, max_x, max_y = self._clip(min_x, min_y, max_x, max_y)

        c0, c1, _c2, c3 = corners
        axis_1 = c1 - c0
        axis_2 = c0 - c1
        axis_3 = c3 - c0
        axis_4 = c0 - c3
        for y in range(min_y, max_y):
            row = self.width * y
            for x in range(min_x, max_x):
                pixel_p = V2(float(x), float(y))
                rel_0 = pixel_p - c0
                if (
                    rel_0.dot(axis_1) >= 0
                    and (pixel_p - c1).dot(axis_2) >= 0
                    and rel_0.dot(axis_3) >= 0
                    and (pixel_p - c3).dot(axis_4) >= 0
                ):
                    index = row + x
                    self.pixels[index] = lerp_color(self.pixels[index], alpha, color)

    def draw_rect_subpixel(self, p: V2, half_size: V2, color: int) -> None:
        """Draw a rectangle whose edges are blended by their pixel coverage."""
        unit = self._unit()
        hx, hy = half_size.x * unit, half_size.y * unit
        px, py = self._to_pixels(p)

        x0f = px - hx + 0.5
        x0 = int(x0f)
        x0_alpha = x0f - x0
        y0f = py - hy + 0.5
        y0 = int(y0f)
        y0_alpha = y0f - y0
        x1f = px + hx + 0.5
        x1 = int(x1f)
        x1_alpha = x1f - x1
        y1f = py + hy + 0.5
        y1 = int(y1f)
        y1_alpha = y1f - y1

        self.draw_transparent_rect_in_pixels(x0, y0 + 1, x0 + 1, y1, color, 1.0 - x0_alpha)
        self.draw_transparent_rect_in_pixels(x1, y0 + 1, x1 + 1, y1, color, x1_alpha)
        self.draw_transparent_rect_in_pixels(x0 + 1, y0, x1, y0 + 1, color, 1.0 - y0_alpha)
        self.draw_transparent_rect_in_pixels(x0 + 1, y1, x1, y1 + 1, color, y1_alpha)
        self.draw_rect_in_pixels(x0 + 1, y0 + 1, x1, y1, color)

    def draw_bitmap(
        self, bitmap: Bitmap, p: V2, half_size: V2, frame: float, alpha_multiplier: float
    ) -> None:
        """Stretch one frame of bitmap over the rectangle, blending by its alpha."""
        alpha_multiplier = clamp(0.0, alpha_multiplier, 1.0)
        x0, y0, x1, y1 = self._clip(*self._pixel_box(p, half_size))
        start = trunc_f(frame) * bitmap.width * bitmap.height
        for y in range(y0, y1):
            v = map_into_range_normalized(float(y0), float(y), float(y1))
            source_row = start + int(lerp(0.0, v, float(bitmap.height))) * bitmap.width
            row = self.width * y
            for x in range(x0, x1):
                u = map_into_range_normalized(float(x0), float(x), float(x1))
                source = bitmap.pixels[source_row + int(lerp(0.0, u, float(bitmap.width)))]
                alpha = ((source >> 24) & 0xFF) / 255.0 * alpha_multiplier
                index = row + x
                self.pixels[index] = lerp_color(self.pixels[index], alpha, source)