"""Scalar helpers, colours, small vectors and the xorshift random generator."""

from __future__ import annotations

import math
from dataclasses import dataclass

PI32 = 3.1415926
U32_MAX = 0xFFFFFFFF
S16_MIN = -32768
S16_MAX = 32767


def clamp(low, value, high):
    """Return value limited to the closed range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def deg_to_rad(angle: float) -> float:
    return PI32 / 180.0 * angle


def rad_to_deg(angle: float) -> float:
    return angle / PI32 * 180.0


def trunc_f(a: float) -> int:
    """Truncate towards zero."""
    return int(a)


def ceil_f(a: float) -> int:
    """Cheap ceiling: the truncation of a + 1 (one past whole numbers)."""
    return int(a + 1.0)


def _u8(value: float) -> int:
    return int(value) & 0xFF


def make_color_from_grey(grey: int) -> int:
    grey &= 0xFF
    return grey | (grey << 8) | (grey << 16)


def make_color_from_rgb(r: int, g: int, b: int) -> int:
    return (b & 0xFF) | ((g & 0xFF) << 8) | ((r & 0xFF) << 16)


def _channels(color: int) -> tuple[int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def lerp(a: float, t: float, b: float) -> float:
    return (1.0 - t) * a + t * b


def lerp_color(a: int, t: float, b: int) -> int:
    """Blend two 0xRRGGBB colours channel by channel."""
    ar, ag, ab = _channels(a)
    br, bg, bb = _channels(b)
    return make_color_from_rgb(
        _u8(lerp(ar, t, br)), _u8(lerp(ag, t, bg)), _u8(lerp(ab, t, bb))
    )


def square(a: float) -> float:
    return a * a


def map_into_range_normalized(low: float, value: float, high: float) -> float:
    """Map value from [low, high] onto [0, 1], clamped."""
    return clamp(0.0, (value - low) / (high - low), 1.0)


def move_towards(value: float, target: float, speed: float) -> float:
    """Step value towards target by at most speed without overshooting."""
    if value > target:
        return clamp(target, value - speed, value)
    if value < target:
        return clamp(value, value + speed, target)
    return value


@dataclass(frozen=True)
class V2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: V2) -> V2:
        return V2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: V2) -> V2:
        return V2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> V2:
        return V2(s * self.x, s * self.y)

    __rmul__ = __mul__

    def __neg__(self) -> V2:
        return V2(-self.x, -self.y)

    def dot(self, other: V2) -> float:
        return self.x * other.x + self.y * other.y

    def len_sq(self) -> float:
        return square(self.x) + square(self.y)


@dataclass(frozen=True)
class V2i:
    x: int = 0
    y: int = 0

    def __add__(self, other: V2i) -> V2i:
        return V2i(self.x + other.x, self.y + other.y)

    def __sub__(self, other: V2i) -> V2i:
        return V2i(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> V2i:
        factor = int(s)
        return V2i(factor * self.x, factor * self.y)


@dataclass(frozen=True)
class M2:
    """A 2x2 matrix stored row by row."""

    m00: float
    m01: float
    m10: float
    m11: float

    def apply(self, v: V2) -> V2:
        return V2(v.x * self.m00 + v.y * self.m01, v.x * self.m10 + v.y * self.m11)


def make_rect_center_half_size(center: V2, half_size: V2) -> tuple[V2, V2, V2, V2]:
    """Corners of a rectangle: min, top-left, max, bottom-right."""
    low = center - half_size
    high = center + half_size
    return (low, V2(low.x, high.y), high, V2(high.x, low.y))


def find_look_at_rotation(a: V2, b: V2) -> float:
    """Angle in degrees of the vector from b to a."""
    v = a - b
    return rad_to_deg(math.atan2(v.y, v.x))


class XorShiftRandom:
    """32-bit xorshift generator (shifts 13, 17, 5)."""

    def __init__(self, seed: int = 0) -> None:
        self.state = seed & U32_MAX

    def seed(self, value: int) -> None:
        self.state = value & U32_MAX

    def next_u32(self) -> int:
        x = self.state
        x ^= (x << 13) & U32_MAX
        x ^= x >> 17
        x ^= (x << 5) & U32_MAX
        self.state = x
        return x

    def int_in_range(self, low: int, high: int) -> int:
        """Integer in the closed range [low, high]."""
        span = high - low + 1
        if span <= 0:
            raise ValueError("empty range")
        return self.next_u32() % span + low

    def coin(self) -> bool:
        return self.next_u32() % 2 == 1

    def choice(self, chance: int) -> bool:
        """True with a probability of one in chance."""
        if chance <= 0:
            raise ValueError("chance must be positive")
        return self.next_u32() % chance == 0

    def unilateral(self) -> float:
        return self.next_u32() / U32_MAX

    def bilateral(self) -> float:
        return self.unilateral() * 2.0 - 1.0

    def float_in_range(self, low: float, high: float) -> float:
        return self.unilateral() * (high - low) + low