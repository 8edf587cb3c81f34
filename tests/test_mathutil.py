import math

import pytest

from cassebrique.mathutil import (
    M2,
    U32_MAX,
    V2,
    V2i,
    XorShiftRandom,
    ceil_f,
    clamp,
    deg_to_rad,
    find_look_at_rotation,
    lerp,
    lerp_color,
    make_color_from_grey,
    make_color_from_rgb,
    make_rect_center_half_size,
    map_into_range_normalized,
    move_towards,
    rad_to_deg,
    square,
    trunc_f,
)


@pytest.mark.parametrize(
    "low,value,high,expected",
    [(0, 5, 10, 5), (0, -3, 10, 0), (0, 42, 10, 10), (-1.5, 0.25, 1.5, 0.25)],
)
def test_clamp(low, value, high, expected):
    assert clamp(low, value, high) == expected


def test_angle_round_trip():
    for angle in (0.0, 45.0, 90.0, -270.0):
        assert rad_to_deg(deg_to_rad(angle)) == pytest.approx(angle)


def test_trunc_and_ceil():
    assert trunc_f(-1.5) == -1
    assert ceil_f(2.0) == trunc_f(2.0) + 1
    assert ceil_f(2.3) == trunc_f(2.3) + 1


def test_color_packing():
    assert make_color_from_rgb(0x80, 0xFF, 0x00) == 0x80FF00
    assert make_color_from_rgb(0x66, 0xBB, 0xFF) == 0x66BBFF
    for g in (0, 17, 200, 255):
        assert make_color_from_grey(g) == make_color_from_rgb(g, g, g)


def test_lerp_endpoints():
    assert lerp(3.0, 0.0, 9.0) == 3.0
    assert lerp(3.0, 1.0, 9.0) == 9.0


def test_lerp_color_endpoints():
    assert lerp_color(0x00BBEE, 0.0, 0x33FFFF) == 0x00BBEE
    assert lerp_color(0x00BBEE, 1.0, 0x33FFFF) == 0x33FFFF


def test_lerp_color_stays_between():
    mid = lerp_color(0x000000, 0.5, 0xFFFFFF)
    r, g, b = (mid >> 16) & 0xFF, (mid >> 8) & 0xFF, mid & 0xFF
    assert r == g == b
    assert 0 < r < 0xFF


def test_square():
    assert square(-3.0) == 9.0


def test_map_into_range_normalized_clamps():
    assert map_into_range_normalized(10.0, 5.0, 20.0) == 0.0
    assert map_into_range_normalized(10.0, 25.0, 20.0) == 1.0
    assert 0.0 < map_into_range_normalized(10.0, 12.0, 20.0) < 1.0


def test_move_towards_never_overshoots():
    assert move_towards(0.0, 1.0, 5.0) == 1.0
    assert move_towards(10.0, 1.0, 100.0) == 1.0
    assert move_towards(4.0, 4.0, 1.0) == 4.0
    assert 0.0 < move_towards(0.0, 1.0, 0.25) < 1.0


def test_v2_arithmetic():
    a = V2(1.0, 2.0)
    b = V2(3.0, -4.0)
    assert (a + b) - b == a
    assert a * 2.0 == 2.0 * a == a + a
    assert -a == V2(-1.0, -2.0)
    assert a.dot(b) == a.x * b.x + a.y * b.y
    assert b.len_sq() == b.dot(b)


def test_v2i_arithmetic():
    a = V2i(4, -2)
    b = V2i(1, 1)
    assert (a + b) - b == a
    assert a * 2.9 == a + a


def test_m2_identity_and_rotation():
    v = V2(3.0, 5.0)
    assert M2(1.0, 0.0, 0.0, 1.0).apply(v) == v
    rotated = M2(0.0, -1.0, 1.0, 0.0).apply(v)
    assert rotated == V2(-v.y, v.x)


def test_rect_corners():
    low, top_left, high, bottom_right = make_rect_center_half_size(V2(1.0, 1.0), V2(2.0, 3.0))
    assert low == V2(-1.0, -2.0)
    assert high == V2(3.0, 4.0)
    assert top_left == V2(low.x, high.y)
    assert bottom_right == V2(high.x, low.y)


def test_find_look_at_rotation_straight_up():
    assert find_look_at_rotation(V2(0.0, 2.0), V2(0.0, 1.0)) == pytest.approx(90.0, rel=1e-5)
    assert find_look_at_rotation(V2(2.0, 0.0), V2(1.0, 0.0)) == 0.0


def test_xorshift_known_first_value():
    rng = XorShiftRandom(1)
    assert rng.next_u32() == 270369


def test_xorshift_zero_seed_stays_zero():
    rng = XorShiftRandom()
    assert [rng.next_u32() for _ in range(5)] == [0] * 5


def test_xorshift_deterministic_and_reseedable():
    a = XorShiftRandom(12345)
    first = [a.next_u32() for _ in range(10)]
    a.seed(12345)
    assert [a.next_u32() for _ in range(10)] == first
    assert all(0 <= v <= U32_MAX for v in first)


def test_xorshift_ranges():
    rng = XorShiftRandom(987654321)
    ints = [rng.int_in_range(1, 3) for _ in range(500)]
    assert set(ints) == {1, 2, 3}
    assert all(0.0 <= rng.unilateral() <= 1.0 for _ in range(200))
    assert all(-1.0 <= rng.bilateral() <= 1.0 for _ in range(200))
    assert all(0.0 <= rng.float_in_range(0.0, 360.0) <= 360.0 for _ in range(200))
    assert all(rng.choice(1) for _ in range(20))
    assert {rng.coin() for _ in range(200)} == {True, False}


def test_xorshift_invalid_arguments():
    rng = XorShiftRandom(7)
    with pytest.raises(ValueError):
        rng.int_in_range(5, 1)
    with pytest.raises(ValueError):
        rng.choice(0)


def test_deg_to_rad_close_to_math():
    assert deg_to_rad(180.0) == pytest.approx(math.pi, rel=1e-6)