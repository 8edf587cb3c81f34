from array import array

import pytest
from PIL import Image

from cassebrique.mathutil import V2, V2i
from cassebrique.render import SHIELD_COLOR, TARGET_ASPECT, Bitmap, Canvas, load_gif

WHITE = 0xFFFFFF


def at(canvas, x, y):
    return canvas.pixels[x + canvas.width * y]


def colored_count(canvas):
    return sum(1 for value in canvas.pixels if value)


def test_resize_allocates_zeroed_buffer():
    canvas = Canvas()
    canvas.resize(7, 3)
    assert len(canvas.pixels) == 21
    assert all(value == 0 for value in canvas.pixels)


def test_resize_rejects_negative():
    with pytest.raises(ValueError):
        Canvas().resize(-1, 4)


def test_clear_fills_everything():
    canvas = Canvas(4, 3)
    canvas.clear(WHITE)
    assert list(canvas.pixels) == [WHITE] * 12


def test_rect_in_pixels_is_clipped_to_canvas():
    canvas = Canvas(4, 3)
    canvas.draw_rect_in_pixels(-5, -5, 100, 100, WHITE)
    assert list(canvas.pixels) == [WHITE] * 12


def test_rect_in_pixels_fills_only_inside():
    canvas = Canvas(6, 6)
    canvas.draw_rect_in_pixels(1, 2, 4, 5, WHITE)
    for y in range(6):
        for x in range(6):
            inside = 1 <= x < 4 and 2 <= y < 5
            assert at(canvas, x, y) == (WHITE if inside else 0)


def test_transparent_rect_alpha_extremes():
    canvas = Canvas(2, 2)
    canvas.draw_transparent_rect_in_pixels(0, 0, 1, 2, WHITE, 0.0)
    assert at(canvas, 0, 0) == 0
    canvas.draw_transparent_rect_in_pixels(0, 0, 1, 2, WHITE, 5.0)
    assert at(canvas, 0, 0) == WHITE
    assert at(canvas, 0, 1) == WHITE
    assert at(canvas, 1, 0) == 0


def test_progressive_rect_fades_out():
    canvas = Canvas(1, 4)
    canvas.draw_progressive_transparent_rect_in_pixels(0, 0, 1, 4, WHITE)
    values = list(canvas.pixels)
    assert values[0] == WHITE
    assert values == sorted(values, reverse=True)
    assert values[-1] < values[0]


def test_progressive_rect_empty_range_does_nothing():
    canvas = Canvas(2, 2)
    canvas.draw_progressive_transparent_rect_in_pixels(0, 1, 2, 1, WHITE)
    assert colored_count(canvas) == 0


def test_aspect_multiplier_wide_uses_height():
    assert Canvas(1920, 1080).aspect_multiplier() == 1080


def test_aspect_multiplier_narrow_uses_width():
    assert Canvas(1000, 1000).aspect_multiplier() == pytest.approx(1000 / TARGET_ASPECT)


def test_pixels_to_world_centre_is_origin():
    canvas = Canvas(200, 100)
    world = canvas.pixels_to_world(V2i(100, 50))
    assert world == V2(0.0, 0.0)


def test_pixels_to_world_is_offset_dp():
    canvas = Canvas(200, 100)
    dp = canvas.pixels_dp_to_world(V2i(30, -10))
    absolute = canvas.pixels_to_world(V2i(130, 40))
    assert absolute.x == pytest.approx(dp.x)
    assert absolute.y == pytest.approx(dp.y)


def test_draw_rect_centred_on_origin():
    canvas = Canvas(200, 100)
    canvas.draw_rect(V2(0, 0), V2(1, 1), WHITE)
    assert at(canvas, 100, 50) == WHITE
    assert at(canvas, 90, 50) == 0
    assert at(canvas, 100, 60) == 0


def test_transparent_world_rect_matches_opaque_at_full_alpha():
    opaque = Canvas(200, 100)
    opaque.draw_rect(V2(3, -2), V2(5, 4), WHITE)
    blended = Canvas(200, 100)
    blended.draw_transparent_rect(V2(3, -2), V2(5, 4), WHITE, 1.0)
    assert blended.pixels == opaque.pixels


def test_number_eight_uses_more_pixels_than_one():
    one = Canvas(400, 200)
    one.draw_number(1, V2(0, 0), 20.0, WHITE)
    eight = Canvas(400, 200)
    eight.draw_number(8, V2(0, 0), 20.0, WHITE)
    assert 0 < colored_count(one) < colored_count(eight)


def test_number_zero_draws_something():
    canvas = Canvas(400, 200)
    canvas.draw_number(0, V2(0, 0), 20.0, WHITE)
    assert colored_count(canvas) > 0


def test_more_digits_cover_more_pixels():
    single = Canvas(400, 200)
    single.draw_number(7, V2(50, 0), 20.0, WHITE)
    double = Canvas(400, 200)
    double.draw_number(77, V2(50, 0), 20.0, WHITE)
    assert colored_count(double) == 2 * colored_count(single)


def test_clear_arena_screen_region():
    canvas = Canvas(200, 100)
    canvas.clear_arena_screen(V2(0, 0), 40, -80, 80, WHITE)
    assert at(canvas, 100, 0) == WHITE
    assert at(canvas, 10, 0) == 0
    assert at(canvas, 100, 95) == 0


def test_arena_rects_without_shield():
    canvas = Canvas(200, 100)
    canvas.draw_arena_rects(V2(0, 0), -40, 40, -80, 80, WHITE, 0.0, False)
    assert at(canvas, 5, 50) == WHITE
    assert at(canvas, 195, 50) == WHITE
    assert at(canvas, 100, 95) == WHITE
    assert at(canvas, 100, 50) == 0
    assert at(canvas, 100, 0) == 0


def test_arena_rects_with_shield_draws_floor():
    canvas = Canvas(200, 100)
    canvas.draw_arena_rects(V2(0, 0), -40, 40, -80, 80, WHITE, 1.0, False)
    assert at(canvas, 100, 0) == SHIELD_COLOR
    assert at(canvas, 100, 50) == 0


def test_rotated_rect_covers_centre():
    canvas = Canvas(200, 100)
    canvas.draw_rotated_transparent_rect(V2(0, 0), V2(5, 5), 45.0, WHITE, 1.0)
    assert at(canvas, 100, 50) == WHITE
    assert at(canvas, 10, 10) == 0


def test_rotated_rect_zero_alpha_leaves_canvas():
    canvas = Canvas(200, 100)
    canvas.draw_rotated_transparent_rect(V2(0, 0), V2(5, 5), 30.0, WHITE, 0.0)
    assert colored_count(canvas) == 0


def test_subpixel_rect_fills_interior():
    canvas = Canvas(200, 100)
    canvas.draw_rect_subpixel(V2(0, 0), V2(5, 5), WHITE)
    assert at(canvas, 100, 50) == WHITE
    assert at(canvas, 150, 50) == 0


def test_bitmap_opaque_pixel_is_drawn():
    canvas = Canvas(200, 100)
    bitmap = Bitmap(array("I", [0xFF00FF00]), 1, 1, 1)
    canvas.draw_bitmap(bitmap, V2(0, 0), V2(5, 5), 0.0, 1.0)
    assert at(canvas, 100, 50) == 0x00FF00


def test_bitmap_zero_alpha_multiplier_leaves_canvas():
    canvas = Canvas(200, 100)
    bitmap = Bitmap(array("I", [0xFF00FF00]), 1, 1, 1)
    canvas.draw_bitmap(bitmap, V2(0, 0), V2(5, 5), 0.0, 0.0)
    assert colored_count(canvas) == 0


def test_bitmap_frame_selection():
    canvas = Canvas(200, 100)
    bitmap = Bitmap(array("I", [0xFF0000FF, 0xFFFF0000]), 1, 1, 2)
    canvas.draw_bitmap(bitmap, V2(0, 0), V2(5, 5), 1.5, 1.0)
    assert at(canvas, 100, 50) == 0xFF0000


def test_load_gif_frames_and_flip(tmp_path):
    path = tmp_path / "anim.gif"
    first = Image.new("RGB", (1, 2))
    first.putpixel((0, 0), (255, 0, 0))
    first.putpixel((0, 1), (0, 0, 255))
    second = Image.new("RGB", (1, 2), (0, 255, 0))
    first.save(path, save_all=True, append_images=[second], duration=100, loop=0)

    bitmap = load_gif(path)
    assert bitmap.n_frames == 2
    assert (bitmap.width, bitmap.height) == (1, 2)
    assert len(bitmap.pixels) == 4
    assert bitmap.pixels[0] == 0xFF0000FF
    assert bitmap.pixels[1] == 0xFFFF0000
    assert bitmap.pixels[2] == 0xFF00FF00


def test_load_gif_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_gif(tmp_path / "missing.gif")