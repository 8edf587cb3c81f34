import pytest

from cassebrique.levels import (
    BlockPool,
    CollPool,
    create_aligned_blocks,
    create_invaders,
    create_wall,
)
from cassebrique.mathutil import V2, XorShiftRandom
from cassebrique.world import BlockFlag, CollKind, Level


def rng():
    return XorShiftRandom(12345)


def test_block_pool_wraps():
    pool = BlockPool(capacity=3)
    first = pool.next_available()
    pool.next_available()
    pool.next_available()
    assert pool.count == 0
    assert pool.next_available() is first


def test_block_pool_clear():
    pool = BlockPool()
    create_aligned_blocks(pool, rng(), Level.NORMAL, 4, 2, V2(4, 2), 0.2, 0.4, -4.0, 1.0)
    pool.clear()
    assert pool.count == 0
    assert all(not block.flags for block in pool)


def test_coll_pool_spawn_and_wrap():
    pool = CollPool(capacity=16)
    first = pool.spawn(V2(1.0, 2.0), CollKind.COMET)
    assert first.kind == CollKind.COMET
    assert first.half_size == V2(3.0, 3.0)
    assert first.frame_t == 0.0
    for _ in range(15):
        pool.spawn(V2(), CollKind.TRIPLESHOT)
    again = pool.spawn(V2(9.0, 9.0), CollKind.SLOW_PLAYER)
    assert again is first
    assert again.p == V2(9.0, 9.0)


def test_aligned_blocks_count_and_symmetry():
    pool = BlockPool()
    create_aligned_blocks(pool, rng(), Level.NORMAL, 18, 9, V2(4, 2), 0.2, 0.4, -4.0, 1.0)
    assert pool.count == 18 * 9
    blocks = pool.blocks[: pool.count]
    assert all(block.flags == BlockFlag.RIVAL_A | BlockFlag.ACTIVE for block in blocks)
    assert all(block.life == 1 for block in blocks)
    xs = [block.relative_p.x for block in blocks]
    assert min(xs) == pytest.approx(-max(xs))


def test_aligned_blocks_faster_higher_up():
    pool = BlockPool()
    create_aligned_blocks(pool, rng(), Level.NORMAL, 3, 4, V2(4, 2), 0.2, 0.4, -4.0, 1.0)
    rows = [pool.blocks[row * 3] for row in range(4)]
    assert rows[0].ball_speed_multiplier == pytest.approx(1.0)
    speeds = [block.ball_speed_multiplier for block in rows]
    heights = [block.relative_p.y for block in rows]
    assert speeds == sorted(speeds)
    assert heights == sorted(heights)


def test_rival_rows_alternate():
    pool = BlockPool()
    create_aligned_blocks(pool, rng(), Level.RIVALS, 5, 4, V2(4, 2), 0.2, 0.4, -4.0, 1.0)
    for index, block in enumerate(pool.blocks[: pool.count]):
        row = index // 5
        if row % 2:
            assert block.flags & BlockFlag.RIVAL_A
            assert block.color == 0x66FFFF
        else:
            assert block.flags & BlockFlag.RIVAL_B
            assert block.color == 0xFFD366


def test_collectibles_are_valid_kinds():
    pool = BlockPool()
    create_aligned_blocks(pool, rng(), Level.NORMAL, 18, 9, V2(4, 2), 0.2, 0.4, -4.0, 1.0)
    assert all(block.coll in set(CollKind) for block in pool.blocks[: pool.count])


def test_layout_is_deterministic_for_seed():
    a, b = BlockPool(), BlockPool()
    create_wall(a, XorShiftRandom(5))
    create_wall(b, XorShiftRandom(5))
    assert a.blocks == b.blocks


def test_wall_rows_are_staggered():
    pool = BlockPool()
    create_wall(pool, rng())
    assert pool.count == 15 * 9
    even_row_first = pool.blocks[0]
    odd_row_first = pool.blocks[15]
    assert even_row_first.relative_p.x - odd_row_first.relative_p.x == pytest.approx(
        even_row_first.half_size.x
    )


def test_invaders_half_width_matches_extent():
    pool = BlockPool()
    half_size = V2(1.25, 1.25)
    half_width = create_invaders(pool, rng(), 5, 2, half_size, 1.0)
    blocks = pool.blocks[: pool.count]
    assert min(b.relative_p.x for b in blocks) - half_size.x == pytest.approx(-half_width)
    assert max(b.relative_p.x for b in blocks) + half_size.x == pytest.approx(half_width)
    assert all(b.color == 0x33FF33 for b in blocks)


def test_single_invader_block_count():
    pool = BlockPool()
    create_invaders(pool, rng(), 1, 1, V2(1.25, 1.25), 1.0)
    assert pool.count == 16


def test_pool_capacity_must_be_positive():
    with pytest.raises(ValueError):
        BlockPool(capacity=0)
    with pytest.raises(ValueError):
        CollPool(capacity=0)