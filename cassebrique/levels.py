"""Block and collectible pools and the layouts that fill them."""

from __future__ import annotations

from .mathutil import V2, XorShiftRandom, make_color_from_grey, make_color_from_rgb
from .world import Block, BlockFlag, Coll, CollKind, Level

MAX_BLOCKS = 256
MAX_COLLS = 16

_INVADER = (
    "  0 0  ",
    " 0 0 0 ",
    " 00000 ",
    "00   00",
    "  0 0  ",
)


class BlockPool:
    """Fixed pool of blocks handed out in order, wrapping at the end."""

    def __init__(self, capacity: int = MAX_BLOCKS) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.blocks = [Block() for _ in range(capacity)]
        self.count = 0

    def next_available(self) -> Block:
        block = self.blocks[self.count]
        self.count += 1
        if self.count >= len(self.blocks):
            self.count = 0
        return block

    def clear(self) -> None:
        self.blocks = [Block() for _ in self.blocks]
        self.count = 0

    def __iter__(self):
        return iter(self.blocks)


class CollPool:
    """Ring of falling collectibles."""

    def __init__(self, capacity: int = MAX_COLLS) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.colls = [Coll() for _ in range(capacity)]
        self.next_index = 0

    def spawn(self, p: V2, kind: CollKind) -> Coll:
        coll = self.colls[self.next_index]
        self.next_index = (self.next_index + 1) % len(self.colls)
        coll.p = p
        coll.kind = CollKind(kind)
        coll.half_size = V2(3.0, 3.0)
        coll.frame_t = 0.0
        return coll

    def clear(self) -> None:
        self.colls = [Coll() for _ in self.colls]
        self.next_index = 0

    def __iter__(self):
        return iter(self.colls)


def _random_coll(rng: XorShiftRandom) -> CollKind:
    """One in 15 blocks holds a power-up, then one in 30 a power-down."""
    if rng.choice(15):
        return CollKind(rng.int_in_range(1, 3))
    if rng.choice(30):
        return CollKind(rng.int_in_range(4, 7))
    return CollKind.INACTIVE


def _place(block: Block, half_size: V2, relative_p: V2) -> None:
    block.life = 1
    block.half_size = half_size
    block.relative_p = relative_p
    block.p = relative_p


def create_aligned_blocks(
    pool: BlockPool,
    rng: XorShiftRandom,
    level: Level,
    num_x: int,
    num_y: int,
    block_half_size: V2,
    spacing_x: float,
    spacing_y: float,
    offset: float,
    base_speed_multiplier: float,
) -> None:
    """Fill a centred grid of num_x by num_y blocks."""
    hx, hy = block_half_size.x, block_half_size.y
    x_offset = num_x * hx * (2.0 + spacing_x) * 0.5 - hx * (1.0 + spacing_x / 2.0)
    y_offset = offset
    for y in range(num_y):
        for x in range(num_x):
            block = pool.next_available()
            _place(
                block,
                block_half_size,
                V2(x * hx * (2.0 + spacing_x) - x_offset, y * hy * (2.0 + spacing_y) - y_offset),
            )
            block.coll = _random_coll(rng)
            if level == Level.RIVALS:
                block.ball_speed_multiplier = 1.0 + y * 1.1 / num_y
                if y % 2:
                    block.color = 0x66FFFF
                    block.flags = BlockFlag.RIVAL_A | BlockFlag.ACTIVE
                else:
                    block.color = 0xFFD366
                    block.flags = BlockFlag.RIVAL_B | BlockFlag.ACTIVE
            else:
                k = (y * 255 // num_y) & 0xFF
                block.color = make_color_from_rgb(k, 255, 128)
                block.flags = BlockFlag.RIVAL_A | BlockFlag.ACTIVE
                block.ball_speed_multiplier = base_speed_multiplier + y * 1.25 / num_y


def create_wall(pool: BlockPool, rng: XorShiftRandom) -> None:
    """Fill a staggered brick wall of grey rows."""
    num_x = 15
    num_y = 9
    half_size = V2(4.0, 2.0)
    x_offset = (num_x * half_size.x * 2.5) * 0.5 - half_size.x * 1.5 * 0.5
    y_offset = -1.0
    for y in range(num_y):
        for x in range(num_x):
            block = pool.next_available()
            px = x * half_size.x * 2.5 - x_offset
            if not y % 2:
                px += half_size.x
            _place(block, half_size, V2(px, y * half_size.y * 2.5 - y_offset))
            block.color = make_color_from_grey((y * 255 // num_y) & 0xFF)
            block.ball_speed_multiplier = 1.0 + y * 1.25 / num_y
            block.flags = BlockFlag.RIVAL_A | BlockFlag.ACTIVE
            block.coll = _random_coll(rng)


def create_invaders(
    pool: BlockPool,
    rng: XorShiftRandom,
    num_x: int,
    num_y: int,
    block_half_size: V2,
    base_speed_multiplier: float,
) -> float:
    """Build a formation of space invaders; return its half width."""
    size_y = len(_INVADER)
    size_x = len(_INVADER[0])
    hx, hy = block_half_size.x, block_half_size.y
    x_offset = (size_x / 2.0) * hx * 2.0 * num_x - hx + 3.0 * hx * (num_x - 1)
    y_offset = -40.0
    for i in range(num_x):
        for j in range(num_y):
            for row, line in enumerate(_INVADER):
                for d, cell in enumerate(line):
                    if cell == " ":
                        continue
                    block = pool.next_available()
                    _place(
                        block,
                        block_half_size,
                        V2(
                            hx * 2.0 * d + i * (size_x + 3) * hx * 2 - x_offset,
                            -hy * 2.0 * row - j * (size_y + 3) * hy * 2 - y_offset,
                        ),
                    )
                    block.color = 0x33FF33
                    block.ball_speed_multiplier = (
                        base_speed_multiplier + (size_y - row) * 0.75 / size_y
                    )
                    block.flags = BlockFlag.RIVAL_A | BlockFlag.ACTIVE
                    block.coll = _random_coll(rng)
    return (num_x * size_x * hx * 2 + (num_x - 1) * 3 * hx * 2) / 2.0