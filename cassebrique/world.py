"""State records for the arena, paddle, balls, blocks, power-ups and particles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import TYPE_CHECKING, Optional

from .mathutil import V2

if TYPE_CHECKING:
    from .audio import PlayingSound


class BallFlag(IntFlag):
    ACTIVE = 0x1
    DESTROYED_ON_DP_Y_DOWN = 0x2
    RIVAL_A = 0x4
    RIVAL_B = 0x8
    FIXED_SPEED = 0x10


class BlockFlag(IntFlag):
    RIVAL_A = 0x1
    RIVAL_B = 0x2
    ACTIVE = 0x4


class CollKind(IntEnum):
    INACTIVE = 0
    # power-ups
    INVINCIBILITY = 1
    TRIPLESHOT = 2
    COMET = 3
    # power-downs
    LOOSE_LIFE = 4
    STRONG_BLOCKS = 5
    REVERSE_CONTROL = 6
    SLOW_PLAYER = 7


class Level(IntEnum):
    NORMAL = 0
    WALL = 1
    RIVALS = 2
    PONG = 3
    INVADERS = 4


@dataclass
class Arena:
    """The playfield and the spring-animated positions of its walls."""

    half_size: V2 = field(default_factory=lambda: V2(85.0, 45.0))
    left_wall_visual_p: float = -85.0
    left_wall_visual_dp: float = 0.0
    right_wall_visual_p: float = 85.0
    right_wall_visual_dp: float = 0.0
    top_wall_visual_p: float = 45.0
    top_wall_visual_dp: float = 0.0
    bottom_wall_visual_p: float = -45.0
    arena_color: int = 0x000066
    wall_color: int = 0x006666


@dataclass
class Player:
    """The paddle, with its springy visual position and squeeze."""

    p: V2 = field(default_factory=lambda: V2(0.0, -35.0))
    desired_p: V2 = field(default_factory=lambda: V2(0.0, -35.0))
    dp: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=lambda: V2(10.0, 2.0))
    base_half_size: V2 = field(default_factory=lambda: V2(10.0, 2.0))
    color: int = 0x80FF00
    visual_p: V2 = field(default_factory=lambda: V2(0.0, -35.0))
    visual_dp: V2 = field(default_factory=V2)
    visual_ddp: V2 = field(default_factory=V2)
    squeeze_factor: float = 0.0
    squeeze_factor_d: float = 0.0
    squeeze_factor_dd: float = 0.0
    is_twinkling: bool = False
    twinkle: bool = False
    twinkling_t: float = 0.0
    twinkling_target: float = 0.2
    twinkling_number: int = 10
    movement_sound: Optional["PlayingSound"] = None

    def start_twinkling(self) -> None:
        """Blink the paddle ten times after a life is lost."""
        self.is_twinkling = True
        self.twinkle = True
        self.twinkling_t = 0.0
        self.twinkling_number = 10


@dataclass
class Particle:
    p: V2 = field(default_factory=V2)
    dp: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=V2)
    angle: float = 0.0
    color: int = 0
    life: float = 0.0
    life_d: float = 0.0


@dataclass
class Ball:
    p: V2 = field(default_factory=V2)
    dp: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=V2)
    base_speed: float = 0.0
    speed_multiplier: float = 0.0
    collision_test_p: V2 = field(default_factory=V2)
    desired_p: V2 = field(default_factory=V2)
    color: int = 0
    flags: BallFlag = BallFlag(0)
    next_trail: int = 0
    trail_spawner: float = 0.0
    trail_spawner_t: float = 0.0


@dataclass
class Coll:
    """A falling collectible."""

    kind: CollKind = CollKind.INACTIVE
    p: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=V2)
    frame_t: float = 0.0


@dataclass
class Block:
    relative_p: V2 = field(default_factory=V2)
    p: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=V2)
    ball_speed_multiplier: float = 0.0
    life: int = 0
    color: int = 0
    flags: BlockFlag = BlockFlag(0)
    coll: CollKind = CollKind.INACTIVE


@dataclass
class PongState:
    p: V2 = field(default_factory=V2)
    dp: V2 = field(default_factory=V2)
    half_size: V2 = field(default_factory=V2)


@dataclass
class InvaderState:
    p: V2 = field(default_factory=V2)
    max_p: V2 = field(default_factory=V2)
    x_movement: float = 0.0
    movement_t: float = 0.0
    movement_target: float = 0.0
    is_moving_right: bool = False
    is_moving_down: bool = False