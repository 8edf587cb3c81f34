"""The brick-breaker game: levels, rules and the per-frame update."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

from .audio import Mixer
from .collision import (
    aabb_vs_aabb,
    ball_colliding_arena,
    ball_colliding_block,
    ball_colliding_player,
)
from .console import MessageLog
from .controls import ButtonId, Controls
from .levels import BlockPool, CollPool, create_aligned_blocks, create_invaders, create_wall
from .mathutil import (
    V2,
    XorShiftRandom,
    clamp,
    find_look_at_rotation,
    lerp_color,
    map_into_range_normalized,
    square,
)
from .particles import ParticleSystem
from .render import Bitmap, Canvas
from .wav import LoadedSound
from .world import (
    Arena,
    Ball,
    BallFlag,
    Block,
    BlockFlag,
    CollKind,
    InvaderState,
    Level,
    Player,
    PongState,
)

MAX_BALLS = 16
LEVEL_COUNT = len(Level)

PLAYER_COLOR = 0x80FF00
COLL_FALLBACK_COLOR = 0xFFFF99

# Where the asset files live, relative to the game's data directory.
ASSET_FILES = {
    "invincibility": "Sprites/Animations/Powerups/invincibility.gif",
    "triple_shoot": "Sprites/Animations/Powerups/triple_shoot.gif",
    "comet": "Sprites/Animations/Powerups/comet.gif",
    "loose_life": "Sprites/Animations/Powerdowns/Loose_Life.gif",
    "reverse": "Sprites/Animations/Powerdowns/Reverse.gif",
    "slow_player": "Sprites/Animations/Powerdowns/Slow_player.gif",
    "strong_block": "Sprites/Animations/Powerdowns/Strong_block.gif",
    "block_strong": "Sprites/Blocks/Block_strong.gif",
    "music": "Sounds/Musics/test.wav",
    "sine": "Sounds/Effects/sine.wav",
}

_COLL_BITMAPS = {
    CollKind.INVINCIBILITY: "invincibility",
    CollKind.TRIPLESHOT: "triple_shoot",
    CollKind.COMET: "comet",
    CollKind.LOOSE_LIFE: "loose_life",
    CollKind.STRONG_BLOCKS: "strong_block",
    CollKind.REVERSE_CONTROL: "reverse",
    CollKind.SLOW_PLAYER: "slow_player",
}


@dataclass
class GameAssets:
    """Sprites and sounds; any of them may be missing."""

    invincibility: Optional[Bitmap] = None
    triple_shoot: Optional[Bitmap] = None
    comet: Optional[Bitmap] = None
    loose_life: Optional[Bitmap] = None
    reverse: Optional[Bitmap] = None
    slow_player: Optional[Bitmap] = None
    strong_block: Optional[Bitmap] = None
    block_strong: Optional[Bitmap] = None
    music: Optional[LoadedSound] = None
    sine: Optional[LoadedSound] = None


class Game:
    """All game state, advanced and drawn one frame at a time by update()."""

    def __init__(
        self,
        canvas: Optional[Canvas] = None,
        rng: Optional[XorShiftRandom] = None,
        assets: Optional[GameAssets] = None,
        mixer: Optional[Mixer] = None,
        development: bool = False,
    ) -> None:
        self.canvas = canvas if canvas is not None else Canvas()
        self.rng = rng if rng is not None else XorShiftRandom(int(time.time()))
        self.assets = assets if assets is not None else GameAssets()
        self.mixer = mixer
        self.development = development
        self.messages = MessageLog()

        # Before the first restart the arena and paddle are all zeros, which
        # places the very first ball at the centre of the screen.
        self.arena = Arena(half_size=V2())
        self.player = Player(p=V2(), desired_p=V2(), half_size=V2(), base_half_size=V2(),
                             visual_p=V2())
        self.balls = [Ball() for _ in range(MAX_BALLS)]
        self.block_pool = BlockPool()
        self.coll_pool = CollPool()
        self.particles = ParticleSystem(self.rng)
        self.pong = PongState()
        self.invader = InvaderState()

        self.number_of_life = 0
        self.score = 0
        self.combo_time = 0.0
        self.current_time = 0.0
        self.first_ball_movement = False
        self.invincibility_time = 0.0
        self.strong_blocks_time = 0.0
        self.reverse_time = 0.0
        self.slow_player_t = 0.0
        self.number_of_triple_shots = 0
        self.number_of_comet = 0
        self.is_comet = False
        self.blocks_destroyed = 0
        self.dt_multiplier = 1.0
        self.current_level = int(Level.NORMAL)

        self.restart()

        if self.mixer is not None:
            if self.assets.music is not None:
                self.mixer.play(self.assets.music, True)
            if self.assets.sine is not None:
                self.player.movement_sound = self.mixer.play(self.assets.sine, True)
                self.player.movement_sound.volume = 0.0

    @property
    def level(self) -> Level:
        return Level(self.current_level)

    # Level set-up

    def restart(self) -> None:
        """Start the current level afresh, wrapping the level number."""
        if self.current_level >= LEVEL_COUNT:
            self.current_level = 0
        elif self.current_level < 0:
            self.current_level = LEVEL_COUNT - 1

        # Replace the slots in place so a loop over the balls sees the new ones.
        self.balls[:] = [Ball() for _ in range(MAX_BALLS)]
        self.block_pool.clear()
        self.coll_pool.clear()
        self.particles.clear()
        self.pong = PongState()
        self.invader = InvaderState()

        self.reset_ball_coll()

        self.number_of_life = 3
        self.score = 0
        self.player = Player(movement_sound=self.player.movement_sound)
        self.invincibility_time = 0.0
        self.arena = Arena()
        self.blocks_destroyed = 0

        level = self.level
        if level in (Level.NORMAL, Level.RIVALS):
            create_aligned_blocks(self.block_pool, self.rng, level, 18, 9, V2(4.0, 2.0),
                                  0.2, 0.4, -4.0, 1.0)
        elif level == Level.WALL:
            create_wall(self.block_pool, self.rng)
        elif level == Level.PONG:
            create_aligned_blocks(self.block_pool, self.rng, level, 10, 3, V2(2.0, 2.0),
                                  0.05, 0.05, -32.0, 2.0)
            self.pong.half_size = V2((2 * 2 + 0.05) * 10 / 2, (2 * 2 + 0.05) * 3 / 2)
        elif level == Level.INVADERS:
            half_width = create_invaders(self.block_pool, self.rng, 5, 2, V2(1.25, 1.25), 1.0)
            max_x = self.arena.half_size.x - half_width
            self.invader.x_movement = max_x / 4.0
            self.invader.movement_target = 1.0
            self.invader.max_p = V2(max_x, 0.0)
            self.invader.is_moving_right = True
            self.invader.is_moving_down = False

    def change_level(self, delta: int) -> None:
        """Move delta levels forwards or backwards and restart."""
        self.current_level += delta
        self.restart()

    def reset_ball_coll(self) -> None:
        """Put the ball(s) back above the paddle and cancel every power-up."""
        middle_y = (self.arena.half_size.y + (self.player.p.y + self.player.half_size.y)) * 0.5
        self.invincibility_time = 0.0
        self.number_of_comet = 0
        self.is_comet = False
        self.number_of_triple_shots = 0
        self.strong_blocks_time = 0.0
        self.reverse_time = 0.0
        self.slow_player_t = 0.0

        first = self.balls[0]
        self._place_serve_ball(first, -50.0, middle_y, 0x66BBFF)
        first.flags |= BallFlag.ACTIVE | BallFlag.RIVAL_A

        if self.level == Level.RIVALS:
            first.flags |= BallFlag.FIXED_SPEED
            second = self.balls[1]
            self._place_serve_ball(second, -50.0 * 0.5, middle_y, 0xFFAA66)
            second.flags |= BallFlag.ACTIVE | BallFlag.RIVAL_B | BallFlag.FIXED_SPEED
        self.first_ball_movement = True

    @staticmethod
    def _place_serve_ball(ball: Ball, dp_y: float, y: float, color: int) -> None:
        ball.base_speed = 50.0
        ball.dp = V2(0.0, dp_y)
        ball.p = V2(0.0, y)
        ball.half_size = V2(0.75, 0.75)
        ball.speed_multiplier = 1.0
        ball.desired_p = ball.p
        ball.collision_test_p = ball.p
        ball.color = color
        ball.next_trail = 0
        ball.trail_spawner = 0.005
        ball.trail_spawner_t = 0.0

    def next_available_ball(self) -> Ball:
        """Clear and return the first inactive ball slot."""
        for index, ball in enumerate(self.balls):
            if not ball.flags & BallFlag.ACTIVE:
                fresh = Ball()
                self.balls[index] = fresh
                return fresh
        raise RuntimeError("no free ball slot")

    def spawn_triple_shot(self) -> None:
        """Launch two extra balls from the paddle, one to each side."""
        for side in (-1, 1):
            ball = self.next_available_ball()
            ball.base_speed = 50.0
            ball.dp = V2(side * 45.0, ball.base_speed)
            ball.p = V2(self.player.p.x, self.player.p.y + self.player.half_size.y)
            ball.half_size = self.balls[0].half_size
            ball.speed_multiplier = self.balls[0].speed_multiplier
            ball.desired_p = ball.p
            ball.collision_test_p = ball.p
            ball.flags |= BallFlag.ACTIVE | BallFlag.DESTROYED_ON_DP_Y_DOWN | BallFlag.RIVAL_A
            ball.next_trail = 0
            ball.trail_spawner = 0.005
            ball.trail_spawner_t = 0.0

    # Per-level motion

    def simulate_level(self, dt: float) -> None:
        level = self.level
        if level == Level.PONG:
            pong = self.pong
            ddp = -pong.dp
            ball_x = self.balls[0].p.x
            if ball_x > pong.p.x:
                ddp = V2(ddp.x + 50.0, ddp.y)
            elif ball_x < pong.p.x:
                ddp = V2(ddp.x - 50.0, ddp.y)
            desired_dp = pong.dp + ddp * dt
            desired_p = pong.p + desired_dp * dt + ddp * square(dt)
            if desired_p.x - pong.half_size.x < self.arena.left_wall_visual_p:
                desired_p = V2(self.arena.left_wall_visual_p + pong.half_size.x, desired_p.y)
                desired_dp = V2(-desired_dp.x, desired_dp.y)
            elif desired_p.x + pong.half_size.x > self.arena.right_wall_visual_p:
                desired_p = V2(self.arena.right_wall_visual_p - pong.half_size.x, desired_p.y)
                desired_dp = V2(-desired_dp.x, desired_dp.y)
            pong.dp = desired_dp
            pong.p = desired_p
        elif level == Level.INVADERS:
            invader = self.invader
            invader.movement_t += dt
            if invader.movement_t < invader.movement_target:
                return
            invader.movement_t -= invader.movement_target
            if invader.is_moving_down:
                invader.is_moving_down = False
                invader.p = V2(invader.p.x, invader.p.y - 3.0)
            elif invader.is_moving_right:
                invader.p = V2(invader.p.x + invader.x_movement, invader.p.y)
                if invader.p.x + invader.x_movement > invader.max_p.x:
                    invader.is_moving_right = False
                    invader.is_moving_down = True
            else:
                invader.p = V2(invader.p.x - invader.x_movement, invader.p.y)
                if invader.p.x - invader.x_movement < -invader.max_p.x:
                    invader.is_moving_right = True
                    invader.is_moving_down = True

    def simulate_block_for_level(self, block: Block) -> None:
        level = self.level
        if level == Level.PONG:
            block.p = block.relative_p + self.pong.p
        elif level == Level.INVADERS:
            block.p = block.relative_p + self.invader.p
        else:
            block.p = block.relative_p

    # Rules

    def speed_adjustment(self, ball: Ball) -> float:
        """Speed factor that brings the ball to the paddle in one second."""
        time_to_player = 1.0
        dist_to_player = ball.p.y - (self.player.p.y + self.player.half_size.y)
        return (dist_to_player / time_to_player) / ball.base_speed

    def process_ball_when_dp_y_down(self, ball: Ball) -> None:
        if ball.flags & BallFlag.FIXED_SPEED and self.balls[0].dp.y < 0:
            ball.dp = V2(ball.dp.x, -ball.base_speed * self.speed_adjustment(ball))

    def test_for_win_condition(self) -> None:
        if self.blocks_destroyed == self.block_pool.count:
            self.change_level(1)

    def block_destroyed(self, block: Block, ball_p: V2) -> None:
        """Remove a block, score it, drop its collectible and check for a win."""
        self.particles.spawn_explosion(20, block.p, 12.0, 1.5, 0.15, block.color)
        debris = self.particles.spawn(block.p, 0.0, block.half_size, 0.0, 1.0, 5.0, block.color)
        debris.dp = block.p - ball_p

        block.flags &= ~BlockFlag.ACTIVE
        self.blocks_destroyed += 1
        delta = max(0.01, self.current_time - self.combo_time)
        time_bonus = int(0.4 / delta)
        self.score += self.number_of_life + time_bonus
        self.combo_time = self.current_time

        if block.coll:
            self.coll_pool.spawn(block.p, block.coll)

        self.test_for_win_condition()

    def _lose_life(self) -> bool:
        """Take a life; restart the level when none remain. True if restarted."""
        self.number_of_life -= 1
        if not self.number_of_life:
            self.restart()
            return True
        return False

    # Frame

    def _mouse_world_dx(self, controls: Controls) -> float:
        if self.canvas.aspect_multiplier() == 0:
            return 0.0
        return self.canvas.pixels_dp_to_world(controls.mouse_dp).x

    def _update_player_motion(self, dt: float, controls: Controls) -> None:
        player = self.player
        arena = self.arena
        speed = 0.5 if self.slow_player_t > 0 else 1.0
        mouse_dx = speed * clamp(-10.0, self._mouse_world_dx(controls), 10.0)
        desired_x = player.p.x - mouse_dx if self.reverse_time > 0 else player.p.x + mouse_dx

        left_limit = arena.left_wall_visual_p + player.base_half_size.x
        right_limit = arena.right_wall_visual_p - player.base_half_size.x
        if desired_x < left_limit:
            player.squeeze_factor_d = (desired_x - left_limit) * -1.0
            desired_x = left_limit
            player.dp = V2(0.0, player.dp.y)
        elif desired_x > right_limit:
            player.squeeze_factor_d = desired_x - right_limit
            desired_x = right_limit
            player.dp = V2(0.0, player.dp.y)

        player.desired_p = V2(desired_x, player.p.y)
        player.visual_p = V2(player.visual_p.x, player.p.y)

        player.squeeze_factor_dd = -100.0 * player.squeeze_factor - 10.0 * player.squeeze_factor_d
        player.squeeze_factor_d += player.squeeze_factor_dd * dt
        player.squeeze_factor += (
            player.squeeze_factor_dd * square(dt) * 0.5 + player.squeeze_factor_d * dt
        )

        player.visual_ddp = V2(
            500.0 * (player.desired_p.x - player.visual_p.x) - 20.0 * player.visual_dp.x,
            player.visual_ddp.y,
        )
        player.visual_dp = player.visual_dp + player.visual_ddp * dt
        player.visual_p = player.visual_p + (
            player.visual_dp * dt + player.visual_ddp * (square(dt) * 0.5)
        )

        speed_x = abs(player.dp.x)
        player.half_size = V2(
            player.base_half_size.x + dt * speed_x - player.squeeze_factor,
            max(0.5, player.base_half_size.y - dt * 0.05 * speed_x + player.squeeze_factor),
        )

    def _move_balls(self) -> None:
        for ball in self.balls:
            if not ball.flags & BallFlag.ACTIVE:
                continue
            ball_colliding_player(self, ball)
            ball_colliding_arena(self, ball)

            if ball.desired_p.y - ball.half_size.y < -50:
                if ball.flags & BallFlag.DESTROYED_ON_DP_Y_DOWN:
                    ball.flags &= ~BallFlag.ACTIVE
                elif not self._lose_life():
                    self.reset_ball_coll()
                    self.player.start_twinkling()
            ball.collision_test_p = ball.desired_p

    def _update_blocks(self) -> None:
        for block in self.block_pool:
            if not block.flags & BlockFlag.ACTIVE:
                continue
            self.simulate_block_for_level(block)
            if not self.first_ball_movement:
                for ball in self.balls:
                    if not ball.flags & BallFlag.ACTIVE:
                        continue
                    if (ball.flags & BallFlag.RIVAL_A and block.flags & BlockFlag.RIVAL_A) or (
                        ball.flags & BallFlag.RIVAL_B and block.flags & BlockFlag.RIVAL_B
                    ):
                        ball_colliding_block(self, ball, block)
            strong = self.assets.block_strong
            if self.strong_blocks_time > 0.0 and strong is not None:
                self.canvas.draw_bitmap(strong, block.p, block.half_size, 0.0, 1.0)
            else:
                self.canvas.draw_rect(block.p, block.half_size, block.color)

    def _collect(self, kind: CollKind) -> None:
        if kind == CollKind.INVINCIBILITY:
            self.invincibility_time += 5.0
        elif kind == CollKind.TRIPLESHOT:
            self.number_of_triple_shots += 1
        elif kind == CollKind.COMET:
            self.number_of_comet += 1
        elif kind == CollKind.LOOSE_LIFE:
            if not self._lose_life():
                self.player.start_twinkling()
        elif kind == CollKind.STRONG_BLOCKS:
            self.strong_blocks_time += 5.0
        elif kind == CollKind.REVERSE_CONTROL:
            self.reverse_time += 5.0
        elif kind == CollKind.SLOW_PLAYER:
            self.slow_player_t += 5.0

    def _update_colls(self, dt: float) -> None:
        colls = self.coll_pool.colls
        for coll in colls:
            if self.coll_pool.colls is not colls:
                break  # the level restarted: every collectible is gone
            if coll.kind == CollKind.INACTIVE:
                continue
            coll.p = V2(coll.p.x, coll.p.y - 15.0 * dt)

            if aabb_vs_aabb(self.player.p, self.player.half_size, coll.p, coll.half_size):
                kind = coll.kind
                coll.kind = CollKind.INACTIVE
                self._collect(kind)
                continue

            name = _COLL_BITMAPS.get(coll.kind)
            bitmap = getattr(self.assets, name) if name else None
            if bitmap is None:
                self.canvas.draw_rect(coll.p, coll.half_size, COLL_FALLBACK_COLOR)
                continue
            self.canvas.draw_bitmap(bitmap, coll.p, coll.half_size, coll.frame_t, 1.0)
            coll.frame_t += dt * 15.0
            if coll.frame_t >= bitmap.n_frames:
                coll.frame_t = 0.0

    def _render_balls(self, dt: float) -> None:
        for ball in self.balls:
            if not ball.flags & BallFlag.ACTIVE:
                continue
            color = ball.color
            if ball.flags & BallFlag.DESTROYED_ON_DP_Y_DOWN:
                color = 0xFFFFFF
            elif self.is_comet:
                color = 0xFF9999

            ball.p = ball.desired_p
            ball.trail_spawner_t += dt
            if ball.trail_spawner_t >= ball.trail_spawner:
                speed_sq = ball.dp.len_sq()
                speed_t = map_into_range_normalized(2500.0, speed_sq, 100000.0)
                ball.trail_spawner_t -= 50.0 / speed_sq if speed_sq else math.inf
                trail_color = lerp_color(0x00BBEE, speed_t, 0x33FFFF)
                angle = find_look_at_rotation(ball.dp, V2(0.0, 1.0))
                self.particles.spawn(ball.p, 2.0, ball.half_size, angle, 0.32, 1.0, trail_color)

            self.canvas.draw_rect(ball.p, ball.half_size, color)
            hx = max(0.75, ball.half_size.x - dt * max(1.0, ball.half_size.x))
            hy = max(0.75, ball.half_size.y - dt * max(1.0, ball.half_size.y))
            ball.half_size = V2(hx, hy)

    def _update_player_visuals(self, dt: float) -> None:
        player = self.player
        player.dp = V2((player.desired_p.x - player.visual_p.x) / dt, player.dp.y)
        player.p = player.desired_p

        if self.invincibility_time > 0.0:
            self.invincibility_time -= dt
        if self.strong_blocks_time > 0.0:
            self.strong_blocks_time -= dt
        if self.reverse_time > 0.0:
            self.reverse_time -= dt
        if self.slow_player_t > 0.0:
            self.slow_player_t -= dt

        player.color = PLAYER_COLOR
        if self.number_of_triple_shots > 0:
            player.color = 0xFFFFFF
        elif self.number_of_comet > 0:
            player.color = 0xFF9999
        elif self.reverse_time > 0:
            player.color = 0x7F00FF
        elif self.slow_player_t > 0:
            player.color = 0x489000
        if not player.twinkle:
            self.canvas.draw_rect_subpixel(player.visual_p, player.half_size, player.color)

        if player.is_twinkling:
            player.twinkling_t += dt
            if player.twinkling_t >= player.twinkling_target:
                player.twinkling_t -= player.twinkling_target
                player.twinkle = not player.twinkle
                player.twinkling_number -= 1
            if player.twinkling_number == 0:
                player.twinkle = False
                player.is_twinkling = False

    def _update_walls(self, dt: float) -> None:
        arena = self.arena

        def spring(p: float, dp: float, rest: float) -> tuple[float, float]:
            ddp = 150.0 * (rest - p) - 7.0 * dp
            dp += ddp * dt
            p += ddp * square(dt) * 0.5 + dp * dt
            return p, dp

        arena.left_wall_visual_p, arena.left_wall_visual_dp = spring(
            arena.left_wall_visual_p, arena.left_wall_visual_dp, -arena.half_size.x)
        arena.right_wall_visual_p, arena.right_wall_visual_dp = spring(
            arena.right_wall_visual_p, arena.right_wall_visual_dp, arena.half_size.x)
        arena.top_wall_visual_p, arena.top_wall_visual_dp = spring(
            arena.top_wall_visual_p, arena.top_wall_visual_dp, arena.half_size.y)

    def _draw_hud(self) -> None:
        arena = self.arena
        for life in range(self.number_of_life):
            self.canvas.draw_rect(
                V2(-arena.half_size.x - 4.0 + life * 2.5, arena.half_size.y + 2.5),
                V2(1.0, 1.0), 0x00FFFF)
        self.canvas.draw_number(
            self.score, V2(arena.half_size.x - 10.0, arena.half_size.y + 2.5), 4.0, 0xFFFFFF)

    def update(self, dt: float, controls: Controls) -> None:
        """Advance the game by dt seconds and draw the frame."""
        if dt <= 0:
            raise ValueError("dt must be positive")
        raw_dt = dt
        dt *= self.dt_multiplier

        self._update_player_motion(dt, controls)

        for ball in self.balls:
            if ball.flags & BallFlag.ACTIVE:
                ball.desired_p = ball.p + ball.dp * dt
                break
        self._prepare_and_move_balls(dt)

        self.simulate_level(dt)
        self.canvas.clear_arena_screen(
            V2(), self.arena.top_wall_visual_p, self.arena.left_wall_visual_p,
            self.arena.right_wall_visual_p, self.arena.arena_color)

        self._update_blocks()
        self.test_for_win_condition()
        self._update_colls(dt)

        for particle in self.particles.update(dt):
            self.canvas.draw_rotated_transparent_rect(
                particle.p, particle.half_size, particle.angle, particle.color, particle.life)

        self._render_balls(dt)
        self._update_player_visuals(dt)
        self._update_walls(dt)

        arena = self.arena
        self.canvas.draw_arena_rects(
            V2(), arena.bottom_wall_visual_p, arena.top_wall_visual_p,
            arena.left_wall_visual_p, arena.right_wall_visual_p, arena.wall_color,
            self.invincibility_time, self.first_ball_movement)
        self._draw_hud()

        if controls.pressed(ButtonId.LEFT):
            self.change_level(-1)
        if controls.pressed(ButtonId.RIGHT):
            self.change_level(1)

        if self.development:
            if controls.pressed(ButtonId.LEFT):
                self.change_level(-1)
            if controls.pressed(ButtonId.RIGHT):
                self.change_level(1)
            if controls.pressed(ButtonId.DOWN):
                self.dt_multiplier = 10.0
            if controls.released(ButtonId.DOWN):
                self.dt_multiplier = 1.0
            if controls.is_down(ButtonId.UP):
                self.invincibility_time += dt
            self.canvas.draw_number(
                int(1.0 / dt), V2(0.0, self.arena.half_size.y + 2.5), 4.0, 0xFFFFFF)
            self.messages.draw(self.canvas, self.arena.half_size * -1.0, dt)

        self.current_time += raw_dt

    def _prepare_and_move_balls(self, dt: float) -> None:
        # Each ball's step is computed just before its collisions, as balls
        # spawned mid-loop (triple shot) start from their own position.
        for ball in self.balls:
            if not ball.flags & BallFlag.ACTIVE:
                continue
            ball.desired_p = ball.p + ball.dp * dt
            ball_colliding_player(self, ball)
            ball_colliding_arena(self, ball)

            if ball.desired_p.y - ball.half_size.y < -50:
                if ball.flags & BallFlag.DESTROYED_ON_DP_Y_DOWN:
                    ball.flags &= ~BallFlag.ACTIVE
                elif not self._lose_life():
                    self.reset_ball_coll()
                    self.player.start_twinkling()
            ball.collision_test_p = ball.desired_p