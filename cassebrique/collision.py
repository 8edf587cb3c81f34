"""Collision tests and responses for balls against arena, paddle and blocks."""

from __future__ import annotations

from dataclasses import replace

from .mathutil import V2, lerp
from .world import Ball, BallFlag, Block


def aabb_vs_aabb(p1: V2, half_size1: V2, p2: V2, half_size2: V2) -> bool:
    """True when two axis-aligned boxes overlap (touching does not count)."""
    return (
        p1.y + half_size1.y > p2.y - half_size2.y
        and p1.y - half_size1.y < p2.y + half_size2.y
        and p1.x + half_size1.x > p2.x - half_size2.x
        and p1.x - half_size1.x < p2.x + half_size2.x
    )


def increase_ball_size(ball: Ball) -> None:
    """Puff the ball up a little on impact; small balls grow faster."""
    h = ball.half_size
    ball.half_size = V2(h.x + 0.15 / h.x, h.y + 0.15 / h.y)


def _wall_burst(game, ball: Ball) -> None:
    game.particles.spawn_explosion(10, ball.desired_p, 8.0, 1.0, 0.3, game.arena.wall_color)


def ball_colliding_arena(game, ball: Ball) -> None:
    """Bounce the ball off the side and top walls, and the floor while shielded."""
    arena = game.arena
    if ball.desired_p.x + ball.half_size.x > arena.right_wall_visual_p:
        increase_ball_size(ball)
        ball.desired_p = replace(ball.desired_p, x=arena.right_wall_visual_p - ball.half_size.x)
        ball.dp = replace(ball.dp, x=-ball.dp.x)
        arena.right_wall_visual_dp = 10.0
        _wall_burst(game, ball)
    elif ball.desired_p.x - ball.half_size.x < arena.left_wall_visual_p:
        increase_ball_size(ball)
        ball.desired_p = replace(ball.desired_p, x=arena.left_wall_visual_p + ball.half_size.x)
        ball.dp = replace(ball.dp, x=-ball.dp.x)
        arena.left_wall_visual_dp = -10.0
        _wall_burst(game, ball)

    if ball.desired_p.y + ball.half_size.y > arena.top_wall_visual_p:
        increase_ball_size(ball)
        ball.desired_p = replace(ball.desired_p, y=arena.top_wall_visual_p - ball.half_size.y)
        ball.dp = replace(ball.dp, y=-ball.dp.y)
        arena.top_wall_visual_dp = 10.0
        game.process_ball_when_dp_y_down(ball)
        game.is_comet = False
        _wall_burst(game, ball)

    if game.first_ball_movement or game.invincibility_time > 0.0:
        floor = -arena.half_size.y
        if ball.desired_p.y - ball.half_size.y < floor:
            ball.desired_p = replace(ball.desired_p, y=floor + ball.half_size.y)
            ball.dp = replace(ball.dp, y=-ball.dp.y)


def ball_colliding_player(game, ball: Ball) -> None:
    """Bounce a falling ball off the paddle, angled by where it hit."""
    player = game.player
    if ball.dp.y < 0 and aabb_vs_aabb(player.visual_p, player.half_size, ball.desired_p, ball.half_size):
        increase_ball_size(ball)
        game.first_ball_movement = False
        ball.dp = V2((ball.p.x - player.visual_p.x) * 7.5, -ball.dp.y)
        ball.desired_p = replace(ball.desired_p, y=player.visual_p.y + player.half_size.y)
        game.particles.spawn_explosion(10, ball.desired_p, 8.0, 1.0, 0.3, player.color)

        if game.number_of_triple_shots:
            game.number_of_triple_shots -= 1
            game.spawn_triple_shot()
        if game.number_of_comet > 0:
            game.number_of_comet -= 1
            game.is_comet = True


def _damage_block(game, ball: Ball, block: Block) -> None:
    if game.strong_blocks_time <= 0:
        block.life -= 1
        if block.life == 0:
            game.block_destroyed(block, ball.p)


def ball_colliding_block(game, ball: Ball, block: Block) -> None:
    """Sweep the ball's step against block on each axis and respond to a hit."""
    diff = ball.collision_test_p.y - ball.p.y
    if diff != 0:
        if ball.dp.y > 0:
            collision_point = block.p.y - block.half_size.y - ball.half_size.y
        else:
            collision_point = block.p.y + block.half_size.y + ball.half_size.y
        t_y = (collision_point - ball.p.y) / diff
        if 0.0 <= t_y <= 1.0:
            target_x = lerp(ball.p.x, t_y, ball.collision_test_p.x)
            if (
                target_x + ball.half_size.x > block.p.x - block.half_size.x
                and target_x - ball.half_size.x < block.p.x + block.half_size.x
            ):
                increase_ball_size(ball)
                ball.desired_p = replace(
                    ball.desired_p, y=lerp(ball.p.y, t_y, ball.collision_test_p.y)
                )
                if block.ball_speed_multiplier > ball.speed_multiplier:
                    ball.speed_multiplier = block.ball_speed_multiplier
                if ball.dp.y > 0:
                    if ball.flags & BallFlag.DESTROYED_ON_DP_Y_DOWN:
                        ball.flags &= ~BallFlag.ACTIVE
                    if not game.is_comet:
                        ball.dp = replace(ball.dp, y=-ball.base_speed * ball.speed_multiplier)
                        game.process_ball_when_dp_y_down(ball)
                else:
                    ball.dp = replace(ball.dp, y=ball.base_speed * ball.speed_multiplier)
                _damage_block(game, ball, block)

    diff = ball.collision_test_p.x - ball.p.x
    if diff != 0:
        if ball.dp.x > 0:
            collision_point = block.p.x - block.half_size.x - ball.half_size.x
        else:
            collision_point = block.p.x + block.half_size.x + ball.half_size.x
        t_x = (collision_point - ball.p.x) / diff
        if 0.0 <= t_x <= 1.0:
            target_y = lerp(ball.p.y, t_x, ball.collision_test_p.y)
            if (
                target_y + ball.half_size.y > block.p.y - block.half_size.y
                and target_y - ball.half_size.y < block.p.y + block.half_size.y
            ):
                increase_ball_size(ball)
                ball.desired_p = replace(
                    ball.desired_p, x=lerp(ball.p.x, t_x, ball.collision_test_p.x)
                )
                if not game.is_comet:
                    ball.dp = replace(ball.dp, x=-ball.dp.x)
                if block.ball_speed_multiplier > ball.speed_multiplier:
                    ball.speed_multiplier = block.ball_speed_multiplier
                if ball.dp.y > 0:
                    if ball.flags & BallFlag.DESTROYED_ON_DP_Y_DOWN:
                        ball.flags &= ~BallFlag.ACTIVE
                    if not game.is_comet:
                        ball.dp = replace(ball.dp, y=ball.base_speed * ball.speed_multiplier)
                else:
                    ball.dp = replace(ball.dp, y=-ball.base_speed * ball.speed_multiplier)
                _damage_block(game, ball, block)