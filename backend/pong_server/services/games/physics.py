"""Fixed-tick simulation for a single room.

``step`` is the only entry point the session layer needs; the remaining
helpers are shared with room setup (ball placement, paddle placement) and
input handling (paddle movement).
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from pong_server.models import Ball, Direction, GameState, GameStatus, Paddle, Side
from .scoring import goal_scored, winning_side
from .settings import GameSettings


@dataclass
class StepResult:
    scored: Optional[Side] = None
    winner: Optional[Side] = None


def random_velocity(settings: GameSettings, rng: random.Random) -> Tuple[int, int]:
    """Diagonal velocity with a random sign on each axis."""
    vx = settings.ball_speed * rng.choice((1, -1))
    vy = settings.ball_speed * rng.choice((1, -1))
    return vx, vy


def new_ball(settings: GameSettings, rng: random.Random) -> Ball:
    vx, vy = random_velocity(settings, rng)
    return Ball(
        x=settings.canvas_width / 2,
        y=settings.canvas_height / 2,
        velocity_x=vx,
        velocity_y=vy,
        radius=settings.ball_radius,
    )


def reset_ball(ball: Ball, settings: GameSettings, rng: random.Random) -> None:
    ball.x = settings.canvas_width / 2
    ball.y = settings.canvas_height / 2
    ball.velocity_x, ball.velocity_y = random_velocity(settings, rng)


def new_paddle(side: Side, settings: GameSettings) -> Paddle:
    if side is Side.LEFT:
        x = settings.paddle_offset
    else:
        x = settings.canvas_width - settings.paddle_offset - settings.paddle_width
    return Paddle(
        x=x,
        y=settings.canvas_height / 2 - settings.paddle_height / 2,
        width=settings.paddle_width,
        height=settings.paddle_height,
        side=side,
    )


def move_paddle(paddle: Paddle, direction: Direction, settings: GameSettings) -> None:
    """Apply one input impulse, clamped to the canvas. ``stop`` leaves y alone."""
    if direction is Direction.UP:
        paddle.y = max(0, paddle.y - settings.paddle_speed)
    elif direction is Direction.DOWN:
        paddle.y = min(settings.canvas_height - paddle.height, paddle.y + settings.paddle_speed)


def paddle_collision(ball: Ball, paddle: Paddle) -> bool:
    return (
        ball.x - ball.radius < paddle.x + paddle.width
        and ball.x + ball.radius > paddle.x
        and ball.y - ball.radius < paddle.y + paddle.height
        and ball.y + ball.radius > paddle.y
    )


def step(state: GameState, settings: GameSettings, rng: random.Random) -> StepResult:
    """Advance a playing room by one tick.

    Order: move, wall bounce, paddle deflection, goal, game end. A goal
    re-centres the ball in the same tick, so one tick awards at most one point.
    """
    result = StepResult()
    if state.status is not GameStatus.PLAYING:
        return result

    ball = state.ball
    ball.x += ball.velocity_x
    ball.y += ball.velocity_y

    # No positional correction; the ball may overshoot by up to one tick.
    if ball.y <= ball.radius or ball.y >= settings.canvas_height - ball.radius:
        ball.velocity_y = -ball.velocity_y

    left = state.player1.paddle if state.player1 else None
    right = state.player2.paddle if state.player2 else None
    if left and paddle_collision(ball, left):
        ball.velocity_x = abs(ball.velocity_x)
        ball.x = left.x + left.width + ball.radius
    if right and paddle_collision(ball, right):
        ball.velocity_x = -abs(ball.velocity_x)
        ball.x = right.x - ball.radius

    scorer = goal_scored(ball, settings)
    if scorer is not None:
        state.score.award(scorer)
        reset_ball(ball, settings, rng)
        result.scored = scorer

    winner = winning_side(state.score, settings)
    if winner is not None:
        state.status = GameStatus.FINISHED
        result.winner = winner
    return result
