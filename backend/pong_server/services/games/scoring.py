from typing import Optional

from pong_server.models import Ball, Score, Side
from .settings import GameSettings


def goal_scored(ball: Ball, settings: GameSettings) -> Optional[Side]:
    """Return the side that scores when the ball has left the field.

    A ball past the left edge is a point for the right side and vice versa.
    """
    if ball.x < 0:
        return Side.RIGHT
    if ball.x > settings.canvas_width:
        return Side.LEFT
    return None


def winning_side(score: Score, settings: GameSettings) -> Optional[Side]:
    if score.player1 >= settings.winning_score:
        return Side.LEFT
    if score.player2 >= settings.winning_score:
        return Side.RIGHT
    return None
