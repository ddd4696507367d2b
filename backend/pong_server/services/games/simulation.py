import logging
import random
from dataclasses import dataclass
from typing import Optional

from pong_server.models import Direction, GameStatus, Side
from .broadcast import NullBroadcaster
from .scheduler import ManualTickScheduler
from .scoring import winning_side
from .sessions import RoomStore, SessionManager
from .settings import GameSettings


@dataclass
class MatchResult:
    winner: Optional[Side]
    player1: int
    player2: int
    ticks: int

    @property
    def finished(self) -> bool:
        return self.winner is not None


def bot_direction(paddle, ball, skill: float, rng: random.Random) -> Direction:
    """Chase the ball's y with probability ``skill``; otherwise hold still."""
    if rng.random() >= skill:
        return Direction.STOP
    centre = paddle.y + paddle.height / 2
    if ball.y < centre - 2:
        return Direction.UP
    if ball.y > centre + 2:
        return Direction.DOWN
    return Direction.STOP


def simulate_match(settings: GameSettings, seed: Optional[int] = None, left_skill: float = 0.8,
                   right_skill: float = 0.8, max_ticks: int = 60 * 60 * 10,
                   logger: Optional[logging.Logger] = None) -> MatchResult:
    """Play a headless bot-vs-bot match through a real SessionManager."""
    scheduler = ManualTickScheduler()
    manager = SessionManager(
        RoomStore(), settings, NullBroadcaster(), scheduler,
        rng=random.Random(seed), logger=logger,
    )
    bot_rng = random.Random(None if seed is None else seed + 1)
    skills = {'bot-left': left_skill, 'bot-right': right_skill}

    room = manager.add_player('bot-left', 'Left Bot')
    manager.add_player('bot-right', 'Right Bot')
    for bot_id in skills:
        manager.set_ready(bot_id)

    ticks = 0
    while room.status is GameStatus.PLAYING and ticks < max_ticks:
        for bot_id, skill in skills.items():
            paddle = room.players[bot_id].paddle
            manager.handle_input(bot_id, bot_direction(paddle, room.state.ball, skill, bot_rng))
        scheduler.advance(room_id=room.id)
        ticks += 1

    score = room.state.score
    return MatchResult(
        winner=winning_side(score, settings),
        player1=score.player1,
        player2=score.player2,
        ticks=ticks,
    )
