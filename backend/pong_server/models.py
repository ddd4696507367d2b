from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from pong_server.services.games.scheduler import TickHandle


class Side(str, Enum):
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def slot(self) -> str:
        """Name of the GameState slot this side mirrors into."""
        return 'player1' if self is Side.LEFT else 'player2'


class GameStatus(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


class Direction(str, Enum):
    UP = 'up'
    DOWN = 'down'
    STOP = 'stop'


@dataclass
class Paddle:
    x: float
    y: float
    width: int
    height: int
    side: Side

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'side': self.side.value,
        }


@dataclass
class Ball:
    x: float
    y: float
    velocity_x: float
    velocity_y: float
    radius: int

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'velocity_x': self.velocity_x,
            'velocity_y': self.velocity_y,
            'radius': self.radius,
        }


@dataclass
class Player:
    id: str
    name: str
    paddle: Paddle
    ready: bool = False

    @property
    def side(self) -> Side:
        return self.paddle.side

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'paddle': self.paddle.to_dict(),
            'ready': self.ready,
        }


@dataclass
class Score:
    player1: int = 0
    player2: int = 0

    def award(self, side: Side) -> None:
        if side is Side.LEFT:
            self.player1 += 1
        else:
            self.player2 += 1

    def to_dict(self):
        return {'player1': self.player1, 'player2': self.player2}


@dataclass
class GameState:
    """Everything a client needs to render a room; the snapshot payload."""
    ball: Ball
    player1: Optional[Player] = None
    player2: Optional[Player] = None
    score: Score = field(default_factory=Score)
    status: GameStatus = GameStatus.WAITING

    def slot(self, side: Side) -> Optional[Player]:
        return self.player1 if side is Side.LEFT else self.player2

    def set_slot(self, side: Side, player: Optional[Player]) -> None:
        setattr(self, side.slot, player)

    def to_dict(self):
        return {
            'ball': self.ball.to_dict(),
            'players': {
                'player1': self.player1.to_dict() if self.player1 else None,
                'player2': self.player2.to_dict() if self.player2 else None,
            },
            'score': self.score.to_dict(),
            'game_status': self.status.value,
        }


@dataclass
class Room:
    """A two-seat game session.

    ``tick_handle`` is set while, and only while, ``state.status`` is
    ``GameStatus.PLAYING``.
    """
    id: str
    state: GameState
    players: Dict[str, Player] = field(default_factory=dict)
    tick_handle: Optional['TickHandle'] = None

    MAX_PLAYERS = 2

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.MAX_PLAYERS

    @property
    def is_open(self) -> bool:
        return self.status is GameStatus.WAITING and not self.is_full

    def free_side(self) -> Side:
        taken = {p.side for p in self.players.values()}
        return Side.LEFT if Side.LEFT not in taken else Side.RIGHT

