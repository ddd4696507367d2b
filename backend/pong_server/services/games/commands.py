from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pong_server.models import Direction
from .scheduler import TickHandle


class CommandType(str, Enum):
    JOIN = 'join'
    LEAVE = 'leave'
    INPUT = 'input'
    READY = 'ready'
    TICK = 'tick'


@dataclass(frozen=True)
class Command:
    """A single inbound signal for the session state machine."""
    type: CommandType
    connection_id: Optional[str] = None
    name: Optional[str] = None
    direction: Optional[Direction] = None
    room_id: Optional[str] = None
    handle: Optional[TickHandle] = None

    @classmethod
    def join(cls, connection_id: str, name: Optional[str] = None) -> 'Command':
        return cls(CommandType.JOIN, connection_id=connection_id, name=name)

    @classmethod
    def leave(cls, connection_id: str) -> 'Command':
        return cls(CommandType.LEAVE, connection_id=connection_id)

    @classmethod
    def input(cls, connection_id: str, direction: Direction) -> 'Command':
        return cls(CommandType.INPUT, connection_id=connection_id, direction=direction)

    @classmethod
    def ready(cls, connection_id: str) -> 'Command':
        return cls(CommandType.READY, connection_id=connection_id)

    @classmethod
    def tick(cls, room_id: str, handle: TickHandle) -> 'Command':
        return cls(CommandType.TICK, room_id=room_id, handle=handle)
