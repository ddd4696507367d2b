"""Room and session lifecycle.

The ``SessionManager`` is the single owner of room state. Every mutation,
whether from a socket event or a tick timer, is routed through ``dispatch``
and runs to completion under one lock, so a room's physics step never
interleaves with its own join/leave/input/ready handling.
"""

import logging
import random
import string
import threading
from typing import Dict, Iterator, Optional

from pong_server.models import Direction, GameState, GameStatus, Player, Room, Score
from . import broadcast as events
from .commands import Command, CommandType
from .physics import new_ball, new_paddle, move_paddle, reset_ball, step
from .settings import GameSettings


class RoomStore:
    """Rooms by id plus the connection -> room id mapping."""

    def __init__(self):
        self.rooms: Dict[str, Room] = {}
        self.player_rooms: Dict[str, str] = {}

    def __len__(self):
        return len(self.rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self.rooms.values()))

    def get(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def room_for(self, connection_id: str) -> Optional[Room]:
        room_id = self.player_rooms.get(connection_id)
        if not room_id:
            return None
        return self.rooms.get(room_id)

    def find_open(self) -> Optional[Room]:
        for room in self.rooms.values():
            if room.is_open:
                return room
        return None

    def generate_room_id(self, rng: random.Random, length: int = 6) -> str:
        while True:
            code = 'room_' + ''.join(rng.choices(string.ascii_uppercase + string.digits, k=length))
            if code not in self.rooms:
                return code


class SessionManager:

    def __init__(self, store: RoomStore, settings: GameSettings, broadcaster, scheduler,
                 rng: Optional[random.Random] = None, logger: Optional[logging.Logger] = None):
        self.store = store
        self.settings = settings
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._routes = {
            CommandType.JOIN: self._handle_join,
            CommandType.LEAVE: self._handle_leave,
            CommandType.INPUT: self._handle_input,
            CommandType.READY: self._handle_ready,
            CommandType.TICK: self._handle_tick,
        }

    # ---- Public API ----

    def dispatch(self, command: Command):
        handler = self._routes[command.type]
        with self._lock:
            return handler(command)

    def add_player(self, connection_id: str, name: Optional[str] = None) -> Room:
        return self.dispatch(Command.join(connection_id, name))

    def remove_player(self, connection_id: str) -> None:
        self.dispatch(Command.leave(connection_id))

    def handle_input(self, connection_id: str, direction: Direction) -> None:
        self.dispatch(Command.input(connection_id, Direction(direction)))

    def set_ready(self, connection_id: str) -> None:
        self.dispatch(Command.ready(connection_id))

    def tick(self, room_id: str, handle) -> None:
        self.dispatch(Command.tick(room_id, handle))

    def room_for(self, connection_id: str) -> Optional[Room]:
        return self.store.room_for(connection_id)

    # ---- Command handlers (called with the lock held) ----

    def _handle_join(self, command: Command) -> Room:
        connection_id = command.connection_id
        if connection_id in self.store.player_rooms:
            # Re-queue: leave the current room first so the player is never in two
            self._handle_leave(Command.leave(connection_id))

        room = self.store.find_open()
        if room is None:
            room = self._create_room()

        side = room.free_side()
        name = command.name or f"Player-{connection_id[:6]}"
        player = Player(id=connection_id, name=name, paddle=new_paddle(side, self.settings))
        room.players[connection_id] = player
        room.state.set_slot(side, player)
        self.store.player_rooms[connection_id] = room.id

        self.broadcaster.enter_room(connection_id, room.id)
        self.broadcaster.emit(events.PLAYER_JOINED, {'player_id': connection_id}, room.id)
        self._broadcast_state(room)
        self.logger.info(
            f"[join] room={room.id} player={connection_id} side={side.value} players={len(room.players)}/{Room.MAX_PLAYERS}"
        )
        return room

    def _handle_leave(self, command: Command) -> None:
        connection_id = command.connection_id
        room = self.store.room_for(connection_id)
        self.store.player_rooms.pop(connection_id, None)
        if room is None:
            return

        player = room.players.pop(connection_id, None)
        if player is not None and room.state.slot(player.side) is player:
            room.state.set_slot(player.side, None)
        self.broadcaster.leave_room(connection_id, room.id)
        self._stop_loop(room)

        if not room.players:
            self.store.rooms.pop(room.id, None)
            self.logger.info(f"[leave] room={room.id} player={connection_id} room deleted")
            return

        self._revert_to_waiting(room)
        self.broadcaster.emit(events.PLAYER_LEFT, {'player_id': connection_id}, room.id)
        self._broadcast_state(room)
        self.logger.info(f"[leave] room={room.id} player={connection_id} players={len(room.players)}/{Room.MAX_PLAYERS}")

    def _handle_input(self, command: Command) -> None:
        room = self.store.room_for(command.connection_id)
        if room is None or room.status is not GameStatus.PLAYING:
            return
        player = room.players.get(command.connection_id)
        if player is None:
            return
        move_paddle(player.paddle, command.direction, self.settings)
        room.state.set_slot(player.side, player)

    def _handle_ready(self, command: Command) -> None:
        room = self.store.room_for(command.connection_id)
        if room is None or room.status is not GameStatus.WAITING:
            return
        player = room.players.get(command.connection_id)
        if player is None:
            return
        player.ready = True
        self.logger.info(f"[ready] room={room.id} player={command.connection_id}")

        if room.is_full and all(p.ready for p in room.players.values()):
            self._start_game(room)

    def _handle_tick(self, command: Command) -> None:
        handle = command.handle
        room = self.store.get(command.room_id)
        if room is None or room.tick_handle is not handle or room.status is not GameStatus.PLAYING:
            # Stale timer: its room is gone or no longer playing
            handle.cancel()
            return

        try:
            self._advance_room(room)
        except Exception:
            self.logger.exception(f"[tick-error] room={room.id}")
            self._stop_loop(room)
            # A game that already finished keeps its final score
            if room.status is GameStatus.PLAYING:
                self._revert_to_waiting(room)
            self.broadcaster.emit(events.ERROR, {'message': 'Game loop failed; room reset'}, room.id)
            self._broadcast_state(room)

    # ---- Helpers ----

    def _advance_room(self, room: Room) -> None:
        """Run one simulation step for ``room`` and broadcast the outcome."""
        result = step(room.state, self.settings, self.rng)
        if result.scored is not None:
            score = room.state.score
            self.logger.info(
                f"[score] room={room.id} side={result.scored.value} score={score.player1}-{score.player2}"
            )
        if result.winner is not None:
            self._stop_loop(room)
            self.broadcaster.emit(events.GAME_ENDED, {
                'winner': result.winner.slot,
                'side': result.winner.value,
                'score': room.state.score.to_dict(),
            }, room.id)
            self.logger.info(f"[game-end] room={room.id} winner={result.winner.slot}")
        self._broadcast_state(room)

    def _create_room(self) -> Room:
        room_id = self.store.generate_room_id(self.rng)
        room = Room(id=room_id, state=GameState(ball=new_ball(self.settings, self.rng)))
        self.store.rooms[room_id] = room
        return room

    def _start_game(self, room: Room) -> None:
        room.state.status = GameStatus.PLAYING
        self.broadcaster.emit(events.GAME_STARTED, {}, room.id)
        room.tick_handle = self.scheduler.start(room.id, self.settings.tick_interval, self.tick)
        self.logger.info(f"[game-start] room={room.id}")

    def _stop_loop(self, room: Room) -> None:
        """Cancel the room's tick timer. The only place a handle is cleared."""
        if room.tick_handle is not None:
            room.tick_handle.cancel()
            room.tick_handle = None

    def _revert_to_waiting(self, room: Room) -> None:
        # A new match needs a fresh ready-up from both seats
        room.state.status = GameStatus.WAITING
        room.state.score = Score()
        reset_ball(room.state.ball, self.settings, self.rng)
        for p in room.players.values():
            p.ready = False

    def _broadcast_state(self, room: Room) -> None:
        self.broadcaster.emit(events.GAME_STATE_UPDATE, room.state.to_dict(), room.id)
