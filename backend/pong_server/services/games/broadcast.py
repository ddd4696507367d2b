"""Outbound event delivery to the members of a room."""

# Outbound event names
GAME_STATE_UPDATE = 'game_state_update'
PLAYER_JOINED = 'player_joined'
PLAYER_LEFT = 'player_left'
GAME_STARTED = 'game_started'
GAME_ENDED = 'game_ended'
ERROR = 'error'


class SocketIOBroadcaster:
    """Deliver events to Socket.IO rooms on a single namespace.

    Room membership is managed on the underlying server so it can be changed
    from outside a request context (e.g. from the tick worker).
    """

    def __init__(self, socketio, namespace: str = '/ws'):
        self._socketio = socketio
        self.namespace = namespace

    def enter_room(self, connection_id: str, room_id: str) -> None:
        self._socketio.server.enter_room(connection_id, room_id, namespace=self.namespace)

    def leave_room(self, connection_id: str, room_id: str) -> None:
        self._socketio.server.leave_room(connection_id, room_id, namespace=self.namespace)

    def emit(self, event: str, payload, room_id: str) -> None:
        self._socketio.emit(event, payload, to=room_id, namespace=self.namespace)


class NullBroadcaster:
    """Drops every event; used for headless simulations."""

    def enter_room(self, connection_id, room_id):
        pass

    def leave_room(self, connection_id, room_id):
        pass

    def emit(self, event, payload, room_id):
        pass
