from flask import current_app, request
from flask_socketio import emit
from pong_server import socketio
from pong_server.models import Direction


def _sessions():
    return current_app.extensions['pong']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] player={_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] player={_get_sid()}")
    _sessions().remove_player(_get_sid())


def handle_join_game(data=None):
    # Accept a bare name string (legacy clients) or {'name': ...}
    name = data.get('name') if isinstance(data, dict) else data
    if name is not None and not isinstance(name, str):
        emit('error', {'message': 'name must be a string'})
        return
    _sessions().add_player(_get_sid(), (name or '').strip() or None)


def handle_paddle_move(data=None):
    direction = data.get('direction') if isinstance(data, dict) else data
    try:
        direction = Direction(direction)
    except ValueError:
        emit('error', {'message': 'direction must be one of up, down, stop'})
        return
    _sessions().handle_input(_get_sid(), direction)


def handle_player_ready(data=None):
    _sessions().set_ready(_get_sid())


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_game', handle_join_game, namespace=namespace)
    socketio.on_event('paddle_move', handle_paddle_move, namespace=namespace)
    socketio.on_event('player_ready', handle_player_ready, namespace=namespace)
