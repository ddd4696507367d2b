import random

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def build_session_manager(flask_app):
    """Create the process-level session manager for ``flask_app``."""
    from pong_server.services.games import GameSettings, RoomStore, SessionManager
    from pong_server.services.games.broadcast import SocketIOBroadcaster
    from pong_server.services.games.scheduler import BackgroundTickScheduler, ManualTickScheduler

    settings = GameSettings.from_config(flask_app.config)
    if flask_app.config.get('TICK_SCHEDULER') == 'manual':
        scheduler = ManualTickScheduler()
    else:
        scheduler = BackgroundTickScheduler(socketio, logger=flask_app.logger)
    broadcaster = SocketIOBroadcaster(socketio, namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/ws'))
    return SessionManager(
        RoomStore(),
        settings,
        broadcaster,
        scheduler,
        rng=random.Random(flask_app.config.get('BALL_SEED')),
        logger=flask_app.logger,
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from pong_server.main import main
    flask_app.register_blueprint(main)

    # One session store per app instance; handlers look it up via current_app
    flask_app.extensions['pong'] = build_session_manager(flask_app)

    from pong_server.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/ws'))

    @click.command('simulate-match')
    @click.option('--seed', type=int, default=None, help='Seed for ball and bot randomness.')
    @click.option('--left-skill', type=float, default=0.8, show_default=True)
    @click.option('--right-skill', type=float, default=0.8, show_default=True)
    @click.option('--max-ticks', type=int, default=60 * 60 * 10, show_default=True)
    def simulate_match_command(seed, left_skill, right_skill, max_ticks):
        """Plays a headless bot-vs-bot match and prints the result."""
        from pong_server.services.games import GameSettings
        from pong_server.services.games.simulation import simulate_match

        result = simulate_match(
            GameSettings.from_config(flask_app.config),
            seed=seed,
            left_skill=left_skill,
            right_skill=right_skill,
            max_ticks=max_ticks,
            logger=flask_app.logger,
        )
        click.echo(f"Score: {result.player1}-{result.player2} after {result.ticks} ticks")
        if result.finished:
            click.echo(f"Winner: {result.winner.slot} ({result.winner.value})")
        else:
            click.echo('No winner: tick limit reached')

    flask_app.cli.add_command(simulate_match_command)

    return flask_app
