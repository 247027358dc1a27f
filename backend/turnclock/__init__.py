from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

EXTENSION_KEY = 'turnclock'


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # One game per app; the engine holds all mutable game state
    flask_app.extensions[EXTENSION_KEY] = build_engine(flask_app)

    from turnclock.main import main
    flask_app.register_blueprint(main)

    from turnclock.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    return flask_app


def build_engine(app):
    from turnclock.services.clock import TurnClockEngine, SocketIOClock, ManualClock, SocketIONotifier

    interval_ms = int(app.config.get('TICK_INTERVAL_MS', 1000))
    if app.config.get('TESTING') and not app.config.get('ENABLE_CLOCK_IN_TESTS'):
        clock = ManualClock(interval_ms)
    else:
        clock = SocketIOClock(socketio, interval_ms, heartbeat_sec=int(app.config.get('TIMER_HEARTBEAT_SEC', 0)))
    engine = TurnClockEngine(
        clock,
        SocketIONotifier(socketio, namespace='/ws'),
        default_time_ms=int(app.config.get('DEFAULT_PLAYER_TIME_MS', 10 * 60 * 1000)),
        min_players=int(app.config.get('MIN_PLAYERS', 2)),
    )
    app.logger.info(f"[engine] clock={type(clock).__name__} interval={interval_ms}ms")
    return engine


def get_engine(app=None):
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
