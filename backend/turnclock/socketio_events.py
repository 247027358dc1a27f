from flask import current_app, request
from flask_socketio import emit
from turnclock import socketio, get_engine
from turnclock.services.clock import TurnClockError


def _get_sid() -> str:
    # Flask-SocketIO sets request.sid inside event handlers
    return request.sid  # type: ignore[attr-defined]


def _parse_registration(data):
    """Accept either a bare name string or ``{name, initialMs}``."""
    if isinstance(data, dict):
        name = data.get('name')
        initial = data.get('initialMs')
    else:
        name, initial = data, None
    name = name.strip() if isinstance(name, str) else None
    try:
        initial_ms = int(initial) if initial is not None else None
    except (TypeError, ValueError):
        initial_ms = None
    return name or None, initial_ms


def _emit_state():
    status = get_engine().status()
    players = status.pop('players')
    emit('players_data', players)
    emit('game_status', status)


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'message': 'Connected to /ws'})
    _emit_state()


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    get_engine().remove(_get_sid())


def handle_register_player(data=None):
    name, initial_ms = _parse_registration(data)
    get_engine().register(_get_sid(), name, initial_ms)


def handle_start_game(data=None):
    try:
        get_engine().start()
    except TurnClockError as exc:
        # Only the requesting client hears about it
        current_app.logger.info(f"[start-rejected] sid={_get_sid()} reason={exc}")
        emit('error_message', str(exc))


def handle_next_player(data=None):
    get_engine().advance_turn()


def handle_toggle_pause(data=None):
    get_engine().toggle_pause()


def handle_get_state(data=None):
    _emit_state()


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'register_player': handle_register_player,
    'start_game': handle_start_game,
    'next_player': handle_next_player,
    'toggle_pause': handle_toggle_pause,
    'get_state': handle_get_state,
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace='/ws')
    if testing:
        for event, handler in HANDLERS.items():
            socketio.on_event(event, handler, namespace='/')
