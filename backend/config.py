import os


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Starting clock for each registered player (milliseconds). 10 minutes.
    DEFAULT_PLAYER_TIME_MS = int(os.environ.get('DEFAULT_PLAYER_TIME_MS', str(10 * 60 * 1000)))
    # Tick period of the countdown (milliseconds)
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '1000'))
    # Minimum non-eliminated players needed to start a game
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ORIGINS = _origins(os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
    ))
    # Optional: heartbeat interval for tick loop logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
