"""Turn clock domain services: engine, tick source and notifier.

The engine holds the game rules and is transport-agnostic; Socket.IO handlers
and HTTP routes call into it, and it talks back only through a Clock and a
Notifier.
"""
from .engine import TurnClockEngine, TurnClockError, NotEnoughPlayersError
from .ticker import SocketIOClock, ManualClock
from .notifier import SocketIONotifier

__all__ = [
    'TurnClockEngine',
    'TurnClockError',
    'NotEnoughPlayersError',
    'SocketIOClock',
    'ManualClock',
    'SocketIONotifier',
]
