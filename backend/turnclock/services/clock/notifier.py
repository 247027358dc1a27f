from typing import Any, Dict, List, Protocol


class Notifier(Protocol):
    def publish(self, players: List[Dict[str, Any]], status: Dict[str, Any]) -> None: ...


class SocketIONotifier:
    """Broadcasts roster snapshots to every client on a Socket.IO namespace."""

    def __init__(self, socketio, namespace: str = '/ws'):
        self._socketio = socketio
        self.namespace = namespace

    def publish(self, players, status):
        # socketio.emit (not flask_socketio.emit) since ticks run outside a request context
        self._socketio.emit('players_data', players, namespace=self.namespace)
        self._socketio.emit('game_status', status, namespace=self.namespace)
