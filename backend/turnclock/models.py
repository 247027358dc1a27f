import enum
from dataclasses import dataclass, field
from typing import List, Optional


class Phase(str, enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    PAUSED = 'paused'


@dataclass
class Player:
    id: str
    name: str
    remaining_ms: int
    has_lost: bool = False

    def to_dict(self, is_active=False):
        return {
            'id': self.id,
            'name': self.name,
            'remainingMs': self.remaining_ms,
            'isActive': is_active,
            'hasLost': self.has_lost,
        }


@dataclass
class GameState:
    """Roster and turn state of a single game.

    ``roster`` order is the rotation order; it only changes by removal.
    ``active_index`` is None while no game is in progress.
    """
    roster: List[Player] = field(default_factory=list)
    active_index: Optional[int] = None
    phase: Phase = Phase.IDLE

    @property
    def active_player(self) -> Optional[Player]:
        if self.active_index is None or not (0 <= self.active_index < len(self.roster)):
            return None
        return self.roster[self.active_index]

    def index_of(self, player_id) -> int:
        for idx, player in enumerate(self.roster):
            if player.id == player_id:
                return idx
        return -1

    def alive_count(self) -> int:
        return sum(1 for p in self.roster if not p.has_lost)

    def snapshot(self):
        return [p.to_dict(is_active=(i == self.active_index)) for i, p in enumerate(self.roster)]
