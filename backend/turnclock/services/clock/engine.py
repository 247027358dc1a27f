import logging
import threading
from typing import Optional

from turnclock.models import GameState, Phase, Player
from .notifier import Notifier
from .ticker import Clock


logger = logging.getLogger(__name__)


class TurnClockError(Exception):
    """Base error for turn clock commands that are reported back to the caller."""


class NotEnoughPlayersError(TurnClockError):
    def __init__(self, min_players: int = 2):
        super().__init__(f'At least {min_players} active players are required to start the game.')
        self.min_players = min_players


class TurnClockEngine:
    """Chess-clock style turn engine for one game.

    Owns the GameState; every public operation takes the engine lock, mutates
    the state, and publishes a snapshot through the notifier. The clock calls
    back into ``_on_tick`` while a turn is running.

    Invariants kept by every operation:
    - only ``roster[active_index]`` is active and it has not lost
    - phase is IDLE exactly when ``active_index`` is None
    - the clock runs exactly when phase is RUNNING
    """

    def __init__(self, clock: Clock, notifier: Notifier, default_time_ms: int = 10 * 60 * 1000, min_players: int = 2):
        self.clock = clock
        self.notifier = notifier
        self.default_time_ms = default_time_ms
        # Never below two: a game needs an opponent
        self.min_players = max(2, int(min_players))
        self.state = GameState()
        # Re-entrant: tick -> rotation -> publish all happen under one hold
        self._lock = threading.RLock()

    @property
    def tick_ms(self) -> int:
        return self.clock.interval_ms

    # ---- Commands ----

    def register(self, player_id, name: Optional[str] = None, initial_ms: Optional[int] = None) -> Player:
        with self._lock:
            if not name:
                name = f'Player_{len(self.state.roster) + 1}'
            if initial_ms is None or initial_ms <= 0:
                initial_ms = self.default_time_ms
            player = Player(id=player_id, name=name, remaining_ms=int(initial_ms))
            self.state.roster.append(player)
            logger.info(f"[register] id={player_id} name={name} remaining={player.remaining_ms}ms")
            self._publish()
            return player

    def start(self) -> None:
        with self._lock:
            if self.state.active_index is not None:
                logger.debug("[start-skip] game already in progress")
                return
            if self.state.alive_count() < self.min_players:
                raise NotEnoughPlayersError(self.min_players)
            first = next(i for i, p in enumerate(self.state.roster) if not p.has_lost)
            self._activate(first)
            logger.info(f"[start] active={self.state.active_player.id}")
            self._publish()
            self._start_clock()

    def advance_turn(self) -> None:
        with self._lock:
            if self.state.active_index is None:
                logger.debug("[advance-skip] no game in progress")
                return
            self.clock.stop()
            self._rotate()

    def toggle_pause(self) -> None:
        with self._lock:
            active = self.state.active_player
            if active is None or active.has_lost:
                logger.debug("[pause-skip] no eligible active player")
                return
            if self.state.phase == Phase.RUNNING:
                self.clock.stop()
                self.state.phase = Phase.PAUSED
                logger.info(f"[pause] active={active.id} remaining={active.remaining_ms}ms")
            else:
                self.state.phase = Phase.RUNNING
                self._start_clock()
                logger.info(f"[resume] active={active.id} remaining={active.remaining_ms}ms")
            self._publish()

    def remove(self, player_id) -> None:
        with self._lock:
            state = self.state
            idx = state.index_of(player_id)
            if idx == -1:
                self._publish()
                return
            if idx == state.active_index:
                self.clock.stop()
                state.roster.pop(idx)
                logger.info(f"[remove] active player id={player_id} left")
                if not state.roster:
                    self._go_idle()
                    self._publish()
                    return
                # Search starts at the slot the leaver occupied
                state.active_index = (idx - 1) % len(state.roster)
                self._rotate()
                return
            state.roster.pop(idx)
            if state.active_index is not None and idx < state.active_index:
                state.active_index -= 1
            logger.info(f"[remove] id={player_id} index={idx}")
            self._publish()

    def tick(self) -> None:
        with self._lock:
            active = self.state.active_player
            if self.state.phase != Phase.RUNNING or active is None or active.has_lost:
                return
            active.remaining_ms -= self.tick_ms
            if active.remaining_ms <= 0:
                active.remaining_ms = 0
                active.has_lost = True
                self.clock.stop()
                logger.info(f"[eliminated] id={active.id} name={active.name}")
                self._publish()
                self._rotate()
            else:
                self._publish()

    # ---- Queries ----

    def snapshot(self):
        with self._lock:
            return self.state.snapshot()

    def status(self):
        with self._lock:
            status = self._status()
            status['players'] = self.state.snapshot()
            return status

    # ---- Internals ----

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            # Stale loop woke up after a stop/start
            if generation != self.clock.generation:
                return
            self.tick()

    def _rotate(self) -> None:
        """Move the turn to the next player who has not lost, or end the game."""
        state = self.state
        n = len(state.roster)
        current = state.active_index if state.active_index is not None else -1
        found = None
        for offset in range(1, n + 1):
            idx = (current + offset) % n
            if not state.roster[idx].has_lost:
                found = idx
                break
        if found is None:
            self.clock.stop()
            self._go_idle()
            logger.info("[game-over] no eligible players left")
            self._publish()
            return
        self._activate(found)
        logger.info(f"[rotate] active={state.roster[found].id} index={found}")
        self._publish()
        self._start_clock()

    def _activate(self, idx: int) -> None:
        self.state.active_index = idx
        self.state.phase = Phase.RUNNING

    def _go_idle(self) -> None:
        self.state.active_index = None
        self.state.phase = Phase.IDLE

    def _start_clock(self) -> None:
        # A previous loop is always cancelled before a new one starts
        self.clock.stop()
        self.clock.start(self._on_tick)

    def _status(self):
        active = self.state.active_player
        return {
            'phase': self.state.phase.value,
            'activePlayerId': active.id if active else None,
        }

    def _publish(self) -> None:
        self.notifier.publish(self.state.snapshot(), self._status())
