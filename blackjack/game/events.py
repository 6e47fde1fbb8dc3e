"""What happened at the table, as a stream of typed events."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable


class EventType(Enum):
    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"
    DECK_SHUFFLED = "deck_shuffled"
    CARD_DEALT = "card_dealt"

    PLAYER_HIT = "player_hit"
    PLAYER_STAND = "player_stand"
    PLAYER_BLACKJACK = "player_blackjack"
    PLAYER_BUSTS = "player_busts"

    DEALER_REVEALS = "dealer_reveals"
    DEALER_HITS = "dealer_hits"
    DEALER_STANDS = "dealer_stands"
    DEALER_BLACKJACK = "dealer_blackjack"
    DEALER_BUSTS = "dealer_busts"

    PLAYER_WINS = "player_wins"
    DEALER_WINS = "dealer_wins"
    PUSH = "push"

    # Refused hit or stand; the round is unchanged
    INVALID_ACTION = "invalid_action"


@dataclass(frozen=True)
class GameEvent:
    """One table event with its payload."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Delivers events to subscribers and keeps every event in order.

    A handler subscribed without an event type receives everything.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._history: list[GameEvent] = []

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers[event_type].append(handler)

    def emit(self, event_type: EventType, **data: Any) -> GameEvent:
        """Record a new event, then hand it to typed and catch-all handlers."""
        event = GameEvent(event_type=event_type, data=data)
        self._history.append(event)
        for handler in (*self._handlers[event_type], *self._handlers[None]):
            handler(event)
        return event

    @property
    def history(self) -> tuple[GameEvent, ...]:
        """Every event emitted so far, oldest first."""
        return tuple(self._history)
