"""Game engine and state management."""

from blackjack.game.events import EventEmitter, GameEvent, EventType
from blackjack.game.state import GameResult, GameState, Turn
from blackjack.game.engine import (
    DEALER_STAND_THRESHOLD,
    GameTable,
    dealer_must_draw,
    dealer_play_step,
    determine_game_result,
    player_hits,
    player_stands,
    round_outcome,
    setup_game,
    visible_dealer_hand,
)

__all__ = [
    "EventEmitter",
    "GameEvent",
    "EventType",
    "GameResult",
    "GameState",
    "Turn",
    "DEALER_STAND_THRESHOLD",
    "GameTable",
    "dealer_must_draw",
    "dealer_play_step",
    "determine_game_result",
    "player_hits",
    "player_stands",
    "round_outcome",
    "setup_game",
    "visible_dealer_hand",
]
