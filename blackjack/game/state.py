"""Game state, turn, and result types."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from blackjack.cards import Card, Deck, Rank, Suit
from blackjack.hand import Hand


class Turn(Enum):
    """
    Whose action is currently permitted.

    Flow: PLAYER_TURN → DEALER_TURN. A new round starts back at PLAYER_TURN.
    """

    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class GameResult(Enum):
    """Outcome of a round, derived from a game state."""

    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    DRAW = "draw"
    NO_RESULT = "no_result"


def _serialize_card(card: Card) -> dict[str, str]:
    return {"suit": card.suit.name, "rank": card.rank.name}


def _deserialize_card(data: dict[str, str]) -> Card:
    return Card(Suit[data["suit"]], Rank[data["rank"]])


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of one round.

    Transitions never modify a state; they build a new one with `evolve`.
    """

    player_hand: Hand
    dealer_hand: Hand
    card_deck: Deck
    turn: Turn = Turn.PLAYER_TURN

    def evolve(self, **changes: Any) -> "GameState":
        """Return a copy of this state with the given fields replaced."""
        return replace(self, **changes)

    @property
    def total_cards(self) -> int:
        """Return the number of cards across both hands and the deck."""
        return len(self.player_hand) + len(self.dealer_hand) + len(self.card_deck)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict."""
        return {
            "player_hand": [_serialize_card(c) for c in self.player_hand],
            "dealer_hand": [_serialize_card(c) for c in self.dealer_hand],
            "card_deck": [_serialize_card(c) for c in self.card_deck],
            "turn": self.turn.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Restore a state produced by `to_dict`."""
        return cls(
            player_hand=tuple(_deserialize_card(c) for c in data["player_hand"]),
            dealer_hand=tuple(_deserialize_card(c) for c in data["dealer_hand"]),
            card_deck=tuple(_deserialize_card(c) for c in data["card_deck"]),
            turn=Turn(data["turn"]),
        )
