"""Core blackjack engine - 100% UI-agnostic."""

from blackjack.cards import (
    Card,
    Deck,
    DeckExhaustedError,
    Draw,
    Rank,
    Suit,
    new_deck,
    shuffle,
    take_card,
)
from blackjack.hand import Hand, calculate_hand_score, has_blackjack, is_busted, is_soft

__all__ = [
    "Card",
    "Deck",
    "DeckExhaustedError",
    "Draw",
    "Rank",
    "Suit",
    "new_deck",
    "shuffle",
    "take_card",
    "Hand",
    "calculate_hand_score",
    "has_blackjack",
    "is_busted",
    "is_soft",
]
