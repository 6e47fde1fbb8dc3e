"""Cards, the 52-card deck, and drawing from it. Everything here is immutable."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import NamedTuple


class Suit(Enum):
    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Ranks in ascending order; pip ranks carry their pip count."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return _COURT_LABELS.get(self, str(self.value))

    @property
    def is_numeric(self) -> bool:
        return self.value <= 10

    @property
    def blackjack_value(self) -> int:
        """Points before any ace is demoted: pips, 10 per court card, 11 for the ace."""
        return _POINTS[self]

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return _POINTS[self] == 10


_COURT_LABELS = {Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"}

_POINTS = {rank: min(rank.value, 10) for rank in Rank}
_POINTS[Rank.ACE] = 11

# Accepts both "10" and "T" for tens, and suit letters or symbols
_RANK_BY_CODE = {str(rank): rank for rank in Rank} | {"T": Rank.TEN}
_SUIT_BY_CODE = {suit.value: suit for suit in Suit} | {suit.name[0]: suit for suit in Suit}


@dataclass(frozen=True, slots=True)
class Card:
    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.suit.name}, {self.rank.name})"

    @property
    def value(self) -> int:
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @property
    def image_name(self) -> str:
        """
        Key of the card-face asset, e.g. 'spade_1' or 'heart_king'.

        The asset set numbers aces 1 and names court cards.
        """
        suit = self.suit.name.lower().removesuffix("s")
        if self.rank.is_ace:
            face = "1"
        elif self.rank.is_numeric:
            face = str(self.rank.value)
        else:
            face = self.rank.name.lower()
        return f"{suit}_{face}"

    @classmethod
    def from_string(cls, code: str) -> "Card":
        """Parse a short code such as 'AS', '10h' or 'Q♥'."""
        code = code.strip().upper()
        rank = _RANK_BY_CODE.get(code[:-1])
        suit = _SUIT_BY_CODE.get(code[-1:])
        if rank is None or suit is None:
            raise ValueError(f"Not a card code: {code!r}")
        return cls(suit, rank)


# The last card of a deck is its top card.
Deck = tuple[Card, ...]


class DeckExhaustedError(IndexError):
    """Raised when drawing from an empty deck."""


class Draw(NamedTuple):
    """A card taken from the top of a deck and the deck left behind."""

    card: Card
    remaining: Deck


def new_deck() -> Deck:
    """Build the 52-card deck in suit-then-rank declaration order."""
    return tuple(Card(suit, rank) for suit in Suit for rank in Rank)


def shuffle(deck: Deck, rng: Random | None = None) -> Deck:
    """
    Return the deck's cards in a uniformly random order.

    Args:
        deck: Cards to shuffle (left untouched)
        rng: Random number generator for reproducible shuffles
    """
    rng = rng or Random()
    cards = list(deck)
    rng.shuffle(cards)
    return tuple(cards)


def take_card(deck: Deck) -> Draw:
    """Take the top card off the deck."""
    if not deck:
        raise DeckExhaustedError("Cannot draw from empty deck")
    return Draw(card=deck[-1], remaining=deck[:-1])
