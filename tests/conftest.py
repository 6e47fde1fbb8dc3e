"""Pytest fixtures for blackjack engine tests."""

import pytest
from random import Random

from blackjack.cards import Card, Rank, Suit, new_deck
from blackjack.game import GameState, GameTable, Turn, setup_game


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck():
    """A fresh, ordered deck."""
    return new_deck()


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return ()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return (Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.KING))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return (Card(Suit.SPADES, Rank.ACE), Card(Suit.HEARTS, Rank.SIX))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return (Card(Suit.SPADES, Rank.TEN), Card(Suit.HEARTS, Rank.SIX))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return (
        Card(Suit.SPADES, Rank.TEN),
        Card(Suit.HEARTS, Rank.SIX),
        Card(Suit.CLUBS, Rank.KING),
    )


@pytest.fixture
def hand():
    """Factory building a hand from short codes like 'AS', '10H'."""

    def _hand(*codes: str) -> tuple[Card, ...]:
        return tuple(Card.from_string(code) for code in codes)

    return _hand


@pytest.fixture
def make_state():
    """
    Factory building a full 52-card round.

    `top` lists the next cards to be drawn, first draw first. The rest of
    the deck sits beneath them.
    """

    def _make_state(
        player: tuple[Card, ...],
        dealer: tuple[Card, ...],
        top: tuple[Card, ...] = (),
        turn: Turn = Turn.PLAYER_TURN,
    ) -> GameState:
        used = set(player) | set(dealer) | set(top)
        rest = tuple(c for c in new_deck() if c not in used)
        return GameState(
            player_hand=player,
            dealer_hand=dealer,
            card_deck=rest + tuple(reversed(top)),
            turn=turn,
        )

    return _make_state


@pytest.fixture
def game_state(rng):
    """A freshly dealt round."""
    return setup_game(rng)


@pytest.fixture
def table(rng):
    """A new table with a freshly dealt round."""
    return GameTable(rng=rng)
