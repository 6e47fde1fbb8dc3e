"""Hand evaluation for blackjack."""

from blackjack.cards import Card

# Cards held by one participant, in the order they were dealt.
Hand = tuple[Card, ...]

BLACKJACK = 21


def _score(hand: Hand) -> tuple[int, int]:
    """Return the best total and how many aces still count as 11."""
    total = 0
    aces = 0

    for card in hand:
        total += card.value
        if card.is_ace:
            aces += 1

    # Reduce aces from 11 to 1 as needed
    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total, aces


def calculate_hand_score(hand: Hand) -> int:
    """
    Calculate the best hand value.

    Aces count 11 until the total passes 21, then drop to 1 one at a time.
    Returns the highest value that doesn't bust, or the lowest bust value.
    """
    total, _ = _score(hand)
    return total


def is_soft(hand: Hand) -> bool:
    """Check if the hand is soft (has an ace still counted as 11)."""
    _, soft_aces = _score(hand)
    return soft_aces > 0


def is_busted(hand: Hand) -> bool:
    """Check if the hand has busted (value > 21)."""
    return calculate_hand_score(hand) > BLACKJACK


def has_blackjack(hand: Hand) -> bool:
    """Check if the hand is a natural blackjack (Ace plus a ten-value card)."""
    if len(hand) != 2:
        return False

    first, second = hand
    return (first.is_ace and second.is_ten_value) or (
        first.is_ten_value and second.is_ace
    )


def describe_hand(hand: Hand) -> str:
    """Render a hand like 'A♠ K♥ (BLACKJACK)'."""
    cards_str = " ".join(str(card) for card in hand)
    value = calculate_hand_score(hand)
    value_str = f"({value})"
    if is_soft(hand):
        value_str = f"(soft {value})"
    if has_blackjack(hand):
        value_str = "(BLACKJACK)"
    if is_busted(hand):
        value_str = "(BUST)"
    return f"{cards_str} {value_str}"
