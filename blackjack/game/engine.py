"""Blackjack round transitions and a stateful table built on them."""

from random import Random
from typing import Callable

from transitions import Machine

from blackjack.cards import Card, new_deck, shuffle, take_card
from blackjack.hand import (
    BLACKJACK,
    calculate_hand_score,
    has_blackjack,
    is_busted,
)
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.state import GameResult, GameState, Turn

# Dealer draws on 16 or less
DEALER_STAND_THRESHOLD = 17


def setup_game(rng: Random | None = None) -> GameState:
    """
    Shuffle a fresh deck and deal the opening hands.

    The player takes the top two cards, the dealer the next two.
    """
    deck = shuffle(new_deck(), rng)
    return GameState(
        player_hand=deck[-2:],
        dealer_hand=deck[-4:-2],
        card_deck=deck[:-4],
        turn=Turn.PLAYER_TURN,
    )


def player_hits(state: GameState) -> GameState:
    """Deal one card to the player. The turn is left as it is."""
    card, remaining = take_card(state.card_deck)
    return state.evolve(
        card_deck=remaining,
        player_hand=state.player_hand + (card,),
    )


def dealer_must_draw(
    state: GameState,
    stand_threshold: int = DEALER_STAND_THRESHOLD,
) -> bool:
    """Check whether the dealer's hand is under the stand threshold."""
    return calculate_hand_score(state.dealer_hand) < stand_threshold


def dealer_play_step(
    state: GameState,
    stand_threshold: int = DEALER_STAND_THRESHOLD,
) -> GameState:
    """
    Advance the dealer by at most one card.

    The dealer draws while under the stand threshold and stands otherwise.
    """
    if not dealer_must_draw(state, stand_threshold):
        return state

    card, remaining = take_card(state.card_deck)
    return state.evolve(
        card_deck=remaining,
        dealer_hand=state.dealer_hand + (card,),
    )


def player_stands(
    state: GameState,
    stand_threshold: int = DEALER_STAND_THRESHOLD,
) -> GameState:
    """
    End the player's turn.

    The dealer takes a single step of play only when leaving the player's
    turn; standing again during the dealer's turn changes nothing else.
    """
    if state.turn == Turn.PLAYER_TURN:
        state = dealer_play_step(state, stand_threshold)
    return state.evolve(turn=Turn.DEALER_TURN)


def determine_game_result(state: GameState) -> GameResult:
    """
    Compare the two hands.

    Always yields a decided result, even mid-round; see `round_outcome`.
    """
    player_score = calculate_hand_score(state.player_hand)
    dealer_score = calculate_hand_score(state.dealer_hand)
    player_bj = has_blackjack(state.player_hand)
    dealer_bj = has_blackjack(state.dealer_hand)

    # Player busts always loses
    if player_score > BLACKJACK:
        return GameResult.DEALER_WIN
    if dealer_score > BLACKJACK:
        return GameResult.PLAYER_WIN

    # A natural beats any other 21
    if player_bj and not dealer_bj:
        return GameResult.PLAYER_WIN
    if dealer_bj and not player_bj:
        return GameResult.DEALER_WIN

    if player_score == dealer_score:
        return GameResult.DRAW
    if player_score > dealer_score:
        return GameResult.PLAYER_WIN
    return GameResult.DEALER_WIN


def round_outcome(state: GameState) -> GameResult:
    """Return the round's result, or NO_RESULT while the player is still acting."""
    if state.turn == Turn.PLAYER_TURN:
        return GameResult.NO_RESULT
    return determine_game_result(state)


def visible_dealer_hand(state: GameState) -> tuple[Card | None, ...]:
    """
    Return the dealer's cards as the player sees them.

    The hole card (the first) is None until the dealer's turn.
    """
    if state.turn == Turn.PLAYER_TURN and state.dealer_hand:
        return (None,) + state.dealer_hand[1:]
    return state.dealer_hand


_OUTCOME_EVENTS = {
    GameResult.PLAYER_WIN: EventType.PLAYER_WINS,
    GameResult.DEALER_WIN: EventType.DEALER_WINS,
    GameResult.DRAW: EventType.PUSH,
}


class GameTable:
    """
    A single-player table holding the current round.

    Each action replaces the held GameState with the next one. The state
    machine refuses hits and stands once the player's turn is over, which is
    the gating the pure transitions leave to their caller.
    """

    # State machine states
    STATES = [t.value for t in Turn]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": "*", "dest": "player_turn"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
    ]

    def __init__(
        self,
        state: GameState | None = None,
        rng: Random | None = None,
        stand_threshold: int = DEALER_STAND_THRESHOLD,
    ) -> None:
        """
        Initialize a table.

        Args:
            state: Round to resume (a new round is dealt if not provided)
            rng: Random number generator for reproducible games
            stand_threshold: Dealer score at which the dealer stops drawing
        """
        self._rng = rng or Random()
        self.stand_threshold = stand_threshold
        self.events = EventEmitter()

        initial = state.turn if state is not None else Turn.PLAYER_TURN
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=initial.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        if state is None:
            self.reset()
        else:
            self._state = state

    @property
    def state(self) -> GameState:
        """Get the current round."""
        return self._state

    @property
    def turn(self) -> Turn:
        """Get whose turn it is."""
        return Turn(self._machine_state)  # type: ignore

    @property
    def result(self) -> GameResult:
        """Get the round result, NO_RESULT while the player is acting."""
        return round_outcome(self._state)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards left in the deck."""
        return len(self._state.card_deck)

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.turn == Turn.PLAYER_TURN and self.cards_remaining > 0

    @property
    def can_stand(self) -> bool:
        """
        Check if standing is allowed.

        Standing is refused when the dealer would have to draw from an
        empty deck.
        """
        if self.turn != Turn.PLAYER_TURN:
            return False
        return self.cards_remaining > 0 or not dealer_must_draw(
            self._state, self.stand_threshold
        )

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def reset(self) -> None:
        """Shuffle a new deck and deal a new round."""
        self._state = setup_game(self._rng)
        self.events.emit(EventType.DECK_SHUFFLED, cards=52)

        for card in self._state.player_hand:
            self._announce_card(card, "player", self._state.player_hand)
        # Dealer's first card is dealt face down
        up_card = self._state.dealer_hand[1]
        self.events.emit(EventType.CARD_DEALT, card="??", hand="dealer", hand_value=None)
        self.events.emit(EventType.CARD_DEALT, card=str(up_card), hand="dealer", hand_value=None)

        self.deal()  # Trigger state transition
        self.events.emit(EventType.ROUND_STARTED, cards_remaining=self.cards_remaining)

        if has_blackjack(self._state.player_hand):
            self.events.emit(EventType.PLAYER_BLACKJACK)

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        if not self.can_hit:
            self._refuse("hit")
            return False

        self._state = player_hits(self._state)
        hand = self._state.player_hand
        self._announce_card(hand[-1], "player", hand)
        self.events.emit(EventType.PLAYER_HIT, hand_value=calculate_hand_score(hand))

        # Busting does not end the turn; the player still has to stand.
        if is_busted(hand):
            self.events.emit(EventType.PLAYER_BUSTS, hand_value=calculate_hand_score(hand))

        self.player_action()  # Stay in player turn
        return True

    def stand(self) -> bool:
        """Player stands; the dealer plays one step."""
        if not self.can_stand:
            self._refuse("stand")
            return False

        before = self._state
        self.events.emit(
            EventType.PLAYER_STAND,
            hand_value=calculate_hand_score(before.player_hand),
        )
        self.events.emit(
            EventType.DEALER_REVEALS,
            card=str(before.dealer_hand[0]),
            hand_value=calculate_hand_score(before.dealer_hand),
        )

        self._state = player_stands(before, self.stand_threshold)
        dealer_hand = self._state.dealer_hand
        dealer_value = calculate_hand_score(dealer_hand)

        if len(dealer_hand) > len(before.dealer_hand):
            self._announce_card(dealer_hand[-1], "dealer", dealer_hand)
            self.events.emit(EventType.DEALER_HITS, hand_value=dealer_value)

        if is_busted(dealer_hand):
            self.events.emit(EventType.DEALER_BUSTS, hand_value=dealer_value)
        else:
            self.events.emit(EventType.DEALER_STANDS, hand_value=dealer_value)

        self.player_done()  # Trigger state transition
        self._announce_result()
        return True

    def _announce_card(self, card: Card, owner: str, hand: tuple[Card, ...]) -> None:
        self.events.emit(
            EventType.CARD_DEALT,
            card=str(card),
            hand=owner,
            hand_value=calculate_hand_score(hand),
        )

    def _refuse(self, action: str) -> None:
        message = f"Cannot {action} during {self.turn}"
        if self.turn == Turn.PLAYER_TURN:
            message = f"Cannot {action}: deck is empty"
        self.events.emit(
            EventType.INVALID_ACTION,
            message=message,
            turn=self.turn.value,
        )

    def _announce_result(self) -> None:
        result = determine_game_result(self._state)

        if has_blackjack(self._state.dealer_hand):
            self.events.emit(EventType.DEALER_BLACKJACK)

        self.events.emit(
            _OUTCOME_EVENTS[result],
            player_score=calculate_hand_score(self._state.player_hand),
            dealer_score=calculate_hand_score(self._state.dealer_hand),
        )
        self.events.emit(EventType.ROUND_ENDED, result=result.value)
