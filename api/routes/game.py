"""Game API endpoints."""

import logging
import time
from random import Random
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Header

from api.schemas import (
    ActionRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
    NewGameResponse,
)
from api.session import create_session, extract_session_id, get_session_store
from blackjack.cards import Card
from blackjack.hand import (
    Hand,
    calculate_hand_score,
    describe_hand,
    has_blackjack,
    is_busted,
    is_soft,
)
from blackjack.game import GameEvent, GameResult, GameState, GameTable, visible_dealer_hand
from config import config

logger = logging.getLogger("blackjack.api.game")

router = APIRouter()

# Shared across sessions; seeded from BLACKJACK_SEED when set
_rng = Random(config.game.seed)

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def _log_event(event: GameEvent) -> None:
    """Forward table events to the log."""
    logger.debug("%s", event)


def _new_table(state: GameState | None = None) -> GameTable:
    """Build a table around a stored round, or deal a new one."""
    table = GameTable(
        state=state,
        rng=_rng,
        stand_threshold=config.game.dealer_stand_threshold,
    )
    table.subscribe(_log_event)
    return table


async def _load_table(session_id: str) -> GameTable:
    """Load the session's table or fail with 404."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")

    store = await get_session_store()
    session_data = await store.get(session_id)
    if not session_data or SESSION_KEY_GAME not in session_data:
        raise HTTPException(status_code=404, detail="Unknown or expired session")

    try:
        state = GameState.from_dict(session_data[SESSION_KEY_GAME])
    except (KeyError, ValueError, TypeError):
        logger.warning("Discarding corrupt game data for session")
        raise HTTPException(status_code=404, detail="Unknown or expired session") from None

    return _new_table(state)


async def _save_table(session_id: str, table: GameTable) -> None:
    """Save the table's round to the session store."""
    store = await get_session_store()
    session_data = await store.get(session_id) or {}
    session_data[SESSION_KEY_GAME] = table.state.to_dict()
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    if SESSION_KEY_CREATED_AT not in session_data:
        session_data[SESSION_KEY_CREATED_AT] = int(time.time())
    await store.set(session_id, session_data)


def _card_to_response(card: Card | None) -> CardResponse:
    """Convert a Card to CardResponse; None is a face-down card."""
    if card is None:
        return CardResponse(image="back")
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        image=card.image_name,
    )


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a fully visible hand to HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand],
        score=calculate_hand_score(hand),
        is_soft=is_soft(hand),
        is_blackjack=has_blackjack(hand),
        is_busted=is_busted(hand),
    )


def _game_state_response(table: GameTable) -> GameStateResponse:
    """Convert the table's round to a response, hiding the hole card."""
    state = table.state
    visible = visible_dealer_hand(state)

    if None in visible:
        dealer_hand = HandResponse(cards=[_card_to_response(c) for c in visible])
    else:
        dealer_hand = _hand_to_response(state.dealer_hand)

    result = table.result
    return GameStateResponse(
        turn=table.turn.value,
        player_hand=_hand_to_response(state.player_hand),
        dealer_hand=dealer_hand,
        cards_remaining=table.cards_remaining,
        can_hit=table.can_hit,
        can_stand=table.can_stand,
        result=None if result == GameResult.NO_RESULT else result.value,
        status=table.turn.value if result == GameResult.NO_RESULT else result.value,
    )


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> NewGameResponse:
    """Deal a new game, creating a session unless a valid one is given."""
    if session_id is None or extract_session_id(session_id) is None:
        session_id = await create_session()

    table = _new_table()
    await _save_table(session_id, table)

    return NewGameResponse(session_id=session_id, game=_game_state_response(table))


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    table = await _load_table(session_id)
    return _game_state_response(table)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    table = await _load_table(session_id)

    if request.action == "reset":
        table.reset()
    else:
        actions: dict[str, Any] = {
            "hit": table.hit,
            "stand": table.stand,
        }
        if not actions[request.action]():
            logger.info("Refused %s during %s", request.action, table.turn.value)
            raise HTTPException(status_code=400, detail=f"Cannot {request.action} now")

    logger.debug(
        "After %s player holds %s",
        request.action,
        describe_hand(table.state.player_hand),
    )
    await _save_table(session_id, table)
    return _game_state_response(table)
