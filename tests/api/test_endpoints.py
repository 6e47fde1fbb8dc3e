"""Tests for API endpoints."""

import importlib
import logging
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

import api.main
from api.main import app
from api.routes.game import SESSION_KEY_GAME
from api.session import get_session_store
from blackjack.cards import Card, new_deck
from blackjack.game import GameState, Turn


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _new_game(client) -> tuple[str, dict]:
    response = await client.post("/api/game/new")
    assert response.status_code == 200
    data = response.json()
    return data["session_id"], data["game"]


async def _store_state(session_id: str, state: GameState) -> None:
    store = await get_session_store()
    session_data = await store.get(session_id)
    session_data[SESSION_KEY_GAME] = state.to_dict()
    await store.set(session_id, session_data)


def _total_cards(game: dict) -> int:
    return (
        len(game["player_hand"]["cards"])
        + len(game["dealer_hand"]["cards"])
        + game["cards_remaining"]
    )


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_new_game(client):
    """Test creating a new game deals a round."""
    session_id, game = await _new_game(client)

    assert session_id
    assert game["turn"] == "player_turn"
    assert game["status"] == "player_turn"
    assert game["result"] is None
    assert len(game["player_hand"]["cards"]) == 2
    assert game["cards_remaining"] == 48
    assert game["can_hit"] is True
    assert game["can_stand"] is True


@pytest.mark.asyncio
async def test_dealer_hole_card_hidden(client):
    """Test the dealer's first card and score are hidden during the player turn."""
    _, game = await _new_game(client)

    dealer = game["dealer_hand"]
    assert dealer["cards"][0] == {"rank": None, "suit": None, "value": None, "image": "back"}
    assert dealer["cards"][1]["image"] != "back"
    assert dealer["score"] is None


@pytest.mark.asyncio
async def test_game_state(client):
    """Test getting game state."""
    session_id, game = await _new_game(client)

    response = await client.get(
        "/api/game/state",
        headers={"X-Session-ID": session_id},
    )
    assert response.status_code == 200
    assert response.json() == game


@pytest.mark.asyncio
async def test_unknown_session(client):
    """Test an unsigned session ID is rejected."""
    response = await client.get(
        "/api/game/state",
        headers={"X-Session-ID": "not-a-session"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_session_header(client):
    """Test the session header is required."""
    response = await client.get("/api/game/state")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_hit(client):
    """Test hitting adds a player card."""
    session_id, _ = await _new_game(client)

    response = await client.post(
        "/api/game/action",
        json={"action": "hit"},
        headers={"X-Session-ID": session_id},
    )
    assert response.status_code == 200
    data = response.json()

    assert len(data["player_hand"]["cards"]) == 3
    assert data["cards_remaining"] == 47
    assert data["turn"] == "player_turn"
    assert _total_cards(data) == 52


@pytest.mark.asyncio
async def test_stand_resolves_round(client):
    """Test standing reveals the dealer and reports a result."""
    session_id, _ = await _new_game(client)

    response = await client.post(
        "/api/game/action",
        json={"action": "stand"},
        headers={"X-Session-ID": session_id},
    )
    assert response.status_code == 200
    data = response.json()

    assert data["turn"] == "dealer_turn"
    assert data["result"] in ("player_win", "dealer_win", "draw")
    assert data["status"] == data["result"]
    assert data["dealer_hand"]["score"] is not None
    assert all(c["image"] != "back" for c in data["dealer_hand"]["cards"])
    assert data["can_hit"] is False
    assert _total_cards(data) == 52


@pytest.mark.asyncio
async def test_hit_after_stand_rejected(client):
    """Test actions are refused once the player's turn is over."""
    session_id, _ = await _new_game(client)
    headers = {"X-Session-ID": session_id}

    await client.post("/api/game/action", json={"action": "stand"}, headers=headers)
    response = await client.post("/api/game/action", json={"action": "hit"}, headers=headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_action(client):
    """Test unknown actions fail validation."""
    session_id, _ = await _new_game(client)

    response = await client.post(
        "/api/game/action",
        json={"action": "double"},
        headers={"X-Session-ID": session_id},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_reset(client):
    """Test reset deals a new round in the same session."""
    session_id, _ = await _new_game(client)
    headers = {"X-Session-ID": session_id}

    await client.post("/api/game/action", json={"action": "stand"}, headers=headers)
    response = await client.post("/api/game/action", json={"action": "reset"}, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["turn"] == "player_turn"
    assert data["cards_remaining"] == 48


@pytest.mark.asyncio
async def test_new_game_reuses_session(client):
    """Test posting /new with a session header resets that session."""
    session_id, _ = await _new_game(client)

    response = await client.post("/api/game/new", headers={"X-Session-ID": session_id})
    assert response.status_code == 200
    assert response.json()["session_id"] == session_id


@pytest.mark.asyncio
async def test_blackjack_beats_twenty(client):
    """Test a stored natural against a dealer 20 reports a player win."""
    session_id, _ = await _new_game(client)
    cards = [Card.from_string(c) for c in ("AS", "KS", "KH", "QH")]
    rest = tuple(c for c in new_deck() if c not in cards)

    await _store_state(
        session_id,
        GameState(
            player_hand=(cards[0], cards[1]),
            dealer_hand=(cards[2], cards[3]),
            card_deck=rest,
            turn=Turn.PLAYER_TURN,
        ),
    )

    response = await client.post(
        "/api/game/action",
        json={"action": "stand"},
        headers={"X-Session-ID": session_id},
    )
    data = response.json()
    assert data["player_hand"]["is_blackjack"] is True
    assert data["dealer_hand"]["score"] == 20
    assert data["result"] == "player_win"


@pytest.mark.asyncio
async def test_corrupt_session_data(client):
    """Test unreadable game data is treated as a missing session."""
    session_id, _ = await _new_game(client)
    store = await get_session_store()
    await store.set(session_id, {SESSION_KEY_GAME: {"turn": "player_turn"}})

    response = await client.get("/api/game/state", headers={"X-Session-ID": session_id})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stand_refused_when_dealer_cannot_draw(client):
    """Test standing with an empty deck and a dealer under 17 is a 400."""
    session_id, _ = await _new_game(client)
    headers = {"X-Session-ID": session_id}
    deck = new_deck()
    dealer = (Card.from_string("KH"), Card.from_string("6H"))
    player = tuple(c for c in deck if c not in dealer)

    await _store_state(
        session_id,
        GameState(player_hand=player, dealer_hand=dealer, card_deck=(), turn=Turn.PLAYER_TURN),
    )

    state = await client.get("/api/game/state", headers=headers)
    assert state.json()["can_stand"] is False

    response = await client.post("/api/game/action", json={"action": "stand"}, headers=headers)
    assert response.status_code == 400

    state = await client.get("/api/game/state", headers=headers)
    assert state.json()["turn"] == "player_turn"
    assert len(state.json()["dealer_hand"]["cards"]) == 2


@pytest.mark.asyncio
async def test_action_logs_player_hand(client, caplog):
    """Test each accepted action logs the player's hand."""
    caplog.set_level(logging.DEBUG, logger="blackjack.api.game")
    session_id, _ = await _new_game(client)
    cards = [Card.from_string(c) for c in ("AS", "KS", "9H", "8H")]
    rest = tuple(c for c in new_deck() if c not in cards)
    await _store_state(
        session_id,
        GameState(
            player_hand=(cards[0], cards[1]),
            dealer_hand=(cards[2], cards[3]),
            card_deck=rest,
        ),
    )

    await client.post(
        "/api/game/action",
        json={"action": "stand"},
        headers={"X-Session-ID": session_id},
    )

    assert "After stand player holds A♠ K♠ (BLACKJACK)" in caplog.text


def test_import_leaves_logging_to_server():
    """Test importing the app does not configure logging."""
    with patch("logging.basicConfig") as basic_config:
        importlib.reload(api.main)

    basic_config.assert_not_called()
