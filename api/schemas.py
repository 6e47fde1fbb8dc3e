"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "reset"]


class CardResponse(BaseModel):
    """Card representation. Face-down cards carry no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None = None
    suit: str | None = None
    value: int | None = None
    image: str = Field(..., description="Card-face asset key, or 'back'")


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int | None = Field(None, description="Hidden while the dealer's hole card is down")
    is_soft: bool | None = None
    is_blackjack: bool | None = None
    is_busted: bool | None = None


class GameStateResponse(BaseModel):
    """Current round as seen by the player."""

    turn: Literal["player_turn", "dealer_turn"]
    player_hand: HandResponse
    dealer_hand: HandResponse
    cards_remaining: int
    can_hit: bool
    can_stand: bool
    result: Literal["player_win", "dealer_win", "draw"] | None
    status: str


class NewGameResponse(BaseModel):
    """A freshly dealt game."""

    session_id: str
    game: GameStateResponse
