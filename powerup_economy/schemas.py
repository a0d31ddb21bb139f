"""
Pydantic schemas for powerup requests, outcomes and API responses
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class PowerupKind(str, Enum):
    BOMB = "bomb"
    GLIMPSE = "glimpse"
    SKIP = "skip"


class GamePhase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETE = "complete"


class IneligibleReason(str, Enum):
    UI_DISABLED = "ui_disabled"
    NOT_PLAYING = "not_playing"
    BUSY = "busy"
    UNKNOWN_CONFIRMATION = "unknown_confirmation"


class ButtonState(str, Enum):
    DISABLED = "disabled"
    CAN_BUY = "can_buy"
    UNAFFORDABLE = "unaffordable"


class ConfirmationPrompt(BaseModel):
    title: str
    description: str
    price: int


# Outcome Schemas
class Ineligible(BaseModel):
    status: Literal["ineligible"] = "ineligible"
    reason: IneligibleReason


class InsufficientFunds(BaseModel):
    status: Literal["insufficient_funds"] = "insufficient_funds"
    kind: PowerupKind
    price: int
    balance: int
    title: str = "Insufficient Coins"
    message: str = ""


class ConfirmationRequired(BaseModel):
    status: Literal["confirmation_required"] = "confirmation_required"
    confirmation_id: str
    kind: PowerupKind
    price: int
    title: str
    description: str

    def prompt(self) -> ConfirmationPrompt:
        return ConfirmationPrompt(title=self.title, description=self.description, price=self.price)


class Declined(BaseModel):
    status: Literal["declined"] = "declined"
    kind: PowerupKind


class PowerupApplied(BaseModel):
    status: Literal["applied"] = "applied"
    kind: PowerupKind
    price: int


class EffectApplicationAnomaly(BaseModel):
    status: Literal["effect_anomaly"] = "effect_anomaly"
    kind: PowerupKind
    price: int
    detail: str


RequestOutcome = Annotated[
    Union[
        Ineligible,
        InsufficientFunds,
        ConfirmationRequired,
        Declined,
        PowerupApplied,
        EffectApplicationAnomaly,
    ],
    Field(discriminator="status"),
]


# Player Schemas
class PlayerCreate(BaseModel):
    username: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Username must not be empty')
        return v


class PlayerResponse(BaseModel):
    id: int
    username: str
    coins: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    player_id: int
    coins: int


# Powerup Schemas
class PowerupDefinitionResponse(BaseModel):
    kind: PowerupKind
    name: str
    price: int
    description: str
    emoji: str


class PowerupButtonResponse(PowerupDefinitionResponse):
    state: ButtonState


class PowerupBarResponse(BaseModel):
    balance: int
    powerups: List[PowerupButtonResponse]


# Session Schemas
class SessionCreate(BaseModel):
    player_id: int


class SessionResponse(BaseModel):
    session_id: str
    player_id: int
    in_flight: bool


class PowerupRequestBody(BaseModel):
    phase: GamePhase
    ui_disabled: bool = False


class ConfirmationBody(BaseModel):
    confirmed: bool


class ActiveEffectResponse(BaseModel):
    kind: PowerupKind
    count: int
