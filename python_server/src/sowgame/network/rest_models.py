"""Pydantic request/response models for the REST API.

These models define the HTTP request bodies and response shapes.
Action bundles and moves stay plain dicts in the client wire format;
the rules engine validates them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ===================================================================
# Economy
# ===================================================================


class CycleRequest(BaseModel):
    cycle: str


class EconomyResponse(BaseModel):
    success: bool = True
    error: str = ""
    current_cycle: str = ""
    last_update: float = 0.0
    auto_simulation: bool = False
    seconds_until_event: Optional[float] = None
    markets: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class AutoSimulationResponse(BaseModel):
    auto_simulation: bool


class ReturnRequest(BaseModel):
    market: str
    amount: float = Field(ge=0)
    market_status: Optional[float] = None


class ReturnResponse(BaseModel):
    market: str
    amount: float
    market_status: float
    potential_return: int


# ===================================================================
# Actions & combat
# ===================================================================


class ValidateActionRequest(BaseModel):
    bundle: Optional[Dict[str, Any]] = None
    soldiers: int = Field(ge=0)


class ValidateActionResponse(BaseModel):
    valid: bool
    message: str = ""
    error: str = ""
    cleaned_data: Optional[Dict[str, Any]] = None


class SuccessChanceRequest(BaseModel):
    attacker_soldiers: int = Field(ge=0)
    defender_soldiers: int = Field(ge=0)
    defense: str


class SuccessChanceResponse(BaseModel):
    success: bool
    success_chance: int = 0
    error: str = ""


# ===================================================================
# Weekly moves
# ===================================================================


class AddMoveRequest(BaseModel):
    move: Dict[str, Any]
    soldiers: int = Field(ge=0)


class MovesResponse(BaseModel):
    success: bool
    error: str = ""
    week: int = 0
    moves: List[Dict[str, Any]] = Field(default_factory=list)
    descriptions: List[str] = Field(default_factory=list)
    actions_remaining: int = 0
    submitted: bool = False
    editing: bool = False
    locked: bool = False
    revision: int = 0


class CloseWeekResponse(BaseModel):
    success: bool
    error: str = ""
    locked_sessions: int = 0


class SnapshotResponse(BaseModel):
    success: bool
    error: str = ""
    game_id: str = ""
    week: int = 0
    cycle: str = ""
    returns: Dict[str, float] = Field(default_factory=dict)
