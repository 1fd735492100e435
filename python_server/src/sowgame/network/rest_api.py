"""REST API — FastAPI application exposing the rules engine.

Every economy, validation, combat and weekly-moves operation is
available over HTTP.  Rule failures are answered with HTTP 200 and
``success: false`` plus a readable ``error``, so the client can show
the message as-is; unknown resources are 404.

Usage::

    from sowgame.network.rest_api import create_app

    app = create_app(services)
    # Start with uvicorn as an asyncio task alongside the simulation loop
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from sowgame.engine.action_validator import success_chance, validate_action
from sowgame.engine.return_calculator import potential_return
from sowgame.models.weekly import WeeklyMoves
from sowgame.network.rest_models import (
    AddMoveRequest,
    AutoSimulationResponse,
    CloseWeekResponse,
    CycleRequest,
    EconomyResponse,
    MovesResponse,
    ReturnRequest,
    ReturnResponse,
    SnapshotResponse,
    SuccessChanceRequest,
    SuccessChanceResponse,
    ValidateActionRequest,
    ValidateActionResponse,
)
from sowgame.util.errors import InvalidCycleError
from sowgame.util.formatting import describe_move, format_percent

if TYPE_CHECKING:
    from sowgame.main import Services

log = logging.getLogger(__name__)

_MOVES_PATH = "/api/games/{game_id}/players/{player_id}/weeks/{week}/moves"


def _economy_body(services: "Services") -> dict[str, Any]:
    cycles = services.cycle_service
    loop = services.simulation_loop
    body = cycles.state.to_dict()
    for market in body["markets"].values():
        market["current_return_label"] = format_percent(market["current_return"])
    body["auto_simulation"] = cycles.auto_simulation
    body["seconds_until_event"] = loop.seconds_until_event if loop is not None else None
    return body


def _moves_body(services: "Services", session: WeeklyMoves) -> dict[str, Any]:
    body = session.to_dict()
    body["success"] = True
    body["descriptions"] = [describe_move(m) for m in session.moves]
    body["actions_remaining"] = services.moves_service.actions_remaining(session)
    return body


async def snapshot_economy(services: "Services", game_id: str, week: int) -> dict[str, Any]:
    """Persist the live cycle and market returns as the economy of a game week."""
    state = services.cycle_service.state
    returns = state.market_status()
    await services.database.save_economy_snapshot(game_id, week, state.current_cycle, returns)
    return {"game_id": game_id, "week": week, "cycle": state.current_cycle, "returns": returns}


def create_app(services: "Services") -> FastAPI:
    """Factory: create and return a configured FastAPI application.

    The ``services`` reference is captured by closure so every endpoint
    can access game logic without global state.
    """
    app = FastAPI(title="Soldiers of Wealth Rules Server", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =================================================================
    # Economy
    # =================================================================

    @app.get("/api/economy", response_model=EconomyResponse)
    async def get_economy() -> dict[str, Any]:
        return _economy_body(services)

    @app.post("/api/economy/cycle", response_model=EconomyResponse)
    async def set_cycle(body: CycleRequest) -> dict[str, Any]:
        try:
            services.cycle_service.set_cycle(body.cycle)
        except InvalidCycleError as exc:
            return {**_economy_body(services), "success": False, "error": str(exc)}
        return _economy_body(services)

    @app.post("/api/economy/random", response_model=EconomyResponse)
    async def random_event() -> dict[str, Any]:
        services.cycle_service.generate_random_event()
        return _economy_body(services)

    @app.post("/api/economy/auto", response_model=AutoSimulationResponse)
    async def toggle_auto() -> dict[str, Any]:
        return {"auto_simulation": services.cycle_service.toggle_auto_simulation()}

    @app.post("/api/returns", response_model=ReturnResponse)
    async def projected_return(body: ReturnRequest) -> dict[str, Any]:
        status = body.market_status
        if status is None:
            status = services.cycle_service.market_status().get(body.market)
            if status is None:
                raise HTTPException(status_code=404, detail=f"Unknown market {body.market!r}")
        return {
            "market": body.market,
            "amount": body.amount,
            "market_status": status,
            "potential_return": potential_return(body.market, body.amount, status),
        }

    # =================================================================
    # Actions & combat
    # =================================================================

    @app.post("/api/actions/validate", response_model=ValidateActionResponse)
    async def validate(body: ValidateActionRequest) -> dict[str, Any]:
        result = validate_action(body.bundle, body.soldiers, services.game_config)
        return result.to_dict()

    @app.post("/api/combat/chance", response_model=SuccessChanceResponse)
    async def combat_chance(body: SuccessChanceRequest) -> dict[str, Any]:
        cap = services.game_config.max_success_chance if services.game_config else 90
        try:
            chance = success_chance(body.attacker_soldiers, body.defender_soldiers,
                                    body.defense, cap)
        except ValueError as exc:
            return {"success": False, "error": str(exc)}
        return {"success": True, "success_chance": chance}

    # =================================================================
    # Weekly moves
    # =================================================================

    @app.get(_MOVES_PATH, response_model=MovesResponse)
    async def get_moves(game_id: str, player_id: str, week: int) -> dict[str, Any]:
        session = await services.moves_service.restore(game_id, player_id, week)
        return _moves_body(services, session)

    @app.post(_MOVES_PATH, response_model=MovesResponse)
    async def add_move(game_id: str, player_id: str, week: int,
                       body: AddMoveRequest) -> dict[str, Any]:
        result = services.moves_service.add_move(game_id, player_id, week,
                                                 body.move, body.soldiers)
        if isinstance(result, str):
            return {"success": False, "error": result, "week": week}
        return _moves_body(services, services.moves_service.get(game_id, player_id, week))

    @app.delete(_MOVES_PATH + "/{index}", response_model=MovesResponse)
    async def remove_move(game_id: str, player_id: str, week: int,
                          index: int) -> dict[str, Any]:
        result = services.moves_service.remove_move(game_id, player_id, week, index)
        if isinstance(result, str):
            return {"success": False, "error": result, "week": week}
        return _moves_body(services, result)

    @app.post(_MOVES_PATH + "/edit", response_model=MovesResponse)
    async def toggle_edit(game_id: str, player_id: str, week: int) -> dict[str, Any]:
        result = services.moves_service.toggle_edit(game_id, player_id, week)
        if isinstance(result, str):
            return {"success": False, "error": result, "week": week}
        return _moves_body(services, result)

    @app.post(_MOVES_PATH + "/submit", response_model=MovesResponse)
    async def submit_moves(game_id: str, player_id: str, week: int) -> dict[str, Any]:
        result = await services.moves_service.submit(game_id, player_id, week)
        if isinstance(result, str):
            return {"success": False, "error": result, "week": week}
        return _moves_body(services, result)

    # =================================================================
    # Game weeks
    # =================================================================

    @app.post("/api/games/{game_id}/weeks/{week}/close", response_model=CloseWeekResponse)
    async def close_week(game_id: str, week: int) -> dict[str, Any]:
        if services.moves_service.is_week_closed(game_id, week):
            return {"success": False, "error": f"Week {week} is already closed"}
        locked = services.moves_service.close_week(game_id, week)
        if services.database is not None:
            await snapshot_economy(services, game_id, week)
        return {"success": True, "locked_sessions": locked}

    @app.post("/api/games/{game_id}/weeks/{week}/economy", response_model=SnapshotResponse)
    async def save_snapshot(game_id: str, week: int) -> dict[str, Any]:
        if services.database is None:
            return {"success": False, "error": "No database configured"}
        return {"success": True, **await snapshot_economy(services, game_id, week)}

    @app.get("/api/games/{game_id}/weeks/{week}/economy", response_model=SnapshotResponse)
    async def get_snapshot(game_id: str, week: int) -> dict[str, Any]:
        if services.database is None:
            return {"success": False, "error": "No database configured"}
        snapshot = await services.database.get_economy_snapshot(game_id, week)
        if snapshot is None:
            raise HTTPException(status_code=404,
                                detail=f"No economy snapshot for {game_id} week {week}")
        return {"success": True, **snapshot}

    return app
