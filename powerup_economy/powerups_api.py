"""
Powerup API for the matching game
Opens UI sessions and runs powerup requests and confirmations through their controllers
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from powerup_economy.catalog import all_definitions
from powerup_economy.database import get_db, get_session_factory
from powerup_economy.ledger import PlayerNotFoundError
from powerup_economy.models import Player
from powerup_economy.schemas import (
    ActiveEffectResponse, ConfirmationBody, GamePhase, PowerupBarResponse,
    PowerupButtonResponse, PowerupDefinitionResponse, PowerupKind,
    PowerupRequestBody, SessionCreate, SessionResponse,
)
from powerup_economy.sessions import SessionRegistry, UISession, session_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["powerups"])


def get_session_registry() -> SessionRegistry:
    return session_registry


def get_ui_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> UISession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _definition_fields(definition):
    return {
        "kind": definition.kind,
        "name": definition.display_name,
        "price": definition.price,
        "description": definition.effect_description,
        "emoji": definition.emoji,
    }


@router.get("/powerups/catalog")
async def get_catalog():
    """Get every powerup with its price"""
    return [PowerupDefinitionResponse(**_definition_fields(d)) for d in all_definitions()]


@router.post("/sessions")
async def open_session(
    session_data: SessionCreate,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
    registry: SessionRegistry = Depends(get_session_registry)
):
    """Open a UI session for a player"""
    player = db.query(Player).filter(Player.id == session_data.player_id).first()
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    session = registry.open(player.id, session_factory)
    return SessionResponse(session_id=session.session_id, player_id=player.id, in_flight=False)


@router.get("/sessions/{session_id}")
async def get_session(session: UISession = Depends(get_ui_session)):
    """Get a UI session"""
    return SessionResponse(
        session_id=session.session_id,
        player_id=session.player_id,
        in_flight=session.controller.in_flight
    )


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    """Close a UI session, dropping unanswered confirmations and pending effects"""
    if not registry.close(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session closed", "success": True}


@router.get("/sessions/{session_id}/powerups")
async def get_powerup_bar(
    phase: GamePhase,
    ui_disabled: bool = False,
    session: UISession = Depends(get_ui_session)
):
    """Get the powerup bar with a button state per powerup"""
    try:
        balance = await session.ledger.balance()
        buttons = [
            PowerupButtonResponse(
                **_definition_fields(d),
                state=session.controller.button_state(d.kind, phase, balance, ui_disabled)
            )
            for d in all_definitions()
        ]
        return PowerupBarResponse(balance=balance, powerups=buttons)

    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to build powerup bar: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get powerups: {str(e)}")


@router.post("/sessions/{session_id}/powerups/{kind}/request")
async def request_powerup(
    kind: PowerupKind,
    request_data: PowerupRequestBody,
    session: UISession = Depends(get_ui_session)
):
    """Ask to use a powerup; answers with the gate outcome"""
    try:
        balance = await session.ledger.balance()
        return session.controller.request_powerup(kind, request_data.phase, balance, request_data.ui_disabled)

    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to request powerup {kind.value}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to request powerup: {str(e)}")


@router.post("/sessions/{session_id}/confirmations/{confirmation_id}")
async def resolve_confirmation(
    confirmation_id: str,
    confirmation: ConfirmationBody,
    session: UISession = Depends(get_ui_session)
):
    """Answer a confirmation; a confirmed purchase spends coins and queues the effect"""
    try:
        return await session.controller.resolve_confirmation(confirmation_id, confirmation.confirmed)

    except PlayerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to resolve confirmation {confirmation_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to purchase powerup: {str(e)}")


@router.get("/sessions/{session_id}/effects")
async def get_pending_effects(session: UISession = Depends(get_ui_session)):
    """Get effects the board still has to execute"""
    return [
        ActiveEffectResponse(kind=kind, count=count)
        for kind, count in session.effects.active_effects.items()
    ]


@router.post("/sessions/{session_id}/effects/{kind}/consume")
async def consume_effect(kind: PowerupKind, session: UISession = Depends(get_ui_session)):
    """Mark one pending effect as executed by the board"""
    if not session.effects.consume_effect(kind):
        raise HTTPException(status_code=404, detail="No pending effect of this kind")
    return {
        "message": "Effect consumed",
        "kind": kind.value,
        "remaining": session.effects.get_effect_count(kind)
    }
