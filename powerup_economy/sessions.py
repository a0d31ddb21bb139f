"""
UI session registry - one controller and one effect queue per open game screen
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from sqlalchemy.orm import sessionmaker

from powerup_economy.controller import PowerupController
from powerup_economy.effects import EffectQueue
from powerup_economy.ledger import DatabaseLedger

logger = logging.getLogger(__name__)


@dataclass
class UISession:
    session_id: str
    player_id: int
    controller: PowerupController
    effects: EffectQueue = field(repr=False)

    @property
    def ledger(self) -> DatabaseLedger:
        return self.controller.ledger


class SessionRegistry:
    """In-memory store of open UI sessions"""

    def __init__(self):
        self.sessions: Dict[str, UISession] = {}

    def open(self, player_id: int, session_factory: sessionmaker) -> UISession:
        effects = EffectQueue()
        controller = PowerupController(
            ledger=DatabaseLedger(session_factory, player_id),
            apply_effect=effects.apply,
        )
        session = UISession(
            session_id=uuid.uuid4().hex,
            player_id=player_id,
            controller=controller,
            effects=effects,
        )
        self.sessions[session.session_id] = session
        logger.info(f"Opened session {session.session_id} for player {player_id}")
        return session

    def get(self, session_id: str) -> Optional[UISession]:
        return self.sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self.sessions.pop(session_id, None)
        if session is None:
            return False
        session.controller.discard_confirmation()
        session.effects.close()
        logger.info(f"Closed session {session_id}")
        return True

    def clear(self):
        for session_id in list(self.sessions):
            self.close(session_id)


# Global instance
session_registry = SessionRegistry()
