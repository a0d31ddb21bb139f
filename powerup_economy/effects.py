"""
Effect Queue - Holds purchased powerup effects until the board executes them
"""
import logging
from typing import Dict

from powerup_economy.schemas import PowerupKind

logger = logging.getLogger(__name__)


class EffectQueue:
    """Tracks powerup effects that were paid for but not yet executed"""

    def __init__(self):
        self.active_effects: Dict[PowerupKind, int] = {}
        self.closed = False

    async def apply(self, kind: PowerupKind) -> bool:
        """Activate an effect; used as the controller's effect callback"""
        kind = PowerupKind(kind)
        if self.closed:
            logger.error(f"Cannot activate {kind.value}: the board has gone away")
            return False
        self.active_effects[kind] = self.active_effects.get(kind, 0) + 1
        return True

    def has_active_effect(self, kind: PowerupKind) -> bool:
        """Check if a powerup effect is currently active"""
        return PowerupKind(kind) in self.active_effects

    def consume_effect(self, kind: PowerupKind) -> bool:
        """Consume one pending instance of an effect"""
        kind = PowerupKind(kind)
        if kind not in self.active_effects:
            return False
        self.active_effects[kind] -= 1
        if self.active_effects[kind] <= 0:
            del self.active_effects[kind]
        return True

    def get_effect_count(self, kind: PowerupKind) -> int:
        """Get pending count for an effect"""
        return self.active_effects.get(PowerupKind(kind), 0)

    def close(self):
        """Stop accepting effects; anything still pending is dropped"""
        self.closed = True
        self.active_effects.clear()
