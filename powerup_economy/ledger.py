"""
Coin ledgers - the sole authority on a player's balance

A ledger deducts atomically: either the whole amount leaves the balance or
nothing does. Balances never go negative and are never clamped.
"""
import logging
from typing import Protocol

from sqlalchemy import update
from sqlalchemy.orm import sessionmaker

from powerup_economy.models import CoinTransaction, Player

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    async def spend(self, amount: int, memo: str = "") -> bool:
        ...

    async def balance(self) -> int:
        ...


class PlayerNotFoundError(LookupError):
    """Raised when a ledger is bound to a player that does not exist"""


def _check_amount(amount: int):
    if amount < 0:
        raise ValueError("Amount must be non-negative")


class DatabaseLedger:
    """Ledger backed by the players table

    The deduction is a single conditional UPDATE, so two concurrent spends
    can never take the same coins twice.

    The methods are async to fit the Ledger protocol but run blocking
    SQLAlchemy calls on the event loop, as the API endpoints do. Purchases
    stay serialized by the controller's in-flight check-and-set, which has
    no await between check and set; nothing here depends on the I/O yielding.
    """

    def __init__(self, session_factory: sessionmaker, player_id: int):
        self.session_factory = session_factory
        self.player_id = player_id

    async def spend(self, amount: int, memo: str = "") -> bool:
        _check_amount(amount)
        db = self.session_factory()
        try:
            result = db.execute(
                update(Player)
                .where(Player.id == self.player_id, Player.coins >= amount)
                .values(coins=Player.coins - amount)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                db.rollback()
                if db.get(Player, self.player_id) is None:
                    raise PlayerNotFoundError(f"Player {self.player_id} not found")
                logger.warning(f"Refused spend of {amount} coins for player {self.player_id}")
                return False

            db.add(CoinTransaction(player_id=self.player_id, amount=-amount, memo=memo))
            db.commit()
            logger.info(f"Deducted {amount} coins from player {self.player_id} ({memo})")
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def balance(self) -> int:
        db = self.session_factory()
        try:
            player = db.get(Player, self.player_id)
            if player is None:
                raise PlayerNotFoundError(f"Player {self.player_id} not found")
            return player.coins
        finally:
            db.close()
