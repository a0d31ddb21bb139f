"""
SQLAlchemy models for the powerup economy
"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from powerup_economy.database import Base


class Player(Base):
    """A player and the coin balance the ledger owns"""
    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("coins >= 0", name="ck_players_coins_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    coins = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    transactions = relationship("CoinTransaction", back_populates="player")


class CoinTransaction(Base):
    """One committed deduction from a player's balance"""
    __tablename__ = "coin_transactions"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # Negative for spends
    memo = Column(String(100), default="")  # e.g. "powerup:bomb"
    created_at = Column(DateTime, default=func.now())

    # Relationships
    player = relationship("Player", back_populates="transactions")
