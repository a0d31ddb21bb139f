"""
Database configuration and session management for the powerup economy
"""
import logging
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

logger = logging.getLogger(__name__)

# Check if DATABASE_URL is provided (production deployment)
DATABASE_URL = os.getenv("DATABASE_URL")

if DATABASE_URL:
    # Fix for Heroku/Railway postgres URL format
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)
    logger.info(f"Using production database: {DATABASE_URL.split('@')[0]}...")
else:
    DATABASE_URL = "sqlite:///./powerups.db"
    logger.info("Using local database: ./powerups.db")

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """Dependency returning the factory ledgers open their own sessions with"""
    return SessionLocal


def create_tables(bind=None):
    """Create all database tables"""
    # Import models so they register on Base.metadata
    from powerup_economy import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
