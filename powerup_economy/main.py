"""
FastAPI main application for the powerup economy backend
"""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from powerup_economy.database import create_tables, get_db
from powerup_economy.models import Player
from powerup_economy.powerups_api import router as powerups_router
from powerup_economy.schemas import BalanceResponse, PlayerCreate, PlayerResponse
from powerup_economy.sessions import session_registry

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
STARTING_COINS = int(os.getenv("STARTING_COINS", "1000"))

# Setup logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield
    session_registry.clear()


# Create FastAPI app
app = FastAPI(
    title="Powerup Economy API",
    description="Coin balance and powerup purchases for the matching game",
    version="1.0.0",
    lifespan=lifespan
)


# Add request logging middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.debug(f"{request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


# CORS middleware - Production ready with environment-based configuration
allowed_origins = [
    "http://localhost:3000",  # Local development
    "http://127.0.0.1:8000",  # Local API
    os.getenv("FRONTEND_URL", "*")  # Production frontend URL
]

# If in production, only allow specific origins
if os.getenv("ENVIRONMENT") == "production":
    allowed_origins = [origin for origin in allowed_origins if origin != "*"]
else:
    allowed_origins = ["*"]  # Allow all in development

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include powerup router
app.include_router(powerups_router)


@app.get("/health")
async def health_check():
    """Fast health check endpoint"""
    return {"status": "healthy", "open_sessions": len(session_registry.sessions)}


@app.post("/players")
async def create_player(player_data: PlayerCreate, db: Session = Depends(get_db)):
    """Create a player with the starting coin balance"""
    try:
        existing = db.query(Player).filter(Player.username == player_data.username).first()
        if existing:
            raise HTTPException(status_code=400, detail="Username already registered")

        player = Player(username=player_data.username, coins=STARTING_COINS)
        db.add(player)
        db.commit()
        db.refresh(player)

        logger.info(f"Created player {player.username} with {player.coins} coins")
        return PlayerResponse.model_validate(player)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create player: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create player: {str(e)}")


@app.get("/players/{player_id}/balance")
async def get_player_balance(player_id: int, db: Session = Depends(get_db)):
    """Get a player's coin balance"""
    player = db.query(Player).filter(Player.id == player_id).first()
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return BalanceResponse(player_id=player.id, coins=player.coins)


if __name__ == "__main__":
    uvicorn.run("powerup_economy.main:app", host="127.0.0.1", port=8000, reload=True)
