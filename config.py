"""
Configuration for powerup economy clients - API Endpoint Management
Supports both local development and remote production deployment
"""
import json
import logging
import os
from pathlib import Path

import requests

logger = logging.getLogger(__name__)


class Config:
    """Central configuration for talking to the powerup economy API"""

    # API Configuration
    API_MODE = os.getenv("POWERUP_API_MODE", "local")  # local or remote

    # API Endpoints
    LOCAL_API = "http://127.0.0.1:8000"
    REMOTE_API = os.getenv("POWERUP_API_URL", "https://powerup-economy.example.com")

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")  # development, production

    # Connection Settings
    API_TIMEOUT = 10  # seconds

    CONFIG_PATH = Path(os.getenv("POWERUP_CONFIG_PATH", Path(__file__).parent / "api_config.json"))

    @classmethod
    def get_api_base(cls):
        """Get the appropriate API base URL based on mode"""
        if cls.API_MODE == "remote":
            return cls.REMOTE_API
        return cls.LOCAL_API

    @classmethod
    def is_production(cls):
        """Check if running in production mode"""
        return cls.ENVIRONMENT == "production"

    @classmethod
    def is_remote_mode(cls):
        """Check if using remote API"""
        return cls.API_MODE == "remote"

    @classmethod
    def set_mode(cls, mode: str):
        """Set API mode (local or remote)"""
        if mode not in ["local", "remote"]:
            raise ValueError("Mode must be 'local' or 'remote'")
        cls.API_MODE = mode
        cls._save_config()

    @classmethod
    def _save_config(cls):
        """Save configuration to file"""
        config_data = {
            "api_mode": cls.API_MODE,
            "remote_api": cls.REMOTE_API
        }
        try:
            with open(cls.CONFIG_PATH, 'w') as f:
                json.dump(config_data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config: {e}")

    @classmethod
    def _load_config(cls):
        """Load configuration from file"""
        try:
            if cls.CONFIG_PATH.exists():
                with open(cls.CONFIG_PATH, 'r') as f:
                    config_data = json.load(f)
                cls.API_MODE = config_data.get("api_mode", cls.API_MODE)
                if "remote_api" in config_data:
                    cls.REMOTE_API = config_data["remote_api"]
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load config: {e}")

    @classmethod
    def test_connection(cls, api_url: str = None) -> bool:
        """Test connection to API endpoint"""
        url = api_url or cls.get_api_base()
        try:
            response = requests.get(f"{url}/health", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False


# Load saved configuration on import
Config._load_config()
