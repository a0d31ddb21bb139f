"""
API Client for the powerup economy - Centralized API Communication
Automatically handles local/remote endpoint switching
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from config import Config

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the API answers with an error status"""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class APIClient:
    """Centralized API client for players, sessions and powerup purchases"""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url or Config.get_api_base()
        self.timeout = Config.API_TIMEOUT

    def _handle(self, response: requests.Response):
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            raise APIError(response.status_code, detail)
        return response.json()

    def get(self, endpoint: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Make GET request to API"""
        url = f"{self.base_url}{endpoint}"
        timeout = kwargs.pop('timeout', self.timeout)
        return requests.get(url, params=params, timeout=timeout, **kwargs)

    def post(self, endpoint: str, json: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Make POST request to API"""
        url = f"{self.base_url}{endpoint}"
        timeout = kwargs.pop('timeout', self.timeout)
        return requests.post(url, json=json, timeout=timeout, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> requests.Response:
        """Make DELETE request to API"""
        url = f"{self.base_url}{endpoint}"
        timeout = kwargs.pop('timeout', self.timeout)
        return requests.delete(url, timeout=timeout, **kwargs)

    def health(self) -> bool:
        """Test API connection"""
        try:
            return self.get("/health", timeout=3).status_code == 200
        except requests.RequestException:
            return False

    def create_player(self, username: str) -> Dict[str, Any]:
        return self._handle(self.post("/players", json={"username": username}))

    def get_balance(self, player_id: int) -> int:
        return self._handle(self.get(f"/players/{player_id}/balance"))["coins"]

    def get_catalog(self) -> List[Dict[str, Any]]:
        return self._handle(self.get("/powerups/catalog"))

    def open_session(self, player_id: int) -> str:
        return self._handle(self.post("/sessions", json={"player_id": player_id}))["session_id"]

    def close_session(self, session_id: str) -> Dict[str, Any]:
        return self._handle(self.delete(f"/sessions/{session_id}"))

    def get_powerup_bar(self, session_id: str, phase: str, ui_disabled: bool = False) -> Dict[str, Any]:
        params = {"phase": phase, "ui_disabled": str(ui_disabled).lower()}
        return self._handle(self.get(f"/sessions/{session_id}/powerups", params=params))

    def request_powerup(self, session_id: str, kind: str, phase: str, ui_disabled: bool = False) -> Dict[str, Any]:
        """Ask to use a powerup; the answer's status says what happens next"""
        body = {"phase": phase, "ui_disabled": ui_disabled}
        return self._handle(self.post(f"/sessions/{session_id}/powerups/{kind}/request", json=body))

    def answer_confirmation(self, session_id: str, confirmation_id: str, confirmed: bool) -> Dict[str, Any]:
        body = {"confirmed": confirmed}
        return self._handle(self.post(f"/sessions/{session_id}/confirmations/{confirmation_id}", json=body))

    def get_pending_effects(self, session_id: str) -> List[Dict[str, Any]]:
        return self._handle(self.get(f"/sessions/{session_id}/effects"))

    def consume_effect(self, session_id: str, kind: str) -> Dict[str, Any]:
        return self._handle(self.post(f"/sessions/{session_id}/effects/{kind}/consume"))

    def switch_mode(self, mode: str):
        """Switch between local and remote mode"""
        Config.set_mode(mode)
        self.base_url = Config.get_api_base()
        logger.info(f"Switched to {mode} mode: {self.base_url}")


def check_api_connection() -> bool:
    """Test API connection"""
    return APIClient().health()
