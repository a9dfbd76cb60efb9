"""Admin session gate.

A single shared admin password unlocks a session token with an absolute
expiry. Session state lives in its own storage slot next to the overlay.
The catalog layer never consults this; callers that mutate data check
:meth:`AuthGate.is_authenticated` first.
"""

from __future__ import annotations

import hmac
import json
import secrets
from datetime import timedelta
from typing import Optional

from agentnav.core.config import DEFAULT_PASSWORD
from agentnav.core.logging import get_logger
from agentnav.storage.local import LocalStorage
from agentnav.utils.timestamps import Clock, epoch_millis, utc_now

logger = get_logger(__name__)


class AuthGate:
    """Password login with a locally stored, expiring session token."""

    STORAGE_KEY = "admin_auth_state"

    def __init__(
        self,
        storage: LocalStorage,
        password: str = DEFAULT_PASSWORD,
        expiry: timedelta = timedelta(hours=24),
        clock: Optional[Clock] = None,
    ) -> None:
        self._storage = storage
        self._password = password
        self._expiry = expiry
        self._clock = clock or utc_now

    def login(self, secret: str) -> bool:
        """Start a session if ``secret`` matches the admin password."""
        if not hmac.compare_digest(secret.encode("utf-8"), self._password.encode("utf-8")):
            logger.warning("login_failed")
            return False

        expires_at = epoch_millis(self._clock() + self._expiry)
        state = {
            "isAuthenticated": True,
            "token": secrets.token_urlsafe(32),
            "expiresAt": expires_at,
        }
        self._storage.set_item(self.STORAGE_KEY, json.dumps(state))
        logger.info("login_succeeded", expires_at=expires_at)
        return True

    def logout(self) -> None:
        self._storage.remove_item(self.STORAGE_KEY)

    def get_state(self) -> Optional[dict]:
        """Return the stored session state, or None if absent or unreadable."""
        try:
            raw = self._storage.get_item(self.STORAGE_KEY)
            if raw is None:
                return None
            state = json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning("auth_state_unreadable", error=str(exc))
            return None
        return state if isinstance(state, dict) else None

    def is_authenticated(self) -> bool:
        state = self.get_state()
        if not state or state.get("isAuthenticated") is not True or not state.get("token"):
            return False

        expires_at = state.get("expiresAt")
        if isinstance(expires_at, (int, float)) and epoch_millis(self._clock()) > expires_at:
            logger.info("session_expired")
            self.logout()
            return False
        return True

    def is_password_configured(self) -> bool:
        """False while the development default password is still in use."""
        return self._password != DEFAULT_PASSWORD
