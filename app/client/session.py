"""
Local session storage for the API client.

Keeps the bearer token and the logged-in user in a small JSON file so a
session survives between runs (the browser client keeps the same data in
localStorage).
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".jobportal" / "session.json"


class SessionStore:
    """JSON file holding {"token": ..., "user": {...}}."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_SESSION_PATH

    def load(self) -> dict:
        """Stored session, or an empty dict when there is none (or it is unreadable)."""
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

    def save(self, token: str, user: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    @property
    def token(self) -> Optional[str]:
        return self.load().get("token")

    @property
    def user(self) -> Optional[dict]:
        return self.load().get("user")
