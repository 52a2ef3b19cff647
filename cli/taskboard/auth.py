"""Credential storage for the taskboard CLI.

Stores one access token per server URL in ~/.config/taskboard/auth.json.
"""

import json
import time
from pathlib import Path
from typing import Optional

# Default config directory
CONFIG_DIR = Path.home() / ".config" / "taskboard"
AUTH_FILE = CONFIG_DIR / "auth.json"

# Seconds shaved off the server-reported lifetime
EXPIRY_MARGIN = 30


def _normalise_url(url: str) -> str:
    """Normalise a server URL for use as a storage key."""
    return url.rstrip("/").lower()


def _load_store() -> dict:
    """Load the auth store from disk."""
    if not AUTH_FILE.exists():
        return {}
    try:
        return json.loads(AUTH_FILE.read_text())
    except (json.JSONDecodeError, OSError):
        return {}


def _save_store(store: dict) -> None:
    """Write the auth store to disk."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    AUTH_FILE.write_text(json.dumps(store, indent=2))
    # Restrict permissions to owner only
    try:
        AUTH_FILE.chmod(0o600)
    except OSError:
        pass


def save_tokens(
    server_url: str,
    access_token: str,
    expires_in: int,
    user: Optional[dict] = None,
) -> None:
    """Persist an access token for a server."""
    store = _load_store()
    key = _normalise_url(server_url)
    store[key] = {
        "accessToken": access_token,
        "expiresAt": int(time.time()) + expires_in - EXPIRY_MARGIN,
        "user": user,
    }
    _save_store(store)


def load_credentials(server_url: str) -> Optional[dict]:
    """Load stored credentials for a server. Returns None if not found."""
    store = _load_store()
    key = _normalise_url(server_url)
    return store.get(key)


def clear_credentials(server_url: str) -> bool:
    """Remove stored credentials for a server. Returns True if anything was removed."""
    store = _load_store()
    key = _normalise_url(server_url)
    if key in store:
        del store[key]
        _save_store(store)
        return True
    return False


def get_access_token(server_url: str) -> Optional[str]:
    """Return the stored access token while it is still valid, else None."""
    creds = load_credentials(server_url)
    if not creds:
        return None
    if time.time() < creds.get("expiresAt", 0):
        return creds.get("accessToken")
    return None
