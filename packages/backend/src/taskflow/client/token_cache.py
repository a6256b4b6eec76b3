"""On-disk token cache for the CLI and Python clients.

Learn: The token is the user's whole credential, so the file is created
with 0600 permissions. The cache is not authoritative: the server
re-verifies the token on every request, and the cache is cleared as
soon as the server answers 401.
"""

import os
from pathlib import Path
from typing import Optional, Union

DEFAULT_TOKEN_FILE = Path.home() / ".config" / "taskflow" / "token"


def default_token_path() -> Path:
    """TASKFLOW_TOKEN_FILE if set, else ~/.config/taskflow/token."""
    override = os.environ.get("TASKFLOW_TOKEN_FILE")
    return Path(override).expanduser() if override else DEFAULT_TOKEN_FILE


class TokenCache:
    """Durable storage for one bearer token."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else default_token_path()

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(token)
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
