"""Local persistence of the session token.

The token lives alone in one file. Writes go through a temp file that is
renamed over the target, so a concurrent reader sees either the old or
the new value, never a partial one.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from hashtrack.exceptions import StorageError

logger = logging.getLogger(__name__)


class TokenStore:
    """Reads and writes the single session token for this installation."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        """Return the stored token, or None when logged out.

        Missing or unreadable storage is treated as "no token" so a first
        run behaves like a logged-out one.
        """
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug(f"Token file {self._path} unreadable: {e}")
            return None
        return token or None

    def save(self, token: str | None) -> None:
        """Persist the token, or clear it when given None."""
        if token is None:
            self._clear()
            return

        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(token)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, stat.S_IRUSR | stat.S_IWUSR)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write token to {self._path}: {e}") from e
        logger.debug(f"Token saved to {self._path}")

    def _clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Could not remove token at {self._path}: {e}") from e
        logger.debug(f"Token removed from {self._path}")
