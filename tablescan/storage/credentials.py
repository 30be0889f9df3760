"""
Persistent storage for the Gemini API key.

The key lives in a dotenv-format file so it survives between sessions and
can be inspected or edited by hand. Validity is never checked here; a bad
key is discovered when an extraction call fails and the controller clears it.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values, set_key, unset_key

from tablescan.config import StorageConfig, get_config

logger = logging.getLogger(__name__)


class CredentialStore:
    """Loads, saves and clears the single stored API key."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        key_name: Optional[str] = None,
        config: Optional[StorageConfig] = None,
    ):
        config = config or get_config().storage
        self.path = Path(path) if path else config.credentials_file
        self.key_name = key_name or config.credential_key

    def load(self) -> Optional[str]:
        """Return the stored key, or None when nothing is stored."""
        if not self.path.exists():
            return None
        value = dotenv_values(self.path).get(self.key_name)
        return value or None

    def save(self, credential: str) -> None:
        """Persist a key, replacing any previous one."""
        credential = (credential or "").strip()
        if not credential:
            raise ValueError("Cannot store an empty API key")

        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(mode=0o600)

        set_key(str(self.path), self.key_name, credential, quote_mode="always")
        logger.info(f"Stored API key in {self.path}")

    def clear(self) -> None:
        """Forget the stored key."""
        if not self.path.exists():
            return
        if self.key_name not in dotenv_values(self.path):
            return
        unset_key(str(self.path), self.key_name)
        logger.info(f"Removed API key from {self.path}")

    def __repr__(self) -> str:
        return f"CredentialStore(path={os.fspath(self.path)!r})"
