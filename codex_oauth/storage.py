"""Credential storage for ChatGPT OAuth"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .models import Credentials


logger = logging.getLogger(__name__)


class CredentialStore:
    """Persists the credential record as a JSON file"""

    def __init__(self, token_file: Union[str, Path]):
        """Initialize credential storage

        Args:
            token_file: Path to the credential file
        """
        self.token_file = Path(token_file)

    def _ensure_directory(self) -> None:
        """Ensure storage directory exists"""
        self.token_file.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Optional[Credentials]:
        """Load credentials from disk

        Returns:
            Parsed credentials, or None when the file is missing or unusable
        """
        if not self.token_file.exists():
            logger.debug(f"No credential file at {self.token_file}")
            return None

        try:
            data = json.loads(self.token_file.read_text(encoding="utf-8"))
            credentials = Credentials.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to read cached credentials from {self.token_file}: {e}")
            return None

        logger.debug(f"Loaded cached credentials from {self.token_file}")
        return credentials

    def save(self, credentials: Credentials) -> None:
        """Write credentials to disk, replacing any previous record

        The record is written to a sibling temporary file first and then
        renamed over the target so a crash never leaves a truncated file.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self._ensure_directory()

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.token_file.name}.", suffix=".tmp", dir=str(self.token_file.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(credentials.to_dict(), f, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.token_file)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved credentials to {self.token_file}")

    def clear(self) -> bool:
        """Delete the credential file

        Returns:
            True if the file is gone afterwards
        """
        try:
            if self.token_file.exists():
                self.token_file.unlink()
                logger.info("Cleared cached credentials")
            return True

        except OSError as e:
            logger.error(f"Failed to clear cached credentials: {e}")
            return False
