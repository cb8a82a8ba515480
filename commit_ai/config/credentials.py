"""
Plain-text storage for the API credential.
"""

from pathlib import Path
from typing import Optional
from dotenv import dotenv_values
from loguru import logger


CREDENTIAL_KEY = "OPENAI_API_KEY"


class CredentialStore:
    """Reads and writes the single API credential file."""

    def __init__(self, path: Path):
        self.path = path

    def save(self, credential: str) -> None:
        """Write the credential, replacing whatever the file held before."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{CREDENTIAL_KEY}={credential}", encoding="utf-8")
        logger.info(f"Saved API credential to {self.path}")

    def load(self) -> Optional[str]:
        """Return the stored credential, or None if nothing has been saved."""
        if not self.path.exists():
            logger.debug(f"No credential file at {self.path}")
            return None

        value = dotenv_values(self.path).get(CREDENTIAL_KEY)
        return value or None
