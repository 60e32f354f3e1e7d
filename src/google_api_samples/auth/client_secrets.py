"""
Client credentials (API key, OAuth client ID and secret) for the samples.

Credentials live in a ``client.dat`` file of ``Key=Value`` lines inside the
per-user application folder. When the file is missing or incomplete the user
is prompted once and the answers are saved for later runs.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..exceptions import InvalidCredentialsError
from .credential_cache import default_storage_directory

logger = logging.getLogger(__name__)

CLIENT_CREDENTIALS_FILE_NAME = "client.dat"
FILE_KEY_API_KEY = "ApiKey"
FILE_KEY_CLIENT_ID = "ClientId"
FILE_KEY_CLIENT_SECRET = "ClientSecret"

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"

PROMPTS = {
    FILE_KEY_API_KEY: "API key as shown in the Simple API Access section: ",
    FILE_KEY_CLIENT_ID: "Client ID as shown in the 'Client ID for installed applications' section: ",
    FILE_KEY_CLIENT_SECRET: "Client secret as shown in the 'Client ID for installed applications' section: ",
}

Prompt = Callable[[str], str]


@dataclass
class ClientSecrets:
    """
    Credentials identifying this application to Google.
    Args:
        api_key: Simple API access key.
        client_id: OAuth2 client ID of an installed application.
        client_secret: OAuth2 client secret of an installed application.
    """
    api_key: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def is_full(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def to_client_config(self) -> Dict[str, Dict]:
        """
        Builds the installed-application client config used by InstalledAppFlow.
        Raises:
            InvalidCredentialsError: If the client ID or secret is missing.
        """
        if not self.is_full:
            raise InvalidCredentialsError("Client ID and client secret are required for OAuth2")
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": ["http://localhost"],
            }
        }

    @staticmethod
    def from_json_file(path: str) -> "ClientSecrets":
        """
        Loads a client secrets JSON file downloaded from the Cloud Console.
        Handles both installed app and web app formats.
        """
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise InvalidCredentialsError(f"Failed to load client secrets from {path}: {e}")

        if "installed" in data:
            client_info = data["installed"]
        elif "web" in data:
            client_info = data["web"]
        else:
            raise InvalidCredentialsError("Invalid client secrets format - missing 'installed' or 'web' section")

        return ClientSecrets(
            client_id=client_info.get("client_id"),
            client_secret=client_info.get("client_secret"),
        )


class ClientSecretsStore:
    """Reads, prompts for and persists ``client.dat``."""

    def __init__(self, path: Optional[str] = None):
        self._path = path or os.path.join(default_storage_directory(), CLIENT_CREDENTIALS_FILE_NAME)

    @property
    def path(self) -> str:
        return self._path

    def exists(self) -> bool:
        return os.path.exists(self._path)

    def load(self) -> Dict[str, str]:
        """
        Parses the Key=Value lines of the credentials file.
        Lines without a key or value are skipped; missing file yields {}.
        """
        values = {}
        if not self.exists():
            return values

        with open(self._path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.rstrip("\r\n")
                key, sep, value = line.partition("=")
                if sep and key and value:
                    values[key] = value
        return values

    def _save(self, values: Dict[str, str]) -> None:
        os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for key, value in values.items():
                f.write(f"{key}={value}\n")
        logger.info("Saved client credentials to %s", self._path)

    def _ask(self, keys, prompt: Optional[Prompt]) -> Dict[str, str]:
        if prompt is None:
            raise InvalidCredentialsError(
                f"Client credentials missing from {self._path} and prompting is disabled"
            )
        answers = {}
        for key in keys:
            answer = prompt(PROMPTS[key]).strip()
            if not answer:
                raise InvalidCredentialsError(f"No value entered for {key}")
            answers[key] = answer
        return answers

    def ensure_simple(self, prompt: Optional[Prompt] = input) -> ClientSecrets:
        """
        Returns the stored API key, prompting for it when missing.
        Args:
            prompt: Callable used to ask the user; None disables prompting.
        """
        values = self.load()
        if FILE_KEY_API_KEY not in values:
            values = self._ask([FILE_KEY_API_KEY], prompt)
            self._save(values)
        return ClientSecrets(api_key=values[FILE_KEY_API_KEY])

    def ensure_full(self, prompt: Optional[Prompt] = input) -> ClientSecrets:
        """
        Returns the stored API key, client ID and secret, prompting for all
        three when any is missing.
        Args:
            prompt: Callable used to ask the user; None disables prompting.
        """
        keys = [FILE_KEY_API_KEY, FILE_KEY_CLIENT_ID, FILE_KEY_CLIENT_SECRET]
        values = self.load()
        if any(key not in values for key in keys):
            values = self._ask(keys, prompt)
            self._save(values)
        return ClientSecrets(
            api_key=values[FILE_KEY_API_KEY],
            client_id=values[FILE_KEY_CLIENT_ID],
            client_secret=values[FILE_KEY_CLIENT_SECRET],
        )

    def clear(self) -> bool:
        """Deletes the credentials file. Returns True if one existed."""
        if not self.exists():
            return False
        os.remove(self._path)
        logger.info("Removed client credentials %s", self._path)
        return True
