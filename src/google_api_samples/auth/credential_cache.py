"""
Local cache of OAuth2 refresh tokens.

Each application stores one refresh token per storage name in
``<storage directory>/<storage name>.auth``. The file holds two lines, the
granted scopes (space separated) and the refresh token, encrypted with a key
derived from an application-chosen passphrase salted with the application
name and the OS user name.

This only keeps the token away from casual inspection by other users. Anyone
who can run code as the same user, or who reads the passphrase out of the
program, can decrypt the file. It is not a secret store.
"""

import base64
import getpass
import hashlib
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..exceptions import ValidationError
from ..utils.log_sanitizer import sanitize_for_logging

logger = logging.getLogger(__name__)

DEFAULT_APPLICATION_NAME = "Google.Apis.Samples"
AUTH_FILE_EXTENSION = ".auth"
KDF_ITERATIONS = 200_000


def default_storage_directory(application_name: str = DEFAULT_APPLICATION_NAME) -> str:
    """
    Returns the per-user application data folder for cached credentials.

    ``GOOGLE_SAMPLES_AUTH_DIR`` overrides the location. Otherwise %APPDATA% is
    used on Windows and $XDG_CONFIG_HOME (default ~/.config) elsewhere.
    """
    override = os.getenv("GOOGLE_SAMPLES_AUTH_DIR")
    if override:
        return override

    if sys.platform == "win32":
        base = os.getenv("APPDATA") or os.path.expanduser("~")
    else:
        base = os.getenv("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, application_name)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


def _dedupe(scopes: Iterable[str]) -> List[str]:
    seen = []
    for scope in scopes:
        if scope and scope not in seen:
            seen.append(scope)
    return seen


@dataclass
class StoredCredential:
    """
    A cached refresh token and the scopes it was granted for.
    Args:
        scopes: Granted OAuth scopes, order preserved, duplicates dropped.
        refresh_token: The long-lived refresh token.
    """
    scopes: List[str] = field(default_factory=list)
    refresh_token: str = ""

    def __post_init__(self):
        self.scopes = _dedupe(self.scopes)

    def covers(self, required_scopes: Iterable[str]) -> bool:
        return set(required_scopes) <= set(self.scopes)

    def add_scopes(self, scopes: Iterable[str]) -> None:
        self.scopes = _dedupe(list(self.scopes) + list(scopes))

    def to_text(self) -> str:
        return f"{' '.join(self.scopes)}\n{self.refresh_token}\n"

    @staticmethod
    def from_text(text: str) -> "StoredCredential":
        """
        Parses the decrypted file contents.
        Raises:
            ValueError: If the refresh token line is missing or empty.
        """
        lines = text.splitlines()
        if len(lines) < 2 or not lines[1].strip():
            raise ValueError("Credential file does not contain a refresh token")
        return StoredCredential(scopes=lines[0].split(), refresh_token=lines[1].strip())


class CredentialCache:
    """
    Stores and retrieves per-application refresh tokens on local disk.

    Usage:
        cache = CredentialCache()
        stored = cache.get("google.samples.adsense", key, required_scopes=[scope])
        if stored is None:
            ...  # run the authorization flow
            cache.set("google.samples.adsense", key, StoredCredential([scope], token))
    """

    def __init__(self, directory: Optional[str] = None, application_name: str = DEFAULT_APPLICATION_NAME):
        self._application_name = application_name
        self._directory = directory or default_storage_directory(application_name)

    @property
    def directory(self) -> str:
        return self._directory

    def path_for(self, storage_name: str) -> str:
        """
        Returns the file path used for a storage name.
        Raises:
            ValidationError: If the name is empty or contains path separators.
        """
        if not storage_name or os.sep in storage_name or "/" in storage_name or storage_name in (".", ".."):
            raise ValidationError(f"Invalid storage name: {storage_name!r}")
        return os.path.join(self._directory, storage_name + AUTH_FILE_EXTENSION)

    def _fernet(self, key: str) -> Fernet:
        if not key:
            raise ValidationError("An encryption key is required")
        salt = hashlib.sha256(f"{self._application_name}\0{_current_user()}".encode("utf-8")).digest()
        kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=KDF_ITERATIONS)
        return Fernet(base64.urlsafe_b64encode(kdf.derive(key.encode("utf-8"))))

    def get(self, storage_name: str, key: str, required_scopes: Iterable[str] = ()) -> Optional[StoredCredential]:
        """
        Returns the cached credential for a storage name.

        Args:
            storage_name: Application-chosen name of the cache entry.
            key: Passphrase the entry was encrypted with.
            required_scopes: Scopes the cached token must have been granted.

        Returns:
            The stored credential, or None when the file is missing, cannot be
            read or decrypted, or does not cover every required scope.
        """
        path = self.path_for(storage_name)
        if not os.path.exists(path):
            logger.info("No cached credential for %s", storage_name)
            return None

        try:
            with open(path, "rb") as f:
                encrypted = f.read()
            credential = StoredCredential.from_text(self._fernet(key).decrypt(encrypted).decode("utf-8"))
        except InvalidToken:
            logger.warning("Cached credential %s could not be decrypted, ignoring it", path)
            return None
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Failed to read cached credential %s: %s", path, e)
            return None

        required_scopes = list(required_scopes)
        if not credential.covers(required_scopes):
            logger.info("Cached credential for %s does not cover every required scope", storage_name)
            return None

        sanitized = sanitize_for_logging(refresh_token=credential.refresh_token, scopes=credential.scopes)
        logger.info(
            "Loaded cached credential for %s (refresh_token=%s, scopes=%s)",
            storage_name, sanitized['refresh_token'], sanitized['scopes']
        )
        return credential

    def set(self, storage_name: str, key: str, credential: StoredCredential,
            scopes_to_add: Iterable[str] = ()) -> str:
        """
        Encrypts and writes a credential, replacing any previous entry.

        Args:
            storage_name: Application-chosen name of the cache entry.
            key: Passphrase to encrypt with.
            credential: The credential to store.
            scopes_to_add: Granted scopes to record if the credential lacks them.

        Returns:
            Path of the written file.
        """
        if not credential.refresh_token:
            raise ValidationError("Cannot cache a credential without a refresh token")

        credential.add_scopes(scopes_to_add)
        path = self.path_for(storage_name)
        token = self._fernet(key).encrypt(credential.to_text().encode("utf-8"))

        os.makedirs(os.path.dirname(path), exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(token)

        logger.info("Cached credential for %s at %s", storage_name, path)
        return path

    def delete(self, storage_name: str) -> bool:
        """
        Removes a cached credential.
        Returns:
            True if a file was removed.
        """
        path = self.path_for(storage_name)
        if not os.path.exists(path):
            return False
        os.remove(path)
        logger.info("Removed cached credential %s", path)
        return True
