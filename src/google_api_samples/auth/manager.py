"""
Authentication manager for the Google API samples.

Ties together the client secrets, the encrypted refresh-token cache and the
OAuth2 installed-application flow, and builds sync (googleapiclient) and
async (aiogoogle) service objects from the resulting credentials.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Google Auth imports
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

# Async imports
from aiogoogle import Aiogoogle
from aiogoogle.auth.creds import ClientCreds, UserCreds

from ..exceptions import AuthenticationError, ScopeError
from ..utils.log_sanitizer import sanitize_for_logging
from .client_secrets import ClientSecrets, TOKEN_URI
from .credential_cache import CredentialCache, StoredCredential

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_NAME = "google.samples.python"
# Obscures the cache file only; see credential_cache for what this does not protect against
DEFAULT_STORAGE_KEY = "S7Uf8AsapUWrac798uga5U8e5azePhAf"
DEFAULT_FLOW_PORT = 8080


class AuthManager:
    """
    Authentication manager for one application and one set of scopes.

    Handles the cached refresh token, the interactive OAuth2 flow when no
    usable token exists, and builds service objects for both sync and async
    Google API clients.
    """

    def __init__(
            self,
            client_secrets: ClientSecrets,
            scopes: Sequence[str],
            cache: Optional[CredentialCache] = None,
            storage_name: str = DEFAULT_STORAGE_NAME,
            storage_key: Optional[str] = None,
            port: int = DEFAULT_FLOW_PORT,
            interactive: bool = True,
    ):
        if not scopes:
            raise ScopeError("At least one OAuth scope is required")

        self._client_secrets = client_secrets
        self._scopes: List[str] = list(scopes)
        self._cache = cache or CredentialCache()
        self._storage_name = storage_name
        self._storage_key = storage_key or os.getenv("GOOGLE_SAMPLES_STORAGE_KEY", DEFAULT_STORAGE_KEY)
        self._port = port
        self._interactive = interactive
        self._credentials: Optional[Credentials] = None
        self._services: Dict[Tuple[str, str], Any] = {}

    @property
    def scopes(self) -> List[str]:
        return list(self._scopes)

    def get_credentials(self, force_refresh: bool = False) -> Credentials:
        """
        Get or refresh Google OAuth2 credentials.

        Args:
            force_refresh: Ignore in-memory credentials even if still valid

        Returns:
            Google OAuth2 Credentials object
        """
        if self._credentials and self._credentials.valid and not force_refresh:
            return self._credentials

        logger.info("Loading or refreshing credentials for %s", self._storage_name)

        creds = self._load_cached_credentials()

        if creds is None:
            if not self._interactive:
                raise AuthenticationError(
                    "No usable cached credentials and interactive authorization is disabled"
                )
            creds = self._run_authorization_flow()

        self._save_credentials(creds)
        self._credentials = creds
        return creds

    def _load_cached_credentials(self) -> Optional[Credentials]:
        stored = self._cache.get(self._storage_name, self._storage_key, self._scopes)
        if stored is None:
            return None

        creds = Credentials(
            token=None,
            refresh_token=stored.refresh_token,
            token_uri=TOKEN_URI,
            client_id=self._client_secrets.client_id,
            client_secret=self._client_secrets.client_secret,
            scopes=stored.scopes,
        )

        try:
            logger.info("Refreshing cached credentials")
            creds.refresh(Request())
        except RefreshError as e:
            logger.error("Using existing refresh token failed: %s", e)
            return None

        return creds

    def _run_authorization_flow(self) -> Credentials:
        logger.info("Starting OAuth2 flow")
        flow = InstalledAppFlow.from_client_config(self._client_secrets.to_client_config(), self._scopes)
        creds = flow.run_local_server(port=self._port)
        logger.info("OAuth2 flow completed successfully")
        return creds

    def _save_credentials(self, creds: Credentials) -> None:
        if not creds.refresh_token:
            logger.warning("Credentials carry no refresh token, nothing to cache")
            return

        granted = list(creds.scopes or self._scopes)
        sanitized = sanitize_for_logging(refresh_token=creds.refresh_token, scopes=granted)
        logger.info(
            "Caching refresh token %s for scopes %s", sanitized['refresh_token'], sanitized['scopes']
        )
        self._cache.set(
            self._storage_name,
            self._storage_key,
            StoredCredential(scopes=granted, refresh_token=creds.refresh_token),
            scopes_to_add=self._scopes,
        )

    def invalidate(self) -> None:
        """Drop in-memory credentials and services to force a reload."""
        self._credentials = None
        self._services.clear()
        logger.info("Authentication cache invalidated")

    def forget(self) -> bool:
        """Invalidate and delete the cached refresh token."""
        self.invalidate()
        return self._cache.delete(self._storage_name)

    # Sync service builders
    def get_service(self, service_name: str, version: str):
        """
        Get a synchronous Google API service.

        Args:
            service_name: Name of the Google service (e.g., 'adsense', 'dfareporting')
            version: API version (e.g., 'v1.4', 'v3.5')

        Returns:
            Google API service object
        """
        key = (service_name, version)
        if key not in self._services:
            creds = self.get_credentials()
            self._services[key] = build(service_name, version, credentials=creds)
        return self._services[key]

    # Async service context managers
    def get_user_creds_for_aiogoogle(self) -> UserCreds:
        """
        Get aiogoogle-compatible UserCreds from Google credentials.

        Returns:
            UserCreds object for use with aiogoogle
        """
        sync_creds = self.get_credentials()
        return UserCreds(
            access_token=sync_creds.token,
            refresh_token=sync_creds.refresh_token,
            token_uri=sync_creds.token_uri,
            scopes=list(sync_creds.scopes or self._scopes),
        )

    def get_client_creds_for_aiogoogle(self) -> ClientCreds:
        return ClientCreds(
            client_id=self._client_secrets.client_id,
            client_secret=self._client_secrets.client_secret,
            scopes=self._scopes,
        )

    @asynccontextmanager
    async def get_async_service(self, service_name: str, version: str):
        """
        Get an asynchronous Google API service context manager.

        Args:
            service_name: Name of the Google service
            version: API version

        Yields:
            Tuple of (aiogoogle instance, service)
        """
        user_creds = self.get_user_creds_for_aiogoogle()
        client_creds = self.get_client_creds_for_aiogoogle()

        async with Aiogoogle(user_creds=user_creds, client_creds=client_creds) as aiogoogle:
            service = await aiogoogle.discover(service_name, version)
            yield aiogoogle, service
