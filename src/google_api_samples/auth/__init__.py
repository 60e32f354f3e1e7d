"""OAuth2 credentials: client secrets, refresh-token cache and service builders."""

from .credential_cache import CredentialCache, StoredCredential, default_storage_directory
from .client_secrets import ClientSecrets, ClientSecretsStore
from .manager import AuthManager

__all__ = [
    "CredentialCache",
    "StoredCredential",
    "default_storage_directory",
    "ClientSecrets",
    "ClientSecretsStore",
    "AuthManager",
]
