"""
Unit tests for the authentication manager.

Tests cover the cached refresh token path, the interactive flow fallback,
service creation and aiogoogle credential conversion.
"""

import pytest
from unittest.mock import Mock, patch

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from aiogoogle.auth.creds import UserCreds

from google_api_samples.auth import AuthManager, ClientSecrets, StoredCredential
from google_api_samples.exceptions import AuthenticationError, ScopeError

SCOPE = "https://www.googleapis.com/auth/adsense.readonly"
KEY = "test-key"


@pytest.mark.unit
@pytest.mark.auth
class TestAuthManager:
    """Test cases for AuthManager class."""

    @pytest.fixture
    def client_secrets(self):
        return ClientSecrets(api_key="key", client_id="client-id", client_secret="client-secret")

    @pytest.fixture
    def auth_mgr(self, client_secrets, credential_cache):
        """Create a fresh AuthManager writing to a temporary cache."""
        return AuthManager(
            client_secrets, [SCOPE], cache=credential_cache, storage_name="adsense", storage_key=KEY
        )

    @pytest.fixture
    def mock_credentials(self):
        """Create mock OAuth2 credentials."""
        creds = Mock(spec=Credentials)
        creds.valid = True
        creds.token = "mock_token"
        creds.refresh_token = "mock_refresh_token"
        creds.token_uri = "https://oauth2.googleapis.com/token"
        creds.scopes = [SCOPE]
        return creds

    def test_requires_scopes(self, client_secrets, credential_cache):
        """Test that an empty scope list is rejected."""
        with pytest.raises(ScopeError):
            AuthManager(client_secrets, [], cache=credential_cache)

    @patch('google_api_samples.auth.manager.InstalledAppFlow')
    def test_runs_flow_without_cached_token(self, mock_flow_cls, auth_mgr, credential_cache, mock_credentials):
        """Test the installed-app flow runs and its refresh token is cached."""
        mock_flow_cls.from_client_config.return_value.run_local_server.return_value = mock_credentials

        result = auth_mgr.get_credentials()

        assert result is mock_credentials
        config, scopes = mock_flow_cls.from_client_config.call_args.args
        assert config["installed"]["client_id"] == "client-id"
        assert scopes == [SCOPE]
        mock_flow_cls.from_client_config.return_value.run_local_server.assert_called_once_with(port=8080)

        stored = credential_cache.get("adsense", KEY, [SCOPE])
        assert stored.refresh_token == "mock_refresh_token"

    @patch('google_api_samples.auth.manager.InstalledAppFlow')
    @patch('google_api_samples.auth.manager.Request')
    @patch('google_api_samples.auth.manager.Credentials')
    def test_uses_cached_refresh_token(
        self, mock_creds_cls, mock_request, mock_flow_cls, auth_mgr, credential_cache, mock_credentials
    ):
        """Test a cached refresh token is refreshed instead of running the flow."""
        credential_cache.set("adsense", KEY, StoredCredential([SCOPE], "cached-token"))
        mock_creds_cls.return_value = mock_credentials

        result = auth_mgr.get_credentials()

        assert result is mock_credentials
        kwargs = mock_creds_cls.call_args.kwargs
        assert kwargs["refresh_token"] == "cached-token"
        assert kwargs["client_id"] == "client-id"
        mock_credentials.refresh.assert_called_once_with(mock_request.return_value)
        mock_flow_cls.from_client_config.assert_not_called()

    @patch('google_api_samples.auth.manager.InstalledAppFlow')
    @patch('google_api_samples.auth.manager.Request')
    @patch('google_api_samples.auth.manager.Credentials')
    def test_refresh_failure_falls_back_to_flow(
        self, mock_creds_cls, mock_request, mock_flow_cls, auth_mgr, credential_cache, mock_credentials
    ):
        """Test a revoked refresh token triggers a new authorization."""
        credential_cache.set("adsense", KEY, StoredCredential([SCOPE], "revoked-token"))
        mock_creds_cls.return_value.refresh.side_effect = RefreshError("invalid_grant")
        mock_flow_cls.from_client_config.return_value.run_local_server.return_value = mock_credentials

        result = auth_mgr.get_credentials()

        assert result is mock_credentials
        assert credential_cache.get("adsense", KEY).refresh_token == "mock_refresh_token"

    def test_non_interactive_without_cache(self, client_secrets, credential_cache):
        """Test that disabling the flow raises instead of prompting."""
        mgr = AuthManager(client_secrets, [SCOPE], cache=credential_cache, storage_key=KEY, interactive=False)
        with pytest.raises(AuthenticationError):
            mgr.get_credentials()

    @patch('google_api_samples.auth.manager.InstalledAppFlow')
    def test_in_memory_credentials_reused(self, mock_flow_cls, auth_mgr, mock_credentials):
        """Test valid credentials are not reloaded on every call."""
        mock_flow_cls.from_client_config.return_value.run_local_server.return_value = mock_credentials

        auth_mgr.get_credentials()
        auth_mgr.get_credentials()

        mock_flow_cls.from_client_config.assert_called_once()

    @patch('google_api_samples.auth.manager.build')
    def test_get_service_is_cached(self, mock_build, auth_mgr, mock_credentials):
        """Test services are built once per name and version."""
        with patch.object(auth_mgr, 'get_credentials', return_value=mock_credentials):
            first = auth_mgr.get_service('adsense', 'v1.4')
            second = auth_mgr.get_service('adsense', 'v1.4')

        assert first is second
        mock_build.assert_called_once_with('adsense', 'v1.4', credentials=mock_credentials)

    @patch('google_api_samples.auth.manager.build')
    def test_invalidate_clears_services(self, mock_build, auth_mgr, mock_credentials):
        with patch.object(auth_mgr, 'get_credentials', return_value=mock_credentials):
            auth_mgr.get_service('adsense', 'v1.4')
            auth_mgr.invalidate()
            auth_mgr.get_service('adsense', 'v1.4')

        assert mock_build.call_count == 2

    def test_forget_deletes_cached_token(self, auth_mgr, credential_cache):
        credential_cache.set("adsense", KEY, StoredCredential([SCOPE], "token"))
        assert auth_mgr.forget() is True
        assert credential_cache.get("adsense", KEY) is None

    def test_user_creds_for_aiogoogle(self, auth_mgr, mock_credentials):
        """Test conversion of Google credentials to aiogoogle UserCreds."""
        with patch.object(auth_mgr, 'get_credentials', return_value=mock_credentials):
            creds = auth_mgr.get_user_creds_for_aiogoogle()

        assert isinstance(creds, UserCreds)
        assert creds["access_token"] == "mock_token"
        assert creds["refresh_token"] == "mock_refresh_token"

    def test_client_creds_for_aiogoogle(self, auth_mgr):
        creds = auth_mgr.get_client_creds_for_aiogoogle()
        assert creds["client_id"] == "client-id"
        assert creds["client_secret"] == "client-secret"
