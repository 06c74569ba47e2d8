"""Unit tests for GoogleAuthService with google-auth verification mocked."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.auth import exceptions as google_exceptions

from postboard.models.auth import FederatedIdentity
from postboard.models.user import AccountKind
from postboard.services.errors import (
    AuthConfigurationError,
    DuplicateUserError,
    InvalidAssertionError,
)
from postboard.services.google_auth_service import GoogleAuthService

VERIFY_TARGET = "postboard.services.google_auth_service.google_id_token.verify_oauth2_token"


@pytest.fixture
def google_service(user_store, settings):
    return GoogleAuthService(user_store, settings)


class TestVerifyAssertion:
    """Tests for verify_assertion."""

    async def test_returns_email_and_name(self, google_service, settings):
        claims = {"email": "g@x.com", "name": "Gee", "iss": "accounts.google.com"}

        with patch(VERIFY_TARGET, return_value=claims) as mock_verify:
            identity = await google_service.verify_assertion("id-token")

        assert identity == FederatedIdentity(email="g@x.com", name="Gee")
        args = mock_verify.call_args[0]
        assert args[0] == "id-token"
        assert args[2] == settings.google_client_id

    async def test_name_falls_back_to_email(self, google_service):
        with patch(VERIFY_TARGET, return_value={"email": "g@x.com"}):
            identity = await google_service.verify_assertion("id-token")
        assert identity.name == "g@x.com"

    async def test_verification_error_is_invalid_assertion(self, google_service):
        with patch(VERIFY_TARGET, side_effect=ValueError("Token expired")):
            with pytest.raises(InvalidAssertionError) as exc_info:
                await google_service.verify_assertion("id-token")
        assert exc_info.value.status_code == 400

    async def test_transport_error_is_invalid_assertion(self, google_service):
        with patch(VERIFY_TARGET, side_effect=google_exceptions.TransportError("certs down")):
            with pytest.raises(InvalidAssertionError):
                await google_service.verify_assertion("id-token")

    async def test_missing_email_claim(self, google_service):
        with patch(VERIFY_TARGET, return_value={"name": "No Email"}):
            with pytest.raises(InvalidAssertionError):
                await google_service.verify_assertion("id-token")

    async def test_missing_credential(self, google_service):
        with patch(VERIFY_TARGET) as mock_verify:
            with pytest.raises(InvalidAssertionError):
                await google_service.verify_assertion(None)
        mock_verify.assert_not_called()

    async def test_missing_client_id(self, user_store, settings):
        settings.google_client_id = None
        with pytest.raises(AuthConfigurationError):
            await GoogleAuthService(user_store, settings).verify_assertion("id-token")


class TestLoginOrRegister:
    """Tests for login_or_register."""

    async def test_creates_federated_user_once(self, google_service, user_store):
        identity = FederatedIdentity(email="g@x.com", name="Gee")

        first = await google_service.login_or_register(identity)
        second = await google_service.login_or_register(identity)

        assert first.id == second.id
        assert first.account_kind == AccountKind.FEDERATED
        assert len(user_store.records) == 1

    async def test_lost_creation_race_returns_winner(self, settings):
        identity = FederatedIdentity(email="g@x.com", name="Gee")
        winner = MagicMock(id="winner-id")

        store = MagicMock()
        store.get_by_email = AsyncMock(side_effect=[None, winner])
        store.create_user = AsyncMock(side_effect=DuplicateUserError())

        user = await GoogleAuthService(store, settings).login_or_register(identity)

        assert user is winner
        assert store.get_by_email.await_count == 2

    async def test_duplicate_without_winner_propagates(self, settings):
        store = MagicMock()
        store.get_by_email = AsyncMock(return_value=None)
        store.create_user = AsyncMock(side_effect=DuplicateUserError())

        with pytest.raises(DuplicateUserError):
            await GoogleAuthService(store, settings).login_or_register(
                FederatedIdentity(email="g@x.com", name="Gee")
            )
