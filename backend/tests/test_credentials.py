"""
Test per credenziali globali, login e token JWT.
"""

import pytest

from crm.core.exceptions import AuthorizationError
from crm.core.security import create_access_token, decode_token, verify_password
from crm.schemas.token import CredentialsUpdate, LoginRequest
from crm.services.credentials_service import CREDENTIALS_CONFIG, CredentialsService


# ============================================================
# Credenziali
# ============================================================


class TestCredentials:
    """Coppia unica salvata come hash bcrypt."""

    async def test_defaults_are_seeded(self, store, session, test_settings):
        credentials = await CredentialsService(session).get()

        assert credentials["username"] == test_settings.default_username
        assert verify_password(test_settings.default_password, credentials["password_hash"])
        assert store.configs[CREDENTIALS_CONFIG]["password_hash"] != test_settings.default_password

    async def test_login_with_updated_credentials(self, session):
        service = CredentialsService(session)
        await service.set(CredentialsUpdate(username=" agente ", password="segreta"))

        token = await service.login(LoginRequest(username="agente", password="segreta"))

        assert token.token_type == "bearer"
        assert decode_token(token.access_token).sub == "agente"

    async def test_wrong_password(self, session):
        service = CredentialsService(session)
        await service.set(CredentialsUpdate(username="agente", password="segreta"))
        with pytest.raises(AuthorizationError):
            await service.login(LoginRequest(username="agente", password="sbagliata"))

    async def test_wrong_username(self, session):
        service = CredentialsService(session)
        await service.set(CredentialsUpdate(username="agente", password="segreta"))
        with pytest.raises(AuthorizationError):
            await service.login(LoginRequest(username="altro", password="segreta"))


# ============================================================
# Token
# ============================================================


class TestTokens:
    def test_roundtrip(self):
        payload = decode_token(create_access_token("agente"))
        assert payload.sub == "agente"
        assert payload.type == "access"

    def test_garbage_token(self):
        with pytest.raises(AuthorizationError):
            decode_token("non.un.token")
