"""
Service per le credenziali di accesso
Progetto: CRM Utenze

Una sola coppia utente/password globale, salvata come documento di
configurazione con la password in hash bcrypt. Alla prima lettura,
se assente, viene creata la coppia di default (admin/admin).
"""

import hmac
import logging

from crm.core.exceptions import AuthorizationError
from crm.core.security import create_access_token, hash_password, verify_password
from crm.schemas.token import CredentialsUpdate, LoginRequest, TokenResponse
from crm.services.crm_session import CrmSession, store_operation

# Logger per questo modulo
logger = logging.getLogger(__name__)

CREDENTIALS_CONFIG = "credentials"


class CredentialsService:
    """Gestione della coppia di credenziali e del login."""

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    async def get(self) -> dict[str, str]:
        """
        Restituisce {"username", "password_hash"}, creando i default se assenti.

        Raises:
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        async with store_operation("lettura credenziali"):
            document = await self.session.store.get_config(CREDENTIALS_CONFIG)

        if document and document.get("username") and document.get("password_hash"):
            return {"username": document["username"], "password_hash": document["password_hash"]}

        config = self.session.config
        credentials = {
            "username": config.default_username,
            "password_hash": hash_password(config.default_password),
        }
        async with store_operation("inizializzazione credenziali"):
            await self.session.store.set_config(CREDENTIALS_CONFIG, credentials)
        logger.warning("Credenziali inizializzate con i valori di default")
        return credentials

    async def set(self, data: CredentialsUpdate) -> None:
        """Sostituisce la coppia globale."""
        credentials = {
            "username": data.username,
            "password_hash": hash_password(data.password),
        }
        async with store_operation("aggiornamento credenziali"):
            await self.session.store.set_config(CREDENTIALS_CONFIG, credentials)
        logger.info("Credenziali aggiornate per l'utente %s", data.username)

    async def login(self, data: LoginRequest) -> TokenResponse:
        """
        Verifica le credenziali e rilascia un access token.

        Raises:
            AuthorizationError: Se utente o password non corrispondono
        """
        credentials = await self.get()

        username_ok = hmac.compare_digest(data.username.encode(), credentials["username"].encode())
        password_ok = verify_password(data.password, credentials["password_hash"])
        if not (username_ok and password_ok):
            logger.warning("Tentativo di accesso fallito per l'utente %s", data.username)
            raise AuthorizationError()

        logger.info("Accesso effettuato: %s", data.username)
        return TokenResponse(access_token=create_access_token(data.username))
