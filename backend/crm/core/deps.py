"""
Dependency Injection per autenticazione e servizi
Progetto: CRM Utenze

La sessione CRM viene creata all'avvio e conservata in app.state;
ogni servizio la riceve esplicitamente tramite queste dependency.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from crm.core.exceptions import AuthorizationError
from crm.core.security import decode_token
from crm.services.appointment_service import AppointmentService
from crm.services.client_service import ClientService
from crm.services.contract_service import ContractService
from crm.services.credentials_service import CredentialsService
from crm.services.crm_session import CrmSession
from crm.services.office_task_service import OfficeTaskService
from crm.services.reference_list_service import ReferenceListService
from crm.services.reminder_message_service import ReminderMessageService

# OAuth2 scheme - estrae il token dall'header Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    Dependency per ottenere l'utente corrente dal token JWT.

    Returns:
        Username contenuto nel token

    Raises:
        HTTPException 401: Se il token manca, è invalido o scaduto
    """
    if not token:
        raise _unauthorized("Token di autenticazione non fornito")

    try:
        token_data = decode_token(token)
    except AuthorizationError as e:
        raise _unauthorized(e.detail) from e

    if token_data.type != "access":
        raise _unauthorized("Tipo di token non valido per questa operazione")

    return token_data.sub


def get_session(request: Request) -> CrmSession:
    """Sessione CRM condivisa, creata nel lifespan dell'applicazione."""
    return request.app.state.crm_session


# -------------------------------------------------------------------
# Service factories
# -------------------------------------------------------------------

def get_client_service(session: CrmSession = Depends(get_session)) -> ClientService:
    return ClientService(session)


def get_contract_service(session: CrmSession = Depends(get_session)) -> ContractService:
    return ContractService(session)


def get_appointment_service(session: CrmSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)


def get_office_task_service(session: CrmSession = Depends(get_session)) -> OfficeTaskService:
    return OfficeTaskService(session)


def get_reference_list_service(session: CrmSession = Depends(get_session)) -> ReferenceListService:
    return ReferenceListService(session)


def get_credentials_service(session: CrmSession = Depends(get_session)) -> CredentialsService:
    return CredentialsService(session)


def get_reminder_message_service(session: CrmSession = Depends(get_session)) -> ReminderMessageService:
    return ReminderMessageService(session.config)


# Type aliases per uso comune
CurrentUser = Annotated[str, Depends(get_current_user)]
Session = Annotated[CrmSession, Depends(get_session)]


# Export
__all__ = [
    "oauth2_scheme",
    "get_current_user",
    "get_session",
    "get_client_service",
    "get_contract_service",
    "get_appointment_service",
    "get_office_task_service",
    "get_reference_list_service",
    "get_credentials_service",
    "get_reminder_message_service",
    "CurrentUser",
    "Session",
]
