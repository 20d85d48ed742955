"""
Router per l'accesso
Progetto: CRM Utenze

Login con la coppia di credenziali globale e modifica delle credenziali.
"""

from fastapi import APIRouter, Depends, status

from crm.core.deps import CurrentUser, get_credentials_service
from crm.schemas.token import CredentialsUpdate, LoginRequest, TokenResponse
from crm.services.credentials_service import CredentialsService

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Effettua il login",
)
async def login(
    data: LoginRequest,
    service: CredentialsService = Depends(get_credentials_service),
) -> TokenResponse:
    """
    Verifica utente e password e restituisce l'access token.

    Raises:
        AuthorizationError: Se le credenziali non corrispondono
    """
    return await service.login(data)


@router.get(
    "/me",
    summary="Utente corrente",
)
async def read_current_user(current_user: CurrentUser) -> dict[str, str]:
    return {"username": current_user}


@router.put(
    "/credentials",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Aggiorna le credenziali",
)
async def update_credentials(
    data: CredentialsUpdate,
    current_user: CurrentUser,
    service: CredentialsService = Depends(get_credentials_service),
) -> None:
    """Sostituisce la coppia utente/password globale."""
    await service.set(data)
