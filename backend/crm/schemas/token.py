"""
Schemas Pydantic per l'accesso
Progetto: CRM Utenze

Credenziali globali (una sola coppia utente/password) e token JWT.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Credenziali inserite nella schermata di accesso."""

    username: str = Field(..., min_length=1, description="Nome utente")
    password: str = Field(..., min_length=1, description="Password in chiaro")


class CredentialsUpdate(BaseModel):
    """Nuova coppia di credenziali globali."""

    username: str = Field(..., min_length=1, max_length=100, description="Nome utente")
    password: str = Field(..., min_length=4, max_length=100, description="Password in chiaro")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class TokenResponse(BaseModel):
    """
    Schema per la risposta contenente il token JWT.

    Attributes:
        access_token: Token di accesso JWT
        token_type: Tipo di token (default: bearer)
    """

    access_token: str = Field(..., description="Token di accesso JWT")
    token_type: str = Field(default="bearer", description="Tipo di token")


class TokenPayload(BaseModel):
    """
    Schema per il payload contenuto nel token JWT.

    Attributes:
        sub: Subject - nome utente
        exp: Expiration - Data/ora di scadenza
        type: Tipo di token ("access")
    """

    sub: str = Field(..., description="Nome utente")
    exp: datetime = Field(..., description="Data/ora di scadenza")
    type: str = Field(..., description="Tipo di token")


__all__ = [
    "LoginRequest",
    "CredentialsUpdate",
    "TokenResponse",
    "TokenPayload",
]
