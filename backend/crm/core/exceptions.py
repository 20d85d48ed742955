"""
Eccezioni Custom per l'applicazione.
Progetto: CRM Utenze

Definisce eccezioni specifiche del dominio per una gestione
centralizzata degli errori.

NOTA: BusinessValidationError è volutamente distinta da pydantic.ValidationError.
- pydantic.ValidationError: errori di formato dei campi (codice fiscale, IBAN...),
  sollevati durante il parsing del payload, prima di qualsiasi accesso all'archivio
- BusinessValidationError: violazioni delle regole applicative (stato appuntamento
  non previsto, rimozione dell'ultimo partecipante...)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "BusinessValidationError",
    "AuthorizationError",
    "TransientStoreError",
]


class AppException(Exception):
    """
    Base exception per l'applicazione.

    Attributes:
        status_code: HTTP status code da restituire al client
        error_code: Identificativo univoco dell'errore per il frontend
        detail: Messaggio di errore leggibile per l'utente
        extra: Dizionario con dati aggiuntivi per il frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)


class NotFoundError(AppException):
    """
    Eccezione sollevata quando una risorsa non viene trovata.

    Copre anche i riferimenti non validi (es. contratto intestato
    a un cliente che non esiste più).
    """

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Risorsa non trovata",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Eccezione sollevata per violazioni delle regole di business logic.

    Eredita da ValueError per essere catturata dai validatori Pydantic.

    Esempi di utilizzo:
        - "Lo stato 'In attesa' non è tra quelli configurati"
        - "Devi avere almeno un partecipante"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validazione dati fallita",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Chiama AppException.__init__ direttamente per evitare ValueError
        AppException.__init__(self, detail, error_code, extra)


class AuthorizationError(AppException):
    """Eccezione sollevata per credenziali errate o token mancante."""

    status_code: int = 401
    error_code: str = "UNAUTHORIZED"

    def __init__(
        self,
        detail: str = "Credenziali non valide",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class TransientStoreError(AppException):
    """
    Eccezione sollevata quando l'archivio non risponde o rifiuta l'operazione.

    Il messaggio è volutamente generico: viene mostrato all'utente come
    notifica unica. Nessun retry automatico, lo stato in memoria resta invariato.
    """

    status_code: int = 503
    error_code: str = "STORE_UNAVAILABLE"

    def __init__(
        self,
        detail: str = "Operazione non riuscita. Riprova più tardi.",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
