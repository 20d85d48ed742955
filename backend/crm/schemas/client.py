"""
Schemas Pydantic per l'entità Client
Progetto: CRM Utenze
"""
# Definisce gli schemi di validazione e serializzazione per l'API.

import datetime
import logging
import re
from enum import Enum
from typing import Optional

from codicefiscale import codicefiscale
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
    field_validator,
)

# Logger per questo modulo
logger = logging.getLogger(__name__)


FISCAL_CODE_PATTERN = re.compile(r"^[A-Z]{6}[0-9]{2}[A-Z][0-9]{2}[A-Z][0-9]{3}[A-Z]$")
VAT_NUMBER_PATTERN = re.compile(r"^[0-9]{11}$")
IBAN_PATTERN = re.compile(r"^IT\d{2}[A-Z]\d{10}[A-Z0-9]{12}$")


class IbanType(str, Enum):
    """Intestazione del conto."""
    PERSONAL = "personal"
    BUSINESS = "business"


# -------------------------------------------------------------------
# Funzioni di normalizzazione e validazione
# -------------------------------------------------------------------

def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalizza il numero di telefono.

    Rimuove spazi e accetta solo +, numeri e spazi.

    Raises:
        ValueError: Se il formato non è valido
    """
    phone = _blank_to_none(phone)
    if phone is None:
        return None

    normalized = phone.strip().replace(" ", "")
    if not re.match(r"^\+?\d+$", normalized):
        raise ValueError("Numero di telefono non valido")
    return normalized


def _luhn_check_piva(piva: str) -> bool:
    """
    Valida Partita IVA italiana con algoritmo di controllo Luhn modificato.

    L'algoritmo per P.IVA italiana usa modulo 10 con pesi alternati.
    """
    if len(piva) != 11 or not piva.isdigit():
        return False

    s = 0
    for i in range(0, 10, 2):
        s += int(piva[i])
    for i in range(1, 10, 2):
        c = 2 * int(piva[i])
        if c > 9:
            c -= 9
        s += c

    check = (10 - (s % 10)) % 10
    return check == int(piva[10])


def normalize_fiscal_code(fiscal_code: Optional[str]) -> Optional[str]:
    """
    Normalizza e valida il Codice Fiscale di una persona fisica.

    Controlla prima la struttura (16 caratteri, es. RSSMRA80A01H501U),
    poi il carattere di controllo tramite la libreria python-codicefiscale.

    Raises:
        ValueError: Se il formato o il checksum non sono corretti
    """
    fiscal_code = _blank_to_none(fiscal_code)
    if fiscal_code is None:
        return None

    normalized = fiscal_code.strip().upper()
    if not FISCAL_CODE_PATTERN.match(normalized):
        raise ValueError(
            "Il formato del Codice Fiscale non è valido. (Es. RSSMRA80A01H501U)"
        )
    if not codicefiscale.is_valid(normalized):
        raise ValueError("Codice Fiscale non valido: carattere di controllo errato")
    return normalized


def normalize_vat_number(vat_number: Optional[str]) -> Optional[str]:
    """
    Normalizza e valida la Partita IVA (11 cifre + cifra di controllo).

    Raises:
        ValueError: Se il formato o la cifra di controllo non sono corretti
    """
    vat_number = _blank_to_none(vat_number)
    if vat_number is None:
        return None

    normalized = vat_number.strip()
    if normalized.upper().startswith("IT"):
        normalized = normalized[2:]
    if not VAT_NUMBER_PATTERN.match(normalized):
        raise ValueError("La Partita IVA deve essere composta da 11 cifre")
    if not _luhn_check_piva(normalized):
        raise ValueError("Partita IVA non valida: cifra di controllo errata")
    return normalized


def normalize_iban(iban: str) -> str:
    """
    Normalizza e valida un IBAN italiano: rimuove gli spazi, uppercase,
    controlla la struttura IT + 25 caratteri.

    Raises:
        ValueError: Se il formato non è valido
    """
    normalized = re.sub(r"\s", "", iban or "").upper()
    if not IBAN_PATTERN.match(normalized):
        raise ValueError(
            "Il formato dell'IBAN non è valido. Deve iniziare con IT e avere 27 caratteri."
        )
    return normalized


# -------------------------------------------------------------------
# Value objects
# -------------------------------------------------------------------

class Address(BaseModel):
    """Indirizzo postale (legale, residenza o fornitura)."""

    model_config = ConfigDict(extra="ignore")

    street: Optional[str] = Field(None, max_length=255, description="Via e civico")
    zip_code: Optional[str] = Field(None, max_length=10, description="CAP")
    city: Optional[str] = Field(None, max_length=100, description="Comune")
    state: Optional[str] = Field(None, max_length=50, description="Provincia")
    country: Optional[str] = Field(None, max_length=50, description="Nazione")

    def one_line(self) -> str:
        """Indirizzo su una riga, omettendo le parti vuote."""
        parts = [self.street, self.zip_code, self.city, self.state, self.country]
        return ", ".join(p for p in parts if p)


class Iban(BaseModel):
    """IBAN associato al cliente."""

    value: str = Field(..., description="IBAN (IT + 25 caratteri)")
    type: IbanType = Field(default=IbanType.PERSONAL, description="Conto personale o aziendale")

    _normalize_value = field_validator("value", mode="before")(normalize_iban)


class StoredIban(BaseModel):
    """IBAN come letto dall'archivio, senza validazione di formato."""

    model_config = ConfigDict(extra="ignore")

    value: str = ""
    type: str = IbanType.PERSONAL.value


# -------------------------------------------------------------------
# Schemas di scrittura
# -------------------------------------------------------------------

class ClientBase(BaseModel):
    """
    Campi anagrafici comuni a creazione e aggiornamento.

    La validazione dei campi fiscali avviene qui, durante il parsing
    del payload: un errore blocca il salvataggio prima di qualsiasi
    chiamata all'archivio e viene riportato sul singolo campo.
    """

    first_name: str = Field(..., min_length=1, max_length=100, description="Nome")
    last_name: str = Field(..., min_length=1, max_length=100, description="Cognome")
    company_name: Optional[str] = Field(None, max_length=200, description="Ragione sociale")
    email: Optional[EmailStr] = Field(None, description="Indirizzo email")
    fiscal_code: Optional[str] = Field(None, description="Codice Fiscale")
    vat_number: Optional[str] = Field(None, description="Partita IVA")
    mobile_phone: Optional[str] = Field(None, description="Cellulare")
    ibans: list[Iban] = Field(default_factory=list, description="IBAN del cliente")
    legal_address: Optional[Address] = Field(None, description="Sede legale")
    residential_address: Optional[Address] = Field(None, description="Residenza")
    notes: Optional[str] = Field(None, description="Note libere")

    _normalize_fiscal_code = field_validator("fiscal_code", mode="before")(normalize_fiscal_code)
    _normalize_vat_number = field_validator("vat_number", mode="before")(normalize_vat_number)
    _normalize_phone = field_validator("mobile_phone", mode="before")(normalize_phone)
    _normalize_email = field_validator("email", mode="before")(_blank_to_none)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v: Optional[str]) -> Optional[str]:
        """Rimuove gli spazi iniziali e finali dai nomi."""
        if isinstance(v, str):
            return v.strip()
        return v


class ClientCreate(ClientBase):
    """Schema per la creazione di un cliente. id e createdAt sono assegnati dal servizio."""
    pass


class ClientUpdate(ClientBase):
    """
    Schema per l'aggiornamento di un cliente.

    L'aggiornamento sostituisce l'intero record: id e createdAt non sono
    modificabili e vengono ricopiati dalla versione salvata.
    """
    pass


# -------------------------------------------------------------------
# Schemas di lettura
# -------------------------------------------------------------------

class ClientRead(BaseModel):
    """
    Cliente come presente nell'archivio.

    Nessuna validazione di formato: i dati storici devono essere
    sempre leggibili.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    first_name: str = ""
    last_name: str = ""
    company_name: Optional[str] = None
    email: Optional[str] = None
    fiscal_code: Optional[str] = None
    vat_number: Optional[str] = None
    mobile_phone: Optional[str] = None
    ibans: list[StoredIban] = Field(default_factory=list)
    legal_address: Optional[Address] = None
    residential_address: Optional[Address] = None
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    @computed_field
    @property
    def full_name(self) -> str:
        """Nome e cognome per elenchi e messaggi."""
        return f"{self.first_name} {self.last_name}".strip()


class ClientList(BaseModel):
    """Lista clienti con totale."""

    items: list[ClientRead]
    total: int
