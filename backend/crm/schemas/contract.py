"""
Schemas Pydantic per l'entità Contract
Progetto: CRM Utenze

Contratti di fornitura luce, gas e telefonia.
"""

import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from crm.schemas.client import Address
from crm.utils.dates import parse_iso_date


class ContractType(str, Enum):
    """Tipo di fornitura."""
    ELECTRICITY = "electricity"
    GAS = "gas"
    TELEPHONY = "telephony"


class CustomerType(str, Enum):
    """Tipologia di utenza."""
    RESIDENTIAL = "residential"
    BUSINESS = "business"


CONTRACT_TYPE_LABELS = {
    ContractType.ELECTRICITY.value: "Energia Elettrica",
    ContractType.GAS.value: "Gas Naturale",
    ContractType.TELEPHONY.value: "Telefonia",
}


def _convert_decimal_from_string(v):
    """Gestisce input con virgola convertendolo in punto; stringa vuota = assente."""
    if v is None:
        return v
    if isinstance(v, str):
        v = v.strip().replace(",", ".")
        if not v:
            return None
    return v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _lenient_decimal(v):
    """Importo letto dall'archivio: None se non interpretabile."""
    if isinstance(v, bool):
        return None
    v = _convert_decimal_from_string(v)
    if v is None:
        return None
    try:
        value = Decimal(str(v))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _lenient_text(v):
    """Numeri riportati a stringa; altri tipi non testuali scartati."""
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, str) or v is None:
        return v
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return None


# -------------------------------------------------------------------
# Schemas di scrittura
# -------------------------------------------------------------------

class ContractBase(BaseModel):
    """Campi comuni a creazione e aggiornamento di un contratto."""

    client_id: str = Field(..., min_length=1, description="Cliente intestatario")
    type: ContractType = Field(..., description="Tipo di fornitura")
    provider: str = Field(..., min_length=1, max_length=100, description="Fornitore")
    contract_code: str = Field(default="", max_length=100, description="Codice contratto")
    start_date: datetime.date = Field(..., description="Data stipula")
    end_date: Optional[datetime.date] = Field(None, description="Data scadenza")
    commission: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2, description="Provvigione (assente = sconosciuta)"
    )
    is_paid: bool = Field(default=False, description="Provvigione incassata")
    notes: Optional[str] = Field(None, description="Note")
    supply_address: Optional[Address] = Field(None, description="Indirizzo di fornitura")
    operation_type: Optional[str] = Field(None, max_length=100, description="Tipo operazione (Switch, Voltura...)")
    customer_type: CustomerType = Field(default=CustomerType.RESIDENTIAL, description="Residenziale o business")

    # Energia elettrica
    pod: Optional[str] = Field(None, max_length=20, description="Codice POD")
    kw: Optional[Decimal] = Field(None, ge=0, description="Potenza impegnata (kW)")
    volt: Optional[str] = Field(None, max_length=20, description="Tensione")
    # Gas
    pdr: Optional[str] = Field(None, max_length=20, description="Codice PDR")
    remi: Optional[str] = Field(None, max_length=20, description="Codice REMI")
    # Energia / gas
    meter_serial: Optional[str] = Field(None, max_length=50, description="Matricola contatore")
    # Telefonia
    fiber_type: Optional[str] = Field(None, max_length=50, description="Tipo di fibra")

    _commission = field_validator("commission", "kw", mode="before")(_convert_decimal_from_string)
    _blank_optional = field_validator("end_date", "operation_type", mode="before")(_blank_to_none)

    @field_validator("provider", mode="before")
    @classmethod
    def strip_provider(cls, v):
        """Il fornitore è testo libero: solo trim."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("pod", "pdr", mode="before")
    @classmethod
    def normalize_meter_codes(cls, v):
        """POD e PDR in maiuscolo senza spazi."""
        if isinstance(v, str):
            v = v.replace(" ", "").upper()
            return v or None
        return v


class ContractCreate(ContractBase):
    """Schema per la creazione di un contratto."""
    pass


class ContractUpdate(ContractBase):
    """Schema per l'aggiornamento (sostituzione completa) di un contratto."""
    pass


class ContractPaidUpdate(BaseModel):
    """Cambio dello stato di incasso."""

    is_paid: bool


# -------------------------------------------------------------------
# Schemas di lettura
# -------------------------------------------------------------------

class ContractRead(BaseModel):
    """
    Contratto come presente nell'archivio.

    Le date restano stringhe grezze: un valore mancante o non
    interpretabile non impedisce il caricamento, i calcoli lo
    ignorano tramite start_on / end_on.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    client_id: str = ""
    type: str = ContractType.ELECTRICITY.value
    provider: str = ""
    contract_code: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    commission: Optional[Decimal] = None
    is_paid: bool = False
    notes: Optional[str] = None
    supply_address: Optional[Address] = None
    operation_type: Optional[str] = None
    customer_type: str = CustomerType.RESIDENTIAL.value
    pod: Optional[str] = None
    kw: Optional[Decimal] = None
    volt: Optional[str] = None
    pdr: Optional[str] = None
    remi: Optional[str] = None
    meter_serial: Optional[str] = None
    fiber_type: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_date_to_string(cls, v):
        """Date già convertite in formato ISO; valori non testuali scartati."""
        if isinstance(v, (datetime.date, datetime.datetime)):
            return v.isoformat()
        if isinstance(v, str):
            return v
        return None

    _lenient_amounts = field_validator("commission", "kw", mode="before")(_lenient_decimal)

    @field_validator(
        "notes", "operation_type", "pod", "volt", "pdr", "remi", "meter_serial", "fiber_type",
        mode="before",
    )
    @classmethod
    def coerce_optional_text(cls, v):
        return _lenient_text(v)

    @field_validator("client_id", "provider", "contract_code", mode="before")
    @classmethod
    def coerce_required_text(cls, v):
        return _lenient_text(v) or ""

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v):
        return _lenient_text(v) or ContractType.ELECTRICITY.value

    @field_validator("customer_type", mode="before")
    @classmethod
    def coerce_customer_type(cls, v):
        return _lenient_text(v) or CustomerType.RESIDENTIAL.value

    @field_validator("is_paid", mode="before")
    @classmethod
    def coerce_paid(cls, v):
        """Valori non riconosciuti contano come non incassato."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int):
            return v == 1
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes", "si", "sì")
        return False

    @field_validator("supply_address", mode="before")
    @classmethod
    def coerce_address(cls, v):
        if isinstance(v, Address):
            return v
        if not isinstance(v, dict):
            return None
        try:
            return Address.model_validate(v)
        except ValidationError:
            return None

    @property
    def start_on(self) -> Optional[datetime.date]:
        """Data stipula interpretata, None se mancante o non valida."""
        return parse_iso_date(self.start_date)

    @property
    def end_on(self) -> Optional[datetime.date]:
        """Data scadenza interpretata, None se mancante o non valida."""
        return parse_iso_date(self.end_date)

    @property
    def is_telephony(self) -> bool:
        return self.type == ContractType.TELEPHONY.value

    @property
    def commission_amount(self) -> Decimal:
        """Provvigione con assente = 0."""
        return self.commission if self.commission is not None else Decimal("0")

    @property
    def type_label(self) -> str:
        return CONTRACT_TYPE_LABELS.get(self.type, self.type)


class ContractList(BaseModel):
    """Lista contratti con totale."""

    items: list[ContractRead]
    total: int


# -------------------------------------------------------------------
# Filtri e ordinamento della lista
# -------------------------------------------------------------------

class ContractSortKey(str, Enum):
    """Colonne ordinabili della lista contratti."""
    CLIENT_NAME = "client_name"
    END_DATE = "end_date"
    COMMISSION = "commission"


class ContractListFilter(BaseModel):
    """
    Filtri della lista contratti.

    Anno, mese e fornitore seguono le regole del pannello provvigioni;
    gli intervalli di date sono inclusivi e ignorano i contratti senza
    la data corrispondente.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = None
    type: Optional[ContractType] = None
    year: Optional[int] = None
    month: Optional[int] = Field(None, ge=1, le=12)
    provider: Optional[str] = None
    start_from: Optional[datetime.date] = None
    start_to: Optional[datetime.date] = None
    end_from: Optional[datetime.date] = None
    end_to: Optional[datetime.date] = None
