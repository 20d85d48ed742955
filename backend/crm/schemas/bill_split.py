"""
Schemas Pydantic per la divisione bollette
Progetto: CRM Utenze

Importi e consumi sono Decimal; i campi lasciati vuoti nel form
arrivano come stringa vuota o None e valgono zero.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class SplitMethod(str, Enum):
    """Metodo di ripartizione."""
    SIMPLE = "simple"
    ADVANCED = "advanced"


def _decimal_or_none(v):
    """Accetta virgola decimale; stringa vuota = campo non compilato."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip().replace(",", ".")
        if not v:
            return None
    return v


class Participant(BaseModel):
    """Partecipante alla divisione con il proprio consumo dichiarato."""

    id: int = Field(..., ge=1)
    name: str = Field(default="", max_length=100)
    consumption: Optional[Decimal] = Field(None, ge=0, description="Consumo (kWh / Smc)")

    _consumption = field_validator("consumption", mode="before")(_decimal_or_none)


class BillSplitRequest(BaseModel):
    """Dati della bolletta da ripartire."""

    method: SplitMethod = SplitMethod.ADVANCED
    total_bill: Optional[Decimal] = Field(None, ge=0, description="Importo totale bolletta")
    total_consumption: Optional[Decimal] = Field(None, ge=0, description="Consumo totale in bolletta")
    fixed_fee: Optional[Decimal] = Field(None, ge=0, description="Quota fissa")
    power_fee: Optional[Decimal] = Field(None, ge=0, description="Quota potenza")
    other_fee: Optional[Decimal] = Field(None, ge=0, description="Altri oneri")
    participants: list[Participant] = Field(..., min_length=1)

    _amounts = field_validator(
        "total_bill", "total_consumption", "fixed_fee", "power_fee", "other_fee", mode="before"
    )(_decimal_or_none)

    @model_validator(mode="after")
    def unique_participant_ids(self):
        ids = [p.id for p in self.participants]
        if len(ids) != len(set(ids)):
            raise ValueError("Identificativi dei partecipanti duplicati")
        return self


class ParticipantShare(BaseModel):
    """Quota calcolata per un partecipante."""

    id: int
    name: str
    consumption: Decimal
    fixed_share: Decimal
    variable_share: Decimal
    amount: Decimal


class BillSplitResult(BaseModel):
    """
    Esito della ripartizione.

    La riconciliazione dei consumi è solo informativa: le quote sono
    calcolate anche quando la somma dei consumi non coincide con il totale.
    """

    method: SplitMethod
    unit_cost: Decimal = Field(..., description="Costo unitario (semplice) o tariffa variabile (avanzato)")
    total_fixed: Decimal
    fixed_per_person: Decimal
    shares: list[ParticipantShare]
    shares_total: Decimal
    participants_consumption: Decimal
    consumption_diff: Decimal
    is_consumption_match: bool
    is_consumption_over: bool
