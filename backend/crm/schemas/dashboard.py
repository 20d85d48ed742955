"""
Schemas Pydantic per la dashboard
Progetto: CRM Utenze

Dati derivati (mai salvati nell'archivio): promemoria di verifica,
scadenze, provvigioni, serie per i grafici e riepilogo dei widget.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from crm.schemas.appointment import AppointmentRead
from crm.schemas.contract import ContractRead
from crm.schemas.office_task import OfficeTaskRead

ALL = "all"


# -------------------------------------------------------------------
# Promemoria di verifica (T4 / T8)
# -------------------------------------------------------------------

class CheckupType(str, Enum):
    """Verifica a 6 mesi (T4) o a 10 mesi (T8) dalla stipula."""
    T4 = "T4"
    T8 = "T8"


def checkup_key(contract_id: str, checkup_type: Union[CheckupType, str]) -> str:
    """Chiave di archiviazione di un promemoria: "{contract_id}_{tipo}"."""
    value = checkup_type.value if isinstance(checkup_type, CheckupType) else checkup_type
    return f"{contract_id}_{value}"


class CheckupItem(BaseModel):
    """
    Promemoria calcolato per un contratto.

    days_diff è negativo se la data di verifica è già passata.
    """

    model_config = ConfigDict(frozen=True)

    contract: ContractRead
    type: CheckupType
    target_date: datetime.date
    days_diff: int

    @computed_field
    @property
    def key(self) -> str:
        return checkup_key(self.contract.id, self.type)


class CheckupDismiss(BaseModel):
    """Archiviazione permanente di un promemoria."""

    contract_id: str = Field(..., min_length=1)
    type: CheckupType

    @property
    def key(self) -> str:
        return checkup_key(self.contract_id, self.type)


class CheckupList(BaseModel):
    items: list[CheckupItem]
    total: int


# -------------------------------------------------------------------
# Scadenze
# -------------------------------------------------------------------

class ExpiryStatus(str, Enum):
    """Classificazione di un contratto rispetto alla data di scadenza."""
    ACTIVE_NO_END = "active_no_end"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    ACTIVE = "active"


EXPIRY_STATUS_LABELS = {
    ExpiryStatus.ACTIVE_NO_END: "Attivo (senza scadenza)",
    ExpiryStatus.EXPIRED: "Scaduto",
    ExpiryStatus.EXPIRING_SOON: "In scadenza",
    ExpiryStatus.ACTIVE: "Attivo",
}


class ExpiringContract(BaseModel):
    """Contratto in scadenza con giorni residui ed etichetta."""

    contract: ContractRead
    end_date: datetime.date
    days_remaining: int
    label: str


class ExpiryStatusCounts(BaseModel):
    """Conteggio per ciascuna delle quattro classi."""

    active_no_end: int = 0
    expired: int = 0
    expiring_soon: int = 0
    active: int = 0

    @computed_field
    @property
    def total(self) -> int:
        return self.active_no_end + self.expired + self.expiring_soon + self.active


# -------------------------------------------------------------------
# Provvigioni
# -------------------------------------------------------------------

def _all_to_none(v):
    if v is None:
        return None
    if isinstance(v, str):
        text = v.strip()
        if not text or text.lower() == ALL:
            return None
        return text
    return v


class CommissionFilter(BaseModel):
    """
    Filtri per anno, mese e fornitore.

    None (o "all") su una dimensione significa nessun filtro.
    """

    model_config = ConfigDict(frozen=True)

    year: Optional[int] = Field(None, ge=1900, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    provider: Optional[str] = None

    _all_means_none = field_validator("year", "month", "provider", mode="before")(_all_to_none)


class CommissionSummary(BaseModel):
    """Somme delle provvigioni, totali e per categoria, con i relativi conteggi."""

    total: Decimal = Decimal("0")
    energy: Decimal = Decimal("0")
    telephony: Decimal = Decimal("0")
    count: int = 0
    energy_count: int = 0
    telephony_count: int = 0
    paid_total: Decimal = Decimal("0")
    unpaid_total: Decimal = Decimal("0")


class ProviderCardinality(BaseModel):
    """Numero di fornitori distinti per categoria."""

    energy: int = 0
    telephony: int = 0


class CommissionReport(BaseModel):
    """Risposta completa del pannello provvigioni."""

    filter: CommissionFilter
    summary: CommissionSummary
    this_month: CommissionSummary
    providers: ProviderCardinality
    available_years: list[int]
    contracts: list[ContractRead]


# -------------------------------------------------------------------
# Grafici
# -------------------------------------------------------------------

class ChartPoint(BaseModel):
    label: str
    value: Union[int, Decimal]


class ChartSeries(BaseModel):
    """Serie etichetta/valore pronta per un grafico a barre o a torta."""

    title: str
    points: list[ChartPoint] = Field(default_factory=list)

    @computed_field
    @property
    def total(self) -> Union[int, Decimal]:
        return sum((p.value for p in self.points), 0)


# -------------------------------------------------------------------
# Widget
# -------------------------------------------------------------------

WIDGET_IDS = (
    "total_clients",
    "total_contracts",
    "combined_totals",
    "commission_summary",
    "current_month_commission",
    "expiring_contracts",
    "checkups",
    "appointments",
    "office_tasks",
    "contract_chart",
    "client_chart",
    "commission_chart",
    "energy_provider_pie",
    "telephony_provider_pie",
    "paid_status_pie",
    "expiry_status_pie",
)


def default_widget_visibility() -> dict[str, bool]:
    return {widget_id: True for widget_id in WIDGET_IDS}


class WidgetVisibility(BaseModel):
    """Preferenza di visibilità dei widget della dashboard."""

    widgets: dict[str, bool] = Field(default_factory=default_widget_visibility)


class DashboardSummary(BaseModel):
    """Riepilogo mostrato nella dashboard."""

    today: datetime.date
    clients_count: int
    contracts_count: int
    energy_contracts_count: int
    telephony_contracts_count: int
    expiring_count: int
    expiring_threshold_days: int
    checkups_count: int
    orphan_contracts_count: int
    this_month: CommissionSummary
    overall: CommissionSummary
    providers: ProviderCardinality
    upcoming_appointments: list[AppointmentRead]
    open_tasks: list[OfficeTaskRead]
    open_tasks_count: int


# -------------------------------------------------------------------
# Messaggi di promemoria
# -------------------------------------------------------------------

class ReminderMessage(BaseModel):
    """Testi e link di contatto per un promemoria (verifica o scadenza)."""

    subject: str
    email_body: str
    short_body: str
    mailto: Optional[str] = None
    whatsapp: Optional[str] = None
    sms: Optional[str] = None
