"""
Schemas Pydantic per l'entità Appointment
Progetto: CRM Utenze

Appuntamenti con clienti o potenziali clienti. Lo stato è una stringa
libera scelta dalla lista configurabile degli stati.
"""

import datetime
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crm.utils.dates import parse_iso_date

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Stati che escludono l'appuntamento dai "prossimi appuntamenti"
CLOSED_STATUSES = frozenset({"completato", "completed", "annullato", "cancelled"})


def _normalize_time(v: Optional[str]) -> Optional[str]:
    """Orario HH:MM; stringa vuota = nessun orario."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
        if not TIME_PATTERN.match(v):
            raise ValueError("Orario non valido, formato atteso HH:MM")
    return v


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class AppointmentBase(BaseModel):
    """Campi comuni a creazione e aggiornamento di un appuntamento."""

    client_name: str = Field(..., min_length=1, max_length=200, description="Cliente o potenziale cliente")
    provider: Optional[str] = Field(None, max_length=100, description="Fornitore di interesse")
    date: datetime.date = Field(..., description="Data appuntamento")
    time: Optional[str] = Field(None, description="Orario (HH:MM)")
    location: Optional[str] = Field(None, max_length=255, description="Luogo")
    notes: Optional[str] = Field(None, description="Note")
    status: str = Field(..., min_length=1, max_length=50, description="Stato (dalla lista stati)")

    _check_time = field_validator("time", mode="before")(_normalize_time)
    _strip_text = field_validator("client_name", "status", "provider", mode="before")(_strip)


class AppointmentCreate(AppointmentBase):
    """Schema per la creazione di un appuntamento."""
    pass


class AppointmentUpdate(AppointmentBase):
    """Schema per l'aggiornamento (sostituzione completa) di un appuntamento."""
    pass


class AppointmentStatusUpdate(BaseModel):
    """Cambio rapido di stato."""

    status: str = Field(..., min_length=1, max_length=50)

    _strip_status = field_validator("status", mode="before")(_strip)


class AppointmentRead(BaseModel):
    """Appuntamento come presente nell'archivio."""

    model_config = ConfigDict(extra="ignore")

    id: str
    client_name: str = ""
    provider: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: str = ""
    created_at: Optional[datetime.datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date_to_string(cls, v):
        if isinstance(v, (datetime.date, datetime.datetime)):
            return v.isoformat()
        return v

    @property
    def date_on(self) -> Optional[datetime.date]:
        return parse_iso_date(self.date)

    @property
    def is_open(self) -> bool:
        """False per appuntamenti completati o annullati."""
        return self.status.strip().lower() not in CLOSED_STATUSES


class AppointmentList(BaseModel):
    """Lista appuntamenti con totale."""

    items: list[AppointmentRead]
    total: int
