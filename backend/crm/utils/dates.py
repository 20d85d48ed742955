"""
Utility per date di calendario
Progetto: CRM Utenze

Tutte le funzioni lavorano a granularità di giorno: gli orari vengono
scartati prima di qualsiasi confronto.
"""

from __future__ import annotations
import calendar
import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo


def add_months(value: datetime.date, months: int) -> datetime.date:
    """
    Somma (o sottrae) mesi di calendario a una data.

    Se il giorno non esiste nel mese di destinazione viene usato
    l'ultimo giorno di quel mese: 31/01 + 1 mese = 28/02 (29/02 nei bisestili).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(value.day, last_day))


def parse_iso_date(value: Any) -> Optional[datetime.date]:
    """
    Converte un valore in data di calendario.

    Accetta date, datetime e stringhe ISO ("2024-01-31" oppure
    "2024-01-31T10:00:00"). Restituisce None per valori assenti
    o non interpretabili, senza sollevare eccezioni.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return datetime.date.fromisoformat(text[:10])
    except ValueError:
        return None


def days_between(start: datetime.date, end: datetime.date) -> int:
    """Giorni di calendario da start a end (negativo se end precede start)."""
    return (end - start).days


def today_in(timezone: str) -> datetime.date:
    """Data odierna nel fuso orario indicato."""
    return datetime.datetime.now(ZoneInfo(timezone)).date()


def now_utc() -> datetime.datetime:
    """Timestamp corrente in UTC, usato per i createdAt."""
    return datetime.datetime.now(datetime.timezone.utc)
