"""
Statistiche della dashboard
Progetto: CRM Utenze

Serie per i grafici (mensili, annuali, a torta), appuntamenti imminenti,
ordinamento delle attività e riepilogo dei widget. Tutte le funzioni
leggono lo snapshot senza modificarlo.
"""

import datetime
from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional

from crm.schemas.appointment import AppointmentRead
from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.schemas.dashboard import (
    EXPIRY_STATUS_LABELS,
    ChartPoint,
    ChartSeries,
    CommissionFilter,
    DashboardSummary,
    ExpiryStatus,
)
from crm.schemas.office_task import OfficeTaskRead
from crm.services import checkup_service, commission_service, expiry_service
from crm.services.crm_session import CrmSession

MONTH_LABELS = ("Gen", "Feb", "Mar", "Apr", "Mag", "Giu", "Lug", "Ago", "Set", "Ott", "Nov", "Dic")


# -------------------------------------------------------------------
# Serie temporali
# -------------------------------------------------------------------

def contracts_per_period(contracts: Iterable[ContractRead], year: Optional[int]) -> ChartSeries:
    """
    Numero di contratti stipulati.

    Con un anno: 12 punti mensili. Senza anno: un punto per ogni anno
    presente, in ordine crescente.
    """
    dated = [c.start_on for c in contracts if c.start_on is not None]
    if year is None:
        per_year = Counter(d.year for d in dated)
        return ChartSeries(
            title="Contratti per anno",
            points=[ChartPoint(label=str(y), value=per_year[y]) for y in sorted(per_year)],
        )

    per_month = Counter(d.month for d in dated if d.year == year)
    return ChartSeries(
        title=f"Contratti {year}",
        points=[ChartPoint(label=MONTH_LABELS[m - 1], value=per_month[m]) for m in range(1, 13)],
    )


def clients_per_month(clients: Iterable[ClientRead], year: int) -> ChartSeries:
    """Nuovi clienti per mese (data di creazione)."""
    per_month = Counter(
        c.created_at.month for c in clients if c.created_at is not None and c.created_at.year == year
    )
    return ChartSeries(
        title=f"Nuovi clienti {year}",
        points=[ChartPoint(label=MONTH_LABELS[m - 1], value=per_month[m]) for m in range(1, 13)],
    )


def commission_per_month(contracts: Iterable[ContractRead], year: int) -> ChartSeries:
    """Provvigioni per mese di stipula."""
    totals = {m: Decimal("0") for m in range(1, 13)}
    for contract in contracts:
        start = contract.start_on
        if start is not None and start.year == year:
            totals[start.month] += contract.commission_amount
    return ChartSeries(
        title=f"Provvigioni {year}",
        points=[ChartPoint(label=MONTH_LABELS[m - 1], value=totals[m]) for m in range(1, 13)],
    )


# -------------------------------------------------------------------
# Grafici a torta
# -------------------------------------------------------------------

def provider_distribution(contracts: Iterable[ContractRead], telephony: bool) -> ChartSeries:
    """Contratti per fornitore nella categoria indicata, dal più frequente."""
    counts = Counter(
        c.provider or "N/D" for c in contracts if c.is_telephony == telephony
    )
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0].casefold()))
    return ChartSeries(
        title="Fornitori telefonia" if telephony else "Fornitori energia",
        points=[ChartPoint(label=name, value=count) for name, count in ordered],
    )


def paid_status_distribution(contracts: Iterable[ContractRead]) -> ChartSeries:
    contracts = list(contracts)
    paid = sum(1 for c in contracts if c.is_paid)
    return ChartSeries(
        title="Stato incasso provvigioni",
        points=[
            ChartPoint(label="Pagato", value=paid),
            ChartPoint(label="Non pagato", value=len(contracts) - paid),
        ],
    )


def expiry_status_distribution(
    contracts: Iterable[ContractRead],
    today: datetime.date,
    threshold_days: int,
) -> ChartSeries:
    counts = expiry_service.count_by_status(contracts, today, threshold_days)
    return ChartSeries(
        title="Stato contratti",
        points=[
            ChartPoint(label=EXPIRY_STATUS_LABELS[status], value=getattr(counts, status.value))
            for status in ExpiryStatus
        ],
    )


# -------------------------------------------------------------------
# Appuntamenti e attività
# -------------------------------------------------------------------

def upcoming_appointments(appointments: Iterable[AppointmentRead], limit: int) -> list[AppointmentRead]:
    """
    Appuntamenti non completati né annullati, per data e ora.

    Un appuntamento senza orario vale come mezzanotte; uno senza data
    valida va in fondo.
    """
    open_items = [a for a in appointments if a.is_open]

    def moment(appointment: AppointmentRead) -> tuple[int, datetime.date, str]:
        day = appointment.date_on
        if day is None:
            return 1, datetime.date.max, ""
        return 0, day, appointment.time or "00:00"

    return sorted(open_items, key=moment)[:limit]


def sort_office_tasks(tasks: Iterable[OfficeTaskRead]) -> list[OfficeTaskRead]:
    """Prima le attività da completare, poi per data di creazione dalla più recente."""
    epoch = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)

    def created(task: OfficeTaskRead) -> datetime.datetime:
        value = task.created_at
        if value is None:
            return epoch
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value

    newest_first = sorted(tasks, key=created, reverse=True)
    return sorted(newest_first, key=lambda t: t.is_completed)


# -------------------------------------------------------------------
# Riepilogo
# -------------------------------------------------------------------

def build_summary(session: CrmSession, today: Optional[datetime.date] = None) -> DashboardSummary:
    """Riepilogo dei widget calcolato dallo snapshot corrente."""
    today = today or session.today()
    config = session.config
    contracts = session.contracts

    checkups = checkup_service.compute_checkup_items(
        contracts, today, session.dismissed_checkups, config
    )
    expiring = expiry_service.expiring_contracts(contracts, today, config.expiring_soon_days)
    tasks = sort_office_tasks(session.office_tasks)
    open_tasks = [t for t in tasks if not t.is_completed]
    telephony_count = sum(1 for c in contracts if c.is_telephony)

    return DashboardSummary(
        today=today,
        clients_count=len(session.clients),
        contracts_count=len(contracts),
        energy_contracts_count=len(contracts) - telephony_count,
        telephony_contracts_count=telephony_count,
        expiring_count=len(expiring),
        expiring_threshold_days=config.expiring_soon_days,
        checkups_count=len(checkups),
        orphan_contracts_count=len(session.orphan_contracts()),
        this_month=commission_service.this_month_summary(contracts, today),
        overall=commission_service.summarize(
            commission_service.filter_contracts(contracts, CommissionFilter())
        ),
        providers=commission_service.provider_cardinality(contracts),
        upcoming_appointments=upcoming_appointments(
            session.appointments, config.upcoming_appointments_limit
        ),
        open_tasks=open_tasks,
        open_tasks_count=len(open_tasks),
    )
