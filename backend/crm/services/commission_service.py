"""
Aggregazione delle provvigioni
Progetto: CRM Utenze

Funzioni pure sui contratti dello snapshot:
- sottoinsieme filtrato per anno / mese / fornitore (filtri in AND)
- totale, energia (tipo diverso da telefonia) e telefonia
- riepilogo del mese corrente, indipendente dai filtri
- numero di fornitori distinti per categoria

Un contratto senza data di stipula valida non soddisfa mai un filtro
attivo su anno o mese. La provvigione assente vale zero.
"""

import datetime
from decimal import Decimal
from typing import Iterable, Optional

from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.schemas.dashboard import CommissionFilter, CommissionSummary, ProviderCardinality


def matches_filter(contract: ContractRead, commission_filter: CommissionFilter) -> bool:
    """True se il contratto soddisfa tutte le dimensioni attive del filtro."""
    if commission_filter.year is not None or commission_filter.month is not None:
        start = contract.start_on
        if start is None:
            return False
        if commission_filter.year is not None and start.year != commission_filter.year:
            return False
        if commission_filter.month is not None and start.month != commission_filter.month:
            return False
    if commission_filter.provider is not None and contract.provider != commission_filter.provider:
        return False
    return True


def filter_contracts(
    contracts: Iterable[ContractRead],
    commission_filter: CommissionFilter,
) -> list[ContractRead]:
    return [c for c in contracts if matches_filter(c, commission_filter)]


def summarize(contracts: Iterable[ContractRead]) -> CommissionSummary:
    """
    Somme e conteggi su un insieme di contratti già filtrato.

    energy + telephony == total per costruzione: le due categorie
    partizionano l'insieme con il solo predicato type == telephony.
    """
    summary = {
        "total": Decimal("0"),
        "energy": Decimal("0"),
        "telephony": Decimal("0"),
        "count": 0,
        "energy_count": 0,
        "telephony_count": 0,
        "paid_total": Decimal("0"),
        "unpaid_total": Decimal("0"),
    }
    for contract in contracts:
        amount = contract.commission_amount
        summary["total"] += amount
        summary["count"] += 1
        if contract.is_telephony:
            summary["telephony"] += amount
            summary["telephony_count"] += 1
        else:
            summary["energy"] += amount
            summary["energy_count"] += 1
        if contract.is_paid:
            summary["paid_total"] += amount
        else:
            summary["unpaid_total"] += amount
    return CommissionSummary(**summary)


def aggregate(
    contracts: Iterable[ContractRead],
    commission_filter: CommissionFilter,
) -> tuple[list[ContractRead], CommissionSummary]:
    """Sottoinsieme filtrato e relativo riepilogo."""
    subset = filter_contracts(contracts, commission_filter)
    return subset, summarize(subset)


def this_month_summary(contracts: Iterable[ContractRead], today: datetime.date) -> CommissionSummary:
    """Riepilogo dei contratti stipulati nel mese corrente, ignorando i filtri utente."""
    current = CommissionFilter(year=today.year, month=today.month)
    return summarize(filter_contracts(contracts, current))


def provider_cardinality(contracts: Iterable[ContractRead]) -> ProviderCardinality:
    """
    Fornitori distinti per categoria, su tutti i contratti.

    Un fornitore presente in entrambe le categorie conta una volta in ciascuna.
    """
    energy: set[str] = set()
    telephony: set[str] = set()
    for contract in contracts:
        if not contract.provider:
            continue
        if contract.is_telephony:
            telephony.add(contract.provider)
        else:
            energy.add(contract.provider)
    return ProviderCardinality(energy=len(energy), telephony=len(telephony))


def available_years(contracts: Iterable[ContractRead]) -> list[int]:
    """Anni di stipula presenti, dal più recente."""
    years = {c.start_on.year for c in contracts if c.start_on is not None}
    return sorted(years, reverse=True)


def client_available_years(clients: Iterable[ClientRead], today: Optional[datetime.date] = None) -> list[int]:
    """Anni di creazione dei clienti, sempre comprensivi dell'anno corrente."""
    years = {c.created_at.year for c in clients if c.created_at is not None}
    if today is not None:
        years.add(today.year)
    return sorted(years, reverse=True)


def provider_names(contracts: Iterable[ContractRead]) -> list[str]:
    """Fornitori usati nei contratti, in ordine alfabetico (per i menu dei filtri)."""
    return sorted({c.provider for c in contracts if c.provider}, key=str.casefold)
