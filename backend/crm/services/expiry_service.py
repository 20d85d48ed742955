"""
Classificazione delle scadenze dei contratti
Progetto: CRM Utenze

Ogni contratto ricade in esattamente una delle quattro classi:
- senza data di scadenza (o con data non interpretabile): attivo senza scadenza
- scadenza < oggi: scaduto
- oggi <= scadenza <= oggi + soglia: in scadenza
- scadenza > oggi + soglia: attivo

La soglia è sempre passata dal chiamante: expiring_soon_days (60) per
dashboard, badge e liste; expiring_compact_days (30) per il widget compatto.
"""

import datetime
from typing import Iterable, Optional

from crm.schemas.contract import ContractRead
from crm.schemas.dashboard import ExpiringContract, ExpiryStatus, ExpiryStatusCounts
from crm.utils.dates import days_between


def classify_expiry(
    end_date: Optional[datetime.date],
    today: datetime.date,
    threshold_days: int,
) -> ExpiryStatus:
    """Classe di scadenza di una singola data (funzione totale)."""
    if end_date is None:
        return ExpiryStatus.ACTIVE_NO_END
    if end_date < today:
        return ExpiryStatus.EXPIRED
    if end_date <= today + datetime.timedelta(days=threshold_days):
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.ACTIVE


def classify_contract(contract: ContractRead, today: datetime.date, threshold_days: int) -> ExpiryStatus:
    return classify_expiry(contract.end_on, today, threshold_days)


def days_until(end_date: datetime.date, today: datetime.date) -> int:
    return days_between(today, end_date)


def describe_days_remaining(days: int) -> str:
    """Etichetta per i giorni residui alla scadenza."""
    if days < 0:
        return "Scaduto"
    if days == 0:
        return "Scade oggi"
    if days == 1:
        return "Scade domani"
    return f"Scade tra {days} giorni"


def expiring_contracts(
    contracts: Iterable[ContractRead],
    today: datetime.date,
    threshold_days: int,
) -> list[ExpiringContract]:
    """Contratti in scadenza, dal più vicino alla scadenza."""
    items = []
    for contract in contracts:
        if classify_contract(contract, today, threshold_days) != ExpiryStatus.EXPIRING_SOON:
            continue
        days = days_until(contract.end_on, today)
        items.append(
            ExpiringContract(
                contract=contract,
                end_date=contract.end_on,
                days_remaining=days,
                label=describe_days_remaining(days),
            )
        )
    return sorted(items, key=lambda item: item.end_date)


def count_by_status(
    contracts: Iterable[ContractRead],
    today: datetime.date,
    threshold_days: int,
) -> ExpiryStatusCounts:
    counts = {status.value: 0 for status in ExpiryStatus}
    for contract in contracts:
        counts[classify_contract(contract, today, threshold_days).value] += 1
    return ExpiryStatusCounts(**counts)
