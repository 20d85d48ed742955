"""
Promemoria di verifica periodica (T4 / T8)
Progetto: CRM Utenze

Per ogni contratto con data di stipula valida:
- T4 = stipula + checkup_t4_months mesi (default 6)
- T8 = stipula + checkup_t8_months mesi (default 10)

Un promemoria è attivo se la data odierna cade entro ±checkup_window_days
giorni dalla data di verifica. I due promemoria sono indipendenti: un
contratto può comparire zero, una o due volte.

I promemoria non vengono mai salvati: si ricalcolano a ogni richiesta.
Persiste solo l'insieme delle chiavi archiviate ("{contract_id}_{tipo}").
"""

import datetime
from typing import Iterable, Optional

from crm.core.config import Settings
from crm.schemas.contract import ContractRead
from crm.schemas.dashboard import CheckupItem, CheckupType, checkup_key
from crm.utils.dates import add_months, days_between


def checkup_dates(start: datetime.date, config: Settings) -> dict[CheckupType, datetime.date]:
    """Date di verifica T4 e T8 per una data di stipula."""
    return {
        CheckupType.T4: add_months(start, config.checkup_t4_months),
        CheckupType.T8: add_months(start, config.checkup_t8_months),
    }


def in_window(days_diff: int, window_days: int) -> bool:
    return abs(days_diff) <= window_days


def generate_checkup_items(
    contracts: Iterable[ContractRead],
    today: datetime.date,
    config: Settings,
) -> list[CheckupItem]:
    """
    Promemoria candidati, prima del filtro degli archiviati.

    I contratti senza data di stipula, o con data non interpretabile,
    vengono ignorati.
    """
    items = []
    for contract in contracts:
        start = contract.start_on
        if start is None:
            continue
        for checkup_type, target in checkup_dates(start, config).items():
            diff = days_between(today, target)
            if in_window(diff, config.checkup_window_days):
                items.append(
                    CheckupItem(contract=contract, type=checkup_type, target_date=target, days_diff=diff)
                )
    return items


def apply_dismissals(items: Iterable[CheckupItem], dismissed: Iterable[str]) -> list[CheckupItem]:
    """Rimuove i promemoria la cui chiave è nell'insieme degli archiviati."""
    dismissed_keys = frozenset(dismissed)
    return [item for item in items if checkup_key(item.contract.id, item.type) not in dismissed_keys]


def compute_checkup_items(
    contracts: Iterable[ContractRead],
    today: datetime.date,
    dismissed: Optional[Iterable[str]],
    config: Settings,
) -> list[CheckupItem]:
    """Promemoria attivi e non archiviati. L'ordine non è garantito."""
    return apply_dismissals(generate_checkup_items(contracts, today, config), dismissed or ())


def sort_checkup_items(items: Iterable[CheckupItem]) -> list[CheckupItem]:
    """Ordine di visualizzazione: prima i più in ritardo, poi i più vicini."""
    return sorted(items, key=lambda item: (item.days_diff, item.type.value, item.contract.id))
