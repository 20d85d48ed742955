"""
Router per la dashboard
Progetto: CRM Utenze

Riepilogo dei widget, promemoria di check-up, scadenze, provvigioni,
grafici e messaggi al cliente. Tutti i dati sono calcolati dallo
snapshot corrente della sessione.
"""

import logging
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from crm.core.deps import Session, get_reminder_message_service
from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.dashboard import (
    ChartSeries,
    CheckupDismiss,
    CheckupList,
    CheckupType,
    CommissionFilter,
    CommissionReport,
    DashboardSummary,
    ExpiringContract,
    ExpiryStatusCounts,
    ReminderMessage,
    WidgetVisibility,
    checkup_key,
)
from crm.services import (
    checkup_service,
    commission_service,
    dashboard_service,
    expiry_service,
)
from crm.services.reminder_message_service import ReminderMessageService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


class ExpiryScope(str, Enum):
    """Soglia da applicare: canonica (dashboard, liste) o widget compatto."""
    SOON = "soon"
    COMPACT = "compact"


class ChartName(str, Enum):
    CONTRACTS = "contracts"
    CLIENTS = "clients"
    COMMISSIONS = "commissions"
    ENERGY_PROVIDERS = "energy_providers"
    TELEPHONY_PROVIDERS = "telephony_providers"
    PAID_STATUS = "paid_status"
    EXPIRY_STATUS = "expiry_status"


# -------------------------------------------------------------------
# Riepilogo
# -------------------------------------------------------------------

@router.get(
    "/summary",
    name="dashboard_riepilogo",
    summary="Riepilogo dei widget",
    response_model=DashboardSummary,
)
async def get_summary(session: Session) -> DashboardSummary:
    return dashboard_service.build_summary(session)


# -------------------------------------------------------------------
# Check-up
# -------------------------------------------------------------------

@router.get(
    "/checkups",
    name="checkup_lista",
    summary="Promemoria di check-up attivi",
    response_model=CheckupList,
)
async def get_checkups(session: Session) -> CheckupList:
    items = checkup_service.sort_checkup_items(
        checkup_service.compute_checkup_items(
            session.contracts, session.today(), session.dismissed_checkups, session.config
        )
    )
    return CheckupList(items=items, total=len(items))


@router.post(
    "/checkups/dismissed",
    name="checkup_archivia",
    summary="Archivia un promemoria",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def dismiss_checkup(data: CheckupDismiss, session: Session) -> None:
    """L'archiviazione è permanente e idempotente."""
    await session.dismiss_checkup(data.key)


@router.delete(
    "/checkups/dismissed",
    name="checkup_ripristina",
    summary="Ripristina tutti i promemoria archiviati",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def clear_dismissed_checkups(session: Session) -> None:
    await session.clear_dismissed_checkups()


@router.get(
    "/checkups/{contract_id}/{checkup_type}/message",
    name="checkup_messaggio",
    summary="Messaggio di richiesta bolletta",
    response_model=ReminderMessage,
)
async def get_checkup_message(
    contract_id: str,
    checkup_type: CheckupType,
    session: Session,
    messages: ReminderMessageService = Depends(get_reminder_message_service),
) -> ReminderMessage:
    """
    Raises:
        NotFoundError: Se il promemoria non è attivo o il cliente non esiste
    """
    key = checkup_key(contract_id, checkup_type)
    items = checkup_service.generate_checkup_items(session.contracts, session.today(), session.config)
    item = next((i for i in items if i.key == key), None)
    if item is None:
        raise NotFoundError(f"Promemoria {key} non attivo")

    client = session.find_client(item.contract.client_id)
    if client is None:
        raise NotFoundError(f"Cliente con ID {item.contract.client_id} non trovato")
    return messages.checkup_message(item, client)


# -------------------------------------------------------------------
# Scadenze
# -------------------------------------------------------------------

def _threshold(session, scope: ExpiryScope) -> int:
    if scope == ExpiryScope.COMPACT:
        return session.config.expiring_compact_days
    return session.config.expiring_soon_days


@router.get(
    "/expiring",
    name="scadenze_lista",
    summary="Contratti in scadenza",
    response_model=list[ExpiringContract],
)
async def get_expiring(
    session: Session,
    scope: ExpiryScope = Query(ExpiryScope.SOON, description="Soglia canonica o compatta"),
) -> list[ExpiringContract]:
    return expiry_service.expiring_contracts(
        session.contracts, session.today(), _threshold(session, scope)
    )


@router.get(
    "/expiry-status",
    name="scadenze_conteggi",
    summary="Conteggio contratti per stato di scadenza",
    response_model=ExpiryStatusCounts,
)
async def get_expiry_status(session: Session) -> ExpiryStatusCounts:
    return expiry_service.count_by_status(
        session.contracts, session.today(), session.config.expiring_soon_days
    )


@router.get(
    "/expiring/{contract_id}/message",
    name="scadenza_messaggio",
    summary="Promemoria di rinnovo",
    response_model=ReminderMessage,
)
async def get_expiry_message(
    contract_id: str,
    session: Session,
    messages: ReminderMessageService = Depends(get_reminder_message_service),
) -> ReminderMessage:
    contract = session.find_contract(contract_id)
    if contract is None:
        raise NotFoundError(f"Contratto con ID {contract_id} non trovato")
    client = session.find_client(contract.client_id)
    if client is None:
        raise NotFoundError(f"Cliente con ID {contract.client_id} non trovato")
    return messages.expiry_message(contract, client)


# -------------------------------------------------------------------
# Provvigioni
# -------------------------------------------------------------------

def get_commission_filter(
    year: Optional[str] = Query(None, description="Anno o 'all'"),
    month: Optional[str] = Query(None, description="Mese (1-12) o 'all'"),
    provider: Optional[str] = Query(None, description="Fornitore o 'all'"),
) -> CommissionFilter:
    """
    Filtri del pannello provvigioni dai parametri di query.

    Raises:
        BusinessValidationError: Se anno o mese non sono validi
    """
    try:
        return CommissionFilter(year=year, month=month, provider=provider)
    except ValidationError as e:
        fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise BusinessValidationError(
            f"Filtro provvigioni non valido: {', '.join(fields)}",
            extra={"fields": fields},
        ) from e


@router.get(
    "/commissions",
    name="provvigioni",
    summary="Pannello provvigioni",
    response_model=CommissionReport,
)
async def get_commissions(
    session: Session,
    commission_filter: CommissionFilter = Depends(get_commission_filter),
) -> CommissionReport:
    """Riepilogo filtrato più il mese corrente, che ignora i filtri."""
    contracts = session.contracts
    subset, summary = commission_service.aggregate(contracts, commission_filter)
    return CommissionReport(
        filter=commission_filter,
        summary=summary,
        this_month=commission_service.this_month_summary(contracts, session.today()),
        providers=commission_service.provider_cardinality(contracts),
        available_years=commission_service.available_years(contracts),
        contracts=subset,
    )


@router.get(
    "/commissions/providers",
    name="provvigioni_fornitori",
    summary="Fornitori presenti nei contratti",
)
async def get_commission_providers(session: Session) -> list[str]:
    return commission_service.provider_names(session.contracts)


# -------------------------------------------------------------------
# Grafici
# -------------------------------------------------------------------

@router.get(
    "/charts/{name}",
    name="grafico",
    summary="Serie per un grafico",
    response_model=ChartSeries,
)
async def get_chart(
    name: ChartName,
    session: Session,
    year: Optional[int] = Query(None, description="Anno; per i contratti vuoto = tutti gli anni"),
) -> ChartSeries:
    today = session.today()
    contracts = session.contracts

    if name == ChartName.CONTRACTS:
        return dashboard_service.contracts_per_period(contracts, year)
    if name == ChartName.CLIENTS:
        return dashboard_service.clients_per_month(session.clients, year or today.year)
    if name == ChartName.COMMISSIONS:
        return dashboard_service.commission_per_month(contracts, year or today.year)
    if name == ChartName.ENERGY_PROVIDERS:
        return dashboard_service.provider_distribution(contracts, telephony=False)
    if name == ChartName.TELEPHONY_PROVIDERS:
        return dashboard_service.provider_distribution(contracts, telephony=True)
    if name == ChartName.PAID_STATUS:
        return dashboard_service.paid_status_distribution(contracts)
    return dashboard_service.expiry_status_distribution(
        contracts, today, session.config.expiring_soon_days
    )


@router.get(
    "/charts/clients/years",
    name="grafico_clienti_anni",
    summary="Anni disponibili per il grafico clienti",
)
async def get_client_chart_years(session: Session) -> list[int]:
    return commission_service.client_available_years(session.clients, session.today())


# -------------------------------------------------------------------
# Widget
# -------------------------------------------------------------------

@router.get(
    "/widgets",
    name="widget_visibilita",
    summary="Visibilità dei widget",
    response_model=WidgetVisibility,
)
async def get_widgets(session: Session) -> WidgetVisibility:
    return WidgetVisibility(widgets=await session.widget_visibility())


@router.put(
    "/widgets",
    name="widget_visibilita_salva",
    summary="Salva la visibilità dei widget",
    response_model=WidgetVisibility,
)
async def save_widgets(data: WidgetVisibility, session: Session) -> WidgetVisibility:
    """Gli identificativi sconosciuti vengono ignorati."""
    return WidgetVisibility(widgets=await session.save_widget_visibility(data.widgets))
