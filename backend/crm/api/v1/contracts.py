"""
Router FastAPI per l'entità Contract
Progetto: CRM Utenze

Lista con filtri e ordinamento, CRUD, stato di incasso e pulizia
dei contratti orfani.
"""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from crm.core.deps import get_contract_service
from crm.schemas.contract import (
    ContractCreate,
    ContractList,
    ContractListFilter,
    ContractPaidUpdate,
    ContractRead,
    ContractSortKey,
    ContractType,
    ContractUpdate,
)
from crm.services.contract_service import ContractService

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/contracts",
    tags=["Contratti"],
)


@router.get(
    "/",
    name="contratti_lista",
    summary="Lista contratti",
    response_model=ContractList,
)
async def get_contracts(
    client_id: Optional[str] = Query(None, description="Solo i contratti di questo cliente"),
    type: Optional[ContractType] = Query(None, description="Tipo di contratto"),
    year: Optional[int] = Query(None, description="Anno di stipula"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Mese di stipula"),
    provider: Optional[str] = Query(None, description="Fornitore ('all' per tutti)"),
    start_from: Optional[datetime.date] = Query(None),
    start_to: Optional[datetime.date] = Query(None),
    end_from: Optional[datetime.date] = Query(None),
    end_to: Optional[datetime.date] = Query(None),
    sort_by: ContractSortKey = Query(ContractSortKey.CLIENT_NAME, description="Campo di ordinamento"),
    descending: bool = Query(False, description="Ordine decrescente"),
    service: ContractService = Depends(get_contract_service),
) -> ContractList:
    """
    Contratti visibili filtrati e ordinati.

    I contratti senza cliente o senza scadenza finiscono in fondo in
    entrambe le direzioni di ordinamento.
    """
    list_filter = ContractListFilter(
        client_id=client_id,
        type=type,
        year=year,
        month=month,
        provider=None if provider in (None, "", "all") else provider,
        start_from=start_from,
        start_to=start_to,
        end_from=end_from,
        end_to=end_to,
    )
    items = service.get_all(list_filter, sort_by, descending)
    return ContractList(items=items, total=len(items))


@router.get(
    "/{contract_id}",
    name="contratto_dettaglio",
    summary="Dettaglio contratto",
    response_model=ContractRead,
)
async def get_contract(
    contract_id: str,
    service: ContractService = Depends(get_contract_service),
) -> ContractRead:
    return service.get_by_id(contract_id)


@router.post(
    "/",
    name="contratto_crea",
    summary="Crea contratto",
    response_model=ContractRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_contract(
    contract_data: ContractCreate,
    service: ContractService = Depends(get_contract_service),
) -> ContractRead:
    """
    Raises:
        NotFoundError: Se il cliente indicato non esiste
        BusinessValidationError: Se il tipo di operazione non è in elenco
    """
    return await service.create(contract_data)


@router.put(
    "/{contract_id}",
    name="contratto_aggiorna",
    summary="Aggiorna contratto",
    response_model=ContractRead,
)
async def update_contract(
    contract_id: str,
    contract_data: ContractUpdate,
    service: ContractService = Depends(get_contract_service),
) -> ContractRead:
    return await service.update(contract_id, contract_data)


@router.patch(
    "/{contract_id}/paid",
    name="contratto_incasso",
    summary="Imposta lo stato di incasso",
    response_model=ContractRead,
)
async def set_contract_paid(
    contract_id: str,
    data: ContractPaidUpdate,
    service: ContractService = Depends(get_contract_service),
) -> ContractRead:
    return await service.set_paid(contract_id, data.is_paid)


@router.post(
    "/{contract_id}/toggle-paid",
    name="contratto_incasso_inverti",
    summary="Inverte lo stato di incasso",
    response_model=ContractRead,
)
async def toggle_contract_paid(
    contract_id: str,
    service: ContractService = Depends(get_contract_service),
) -> ContractRead:
    return await service.toggle_paid(contract_id)


@router.delete(
    "/{contract_id}",
    name="contratto_elimina",
    summary="Elimina contratto",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_contract(
    contract_id: str,
    service: ContractService = Depends(get_contract_service),
) -> None:
    await service.delete(contract_id)


@router.post(
    "/sweep-orphans",
    name="contratti_orfani_pulizia",
    summary="Elimina i contratti senza cliente",
)
async def sweep_orphan_contracts(
    service: ContractService = Depends(get_contract_service),
) -> dict[str, int]:
    """Completa le cancellazioni di clienti interrotte a metà."""
    removed = await service.sweep_orphans()
    logger.info("Pulizia contratti orfani: %s rimossi", removed)
    return {"removed": removed}
