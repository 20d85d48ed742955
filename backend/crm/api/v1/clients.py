"""
Router FastAPI per l'entità Client
Progetto: CRM Utenze

Definisce gli endpoint API per la gestione dei clienti.
"""

import logging

from fastapi import APIRouter, Depends, status

from crm.core.deps import get_client_service, get_contract_service
from crm.schemas.client import ClientCreate, ClientList, ClientRead, ClientUpdate
from crm.schemas.contract import ContractList, ContractListFilter
from crm.services.client_service import ClientService
from crm.services.contract_service import ContractService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/clients",
    tags=["Clienti"],
)


@router.get(
    "/",
    name="clienti_lista",
    summary="Lista clienti",
    response_model=ClientList,
)
async def get_clients(service: ClientService = Depends(get_client_service)) -> ClientList:
    """Tutti i clienti dello snapshot corrente."""
    clients = service.get_all()
    return ClientList(items=clients, total=len(clients))


@router.get(
    "/{client_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    response_model=ClientRead,
)
async def get_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Raises:
        NotFoundError: Se il cliente non esiste
    """
    return service.get_by_id(client_id)


@router.get(
    "/{client_id}/contracts",
    name="cliente_contratti",
    summary="Contratti del cliente",
    response_model=ContractList,
)
async def get_client_contracts(
    client_id: str,
    clients: ClientService = Depends(get_client_service),
    contracts: ContractService = Depends(get_contract_service),
) -> ContractList:
    clients.get_by_id(client_id)
    items = contracts.get_all(ContractListFilter(client_id=client_id))
    return ContractList(items=items, total=len(items))


@router.post(
    "/",
    name="cliente_crea",
    summary="Crea cliente",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    client_data: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    return await service.create(client_data)


@router.put(
    "/{client_id}",
    name="cliente_aggiorna",
    summary="Aggiorna cliente",
    response_model=ClientRead,
)
async def update_client(
    client_id: str,
    client_data: ClientUpdate,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """
    Sostituisce i dati del cliente; la data di creazione resta invariata.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    return await service.update(client_id, client_data)


@router.delete(
    "/{client_id}",
    name="cliente_elimina",
    summary="Elimina cliente e contratti",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
) -> None:
    """
    Elimina prima tutti i contratti del cliente, poi il cliente.

    Raises:
        NotFoundError: Se il cliente non esiste
        TransientStoreError: Se l'archivio non è raggiungibile
    """
    removed = await service.delete(client_id)
    logger.info("Cliente %s eliminato via API (%s contratti)", client_id, removed)
