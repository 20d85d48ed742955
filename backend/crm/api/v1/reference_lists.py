"""
Router per le liste di riferimento
Progetto: CRM Utenze

Fornitori, tipi di operazione e stati appuntamento.
"""

from fastapi import APIRouter, Depends

from crm.core.deps import get_reference_list_service
from crm.schemas.reference_list import (
    ReferenceListKind,
    ReferenceListRead,
    ReferenceValue,
    ReferenceValueIn,
)
from crm.services.reference_list_service import ReferenceListService

router = APIRouter(
    prefix="/reference-lists",
    tags=["Liste di riferimento"],
)


@router.get(
    "/{kind}",
    name="lista_valori",
    summary="Valori della lista",
    response_model=ReferenceListRead,
)
async def get_reference_list(
    kind: ReferenceListKind,
    service: ReferenceListService = Depends(get_reference_list_service),
) -> ReferenceListRead:
    return ReferenceListRead(kind=kind, values=await service.list_values(kind))


@router.post(
    "/{kind}",
    name="lista_aggiungi",
    summary="Aggiunge un valore",
    response_model=ReferenceListRead,
)
async def add_reference_value(
    kind: ReferenceListKind,
    data: ReferenceValueIn,
    service: ReferenceListService = Depends(get_reference_list_service),
) -> ReferenceListRead:
    """Idempotente: un valore già presente non viene duplicato."""
    return ReferenceListRead(kind=kind, values=await service.add(kind, data.value))


@router.post(
    "/{kind}/remove",
    name="lista_rimuovi",
    summary="Rimuove un valore",
    response_model=ReferenceListRead,
)
async def remove_reference_value(
    kind: ReferenceListKind,
    data: ReferenceValueIn,
    service: ReferenceListService = Depends(get_reference_list_service),
) -> ReferenceListRead:
    """
    Le entità che usano il valore lo conservano: diventa legacy.
    """
    return ReferenceListRead(kind=kind, values=await service.remove(kind, data.value))


@router.get(
    "/{kind}/tag",
    name="lista_verifica_valore",
    summary="Verifica se un valore è legacy",
    response_model=ReferenceValue,
)
async def tag_reference_value(
    kind: ReferenceListKind,
    value: str,
    service: ReferenceListService = Depends(get_reference_list_service),
) -> ReferenceValue:
    return service.tag(kind, value)
