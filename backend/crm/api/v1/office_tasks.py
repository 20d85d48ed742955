"""
Router FastAPI per le attività d'ufficio
Progetto: CRM Utenze
"""

from fastapi import APIRouter, Depends, status

from crm.core.deps import get_office_task_service
from crm.schemas.office_task import (
    OfficeTaskCreate,
    OfficeTaskList,
    OfficeTaskRead,
    OfficeTaskUpdate,
)
from crm.services.dashboard_service import sort_office_tasks
from crm.services.office_task_service import OfficeTaskService

router = APIRouter(
    prefix="/office-tasks",
    tags=["Attività"],
)


@router.get(
    "/",
    name="attivita_lista",
    summary="Lista attività",
    response_model=OfficeTaskList,
)
async def get_office_tasks(
    service: OfficeTaskService = Depends(get_office_task_service),
) -> OfficeTaskList:
    """Prima le attività da completare, poi le più recenti."""
    items = sort_office_tasks(service.get_all())
    return OfficeTaskList(items=items, total=len(items))


@router.post(
    "/",
    name="attivita_crea",
    summary="Crea attività",
    response_model=OfficeTaskRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_office_task(
    data: OfficeTaskCreate,
    service: OfficeTaskService = Depends(get_office_task_service),
) -> OfficeTaskRead:
    return await service.create(data)


@router.patch(
    "/{task_id}",
    name="attivita_aggiorna",
    summary="Aggiorna attività",
    response_model=OfficeTaskRead,
)
async def update_office_task(
    task_id: str,
    data: OfficeTaskUpdate,
    service: OfficeTaskService = Depends(get_office_task_service),
) -> OfficeTaskRead:
    return await service.update(task_id, data)


@router.post(
    "/{task_id}/toggle",
    name="attivita_inverti",
    summary="Segna come fatta / da fare",
    response_model=OfficeTaskRead,
)
async def toggle_office_task(
    task_id: str,
    service: OfficeTaskService = Depends(get_office_task_service),
) -> OfficeTaskRead:
    return await service.toggle(task_id)


@router.delete(
    "/{task_id}",
    name="attivita_elimina",
    summary="Elimina attività",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_office_task(
    task_id: str,
    service: OfficeTaskService = Depends(get_office_task_service),
) -> None:
    await service.delete(task_id)
