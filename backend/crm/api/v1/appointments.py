"""
Router FastAPI per l'entità Appointment
Progetto: CRM Utenze
"""

from fastapi import APIRouter, Depends, status

from crm.core.deps import get_appointment_service
from crm.schemas.appointment import (
    AppointmentCreate,
    AppointmentList,
    AppointmentRead,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from crm.services.appointment_service import AppointmentService

router = APIRouter(
    prefix="/appointments",
    tags=["Appuntamenti"],
)


@router.get(
    "/",
    name="appuntamenti_lista",
    summary="Lista appuntamenti",
    response_model=AppointmentList,
)
async def get_appointments(
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentList:
    items = service.get_all()
    return AppointmentList(items=items, total=len(items))


@router.get(
    "/{appointment_id}",
    name="appuntamento_dettaglio",
    summary="Dettaglio appuntamento",
    response_model=AppointmentRead,
)
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentRead:
    return service.get_by_id(appointment_id)


@router.post(
    "/",
    name="appuntamento_crea",
    summary="Crea appuntamento",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentRead:
    """
    Raises:
        BusinessValidationError: Se lo stato non è nella lista degli stati
    """
    return await service.create(data)


@router.put(
    "/{appointment_id}",
    name="appuntamento_aggiorna",
    summary="Aggiorna appuntamento",
    response_model=AppointmentRead,
)
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentRead:
    return await service.update(appointment_id, data)


@router.patch(
    "/{appointment_id}/status",
    name="appuntamento_stato",
    summary="Cambia stato appuntamento",
    response_model=AppointmentRead,
)
async def update_appointment_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentRead:
    return await service.update_status(appointment_id, data.status)


@router.delete(
    "/{appointment_id}",
    name="appuntamento_elimina",
    summary="Elimina appuntamento",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
) -> None:
    await service.delete(appointment_id)
