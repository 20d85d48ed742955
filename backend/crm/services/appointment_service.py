"""
Service Layer per l'entità Appointment
Progetto: CRM Utenze

Lo stato è validato sulla lista degli stati solo in inserimento o
quando viene modificato: gli appuntamenti con uno stato rimosso dalla
lista restano leggibili e aggiornabili.
"""

import logging
from typing import Optional

from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.appointment import AppointmentCreate, AppointmentRead, AppointmentUpdate
from crm.schemas.reference_list import ReferenceListKind
from crm.services.crm_session import CrmSession, store_operation
from crm.services.entity_store import APPOINTMENTS
from crm.utils.dates import now_utc

# Logger per questo modulo
logger = logging.getLogger(__name__)


class AppointmentService:
    """Service per la gestione delle operazioni CRUD sugli appuntamenti."""

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    def get_all(self) -> list[AppointmentRead]:
        return self.session.appointments

    def get_by_id(self, appointment_id: str) -> AppointmentRead:
        """
        Raises:
            NotFoundError: Se l'appuntamento non esiste
        """
        appointment = self.session.find_appointment(appointment_id)
        if appointment is None:
            logger.warning("Appuntamento non trovato: %s", appointment_id)
            raise NotFoundError(f"Appuntamento con ID {appointment_id} non trovato")
        return appointment

    def _check_status(self, status: str, previous: Optional[str] = None) -> None:
        if status == previous:
            return
        statuses = self.session.reference_list(ReferenceListKind.APPOINTMENT_STATUSES)
        if not statuses.contains(status):
            raise BusinessValidationError(
                f"Lo stato '{status}' non è tra quelli configurati",
                extra={"field": "status"},
            )

    async def create(self, data: AppointmentCreate) -> AppointmentRead:
        """
        Raises:
            BusinessValidationError: Se lo stato non è in lista
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        self._check_status(data.status)

        payload = data.model_dump(mode="json")
        payload["created_at"] = now_utc().isoformat()
        async with store_operation("creazione appuntamento"):
            document = await self.session.store.create(APPOINTMENTS, payload)

        appointment = AppointmentRead.model_validate(document)
        self.session.put_appointment(appointment)
        logger.info("Creato appuntamento: %s (%s)", appointment.id, appointment.client_name)
        return appointment

    async def update(self, appointment_id: str, data: AppointmentUpdate) -> AppointmentRead:
        existing = self.get_by_id(appointment_id)
        self._check_status(data.status, previous=existing.status)

        payload = data.model_dump(mode="json")
        payload["created_at"] = existing.created_at.isoformat() if existing.created_at else None
        return await self._replace(appointment_id, payload)

    async def update_status(self, appointment_id: str, status: str) -> AppointmentRead:
        """Cambio rapido di stato dal widget."""
        existing = self.get_by_id(appointment_id)
        self._check_status(status, previous=existing.status)

        payload = existing.model_dump(mode="json", exclude={"id"})
        payload["status"] = status
        return await self._replace(appointment_id, payload)

    async def _replace(self, appointment_id: str, payload: dict) -> AppointmentRead:
        async with store_operation(
            f"aggiornamento appuntamento {appointment_id}",
            not_found_detail=f"Appuntamento con ID {appointment_id} non trovato",
        ):
            document = await self.session.store.replace(APPOINTMENTS, appointment_id, payload)

        appointment = AppointmentRead.model_validate(document)
        self.session.put_appointment(appointment)
        logger.info("Aggiornato appuntamento: %s", appointment_id)
        return appointment

    async def delete(self, appointment_id: str) -> None:
        self.get_by_id(appointment_id)
        async with store_operation(
            f"eliminazione appuntamento {appointment_id}",
            not_found_detail=f"Appuntamento con ID {appointment_id} non trovato",
        ):
            await self.session.store.delete(APPOINTMENTS, appointment_id)
        self.session.drop_appointment(appointment_id)
        logger.info("Eliminato appuntamento: %s", appointment_id)
