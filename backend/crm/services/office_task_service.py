"""
Service Layer per le attività d'ufficio
Progetto: CRM Utenze
"""

import logging

from crm.core.exceptions import NotFoundError
from crm.schemas.office_task import OfficeTaskCreate, OfficeTaskRead, OfficeTaskUpdate
from crm.services.crm_session import CrmSession, store_operation
from crm.services.entity_store import OFFICE_TASKS
from crm.utils.dates import now_utc

# Logger per questo modulo
logger = logging.getLogger(__name__)


class OfficeTaskService:
    """Service per la lista delle attività d'ufficio."""

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    def get_all(self) -> list[OfficeTaskRead]:
        return self.session.office_tasks

    def get_by_id(self, task_id: str) -> OfficeTaskRead:
        task = self.session.find_office_task(task_id)
        if task is None:
            logger.warning("Attività non trovata: %s", task_id)
            raise NotFoundError(f"Attività con ID {task_id} non trovata")
        return task

    async def create(self, data: OfficeTaskCreate) -> OfficeTaskRead:
        payload = {
            "title": data.title,
            "is_completed": False,
            "created_at": now_utc().isoformat(),
        }
        async with store_operation("creazione attività"):
            document = await self.session.store.create(OFFICE_TASKS, payload)

        task = OfficeTaskRead.model_validate(document)
        self.session.put_office_task(task)
        logger.info("Creata attività: %s", task.id)
        return task

    async def update(self, task_id: str, data: OfficeTaskUpdate) -> OfficeTaskRead:
        """Aggiornamento parziale di titolo e stato."""
        existing = self.get_by_id(task_id)

        payload = existing.model_dump(mode="json", exclude={"id"})
        payload.update(data.model_dump(exclude_unset=True, exclude_none=True))

        async with store_operation(
            f"aggiornamento attività {task_id}",
            not_found_detail=f"Attività con ID {task_id} non trovata",
        ):
            document = await self.session.store.replace(OFFICE_TASKS, task_id, payload)

        task = OfficeTaskRead.model_validate(document)
        self.session.put_office_task(task)
        logger.info("Aggiornata attività: %s", task_id)
        return task

    async def toggle(self, task_id: str) -> OfficeTaskRead:
        existing = self.get_by_id(task_id)
        return await self.update(task_id, OfficeTaskUpdate(is_completed=not existing.is_completed))

    async def delete(self, task_id: str) -> None:
        self.get_by_id(task_id)
        async with store_operation(
            f"eliminazione attività {task_id}",
            not_found_detail=f"Attività con ID {task_id} non trovata",
        ):
            await self.session.store.delete(OFFICE_TASKS, task_id)
        self.session.drop_office_task(task_id)
        logger.info("Eliminata attività: %s", task_id)
