"""
Router per la sessione CRM
Progetto: CRM Utenze

Ricarica dello snapshot dall'archivio (pulsante "aggiorna").
"""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from crm.core.deps import Session

# Logger per questo modulo
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/session",
    tags=["Sessione"],
)


class SessionStatus(BaseModel):
    loaded_at: Optional[datetime.datetime]
    clients: int
    contracts: int
    orphan_contracts: int
    appointments: int
    office_tasks: int


def _status(session) -> SessionStatus:
    return SessionStatus(
        loaded_at=session.loaded_at,
        clients=len(session.clients),
        contracts=len(session.contracts),
        orphan_contracts=len(session.orphan_contracts()),
        appointments=len(session.appointments),
        office_tasks=len(session.office_tasks),
    )


@router.get("/", name="sessione_stato", summary="Stato dello snapshot", response_model=SessionStatus)
async def get_session_status(session: Session) -> SessionStatus:
    return _status(session)


@router.post("/reload", name="sessione_ricarica", summary="Ricarica i dati", response_model=SessionStatus)
async def reload_session(session: Session) -> SessionStatus:
    """
    Raises:
        TransientStoreError: Se l'archivio non è raggiungibile; lo snapshot precedente resta valido
    """
    await session.reload()
    logger.info("Snapshot ricaricato su richiesta")
    return _status(session)
