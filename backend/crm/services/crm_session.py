"""
Sessione CRM: snapshot in memoria delle entità
Progetto: CRM Utenze

Tutte le collezioni vengono caricate per intero all'avvio (e a ogni
reload esplicito). I servizi CRUD aggiornano lo snapshot solo dopo la
conferma dell'archivio; i moduli di calcolo leggono esclusivamente da qui.

Non esiste controllo di concorrenza: l'ultima scrittura confermata vince.
"""

import asyncio
import datetime
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from crm.core.config import Settings
from crm.core.exceptions import NotFoundError, TransientStoreError
from crm.schemas.appointment import AppointmentRead
from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.schemas.office_task import OfficeTaskRead
from crm.schemas.reference_list import DEFAULT_VALUES, ReferenceList, ReferenceListKind
from crm.services.entity_store import (
    APPOINTMENTS,
    CLIENTS,
    CONTRACTS,
    OFFICE_TASKS,
    DocumentNotFoundError,
    DocumentStore,
    EntityStoreError,
)
from crm.services.ui_state_service import (
    DISMISSED_CHECKUPS,
    UiStateService,
    parse_dismissed_checkups,
)
from crm.utils.dates import today_in

# Logger per questo modulo
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@asynccontextmanager
async def store_operation(description: str, not_found_detail: Optional[str] = None) -> AsyncIterator[None]:
    """
    Converte gli errori dell'archivio nelle eccezioni applicative.

    - EntityStoreError -> TransientStoreError (notifica generica, nessun retry)
    - DocumentNotFoundError -> NotFoundError con il messaggio indicato
    """
    try:
        yield
    except DocumentNotFoundError as e:
        logger.warning("Documento non trovato durante %s: %s", description, e)
        raise NotFoundError(not_found_detail or f"Elemento {e.document_id} non trovato") from e
    except EntityStoreError as e:
        logger.error("Operazione non riuscita (%s): %s", description, e)
        raise TransientStoreError() from e


def _parse_documents(model: type[ModelT], documents: Iterable[dict], collection: str) -> list[ModelT]:
    """Converte i documenti grezzi, scartando (con warning) quelli illeggibili."""
    items = []
    for document in documents:
        try:
            items.append(model.model_validate(document))
        except ValidationError as e:
            logger.warning(
                "Documento %s/%s ignorato: %s errori di formato",
                collection, document.get("id"), e.error_count(),
            )
    return items


def _upsert(items: list[ModelT], item: ModelT) -> list[ModelT]:
    """Sostituisce l'elemento con lo stesso id mantenendo la posizione, altrimenti lo accoda."""
    replaced = False
    result = []
    for existing in items:
        if existing.id == item.id:
            result.append(item)
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(item)
    return result


class CrmSession:
    """
    Oggetto di sessione passato esplicitamente ai servizi.

    Sostituisce ogni stato globale: contiene lo snapshot delle entità,
    le liste di riferimento, i promemoria archiviati e la configurazione.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Settings,
    ) -> None:
        self.store = store
        self.ui_state = UiStateService(store)
        self.config = config
        self._clients: list[ClientRead] = []
        self._contracts: list[ContractRead] = []
        self._appointments: list[AppointmentRead] = []
        self._office_tasks: list[OfficeTaskRead] = []
        self._reference_lists: dict[ReferenceListKind, ReferenceList] = {
            kind: ReferenceList.of(values) for kind, values in DEFAULT_VALUES.items()
        }
        self.dismissed_checkups: frozenset[str] = frozenset()
        self.loaded_at: Optional[datetime.datetime] = None

    # ------------------------------------------------------------
    # Caricamento
    # ------------------------------------------------------------

    async def reload(self) -> None:
        """
        Ricarica tutte le collezioni dall'archivio.

        Le letture avvengono in parallelo; lo snapshot viene sostituito
        solo se tutte vanno a buon fine.

        Raises:
            TransientStoreError: se una qualsiasi lettura fallisce
        """
        kinds = list(ReferenceListKind)
        async with store_operation("caricamento dati"):
            results = await asyncio.gather(
                self.store.list_all(CLIENTS),
                self.store.list_all(CONTRACTS),
                self.store.list_all(APPOINTMENTS),
                self.store.list_all(OFFICE_TASKS),
                self.store.get_config(DISMISSED_CHECKUPS),
                *(self.store.get_config(kind.value) for kind in kinds),
            )

        clients_docs, contracts_docs, appointments_docs, tasks_docs, dismissed_doc = results[:5]
        reference_lists = {}
        for kind, document in zip(kinds, results[5:]):
            if document is None:
                reference_lists[kind] = ReferenceList.of(DEFAULT_VALUES[kind])
            else:
                reference_lists[kind] = ReferenceList.of(document.get("values") or [])

        self._clients = _parse_documents(ClientRead, clients_docs, CLIENTS)
        self._contracts = _parse_documents(ContractRead, contracts_docs, CONTRACTS)
        self._appointments = _parse_documents(AppointmentRead, appointments_docs, APPOINTMENTS)
        self._office_tasks = _parse_documents(OfficeTaskRead, tasks_docs, OFFICE_TASKS)
        self._reference_lists = reference_lists
        self.dismissed_checkups = parse_dismissed_checkups(dismissed_doc)
        self.loaded_at = datetime.datetime.now(datetime.timezone.utc)

        logger.info(
            "Snapshot caricato: %s clienti, %s contratti, %s appuntamenti, %s attività",
            len(self._clients), len(self._contracts),
            len(self._appointments), len(self._office_tasks),
        )

    def today(self) -> datetime.date:
        """Data odierna nel fuso orario configurato."""
        return today_in(self.config.timezone)

    # ------------------------------------------------------------
    # Lettura
    # ------------------------------------------------------------

    @property
    def clients(self) -> list[ClientRead]:
        return list(self._clients)

    @property
    def contracts(self) -> list[ContractRead]:
        """Contratti con cliente esistente (gli orfani non sono visibili)."""
        client_ids = {c.id for c in self._clients}
        return [c for c in self._contracts if c.client_id in client_ids]

    def orphan_contracts(self) -> list[ContractRead]:
        """Contratti il cui cliente non esiste più (cancellazione interrotta)."""
        client_ids = {c.id for c in self._clients}
        return [c for c in self._contracts if c.client_id not in client_ids]

    @property
    def appointments(self) -> list[AppointmentRead]:
        return list(self._appointments)

    @property
    def office_tasks(self) -> list[OfficeTaskRead]:
        return list(self._office_tasks)

    def clients_by_id(self) -> dict[str, ClientRead]:
        return {c.id: c for c in self._clients}

    def find_client(self, client_id: str) -> Optional[ClientRead]:
        return next((c for c in self._clients if c.id == client_id), None)

    def find_contract(self, contract_id: str) -> Optional[ContractRead]:
        return next((c for c in self.contracts if c.id == contract_id), None)

    def find_appointment(self, appointment_id: str) -> Optional[AppointmentRead]:
        return next((a for a in self._appointments if a.id == appointment_id), None)

    def find_office_task(self, task_id: str) -> Optional[OfficeTaskRead]:
        return next((t for t in self._office_tasks if t.id == task_id), None)

    def contracts_for_client(self, client_id: str) -> list[ContractRead]:
        return [c for c in self._contracts if c.client_id == client_id]

    def reference_list(self, kind: ReferenceListKind) -> ReferenceList:
        return self._reference_lists[kind]

    # ------------------------------------------------------------
    # Aggiornamento (solo dopo conferma dell'archivio)
    # ------------------------------------------------------------

    def put_client(self, client: ClientRead) -> None:
        self._clients = _upsert(self._clients, client)

    def drop_client(self, client_id: str) -> None:
        self._clients = [c for c in self._clients if c.id != client_id]

    def put_contract(self, contract: ContractRead) -> None:
        self._contracts = _upsert(self._contracts, contract)

    def drop_contract(self, contract_id: str) -> None:
        self._contracts = [c for c in self._contracts if c.id != contract_id]

    def drop_contracts_of_client(self, client_id: str) -> None:
        self._contracts = [c for c in self._contracts if c.client_id != client_id]

    def put_appointment(self, appointment: AppointmentRead) -> None:
        self._appointments = _upsert(self._appointments, appointment)

    def drop_appointment(self, appointment_id: str) -> None:
        self._appointments = [a for a in self._appointments if a.id != appointment_id]

    def put_office_task(self, task: OfficeTaskRead) -> None:
        self._office_tasks = _upsert(self._office_tasks, task)

    def drop_office_task(self, task_id: str) -> None:
        self._office_tasks = [t for t in self._office_tasks if t.id != task_id]

    def set_reference_list(self, kind: ReferenceListKind, values: ReferenceList) -> None:
        self._reference_lists[kind] = values

    # ------------------------------------------------------------
    # Stato dell'interfaccia
    # ------------------------------------------------------------

    async def dismiss_checkup(self, key: str) -> frozenset[str]:
        """Archivia un promemoria in modo permanente (idempotente)."""
        async with store_operation("archiviazione promemoria"):
            dismissed = await self.ui_state.dismiss_checkup(key)
        self.dismissed_checkups = dismissed
        return dismissed

    async def clear_dismissed_checkups(self) -> None:
        async with store_operation("azzeramento promemoria archiviati"):
            await self.ui_state.clear_dismissed_checkups()
        self.dismissed_checkups = frozenset()

    async def widget_visibility(self) -> dict[str, bool]:
        async with store_operation("lettura visibilità widget"):
            return await self.ui_state.load_widget_visibility()

    async def save_widget_visibility(self, visibility: dict[str, bool]) -> dict[str, bool]:
        async with store_operation("salvataggio visibilità widget"):
            return await self.ui_state.save_widget_visibility(visibility)
