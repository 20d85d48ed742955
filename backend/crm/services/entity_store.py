"""
Archivio documentale delle entità
Progetto: CRM Utenze

Contratto CRUD opaco verso l'archivio esterno e sua implementazione
su SQLAlchemy (una tabella di documenti JSON per collezione).

I servizi dipendono solo da DocumentStore: nei test viene sostituito
da un archivio in memoria.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from crm.models import StoredDocument

# Logger per questo modulo
logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Collezioni
# ------------------------------------------------------------
CLIENTS = "clients"
CONTRACTS = "contracts"
APPOINTMENTS = "appointments"
OFFICE_TASKS = "office_tasks"
CONFIG = "config"

Document = dict[str, Any]


class EntityStoreError(Exception):
    """Errore di I/O verso l'archivio (rete, database, vincoli)."""


class DocumentNotFoundError(LookupError):
    """Il documento richiesto non esiste (più) nell'archivio."""

    def __init__(self, collection: str, document_id: str) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"{collection}/{document_id}")


class DocumentStore(ABC):
    """
    Contratto CRUD dell'archivio.

    Ogni documento restituito include la chiave "id". I dati passati a
    create/replace non devono contenerla: l'id è assegnato dall'archivio
    ed è immutabile.
    """

    @abstractmethod
    async def list_all(self, collection: str) -> list[Document]:
        """Tutti i documenti della collezione, in ordine di inserimento."""

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Optional[Document]:
        """Il documento con l'id indicato, oppure None."""

    @abstractmethod
    async def create(self, collection: str, data: Document) -> Document:
        """Crea un documento e restituisce la versione salvata (con id)."""

    @abstractmethod
    async def replace(self, collection: str, document_id: str, data: Document) -> Document:
        """
        Sostituisce interamente il documento.

        Raises:
            DocumentNotFoundError: se il documento non esiste
        """

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """
        Elimina il documento.

        Raises:
            DocumentNotFoundError: se il documento non esiste
        """

    @abstractmethod
    async def delete_where(self, collection: str, field: str, value: Any) -> int:
        """Elimina i documenti con data[field] == value e ne restituisce il numero."""

    @abstractmethod
    async def get_config(self, name: str) -> Optional[Document]:
        """Documento di configurazione (liste, credenziali), oppure None."""

    @abstractmethod
    async def set_config(self, name: str, data: Document) -> None:
        """Scrive (o sovrascrive) un documento di configurazione."""


def _strip_id(data: Document) -> Document:
    return {k: v for k, v in data.items() if k != "id"}


class SqlDocumentStore(DocumentStore):
    """
    Implementazione dell'archivio su SQLAlchemy async.

    Ogni operazione usa una propria sessione e una propria transazione:
    non esistono transazioni a cavallo di più chiamate.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            logger.error(
                "Errore SQLAlchemy durante %s: %s - %s",
                operation, e.__class__.__name__, e,
            )
            raise EntityStoreError(f"Errore archivio durante {operation}") from e

    async def list_all(self, collection: str) -> list[Document]:
        async with self._transaction(f"lettura {collection}") as session:
            query = (
                select(StoredDocument)
                .where(StoredDocument.collection == collection)
                .order_by(StoredDocument.created_at.asc(), StoredDocument.id.asc())
            )
            result = await session.execute(query)
            documents = [doc.to_dict() for doc in result.scalars().all()]

        logger.debug("Letti %s documenti da %s", len(documents), collection)
        return documents

    async def get(self, collection: str, document_id: str) -> Optional[Document]:
        async with self._transaction(f"lettura {collection}/{document_id}") as session:
            doc = await session.get(StoredDocument, (collection, document_id))
            return doc.to_dict() if doc is not None else None

    async def create(self, collection: str, data: Document) -> Document:
        document_id = uuid.uuid4().hex
        async with self._transaction(f"creazione in {collection}") as session:
            doc = StoredDocument(collection=collection, id=document_id, data=_strip_id(data))
            session.add(doc)

        logger.debug("Creato documento %s/%s", collection, document_id)
        return {"id": document_id, **_strip_id(data)}

    async def replace(self, collection: str, document_id: str, data: Document) -> Document:
        async with self._transaction(f"aggiornamento {collection}/{document_id}") as session:
            doc = await session.get(StoredDocument, (collection, document_id))
            if doc is None:
                raise DocumentNotFoundError(collection, document_id)
            doc.data = _strip_id(data)

        return {"id": document_id, **_strip_id(data)}

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._transaction(f"eliminazione {collection}/{document_id}") as session:
            doc = await session.get(StoredDocument, (collection, document_id))
            if doc is None:
                raise DocumentNotFoundError(collection, document_id)
            await session.delete(doc)

    async def delete_where(self, collection: str, field: str, value: Any) -> int:
        async with self._transaction(f"eliminazione multipla {collection}") as session:
            result = await session.execute(
                select(StoredDocument).where(StoredDocument.collection == collection)
            )
            # Filtro lato applicazione: il tipo JSON non è interrogabile
            # in modo portabile tra i dialetti
            matching = [doc for doc in result.scalars().all() if (doc.data or {}).get(field) == value]
            for doc in matching:
                await session.delete(doc)

        return len(matching)

    async def get_config(self, name: str) -> Optional[Document]:
        document = await self.get(CONFIG, name)
        if document is None:
            return None
        return _strip_id(document)

    async def set_config(self, name: str, data: Document) -> None:
        async with self._transaction(f"scrittura configurazione {name}") as session:
            doc = await session.get(StoredDocument, (CONFIG, name))
            if doc is None:
                session.add(StoredDocument(collection=CONFIG, id=name, data=dict(data)))
            else:
                doc.data = dict(data)
