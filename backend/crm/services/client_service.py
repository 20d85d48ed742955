"""
Service Layer per l'entità Client
Progetto: CRM Utenze

Definisce la logica di business per la gestione dei clienti:
- Validazione dei campi fiscali già avvenuta sugli schemi, prima dell'archivio
- id e createdAt immutabili dopo la creazione
- Cancellazione a cascata dei contratti in due fasi (prima i contratti, poi il cliente)
- Snapshot aggiornato solo dopo conferma dell'archivio
"""

import logging

from crm.core.exceptions import NotFoundError
from crm.schemas.client import ClientCreate, ClientRead, ClientUpdate
from crm.services.crm_session import CrmSession, store_operation
from crm.services.entity_store import CLIENTS, CONTRACTS
from crm.utils.dates import now_utc

# Logger per questo modulo
logger = logging.getLogger(__name__)


class ClientService:
    """
    Service per la gestione delle operazioni CRUD sui clienti.

    Le letture avvengono sullo snapshot della sessione; le scritture
    passano dall'archivio e, solo se confermate, aggiornano lo snapshot.
    Un errore dell'archivio lascia lo snapshot invariato.
    """

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    def get_all(self) -> list[ClientRead]:
        """Tutti i clienti nell'ordine dell'archivio."""
        return self.session.clients

    def get_by_id(self, client_id: str) -> ClientRead:
        """
        Recupera un cliente tramite ID.

        Raises:
            NotFoundError: Se il cliente non esiste
        """
        client = self.session.find_client(client_id)
        if client is None:
            logger.warning("Cliente non trovato: %s", client_id)
            raise NotFoundError(f"Cliente con ID {client_id} non trovato")
        return client

    async def create(self, client_data: ClientCreate) -> ClientRead:
        """
        Crea un nuovo cliente. id e createdAt vengono assegnati qui.

        Raises:
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        payload = client_data.model_dump(mode="json")
        payload["created_at"] = now_utc().isoformat()

        async with store_operation("creazione cliente"):
            document = await self.session.store.create(CLIENTS, payload)

        client = ClientRead.model_validate(document)
        self.session.put_client(client)
        logger.info("Creato cliente: %s - %s", client.id, client.full_name)
        return client

    async def update(self, client_id: str, client_data: ClientUpdate) -> ClientRead:
        """
        Sostituisce i dati di un cliente esistente.

        createdAt viene ricopiato dalla versione salvata.

        Raises:
            NotFoundError: Se il cliente non esiste (più)
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        existing = self.get_by_id(client_id)

        payload = client_data.model_dump(mode="json")
        payload["created_at"] = existing.created_at.isoformat() if existing.created_at else None

        async with store_operation(
            f"aggiornamento cliente {client_id}",
            not_found_detail=f"Cliente con ID {client_id} non trovato",
        ):
            document = await self.session.store.replace(CLIENTS, client_id, payload)

        client = ClientRead.model_validate(document)
        self.session.put_client(client)
        logger.info("Aggiornato cliente: %s", client_id)
        return client

    async def delete(self, client_id: str) -> int:
        """
        Elimina un cliente e tutti i suoi contratti.

        Fase 1: eliminazione dei contratti con client_id uguale all'id.
        Fase 2: eliminazione del cliente.

        Non esiste una transazione tra le due fasi: se la seconda fallisce
        i contratti restano eliminati e il cliente resta presente. I
        contratti rimasti senza cliente non sono visibili nello snapshot
        e vengono rimossi da ContractService.sweep_orphans().

        Returns:
            Numero di contratti eliminati

        Raises:
            NotFoundError: Se il cliente non esiste
            TransientStoreError: Se una delle due fasi fallisce
        """
        self.get_by_id(client_id)

        async with store_operation(f"eliminazione contratti del cliente {client_id}"):
            removed = await self.session.store.delete_where(CONTRACTS, "client_id", client_id)
        self.session.drop_contracts_of_client(client_id)
        logger.info("Eliminati %s contratti del cliente %s", removed, client_id)

        async with store_operation(
            f"eliminazione cliente {client_id}",
            not_found_detail=f"Cliente con ID {client_id} non trovato",
        ):
            await self.session.store.delete(CLIENTS, client_id)
        self.session.drop_client(client_id)
        logger.info("Eliminato cliente: %s", client_id)
        return removed
