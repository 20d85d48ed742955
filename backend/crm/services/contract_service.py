"""
Service Layer per l'entità Contract
Progetto: CRM Utenze

Gestione dei contratti:
- Verifica referenziale del cliente intestatario
- Tipo operazione validato sulla lista corrente solo in inserimento
- Ordinamento e filtri della lista contratti
- Pulizia dei contratti orfani lasciati da una cancellazione interrotta
"""

import logging
from typing import Optional

from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.client import ClientRead
from crm.schemas.contract import (
    ContractCreate,
    ContractListFilter,
    ContractRead,
    ContractSortKey,
    ContractUpdate,
)
from crm.schemas.dashboard import CommissionFilter
from crm.schemas.reference_list import ReferenceListKind
from crm.services.commission_service import matches_filter
from crm.services.crm_session import CrmSession, store_operation
from crm.services.entity_store import CONTRACTS

# Logger per questo modulo
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Ordinamento e filtri (funzioni pure)
# -------------------------------------------------------------------

def sort_contracts(
    contracts: list[ContractRead],
    clients_by_id: dict[str, ClientRead],
    sort_by: ContractSortKey = ContractSortKey.CLIENT_NAME,
    descending: bool = False,
) -> list[ContractRead]:
    """
    Ordina la lista contratti.

    - client_name: cognome, poi nome del cliente; contratti senza cliente in fondo
    - end_date: contratti senza scadenza sempre in fondo, in entrambe le direzioni
    - commission: provvigione assente = 0
    """
    if sort_by == ContractSortKey.CLIENT_NAME:
        with_client = [c for c in contracts if c.client_id in clients_by_id]
        without_client = [c for c in contracts if c.client_id not in clients_by_id]

        def name_key(contract: ContractRead) -> tuple[str, str]:
            client = clients_by_id[contract.client_id]
            return (client.last_name or "").casefold(), (client.first_name or "").casefold()

        return sorted(with_client, key=name_key, reverse=descending) + without_client

    if sort_by == ContractSortKey.END_DATE:
        dated = [c for c in contracts if c.end_on is not None]
        undated = [c for c in contracts if c.end_on is None]
        return sorted(dated, key=lambda c: c.end_on, reverse=descending) + undated

    return sorted(contracts, key=lambda c: c.commission_amount, reverse=descending)


def filter_contract_list(contracts: list[ContractRead], list_filter: ContractListFilter) -> list[ContractRead]:
    """Applica i filtri della lista contratti mantenendo l'ordine."""
    period = CommissionFilter(year=list_filter.year, month=list_filter.month, provider=list_filter.provider)
    result = []
    for contract in contracts:
        if list_filter.client_id is not None and contract.client_id != list_filter.client_id:
            continue
        if list_filter.type is not None and contract.type != list_filter.type.value:
            continue
        if not matches_filter(contract, period):
            continue
        if not _in_range(contract.start_on, list_filter.start_from, list_filter.start_to):
            continue
        if not _in_range(contract.end_on, list_filter.end_from, list_filter.end_to):
            continue
        result.append(contract)
    return result


def _in_range(value, lower, upper) -> bool:
    if lower is None and upper is None:
        return True
    if value is None:
        return False
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


# -------------------------------------------------------------------
# Service
# -------------------------------------------------------------------

class ContractService:
    """Service per la gestione delle operazioni CRUD sui contratti."""

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    def get_all(
        self,
        list_filter: Optional[ContractListFilter] = None,
        sort_by: ContractSortKey = ContractSortKey.CLIENT_NAME,
        descending: bool = False,
    ) -> list[ContractRead]:
        """Contratti visibili (con cliente esistente), filtrati e ordinati."""
        contracts = self.session.contracts
        if list_filter is not None:
            contracts = filter_contract_list(contracts, list_filter)
        return sort_contracts(contracts, self.session.clients_by_id(), sort_by, descending)

    def get_by_id(self, contract_id: str) -> ContractRead:
        """
        Raises:
            NotFoundError: Se il contratto non esiste
        """
        contract = self.session.find_contract(contract_id)
        if contract is None:
            logger.warning("Contratto non trovato: %s", contract_id)
            raise NotFoundError(f"Contratto con ID {contract_id} non trovato")
        return contract

    def _check_client(self, client_id: str) -> None:
        if self.session.find_client(client_id) is None:
            logger.warning("Contratto riferito a cliente inesistente: %s", client_id)
            raise NotFoundError(f"Cliente con ID {client_id} non trovato")

    def _check_operation_type(self, value: Optional[str], previous: Optional[str] = None) -> None:
        """
        Il tipo operazione deve appartenere alla lista corrente.

        Un valore legacy già salvato e non modificato resta accettato.
        """
        if value is None or value == previous:
            return
        operation_types = self.session.reference_list(ReferenceListKind.OPERATION_TYPES)
        if not operation_types.contains(value):
            raise BusinessValidationError(
                f"Tipo operazione '{value}' non presente nella lista",
                extra={"field": "operation_type"},
            )

    async def create(self, contract_data: ContractCreate) -> ContractRead:
        """
        Crea un nuovo contratto.

        Raises:
            NotFoundError: Se il cliente intestatario non esiste
            BusinessValidationError: Se il tipo operazione non è in lista
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        self._check_client(contract_data.client_id)
        self._check_operation_type(contract_data.operation_type)

        payload = contract_data.model_dump(mode="json")
        async with store_operation("creazione contratto"):
            document = await self.session.store.create(CONTRACTS, payload)

        contract = ContractRead.model_validate(document)
        self.session.put_contract(contract)
        logger.info("Creato contratto: %s (%s, %s)", contract.id, contract.type, contract.provider)
        return contract

    async def update(self, contract_id: str, contract_data: ContractUpdate) -> ContractRead:
        """
        Sostituisce i dati di un contratto esistente (l'ultima scrittura vince).

        Raises:
            NotFoundError: Se il contratto o il cliente non esistono
            BusinessValidationError: Se il tipo operazione non è in lista
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        existing = self.get_by_id(contract_id)
        self._check_client(contract_data.client_id)
        self._check_operation_type(contract_data.operation_type, previous=existing.operation_type)

        payload = contract_data.model_dump(mode="json")
        return await self._replace(contract_id, payload)

    async def set_paid(self, contract_id: str, is_paid: bool) -> ContractRead:
        """Aggiorna lo stato di incasso della provvigione."""
        existing = self.get_by_id(contract_id)
        payload = existing.model_dump(mode="json", exclude={"id"})
        payload["is_paid"] = is_paid
        return await self._replace(contract_id, payload)

    async def toggle_paid(self, contract_id: str) -> ContractRead:
        existing = self.get_by_id(contract_id)
        return await self.set_paid(contract_id, not existing.is_paid)

    async def _replace(self, contract_id: str, payload: dict) -> ContractRead:
        async with store_operation(
            f"aggiornamento contratto {contract_id}",
            not_found_detail=f"Contratto con ID {contract_id} non trovato",
        ):
            document = await self.session.store.replace(CONTRACTS, contract_id, payload)

        contract = ContractRead.model_validate(document)
        self.session.put_contract(contract)
        logger.info("Aggiornato contratto: %s", contract_id)
        return contract

    async def delete(self, contract_id: str) -> None:
        """
        Raises:
            NotFoundError: Se il contratto non esiste
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        self.get_by_id(contract_id)
        async with store_operation(
            f"eliminazione contratto {contract_id}",
            not_found_detail=f"Contratto con ID {contract_id} non trovato",
        ):
            await self.session.store.delete(CONTRACTS, contract_id)
        self.session.drop_contract(contract_id)
        logger.info("Eliminato contratto: %s", contract_id)

    async def sweep_orphans(self) -> int:
        """
        Elimina i contratti il cui cliente non esiste più.

        Ogni eliminazione confermata aggiorna subito lo snapshot: se
        l'archivio fallisce a metà, i contratti già rimossi restano rimossi.

        Returns:
            Numero di contratti eliminati
        """
        removed = 0
        for contract in self.session.orphan_contracts():
            try:
                async with store_operation(f"eliminazione contratto orfano {contract.id}"):
                    await self.session.store.delete(CONTRACTS, contract.id)
            except NotFoundError:
                logger.warning("Contratto orfano %s già eliminato dall'archivio", contract.id)
            self.session.drop_contract(contract.id)
            removed += 1

        if removed:
            logger.info("Eliminati %s contratti orfani", removed)
        return removed

