"""
Pytest configuration and fixtures per i test del CRM.

I servizi dipendono solo da DocumentStore: qui viene sostituito da un
archivio in memoria con iniezione di errori, così i test non richiedono
un database.
"""

import copy
import datetime
import uuid
from typing import Any, Optional

import pytest

from crm.core.config import Settings
from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.services.crm_session import CrmSession
from crm.services.entity_store import (
    CLIENTS,
    CONTRACTS,
    DocumentNotFoundError,
    DocumentStore,
    EntityStoreError,
)
from crm.services.ui_state_service import UiStateService


# ============================================================
# Archivio in memoria
# ============================================================


class InMemoryDocumentStore(DocumentStore):
    """
    Archivio documentale in memoria.

    fail_on contiene i nomi delle operazioni (es. "create", "delete")
    che devono fallire con EntityStoreError; calls registra l'ordine
    delle chiamate.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict]] = {}
        self.configs: dict[str, dict] = {}
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, target: str) -> None:
        self.calls.append((operation, target))
        if operation in self.fail_on:
            raise EntityStoreError(f"{operation} non riuscita su {target}")

    def add(self, collection: str, data: dict) -> dict:
        """Inserisce un documento senza passare dai controlli (per preparare i dati)."""
        document_id = data.get("id") or uuid.uuid4().hex
        stored = {k: v for k, v in data.items() if k != "id"}
        self.collections.setdefault(collection, {})[document_id] = stored
        return {"id": document_id, **copy.deepcopy(stored)}

    async def list_all(self, collection: str) -> list[dict]:
        self._check("list_all", collection)
        return [
            {"id": document_id, **copy.deepcopy(data)}
            for document_id, data in self.collections.get(collection, {}).items()
        ]

    async def get(self, collection: str, document_id: str) -> Optional[dict]:
        self._check("get", collection)
        data = self.collections.get(collection, {}).get(document_id)
        return None if data is None else {"id": document_id, **copy.deepcopy(data)}

    async def create(self, collection: str, data: dict) -> dict:
        self._check("create", collection)
        return self.add(collection, {k: v for k, v in data.items() if k != "id"})

    async def replace(self, collection: str, document_id: str, data: dict) -> dict:
        self._check("replace", collection)
        documents = self.collections.get(collection, {})
        if document_id not in documents:
            raise DocumentNotFoundError(collection, document_id)
        documents[document_id] = {k: copy.deepcopy(v) for k, v in data.items() if k != "id"}
        return {"id": document_id, **copy.deepcopy(documents[document_id])}

    async def delete(self, collection: str, document_id: str) -> None:
        self._check("delete", collection)
        documents = self.collections.get(collection, {})
        if document_id not in documents:
            raise DocumentNotFoundError(collection, document_id)
        del documents[document_id]

    async def delete_where(self, collection: str, field: str, value: Any) -> int:
        self._check("delete_where", collection)
        documents = self.collections.get(collection, {})
        matching = [k for k, v in documents.items() if v.get(field) == value]
        for document_id in matching:
            del documents[document_id]
        return len(matching)

    async def get_config(self, name: str) -> Optional[dict]:
        self._check("get_config", name)
        data = self.configs.get(name)
        return None if data is None else copy.deepcopy(data)

    async def set_config(self, name: str, data: dict) -> None:
        self._check("set_config", name)
        self.configs[name] = copy.deepcopy(data)


# ============================================================
# Fixtures
# ============================================================


@pytest.fixture
def test_settings() -> Settings:
    """Impostazioni con firma del consulente e soglie standard."""
    return Settings(
        agent_name="Luca Bianchi",
        agent_phone="3331234567",
        agent_email="luca.bianchi@example.com",
        secret_key="test-secret-key-for-jwt-signing-only",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def ui_state(store) -> UiStateService:
    return UiStateService(store)


@pytest.fixture
def session(store, test_settings) -> CrmSession:
    """Sessione vuota (snapshot non ancora caricato)."""
    return CrmSession(store=store, config=test_settings)


@pytest.fixture
async def loaded_session(store, session) -> CrmSession:
    """Sessione con un cliente e due contratti già caricati."""
    client = store.add(CLIENTS, make_client_doc(id="c1"))
    store.add(CONTRACTS, make_contract_doc(id="k1", client_id=client["id"]))
    store.add(
        CONTRACTS,
        make_contract_doc(id="k2", client_id=client["id"], type="telephony", provider="TIM"),
    )
    await session.reload()
    return session


# ============================================================
# Factory di documenti
# ============================================================


def make_client_doc(**overrides) -> dict:
    data = {
        "first_name": "Mario",
        "last_name": "Rossi",
        "email": "mario.rossi@example.com",
        "fiscal_code": "RSSMRA80A01H501U",
        "mobile_phone": "3471234567",
        "ibans": [],
        "created_at": "2024-03-15T10:00:00+00:00",
    }
    data.update(overrides)
    return data


def make_contract_doc(**overrides) -> dict:
    data = {
        "client_id": "c1",
        "type": "electricity",
        "provider": "Enel",
        "contract_code": "EN-001",
        "start_date": "2024-01-15",
        "end_date": None,
        "commission": "100.00",
        "is_paid": False,
        "customer_type": "residential",
    }
    data.update(overrides)
    return data


def make_contract(**overrides):
    """ContractRead già validato, per i moduli di calcolo."""
    data = make_contract_doc(**overrides)
    data.setdefault("id", uuid.uuid4().hex)
    return ContractRead.model_validate(data)


def make_client(**overrides):
    data = make_client_doc(**overrides)
    data.setdefault("id", uuid.uuid4().hex)
    return ClientRead.model_validate(data)


TODAY = datetime.date(2024, 7, 15)
