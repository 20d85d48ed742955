"""
Test per il ClientService.

Comprende la cancellazione a cascata in due fasi e il comportamento
dello snapshot quando l'archivio non risponde.
"""

import pytest

from conftest import make_client_doc, make_contract_doc
from crm.core.exceptions import NotFoundError, TransientStoreError
from crm.schemas.client import ClientCreate, ClientUpdate
from crm.services.client_service import ClientService
from crm.services.contract_service import ContractService
from crm.services.entity_store import CLIENTS, CONTRACTS


def _payload(**overrides) -> dict:
    data = {
        "first_name": "Giulia",
        "last_name": "Verdi",
        "email": "giulia@example.com",
        "fiscal_code": "rssmra80a01h501u",
        "mobile_phone": "347 123 4567",
    }
    data.update(overrides)
    return data


# ============================================================
# Creazione e aggiornamento
# ============================================================


class TestCreateUpdate:
    """id e createdAt assegnati alla creazione e mai modificati."""

    async def test_create(self, store, session):
        client = await ClientService(session).create(ClientCreate(**_payload()))

        assert client.id in store.collections[CLIENTS]
        assert client.fiscal_code == "RSSMRA80A01H501U"
        assert client.mobile_phone == "3471234567"
        assert client.created_at is not None
        assert session.find_client(client.id) == client

    async def test_update_keeps_created_at(self, loaded_session):
        service = ClientService(loaded_session)
        before = service.get_by_id("c1")

        updated = await service.update("c1", ClientUpdate(**_payload(first_name="Maria")))

        assert updated.first_name == "Maria"
        assert updated.id == "c1"
        assert updated.created_at == before.created_at

    async def test_update_missing_client(self, loaded_session):
        with pytest.raises(NotFoundError):
            await ClientService(loaded_session).update("nope", ClientUpdate(**_payload()))

    async def test_failed_create_leaves_snapshot(self, store, loaded_session):
        store.fail_on.add("create")
        with pytest.raises(TransientStoreError):
            await ClientService(loaded_session).create(ClientCreate(**_payload()))
        assert len(loaded_session.clients) == 1


# ============================================================
# Cancellazione a cascata
# ============================================================


class TestCascadeDelete:
    """Prima i contratti, poi il cliente."""

    async def test_deletes_contracts_then_client(self, store, loaded_session):
        store.add(CLIENTS, make_client_doc(id="c2"))
        store.add(CONTRACTS, make_contract_doc(id="k3", client_id="c2"))
        await loaded_session.reload()
        store.calls.clear()

        removed = await ClientService(loaded_session).delete("c1")

        assert removed == 2
        assert store.calls == [("delete_where", CONTRACTS), ("delete", CLIENTS)]
        assert set(store.collections[CONTRACTS]) == {"k3"}
        assert [c.id for c in loaded_session.clients] == ["c2"]
        assert [c.id for c in loaded_session.contracts] == ["k3"]

    async def test_phase_one_failure_changes_nothing(self, store, loaded_session):
        store.fail_on.add("delete_where")
        with pytest.raises(TransientStoreError):
            await ClientService(loaded_session).delete("c1")
        assert len(loaded_session.contracts) == 2
        assert len(store.collections[CONTRACTS]) == 2

    async def test_interrupted_cascade(self, store, loaded_session):
        """Se la seconda fase fallisce il cliente resta e i contratti restano eliminati."""
        store.fail_on.add("delete")
        with pytest.raises(TransientStoreError):
            await ClientService(loaded_session).delete("c1")

        assert loaded_session.find_client("c1") is not None
        assert loaded_session.contracts_for_client("c1") == []
        assert store.collections[CONTRACTS] == {}

    async def test_unknown_client(self, loaded_session):
        with pytest.raises(NotFoundError):
            await ClientService(loaded_session).delete("nope")

    async def test_orphans_hidden_and_swept(self, store, loaded_session):
        store.add(CONTRACTS, make_contract_doc(id="orphan", client_id="gone"))
        await loaded_session.reload()

        assert "orphan" not in {c.id for c in loaded_session.contracts}
        assert [c.id for c in loaded_session.orphan_contracts()] == ["orphan"]

        removed = await ContractService(loaded_session).sweep_orphans()
        assert removed == 1
        assert "orphan" not in store.collections[CONTRACTS]
        assert loaded_session.orphan_contracts() == []
