"""
Test per il caricamento dello snapshot.
"""

from decimal import Decimal

import pytest

from conftest import make_client_doc, make_contract_doc
from crm.core.exceptions import TransientStoreError
from crm.schemas.reference_list import ReferenceListKind
from crm.services.crm_session import CrmSession
from crm.services.entity_store import CLIENTS, CONTRACTS


# ============================================================
# Reload
# ============================================================


class TestReload:
    async def test_loads_all_collections(self, loaded_session):
        assert [c.id for c in loaded_session.clients] == ["c1"]
        assert {c.id for c in loaded_session.contracts} == {"k1", "k2"}
        assert loaded_session.loaded_at is not None

    async def test_missing_lists_use_defaults(self, loaded_session):
        providers = loaded_session.reference_list(ReferenceListKind.PROVIDERS)
        assert providers.contains("Enel")

    async def test_unreadable_documents_are_skipped(self, store, session):
        store.add(CLIENTS, make_client_doc(id="ok"))
        store.add(CLIENTS, {"id": "bad", "first_name": ["non", "una", "stringa"]})
        await session.reload()
        assert [c.id for c in session.clients] == ["ok"]

    async def test_malformed_contract_fields_keep_the_contract(self, store, session):
        """Date o importi illeggibili escludono il contratto solo dal calcolo interessato."""
        store.add(CLIENTS, make_client_doc(id="c1"))
        store.add(CONTRACTS, make_contract_doc(id="k1"))
        store.add(CONTRACTS, make_contract_doc(id="k2", start_date=20240115))
        store.add(CONTRACTS, make_contract_doc(id="k3", commission="n/d"))
        await session.reload()

        contracts = {c.id: c for c in session.contracts}
        assert set(contracts) == {"k1", "k2", "k3"}
        assert contracts["k2"].start_on is None
        assert contracts["k3"].commission is None
        assert contracts["k3"].commission_amount == Decimal("0")

    async def test_failed_reload_keeps_previous_snapshot(self, store, loaded_session):
        store.add(CONTRACTS, make_contract_doc(id="k9", client_id="c1"))
        store.fail_on.add("list_all")

        with pytest.raises(TransientStoreError):
            await loaded_session.reload()

        assert {c.id for c in loaded_session.contracts} == {"k1", "k2"}


# ============================================================
# Configurazione
# ============================================================


class TestSessionConfig:
    def test_settings_are_required(self, store):
        with pytest.raises(TypeError):
            CrmSession(store=store)

