"""
Test per il ContractService: validazioni, incasso, ordinamento e filtri.
"""

import datetime

import pytest

from conftest import make_client, make_contract
from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.contract import ContractCreate, ContractListFilter, ContractSortKey, ContractUpdate
from crm.services.contract_service import ContractService, filter_contract_list, sort_contracts


def _payload(**overrides) -> dict:
    data = {
        "client_id": "c1",
        "type": "gas",
        "provider": "Edison",
        "contract_code": "ED-55",
        "start_date": "2024-05-01",
        "commission": "45,50",
        "operation_type": "Switch",
    }
    data.update(overrides)
    return data


# ============================================================
# CRUD
# ============================================================


class TestContractCrud:
    """Riferimento al cliente e tipo operazione."""

    async def test_create(self, loaded_session):
        contract = await ContractService(loaded_session).create(ContractCreate(**_payload()))
        assert str(contract.commission) == "45.50"
        assert contract.start_date == "2024-05-01"
        assert loaded_session.find_contract(contract.id) is not None

    async def test_unknown_client(self, loaded_session):
        with pytest.raises(NotFoundError):
            await ContractService(loaded_session).create(ContractCreate(**_payload(client_id="nope")))

    async def test_unknown_operation_type(self, loaded_session):
        with pytest.raises(BusinessValidationError) as exc:
            await ContractService(loaded_session).create(
                ContractCreate(**_payload(operation_type="Cessione"))
            )
        assert exc.value.extra == {"field": "operation_type"}

    async def test_legacy_operation_type_kept_on_update(self, store, loaded_session):
        service = ContractService(loaded_session)
        contract = await service.create(ContractCreate(**_payload()))

        # "Switch" viene rimosso dalla lista dopo il salvataggio
        store.configs["operation_types"] = {"values": ["Voltura"]}
        await loaded_session.reload()

        updated = await service.update(contract.id, ContractUpdate(**_payload(notes="rinnovo")))
        assert updated.operation_type == "Switch"
        assert updated.notes == "rinnovo"

    async def test_toggle_paid(self, loaded_session):
        service = ContractService(loaded_session)
        assert (await service.toggle_paid("k1")).is_paid is True
        assert (await service.toggle_paid("k1")).is_paid is False

    async def test_delete(self, store, loaded_session):
        await ContractService(loaded_session).delete("k1")
        assert loaded_session.find_contract("k1") is None
        with pytest.raises(NotFoundError):
            ContractService(loaded_session).get_by_id("k1")


# ============================================================
# Ordinamento
# ============================================================


class TestSortContracts:
    """I valori mancanti vanno sempre in fondo."""

    def test_end_date_missing_last_both_directions(self):
        a = make_contract(end_date="2024-12-01")
        b = make_contract(end_date=None)
        c = make_contract(end_date="2025-03-01")

        ascending = sort_contracts([a, b, c], {}, ContractSortKey.END_DATE)
        descending = sort_contracts([a, b, c], {}, ContractSortKey.END_DATE, descending=True)

        assert [x.id for x in ascending] == [a.id, c.id, b.id]
        assert [x.id for x in descending] == [c.id, a.id, b.id]

    def test_client_name(self):
        bianchi = make_client(id="b", first_name="Anna", last_name="Bianchi")
        rossi = make_client(id="r", first_name="Mario", last_name="Rossi")
        clients = {c.id: c for c in (bianchi, rossi)}
        first = make_contract(client_id="r")
        second = make_contract(client_id="b")
        orphan = make_contract(client_id="x")

        result = sort_contracts([first, orphan, second], clients)
        assert [x.id for x in result] == [second.id, first.id, orphan.id]

    def test_commission_missing_is_zero(self):
        none = make_contract(commission=None)
        high = make_contract(commission="80")
        result = sort_contracts([high, none], {}, ContractSortKey.COMMISSION)
        assert [x.id for x in result] == [none.id, high.id]


# ============================================================
# Filtri
# ============================================================


class TestFilterContracts:
    def test_type_and_date_range(self):
        gas = make_contract(type="gas", start_date="2024-03-10")
        old = make_contract(type="gas", start_date="2022-03-10")
        power = make_contract(type="electricity", start_date="2024-03-10")

        list_filter = ContractListFilter(
            type="gas", start_from=datetime.date(2024, 1, 1), start_to=datetime.date(2024, 12, 31)
        )
        assert filter_contract_list([gas, old, power], list_filter) == [gas]

    def test_range_excludes_missing_dates(self):
        undated = make_contract(end_date=None)
        list_filter = ContractListFilter(end_to=datetime.date(2030, 1, 1))
        assert filter_contract_list([undated], list_filter) == []
