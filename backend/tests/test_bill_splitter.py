"""
Test per la divisione delle bollette.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.bill_split import BillSplitRequest, Participant, SplitMethod
from crm.services.bill_splitter import BillSplitter, split_bill


def _request(**overrides) -> BillSplitRequest:
    data = {
        "method": SplitMethod.SIMPLE,
        "total_bill": "100",
        "total_consumption": "200",
        "participants": [
            {"id": 1, "name": "Anna", "consumption": "83"},
            {"id": 2, "name": "Bruno", "consumption": "117"},
        ],
    }
    data.update(overrides)
    return BillSplitRequest.model_validate(data)


# ============================================================
# Metodo semplice
# ============================================================


class TestSimpleSplit:
    """Quota = consumo x importo / consumo totale in bolletta."""

    def test_proportional_shares(self):
        result = split_bill(_request())
        assert result.unit_cost == Decimal("0.5")
        assert [s.amount for s in result.shares] == [Decimal("41.50"), Decimal("58.50")]
        assert result.shares_total == Decimal("100.00")
        assert result.is_consumption_match

    def test_denominator_is_declared_consumption(self):
        """La somma dei partecipanti non cambia il costo unitario."""
        result = split_bill(
            _request(participants=[{"id": 1, "consumption": "83"}, {"id": 2, "consumption": "100"}])
        )
        assert result.unit_cost == Decimal("0.5")
        assert result.consumption_diff == Decimal("17")
        assert not result.is_consumption_match
        assert not result.is_consumption_over

    def test_participants_over_declared(self):
        result = split_bill(
            _request(participants=[{"id": 1, "consumption": "150"}, {"id": 2, "consumption": "100"}])
        )
        assert result.is_consumption_over

    def test_blank_total_consumption_uses_one(self):
        result = split_bill(
            _request(
                total_bill="50",
                total_consumption="",
                participants=[{"id": 1, "consumption": "2"}, {"id": 2, "consumption": "3"}],
            )
        )
        assert [s.amount for s in result.shares] == [Decimal("100.00"), Decimal("150.00")]

    def test_comma_decimal_input(self):
        result = split_bill(_request(total_bill="100,00"))
        assert result.shares[0].amount == Decimal("41.50")


# ============================================================
# Metodo avanzato
# ============================================================


class TestAdvancedSplit:
    """Quote fisse in parti uguali più parte variabile a consumo."""

    def test_fixed_and_variable(self):
        result = split_bill(
            _request(method="advanced", fixed_fee="10", power_fee="5", other_fee="5")
        )
        assert result.total_fixed == Decimal("20.00")
        assert result.fixed_per_person == Decimal("10.00")
        assert result.unit_cost == Decimal("0.4")
        assert [s.amount for s in result.shares] == [Decimal("43.20"), Decimal("56.80")]
        assert result.shares_total == Decimal("100.00")

    def test_missing_fees_count_as_zero(self):
        result = split_bill(_request(method="advanced"))
        assert result.total_fixed == Decimal("0.00")
        assert result.shares[0].amount == Decimal("41.50")


class TestRequestValidation:
    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            _request(participants=[{"id": 1}, {"id": 1}])

    def test_at_least_one_participant(self):
        with pytest.raises(ValidationError):
            _request(participants=[])


# ============================================================
# Modulo modificabile
# ============================================================


class TestBillSplitter:
    """Stato del form e ricalcolo a ogni lettura."""

    def test_starts_with_two_participants(self):
        splitter = BillSplitter()
        assert [p.id for p in splitter.participants] == [1, 2]
        assert splitter.method == SplitMethod.ADVANCED

    def test_add_uses_next_id(self):
        splitter = BillSplitter()
        splitter.remove_participant(1)
        added = splitter.add_participant("Carla")
        assert added.id == 3

    def test_cannot_remove_last_participant(self):
        splitter = BillSplitter()
        splitter.remove_participant(2)
        with pytest.raises(BusinessValidationError):
            splitter.remove_participant(1)
        assert len(splitter.participants) == 1

    def test_unknown_participant(self):
        with pytest.raises(NotFoundError):
            BillSplitter().update_participant(99, name="X")

    def test_result_follows_edits(self):
        splitter = BillSplitter()
        splitter.set_bill(total_bill=Decimal("100"), total_consumption=Decimal("200"))
        splitter.update_participant(1, consumption=Decimal("83"))
        splitter.update_participant(2, consumption=Decimal("117"))
        assert splitter.result.shares[1].amount == Decimal("58.50")

        splitter.update_participant(2, consumption=Decimal("17"))
        assert splitter.result.shares[1].amount == Decimal("8.50")

    def test_clear_keeps_method(self):
        splitter = BillSplitter()
        splitter.set_method(SplitMethod.SIMPLE)
        splitter.set_bill(total_bill=Decimal("100"))
        splitter.add_participant()
        splitter.clear()
        assert splitter.method == SplitMethod.SIMPLE
        assert splitter.total_bill is None
        assert splitter.participants == [Participant(id=1), Participant(id=2)]

    def test_update_accepts_comma_decimal(self):
        splitter = BillSplitter()
        updated = splitter.update_participant(1, consumption="12,5")
        assert updated.consumption == Decimal("12.5")

    def test_update_rejects_negative_consumption(self):
        splitter = BillSplitter()
        with pytest.raises(ValidationError):
            splitter.update_participant(1, consumption=Decimal("-5"))
        assert splitter.participants[0].consumption is None
