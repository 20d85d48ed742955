"""
Test per la classificazione delle scadenze.
"""

import datetime

import pytest

from conftest import TODAY, make_contract
from crm.schemas.dashboard import ExpiryStatus
from crm.services.expiry_service import (
    classify_expiry,
    count_by_status,
    describe_days_remaining,
    expiring_contracts,
)


# ============================================================
# Classificazione
# ============================================================


class TestClassifyExpiry:
    """Le quattro classi sono mutuamente esclusive."""

    @pytest.mark.parametrize(
        "end_date,expected",
        [
            (None, ExpiryStatus.ACTIVE_NO_END),
            (datetime.date(2024, 7, 14), ExpiryStatus.EXPIRED),
            (datetime.date(2024, 7, 15), ExpiryStatus.EXPIRING_SOON),
            (datetime.date(2024, 9, 13), ExpiryStatus.EXPIRING_SOON),
            (datetime.date(2024, 9, 14), ExpiryStatus.ACTIVE),
        ],
    )
    def test_canonical_threshold(self, end_date, expected):
        assert classify_expiry(end_date, TODAY, 60) == expected

    def test_compact_threshold(self):
        end = datetime.date(2024, 8, 20)
        assert classify_expiry(end, TODAY, 60) == ExpiryStatus.EXPIRING_SOON
        assert classify_expiry(end, TODAY, 30) == ExpiryStatus.ACTIVE


class TestDescribeDaysRemaining:
    def test_labels(self):
        assert describe_days_remaining(-3) == "Scaduto"
        assert describe_days_remaining(0) == "Scade oggi"
        assert describe_days_remaining(1) == "Scade domani"
        assert describe_days_remaining(12) == "Scade tra 12 giorni"


# ============================================================
# Liste e conteggi
# ============================================================


class TestExpiringContracts:
    """Solo i contratti in scadenza, dal più vicino."""

    def test_sorted_by_end_date(self):
        far = make_contract(end_date="2024-09-01")
        near = make_contract(end_date="2024-07-16")
        expired = make_contract(end_date="2024-07-01")
        open_ended = make_contract(end_date=None)

        items = expiring_contracts([far, near, expired, open_ended], TODAY, 60)

        assert [i.contract.id for i in items] == [near.id, far.id]
        assert items[0].days_remaining == 1
        assert items[0].label == "Scade domani"

    def test_count_by_status(self):
        contracts = [
            make_contract(end_date=None),
            make_contract(end_date="bad"),
            make_contract(end_date="2024-01-01"),
            make_contract(end_date="2024-08-01"),
            make_contract(end_date="2025-08-01"),
        ]
        counts = count_by_status(contracts, TODAY, 60)
        assert counts.active_no_end == 2
        assert counts.expired == 1
        assert counts.expiring_soon == 1
        assert counts.active == 1
        assert counts.total == len(contracts)
