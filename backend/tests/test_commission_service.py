"""
Test per l'aggregazione delle provvigioni.
"""

import datetime
from decimal import Decimal

from conftest import make_client, make_contract
from crm.schemas.dashboard import CommissionFilter
from crm.services.commission_service import (
    aggregate,
    available_years,
    client_available_years,
    provider_cardinality,
    summarize,
    this_month_summary,
)


def _portfolio():
    return [
        make_contract(type="electricity", provider="Enel", start_date="2024-07-02", commission="100.00", is_paid=True),
        make_contract(type="gas", provider="Enel", start_date="2024-07-20", commission="50.50"),
        make_contract(type="telephony", provider="TIM", start_date="2024-06-10", commission="30.00"),
        make_contract(type="electricity", provider="Edison", start_date="2023-07-05", commission=None),
        make_contract(type="telephony", provider="Enel", start_date=None, commission="10.00"),
    ]


# ============================================================
# Filtri
# ============================================================


class TestCommissionFilter:
    """Normalizzazione di 'all' e dei valori vuoti."""

    def test_all_means_no_filter(self):
        f = CommissionFilter(year="all", month="", provider="all")
        assert f.year is None and f.month is None and f.provider is None

    def test_string_values_are_parsed(self):
        f = CommissionFilter(year="2024", month="7", provider=" Enel ")
        assert f.year == 2024 and f.month == 7 and f.provider == "Enel"


# ============================================================
# Aggregazione
# ============================================================


class TestAggregate:
    """Somme per categoria e filtri in AND."""

    def test_no_filter_sums_everything(self):
        summary = summarize(_portfolio())
        assert summary.total == Decimal("190.50")
        assert summary.telephony == Decimal("40.00")
        assert summary.energy == Decimal("150.50")
        assert summary.energy + summary.telephony == summary.total
        assert summary.count == 5
        assert summary.paid_total == Decimal("100.00")
        assert summary.unpaid_total == Decimal("90.50")

    def test_year_and_month(self):
        subset, summary = aggregate(_portfolio(), CommissionFilter(year=2024, month=7))
        assert len(subset) == 2
        assert summary.total == Decimal("150.50")

    def test_month_across_years(self):
        subset, _ = aggregate(_portfolio(), CommissionFilter(month=7))
        assert len(subset) == 3

    def test_provider_without_date_filter_includes_undated(self):
        subset, summary = aggregate(_portfolio(), CommissionFilter(provider="Enel"))
        assert len(subset) == 3
        assert summary.telephony == Decimal("10.00")

    def test_undated_contract_never_matches_year(self):
        subset, _ = aggregate(_portfolio(), CommissionFilter(provider="Enel", year=2024))
        assert all(c.start_on is not None for c in subset)

    def test_this_month_ignores_user_filter(self):
        summary = this_month_summary(_portfolio(), datetime.date(2024, 7, 15))
        assert summary.count == 2
        assert summary.energy_count == 2


# ============================================================
# Fornitori e anni
# ============================================================


class TestCardinalityAndYears:
    def test_provider_counted_in_both_categories(self):
        cardinality = provider_cardinality(_portfolio())
        assert cardinality.energy == 2
        assert cardinality.telephony == 2

    def test_available_years_descending(self):
        assert available_years(_portfolio()) == [2024, 2023]

    def test_client_years_include_current(self):
        clients = [make_client(created_at="2022-05-01T09:00:00+00:00"), make_client(created_at=None)]
        assert client_available_years(clients, datetime.date(2024, 7, 15)) == [2024, 2022]
