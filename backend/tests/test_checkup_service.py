"""
Test per i promemoria di check-up T4 / T8.
"""

import datetime

import pytest

from conftest import TODAY, make_contract
from crm.schemas.dashboard import CheckupType
from crm.services.checkup_service import (
    apply_dismissals,
    checkup_dates,
    compute_checkup_items,
    generate_checkup_items,
    sort_checkup_items,
)


# ============================================================
# Date di verifica
# ============================================================


class TestCheckupDates:
    """T4 = stipula + 6 mesi, T8 = stipula + 10 mesi."""

    def test_milestones(self, test_settings):
        dates = checkup_dates(datetime.date(2024, 1, 15), test_settings)
        assert dates[CheckupType.T4] == datetime.date(2024, 7, 15)
        assert dates[CheckupType.T8] == datetime.date(2024, 11, 15)

    def test_month_end_is_clamped(self, test_settings):
        dates = checkup_dates(datetime.date(2023, 8, 31), test_settings)
        assert dates[CheckupType.T4] == datetime.date(2024, 2, 29)

    def test_offsets_come_from_the_given_settings(self, test_settings):
        """Le date dipendono solo dalla configurazione passata."""
        config = test_settings.model_copy(update={"checkup_t4_months": 3, "checkup_t8_months": 9})
        dates = checkup_dates(datetime.date(2024, 1, 15), config)
        assert dates[CheckupType.T4] == datetime.date(2024, 4, 15)
        assert dates[CheckupType.T8] == datetime.date(2024, 10, 15)

    def test_settings_are_required(self):
        with pytest.raises(TypeError):
            checkup_dates(datetime.date(2024, 1, 15))


# ============================================================
# Finestra di +/- 10 giorni
# ============================================================


class TestCheckupWindow:
    """Inclusione dei promemoria nella finestra."""

    def test_due_today(self, test_settings):
        contract = make_contract(start_date="2024-01-15")
        items = generate_checkup_items([contract], TODAY, test_settings)
        assert len(items) == 1
        assert items[0].type == CheckupType.T4
        assert items[0].days_diff == 0
        assert items[0].key == f"{contract.id}_T4"

    def test_window_boundaries_are_inclusive(self, test_settings):
        # T4 il 25/07 (+10) e il 05/07 (-10)
        future = make_contract(start_date="2024-01-25")
        past = make_contract(start_date="2024-01-05")
        items = generate_checkup_items([future, past], TODAY, test_settings)
        diffs = sorted(i.days_diff for i in items)
        assert diffs == [-10, 10]

    def test_outside_window(self, test_settings):
        # T4 il 26/07 (+11) e il 04/07 (-11)
        contracts = [make_contract(start_date="2024-01-26"), make_contract(start_date="2024-01-04")]
        assert generate_checkup_items(contracts, TODAY, test_settings) == []

    def test_t8(self, test_settings):
        contract = make_contract(start_date="2023-09-20")
        items = generate_checkup_items([contract], TODAY, test_settings)
        assert [i.type for i in items] == [CheckupType.T8]
        assert items[0].days_diff == 5

    def test_missing_or_invalid_start_date_is_skipped(self, test_settings):
        contracts = [make_contract(start_date=None), make_contract(start_date="non-una-data")]
        assert generate_checkup_items(contracts, TODAY, test_settings) == []


# ============================================================
# Archiviazione e ordinamento
# ============================================================


class TestDismissals:
    """I promemoria archiviati non ricompaiono."""

    def test_dismissed_key_is_filtered(self, test_settings):
        contract = make_contract(start_date="2024-01-15")
        items = compute_checkup_items([contract], TODAY, {f"{contract.id}_T4"}, test_settings)
        assert items == []

    def test_other_type_is_kept(self, test_settings):
        contract = make_contract(start_date="2024-01-15")
        items = generate_checkup_items([contract], TODAY, test_settings)
        kept = apply_dismissals(items, {f"{contract.id}_T8"})
        assert len(kept) == 1

    def test_sort_overdue_first(self, test_settings):
        later = make_contract(start_date="2024-01-20")
        overdue = make_contract(start_date="2024-01-08")
        items = sort_checkup_items(generate_checkup_items([later, overdue], TODAY, test_settings))
        assert [i.contract.id for i in items] == [overdue.id, later.id]
