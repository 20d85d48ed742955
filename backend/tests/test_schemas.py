"""
Test per la validazione dei campi anagrafici e fiscali.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from crm.schemas.client import ClientCreate, ClientRead, Iban
from crm.schemas.contract import ContractRead


def _client(**overrides) -> dict:
    data = {"first_name": "Mario", "last_name": "Rossi"}
    data.update(overrides)
    return data


# ============================================================
# Codice fiscale e partita IVA
# ============================================================


class TestFiscalFields:
    """Errori riportati sul singolo campo, prima di ogni salvataggio."""

    def test_valid_fiscal_code_is_uppercased(self):
        client = ClientCreate(**_client(fiscal_code=" rssmra80a01h501u "))
        assert client.fiscal_code == "RSSMRA80A01H501U"

    def test_fiscal_code_bad_checksum(self):
        with pytest.raises(ValidationError) as exc:
            ClientCreate(**_client(fiscal_code="RSSMRA80A01H501A"))
        assert exc.value.errors()[0]["loc"] == ("fiscal_code",)

    def test_fiscal_code_bad_format(self):
        with pytest.raises(ValidationError):
            ClientCreate(**_client(fiscal_code="RSSMRA80"))

    def test_blank_fiscal_code_is_none(self):
        assert ClientCreate(**_client(fiscal_code="  ")).fiscal_code is None

    def test_valid_vat_number(self):
        assert ClientCreate(**_client(vat_number="IT01234567897")).vat_number == "01234567897"

    def test_vat_number_bad_check_digit(self):
        with pytest.raises(ValidationError) as exc:
            ClientCreate(**_client(vat_number="01234567890"))
        assert exc.value.errors()[0]["loc"] == ("vat_number",)


# ============================================================
# IBAN, email, telefono
# ============================================================


class TestOtherFields:
    def test_iban_normalized(self):
        iban = Iban(value="it60 x054 2811 1010 0000 0123 456")
        assert iban.value == "IT60X0542811101000000123456"

    def test_iban_wrong_country(self):
        with pytest.raises(ValidationError):
            Iban(value="DE89370400440532013000")

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            ClientCreate(**_client(email="non-una-email"))

    def test_blank_email_is_none(self):
        assert ClientCreate(**_client(email="")).email is None

    def test_invalid_phone(self):
        with pytest.raises(ValidationError):
            ClientCreate(**_client(mobile_phone="347-abc"))

    def test_names_required(self):
        with pytest.raises(ValidationError):
            ClientCreate(first_name="  ", last_name="Rossi")


class TestClientRead:
    def test_legacy_record_is_readable(self):
        """I dati storici non vengono rivalidati in lettura."""
        client = ClientRead.model_validate(
            {"id": "x", "first_name": "Anna", "fiscal_code": "NON-VALIDO", "unknown": 1}
        )
        assert client.fiscal_code == "NON-VALIDO"
        assert client.full_name == "Anna"


class TestContractRead:
    """Lettura tollerante dei contratti salvati."""

    def test_non_string_dates_are_dropped(self):
        contract = ContractRead.model_validate(
            {"id": "k", "start_date": 20240115, "end_date": ["2024-01-01"]}
        )
        assert contract.start_date is None
        assert contract.end_date is None

    def test_unparseable_amounts_are_none(self):
        contract = ContractRead.model_validate({"id": "k", "commission": "n/d", "kw": {"v": 3}})
        assert contract.commission is None
        assert contract.kw is None

    def test_comma_decimal_commission(self):
        contract = ContractRead.model_validate({"id": "k", "commission": "12,50"})
        assert contract.commission == Decimal("12.50")

    def test_odd_scalar_fields(self):
        contract = ContractRead.model_validate(
            {"id": "k", "provider": None, "contract_code": 123, "is_paid": "boh", "supply_address": "Via Roma"}
        )
        assert contract.provider == ""
        assert contract.contract_code == "123"
        assert contract.is_paid is False
        assert contract.supply_address is None
