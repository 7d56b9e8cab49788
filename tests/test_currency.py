from decimal import Decimal

import pytest
from kungfu import Some

from storefront import currency as FX


def test_known_currency_converts_with_its_rate():
    assert FX.convert_to_base(Decimal("15"), "USD") == Decimal("12.00")
    assert FX.convert_to_base(Decimal("15"), "usd") == Decimal("12.00")


def test_base_currency_is_identity():
    assert FX.convert_to_base(Decimal("15"), "GBP") == Decimal("15")


def test_unknown_currency_falls_back_to_identity(caplog):
    with caplog.at_level("WARNING", logger="storefront"):
        assert FX.convert_to_base(Decimal("15"), "XYZ") == Decimal("15")
    assert "conversion gap" in caplog.text


def test_negative_amounts_convert():
    assert FX.convert_to_base(Decimal("-10"), "EUR") == Decimal("-8.50")


def test_lookup_is_optional():
    match FX.DEFAULT_RATES.lookup("JPY"):
        case Some(rate):
            assert rate == Decimal("0.005")
        case _:
            pytest.fail("JPY should be known")

    assert not isinstance(FX.DEFAULT_RATES.lookup("XYZ"), Some)


def test_custom_table_always_knows_its_base():
    table = FX.RateTable(base="usd", rates={"GBP": "1.25"})
    assert table.base == "USD"
    assert table.knows("USD")
    assert FX.convert_to_base(10, "GBP", table) == Decimal("12.50")
