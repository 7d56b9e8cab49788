import json
import logging
from decimal import Decimal

from storefront._logging import JsonFormatter, configure_logging, get_logger
from storefront.config import Settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("STOREFRONT_PLATFORM_FEE_RATE", "0.1")
    monkeypatch.setenv("STOREFRONT_TAX_RATES", '{"DE": "0.19"}')
    monkeypatch.setenv("STOREFRONT_PAYMENT_SUCCESS_RATE", "1")

    settings = Settings()

    assert settings.platform_fee_rate == Decimal("0.1")
    assert settings.tax_rates == {"DE": Decimal("0.19")}
    assert settings.payment_success_rate == 1.0
    assert settings.base_currency == "GBP"


def test_loggers_share_namespace():
    assert get_logger("storefront.pricing._engine").name == "storefront.pricing._engine"
    assert get_logger("tests").name == "storefront.tests"
    assert get_logger().name == "storefront"


def test_configure_logging_replaces_handler():
    root = configure_logging("debug")
    configure_logging("info", json_mode=True)
    ours = [h for h in root.handlers if getattr(h, "_storefront", False)]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JsonFormatter)
    assert root.level == logging.INFO
    root.removeHandler(ours[0])


def test_json_formatter_keeps_extra_fields():
    record = logging.LogRecord("storefront.checkout", logging.INFO, __file__, 1, "order placed", None, None)
    record.order_id = "HOS-1"
    record.total = Decimal("1.50")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "order placed"
    assert payload["order_id"] == "HOS-1"
    assert payload["total"] == "1.50"
