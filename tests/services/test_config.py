from __future__ import annotations

import json
import logging
from decimal import Decimal

from app.config import Settings
from app.dependencies import configure_logging, get_settings
from app.logging_config import JSONFormatter, setup_logging


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DRIFT_EPSILON", "0.05")
    monkeypatch.setenv("INTERNAL_LABEL", "In casa")
    settings = Settings(_env_file=None)
    assert settings.drift_epsilon == Decimal("0.05")
    assert settings.report_labels().internal == "In casa"
    assert settings.report_labels().unknown == "Sconosciuto"
    assert settings.sku_labels()["unconfigured"] == "Varianti non configurate"


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord("cost_math.units", logging.WARNING, __file__, 1, "drift on %s", ("p-1",), None)
    record.product_id = "p-1"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "drift on p-1"
    assert payload["level"] == "WARNING"
    assert payload["product_id"] == "p-1"


def test_setup_logging_sets_level() -> None:
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging("debug", json_output=True)
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        configure_logging(Settings(_env_file=None, log_level="WARNING"))
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
