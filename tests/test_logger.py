import json
import logging

from freezegun import freeze_time

from portfolio.logger import StructuredLogger, events
from portfolio.logging_config import LIBRARY_LOGGERS, ColoredFormatter, build_logging_config
from portfolio.settings import LoggingSettings


@freeze_time("2025-07-23 12:00:00")
def test_build_payload_merges_extra():
    payload = events.build_payload("manifest_request", client_ip="1.2.3.4", extra={"refresh": True})
    assert payload == {
        "timestamp": "2025-07-23T12:00:00+00:00",
        "event": "manifest_request",
        "client_ip": "1.2.3.4",
        "refresh": True,
    }


def test_log_event_emits_json(caplog):
    logger = StructuredLogger("portfolio.events.test")
    with caplog.at_level(logging.INFO, logger="portfolio.events.test"):
        logger.log_event("photo_proxied", key="street/a.jpg")

    entry = json.loads(caplog.records[-1].getMessage())
    assert entry["event"] == "photo_proxied"
    assert entry["key"] == "street/a.jpg"


def test_log_event_at_error_level(caplog):
    logger = StructuredLogger("portfolio.events.test")
    with caplog.at_level(logging.INFO, logger="portfolio.events.test"):
        logger.log_event("manifest_update_failed", level=logging.ERROR, error="boom")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert json.loads(record.getMessage())["error"] == "boom"


def test_log_event_below_threshold_is_dropped(caplog):
    logger = StructuredLogger("portfolio.events.test")
    with caplog.at_level(logging.WARNING, logger="portfolio.events.test"):
        logger.log_event("photo_proxied", key="a.jpg")
    assert not [r for r in caplog.records if r.name == "portfolio.events.test"]


def test_colored_formatter_restores_levelname():
    record = logging.LogRecord("portfolio", logging.WARNING, __file__, 1, "careful", None, None)
    output = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert "\x1b[33mWARNING\x1b[0m careful" == output
    assert record.levelname == "WARNING"


class TestLoggingConfig:
    def test_level_comes_from_settings(self):
        cfg = build_logging_config(LoggingSettings(level="warning"))
        assert cfg["root"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn.access"]["level"] == "WARNING"

    def test_explicit_level_overrides_settings(self):
        cfg = build_logging_config(LoggingSettings(level="ERROR"), level="DEBUG")
        assert cfg["root"]["level"] == "DEBUG"

    def test_plain_formatter_when_colors_disabled(self):
        cfg = build_logging_config(LoggingSettings(colored=False))
        assert cfg["formatters"]["app"]["()"] is logging.Formatter
        assert build_logging_config(LoggingSettings())["formatters"]["app"]["()"] is ColoredFormatter

    def test_library_loggers_quietened_unless_disabled(self):
        quiet = build_logging_config(LoggingSettings())
        assert all(quiet["loggers"][name]["level"] == "WARNING" for name in LIBRARY_LOGGERS)

        chatty = build_logging_config(LoggingSettings(quiet_libraries=False))
        assert not set(LIBRARY_LOGGERS) & set(chatty["loggers"])
