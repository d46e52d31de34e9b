"""Unit tests for the contextual logger."""

import json
import logging

from usagegate.core.logging import ContextualLogger, _JSONFormatter, logger


class TestContextualLogger:
    def test_with_context_merges_dimensions(self):
        derived = logger.with_context(component="cache").with_context(org_id="o1")

        assert derived.dimensions["component"] == "cache"
        assert derived.dimensions["org_id"] == "o1"
        assert "component" not in logger.dimensions

    def test_with_prefix_prepends(self, caplog):
        derived = logger.with_prefix("RateLimiter: ")

        with caplog.at_level(logging.INFO, logger="usagegate"):
            derived.info("Stopped")

        assert "RateLimiter: Stopped" in caplog.text

    def test_dimensions_land_on_record(self, caplog):
        derived = logger.with_context(component="scheduler")

        with caplog.at_level(logging.INFO, logger="usagegate"):
            derived.info("hello", extra={"cycle": 3})

        record = caplog.records[-1]
        assert record.component == "scheduler"
        assert record.cycle == 3

    def test_is_logger_adapter(self):
        assert isinstance(logger, ContextualLogger)
        assert isinstance(logger, logging.LoggerAdapter)


class TestJSONFormatter:
    def test_formats_record_with_extras(self):
        record = logging.LogRecord("usagegate", logging.INFO, __file__, 1, "Built %s", ("map",), None)
        record.component = "scheduler"

        payload = json.loads(_JSONFormatter().format(record))

        assert payload["message"] == "Built map"
        assert payload["level"] == "INFO"
        assert payload["component"] == "scheduler"
