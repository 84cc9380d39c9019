"""
Tests for settings, structured logging, and error types.
"""

import pytest


class TestSettings:
    """Environment-backed configuration."""

    def test_defaults(self):
        from biaswatch.config import settings
        assert settings.CORE_VERSION == "1.0.0"
        assert 0 <= settings.ALERT_THRESHOLD <= 1
        assert settings.MAX_PROCESSING_MS > 0
        assert settings.WEIGHT_MIN < settings.WEIGHT_MAX

    def test_frozen(self):
        from dataclasses import FrozenInstanceError
        from biaswatch.config import settings
        with pytest.raises(FrozenInstanceError):
            settings.ALERT_THRESHOLD = 0.9

    def test_monitoring_config_reads_settings(self):
        from biaswatch.config import settings
        from biaswatch.monitor import MonitoringConfig
        config = MonitoringConfig()
        assert config.alert_threshold == settings.ALERT_THRESHOLD
        assert config.max_cached_chains == settings.MAX_CACHED_CHAINS


class TestLogging:
    """Structured logging tests."""

    def _record(self, msg="Test message"):
        import logging
        return logging.LogRecord(
            name="biaswatch.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_json_formatter(self):
        import json
        from biaswatch.logging import JSONFormatter

        parsed = json.loads(JSONFormatter().format(self._record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "biaswatch.test"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        import json
        from biaswatch.logging import JSONFormatter

        record = self._record("Chain monitored")
        record.chain_id = "c-1"
        record.biases_count = 2
        record.unrelated = "dropped"
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["chain_id"] == "c-1"
        assert parsed["biases_count"] == 2
        assert "unrelated" not in parsed

    def test_text_formatter(self):
        from biaswatch.logging import TextFormatter
        output = TextFormatter().format(self._record())
        assert "biaswatch.test" in output
        assert "Test message" in output

    def test_get_logger(self):
        from biaswatch.logging import get_logger
        log = get_logger("monitor")
        assert log.name == "biaswatch.monitor"

    def test_setup_logging(self):
        import logging
        from biaswatch.logging import JSONFormatter, TextFormatter, setup_logging

        root = setup_logging(level="debug", fmt="json")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

        root = setup_logging(level="warning", fmt="text")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)
        root.handlers.clear()
        root.setLevel(logging.NOTSET)


class TestErrors:

    def test_hierarchy(self):
        from biaswatch.errors import (
            BiasWatchError,
            FeedbackValidationError,
            NoCorrectionStrategyError,
        )
        assert issubclass(FeedbackValidationError, BiasWatchError)
        assert issubclass(FeedbackValidationError, ValueError)
        assert issubclass(NoCorrectionStrategyError, LookupError)

    def test_no_strategy_message(self):
        from biaswatch.errors import NoCorrectionStrategyError
        from biaswatch.schemas import BiasType
        err = NoCorrectionStrategyError(BiasType.BANDWAGON)
        assert str(err) == "No correction strategy found for bias type: bandwagon"

    def test_package_exports(self):
        import biaswatch
        assert biaswatch.__version__ == "1.0.0"
        for name in biaswatch.__all__:
            assert hasattr(biaswatch, name)
