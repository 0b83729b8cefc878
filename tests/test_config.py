"""Tests for settings and logging setup."""

from unittest.mock import patch

import structlog

from citycast.config import Environment, Settings, configure_structlog, settings


class TestSettings:
    def test_production_disables_debug_and_reload(self):
        production = Settings(environment=Environment.PRODUCTION, debug=True, reload=True)

        assert production.debug is False
        assert production.reload is False
        assert production.is_production() is True

    def test_cors_origins_from_comma_separated_string(self):
        configured = Settings(cors_origins="https://stadtour.nl, https://www.stadtour.nl,")

        assert configured.cors_origin_list == ["https://stadtour.nl", "https://www.stadtour.nl"]

    def test_production_cors_drops_wildcard(self):
        production = Settings(environment=Environment.PRODUCTION, cors_origins="*,https://stadtour.nl")

        assert production.get_cors_config()["allow_origins"] == ["https://stadtour.nl"]

    def test_log_level_is_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"


class TestConfigureStructlog:
    def test_console_renderer(self):
        with patch.object(settings, "log_json", False):
            configure_structlog()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer(self):
        with patch.object(settings, "log_json", True):
            configure_structlog()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
