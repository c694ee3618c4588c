"""Test structured logging setup."""
import io
import json

import pytest
import structlog
from compact_numbers.errors import MissingLocaleDataError
from compact_numbers.formatting.context import log_error
from compact_numbers.utils.logging import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_output_keeps_unicode(self, capsys):
        setup_logging("INFO")
        structlog.get_logger("test").info("locale_data_added", locale="uk", pattern="0 тис.")
        record = json.loads(capsys.readouterr().out.strip())
        assert record["event"] == "locale_data_added"
        assert record["level"] == "info"
        assert "тис." in record["pattern"]

    def test_level_filtering(self, capsys):
        setup_logging("WARNING")
        structlog.get_logger("test").info("hidden")
        assert capsys.readouterr().out == ""

    def test_default_error_callback(self, capsys):
        setup_logging("INFO")
        log_error(MissingLocaleDataError("No compact number data has been loaded"))
        record = json.loads(capsys.readouterr().out.strip())
        assert record["event"] == "compact_number_error"
        assert record["code"] == "MISSING_DATA"
        assert record["cause"] is None

    def test_custom_stream(self, capsys):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)
        structlog.get_logger("test").warning("malformed_cldr_table", locale="ar")
        assert capsys.readouterr().out == ""
        record = json.loads(stream.getvalue().strip())
        assert record["event"] == "malformed_cldr_table"
        assert record["level"] == "warning"

    def test_level_name_case_insensitive(self, capsys):
        setup_logging("debug")
        structlog.get_logger("test").debug("locale_data_added", locale="en")
        assert json.loads(capsys.readouterr().out.strip())["level"] == "debug"

    def test_unknown_level_rejected(self):
        with pytest.raises(KeyError):
            setup_logging("LOUD")
