"""Tests for the observability module — prompt registry + structured logging."""

import json
import logging
import sys

import pytest

from agriadvisor.core.errors import PersistenceError, UpstreamError, ValidationError
from agriadvisor.observability.logging import (
    TEXT_FORMAT,
    JSONFormatter,
    correlation_id,
    get_correlation_id,
    setup_logging,
)
from agriadvisor.observability.prompts import (
    get_active_prompt,
    get_prompt_version,
    list_prompts,
)


def _record(msg: str = "hi", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="agriadvisor.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestPromptRegistry:
    def test_get_active_prompt_returns_string(self):
        """The advisory prompt should carry every profile placeholder."""
        prompt = get_active_prompt("farm_advisory")
        assert isinstance(prompt, str)
        for placeholder in ("{location}", "{land_size}", "{land_type}", "{water_facility}", "{duration}"):
            assert placeholder in prompt

    def test_get_prompt_version(self):
        assert get_prompt_version("crop_plan") == "v1"

    def test_list_prompts(self):
        """All registered prompts are listed."""
        names = [p["name"] for p in list_prompts()]
        assert names == ["farm_advisory", "crop_plan", "disease_detection"]

    def test_json_templates_format_cleanly(self):
        prompt = get_active_prompt("crop_plan").format(crop_name="Rice", context="")
        assert '"cropName": "Rice"' in prompt
        assert "{{" not in prompt

    def test_unknown_prompt_raises(self):
        """Unknown prompt name raises KeyError."""
        with pytest.raises(KeyError, match="Unknown prompt"):
            get_active_prompt("nonexistent")


class TestJSONFormatter:
    def test_json_formatter_output(self):
        """JSONFormatter produces valid JSON with required fields."""
        parsed = json.loads(JSONFormatter().format(_record("test message")))
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "agriadvisor.test"
        assert parsed["message"] == "test message"
        assert "timestamp" in parsed
        assert "correlation_id" not in parsed

    def test_json_formatter_includes_correlation_id(self):
        """Correlation ID appears in JSON output when set."""
        token = correlation_id.set("test-123")
        try:
            parsed = json.loads(JSONFormatter().format(_record()))
            assert parsed["correlation_id"] == "test-123"
        finally:
            correlation_id.reset(token)

    def test_extra_fields_copied(self):
        output = JSONFormatter().format(_record(language="te", step="translate", duration_ms=12.5))
        parsed = json.loads(output)
        assert parsed["language"] == "te"
        assert parsed["step"] == "translate"
        assert parsed["duration_ms"] == 12.5
        assert "user_id" not in parsed

    def test_non_ascii_kept_readable(self):
        output = JSONFormatter().format(_record("అనువాదం పూర్తయింది"))
        assert "అనువాదం" in output

    async def test_correlation_id_propagation(self):
        """ContextVar propagates correlation ID across async chain."""
        results = []

        async def inner():
            results.append(get_correlation_id())

        token = correlation_id.set("async-456")
        try:
            await inner()
        finally:
            correlation_id.reset(token)

        assert results == ["async-456"]

    def test_setup_logging_json(self):
        """setup_logging with json_format=True installs JSONFormatter."""
        setup_logging(json_format=True, level="WARNING")
        root = logging.getLogger()
        assert len(root.handlers) >= 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        # Restore default for other tests
        setup_logging(json_format=False, level="INFO")

    def test_setup_logging_replaces_handlers_and_quiets_clients(self):
        setup_logging(json_format=False, level="DEBUG")
        setup_logging(json_format=False, level="DEBUG")
        root = logging.getLogger()
        try:
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
            assert root.handlers[0].formatter._fmt == TEXT_FORMAT
            assert logging.getLogger("httpx").level == logging.WARNING
            assert logging.getLogger("aiosqlite").level == logging.WARNING
        finally:
            setup_logging(json_format=False, level="INFO")

    def test_exception_included(self):
        try:
            raise ValueError("bad soil reading")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        parsed = json.loads(JSONFormatter().format(record))
        assert "bad soil reading" in parsed["exception"]


class TestErrors:
    def test_status_codes(self):
        assert ValidationError("x").status_code == 400
        assert UpstreamError("x").status_code == 500
        assert PersistenceError("x").status_code == 500

    def test_body_includes_details_only_when_set(self):
        assert ValidationError("Missing location").to_body() == {"error": "Missing location"}
        assert PersistenceError("Failed to save user input", details="locked").to_body() == {
            "error": "Failed to save user input",
            "details": "locked",
        }
