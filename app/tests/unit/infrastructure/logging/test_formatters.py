"""Unit tests for infrastructure.logging.formatters module."""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
)


@pytest.mark.unit
class TestAddAppInfo:
    def test_adds_name_and_version(self):
        processor = add_app_info("sqs-retry-scheduler", "abc1234")

        result = processor(None, "info", {"event": "retry_job_submitted"})

        assert result == {
            "event": "retry_job_submitted",
            "app_name": "sqs-retry-scheduler",
            "app_version": "abc1234",
        }

    def test_default_version_is_unknown(self):
        result = add_app_info("app")(None, "info", {"event": "e"})

        assert result["app_version"] == "unknown"


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor."""

    @pytest.mark.parametrize(
        "key",
        [
            "password",
            "aws_secret_access_key",
            "session_token",
            "Authorization",
            "receipt_handle",
            "api_key",
        ],
    )
    def test_masks_sensitive_keys(self, key):
        result = mask_sensitive_data()(None, "info", {key: "value"})

        assert result[key] == "***REDACTED***"

    def test_preserves_non_sensitive(self):
        event = {"event": "retry_job_rescheduled", "job_id": "job-1", "delay_seconds": 60}

        assert mask_sensitive_data()(None, "info", event) == event

    def test_preserves_none_values(self):
        result = mask_sensitive_data()(None, "info", {"token": None})

        assert result["token"] is None

    def test_custom_mask_value(self):
        result = mask_sensitive_data(mask_value="[hidden]")(None, "info", {"secret": "s"})

        assert result["secret"] == "[hidden]"

    def test_additional_patterns(self):
        processor = mask_sensitive_data(additional_patterns=frozenset({"queue_url"}))

        result = processor(None, "info", {"queue_url": "https://sqs..."})

        assert result["queue_url"] == "***REDACTED***"

    def test_sensitive_patterns_is_frozenset(self):
        assert isinstance(SENSITIVE_PATTERNS, frozenset)
        assert "receipt_handle" in SENSITIVE_PATTERNS
