"""Tests for input validation and scan configuration."""

import logging

import pytest

from core.config import ScanConfig
from core.exceptions import ValidationException
from utils.logging_helpers import log_error_section
from utils.validation import (
    validate_inspector_backend,
    validate_output_format,
    validate_positive_number,
)


class TestValidators:
    """Tests for individual validators."""

    def test_positive_number_in_range(self):
        assert validate_positive_number(4, "max_workers", min_value=1) == 4

    def test_positive_number_below_minimum(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_positive_number(0, "max_workers", min_value=1)
        assert exc_info.value.field == "max_workers"

    def test_positive_number_above_maximum(self):
        with pytest.raises(ValidationException, match="<= 10"):
            validate_positive_number(11, "workers", max_value=10)

    def test_output_format_normalized(self):
        assert validate_output_format(" YAML ") == "yaml"

    def test_unknown_backend(self):
        with pytest.raises(ValidationException, match="Unknown inspector"):
            validate_inspector_backend("crane")


class TestScanConfig:
    """Tests for ScanConfig.validate."""

    def test_defaults_are_valid(self):
        ScanConfig().validate()

    def test_zero_workers_rejected(self):
        with pytest.raises(ValidationException):
            ScanConfig(max_workers=0).validate()

    def test_zero_timeout_rejected(self):
        with pytest.raises(ValidationException):
            ScanConfig(timeout=0).validate()


class TestLogSections:
    """Tests for sectioned log output."""

    def test_error_section_lines(self, caplog):
        logger = logging.getLogger("test.sections")
        with caplog.at_level(logging.ERROR, logger="test.sections"):
            log_error_section("Cluster query failed.", ["connection refused", ""], logger=logger, width=10)

        assert [r.getMessage() for r in caplog.records] == [
            "=" * 10,
            "Cluster query failed.",
            "connection refused",
            "",
            "=" * 10,
        ]
