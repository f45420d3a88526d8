"""Tests for the error hierarchy and logging setup."""

import json
import logging

import pytest

from cekap_app.core.errors import (
    AccessDeniedError,
    AgencyError,
    DuplicateIdentityWarning,
    InvalidStateError,
    PartialEffectError,
    PersistenceError,
    ValidationError,
)
from cekap_app.core.logging import JsonFormatter, setup_logging
from cekap_app.models.customer import Customer, VehicleType


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [ValidationError, InvalidStateError, AccessDeniedError, PersistenceError, PartialEffectError],
    )
    def test_all_errors_share_a_base(self, error_class) -> None:
        assert issubclass(error_class, AgencyError)

    def test_validation_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise ValidationError("Amount is required.")

    def test_partial_effect_carries_progress(self) -> None:
        error = PartialEffectError("stopped", completed=["receipt"], refs={"receipt_id": "r-1"})

        assert isinstance(error, PersistenceError)
        assert error.completed == ["receipt"]
        assert error.refs == {"receipt_id": "r-1"}
        assert str(error) == "stopped"

    def test_duplicate_warning_names_customer(self) -> None:
        customer = Customer(
            id="c-1",
            name="John Tan",
            phone="+6012-3456789",
            ic="900101-10-1234",
            email="",
            is_company=False,
            vehicle_type=VehicleType.MOTOR,
            vehicle_reg_no="WXY 1234",
            insurance_type=None,
            others_category=None,
            last_updated="",
        )
        warning = DuplicateIdentityWarning(customer, "ic")

        assert not isinstance(warning, AgencyError)
        assert warning.customer is customer
        assert "John Tan" in str(warning)


class TestLogging:
    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            "cekap_app.test", logging.WARNING, __file__, 1, "paid %s", ("INV-1",), None
        )

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "cekap_app.test"
        assert payload["message"] == "paid INV-1"
        assert "timestamp" in payload

    def test_setup_logging_installs_one_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        try:
            setup_logging("DEBUG", "json")
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
