"""Tests for service error types."""

import pytest

from promptpay.services.errors import (
    AmountFormatError,
    ImageWriteError,
    NegativeAmountError,
    PayloadFormatError,
    ServiceError,
    TargetFormatError,
    err_bad_payload,
    err_image_write,
    err_negative_amount,
    err_target_format,
)


class TestErrorFamily:
    @pytest.mark.parametrize(
        ("error_cls", "code", "status_code"),
        [
            (TargetFormatError, "ERR_TARGET_FORMAT", 422),
            (NegativeAmountError, "ERR_NEGATIVE_AMOUNT", 422),
            (AmountFormatError, "ERR_AMOUNT_FORMAT", 422),
            (ImageWriteError, "ERR_IMAGE_WRITE", 500),
            (PayloadFormatError, "ERR_BAD_PAYLOAD", 400),
        ],
    )
    def test_codes(self, error_cls: type[ServiceError], code: str, status_code: int) -> None:
        err = error_cls()
        assert isinstance(err, ServiceError)
        assert isinstance(err, Exception)
        assert err.code == code
        assert err.status_code == status_code

    def test_str_includes_code_and_message(self) -> None:
        err = err_negative_amount("Amount must not be negative, got -1")
        assert str(err) == "ERR_NEGATIVE_AMOUNT: Amount must not be negative, got -1"

    def test_target_factory_reports_length(self) -> None:
        err = err_target_format("08123456789")
        assert isinstance(err, TargetFormatError)
        assert "length 11" in err.message

    def test_factories_use_default_message(self) -> None:
        assert err_image_write().message == "Unable to write QR image"
        assert err_bad_payload().message == "Invalid EMVCo payload"

    def test_kinds_are_distinct(self) -> None:
        assert not isinstance(ImageWriteError(), (TargetFormatError, NegativeAmountError))
