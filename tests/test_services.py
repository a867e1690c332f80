"""Tests for the generation and verification services."""

import base64
import logging

import pytest

from promptpay.promptpay_encoder import AccountType, generate_payload
from promptpay.services import generator as generator_module
from promptpay.services.errors import NegativeAmountError, PayloadFormatError, TargetFormatError
from promptpay.services.generator import PromptPayGenerator
from promptpay.services.verifier import PayloadVerifier


class TestPromptPayGenerator:
    def test_payload_and_image(self, phone_target: str) -> None:
        result = PromptPayGenerator().create_payload(target=phone_target, amount=50.23)

        assert result.encoded.payload.endswith("6304FCDA")
        assert result.request.account_type is AccountType.TELEPHONE
        assert base64.b64decode(result.qr_png_base64).startswith(b"\x89PNG")
        assert result.image_error is None

    def test_without_image(self, citizen_target: str) -> None:
        result = PromptPayGenerator().create_payload(target=citizen_target, amount=1, include_image=False)

        assert result.qr_png_base64 is None
        assert result.image_error is None

    def test_render_failure_is_not_fatal(self, phone_target: str, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken_render(payload: str, size: int | None = None) -> dict:
            raise OSError("disk full")

        monkeypatch.setattr(generator_module, "render_qr_payload", broken_render)
        result = PromptPayGenerator().create_payload(target=phone_target, amount=50.23)

        assert result.encoded.crc == "FCDA"
        assert result.qr_png_base64 is None
        assert result.image_error is not None
        assert result.image_error.code == "ERR_IMAGE_WRITE"

    def test_validation_errors_propagate(self, phone_target: str) -> None:
        with pytest.raises(TargetFormatError):
            PromptPayGenerator().create_payload(target="123", amount=1)
        with pytest.raises(NegativeAmountError):
            PromptPayGenerator().create_payload(target=phone_target, amount=-1)

    def test_logs_without_raw_target(self, phone_target: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="promptpay.generator"):
            PromptPayGenerator().create_payload(target=phone_target, amount=50.23, include_image=False)

        record = next(r for r in caplog.records if r.name == "promptpay.generator")
        assert record.account_type == "TELEPHONE"
        assert record.amount == "50.23"
        assert phone_target not in caplog.text


class TestPayloadVerifier:
    def test_valid_phone_payload(self, phone_target: str) -> None:
        payload = generate_payload(phone_target, 50.23).payload
        result = PayloadVerifier().verify(payload)

        assert result.valid is True
        assert result.crc == result.expected_crc == "FCDA"
        assert result.account_type is AccountType.TELEPHONE
        assert result.account_number == "0066812345678"
        assert result.amount == "50.23"
        assert result.fields["58"] == "TH"
        assert result.fields["53"] == "764"

    def test_valid_citizen_payload(self, citizen_target: str) -> None:
        result = PayloadVerifier().verify(generate_payload(citizen_target, 9999999.99).payload)

        assert result.valid is True
        assert result.crc == "2B5D"
        assert result.account_type is AccountType.CITIZEN
        assert result.account_number == citizen_target

    def test_crc_mismatch(self, phone_target: str) -> None:
        payload = generate_payload(phone_target, 50.23).payload[:-4] + "0000"
        result = PayloadVerifier().verify(payload)

        assert result.valid is False
        assert result.crc == "0000"
        assert result.expected_crc == "FCDA"

    def test_missing_crc_field(self, phone_target: str) -> None:
        payload = generate_payload(phone_target, 50.23).payload[:-8]
        result = PayloadVerifier().verify(payload)

        assert result.valid is False
        assert result.crc is None
        assert result.expected_crc == "FCDA"

    def test_foreign_merchant_info_is_not_decoded(self) -> None:
        result = PayloadVerifier().verify("000201291000060000015802TH6304ABCD")

        assert result.account_type is None
        assert result.account_number is None

    @pytest.mark.parametrize("payload", ["", "0002", "00020", "5410123", "5802ไทย"])
    def test_malformed(self, payload: str) -> None:
        with pytest.raises(PayloadFormatError):
            PayloadVerifier().verify(payload)
