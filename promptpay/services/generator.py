"""PromptPay payload generation and QR building services."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..monitoring import record_payload_generated, record_service_error
from ..promptpay_encoder import AmountLike, EncodedPayload, PromptPayRequest, construct_request, encode_request
from ..renderer import render_qr_payload
from .errors import ImageWriteError, err_image_write

logger = logging.getLogger("promptpay.generator")


@dataclass(slots=True)
class GenerateResult:
    request: PromptPayRequest
    encoded: EncodedPayload
    qr_png_base64: str | None = None
    image_error: ImageWriteError | None = None


class PromptPayGenerator:
    def __init__(self, *, route: str = "service"):
        self.route = route

    def create_payload(
        self,
        *,
        target: str,
        amount: AmountLike,
        include_image: bool = True,
        image_size: int | None = None,
    ) -> GenerateResult:
        request = construct_request(target, amount)
        encoded = encode_request(request)
        record_payload_generated(request.account_type.name)
        logger.info(
            "promptpay payload generated",
            extra={
                "account_type": request.account_type.name,
                "amount": request.amount_text,
                "crc": encoded.crc,
            },
        )

        result = GenerateResult(request=request, encoded=encoded)
        if include_image:
            try:
                result.qr_png_base64 = self._render(encoded.payload, image_size)
            except ImageWriteError as exc:
                logger.warning("qr rendering failed", extra={"code": exc.code, "crc": encoded.crc})
                record_service_error(exc.code, self.route)
                result.image_error = exc
        return result

    @staticmethod
    def _render(payload: str, image_size: int | None) -> str:
        try:
            render = render_qr_payload(payload, size=image_size)
        except (OSError, ValueError) as exc:
            raise err_image_write(f"Unable to render QR image: {exc}") from exc
        return render["png_base64"]
