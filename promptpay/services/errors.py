"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class TargetFormatError(ServiceError):
    """Target is neither a 13-digit citizen ID nor a 10-digit phone number."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            code="ERR_TARGET_FORMAT",
            message=message or "Target must be a 13-digit citizen ID or a 10-digit phone number",
            status_code=422,
        )


class NegativeAmountError(ServiceError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="ERR_NEGATIVE_AMOUNT", message=message or "Amount must not be negative", status_code=422)


class AmountFormatError(ServiceError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="ERR_AMOUNT_FORMAT", message=message or "Amount is not a finite decimal number", status_code=422)


class ImageWriteError(ServiceError):
    """Rendering or writing the QR image failed; the payload itself is still valid."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="ERR_IMAGE_WRITE", message=message or "Unable to write QR image", status_code=500)


class PayloadFormatError(ServiceError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="ERR_BAD_PAYLOAD", message=message or "Invalid EMVCo payload", status_code=400)


def err_target_format(target: str | None = None) -> TargetFormatError:
    if target is None:
        return TargetFormatError()
    return TargetFormatError(f"Target of length {len(target)} matches neither citizen ID nor phone number shape")


def err_negative_amount(message: str | None = None) -> NegativeAmountError:
    return NegativeAmountError(message)


def err_amount_format(message: str | None = None) -> AmountFormatError:
    return AmountFormatError(message)


def err_image_write(message: str | None = None) -> ImageWriteError:
    return ImageWriteError(message)


def err_bad_payload(message: str | None = None) -> PayloadFormatError:
    return PayloadFormatError(message)
