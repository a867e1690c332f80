"""PromptPay EMVCo QR payload generator."""
from __future__ import annotations

from .crc import crc16_ccitt
from .promptpay_encoder import (
    AccountType,
    EncodedPayload,
    PromptPayRequest,
    build_payload,
    construct_request,
    generate_payload,
    verify_payload,
)
from .services.errors import (
    AmountFormatError,
    ImageWriteError,
    NegativeAmountError,
    PayloadFormatError,
    ServiceError,
    TargetFormatError,
)

__version__ = "0.1.0"

__all__ = [
    "AccountType",
    "AmountFormatError",
    "EncodedPayload",
    "ImageWriteError",
    "NegativeAmountError",
    "PayloadFormatError",
    "PromptPayRequest",
    "ServiceError",
    "TargetFormatError",
    "build_payload",
    "construct_request",
    "crc16_ccitt",
    "generate_payload",
    "verify_payload",
]
