"""PromptPay EMVCo payload encoder.

Builds the static PromptPay payload for a citizen ID or a mobile phone
target and closes it with tag 63 (CRC16-CCITT)::

    >>> generate_payload("0812345678", "50.23").payload
    '00020101021229370016A000000677010111011300668123456785802TH5303764540550.236304FCDA'
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from .crc import CRC_TAG_PREFIX, crc16_ccitt, finalize, verify_crc
from .services.errors import err_amount_format, err_negative_amount, err_target_format
from .tlv import TLVItem, build_tlv, parse_tlv

F_VERSION = "000201"
F_POI_METHOD = "010212"
F_MERCHANT_INFO = "29370016A000000677010111{account_type}13{account_number}"
F_COUNTRY_CODE = "5802TH"
F_CURRENCY_CODE = "5303764"
TAG_AMOUNT = "54"
TAG_CRC = "63"
PHONE_PREFIX = "0066"

_CITIZEN_RE = re.compile(r"[0-9]{13}")
_PHONE_RE = re.compile(r"[0-9]{10}")
_CENT = Decimal("0.01")

AmountLike = Union[Decimal, int, float, str]


class AccountType(str, enum.Enum):
    TELEPHONE = "01"
    CITIZEN = "02"


@dataclass(frozen=True)
class PromptPayRequest:
    target: str
    account_type: AccountType
    account_number: str
    amount: Decimal
    amount_text: str
    amount_length: str


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str


def classify_target(target: str) -> AccountType:
    """Return the account type for ``target`` or raise TargetFormatError."""

    if not isinstance(target, str):
        raise err_target_format()
    if _CITIZEN_RE.fullmatch(target):
        return AccountType.CITIZEN
    if _PHONE_RE.fullmatch(target):
        return AccountType.TELEPHONE
    raise err_target_format(target)


def normalize_account_number(target: str, account_type: AccountType) -> str:
    if account_type is AccountType.TELEPHONE:
        return f"{PHONE_PREFIX}{target[1:]}"
    return target


def _to_decimal(amount: AmountLike) -> Decimal:
    if isinstance(amount, bool):
        raise err_amount_format(f"Amount must be numeric, got {amount!r}")
    if isinstance(amount, float):
        # repr keeps 50.23 as 50.23 instead of its binary expansion
        amount = repr(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise err_amount_format(f"Amount must be numeric, got {amount!r}") from exc
    if not value.is_finite():
        raise err_amount_format(f"Amount must be finite, got {amount!r}")
    return value


def round_amount(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP).copy_abs()


def format_amount(amount: Decimal) -> str:
    """Render a rounded amount as ``50.23``, ``50.2`` or ``100.0``.

    Plain notation only, no grouping, trailing fraction zeros dropped while
    at least one fractional digit is kept.
    """

    whole, _, fraction = format(amount, "f").partition(".")
    fraction = fraction.rstrip("0") or "0"
    return f"{whole}.{fraction}"


def construct_request(target: str, amount: AmountLike) -> PromptPayRequest:
    """Validate and normalize a target and amount into a PromptPayRequest."""

    account_type = classify_target(target)
    account_number = normalize_account_number(target, account_type)

    value = _to_decimal(amount)
    if value < 0:
        raise err_negative_amount(f"Amount must not be negative, got {value}")

    try:
        rounded = round_amount(value)
    except InvalidOperation as exc:
        raise err_amount_format(f"Amount {value} is too large to round to cents") from exc
    amount_text = format_amount(rounded)
    amount_length = f"{len(amount_text):02d}"
    if len(amount_length) != 2:
        raise err_amount_format("Amount text exceeds 99 characters")

    return PromptPayRequest(
        target=target,
        account_type=account_type,
        account_number=account_number,
        amount=rounded,
        amount_text=amount_text,
        amount_length=amount_length,
    )


def build_payload(request: PromptPayRequest) -> str:
    """Assemble the payload up to and including the empty tag 63 header."""

    merchant_info = F_MERCHANT_INFO.format(
        account_type=request.account_type.value,
        account_number=request.account_number,
    )
    amount = TLVItem(tag=TAG_AMOUNT, value=request.amount_text).serialize()
    return "".join(
        (
            F_VERSION,
            F_POI_METHOD,
            merchant_info,
            F_COUNTRY_CODE,
            F_CURRENCY_CODE,
            amount,
            CRC_TAG_PREFIX,
        )
    )


def encode_request(request: PromptPayRequest) -> EncodedPayload:
    payload_no_crc = build_payload(request)
    crc = crc16_ccitt(payload_no_crc)
    return EncodedPayload(payload=finalize(payload_no_crc, crc), crc=crc)


def generate_payload(target: str, amount: AmountLike) -> EncodedPayload:
    """Build the complete PromptPay payload for ``target`` and ``amount``."""

    return encode_request(construct_request(target, amount))


def strip_crc(payload: str) -> str:
    """Remove Tag 63 (CRC) from an EMV payload if present."""

    items = [item for item in parse_tlv(payload) if item.tag != TAG_CRC]
    return build_tlv(items)


def verify_payload(payload: str) -> bool:
    """Return True when ``payload`` is well-formed TLV with a matching CRC."""

    try:
        items = list(parse_tlv(payload))
    except ValueError:
        return False
    if not items or items[-1] != TLVItem(tag=TAG_CRC, value=payload[-4:]):
        return False
    try:
        return verify_crc(payload)
    except UnicodeEncodeError:
        return False
