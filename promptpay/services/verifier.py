"""Payload inspection and CRC verification services."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..crc import crc16_ccitt
from ..promptpay_encoder import TAG_AMOUNT, TAG_CRC, AccountType, strip_crc
from ..tlv import TLVItem, parse_tlv
from .errors import err_bad_payload

logger = logging.getLogger("promptpay.verifier")

TAG_MERCHANT_INFO = "29"
PROMPTPAY_AID = "A000000677010111"


@dataclass(slots=True)
class VerifyResult:
    valid: bool
    crc: str | None
    expected_crc: str
    account_type: AccountType | None = None
    account_number: str | None = None
    amount: str | None = None
    fields: dict[str, str] = field(default_factory=dict)


class PayloadVerifier:
    def verify(self, payload: str) -> VerifyResult:
        try:
            payload.encode("ascii")
            items = list(parse_tlv(payload))
        except (UnicodeEncodeError, ValueError) as exc:
            raise err_bad_payload(str(exc)) from exc
        if not items:
            raise err_bad_payload("Payload is empty")

        received = items[-1].value.upper() if items[-1].tag == TAG_CRC else None
        base_payload = strip_crc(payload)
        expected_crc = crc16_ccitt(f"{base_payload}{TAG_CRC}04")

        fields = {item.tag: item.value for item in items}
        account_type, account_number = self._merchant_account(fields.get(TAG_MERCHANT_INFO))
        result = VerifyResult(
            valid=received == expected_crc,
            crc=received,
            expected_crc=expected_crc,
            account_type=account_type,
            account_number=account_number,
            amount=fields.get(TAG_AMOUNT),
            fields=fields,
        )
        if not result.valid:
            logger.info("payload crc mismatch", extra={"crc": received, "expected_crc": expected_crc})
        return result

    @staticmethod
    def _merchant_account(value: str | None) -> tuple[AccountType | None, str | None]:
        if not value:
            return None, None
        try:
            sub_items: list[TLVItem] = list(parse_tlv(value))
        except ValueError:
            return None, None
        if not sub_items or sub_items[0] != TLVItem(tag="00", value=PROMPTPAY_AID):
            return None, None
        for item in sub_items[1:]:
            if item.tag in (AccountType.CITIZEN.value, AccountType.TELEPHONE.value):
                return AccountType(item.tag), item.value
        return None, None
