"""CRC16-CCITT implementation."""
from __future__ import annotations

CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF
CRC_TAG_PREFIX = "6304"


def crc16_ccitt(data: str) -> str:
    """Compute CRC16-CCITT (0x1021, init 0xFFFF) for EMV payload strings."""

    checksum = CRC16_INIT
    for ch in data.encode("ascii"):
        checksum ^= ch << 8
        for _ in range(8):
            if checksum & 0x8000:
                checksum = (checksum << 1) ^ CRC16_POLY
            else:
                checksum <<= 1
            checksum &= 0xFFFF
    return f"{checksum:04X}"


def finalize(payload_no_crc: str, checksum: str) -> str:
    return f"{payload_no_crc}{checksum}"


def verify_crc(payload: str) -> bool:
    """Return True when the trailing tag 63 value matches the payload CRC."""

    if len(payload) < len(CRC_TAG_PREFIX) + 4:
        return False
    if payload[-8:-4] != CRC_TAG_PREFIX:
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:].upper()
