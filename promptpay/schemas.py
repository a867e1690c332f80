"""Pydantic schemas for API contracts."""
from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class AccountTypeEnum(str, Enum):
    CITIZEN = "CITIZEN"
    TELEPHONE = "TELEPHONE"


class GeneratePromptPayRequest(BaseModel):
    target: str = Field(description="13-digit citizen ID or 10-digit mobile number")
    amount: Decimal = Field(description="Amount in THB, rounded to 2 decimals")
    include_image: bool = True
    image_size: int | None = Field(default=None, ge=50, le=2000)


class GeneratePromptPayResponse(BaseModel):
    payload: str
    crc: str
    account_type: AccountTypeEnum
    account_number: str
    amount: str
    qr_png_base64: str | None = None
    image_error: str | None = None


class VerifyPayloadRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512)


class VerifyPayloadResponse(BaseModel):
    valid: bool
    crc: str | None
    expected_crc: str
    account_type: AccountTypeEnum | None = None
    account_number: str | None = None
    amount: str | None = None
    fields: dict[str, str]
