"""
Charge Pydantic schemas.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from backend.app.models.billing_enums import ChargeStatus
from backend.app.models.charge import SHIPMENT_SEQUENCE_MAX_LENGTH

_REJECTED_RE = re.compile(rf"^{ChargeStatus.REJECTED.value}( \(\w{{1,2}}\))?$")


def normalize_status(value: str) -> str:
    """Accept Pendente, Pago and Rejeitado (optionally with its occurrence code)."""
    value = value.strip()
    if value in (ChargeStatus.PENDING.value, ChargeStatus.PAID.value):
        return value
    if _REJECTED_RE.match(value):
        return value
    raise ValueError(
        f"status must be '{ChargeStatus.PENDING.value}', '{ChargeStatus.PAID.value}' "
        f"or '{ChargeStatus.REJECTED.value} (<code>)'"
    )


class ChargeCreate(BaseModel):
    """Schema for creating a charge."""
    customer_id: str = Field(..., min_length=1, max_length=16, alias="clienteId")
    description: str = Field(..., min_length=1, alias="descricao")
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, alias="valor")
    due_date: date = Field(..., alias="vencimento")
    status: Optional[str] = None

    class Config:
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("status")
    @classmethod
    def check_status(cls, value):
        return normalize_status(value) if value is not None else value


class ChargeUpdate(BaseModel):
    """Schema for updating a charge. Only sent fields change."""
    customer_id: Optional[str] = Field(None, min_length=1, max_length=16, alias="clienteId")
    description: Optional[str] = Field(None, min_length=1, alias="descricao")
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2, alias="valor")
    due_date: Optional[date] = Field(None, alias="vencimento")
    status: Optional[str] = None
    shipment_status: Optional[str] = Field(None, min_length=1, max_length=30, alias="statusRemessa")
    shipment_sequence: Optional[str] = Field(None, max_length=SHIPMENT_SEQUENCE_MAX_LENGTH, alias="nsa_remessa")

    class Config:
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("customer_id", "description", "amount", "due_date", "status", "shipment_status")
    @classmethod
    def required_when_sent(cls, value, info):
        if value is None:
            raise ValueError("field cannot be null")
        if info.field_name == "status":
            return normalize_status(value)
        return value


class ChargeResponse(BaseModel):
    """Schema for displaying a charge."""
    id: str
    customer_id: str = Field(..., alias="clienteId")
    description: str = Field(..., alias="descricao")
    amount: float = Field(..., alias="valor")
    due_date: date = Field(..., alias="vencimento")
    status: str
    shipment_status: str = Field(..., alias="statusRemessa")
    shipment_sequence: Optional[str] = Field(None, alias="nsa_remessa")

    class Config:
        from_attributes = True
        populate_by_name = True
