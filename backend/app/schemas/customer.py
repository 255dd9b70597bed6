"""
Customer Pydantic schemas.

Client-facing field names (nome, telefone, codigo, contaCorrente) are
mapped to storage attribute names through field aliases.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class CustomerCreate(BaseModel):
    """Schema for creating a new customer."""
    name: str = Field(..., min_length=1, max_length=255, alias="nome")
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30, alias="telefone")
    code: str = Field(..., min_length=1, max_length=50, alias="codigo", description="Business identifier")
    bank_account: Optional[str] = Field(None, max_length=50, alias="contaCorrente")

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class CustomerUpdate(BaseModel):
    """Schema for updating an existing customer. Only sent fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=255, alias="nome")
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30, alias="telefone")
    code: Optional[str] = Field(None, min_length=1, max_length=50, alias="codigo")
    bank_account: Optional[str] = Field(None, max_length=50, alias="contaCorrente")

    class Config:
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("name", "code")
    @classmethod
    def required_when_sent(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class CustomerResponse(BaseModel):
    """Schema for customer response."""
    id: str
    name: str = Field(..., alias="nome")
    email: Optional[str] = None
    phone: Optional[str] = Field(None, alias="telefone")
    code: str = Field(..., alias="codigo")
    bank_account: Optional[str] = Field(None, alias="contaCorrente")

    class Config:
        from_attributes = True
        populate_by_name = True
