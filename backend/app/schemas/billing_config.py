"""
Billing configuration schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ConfigUpdate(BaseModel):
    """Schema for updating the NSA counter."""
    last_sequence_number: int = Field(..., ge=0, alias="ultimoNsaSequencial")
    fixed_sequence_prefix: Optional[str] = Field(None, min_length=1, max_length=10, alias="parteFixaNsa")

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class ConfigResponse(BaseModel):
    """Schema for the singleton configuration."""
    id: int
    last_sequence_number: int = Field(..., alias="ultimoNsaSequencial")
    fixed_sequence_prefix: str = Field(..., alias="parteFixaNsa")

    class Config:
        from_attributes = True
        populate_by_name = True
