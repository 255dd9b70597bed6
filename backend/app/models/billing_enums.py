"""
Billing enumerations for charges and remittances.
"""

import enum


class ChargeStatus(str, enum.Enum):
    """Charge status enumeration."""
    PENDING = "Pendente"  # Created, waiting for the bank
    PAID = "Pago"  # Confirmed by a return file or manually
    REJECTED = "Rejeitado"  # Refused by the bank, stored with its occurrence code

    @classmethod
    def rejected(cls, occurrence_code: str) -> str:
        """Status string for a rejection carrying the bank occurrence code."""
        return f"{cls.REJECTED.value} ({occurrence_code})"


class ShipmentStatus(str, enum.Enum):
    """Remittance shipment marker."""
    NOT_SENT = "N/A"
    PROCESSED = "Processed"  # Included in a remittance batch


# Occurrence codes reported by the bank for a settled charge
PAID_OCCURRENCE_CODES = frozenset({"00", "PG"})
