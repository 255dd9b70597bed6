"""
Billing configuration model.

Singleton row holding the NSA (remittance sequence) counter.
"""

from sqlalchemy import Column, Integer, String
from backend.app.db.session import Base

SINGLETON_CONFIG_ID = 1


class BillingConfig(Base):
    """
    Billing configuration.

    Exactly one row exists, keyed by SINGLETON_CONFIG_ID. The primary key is
    what makes lazy creation safe under concurrent reads.
    """
    __tablename__ = "config"

    id = Column(Integer, primary_key=True, autoincrement=False)
    last_sequence_number = Column(Integer, nullable=False, default=0)
    fixed_sequence_prefix = Column(String(10), nullable=False)

    def __repr__(self):
        return f"<BillingConfig(last_sequence_number={self.last_sequence_number}, prefix='{self.fixed_sequence_prefix}')>"
