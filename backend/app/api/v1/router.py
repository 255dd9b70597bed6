"""
API v1 Router.

Aggregates all billing API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import customers, charges, billing_config, remittance

router = APIRouter()

# Customers and charges
router.include_router(customers.router)
router.include_router(charges.router)

# Singleton NSA configuration
router.include_router(billing_config.router)

# Remittance marking, return files and archives
router.include_router(remittance.router)
