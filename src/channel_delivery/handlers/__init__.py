"""
Module: handlers
Description: Package initialization for HTTP handlers.

This package contains the FastAPI routers of the delivery service:
- business: Credentials, scheduled deliveries and raw publishing
"""

from .business import router as business_router

__all__ = ["business_router"]
