"""
Central API router that aggregates all route modules.
The booking widget posts to root-level paths, so there is no version prefix.
"""

from fastapi import APIRouter

from booking_payments.api.routes import hire, payments

api_router = APIRouter()
api_router.include_router(payments.router)
api_router.include_router(hire.router)
