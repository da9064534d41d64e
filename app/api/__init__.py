"""
API routes for the cash flow calculator.
"""

from fastapi import APIRouter

from app.api import calculations, investment

router = APIRouter()

# Include sub-routers
router.include_router(investment.router, tags=["investment"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
