from fastapi import APIRouter

from .plans import plans_router
from .purchases import purchases_router
from .reports import reports_router
from .schedules import schedules_router

router = APIRouter()

router.include_router(plans_router, tags=["Installment Plans"])
router.include_router(schedules_router, tags=["Installment Schedules"])
router.include_router(purchases_router, tags=["Purchases"])
router.include_router(reports_router, tags=["Reports"])
