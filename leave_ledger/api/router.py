from fastapi import APIRouter

from leave_ledger.api.calculations import calculations_router
from leave_ledger.api.ledger import employee_ledger_router
from leave_ledger.api.reports import reports_router

api_router = APIRouter()
api_router.include_router(reports_router)
api_router.include_router(employee_ledger_router)
api_router.include_router(calculations_router)
