"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from bursary.api.v1.endpoints import accounts, dashboard, expenses, payments, students

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(students.router, prefix="/students", tags=["Students"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["Expenses"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["Receipt Books"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
