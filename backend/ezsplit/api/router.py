"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from ezsplit.api.routes import users, expenses, summary

api_router = APIRouter()

# Include all route modules
api_router.include_router(users.router)
api_router.include_router(expenses.router)
api_router.include_router(summary.router)
