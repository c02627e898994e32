"""
Main API router.
"""

from fastapi import APIRouter
from app.api import categories, todos, realtime

api_router = APIRouter()

api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(todos.router)
api_router.include_router(realtime.router)
