"""
Main API router.
"""

from fastapi import APIRouter
from app.api import categorization, settings

api_router = APIRouter()

api_router.include_router(categorization.router)
api_router.include_router(settings.router)
