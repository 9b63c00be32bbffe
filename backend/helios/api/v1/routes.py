"""
API Router
Combines all endpoint routers
"""
from fastapi import APIRouter
from helios.api.v1.endpoints import (
    console,
    health,
)

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(console.router)
