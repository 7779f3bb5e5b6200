"""API v1 router composition."""

from fastapi import APIRouter

from tablebook.api.v1.endpoints import auth, availability, maintenance, reservations, tables

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(availability.router, prefix="/availability", tags=["availability"])
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
api_router.include_router(maintenance.router, prefix="/maintenance", tags=["maintenance"])
