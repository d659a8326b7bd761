"""
API v1 routes
"""
from fastapi import APIRouter
from stockflow.api.v1 import auth, users, inventory, imports, reports, schedule, notes, backup

api_router = APIRouter(redirect_slashes=False)

# Include all v1 routers
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(imports.router, prefix="/imports", tags=["Imports"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
api_router.include_router(backup.router, prefix="/backup", tags=["Backup"])

__all__ = ["api_router"]
