from fastapi import APIRouter
from peerrent.api.v1.routes.bookings import router as bookings_router
from peerrent.api.v1.routes.items import router as items_router
from peerrent.api.v1.routes.admin import router as admin_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(bookings_router)
api_router.include_router(items_router)
api_router.include_router(admin_router)
