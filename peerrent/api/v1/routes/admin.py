from typing import Optional
from fastapi import APIRouter, Depends, Query
from peerrent.api.deps import require_admin, get_booking_service
from peerrent.api.v1.responses import booking_response, page_response
from peerrent.core.config import settings
from peerrent.core.enums import BookingStatus
from peerrent.models.user import User
from peerrent.schemas.booking import DisputeResolution
from peerrent.services.booking_query_service import BookingFilters
from peerrent.services.booking_service import BookingService

router = APIRouter(tags=["admin"])

@router.get("/admin/bookings")
def list_all_bookings(status: Optional[BookingStatus] = None,
                      itemId: Optional[str] = None,
                      page: int = Query(default=1, ge=1),
                      limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
                      me: User = Depends(require_admin),
                      svc: BookingService = Depends(get_booking_service)):
    filters = BookingFilters(
        statuses=(status.value,) if status else (),
        item_id=itemId,
        page=page,
        limit=limit,
    )
    return page_response(svc.list_all_bookings(filters))

@router.put("/admin/bookings/{booking_id}/resolve")
def resolve_dispute(booking_id: str, body: DisputeResolution,
                    me: User = Depends(require_admin),
                    svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, body.status, body.reason, caller_role=me.role))
