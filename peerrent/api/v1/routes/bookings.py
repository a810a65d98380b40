from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from peerrent.api.deps import get_current_user, get_booking_service
from peerrent.api.v1.responses import booking_response, failure, page_response
from peerrent.core.config import settings
from peerrent.core.enums import BookingStatus
from peerrent.models.user import User
from peerrent.schemas.booking import (
    BookingCreate, BookingOut, BookingStatsOut, BorrowerStatsOut, LenderStatsOut, RatingIn, ReasonIn, StatusUpdate,
)
from peerrent.services.booking_query_service import BookingFilters
from peerrent.services.booking_service import BookingRequest, BookingService

router = APIRouter(tags=["bookings"])

@router.post("/bookings", status_code=201)
def create_booking(body: BookingCreate,
                   me: User = Depends(get_current_user),
                   svc: BookingService = Depends(get_booking_service)):
    request = BookingRequest(
        item_id=body.item_id,
        start_date=body.start_date,
        end_date=body.end_date,
        delivery_mode=body.delivery_mode.value if body.delivery_mode else None,
        pickup_location=body.pickup_location,
        delivery_location=body.delivery_location,
        special_instructions=body.special_instructions,
    )
    return booking_response(svc.create_booking(me.id, request), status_code=201)

@router.get("/bookings/my")
def my_bookings(status: Optional[List[BookingStatus]] = Query(default=None),
                startDate: Optional[date] = None,
                endDate: Optional[date] = None,
                role: str = Query(default="both", pattern="^(lender|borrower|both)$"),
                page: int = Query(default=1, ge=1),
                limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
                me: User = Depends(get_current_user),
                svc: BookingService = Depends(get_booking_service)):
    filters = BookingFilters(
        statuses=tuple(s.value for s in status or []),
        date_from=startDate,
        date_to=endDate,
        role=role,
        page=page,
        limit=limit,
    )
    return page_response(svc.get_user_bookings(me.id, filters))

@router.get("/bookings/my/stats")
def my_booking_stats(me: User = Depends(get_current_user),
                     svc: BookingService = Depends(get_booking_service)):
    result = svc.get_user_booking_stats(me.id)
    if not result.success:
        return failure(result)
    stats = result.data
    out = BookingStatsOut(
        as_lender=LenderStatsOut(
            total_bookings=stats.as_lender.total_bookings,
            completed_bookings=stats.as_lender.completed_bookings,
            pending_bookings=stats.as_lender.pending_bookings,
            total_earnings=stats.as_lender.total_rent,
            average_rating=stats.as_lender.average_rating,
        ),
        as_borrower=BorrowerStatsOut(
            total_bookings=stats.as_borrower.total_bookings,
            completed_bookings=stats.as_borrower.completed_bookings,
            pending_bookings=stats.as_borrower.pending_bookings,
            total_spent=stats.as_borrower.total_rent,
            average_rating=stats.as_borrower.average_rating,
        ),
        recent_bookings=[BookingOut.model_validate(b) for b in stats.recent_bookings],
    )
    return {"success": True, "data": out.model_dump(mode="json", by_alias=True)}

@router.get("/bookings/{booking_id}")
def get_booking(booking_id: str,
                me: User = Depends(get_current_user),
                svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.get_booking(booking_id, me.id, me.role))

@router.put("/bookings/{booking_id}/status")
def update_booking_status(booking_id: str, body: StatusUpdate,
                          me: User = Depends(get_current_user),
                          svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, body.status, body.reason, me.role))

@router.put("/bookings/{booking_id}/confirm")
def confirm_booking(booking_id: str,
                    me: User = Depends(get_current_user),
                    svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, BookingStatus.CONFIRMED, caller_role=me.role))

@router.put("/bookings/{booking_id}/start")
def start_booking(booking_id: str,
                  me: User = Depends(get_current_user),
                  svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, BookingStatus.IN_PROGRESS, caller_role=me.role))

@router.put("/bookings/{booking_id}/complete")
def complete_booking(booking_id: str,
                     me: User = Depends(get_current_user),
                     svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, BookingStatus.COMPLETED, caller_role=me.role))

@router.put("/bookings/{booking_id}/cancel")
def cancel_booking(booking_id: str, body: Optional[ReasonIn] = None,
                   me: User = Depends(get_current_user),
                   svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, BookingStatus.CANCELLED, body.reason if body else None, me.role))

@router.put("/bookings/{booking_id}/dispute")
def dispute_booking(booking_id: str,
                    me: User = Depends(get_current_user),
                    svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.update_status(booking_id, me.id, BookingStatus.DISPUTED, caller_role=me.role))

@router.post("/bookings/{booking_id}/rating")
def rate_booking(booking_id: str, body: RatingIn,
                 me: User = Depends(get_current_user),
                 svc: BookingService = Depends(get_booking_service)):
    return booking_response(svc.add_rating(booking_id, me.id, body.rating, body.feedback))
