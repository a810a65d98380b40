from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from peerrent.api.deps import get_current_user, get_booking_service
from peerrent.api.v1.responses import failure
from peerrent.models.user import User
from peerrent.schemas.booking import AvailabilityOut
from peerrent.services.booking_service import BookingService

router = APIRouter(tags=["items"])

@router.get("/items/{item_id}/availability")
def item_availability(item_id: str, startDate: date, endDate: date,
                      me: User = Depends(get_current_user),
                      svc: BookingService = Depends(get_booking_service)):
    if startDate < date.today():
        raise HTTPException(status_code=400, detail="Start date cannot be in the past")
    if endDate < startDate:
        raise HTTPException(status_code=400, detail="End date must be greater than or equal to start date")
    result = svc.check_availability(item_id, startDate, endDate)
    if not result.success:
        return failure(result)
    out = AvailabilityOut(available=result.data.available, reason=result.data.reason)
    return {"success": True, "data": out.model_dump(by_alias=True)}
