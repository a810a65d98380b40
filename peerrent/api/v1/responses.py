from fastapi.responses import JSONResponse

from peerrent.core.errors import ServiceResult
from peerrent.schemas.booking import BookingOut, PaginationOut
from peerrent.services.booking_query_service import Page


def booking_json(booking) -> dict:
    return BookingOut.model_validate(booking).model_dump(mode="json", by_alias=True)


def failure(result: ServiceResult) -> JSONResponse:
    return JSONResponse(
        status_code=result.status_code,
        content={"success": False, "error": result.error, "code": result.code, "details": result.details},
    )


def booking_response(result: ServiceResult, status_code: int = 200):
    if not result.success:
        return failure(result)
    return JSONResponse(status_code=status_code, content={"success": True, "data": booking_json(result.data)})


def page_response(result: ServiceResult):
    if not result.success:
        return failure(result)
    page: Page = result.data
    pagination = PaginationOut(
        page=page.page,
        limit=page.limit,
        total=page.total,
        total_pages=page.total_pages,
        has_next=page.has_next,
        has_prev=page.has_prev,
    )
    return {
        "success": True,
        "data": [booking_json(b) for b in page.items],
        "pagination": pagination.model_dump(by_alias=True),
    }
