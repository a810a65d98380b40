from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from peerrent.core.config import settings
from peerrent.db.session import get_db
from peerrent.core.security import subject_from_token
from peerrent.models.user import User
from peerrent.repositories.booking_repository import SqlBookingRepository
from peerrent.repositories.item_directory import SqlItemDirectory
from peerrent.repositories.user_directory import SqlUserDirectory
from peerrent.services.booking_service import BookingService
from peerrent.services.event_service import get_event_publisher

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="User not authenticated")
    try:
        user_id = subject_from_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role not in settings.admin_roles:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user

def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(
        bookings=SqlBookingRepository(db),
        items=SqlItemDirectory(db),
        users=SqlUserDirectory(db),
        events=get_event_publisher(),
    )
