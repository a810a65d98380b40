from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from peerrent.core.config import settings

ALGO = "HS256"
ACCESS = "access"


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    """Mint a token the way the identity provider does; used by local tooling and tests."""
    if expires_minutes is None:
        expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    exp = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": subject, "type": ACCESS, "exp": exp}, settings.SECRET_KEY, algorithm=ALGO)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])


def subject_from_token(token: str) -> str:
    """User id carried by an access token. Raises JWTError for anything else."""
    payload = decode_token(token)
    # Provider tokens may omit "type"; only reject an explicit non-access token
    if payload.get("type", ACCESS) != ACCESS:
        raise JWTError("not an access token")
    subject = payload.get("sub")
    if not subject:
        raise JWTError("token has no subject")
    return subject
