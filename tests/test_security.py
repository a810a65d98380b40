import pytest
from jose import JWTError, jwt

from peerrent.core.config import settings
from peerrent.core.security import ALGO, create_access_token, subject_from_token


def test_access_token_round_trip():
    assert subject_from_token(create_access_token("user-42")) == "user-42"


def test_expired_token_is_rejected():
    with pytest.raises(JWTError):
        subject_from_token(create_access_token("user-42", expires_minutes=-1))


def test_refresh_token_is_rejected():
    token = jwt.encode({"sub": "user-42", "type": "refresh"}, settings.SECRET_KEY, algorithm=ALGO)
    with pytest.raises(JWTError):
        subject_from_token(token)


def test_provider_token_without_type_is_accepted():
    token = jwt.encode({"sub": "user-42"}, settings.SECRET_KEY, algorithm=ALGO)
    assert subject_from_token(token) == "user-42"


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "user-42"}, "some-other-secret", algorithm=ALGO)
    with pytest.raises(JWTError):
        subject_from_token(token)
