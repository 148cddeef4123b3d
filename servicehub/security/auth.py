from datetime import datetime, timezone
from typing import Optional
from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from servicehub.config import (
    ALGORITHM,
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
)
from servicehub.errors import AuthenticationError
from servicehub.models.session_model import UserSession
from servicehub.models.user_model import User
from servicehub.services.storage import DatabaseStorage, get_storage
from servicehub.logger import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def authenticate_user(storage: DatabaseStorage, username: str, password: str) -> User:
    user = storage.get_user_by_username(username)
    if not user or not verify_password(password, user.password):
        raise AuthenticationError("Invalid username or password")
    return user


def create_session_token(user_session: UserSession) -> str:
    """Sign the session id into the cookie value"""
    expires_at = user_session.expires_at.replace(tzinfo=timezone.utc)
    to_encode = {
        "sid": user_session.sid,
        "sub": str(user_session.user_id),
        "exp": expires_at,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("sid")


def start_session(storage: DatabaseStorage, response: Response, user: User) -> UserSession:
    """Create a session row for ``user`` and attach its cookie to ``response``"""
    user_session = storage.session_store.create(user.id)
    expires_at = user_session.expires_at.replace(tzinfo=timezone.utc)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user_session),
        expires=expires_at,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )
    return user_session


def end_session(storage: DatabaseStorage, request: Request, response: Response) -> None:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    sid = decode_session_token(token) if token else None
    if sid:
        storage.session_store.destroy(sid)
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax", secure=SESSION_COOKIE_SECURE)


def get_optional_user(
    request: Request, storage: DatabaseStorage = Depends(get_storage)
) -> Optional[User]:
    """Resolve the session cookie to a user, or None when there is no valid session"""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    sid = decode_session_token(token)
    if sid is None:
        logger.warning("Rejected session cookie with invalid signature")
        return None

    user_session = storage.session_store.get(sid)
    if user_session is None:
        return None
    return storage.get_user(user_session.user_id)


def get_current_user(current_user: Optional[User] = Depends(get_optional_user)) -> User:
    if current_user is None:
        raise AuthenticationError()
    return current_user
