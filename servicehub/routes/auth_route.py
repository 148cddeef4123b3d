from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from servicehub.errors import ServiceHubError, ValidationError
from servicehub.models.user_model import User
from servicehub.schemas.user_schema import UserCreate, UserLogin, UserOut, LogoutResponse
from servicehub.security.auth import (
    authenticate_user,
    end_session,
    get_current_user,
    get_password_hash,
    start_session,
)
from servicehub.services.storage import DatabaseStorage, get_storage
from servicehub.logger import get_logger

auth_router = APIRouter()
logger = get_logger(__name__)


@auth_router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(
    user: UserCreate,
    response: Response,
    storage: DatabaseStorage = Depends(get_storage),
):
    """Register a new user and log them in"""
    try:
        logger.info(f"Registering user: {user.username}")
        if storage.get_user_by_username(user.username):
            raise ValidationError([(["username"], "Username already exists")])

        data = user.model_dump(mode="json", by_alias=False)
        data["password"] = get_password_hash(user.password)
        db_user = storage.create_user(data)
        start_session(storage, response, db_user)
        logger.info(f"User registered successfully: {user.username}")
        return UserOut.model_validate(db_user)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error registering user {user.username}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while registering user",
        )


@auth_router.post("/login", response_model=UserOut, status_code=status.HTTP_200_OK)
def login_user(
    user_login: UserLogin,
    response: Response,
    storage: DatabaseStorage = Depends(get_storage),
):
    """Check credentials and start a session"""
    try:
        logger.info(f"Login attempt for user: {user_login.username}")
        user = authenticate_user(storage, user_login.username, user_login.password)
        storage.session_store.cleanup_expired()
        start_session(storage, response, user)
        logger.info(f"User logged in: {user.username}")
        return UserOut.model_validate(user)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error during login for {user_login.username}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred during login",
        )


@auth_router.post("/logout", response_model=LogoutResponse, status_code=status.HTTP_200_OK)
def logout_user(
    request: Request,
    response: Response,
    storage: DatabaseStorage = Depends(get_storage),
):
    """Destroy the caller's session, if any"""
    end_session(storage, request, response)
    return LogoutResponse(message="Successfully logged out")


@auth_router.get("/user", response_model=UserOut, status_code=status.HTTP_200_OK)
def get_session_user(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)
