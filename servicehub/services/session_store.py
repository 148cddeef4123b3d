import secrets
from datetime import timedelta
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from servicehub.config import SESSION_EXPIRE_DAYS
from servicehub.database import utcnow
from servicehub.errors import StorageError
from servicehub.models.session_model import UserSession
from servicehub.logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """Login sessions kept in the ``sessions`` table"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, expires_in: Optional[timedelta] = None) -> UserSession:
        expires_at = utcnow() + (expires_in or timedelta(days=SESSION_EXPIRE_DAYS))
        user_session = UserSession(
            sid=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=expires_at,
        )
        try:
            self.db.add(user_session)
            self.db.commit()
            self.db.refresh(user_session)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating session for user {user_id}: {str(e)}")
            raise StorageError("Error occurred while creating session", "create_session")
        logger.info(f"Session created for user {user_id}")
        return user_session

    def get(self, sid: str) -> Optional[UserSession]:
        """Return the session unless it is unknown or expired"""
        return (
            self.db.query(UserSession)
            .filter(UserSession.sid == sid, UserSession.expires_at > utcnow())
            .first()
        )

    def destroy(self, sid: str) -> None:
        try:
            deleted = self.db.query(UserSession).filter(UserSession.sid == sid).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error destroying session: {str(e)}")
            raise StorageError("Error occurred while destroying session", "destroy_session")
        if deleted:
            logger.info("Session destroyed")

    def cleanup_expired(self) -> int:
        """Remove expired sessions to keep the table clean"""
        try:
            expired_count = (
                self.db.query(UserSession).filter(UserSession.expires_at <= utcnow()).delete()
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error cleaning up expired sessions: {str(e)}")
            raise StorageError("Error occurred while cleaning up sessions", "cleanup_sessions")

        if expired_count > 0:
            logger.info(f"Cleaned up {expired_count} expired sessions")
        return expired_count
