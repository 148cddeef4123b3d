from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from servicehub.database import Base, utcnow
from sqlalchemy.orm import relationship


class UserSession(Base):
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)  # Stored as naive UTC
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="sessions")
