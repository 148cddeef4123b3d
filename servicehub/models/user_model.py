from sqlalchemy import Column, Integer, String, DateTime
from servicehub.database import Base, utcnow
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    user_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=False)
    profile_picture = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    worker = relationship("Worker", back_populates="user", uselist=False)
    bookings = relationship("Booking", back_populates="customer")
    sessions = relationship("UserSession", back_populates="user")
