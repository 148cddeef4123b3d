from sqlalchemy import Column, Integer, String, Text, JSON, ForeignKey
from servicehub.database import Base
from sqlalchemy.orm import relationship


class Worker(Base):
    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)  # One profile per user
    working_status = Column(String, nullable=False)
    location = Column(String, nullable=False)
    services = Column(JSON, nullable=False)
    experience = Column(Integer, nullable=False)
    # {"days": [...], "timeSlots": [{"start": "09:00", "end": "12:00"}, ...]}
    availability = Column(JSON, nullable=False)
    about = Column(Text, nullable=True)
    certifications = Column(JSON, nullable=False, default=list)
    rating = Column(Integer, nullable=True)

    # Relationships
    user = relationship("User", back_populates="worker")
    bookings = relationship("Booking", back_populates="worker")
