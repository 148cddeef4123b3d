from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from servicehub.database import Base, utcnow
from sqlalchemy.orm import relationship


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    service_type = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    customer = relationship("User", back_populates="bookings")
    worker = relationship("Worker", back_populates="bookings")
