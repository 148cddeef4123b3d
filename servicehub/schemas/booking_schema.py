from pydantic import Field
from enum import Enum
from typing import Optional
from servicehub.schemas.base_schema import CamelModel, CamelResponse, UtcDateTime


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class BookingCreate(CamelModel):
    customer_id: int = Field(..., description="ID of the booking customer")
    worker_id: int = Field(..., description="ID of the booked worker profile")
    service_type: str = Field(..., min_length=1, examples=["Plumbing"])
    date: UtcDateTime = Field(..., description="Booking start time")
    status: BookingStatus = BookingStatus.pending


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingResponse(CamelResponse):
    id: int
    customer_id: int
    worker_id: int
    service_type: str
    date: UtcDateTime
    status: BookingStatus
    created_at: Optional[UtcDateTime] = None
