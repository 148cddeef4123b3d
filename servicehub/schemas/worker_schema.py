from enum import Enum
from typing import List, Literal, Optional, get_args
from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from servicehub.schemas.base_schema import CamelModel, CamelResponse

ServiceCategory = Literal[
    "Cooking",
    "Cleaning",
    "Plumbing",
    "Electrical Work",
    "Repairs",
    "Gardening",
    "Painting",
    "Moving Help",
]

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Same order as datetime.weekday()
WEEKDAYS = get_args(Weekday)

TIME_SLOTS = (
    ("09:00", "12:00"),
    ("12:00", "15:00"),
    ("15:00", "18:00"),
    ("18:00", "21:00"),
)


class WorkingStatus(str, Enum):
    employed = "employed"
    unemployed = "unemployed"
    student = "student"


class TimeSlot(CamelModel):
    start: str = Field(..., examples=["09:00"])
    end: str = Field(..., examples=["12:00"])

    @model_validator(mode="after")
    def must_be_catalog_slot(self):
        if (self.start, self.end) not in TIME_SLOTS:
            allowed = ", ".join(f"{start}-{end}" for start, end in TIME_SLOTS)
            raise ValueError(f"time slot must be one of: {allowed}")
        return self


class Availability(CamelModel):
    days: List[Weekday]
    time_slots: List[TimeSlot]


class WorkerBase(CamelModel):
    working_status: WorkingStatus
    location: str = Field(..., min_length=1, examples=["Berlin"])
    services: List[ServiceCategory] = Field(..., min_length=1, examples=[["Plumbing"]])
    experience: int = Field(..., ge=0, description="Years of experience")
    availability: Availability
    about: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)


class WorkerCreate(WorkerBase):
    user_id: int = Field(..., description="ID of the owning user")


class WorkerUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    working_status: Optional[WorkingStatus] = None
    location: Optional[str] = Field(None, min_length=1)
    services: Optional[List[ServiceCategory]] = Field(None, min_length=1)
    experience: Optional[int] = Field(None, ge=0)
    availability: Optional[Availability] = None
    about: Optional[str] = None
    certifications: Optional[List[str]] = None

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in self.model_fields_set:
            if name != "about" and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class WorkerResponse(CamelResponse):
    id: int
    user_id: int
    working_status: WorkingStatus
    location: str
    services: List[str]
    experience: int
    availability: Availability
    about: Optional[str] = None
    certifications: List[str]
    rating: Optional[int] = None
