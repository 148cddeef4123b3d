from datetime import datetime, timezone
from typing import List, Optional
from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from servicehub.database import get_db
from servicehub.errors import NotFoundError, StorageError, ValidationError
from servicehub.models.user_model import User
from servicehub.models.worker_model import Worker
from servicehub.models.booking_model import Booking
from servicehub.schemas.booking_schema import BookingCreate, BookingStatus
from servicehub.schemas.worker_schema import WEEKDAYS, WorkerCreate, WorkerUpdate
from servicehub.services.session_store import SessionStore
from servicehub.logger import get_logger

logger = get_logger(__name__)


def check_availability(worker: Worker, date: datetime) -> None:
    """Raise ValidationError unless ``date`` (UTC) falls inside the worker's availability"""
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    availability = worker.availability or {}
    day = WEEKDAYS[date.weekday()]
    if day not in availability.get("days", []):
        raise ValidationError([(["date"], f"Worker is not available on {day}")])

    hhmm = date.strftime("%H:%M")
    for slot in availability.get("timeSlots", []):
        if slot["start"] <= hhmm < slot["end"]:
            return
    raise ValidationError([(["date"], f"Worker has no time slot covering {hhmm}")])


class DatabaseStorage:
    """CRUD over users, workers and bookings, bound to one ORM session"""

    def __init__(self, db: Session):
        self.db = db
        self.session_store = SessionStore(db)

    def _commit(self, instance, operation: str):
        try:
            self.db.add(instance)
            self.db.commit()
            self.db.refresh(instance)
            return instance
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Integrity error during {operation}: {str(e)}")
            raise StorageError("Integrity constraint violated", operation)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during {operation}: {str(e)}")
            raise StorageError("Database operation failed", operation)

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, data: dict) -> User:
        """Insert a user; ``data['password']`` must already be hashed"""
        user = self._commit(User(**data), "create_user")
        logger.info(f"User created: {user.id} ({user.username})")
        return user

    # Workers

    def get_worker(self, worker_id: int) -> Optional[Worker]:
        return self.db.query(Worker).filter(Worker.id == worker_id).first()

    def get_worker_by_user_id(self, user_id: int) -> Optional[Worker]:
        return self.db.query(Worker).filter(Worker.user_id == user_id).first()

    def create_worker(self, worker: WorkerCreate) -> Worker:
        db_worker = Worker(**worker.model_dump(mode="json", by_alias=False))
        # JSON columns keep the wire (camelCase) shape
        db_worker.availability = worker.availability.model_dump(mode="json", by_alias=True)
        db_worker = self._commit(db_worker, "create_worker")
        logger.info(f"Worker created: {db_worker.id} for user {db_worker.user_id}")
        return db_worker

    def update_worker(self, worker_id: int, update: WorkerUpdate) -> Worker:
        db_worker = self.get_worker(worker_id)
        if not db_worker:
            raise NotFoundError("Worker not found")

        for key, value in update.model_dump(mode="json", exclude_unset=True).items():
            if key == "availability":
                value = update.availability.model_dump(mode="json", by_alias=True)
            setattr(db_worker, key, value)

        db_worker = self._commit(db_worker, "update_worker")
        logger.info(f"Worker updated: {worker_id}")
        return db_worker

    def list_workers(self) -> List[Worker]:
        return self.db.query(Worker).all()

    # Bookings

    def create_booking(self, booking: BookingCreate) -> Booking:
        worker = self.get_worker(booking.worker_id)
        if not worker:
            raise NotFoundError("Worker not found")
        check_availability(worker, booking.date)

        db_booking = Booking(
            customer_id=booking.customer_id,
            worker_id=booking.worker_id,
            service_type=booking.service_type,
            date=booking.date.astimezone(timezone.utc).replace(tzinfo=None),
            status=booking.status.value,
        )
        db_booking = self._commit(db_booking, "create_booking")
        logger.info(f"Booking created: {db_booking.id} by customer {db_booking.customer_id}")
        return db_booking

    def get_bookings_by_customer_id(self, customer_id: int) -> List[Booking]:
        return self.db.query(Booking).filter(Booking.customer_id == customer_id).all()

    def get_bookings_by_worker_id(self, worker_id: int) -> List[Booking]:
        return self.db.query(Booking).filter(Booking.worker_id == worker_id).all()

    def update_booking(self, booking_id: int, status: BookingStatus) -> Booking:
        db_booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not db_booking:
            raise NotFoundError("Booking not found")

        db_booking.status = BookingStatus(status).value
        db_booking = self._commit(db_booking, "update_booking")
        logger.info(f"Booking {booking_id} status -> {db_booking.status}")
        return db_booking


def get_storage(db: Session = Depends(get_db)) -> DatabaseStorage:
    return DatabaseStorage(db)
