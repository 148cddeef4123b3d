from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from servicehub.errors import NotFoundError, ServiceHubError
from servicehub.models.user_model import User
from servicehub.schemas.booking_schema import BookingCreate, BookingStatusUpdate, BookingResponse
from servicehub.security.auth import get_current_user
from servicehub.services.storage import DatabaseStorage, get_storage
from servicehub.logger import get_logger

booking_router = APIRouter()
logger = get_logger(__name__)


@booking_router.post(
    "/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED
)
def create_booking(booking: BookingCreate, storage: DatabaseStorage = Depends(get_storage)):
    """Book a worker; the date must fall inside the worker's availability"""
    try:
        logger.info(
            f"Customer {booking.customer_id} booking worker {booking.worker_id} "
            f"for {booking.service_type} on {booking.date.isoformat()}"
        )
        db_booking = storage.create_booking(booking)
        return BookingResponse.model_validate(db_booking)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating booking",
        )


# The "my bookings" endpoints derive ownership from the session user


@booking_router.get(
    "/bookings/customer", response_model=List[BookingResponse], status_code=status.HTTP_200_OK
)
def get_customer_bookings(
    current_user: User = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Bookings the current user made as a customer"""
    try:
        logger.info(f"User {current_user.username} fetching customer bookings")
        bookings = storage.get_bookings_by_customer_id(current_user.id)
        return [BookingResponse.model_validate(booking) for booking in bookings]

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error fetching customer bookings: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching bookings",
        )


@booking_router.get(
    "/bookings/worker", response_model=List[BookingResponse], status_code=status.HTTP_200_OK
)
def get_worker_bookings(
    current_user: User = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Bookings made against the current user's worker profile"""
    try:
        logger.info(f"User {current_user.username} fetching worker bookings")
        worker = storage.get_worker_by_user_id(current_user.id)
        if not worker:
            raise NotFoundError("Worker profile not found")

        bookings = storage.get_bookings_by_worker_id(worker.id)
        return [BookingResponse.model_validate(booking) for booking in bookings]

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error fetching worker bookings: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching bookings",
        )


@booking_router.patch(
    "/bookings/{booking_id}/status",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def update_booking_status(
    booking_id: int,
    status_update: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Set a booking's status (any transition between the four statuses is allowed)"""
    try:
        logger.info(
            f"User {current_user.username} updating booking {booking_id} "
            f"status to {status_update.status.value}"
        )
        updated_booking = storage.update_booking(booking_id, status_update.status)
        return BookingResponse.model_validate(updated_booking)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error updating booking status {booking_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating booking status",
        )
