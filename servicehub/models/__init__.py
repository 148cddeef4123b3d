# Import every model so relationship() targets resolve and create_all sees all tables
from servicehub.models.user_model import User
from servicehub.models.worker_model import Worker
from servicehub.models.booking_model import Booking
from servicehub.models.session_model import UserSession

__all__ = ["User", "Worker", "Booking", "UserSession"]
