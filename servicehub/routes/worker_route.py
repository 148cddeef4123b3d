from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from servicehub.errors import ConflictError, NotFoundError, ServiceHubError, ValidationError
from servicehub.models.user_model import User
from servicehub.schemas.user_schema import UserType
from servicehub.security.auth import get_current_user
from servicehub.schemas.worker_schema import WorkerCreate, WorkerUpdate, WorkerResponse
from servicehub.services.storage import DatabaseStorage, get_storage
from servicehub.logger import get_logger

worker_router = APIRouter()
logger = get_logger(__name__)


@worker_router.post(
    "/workers", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED
)
def create_worker(worker: WorkerCreate, storage: DatabaseStorage = Depends(get_storage)):
    """Create the worker profile of a worker-type user"""
    try:
        logger.info(f"Creating worker profile for user {worker.user_id}")
        user = storage.get_user(worker.user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.user_type != UserType.worker.value:
            raise ValidationError([(["userId"], "Only worker accounts can have a worker profile")])
        if storage.get_worker_by_user_id(worker.user_id):
            raise ConflictError("Worker profile already exists for this user")

        db_worker = storage.create_worker(worker)
        return WorkerResponse.model_validate(db_worker)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error creating worker for user {worker.user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating worker",
        )


@worker_router.get(
    "/workers", response_model=List[WorkerResponse], status_code=status.HTTP_200_OK
)
def list_workers(storage: DatabaseStorage = Depends(get_storage)):
    """List every worker profile (public endpoint)"""
    try:
        logger.info("Fetching workers")
        return [WorkerResponse.model_validate(worker) for worker in storage.list_workers()]

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error fetching workers: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching workers",
        )


@worker_router.get(
    "/workers/profile", response_model=WorkerResponse, status_code=status.HTTP_200_OK
)
def get_own_worker_profile(
    current_user: User = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Worker profile of the current user; 404 means none has been created yet"""
    try:
        logger.info(f"User {current_user.username} fetching own worker profile")
        worker = storage.get_worker_by_user_id(current_user.id)
        if not worker:
            raise NotFoundError("Worker profile not found")
        return WorkerResponse.model_validate(worker)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error fetching worker profile for {current_user.username}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching worker profile",
        )


@worker_router.get(
    "/workers/{worker_id}", response_model=WorkerResponse, status_code=status.HTTP_200_OK
)
def get_worker(worker_id: int, storage: DatabaseStorage = Depends(get_storage)):
    """Get worker by ID (public endpoint)"""
    try:
        logger.info(f"Fetching worker: {worker_id}")
        worker = storage.get_worker(worker_id)
        if not worker:
            raise NotFoundError("Worker not found")
        return WorkerResponse.model_validate(worker)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error fetching worker {worker_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching worker",
        )


@worker_router.patch(
    "/workers/{worker_id}", response_model=WorkerResponse, status_code=status.HTTP_200_OK
)
def update_worker(
    worker_id: int,
    worker_update: WorkerUpdate,
    storage: DatabaseStorage = Depends(get_storage),
):
    """Merge-patch a worker profile; omitted fields keep their values"""
    try:
        logger.info(f"Updating worker {worker_id}: {sorted(worker_update.model_fields_set)}")
        db_worker = storage.update_worker(worker_id, worker_update)
        return WorkerResponse.model_validate(db_worker)

    except (HTTPException, ServiceHubError):
        raise
    except Exception as e:
        logger.error(f"Error updating worker {worker_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating worker",
        )
