from datetime import datetime, timedelta, timezone

import pytest

from servicehub.database import utcnow
from servicehub.errors import NotFoundError, StorageError, ValidationError
from servicehub.schemas.booking_schema import BookingCreate, BookingResponse, BookingStatus
from servicehub.schemas.worker_schema import WorkerCreate, WorkerResponse, WorkerUpdate

MONDAY_9AM = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def worker_user(make_user):
    return make_user("wanda", user_type="worker")


@pytest.fixture
def customer(make_user):
    return make_user("carl")


@pytest.fixture
def worker(storage, worker_user, worker_payload):
    return storage.create_worker(WorkerCreate.model_validate(worker_payload(worker_user.id)))


def booking_for(customer, worker, **overrides):
    data = {
        "customer_id": customer.id,
        "worker_id": worker.id,
        "service_type": "Plumbing",
        "date": MONDAY_9AM,
    }
    data.update(overrides)
    return BookingCreate(**data)


def test_user_lookup_by_id_and_username(storage, make_user):
    user = make_user("alice")

    assert user.id is not None
    assert user.created_at is not None
    assert storage.get_user(user.id).username == "alice"
    assert storage.get_user_by_username("alice").id == user.id
    assert storage.get_user(9999) is None
    assert storage.get_user_by_username("nobody") is None


def test_duplicate_username_is_a_storage_error(storage, make_user):
    make_user("alice")

    with pytest.raises(StorageError):
        make_user("alice")
    # The session is usable again after the rollback
    assert storage.get_user_by_username("alice") is not None


def test_created_worker_round_trips_with_generated_id_and_null_rating(storage, worker_user, worker_payload):
    payload = worker_payload(worker_user.id)
    created = storage.create_worker(WorkerCreate.model_validate(payload))

    fetched = storage.get_worker(created.id)
    dumped = WorkerResponse.model_validate(fetched).model_dump(mode="json", by_alias=True)

    assert dumped.pop("id") == created.id
    assert dumped.pop("rating") is None
    assert dumped == payload


def test_get_worker_by_user_id(storage, worker, worker_user, customer):
    assert storage.get_worker_by_user_id(worker_user.id).id == worker.id
    assert storage.get_worker_by_user_id(customer.id) is None
    assert storage.get_worker(9999) is None


def test_second_worker_profile_for_same_user_is_rejected(storage, worker, worker_user, worker_payload):
    with pytest.raises(StorageError):
        storage.create_worker(WorkerCreate.model_validate(worker_payload(worker_user.id)))


def test_update_worker_changes_only_supplied_fields(storage, worker):
    before = WorkerResponse.model_validate(worker).model_dump(mode="json")

    update = WorkerUpdate.model_validate(
        {
            "location": "Shelbyville",
            "availability": {"days": ["Tuesday"], "timeSlots": [{"start": "15:00", "end": "18:00"}]},
        }
    )
    updated = storage.update_worker(worker.id, update)
    after = WorkerResponse.model_validate(storage.get_worker(updated.id)).model_dump(mode="json")

    assert after["location"] == "Shelbyville"
    assert after["availability"] == {"days": ["Tuesday"], "time_slots": [{"start": "15:00", "end": "18:00"}]}
    for key in before:
        if key not in ("location", "availability"):
            assert after[key] == before[key], key


def test_update_worker_can_clear_about(storage, worker):
    updated = storage.update_worker(worker.id, WorkerUpdate.model_validate({"about": None}))

    assert updated.about is None
    assert updated.services == ["Plumbing"]


def test_update_missing_worker_raises_not_found(storage):
    with pytest.raises(NotFoundError):
        storage.update_worker(9999, WorkerUpdate(location="Nowhere"))


def test_list_workers_returns_every_profile(storage, make_user, worker, worker_payload):
    other = make_user("gary", user_type="worker")
    storage.create_worker(WorkerCreate.model_validate(worker_payload(other.id, services=["Gardening"])))

    workers = storage.list_workers()

    assert sorted(w.user_id for w in workers) == sorted([worker.user_id, other.id])


def test_create_booking_inside_availability(storage, customer, worker):
    booking = storage.create_booking(booking_for(customer, worker))

    assert booking.id is not None
    assert booking.status == "pending"
    assert BookingResponse.model_validate(booking).date == MONDAY_9AM


def test_create_booking_on_unavailable_day_is_rejected(storage, customer, worker):
    tuesday = MONDAY_9AM + timedelta(days=1)

    with pytest.raises(ValidationError) as exc_info:
        storage.create_booking(booking_for(customer, worker, date=tuesday))

    assert exc_info.value.errors[0][0] == ["date"]
    assert "Tuesday" in exc_info.value.errors[0][1]


@pytest.mark.parametrize("hour, minute", [(8, 59), (12, 0), (15, 30)])
def test_create_booking_outside_time_slots_is_rejected(storage, customer, worker, hour, minute):
    date = MONDAY_9AM.replace(hour=hour, minute=minute)

    with pytest.raises(ValidationError):
        storage.create_booking(booking_for(customer, worker, date=date))


def test_create_booking_checks_availability_in_utc(storage, customer, worker):
    # 11:30 in UTC+2 is 09:30 UTC, inside the Monday morning slot
    local = datetime(2024, 6, 3, 11, 30, tzinfo=timezone(timedelta(hours=2)))

    booking = storage.create_booking(booking_for(customer, worker, date=local))

    assert booking.date == datetime(2024, 6, 3, 9, 30)


def test_create_booking_for_unknown_worker_raises_not_found(storage, customer, worker):
    data = booking_for(customer, worker, worker_id=9999)

    with pytest.raises(NotFoundError):
        storage.create_booking(data)


def test_create_booking_for_unknown_customer_is_a_storage_error(storage, customer, worker):
    with pytest.raises(StorageError):
        storage.create_booking(booking_for(customer, worker, customer_id=9999))


def test_bookings_are_listed_by_customer_and_by_worker(storage, make_user, customer, worker):
    other_customer = make_user("olga")
    mine = storage.create_booking(booking_for(customer, worker))
    theirs = storage.create_booking(booking_for(other_customer, worker))

    assert [b.id for b in storage.get_bookings_by_customer_id(customer.id)] == [mine.id]
    assert sorted(b.id for b in storage.get_bookings_by_worker_id(worker.id)) == sorted([mine.id, theirs.id])
    assert storage.get_bookings_by_worker_id(9999) == []


def test_update_booking_is_idempotent(storage, customer, worker):
    booking = storage.create_booking(booking_for(customer, worker))

    first = BookingResponse.model_validate(storage.update_booking(booking.id, BookingStatus.confirmed))
    second = BookingResponse.model_validate(storage.update_booking(booking.id, BookingStatus.confirmed))

    assert first == second
    assert second.status is BookingStatus.confirmed
    assert second.service_type == "Plumbing"


def test_update_booking_allows_any_transition(storage, customer, worker):
    booking = storage.create_booking(booking_for(customer, worker))

    storage.update_booking(booking.id, BookingStatus.cancelled)
    reopened = storage.update_booking(booking.id, BookingStatus.pending)

    assert reopened.status == "pending"


def test_update_missing_booking_raises_not_found(storage):
    with pytest.raises(NotFoundError):
        storage.update_booking(9999, BookingStatus.completed)


def test_session_store_lifecycle(storage, customer):
    user_session = storage.session_store.create(customer.id)

    assert storage.session_store.get(user_session.sid).user_id == customer.id

    storage.session_store.destroy(user_session.sid)
    assert storage.session_store.get(user_session.sid) is None


def test_expired_sessions_are_ignored_and_cleaned_up(storage, customer):
    expired = storage.session_store.create(customer.id, expires_in=timedelta(seconds=-1))
    live = storage.session_store.create(customer.id)

    assert storage.session_store.get(expired.sid) is None
    assert storage.session_store.cleanup_expired() == 1
    assert storage.session_store.get(live.sid) is not None


def test_timestamps_are_stored_as_naive_utc(make_user):
    before = datetime.now(timezone.utc).replace(tzinfo=None)

    user = make_user("tina")

    assert utcnow().tzinfo is None
    assert user.created_at.tzinfo is None
    assert before - timedelta(seconds=1) <= user.created_at <= utcnow() + timedelta(seconds=1)
