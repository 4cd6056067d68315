"""
Tests for booking validation, event reference checks and queries
"""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import ReferenceCheckError, ReferenceNotFoundError, RecordValidationError
from app.models import Booking
from app.services.repositories import BookingRepo, EventRepo
from app.services.validation import check_event_reference, normalize_booking

from helpers import event_fields


def test_create_booking(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")

        assert booking.id is not None
        assert booking.event_id == event.id
        assert booking.email == "user@example.com"
        assert booking.updated_at >= booking.created_at

    run_db(scenario)


def test_missing_fields_are_named():
    with pytest.raises(RecordValidationError) as excinfo:
        normalize_booking(Booking())

    assert excinfo.value.errors == {
        "event_id": "Event ID is required",
        "email": "Email is required",
    }


@pytest.mark.parametrize("raw,expected", [
    ("User@EXAMPLE.COM", "user@example.com"),
    ("  user@example.com  ", "user@example.com"),
    ("User+Tag@Example.com", "user+tag@example.com"),
])
def test_email_is_lowercased_and_trimmed(raw, expected):
    booking = normalize_booking(Booking(event_id=1, email=raw))
    assert booking.email == expected


@pytest.mark.parametrize("email", ["invalid", "invalid@", "@invalid.com", "user @example.com"])
def test_invalid_email_is_rejected(email):
    with pytest.raises(RecordValidationError, match="Please provide a valid email address"):
        normalize_booking(Booking(event_id=1, email=email))


def test_long_email_is_accepted():
    email = "a" * 50 + "@" + "b" * 50 + ".com"
    assert normalize_booking(Booking(event_id=1, email=email)).email == email


def test_booking_for_missing_event_is_rejected_then_accepted(run_db):
    async def scenario(db):
        booking = Booking(event_id=12345, email="user@example.com")
        with pytest.raises(ReferenceNotFoundError, match="Referenced event does not exist"):
            await BookingRepo.save(db, booking)
        assert await BookingRepo.count_by_event(db, 12345) == 0

        event = await EventRepo.create(db, **event_fields())
        booking.event_id = event.id
        await BookingRepo.save(db, booking)
        assert booking.id is not None

    run_db(scenario)


def test_reference_check_skipped_when_event_id_unchanged(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")

        calls = []

        async def lookup(event_id):
            calls.append(event_id)
            return None

        booking.email = "other@example.com"
        await check_event_reference(booking, lookup)
        assert calls == []

        booking.event_id = event.id + 1
        with pytest.raises(ReferenceNotFoundError):
            await check_event_reference(booking, lookup)
        assert calls == [event.id + 1]

    run_db(scenario)


def test_update_to_missing_event_is_rejected(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")

        booking.event_id = 99999
        with pytest.raises(ReferenceNotFoundError):
            await BookingRepo.save(db, booking)

        assert booking.event_id == event.id
        assert await BookingRepo.count_by_event(db, 99999) == 0

    run_db(scenario)


def test_update_to_other_existing_event(run_db):
    async def scenario(db):
        first = await EventRepo.create(db, **event_fields(title="First Event"))
        second = await EventRepo.create(db, **event_fields(title="Second Event"))
        booking = await BookingRepo.create(db, event_id=first.id, email="user@example.com")

        booking.event_id = second.id
        await BookingRepo.save(db, booking)

        assert await BookingRepo.count_by_event(db, first.id) == 0
        assert await BookingRepo.count_by_event(db, second.id) == 1

    run_db(scenario)


def test_failed_lookup_is_reported_separately():
    async def failing_lookup(event_id):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    booking = Booking(event_id=1, email="user@example.com")

    with pytest.raises(ReferenceCheckError, match="Failed to validate event reference") as excinfo:
        asyncio.run(check_event_reference(booking, failing_lookup))

    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_updated_at_advances_on_save(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")
        created_at, updated_at = booking.created_at, booking.updated_at

        await asyncio.sleep(0.01)
        booking.email = "updated@example.com"
        await BookingRepo.save(db, booking)

        assert booking.created_at == created_at
        assert booking.updated_at > updated_at

    run_db(scenario)


def test_queries_by_event_and_email(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields(title="Booked Event"))
        other = await EventRepo.create(db, **event_fields(title="Other Event"))
        await BookingRepo.create(db, event_id=event.id, email="first@example.com")
        await BookingRepo.create(db, event_id=event.id, email="second@example.com")
        await BookingRepo.create(db, event_id=other.id, email="first@example.com")

        by_event = await BookingRepo.list_by_event(db, event.id)
        assert [b.email for b in by_event] == ["first@example.com", "second@example.com"]
        assert await BookingRepo.count_by_event(db, event.id) == 2

        by_email = await BookingRepo.list_by_email(db, " FIRST@example.com ")
        assert sorted(b.event_id for b in by_email) == sorted([event.id, other.id])

    run_db(scenario)


def test_expand_referenced_event(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields(title="Expanded Event"))
        await BookingRepo.create(db, event_id=event.id, email="user@example.com")

        bookings = await BookingRepo.list_by_event(db, event.id, with_event=True)
        assert bookings[0].event.title == "Expanded Event"
        assert bookings[0].event.slug == "expanded-event"

    run_db(scenario)


def test_concurrent_bookings_for_same_event(database_url):
    from app.core.db import ConnectionPool

    async def main():
        pool = ConnectionPool(database_url)
        try:
            async with pool.session() as db:
                event = await EventRepo.create(db, **event_fields())

            async def book(i):
                async with pool.session() as db:
                    return await BookingRepo.create(db, event_id=event.id, email=f"user{i}@example.com")

            bookings = await asyncio.gather(*(book(i) for i in range(5)))
            assert len(bookings) == 5

            async with pool.session() as db:
                assert await BookingRepo.count_by_event(db, event.id) == 5
        finally:
            await pool.dispose()

    asyncio.run(main())


def test_deleting_booking_keeps_event(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")

        await BookingRepo.delete(db, booking)

        assert await BookingRepo.get_by_id(db, booking.id) is None
        assert await EventRepo.get_by_id(db, event.id) is not None

    run_db(scenario)


def test_deleting_event_leaves_bookings(run_db):
    async def scenario(db):
        event = await EventRepo.create(db, **event_fields())
        booking = await BookingRepo.create(db, event_id=event.id, email="user@example.com")
        event_id = event.id

        await EventRepo.delete(db, event)

        assert await EventRepo.get_by_id(db, event_id) is None
        remaining = await BookingRepo.list_by_event(db, event_id, with_event=True)
        assert [b.id for b in remaining] == [booking.id]
        assert remaining[0].event is None

    run_db(scenario)
