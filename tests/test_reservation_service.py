# tests/test_reservation_service.py
import threading
from datetime import time, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from salonbook.core.exceptions import (
    BookingValidationError,
    NoEmployeeAvailableError,
    NotFoundError,
    SlotUnavailableError,
)
from salonbook.models import Base, Employee, Holiday, Reservation, ReservationStatus, ReservationType, Service
from salonbook.services.availability.availability_service import AvailabilityService
from salonbook.services.reservation.reservation_service import ReservationService
from salonbook.services.working_hours.working_hours_service import WorkingHoursService

from conftest import MONDAY, NOW, at, iso


@pytest.fixture
def reservations(db, clock):
    return ReservationService(db, clock=clock)


@pytest.fixture
def haircut(salon_schedule, make_service):
    return make_service(duration_min=60)


@pytest.fixture
def salma(make_employee, haircut):
    return make_employee(full_name="Salma", services=[haircut])


class TestCreateReservation:

    def test_books_explicit_employee(self, reservations, haircut, salma):
        reservation = reservations.create_reservation(
            haircut.id, at(MONDAY, 10), employee_id=salma.id, client_id="client-7"
        )

        assert reservation.id is not None
        assert reservation.employee_id == salma.id
        assert reservation.end_at == at(MONDAY, 11)
        assert reservation.status == ReservationStatus.CONFIRMED.value
        assert reservation.type == ReservationType.ONLINE.value
        assert reservation.client_id == "client-7"

    def test_auto_assigns_employee_working_that_day(self, db, reservations, haircut, salma, make_employee):
        nadia = make_employee(full_name="Nadia", services=[haircut])
        WorkingHoursService(db).set_employee_hours(nadia.id, 1, time(9), time(18))

        reservation = reservations.create_reservation(haircut.id, at(MONDAY, 10), client_id="client-1")

        assert reservation.employee_id == nadia.id

    def test_auto_assign_without_candidate(self, reservations, haircut, salma):
        with pytest.raises(NoEmployeeAvailableError):
            reservations.create_reservation(haircut.id, at(MONDAY, 10), client_id="client-1")

    def test_overlap_is_rejected(self, db, reservations, haircut, salma):
        reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        with pytest.raises(SlotUnavailableError) as exc_info:
            reservations.create_reservation(haircut.id, at(MONDAY, 10, 30), employee_id=salma.id)

        assert "10:00 - 11:00" in str(exc_info.value)
        assert db.query(Reservation).count() == 1

    def test_back_to_back_is_allowed(self, reservations, haircut, salma):
        reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)
        second = reservations.create_reservation(haircut.id, at(MONDAY, 11), employee_id=salma.id)
        assert second.start_at == at(MONDAY, 11)

    def test_online_booking_in_past_is_rejected(self, reservations, haircut, salma):
        with pytest.raises(BookingValidationError):
            reservations.create_reservation(haircut.id, NOW, employee_id=salma.id)

    def test_manual_booking_may_be_backdated(self, reservations, haircut, salma):
        reservation = reservations.create_reservation(
            haircut.id, NOW - timedelta(hours=2), employee_id=salma.id,
            client_full_name="Walk-in Client", client_phone="+212600000000",
            reservation_type=ReservationType.MANUAL,
        )

        assert reservation.type == ReservationType.MANUAL.value
        assert reservation.client_id is None
        assert reservation.client_full_name == "Walk-in Client"

    def test_holiday_is_rejected(self, db, reservations, haircut, salma):
        db.add(Holiday(date=MONDAY, name="Green March"))
        db.commit()

        with pytest.raises(BookingValidationError, match="Green March"):
            reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

    def test_unknown_service(self, reservations, salma):
        with pytest.raises(NotFoundError):
            reservations.create_reservation(999, at(MONDAY, 10), employee_id=salma.id)

    def test_unknown_employee(self, reservations, haircut):
        with pytest.raises(NotFoundError):
            reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=999)

    def test_booked_slot_disappears_from_availability(self, db, clock, reservations, haircut, salma):
        reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        slots = AvailabilityService(db, clock=clock).get_available_slots(haircut.id, on_date=MONDAY)

        assert iso(MONDAY, 10) not in slots
        assert iso(MONDAY, 11) in slots


class TestCancelReservation:

    def test_cancel_frees_the_slot(self, reservations, haircut, salma):
        first = reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        cancelled = reservations.cancel_reservation(first.id)
        again = reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        assert cancelled.status == ReservationStatus.CANCELLED.value
        assert cancelled.cancelled_at is not None
        assert again.id != first.id

    def test_cancel_twice_is_harmless(self, reservations, haircut, salma):
        reservation = reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        reservations.cancel_reservation(reservation.id)
        assert reservations.cancel_reservation(reservation.id).status == ReservationStatus.CANCELLED.value

    def test_completed_cannot_be_cancelled(self, reservations, haircut, salma, book):
        done = book(salma, haircut, at(MONDAY, 10), status=ReservationStatus.COMPLETED)

        with pytest.raises(BookingValidationError):
            reservations.cancel_reservation(done.id)

    def test_unknown_reservation(self, reservations):
        with pytest.raises(NotFoundError):
            reservations.cancel_reservation(999)


def test_serialize_uses_salon_offset(reservations, haircut, salma):
    reservation = reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

    data = ReservationService.serialize(reservation)

    assert data["start_at"] == iso(MONDAY, 10)
    assert data["end_at"] == iso(MONDAY, 11)
    assert data["status"] == "CONFIRMED"


def test_concurrent_bookings_for_same_slot_create_one_reservation(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'booking.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = Session()
    service = Service(name="Haircut", duration_min=60)
    employee = Employee(full_name="Salma", services=[service])
    setup.add_all([service, employee])
    setup.commit()
    service_id, employee_id = service.id, employee.id
    setup.close()

    attempts = 8
    barrier = threading.Barrier(attempts)
    outcomes = []
    outcomes_lock = threading.Lock()

    def attempt(n):
        session = Session()
        try:
            barrier.wait()
            ReservationService(session, clock=lambda: NOW).create_reservation(
                service_id, at(MONDAY, 10, 30 if n % 2 else 0), employee_id=employee_id,
                client_id=f"client-{n}",
            )
            result = "created"
        except SlotUnavailableError:
            result = "conflict"
        except Exception as e:
            result = repr(e)
        finally:
            session.close()
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(attempts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    check = Session()
    try:
        assert outcomes.count("created") == 1
        assert outcomes.count("conflict") == attempts - 1
        assert check.query(Reservation).count() == 1
    finally:
        check.close()
        engine.dispose()


class TestUpdateReservation:

    @pytest.fixture
    def booked(self, reservations, haircut, salma):
        return reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id, client_id="client-1")

    def test_reschedule_into_own_old_interval(self, reservations, booked):
        moved = reservations.update_reservation(booked.id, start_at=at(MONDAY, 10, 30))

        assert moved.start_at == at(MONDAY, 10, 30)
        assert moved.end_at == at(MONDAY, 11, 30)

    def test_reschedule_onto_other_booking_is_rejected(self, reservations, haircut, salma, booked):
        reservations.create_reservation(haircut.id, at(MONDAY, 14), employee_id=salma.id)

        with pytest.raises(SlotUnavailableError):
            reservations.update_reservation(booked.id, start_at=at(MONDAY, 13, 30))

        assert reservations.get_reservation(booked.id).start_at == at(MONDAY, 10)

    def test_reassign_checks_new_employee(self, reservations, haircut, make_employee, book, booked):
        nadia = make_employee(full_name="Nadia", services=[haircut])
        book(nadia, haircut, at(MONDAY, 10, 30))

        with pytest.raises(SlotUnavailableError):
            reservations.update_reservation(booked.id, employee_id=nadia.id)

        moved = reservations.update_reservation(booked.id, employee_id=nadia.id, start_at=at(MONDAY, 15))
        assert (moved.employee_id, moved.start_at) == (nadia.id, at(MONDAY, 15))

    def test_reassign_to_unknown_employee(self, reservations, booked):
        with pytest.raises(NotFoundError):
            reservations.update_reservation(booked.id, employee_id=999)

    def test_moved_reservation_frees_old_slot(self, db, clock, reservations, haircut, booked):
        reservations.update_reservation(booked.id, start_at=at(MONDAY, 15))

        slots = AvailabilityService(db, clock=clock).get_available_slots(haircut.id, on_date=MONDAY)

        assert iso(MONDAY, 10) in slots
        assert iso(MONDAY, 15) not in slots

    def test_complete_then_cancel_is_rejected(self, reservations, booked):
        done = reservations.update_reservation(booked.id, status=ReservationStatus.COMPLETED)
        assert done.status == ReservationStatus.COMPLETED.value

        with pytest.raises(BookingValidationError):
            reservations.update_reservation(booked.id, status=ReservationStatus.CANCELLED)

    def test_cancel_through_update_sets_timestamp(self, reservations, booked):
        cancelled = reservations.update_reservation(booked.id, status=ReservationStatus.CANCELLED)

        assert cancelled.status == ReservationStatus.CANCELLED.value
        assert cancelled.cancelled_at is not None

    def test_reviving_cancelled_reservation_checks_conflicts(self, reservations, haircut, salma, booked):
        reservations.cancel_reservation(booked.id)
        reservations.create_reservation(haircut.id, at(MONDAY, 10), employee_id=salma.id)

        with pytest.raises(SlotUnavailableError):
            reservations.update_reservation(booked.id, status=ReservationStatus.CONFIRMED)

        revived = reservations.update_reservation(
            booked.id, status=ReservationStatus.CONFIRMED, start_at=at(MONDAY, 16)
        )
        assert revived.status == ReservationStatus.CONFIRMED.value
        assert revived.cancelled_at is None

    def test_requested_is_not_a_target_status(self, reservations, booked):
        with pytest.raises(BookingValidationError):
            reservations.update_reservation(booked.id, status=ReservationStatus.REQUESTED)

    def test_reschedule_into_past_is_rejected(self, reservations, booked):
        with pytest.raises(BookingValidationError):
            reservations.update_reservation(booked.id, start_at=NOW - timedelta(hours=1))

    def test_reschedule_onto_holiday_is_rejected(self, db, reservations, booked):
        tuesday = MONDAY + timedelta(days=1)
        db.add(Holiday(date=tuesday, name="Independence Day"))
        db.commit()

        with pytest.raises(BookingValidationError, match="Independence Day"):
            reservations.update_reservation(booked.id, start_at=at(tuesday, 10))


class TestListReservations:

    @pytest.fixture
    def agenda(self, reservations, haircut, salma, make_employee):
        nadia = make_employee(full_name="Nadia", services=[haircut])
        tuesday = MONDAY + timedelta(days=1)
        first = reservations.create_reservation(haircut.id, at(MONDAY, 15), employee_id=salma.id, client_id="client-1")
        second = reservations.create_reservation(haircut.id, at(MONDAY, 9), employee_id=nadia.id, client_id="client-2")
        third = reservations.create_reservation(haircut.id, at(tuesday, 9), employee_id=salma.id, client_id="client-1")
        reservations.cancel_reservation(third.id)
        return nadia, first, second, third

    def test_ordered_by_start(self, reservations, agenda):
        _, first, second, third = agenda
        assert [r.id for r in reservations.list_reservations()] == [second.id, first.id, third.id]

    def test_filters(self, reservations, agenda):
        nadia, first, second, third = agenda

        assert [r.id for r in reservations.list_reservations(client_id="client-1")] == [first.id, third.id]
        assert [r.id for r in reservations.list_reservations(employee_id=nadia.id)] == [second.id]
        assert [r.id for r in reservations.list_reservations(status=ReservationStatus.CANCELLED)] == [third.id]
        assert [r.id for r in reservations.list_reservations(on_date=MONDAY)] == [second.id, first.id]

    def test_paging(self, reservations, agenda):
        _, first, _, _ = agenda
        assert [r.id for r in reservations.list_reservations(skip=1, limit=1)] == [first.id]
