"""
Reservation Domain Service.

Booking requests, slot availability, the reservation state machine and
dining-table assignment.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ordo_api.models import DiningTable, Reservation
from ordo_shared.config.constants import ReservationStatus, validate_reservation_transition
from ordo_shared.config.logging import get_logger, mask_phone
from ordo_shared.config.settings import settings
from ordo_shared.infrastructure.db import safe_commit
from ordo_shared.utils.clock import restaurant_today
from ordo_shared.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from ordo_shared.utils.schemas import (
    AvailableTimesOutput,
    PeakTime,
    ReservationCreate,
    ReservationStats,
    ReservationUpdate,
)
from ordo_shared.utils.validators import normalize_phone, parse_hhmm

from .customer_service import CustomerService
from .restaurant_service import RestaurantService
from .schedule import day_window

logger = get_logger(__name__)

RECENT_BY_PHONE_LIMIT = 10


class ReservationService:
    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Capacity
    # =========================================================================

    def slot_capacity(self, party_size: int) -> int:
        """
        How many reservations a single slot can hold for this party size.

        The configured flat capacity, lowered to the number of active tables
        seating the party when a table inventory exists.
        """
        active_tables = self._db.scalar(
            select(func.count(DiningTable.id)).where(DiningTable.is_active.is_(True))
        ) or 0
        if not active_tables:
            return settings.reservation_slot_capacity

        fitting = self._db.scalar(
            select(func.count(DiningTable.id)).where(
                DiningTable.is_active.is_(True),
                DiningTable.seats >= party_size,
            )
        ) or 0
        return min(fitting, settings.reservation_slot_capacity)

    def _slot_counts(self, day: date) -> Counter:
        times = self._db.scalars(
            select(Reservation.reservation_time).where(
                Reservation.reservation_date == day,
                Reservation.status.in_(ReservationStatus.HOLDING),
            )
        ).all()
        return Counter(times)

    def available_times(self, day: date, party_size: int) -> AvailableTimesOutput:
        """Bookable slot starts for a date; an empty list comes with a reason."""
        config = RestaurantService(self._db).get_active_config()
        if config is None:
            return AvailableTimesOutput(available_times=[], message="Restaurant configuration not found")
        if not config.service_enabled("reservations"):
            return AvailableTimesOutput(available_times=[], message="Reservations are not available")

        window = day_window(config.opening_hours, day)
        if window is None:
            return AvailableTimesOutput(available_times=[], message="The restaurant is closed on this day")

        capacity = self.slot_capacity(party_size)
        counts = self._slot_counts(day)
        available = [slot for slot in window.booking_slots() if counts.get(slot, 0) < capacity]

        return AvailableTimesOutput(
            available_times=available,
            message=None if available else "No availability for this date",
        )

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, data: ReservationCreate) -> Reservation:
        """
        Validate a booking request against the schedule and persist it as PENDING.

        Nothing is written when any check fails.
        """
        if data.reservation_date < restaurant_today():
            raise ValidationError("reservation_date cannot be in the past", field="reservation_date")

        config = RestaurantService(self._db).require_config()
        if not config.service_enabled("reservations"):
            raise ForbiddenError(detail="Reservations are not available")

        window = day_window(config.opening_hours, data.reservation_date)
        if window is None:
            raise ValidationError(
                "The restaurant is closed on this day",
                field="reservation_date",
                reservation_date=str(data.reservation_date),
            )

        minutes = parse_hhmm(data.reservation_time)
        if not window.accepts_booking_at(minutes):
            raise ValidationError(
                "Reservation time is outside the bookable hours",
                field="reservation_time",
                reservation_time=data.reservation_time,
            )

        customer = CustomerService(self._db).resolve_for_reservation(
            name=data.customer_name,
            phone=data.customer_phone,
        )

        reservation = Reservation(
            customer_id=customer.id,
            customer_name=data.customer_name,
            customer_phone=normalize_phone(data.customer_phone),
            reservation_date=data.reservation_date,
            reservation_time=data.reservation_time,
            party_size=data.party_size,
            table_preferences=data.table_preferences,
            special_requests=data.special_requests,
            status=ReservationStatus.PENDING,
        )
        self._db.add(reservation)
        safe_commit(self._db)
        self._db.refresh(reservation)

        logger.info(
            "Reservation created",
            reservation_id=reservation.id,
            reservation_date=str(reservation.reservation_date),
            reservation_time=reservation.reservation_time,
            party_size=reservation.party_size,
            phone=mask_phone(reservation.customer_phone),
        )
        return reservation

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, reservation_id: int) -> Reservation:
        reservation = self._db.get(Reservation, reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    def list_by_phone(self, phone: str) -> list[Reservation]:
        return list(
            self._db.scalars(
                select(Reservation)
                .where(Reservation.customer_phone == normalize_phone(phone))
                .order_by(
                    Reservation.reservation_date.desc(),
                    Reservation.reservation_time.desc(),
                    Reservation.id.desc(),
                )
                .limit(RECENT_BY_PHONE_LIMIT)
            )
        )

    def list_for_day(self, day: date) -> list[Reservation]:
        return list(
            self._db.scalars(
                select(Reservation)
                .where(Reservation.reservation_date == day)
                .order_by(Reservation.reservation_time, Reservation.id)
            )
        )

    def list_upcoming(self, days: int = 7) -> list[Reservation]:
        today = restaurant_today()
        return list(
            self._db.scalars(
                select(Reservation)
                .where(
                    Reservation.reservation_date >= today,
                    Reservation.reservation_date <= today + timedelta(days=days),
                    Reservation.status.in_(ReservationStatus.UPCOMING),
                )
                .order_by(Reservation.reservation_date, Reservation.reservation_time, Reservation.id)
            )
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def _apply_status(self, reservation: Reservation, status: str) -> None:
        if status == reservation.status:
            return
        if not validate_reservation_transition(reservation.status, status):
            raise InvalidTransitionError(
                "reservation", reservation.status, status, reservation_id=reservation.id
            )
        reservation.status = status

    def _assign_table(self, reservation: Reservation, table_id: int) -> None:
        table = self._db.get(DiningTable, table_id)
        if table is None or not table.is_active:
            raise NotFoundError("Dining table", table_id)
        if table.seats < reservation.party_size:
            raise PreconditionFailedError(
                f"Table {table.number} seats {table.seats}, party is {reservation.party_size}",
                table_id=table_id,
            )

        taken = self._db.scalar(
            select(Reservation.id).where(
                Reservation.dining_table_id == table_id,
                Reservation.id != reservation.id,
                Reservation.reservation_date == reservation.reservation_date,
                Reservation.reservation_time == reservation.reservation_time,
                Reservation.status.in_(ReservationStatus.HOLDING),
            )
        )
        if taken is not None:
            raise ConflictError(
                f"Table {table.number} is already booked for this slot",
                table_id=table_id,
                reservation_id=taken,
            )
        reservation.dining_table_id = table_id

    def update(self, reservation_id: int, data: ReservationUpdate, user_id: int | None = None) -> Reservation:
        reservation = self.get(reservation_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("status") is not None:
            self._apply_status(reservation, changes["status"])
        if "dining_table_id" in changes:
            if changes["dining_table_id"] is None:
                reservation.dining_table_id = None
            else:
                self._assign_table(reservation, changes["dining_table_id"])
        for key in ("notes", "table_preferences", "special_requests"):
            if key in changes:
                setattr(reservation, key, changes[key])

        safe_commit(self._db)
        self._db.refresh(reservation)
        logger.info(
            "Reservation updated",
            reservation_id=reservation_id,
            status=reservation.status,
            fields=sorted(changes),
            user_id=user_id,
        )
        return reservation

    def set_status(self, reservation_id: int, status: str, user_id: int | None = None) -> Reservation:
        reservation = self.get(reservation_id)
        previous = reservation.status
        self._apply_status(reservation, status)
        safe_commit(self._db)
        self._db.refresh(reservation)
        logger.info(
            "Reservation status updated",
            reservation_id=reservation_id,
            from_status=previous,
            to_status=status,
            user_id=user_id,
        )
        return reservation

    def cancel(
        self,
        reservation_id: int,
        *,
        is_staff: bool,
        customer_phone: str | None = None,
        reason: str | None = None,
    ) -> Reservation:
        """
        Cancel a reservation.

        Staff may cancel any reservation; anyone else must present the phone
        number the reservation was made with.
        """
        reservation = self.get(reservation_id)
        if not is_staff:
            if not customer_phone or normalize_phone(customer_phone) != reservation.customer_phone:
                raise ForbiddenError("cancel this reservation", reservation_id=reservation_id)

        self._apply_status(reservation, ReservationStatus.CANCELLED)
        if reason:
            reservation.notes = f"{reservation.notes}\n{reason}" if reservation.notes else reason
        safe_commit(self._db)
        self._db.refresh(reservation)
        logger.info("Reservation cancelled", reservation_id=reservation_id, by_staff=is_staff)
        return reservation

    # =========================================================================
    # Stats
    # =========================================================================

    def stats(self, start_day: date, end_day: date) -> ReservationStats:
        in_range = (
            Reservation.reservation_date >= start_day,
            Reservation.reservation_date <= end_day,
        )

        by_status = {
            status: int(count)
            for status, count in self._db.execute(
                select(Reservation.status, func.count(Reservation.id))
                .where(*in_range)
                .group_by(Reservation.status)
            ).all()
        }
        total = sum(by_status.values())

        average = self._db.scalar(select(func.avg(Reservation.party_size)).where(*in_range))

        hours = Counter(
            time_value[:2]
            for time_value in self._db.scalars(select(Reservation.reservation_time).where(*in_range))
        )
        peak_times = [
            PeakTime(hour=f"{hour}:00", count=count)
            for hour, count in sorted(hours.items(), key=lambda pair: (-pair[1], pair[0]))
        ]

        return ReservationStats(
            total=total,
            by_status=by_status,
            average_party_size=round(float(average), 2) if average is not None else 0.0,
            peak_times=peak_times,
        )
