"""
Reservations router - /api/reservations/*
Booking and self-service lookup for guests, the daily book for staff.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ordo_api.services.domain import ReservationService
from ordo_api.services.permissions import RequestContext, public_procedure, staff_procedure
from ordo_shared.config.constants import STAFF_ROLES, ReservationStatus
from ordo_shared.utils.clock import restaurant_today
from ordo_shared.utils.exceptions import ValidationError
from ordo_shared.utils.schemas import (
    AvailableTimesOutput,
    ReservationCancelRequest,
    ReservationCreate,
    ReservationOutput,
    ReservationStats,
    ReservationUpdate,
)

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


# =============================================================================
# Public
# =============================================================================


@router.get("/available-times", response_model=AvailableTimesOutput)
def get_available_times(
    reservation_date: date = Query(alias="date"),
    party_size: int = Query(ge=1, le=20),
    ctx: RequestContext = Depends(public_procedure),
) -> AvailableTimesOutput:
    return ReservationService(ctx.db).available_times(reservation_date, party_size)


@router.post("", response_model=ReservationOutput, status_code=status.HTTP_201_CREATED)
def create_reservation(
    body: ReservationCreate,
    ctx: RequestContext = Depends(public_procedure),
) -> ReservationOutput:
    return ReservationOutput.model_validate(ReservationService(ctx.db).create(body))


@router.get("/by-phone/{phone}", response_model=list[ReservationOutput])
def get_by_phone(phone: str, ctx: RequestContext = Depends(public_procedure)) -> list[ReservationOutput]:
    """The ten most recent reservations made with this phone number."""
    return [ReservationOutput.model_validate(r) for r in ReservationService(ctx.db).list_by_phone(phone)]


# =============================================================================
# Staff reads
# =============================================================================


@router.get("/today", response_model=list[ReservationOutput])
def get_today_reservations(ctx: RequestContext = Depends(staff_procedure)) -> list[ReservationOutput]:
    reservations = ReservationService(ctx.db).list_for_day(restaurant_today())
    return [ReservationOutput.model_validate(r) for r in reservations]


@router.get("/upcoming", response_model=list[ReservationOutput])
def get_upcoming(
    days: int = Query(default=7, ge=1, le=90),
    ctx: RequestContext = Depends(staff_procedure),
) -> list[ReservationOutput]:
    reservations = ReservationService(ctx.db).list_upcoming(days=days)
    return [ReservationOutput.model_validate(r) for r in reservations]


@router.get("/stats", response_model=ReservationStats)
def get_stats(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    ctx: RequestContext = Depends(staff_procedure),
) -> ReservationStats:
    start = start_date or restaurant_today()
    end = end_date or start
    if end < start:
        raise ValidationError("end_date must not be before start_date")
    return ReservationService(ctx.db).stats(start, end)


@router.get("/{reservation_id}", response_model=ReservationOutput)
def get_by_id(reservation_id: int, ctx: RequestContext = Depends(public_procedure)) -> ReservationOutput:
    return ReservationOutput.model_validate(ReservationService(ctx.db).get(reservation_id))


# =============================================================================
# Commands
# =============================================================================


@router.patch("/{reservation_id}", response_model=ReservationOutput)
def update_reservation(
    reservation_id: int,
    body: ReservationUpdate,
    ctx: RequestContext = Depends(staff_procedure),
) -> ReservationOutput:
    reservation = ReservationService(ctx.db).update(reservation_id, body, user_id=ctx.user.id)
    return ReservationOutput.model_validate(reservation)


@router.post("/{reservation_id}/confirm", response_model=ReservationOutput)
def confirm(reservation_id: int, ctx: RequestContext = Depends(staff_procedure)) -> ReservationOutput:
    reservation = ReservationService(ctx.db).set_status(
        reservation_id, ReservationStatus.CONFIRMED, user_id=ctx.user.id
    )
    return ReservationOutput.model_validate(reservation)


@router.post("/{reservation_id}/seat", response_model=ReservationOutput)
def mark_seated(reservation_id: int, ctx: RequestContext = Depends(staff_procedure)) -> ReservationOutput:
    reservation = ReservationService(ctx.db).set_status(
        reservation_id, ReservationStatus.SEATED, user_id=ctx.user.id
    )
    return ReservationOutput.model_validate(reservation)


@router.post("/{reservation_id}/cancel", response_model=ReservationOutput)
def cancel(
    reservation_id: int,
    body: ReservationCancelRequest | None = None,
    ctx: RequestContext = Depends(public_procedure),
) -> ReservationOutput:
    """
    Cancel a reservation.

    Staff cancel any reservation. Guests must send the phone number the
    reservation was made with.
    """
    body = body or ReservationCancelRequest()
    reservation = ReservationService(ctx.db).cancel(
        reservation_id,
        is_staff=ctx.role in STAFF_ROLES,
        customer_phone=body.customer_phone,
        reason=body.reason,
    )
    return ReservationOutput.model_validate(reservation)
