"""
Orders router - /api/orders/*
Checkout and tracking for customers, queues and payment for staff.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ordo_api.services.domain import OrderService
from ordo_api.services.domain.pricing import PriceBreakdown
from ordo_api.services.permissions import (
    RequestContext,
    kitchen_procedure,
    public_procedure,
    staff_procedure,
)
from ordo_shared.utils.clock import restaurant_today
from ordo_shared.utils.exceptions import ValidationError
from ordo_shared.utils.schemas import (
    ConfirmPaymentRequest,
    KitchenOrderOutput,
    OrderCreate,
    OrderOutput,
    OrderQuoteRequest,
    OrderStatusUpdate,
    QuoteLine,
    QuoteOutput,
    SalesStats,
)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _quote_output(breakdown: PriceBreakdown) -> QuoteOutput:
    return QuoteOutput(
        order_type=breakdown.order_type,
        lines=[
            QuoteLine(
                menu_item_id=line.menu_item_id,
                name=line.name,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                total_price_cents=line.total_price_cents,
                modifiers=line.modifiers,
                special_instructions=line.special_instructions,
            )
            for line in breakdown.lines
        ],
        subtotal_cents=breakdown.subtotal_cents,
        tax_amount_cents=breakdown.tax_amount_cents,
        delivery_fee_cents=breakdown.delivery_fee_cents,
        total_cents=breakdown.total_cents,
    )


# =============================================================================
# Public
# =============================================================================


@router.post("/quote", response_model=QuoteOutput)
def quote(body: OrderQuoteRequest, ctx: RequestContext = Depends(public_procedure)) -> QuoteOutput:
    """
    Price a cart server-side without placing the order.

    Clients use this to refresh the totals their local cart shows.
    """
    return _quote_output(OrderService(ctx.db).quote(body))


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(body: OrderCreate, ctx: RequestContext = Depends(public_procedure)) -> OrderOutput:
    return OrderOutput.model_validate(OrderService(ctx.db).create(body))


@router.get("/number/{order_number}", response_model=OrderOutput)
def get_by_order_number(
    order_number: str,
    ctx: RequestContext = Depends(public_procedure),
) -> OrderOutput:
    return OrderOutput.model_validate(OrderService(ctx.db).get_by_order_number(order_number))


# =============================================================================
# Staff queues
# =============================================================================


@router.get("/active", response_model=list[OrderOutput])
def get_active_orders(ctx: RequestContext = Depends(staff_procedure)) -> list[OrderOutput]:
    return [OrderOutput.model_validate(o) for o in OrderService(ctx.db).list_active()]


@router.get("/today", response_model=list[OrderOutput])
def get_today_orders(ctx: RequestContext = Depends(staff_procedure)) -> list[OrderOutput]:
    return [OrderOutput.model_validate(o) for o in OrderService(ctx.db).list_today()]


@router.get("/kitchen", response_model=list[KitchenOrderOutput])
def get_kitchen_orders(ctx: RequestContext = Depends(kitchen_procedure)) -> list[KitchenOrderOutput]:
    """Confirmed and preparing orders, oldest first."""
    result = []
    for order, elapsed, estimate in OrderService(ctx.db).list_kitchen():
        data = OrderOutput.model_validate(order).model_dump()
        data["estimated_ready_time"] = estimate
        result.append(KitchenOrderOutput(**data, elapsed_minutes=elapsed))
    return result


@router.get("/stats", response_model=SalesStats)
def get_sales_stats(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    ctx: RequestContext = Depends(staff_procedure),
) -> SalesStats:
    """Paid-order totals for a local date range (both ends inclusive, default today)."""
    start = start_date or restaurant_today()
    end = end_date or start
    if end < start:
        raise ValidationError("end_date must not be before start_date")
    return OrderService(ctx.db).sales_stats(start, end)


# =============================================================================
# Staff commands
# =============================================================================


@router.post("/{order_id}/status", response_model=OrderOutput)
def update_status(
    order_id: int,
    body: OrderStatusUpdate,
    ctx: RequestContext = Depends(staff_procedure),
) -> OrderOutput:
    order = OrderService(ctx.db).update_status(order_id, body, user_id=ctx.user.id)
    return OrderOutput.model_validate(order)


@router.post("/{order_id}/payment", response_model=OrderOutput)
def confirm_payment(
    order_id: int,
    body: ConfirmPaymentRequest,
    ctx: RequestContext = Depends(staff_procedure),
) -> OrderOutput:
    order = OrderService(ctx.db).confirm_payment(order_id, body, user_id=ctx.user.id)
    return OrderOutput.model_validate(order)
