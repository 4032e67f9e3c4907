"""
Order Domain Service.

Quote, checkout, status transitions, payment confirmation and the order
read/stats queries.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ordo_api.models import MenuItem, Order, OrderItem
from ordo_shared.config.constants import (
    OrderStatus,
    PaymentStatus,
    validate_order_transition,
)
from ordo_shared.config.logging import get_logger, mask_phone
from ordo_shared.config.settings import settings
from ordo_shared.infrastructure.db import safe_commit
from ordo_shared.utils.clock import (
    as_utc,
    local_day_bounds,
    local_range_bounds,
    now_utc,
    restaurant_today,
)
from ordo_shared.utils.exceptions import ConflictError, InvalidTransitionError, NotFoundError
from ordo_shared.utils.schemas import (
    ConfirmPaymentRequest,
    OrderCreate,
    OrderItemInput,
    OrderQuoteRequest,
    OrderStatusUpdate,
    PopularItem,
    SalesStats,
)
from ordo_shared.utils.validators import normalize_phone

from .customer_service import CustomerService
from .pricing import PriceBreakdown, price_line, summarize
from .restaurant_service import RestaurantService

logger = get_logger(__name__)

POPULAR_ITEMS_LIMIT = 10
ORDER_NUMBER_ATTEMPTS = 3


def _with_items(stmt):
    return stmt.options(
        selectinload(Order.items).selectinload(OrderItem.menu_item),
        selectinload(Order.customer),
    )


class OrderService:
    """
    Domain service for orders.

    create() writes the order, its items and the customer upsert in a single
    transaction: on any failure nothing is persisted.
    """

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Pricing
    # =========================================================================

    def _load_items(self, lines: list[OrderItemInput]) -> dict[int, MenuItem]:
        ids = {line.menu_item_id for line in lines}
        items = self._db.scalars(
            select(MenuItem)
            .options(selectinload(MenuItem.modifiers))
            .where(MenuItem.id.in_(ids))
        ).all()
        return {item.id: item for item in items}

    def quote(self, request: OrderQuoteRequest) -> PriceBreakdown:
        """
        Price a cart against current menu prices and delivery settings.

        Raises NotFoundError for unknown or unavailable items and
        PreconditionFailedError when a delivery is below the minimum.
        """
        items = self._load_items(request.items)
        priced = []
        for line in request.items:
            item = items.get(line.menu_item_id)
            if item is None or not item.is_available or not item.is_active:
                raise NotFoundError("Menu item", line.menu_item_id, reason="missing or unavailable")
            priced.append(price_line(item, line.quantity, line.modifiers, line.special_instructions))

        config = RestaurantService(self._db).get_active_config()
        delivery_config = config.delivery_config if config else None
        return summarize(request.order_type, priced, delivery_config)

    # =========================================================================
    # Checkout
    # =========================================================================

    def _next_order_number(self) -> str:
        """ORD-YYYYMMDD-NNNN, the sequence restarting every restaurant-local day."""
        today = restaurant_today()
        prefix = f"ORD-{today:%Y%m%d}-"
        existing = self._db.scalar(
            select(func.count(Order.id)).where(Order.order_number.like(f"{prefix}%"))
        ) or 0
        sequence = existing + 1
        while self._db.scalar(
            select(Order.id).where(Order.order_number == f"{prefix}{sequence:04d}")
        ) is not None:
            sequence += 1
        return f"{prefix}{sequence:04d}"

    def _order_number_taken(self, order_number: str) -> bool:
        return self._db.scalar(select(Order.id).where(Order.order_number == order_number)) is not None

    def _build_order(self, data: OrderCreate, breakdown: PriceBreakdown) -> Order:
        address = data.delivery_address.model_dump() if data.delivery_address else None
        customer = CustomerService(self._db).resolve_for_order(
            name=data.customer_info.name,
            phone=data.customer_info.phone,
            email=data.customer_info.email,
            address=address,
        )

        order = Order(
            order_number=self._next_order_number(),
            customer_id=customer.id,
            order_type=data.order_type,
            status=OrderStatus.PENDING,
            subtotal_cents=breakdown.subtotal_cents,
            tax_amount_cents=breakdown.tax_amount_cents,
            delivery_fee_cents=breakdown.delivery_fee_cents,
            tip_amount_cents=0,
            discount_amount_cents=0,
            total_cents=breakdown.total_cents,
            payment_status=PaymentStatus.PENDING,
            payment_method=data.payment_method,
            customer_name=data.customer_info.name,
            customer_phone=normalize_phone(data.customer_info.phone),
            delivery_address=address,
            table_number=data.table_number,
            special_instructions=data.special_instructions,
        )
        for line in breakdown.lines:
            order.items.append(
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price_cents,
                    total_price_cents=line.total_price_cents,
                    modifiers=line.modifiers,
                    special_instructions=line.special_instructions,
                )
            )
        return order

    def create(self, data: OrderCreate) -> Order:
        """
        Check out a cart.

        Two concurrent checkouts can compute the same order number; the one
        that loses the unique constraint rolls back and rebuilds the whole
        order under a fresh number, up to ORDER_NUMBER_ATTEMPTS times.
        """
        breakdown = self.quote(data)

        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            order = self._build_order(data, breakdown)
            order_number = order.order_number
            self._db.add(order)
            try:
                safe_commit(self._db)
                break
            except ConflictError:
                if attempt == ORDER_NUMBER_ATTEMPTS or not self._order_number_taken(order_number):
                    raise
                logger.warning("Order number collision, retrying", order_number=order_number, attempt=attempt)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            order_type=order.order_type,
            total_cents=order.total_cents,
            phone=mask_phone(order.customer_phone),
        )
        return self.get_by_id(order.id)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_by_id(self, order_id: int) -> Order:
        order = self._db.scalar(_with_items(select(Order)).where(Order.id == order_id))
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def get_by_order_number(self, order_number: str) -> Order:
        order = self._db.scalar(
            _with_items(select(Order)).where(Order.order_number == order_number)
        )
        if order is None:
            raise NotFoundError("Order", order_number)
        return order

    def list_active(self) -> list[Order]:
        return list(
            self._db.scalars(
                _with_items(select(Order))
                .where(Order.status.in_(OrderStatus.ACTIVE))
                .order_by(Order.created_at.asc(), Order.id.asc())
            )
        )

    def list_today(self) -> list[Order]:
        start, end = local_day_bounds(restaurant_today())
        return list(
            self._db.scalars(
                _with_items(select(Order))
                .where(Order.created_at >= start, Order.created_at < end)
                .order_by(Order.created_at.desc(), Order.id.desc())
            )
        )

    def list_kitchen(self) -> list[tuple[Order, int, datetime]]:
        """
        Orders the kitchen is working on, oldest first, each with its elapsed
        minutes and an estimated ready time (created_at + default prep time
        when none was set).
        """
        orders = self._db.scalars(
            _with_items(select(Order))
            .where(Order.status.in_(OrderStatus.KITCHEN_VISIBLE))
            .order_by(Order.created_at.asc(), Order.id.asc())
        ).all()

        now = now_utc()
        result = []
        for order in orders:
            created = as_utc(order.created_at)
            elapsed = max(0, int((now - created).total_seconds() // 60))
            estimate = as_utc(order.estimated_ready_time) or created + timedelta(
                minutes=settings.kitchen_default_prep_minutes
            )
            result.append((order, elapsed, estimate))
        return result

    # =========================================================================
    # Commands
    # =========================================================================

    def update_status(self, order_id: int, data: OrderStatusUpdate, user_id: int | None = None) -> Order:
        """
        Move an order along its lifecycle.

        Setting the current status again only updates the estimate.
        Any move outside the transition table raises InvalidTransitionError.
        """
        order = self.get_by_id(order_id)
        previous = order.status

        if data.status != previous:
            if not validate_order_transition(previous, data.status):
                raise InvalidTransitionError("order", previous, data.status, order_id=order_id)
            order.status = data.status
            if data.status == OrderStatus.READY:
                order.ready_at = now_utc()
            elif data.status == OrderStatus.DELIVERED:
                order.delivered_at = now_utc()

        if data.estimated_ready_time is not None:
            order.estimated_ready_time = data.estimated_ready_time

        safe_commit(self._db)
        logger.info(
            "Order status updated",
            order_id=order_id,
            from_status=previous,
            to_status=data.status,
            user_id=user_id,
        )
        return self.get_by_id(order_id)

    def confirm_payment(self, order_id: int, data: ConfirmPaymentRequest, user_id: int | None = None) -> Order:
        order = self.get_by_id(order_id)

        order.payment_status = PaymentStatus.PAID
        if data.payment_reference is not None:
            order.payment_reference = data.payment_reference
        if data.tip_amount_cents > 0:
            order.tip_amount_cents = data.tip_amount_cents
        order.recompute_total()

        safe_commit(self._db)
        logger.info(
            "Order payment confirmed",
            order_id=order_id,
            total_cents=order.total_cents,
            tip_cents=order.tip_amount_cents,
            user_id=user_id,
        )
        return self.get_by_id(order_id)

    # =========================================================================
    # Stats
    # =========================================================================

    def sales_stats(self, start_day: date, end_day: date) -> SalesStats:
        """Paid orders created between start_day and end_day (inclusive)."""
        start, end = local_range_bounds(start_day, end_day)
        paid = (
            Order.payment_status == PaymentStatus.PAID,
            Order.created_at >= start,
            Order.created_at < end,
        )

        total_orders, total_revenue = self._db.execute(
            select(func.count(Order.id), func.coalesce(func.sum(Order.total_cents), 0)).where(*paid)
        ).one()
        total_orders = int(total_orders or 0)
        total_revenue = int(total_revenue or 0)

        by_type = {
            order_type: int(count)
            for order_type, count in self._db.execute(
                select(Order.order_type, func.count(Order.id)).where(*paid).group_by(Order.order_type)
            ).all()
        }

        quantity = func.sum(OrderItem.quantity).label("quantity")
        popular_rows = self._db.execute(
            select(
                OrderItem.menu_item_id,
                MenuItem.name,
                quantity,
                func.sum(OrderItem.total_price_cents).label("revenue"),
            )
            .join(Order, OrderItem.order_id == Order.id)
            .join(MenuItem, OrderItem.menu_item_id == MenuItem.id)
            .where(*paid)
            .group_by(OrderItem.menu_item_id, MenuItem.name)
            .order_by(quantity.desc(), OrderItem.menu_item_id)
            .limit(POPULAR_ITEMS_LIMIT)
        ).all()

        return SalesStats(
            total_orders=total_orders,
            total_revenue_cents=total_revenue,
            average_order_value_cents=(total_revenue // total_orders) if total_orders else 0,
            orders_by_type=by_type,
            popular_items=[
                PopularItem(
                    menu_item_id=row.menu_item_id,
                    name=row.name,
                    quantity=int(row.quantity),
                    revenue_cents=int(row.revenue),
                )
                for row in popular_rows
            ],
        )
