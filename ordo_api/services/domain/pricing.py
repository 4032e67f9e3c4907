"""
Order pricing.

Pure functions over menu rows and the delivery configuration; nothing here
touches the session. All amounts are integer cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ordo_api.models import MenuItem
from ordo_shared.config.constants import OrderType
from ordo_shared.config.settings import settings
from ordo_shared.utils.exceptions import PreconditionFailedError
from ordo_shared.utils.schemas import SelectedModifier


@dataclass
class PricedLine:
    menu_item_id: int
    name: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    modifiers: list[dict[str, Any]] = field(default_factory=list)
    special_instructions: str | None = None


@dataclass
class PriceBreakdown:
    order_type: str
    lines: list[PricedLine]
    subtotal_cents: int
    tax_amount_cents: int
    delivery_fee_cents: int

    @property
    def total_cents(self) -> int:
        return self.subtotal_cents + self.tax_amount_cents + self.delivery_fee_cents


def format_money(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def tax_for(subtotal_cents: int, rate_percent: int | None = None) -> int:
    """Tax on the subtotal, rounded half up to the cent."""
    if rate_percent is None:
        rate_percent = settings.tax_rate_percent
    return (subtotal_cents * rate_percent + 50) // 100


def delivery_fee_for(subtotal_cents: int, delivery_config: dict[str, Any] | None) -> int:
    """
    Delivery fee for a subtotal.

    Raises PreconditionFailedError when the subtotal is below the configured
    minimum. The fee is waived when free_over_cents is set (non-zero) and reached.
    Without a configuration delivery is free.
    """
    if not delivery_config:
        return 0

    minimum = int(delivery_config.get("minimum_order_cents") or 0)
    if subtotal_cents < minimum:
        raise PreconditionFailedError(
            f"Minimum order for delivery is {format_money(minimum)}",
            subtotal_cents=subtotal_cents,
            minimum_order_cents=minimum,
        )

    free_over = int(delivery_config.get("free_over_cents") or 0)
    if free_over and subtotal_cents >= free_over:
        return 0

    return int(delivery_config.get("fee_cents") or 0)


def price_line(
    item: MenuItem,
    quantity: int,
    requested: Iterable[SelectedModifier],
    special_instructions: str | None = None,
) -> PricedLine:
    """
    Price one cart line.

    Requested modifiers that do not belong to the item are dropped. Every
    requested entry of a known modifier adds its adjustment and is
    snapshotted, so a modifier listed twice is charged twice.

    Raises PreconditionFailedError when the adjustments take the unit price
    below zero.
    """
    known = {modifier.id: modifier for modifier in item.modifiers}
    applied: list[dict[str, Any]] = []
    unit_price = item.price_cents

    for choice in requested:
        modifier = known.get(choice.modifier_id)
        if modifier is None:
            continue
        unit_price += modifier.price_adjustment_cents
        applied.append(
            {
                "id": modifier.id,
                "name": modifier.name,
                "price_adjustment_cents": modifier.price_adjustment_cents,
                "selected_options": list(choice.selected_options),
            }
        )

    if unit_price < 0:
        raise PreconditionFailedError(
            f"Modifiers take the price of {item.name} below zero",
            menu_item_id=item.id,
            unit_price_cents=unit_price,
        )

    return PricedLine(
        menu_item_id=item.id,
        name=item.name,
        quantity=quantity,
        unit_price_cents=unit_price,
        total_price_cents=unit_price * quantity,
        modifiers=applied,
        special_instructions=special_instructions,
    )


def summarize(
    order_type: str,
    lines: list[PricedLine],
    delivery_config: dict[str, Any] | None,
) -> PriceBreakdown:
    """Roll priced lines into subtotal, tax and delivery fee."""
    subtotal = sum(line.total_price_cents for line in lines)
    fee = delivery_fee_for(subtotal, delivery_config) if order_type == OrderType.DELIVERY else 0
    return PriceBreakdown(
        order_type=order_type,
        lines=lines,
        subtotal_cents=subtotal,
        tax_amount_cents=tax_for(subtotal),
        delivery_fee_cents=fee,
    )
