"""
Shared test data builders.
"""

from datetime import date, timedelta

from ordo_shared.utils.clock import restaurant_today

WEEKDAY_HOURS = {"open": "09:00", "close": "22:00", "is_closed": False}

OPENING_HOURS = {
    "monday": WEEKDAY_HOURS,
    "tuesday": WEEKDAY_HOURS,
    "wednesday": WEEKDAY_HOURS,
    "thursday": WEEKDAY_HOURS,
    "friday": {"open": "09:00", "close": "23:00", "is_closed": False},
    "saturday": {"open": "10:00", "close": "23:00", "is_closed": False},
    "sunday": {"open": "10:00", "close": "21:00", "is_closed": True},
}

MONDAY, SUNDAY = 0, 6


def next_weekday(weekday: int) -> date:
    """The next date (tomorrow at the earliest) falling on weekday (Monday=0)."""
    today = restaurant_today()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def order_payload(item_id: int, quantity: int = 1, order_type: str = "TAKEOUT", **extra) -> dict:
    payload = {
        "order_type": order_type,
        "items": [{"menu_item_id": item_id, "quantity": quantity}],
        "customer_info": {"name": "Ana López", "phone": "5512345678"},
        "payment_method": "cash",
    }
    if order_type == "DELIVERY":
        payload["delivery_address"] = {
            "street": "Calle 5 de Mayo 10",
            "neighborhood": "Centro",
            "city": "CDMX",
        }
    payload.update(extra)
    return payload


def reservation_payload(day: date, time: str = "19:30", party_size: int = 2, **extra) -> dict:
    payload = {
        "customer_name": "Luis Pérez",
        "customer_phone": "5598765432",
        "reservation_date": day.isoformat(),
        "reservation_time": time,
        "party_size": party_size,
    }
    payload.update(extra)
    return payload
