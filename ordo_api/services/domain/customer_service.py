"""
Customer resolution by phone number.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ordo_api.models import Customer
from ordo_shared.config.logging import get_logger, mask_phone
from ordo_shared.utils.validators import normalize_phone

logger = get_logger(__name__)


class CustomerService:
    """
    Finds or creates the Customer behind an order or reservation.

    Changes are flushed, never committed: the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self._db = db

    def get_by_phone(self, phone: str) -> Customer | None:
        return self._db.scalar(select(Customer).where(Customer.phone == normalize_phone(phone)))

    def resolve_for_order(
        self,
        name: str,
        phone: str,
        email: str | None = None,
        address: dict[str, Any] | None = None,
    ) -> Customer:
        """
        Return the customer for this phone, creating it when absent.

        An existing customer only gets name/email filled in when they are
        missing, and a new delivery address appended.
        """
        customer = self.get_by_phone(phone)
        if customer is None:
            customer = Customer(
                phone=normalize_phone(phone),
                name=name,
                email=email,
                addresses=[address] if address else [],
            )
            self._db.add(customer)
            self._db.flush()
            logger.info("Customer created", customer_id=customer.id, phone=mask_phone(customer.phone))
            return customer

        if not customer.name:
            customer.name = name
        if not customer.email and email:
            customer.email = email
        if address and address not in (customer.addresses or []):
            # Reassign so the JSON column is marked dirty
            customer.addresses = [*(customer.addresses or []), address]
        self._db.flush()
        return customer

    def resolve_for_reservation(self, name: str, phone: str) -> Customer:
        """Return the customer for this phone, creating it when absent. No backfill."""
        customer = self.get_by_phone(phone)
        if customer is None:
            customer = Customer(phone=normalize_phone(phone), name=name, addresses=[])
            self._db.add(customer)
            self._db.flush()
            logger.info("Customer created", customer_id=customer.id, phone=mask_phone(customer.phone))
        return customer
