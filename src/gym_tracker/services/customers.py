"""Customer service."""

import logging
from datetime import datetime

from ..models.customer import Customer
from ..utils.dates import utcnow
from .base import EntityService, new_id, require_name

logger = logging.getLogger(__name__)


class CustomerService(EntityService):
    """CRUD operations for customers.

    Deleting a customer deletes their workouts first.
    """

    collection = "customers"
    entity = "customer"
    updatable_fields = ("name", "email", "phone", "deactivated")

    async def get_all(self) -> list[Customer]:
        """List customers, active ones first."""
        records = await self.store.get_all(self.collection)
        customers = [Customer.from_dict(r) for r in records]
        # sorted() is stable, so relative order is kept within each group
        return sorted(customers, key=lambda c: c.deactivated)

    async def get_active(self) -> list[Customer]:
        """List customers that are not deactivated."""
        return [c for c in await self.get_all() if not c.deactivated]

    async def get_by_id(self, customer_id: str) -> Customer | None:
        record = await self.store.get_by_id(self.collection, customer_id)
        if record is None:
            return None
        return Customer.from_dict(record)

    async def create(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        deactivated: bool = False,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> Customer:
        """Create a customer.

        If ``id`` is given and already taken, the existing customer is
        updated with the given values instead.
        """
        if await self._exists(id):
            return await self.update(
                id, name=name, email=email, phone=phone, deactivated=deactivated
            )

        require_name(name, self.entity)
        now = utcnow()
        customer = Customer(
            id=id or new_id(),
            name=name,
            email=email,
            phone=phone,
            deactivated=deactivated,
            created_at=created_at or now,
            updated_at=updated_at or created_at or now,
        )
        await self.store.add(self.collection, customer.to_dict())
        logger.debug("Created customer %s", customer.id)
        return customer

    async def update(self, customer_id: str, **fields) -> Customer:
        """Apply a partial update and refresh ``updated_at``.

        Raises:
            NotFound: If the customer does not exist
            ValidationError: On unknown fields or an empty name
        """
        self._check_fields(fields)
        if "name" in fields:
            require_name(fields["name"], self.entity)

        customer = Customer.from_dict(await self._get_record(customer_id))
        for key, value in fields.items():
            setattr(customer, key, value)
        customer.deactivated = bool(customer.deactivated)
        customer.updated_at = utcnow()

        await self.store.update(self.collection, customer.to_dict())
        return customer

    async def deactivate(self, customer_id: str) -> Customer:
        """Hide a customer from active lists without deleting history."""
        return await self.update(customer_id, deactivated=True)

    async def reactivate(self, customer_id: str) -> Customer:
        return await self.update(customer_id, deactivated=False)

    async def delete(self, customer_id: str) -> None:
        """Delete a customer and every workout that references them."""
        await self._delete_workouts("customerId", customer_id)
        await self.store.delete(self.collection, customer_id)
        logger.debug("Deleted customer %s", customer_id)
