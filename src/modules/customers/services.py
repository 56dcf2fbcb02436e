"""Customer service layer (Use Cases).

Customers are written only by order placement, so this service is
read-only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.customers.exceptions import CustomerNotFound
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer queries.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    def get_customer(self, id: int) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        logger.info("customer.retrieved", customer_id=id)
        return customer
