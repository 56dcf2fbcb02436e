"""Customer repository interface.

Extends ``IRepository[Customer]`` with the email look-ups used for
customer resolution during order placement.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""

    @abstractmethod
    def get_or_create_by_email(
        self, name: str, email: str, phone: Optional[str] = None
    ) -> tuple[Customer, bool]:
        """Return the customer owning ``email``, inserting it if absent.

        Must be race-free: a concurrent insert of the same email resolves
        to the existing row instead of failing. The boolean is ``True``
        when a new row was created.
        """
