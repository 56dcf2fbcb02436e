"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        """List customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"email__iexact": "a@x.com"}
            {"name__icontains": "alice"}
        """
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=entity.id, is_new=is_new)
        return entity

    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address (case-insensitive)."""
        return Customer.objects.filter(email=email.strip().lower()).first()

    def get_or_create_by_email(
        self, name: str, email: str, phone: Optional[str] = None
    ) -> tuple[Customer, bool]:
        """Insert-or-get keyed on the UNIQUE email column.

        ``get_or_create`` runs the INSERT in a savepoint and, on an
        ``IntegrityError`` from a concurrent insert, re-reads the winning
        row. The name and phone of an existing customer are left as-is.
        """
        customer, created = Customer.objects.get_or_create(
            email=email.strip().lower(),
            defaults={"name": name, "phone": phone},
        )
        if created:
            logger.info("customer.created", customer_id=customer.id)
        return customer, created
