"""Customer model.

Business rules implemented:
- Email is the dedup key: one row per (lower-cased) address, backed by
  a UNIQUE constraint.
- Customers are only created by order placement; there is no public
  write endpoint.
"""

from __future__ import annotations

from django.db import models


class Customer(models.Model):
    """A person who has placed at least one order."""

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=20, null=True, blank=True)  # noqa: DJ01

    class Meta:
        db_table = "customers"
        ordering = ["id"]

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        local, _, domain = (self.email or "").partition("@")
        return f"{self.name} ({local[:1]}***@{domain})"
