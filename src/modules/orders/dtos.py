"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``CustomerDTO``: the customer descriptor of a placement request.
- ``OrderItemDTO``: input for a single order line item.
- ``PlaceOrderDTO``: input for order placement (nested customer + items).
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
)

from modules.orders.exceptions import InvalidOrder

logger = structlog.get_logger(__name__)

# Column ranges: BigAutoField ids and PositiveIntegerField quantities.
MAX_ID = 9_223_372_036_854_775_807
MAX_QUANTITY = 2_147_483_647

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CustomerDTO(BaseModel):
    """Immutable customer descriptor.

    ``email`` is trimmed and lower-cased so it can serve as the dedup key.
    """

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(max_length=255)]
    email: EmailStr
    phone: Annotated[Optional[str], Field(max_length=20)] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v is not None else v


class OrderItemDTO(BaseModel):
    """Immutable DTO for a single line item: ``product_id`` and ``quantity``."""

    model_config = ConfigDict(frozen=True)

    product_id: Annotated[int, Field(ge=1, le=MAX_ID)]
    quantity: Annotated[int, Field(ge=1, le=MAX_QUANTITY)]

    @field_validator("product_id", "quantity", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Expected an integer, not a boolean.")
        return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates:
    - ``customer`` is present with a valid email.
    - ``items`` contains at least one item.
    - Each item has a product id and a positive quantity.

    The same product may appear on several lines.
    """

    model_config = ConfigDict(frozen=True)

    customer: CustomerDTO
    items: List[OrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @classmethod
    def from_payload(cls, data: Any) -> PlaceOrderDTO:
        """Build the DTO from a decoded request body.

        Raises:
            InvalidOrder: for any malformed payload.
        """
        if not isinstance(data, dict):
            raise InvalidOrder()
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            logger.info("order.invalid_payload", error_count=exc.error_count())
            raise InvalidOrder() from exc
