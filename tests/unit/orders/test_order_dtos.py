"""Unit tests for the order placement DTOs."""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from modules.orders.dtos import OrderItemDTO, PlaceOrderDTO
from modules.orders.exceptions import InvalidOrder

pytestmark = pytest.mark.unit


def _payload(**overrides):
    payload = {
        "customer": {"name": "Alice", "email": "a@x.com"},
        "items": [{"product_id": 1, "quantity": 2}],
    }
    payload.update(overrides)
    return payload


class TestPlaceOrderDTOFromPayload:
    def test_valid_payload(self):
        dto = PlaceOrderDTO.from_payload(_payload())
        assert dto.customer.name == "Alice"
        assert dto.customer.email == "a@x.com"
        assert dto.customer.phone is None
        assert dto.items == [OrderItemDTO(product_id=1, quantity=2)]

    def test_email_is_trimmed_and_lowercased(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(customer={"name": "Alice", "email": "  Alice@X.COM "})
        )
        assert dto.customer.email == "alice@x.com"

    def test_phone_is_kept(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(customer={"name": "Alice", "email": "a@x.com", "phone": "555-0101"})
        )
        assert dto.customer.phone == "555-0101"

    def test_blank_phone_becomes_none(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(customer={"name": "Alice", "email": "a@x.com", "phone": "  "})
        )
        assert dto.customer.phone is None

    def test_numeric_strings_are_coerced(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(items=[{"product_id": "3", "quantity": "4"}])
        )
        assert dto.items[0].product_id == 3
        assert dto.items[0].quantity == 4

    def test_duplicate_products_are_allowed(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(
                items=[
                    {"product_id": 1, "quantity": 1},
                    {"product_id": 1, "quantity": 2},
                ]
            )
        )
        assert len(dto.items) == 2

    def test_item_order_is_preserved(self):
        dto = PlaceOrderDTO.from_payload(
            _payload(
                items=[
                    {"product_id": 9, "quantity": 1},
                    {"product_id": 2, "quantity": 1},
                    {"product_id": 5, "quantity": 1},
                ]
            )
        )
        assert [item.product_id for item in dto.items] == [9, 2, 5]

    def test_dto_is_frozen(self):
        dto = PlaceOrderDTO.from_payload(_payload())
        with pytest.raises(ValidationError):
            dto.items = []

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "order",
            {},
            {"items": [{"product_id": 1, "quantity": 1}]},
            {"customer": None, "items": [{"product_id": 1, "quantity": 1}]},
            {"customer": {"name": "Alice", "email": "a@x.com"}},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": []},
            {"customer": {"name": "Alice", "email": "a@x.com"}, "items": None},
        ],
    )
    def test_missing_customer_or_items_is_invalid(self, payload):
        with pytest.raises(InvalidOrder, match="Invalid order"):
            PlaceOrderDTO.from_payload(payload)

    @pytest.mark.parametrize(
        "customer",
        [
            {"name": "Alice"},
            {"name": "Alice", "email": ""},
            {"name": "Alice", "email": "   "},
            {"name": "Alice", "email": "not-an-email"},
            {"email": "a@x.com"},
            {"name": "", "email": "a@x.com"},
            {"name": "A" * 256, "email": "a@x.com"},
            {"name": "Alice", "email": "a@x.com", "phone": "5" * 21},
        ],
    )
    def test_bad_customer_is_invalid(self, customer):
        with pytest.raises(InvalidOrder):
            PlaceOrderDTO.from_payload(_payload(customer=customer))

    @pytest.mark.parametrize(
        "item",
        [
            {"product_id": 1, "quantity": 0},
            {"product_id": 1, "quantity": -3},
            {"product_id": 1},
            {"quantity": 2},
            {"product_id": 0, "quantity": 1},
            {"product_id": "abc", "quantity": 1},
            {"product_id": 1, "quantity": 1.5},
            {"product_id": True, "quantity": 1},
            {"product_id": 1, "quantity": True},
            {"product_id": 10**20, "quantity": 1},
            {"product_id": 1, "quantity": 2_147_483_648},
        ],
    )
    def test_bad_item_is_invalid(self, item):
        with pytest.raises(InvalidOrder):
            PlaceOrderDTO.from_payload(_payload(items=[item]))

    def test_one_bad_item_invalidates_the_order(self):
        with pytest.raises(InvalidOrder):
            PlaceOrderDTO.from_payload(
                _payload(
                    items=[
                        {"product_id": 1, "quantity": 1},
                        {"product_id": 2, "quantity": 0},
                    ]
                )
            )
