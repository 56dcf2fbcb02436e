"""Unit tests for ``SalesReportService``."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from django.utils import timezone

from modules.orders.dtos import PlaceOrderDTO
from modules.orders.models import Order
from modules.reports.services import SalesReportService

pytestmark = pytest.mark.unit


def _place(order_service, items, email="a@x.com"):
    return order_service.place_order(
        PlaceOrderDTO.from_payload(
            {
                "customer": {"name": "Alice", "email": email},
                "items": [{"product_id": p.id, "quantity": q} for p, q in items],
            }
        )
    )


def _row(report, product):
    return next(row for row in report.rows if row.product_id == product.id)


class TestSalesByProduct:
    def test_units_and_revenue_per_product(self, order_service, croissant, baguette):
        _place(order_service, [(croissant, 2), (baguette, 1)])
        _place(order_service, [(baguette, 3)], email="bob@example.com")

        report = SalesReportService().sales_by_product()

        assert _row(report, croissant).units_sold == 2
        assert _row(report, croissant).revenue == Decimal("5.80")
        assert _row(report, baguette).units_sold == 4
        assert _row(report, baguette).revenue == Decimal("12.80")
        assert report.total_units == 6
        assert report.total_revenue == Decimal("18.60")

    def test_rows_are_sorted_by_units_sold(self, order_service, croissant, baguette):
        _place(order_service, [(croissant, 1), (baguette, 4)])
        report = SalesReportService().sales_by_product()
        assert [row.product_id for row in report.rows] == [baguette.id, croissant.id]

    def test_unsold_products_have_zero_rows(self, croissant):
        report = SalesReportService().sales_by_product()
        row = _row(report, croissant)
        assert row.units_sold == 0
        assert row.revenue == Decimal("0.00")
        assert row.category == "pastry"

    def test_cancelled_orders_are_excluded(self, order_service, croissant):
        kept = _place(order_service, [(croissant, 1)])
        cancelled = _place(order_service, [(croissant, 2)], email="bob@example.com")
        order_service.cancel_order(cancelled.id)

        report = SalesReportService().sales_by_product()

        assert _row(report, croissant).units_sold == 1
        assert kept.id != cancelled.id

    def test_date_range(self, order_service, croissant):
        old = _place(order_service, [(croissant, 1)])
        Order.objects.filter(id=old.id).update(
            created_at=timezone.now() - timedelta(days=10)
        )
        _place(order_service, [(croissant, 2)], email="bob@example.com")
        today = timezone.now().date()

        recent = SalesReportService().sales_by_product(start_date=today)
        assert _row(recent, croissant).units_sold == 2

        older = SalesReportService().sales_by_product(
            end_date=today - timedelta(days=5)
        )
        assert _row(older, croissant).units_sold == 1
        assert older.end_date == today - timedelta(days=5)
