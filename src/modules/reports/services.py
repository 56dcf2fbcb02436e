"""Sales reporting.

Aggregates order lines per product straight in the database. Revenue is
``units_sold * current price``; line items do not snapshot prices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

import structlog
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce

from modules.orders.constants import OrderStatus
from modules.products.models import Product

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")

COUNTED_STATUSES = [s for s in OrderStatus.values if s != OrderStatus.CANCELLED]


@dataclass(frozen=True)
class ProductSales:
    product_id: int
    name: str
    category: Optional[str]
    units_sold: int
    revenue: Decimal


@dataclass(frozen=True)
class SalesReport:
    start_date: Optional[date]
    end_date: Optional[date]
    rows: List[ProductSales] = field(default_factory=list)

    @property
    def total_units(self) -> int:
        return sum(row.units_sold for row in self.rows)

    @property
    def total_revenue(self) -> Decimal:
        return sum((row.revenue for row in self.rows), Decimal("0.00"))


class SalesReportService:
    """Builds per-product sales figures, excluding cancelled orders."""

    def sales_by_product(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> SalesReport:
        sold = Q(order_items__order__status__in=COUNTED_STATUSES)
        if start_date is not None:
            sold &= Q(order_items__order__created_at__date__gte=start_date)
        if end_date is not None:
            sold &= Q(order_items__order__created_at__date__lte=end_date)

        products = (
            Product.objects.annotate(
                units_sold=Coalesce(Sum("order_items__quantity", filter=sold), 0)
            )
            .order_by("-units_sold", "name", "id")
        )

        rows = [
            ProductSales(
                product_id=product.id,
                name=product.name,
                category=product.category,
                units_sold=product.units_sold,
                revenue=(product.price * product.units_sold).quantize(CENT),
            )
            for product in products
        ]
        report = SalesReport(start_date=start_date, end_date=end_date, rows=rows)
        logger.info(
            "report.sales_built",
            product_count=len(rows),
            total_units=report.total_units,
        )
        return report
