"""Report URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.reports.views import SalesReportView

urlpatterns = [
    path("reports/sales", SalesReportView.as_view(), name="sales-report"),
]
