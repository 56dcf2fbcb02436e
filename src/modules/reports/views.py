"""Report API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.exceptions import error_response, flatten_detail
from modules.reports.serializers import SalesQuerySerializer, SalesReportSerializer
from modules.reports.services import SalesReportService


class SalesReportView(APIView):
    """GET /reports/sales

    One row per product with units sold and revenue. Cancelled orders
    are excluded.
    """

    def get(self, request: Request) -> Response:
        query = SalesQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return error_response(
                flatten_detail(query.errors), status.HTTP_400_BAD_REQUEST
            )

        report = SalesReportService().sales_by_product(
            start_date=query.validated_data.get("start_date"),
            end_date=query.validated_data.get("end_date"),
        )
        return Response(SalesReportSerializer(report).data)
