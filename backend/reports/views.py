"""
Reports app views — **Thin Views**.

Each view validates the query string with ``ReportQuerySerializer``,
hands the authenticated user and the resulting ``ReportQuery`` to a
service in ``reports.services`` and serialises the returned dict.

Role checks and row scoping happen inside the services; the domain
``PermissionDenied`` they raise is turned into a 403 by
``core.domain.exception_handler``.  Every view declares a
``failure_message`` so an unexpected aggregation error is reported as
a structured 500 body instead of an HTML error page.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .renderers import ComplaintCSVRenderer
from .serializers import (
    AnalyticsReportSerializer,
    ComplaintExportSerializer,
    DashboardSummarySerializer,
    DeadlineStatusSerializer,
    HeatmapSerializer,
    ReportQuerySerializer,
)
from .services import (
    AnalyticsReportService,
    ComplaintExportService,
    DashboardSummaryService,
    DeadlineStatusService,
    HeatmapService,
    ReportQuery,
)

REPORT_QUERY_PARAMETERS = [
    OpenApiParameter(name="from", type=str, location=OpenApiParameter.QUERY, description="Window start, ISO 8601 date (inclusive)."),
    OpenApiParameter(name="to", type=str, location=OpenApiParameter.QUERY, description="Window end, ISO 8601 date (inclusive)."),
    OpenApiParameter(name="ward", type=str, location=OpenApiParameter.QUERY, description="Ward id or 'all'. Ignored for ward officers."),
    OpenApiParameter(name="type", type=str, location=OpenApiParameter.QUERY, description="Complaint type key or name, or 'all'."),
    OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Complaint status (case-insensitive)."),
    OpenApiParameter(name="priority", type=str, location=OpenApiParameter.QUERY, description="Complaint priority (case-insensitive)."),
]

ERROR_RESPONSES = {
    400: OpenApiResponse(description="Invalid query parameter."),
    403: OpenApiResponse(description="Role may not view this report or scope."),
    500: OpenApiResponse(description="Aggregation failed: {success, message, error}."),
}


class ReportAPIView(APIView):
    """Base view: authentication plus query-string parsing."""

    permission_classes = [IsAuthenticated]
    failure_message = "Failed to generate report."

    def get_report_query(self, request: Request) -> ReportQuery:
        serializer = ReportQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.to_query()


class DashboardSummaryView(ReportAPIView):
    """
    **GET /api/reports/summary/**

    Lightweight dashboard figures: counts by status, today's activity,
    SLA compliance and (administrators only) user counts per role.

    **Roles**: Administrator, Ward Officer, Maintenance Team.
    """

    failure_message = "Failed to load dashboard summary."

    @extend_schema(
        summary="Dashboard summary",
        description=(
            "Counts by status, today's totals and SLA compliance for the "
            "caller's scope. Compliance always equals the analytics report's "
            "figure for the same query."
        ),
        parameters=REPORT_QUERY_PARAMETERS,
        responses={200: OpenApiResponse(response=DashboardSummarySerializer, description="Summary."), **ERROR_RESPONSES},
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        query = self.get_report_query(request)
        data = DashboardSummaryService(request.user, query).get_summary()
        return Response(DashboardSummarySerializer(data).data, status=status.HTTP_200_OK)


class AnalyticsReportView(ReportAPIView):
    """
    **GET /api/reports/analytics/**

    Detailed analytics: totals, SLA compliance and average resolution
    time, dense daily trends, ward breakdown (administrators only) and
    category breakdown.

    **Roles**: Administrator, Ward Officer, Maintenance Team.
    """

    failure_message = "Failed to generate analytics report."

    @extend_schema(
        summary="Analytics report",
        description=(
            "Detailed role-scoped analytics. Trends default to the last 30 "
            "days when no window is given."
        ),
        parameters=REPORT_QUERY_PARAMETERS + [
            OpenApiParameter(name="page", type=int, location=OpenApiParameter.QUERY, description="Page number for metadata (default 1)."),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, description="Page size for metadata (default 1000, max 10000)."),
        ],
        responses={200: OpenApiResponse(response=AnalyticsReportSerializer, description="Analytics report."), **ERROR_RESPONSES},
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        query = self.get_report_query(request)
        data = AnalyticsReportService(request.user, query).get_report()
        return Response(AnalyticsReportSerializer(data).data, status=status.HTTP_200_OK)


class HeatmapView(ReportAPIView):
    """
    **GET /api/reports/heatmap/**

    Geo-unit × complaint-type count matrix.  Administrators get wards
    (or one ward's sub-zones with ``ward=<id>``); ward officers get
    their own ward's sub-zones and a 403 for any other ward.

    **Roles**: Administrator, Ward Officer.
    """

    failure_message = "Failed to build heatmap."

    @extend_schema(
        summary="Complaint heatmap",
        parameters=REPORT_QUERY_PARAMETERS,
        responses={200: OpenApiResponse(response=HeatmapSerializer, description="Heatmap matrix."), **ERROR_RESPONSES},
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        query = self.get_report_query(request)
        data = HeatmapService(request.user, query).build()
        return Response(HeatmapSerializer(data).data, status=status.HTTP_200_OK)


class DeadlineStatusView(ReportAPIView):
    """
    **GET /api/reports/sla/**

    Open complaints per priority split into overdue, warning (deadline
    within 24 hours) and on-track.

    **Roles**: Administrator, Ward Officer.
    """

    failure_message = "Failed to generate SLA deadline report."

    @extend_schema(
        summary="Deadline status by priority",
        parameters=REPORT_QUERY_PARAMETERS,
        responses={200: OpenApiResponse(response=DeadlineStatusSerializer, description="Deadline status."), **ERROR_RESPONSES},
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        query = self.get_report_query(request)
        data = DeadlineStatusService(request.user, query).build()
        return Response(DeadlineStatusSerializer(data).data, status=status.HTTP_200_OK)


class ComplaintExportView(ReportAPIView):
    """
    **GET /api/reports/export/[?format=csv|json]**

    Flat complaint export.  CSV (the default) is served as an
    attachment; ``format=json`` returns columns, rows and a summary.
    Ward officers always export their own ward.

    **Roles**: Administrator, Ward Officer.
    """

    renderer_classes = [ComplaintCSVRenderer, JSONRenderer]
    failure_message = "Failed to export complaints."

    @extend_schema(
        summary="Export complaints",
        parameters=REPORT_QUERY_PARAMETERS + [
            OpenApiParameter(name="format", type=str, location=OpenApiParameter.QUERY, enum=["csv", "json"], description="Output format (default csv)."),
        ],
        responses={200: OpenApiResponse(response=ComplaintExportSerializer, description="Export rows."), **ERROR_RESPONSES},
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        query = self.get_report_query(request)
        service = ComplaintExportService(request.user, query)
        data = ComplaintExportSerializer(service.as_dict()).data

        response = Response(data, status=status.HTTP_200_OK)
        if request.accepted_renderer.format == ComplaintCSVRenderer.format:
            response["Content-Disposition"] = (
                f'attachment; filename="{service.filename()}"'
            )
        return response
