"""
Reports app URL configuration.

URL prefix (registered in ``backend/urls.py``)::

    path('api/reports/', include('reports.urls'))

Endpoint summary
----------------
GET  /api/reports/summary/     — Dashboard summary (counts, today, SLA compliance).
GET  /api/reports/analytics/   — Detailed analytics with trends and breakdowns.
GET  /api/reports/heatmap/     — Geo-unit × complaint-type matrix.
GET  /api/reports/sla/         — Open-complaint deadline status by priority.
GET  /api/reports/export/      — CSV / JSON complaint export.
"""

from django.urls import path

from . import views

app_name = "reports"

urlpatterns = [
    path("summary/", views.DashboardSummaryView.as_view(), name="summary"),
    path("analytics/", views.AnalyticsReportView.as_view(), name="analytics"),
    path("heatmap/", views.HeatmapView.as_view(), name="heatmap"),
    path("sla/", views.DeadlineStatusView.as_view(), name="deadline-status"),
    path("export/", views.ComplaintExportView.as_view(), name="export"),
]
