"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services`` and only serialises the result.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import SystemConstantsSerializer
from .services import SystemConstantsService


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Return complaint statuses, priorities, roles and the configured
    complaint types so the frontend can build dropdowns, filters and
    labels without hardcoding values.

    **Authentication**: Not required (``AllowAny``).
    These constants are public configuration data.

    **Response** (``200 OK``):
        Serialised by ``SystemConstantsSerializer``.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="System constants",
        description=(
            "Return complaint statuses, priorities, roles and configured "
            "complaint types with their SLA hours."
        ),
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        """
        Handle GET request — delegate to ``SystemConstantsService``.
        """
        data = SystemConstantsService.get_constants()
        serializer = SystemConstantsSerializer(data)
        return Response(serializer.data, status=status.HTTP_200_OK)
