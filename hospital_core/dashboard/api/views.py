# hospital_core/dashboard/api/views.py
from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hospital_core.dashboard.selectors import dashboard_stats


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(dashboard_stats(), status=status.HTTP_200_OK)
