import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pipeline import PipelineMixin

logger = logging.getLogger(__name__)


class HealthCheckAPIView(PipelineMixin, APIView):
    """
    GET /api/health/

    Liveness check for load balancers and the frontend:
    - status: "OK" when the database answers, "DEGRADED" otherwise
    - timestamp: current server time (ISO 8601)
    - environment: "development" when DEBUG is on, else "production"

    Authentication: none
    Permissions: AllowAny
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        database = "ok"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            logger.exception("Health check could not reach the database")
            database = "unavailable"

        data = {
            "status": "OK" if database == "ok" else "DEGRADED",
            "timestamp": timezone.now().isoformat(),
            "environment": "development" if settings.DEBUG else "production",
            "database": database,
        }
        code = status.HTTP_200_OK if database == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(data, status=code)
