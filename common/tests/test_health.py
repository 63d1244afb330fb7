from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from common.tests.support import SecuredAPITestCase


class HealthCheckAPITests(SecuredAPITestCase):
    """
    Tests for GET /api/health/

    - No authentication required.
    - Reports status, timestamp and environment.
    - Answers 503 with status DEGRADED when the database is unreachable.
    """

    def setUp(self):
        super().setUp()
        self.url = reverse("health")

    def test_public_access_ok(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "OK")
        self.assertEqual(res.data["database"], "ok")
        self.assertIn("timestamp", res.data)
        self.assertEqual(res.data["environment"], "production")

    def test_invalid_token_is_ignored(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)

    def test_database_failure_reports_degraded(self):
        with mock.patch("common.api.views.connection") as conn:
            conn.cursor.side_effect = DatabaseError("down")
            with self.assertLogs("common.api.views", level="ERROR"):
                res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(res.data["status"], "DEGRADED")
        self.assertEqual(res.data["database"], "unavailable")

    def test_security_headers_present(self):
        res = self.client.get(self.url)
        self.assertIn("default-src 'self'", res["Content-Security-Policy"])
        self.assertIn("frame-ancestors 'none'", res["Content-Security-Policy"])
        self.assertEqual(res["X-Content-Type-Options"], "nosniff")
        self.assertEqual(res["X-Frame-Options"], "DENY")
        self.assertEqual(res["Cross-Origin-Resource-Policy"], "same-origin")
        self.assertIn("camera=()", res["Permissions-Policy"])
