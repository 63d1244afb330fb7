from django.test import override_settings
from django.urls import reverse
from rest_framework import status

from common.tests.support import SecuredAPITestCase

SMALL_LIMITS = {
    "general": {"window": 60, "max_requests": 3},
    "auth": {"window": 60, "max_requests": 2, "skip_successful": True},
}


@override_settings(RATE_LIMITS=SMALL_LIMITS)
class RequestPipelineTests(SecuredAPITestCase):
    """Stage order: rate limit, sanitize, authenticate, authorize, then the handler."""

    def setUp(self):
        super().setUp()
        self.url = reverse("order-list")

    def test_missing_token_is_401(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res["WWW-Authenticate"], "Bearer")

    def test_rate_limit_runs_before_authentication(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer garbage")
        codes = [self.client.get(self.url).status_code for _ in range(4)]
        self.assertEqual(codes, [401, 401, 401, 429])

    def test_throttled_response_has_retry_after(self):
        self.auth()
        for _ in range(3):
            self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)
        self.clock.advance(15)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(res["Retry-After"], "45")

    def test_budget_returns_after_window(self):
        self.auth()
        for _ in range(3):
            self.client.get(self.url)
        self.clock.advance(61)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_200_OK)

    def test_clients_are_limited_per_address(self):
        self.auth()
        for _ in range(3):
            self.client.get(self.url, REMOTE_ADDR="10.0.0.1")
        blocked = self.client.get(self.url, REMOTE_ADDR="10.0.0.1")
        other = self.client.get(self.url, REMOTE_ADDR="10.0.0.2")
        self.assertEqual(blocked.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(other.status_code, status.HTTP_200_OK)

    def test_forged_forwarded_for_does_not_reset_budget(self):
        self.auth()
        for n in range(3):
            self.client.get(self.url, REMOTE_ADDR="10.0.0.1", HTTP_X_FORWARDED_FOR=f"6.6.6.{n}")
        blocked = self.client.get(self.url, REMOTE_ADDR="10.0.0.1", HTTP_X_FORWARDED_FOR="6.6.6.9")
        self.assertEqual(blocked.status_code, status.HTTP_429_TOO_MANY_REQUESTS)

    def test_suspicious_input_is_logged_with_client_address(self):
        with self.assertLogs("common.sanitization", level="WARNING") as logs:
            self.client.get(
                self.url,
                {"status": "<script>x</script>"},
                REMOTE_ADDR="10.0.0.7",
                HTTP_X_FORWARDED_FOR="6.6.6.6",
            )
        self.assertIn("from IP 10.0.0.7 ", logs.output[0])

    def test_suspicious_input_is_logged_before_authentication(self):
        with self.assertLogs("common.sanitization", level="WARNING") as logs:
            res = self.client.get(self.url, {"status": "<script>x</script>"})
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("query.status", logs.output[0])

    def test_query_string_is_sanitized_before_the_handler(self):
        self.auth()
        res = self.client.get(self.url, {"status": "pending<script>x</script>"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
