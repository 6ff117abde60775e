from django.test import override_settings

from airtable_utils.airtable.tests.base import TestCase
from airtable_utils.airtable.throttling import RateLimiter, get_rate_limiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class TestRateLimiter(TestCase):
    def setUp(self):
        super().setUp()
        self.clock = FakeClock()
        self.rate_limiter = RateLimiter(5, clock=self.clock, sleep=self.clock.sleep)

    def test_allows_requests_within_limit(self):
        for _ in range(5):
            self.assertEqual(self.rate_limiter.acquire(), 0)
        self.assertEqual(self.clock.now, 0)

    def test_waits_when_window_is_full(self):
        for _ in range(5):
            self.rate_limiter.acquire()

        waited = self.rate_limiter.acquire()

        self.assertEqual(waited, 1.0)
        self.assertEqual(self.clock.now, 1.0)

    def test_window_slides(self):
        self.rate_limiter.acquire()
        self.clock.now = 0.5
        for _ in range(4):
            self.rate_limiter.acquire()

        waited = self.rate_limiter.acquire()

        # the first call leaves the window at t=1.0
        self.assertEqual(waited, 0.5)

    def test_reset(self):
        for _ in range(5):
            self.rate_limiter.acquire()
        self.rate_limiter.reset()

        self.assertEqual(self.rate_limiter.acquire(), 0)

    def test_rejects_non_positive_rate(self):
        self.assertRaises(ValueError, RateLimiter, 0)


class TestGetRateLimiter(TestCase):
    def test_one_limiter_per_base(self):
        self.assertIs(
            get_rate_limiter("appABCDEFGHIJKLMN"), get_rate_limiter("appABCDEFGHIJKLMN")
        )
        self.assertIsNot(
            get_rate_limiter("appABCDEFGHIJKLMN"), get_rate_limiter("appNMLKJIHGFEDCBA")
        )

    @override_settings(AIRTABLE_REQUESTS_PER_SECOND=2)
    def test_uses_configured_rate(self):
        self.assertEqual(get_rate_limiter("appABCDEFGHIJKLMN").requests_per_second, 2)
