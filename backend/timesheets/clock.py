"""Injectable time sources."""
from django.utils import timezone


class Clock:
    def now(self):
        raise NotImplementedError

    def today(self):
        return timezone.localdate(self.now())


class SystemClock(Clock):
    def now(self):
        return timezone.now()


class FixedClock(Clock):
    """Always returns the same instant. Used by tests and backfills."""

    def __init__(self, instant):
        self.instant = instant

    def now(self):
        return self.instant
