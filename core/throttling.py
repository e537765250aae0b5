"""Abuse mitigation for the Campus CMS API.

Two layers guard sensitive public endpoints:

- ``DdosGuardThrottle`` classifies a client IP as abusive when it sustains
  more than ``threshold`` requests per second for ``sustain_seconds`` without
  a calm second in between, then blocks it with an escalating penalty.
- ``FixedWindowRateThrottle`` subclasses cap absolute volume per IP per scope
  (3 registrations a minute, 20 uploads per 15 minutes).

Views list the guard first; ``CampusBaseAPIView.check_throttles`` stops at the
first throttle that rejects.
"""

import logging
import math
import re
import threading
import time
from collections import deque
from dataclasses import dataclass, field

from django.conf import settings
from django.core.cache import cache as default_cache
from rest_framework.settings import api_settings
from rest_framework.throttling import BaseThrottle, SimpleRateThrottle

from core.exceptions import RateLimitError
from core.utils import get_client_ip

security_logger = logging.getLogger("campus.security")

DDOS_BYPASS_HEADER = "X-Test-Bypass-DDoS"
RATE_LIMIT_BYPASS_HEADER = "X-Test-Bypass-RL"


def bypass_requested(request, header: str) -> bool:
    """True when a test-bypass header is set and we are not in production."""
    if getattr(settings, "IS_PRODUCTION", True):
        return False
    return request.headers.get(header, "").strip().lower() == "true"


# =============================================================================
# DdosGuard
# =============================================================================


@dataclass
class TrafficWindow:
    """Requests seen from one client during a single one-second bucket."""

    start: int
    count: int = 0


@dataclass
class BlockEvent:
    at: float
    duration: float


@dataclass
class ClientTrafficRecord:
    """In-memory traffic state for one client IP."""

    windows: deque
    blocked_until: float | None = None
    first_aggressive_at: float | None = None
    strikes: int = 0
    block_history: list[BlockEvent] = field(default_factory=list)


@dataclass(frozen=True)
class DdosVerdict:
    allowed: bool
    retry_after: float = 0.0
    newly_blocked: bool = False
    block_duration: float = 0.0
    strikes: int = 0


class DdosGuard:
    """
    Per-IP sliding-window traffic classifier with a hard block state.

    A second is aggressive when its bucket holds more than ``threshold``
    requests. A second's verdict is settled when the next bucket opens: a
    calm previous bucket, or a gap of more than one second, ends the streak.
    A streak lasting ``sustain_seconds`` blocks the client for
    ``block_seconds * min(1 + strikes * penalty_step, max_penalty)``.

    State is process-local. All mutation happens under one lock.
    """

    def __init__(
        self,
        threshold: int = 10,
        sustain_seconds: float = 30,
        block_seconds: float = 15 * 60,
        penalty_step: float = 0.5,
        max_penalty: float = 3,
        max_windows: int = 40,
        retention_seconds: float = 60,
        sweep_interval: float = 60,
        clock=time.time,
    ):
        self.threshold = threshold
        self.sustain_seconds = sustain_seconds
        self.block_seconds = block_seconds
        self.penalty_step = penalty_step
        self.max_penalty = max_penalty
        self.max_windows = max_windows
        self.retention_seconds = retention_seconds
        self.sweep_interval = sweep_interval
        self.clock = clock

        self._records: dict[str, ClientTrafficRecord] = {}
        self._lock = threading.Lock()
        self._last_sweep: float | None = None

    @classmethod
    def from_settings(cls) -> "DdosGuard":
        """Build a guard from ``settings.CAMPUS_DDOS_GUARD``."""
        return cls(**getattr(settings, "CAMPUS_DDOS_GUARD", {}))

    def block_duration_for(self, strikes: int) -> float:
        """Block length for a client that has been blocked ``strikes`` times before."""
        multiplier = min(1 + strikes * self.penalty_step, self.max_penalty)
        return self.block_seconds * multiplier

    def record_for(self, ip: str) -> ClientTrafficRecord | None:
        return self._records.get(ip)

    def __len__(self) -> int:
        return len(self._records)

    def check(self, ip: str, now: float | None = None) -> DdosVerdict:
        """Count one request from ``ip`` and classify it."""
        if now is None:
            now = self.clock()

        with self._lock:
            if self._last_sweep is None:
                self._last_sweep = now
            elif now - self._last_sweep >= self.sweep_interval:
                self._sweep(now)

            record = self._records.get(ip)
            if record is None:
                record = ClientTrafficRecord(windows=deque(maxlen=self.max_windows))
                self._records[ip] = record

            if record.blocked_until is not None and now >= record.blocked_until:
                record.blocked_until = None

            window = self._count(record, now)

            if record.blocked_until is not None:
                return DdosVerdict(
                    allowed=False,
                    retry_after=record.blocked_until - now,
                    strikes=record.strikes,
                )

            if window.count > self.threshold:
                if record.first_aggressive_at is None:
                    record.first_aggressive_at = float(window.start)
                elif now - record.first_aggressive_at >= self.sustain_seconds:
                    return self._block(ip, record, now)

            return DdosVerdict(allowed=True, strikes=record.strikes)

    def _count(self, record: ClientTrafficRecord, now: float) -> TrafficWindow:
        bucket = math.floor(now)
        windows = record.windows

        if windows and windows[-1].start >= bucket:
            windows[-1].count += 1
            return windows[-1]

        if record.first_aggressive_at is not None:
            previous = windows[-1] if windows else None
            if (
                previous is None
                or previous.count <= self.threshold
                or bucket - previous.start > 1
            ):
                record.first_aggressive_at = None

        window = TrafficWindow(start=bucket, count=1)
        windows.append(window)
        return window

    def _block(self, ip: str, record: ClientTrafficRecord, now: float) -> DdosVerdict:
        duration = self.block_duration_for(record.strikes)
        record.blocked_until = now + duration
        record.strikes += 1
        record.block_history.append(BlockEvent(at=now, duration=duration))
        record.first_aggressive_at = None

        security_logger.warning(
            "DdosGuard blocked %s for %ds (strike %d)", ip, duration, record.strikes
        )
        return DdosVerdict(
            allowed=False,
            retry_after=duration,
            newly_blocked=True,
            block_duration=duration,
            strikes=record.strikes,
        )

    def sweep(self, now: float | None = None) -> int:
        """Evict idle records. Returns the number of records removed."""
        if now is None:
            now = self.clock()
        with self._lock:
            return self._sweep(now)

    def _sweep(self, now: float) -> int:
        cutoff = now - self.retention_seconds
        removed = 0

        for ip, record in list(self._records.items()):
            while record.windows and record.windows[0].start < cutoff:
                record.windows.popleft()
            if not record.windows:
                record.first_aggressive_at = None
            if record.blocked_until is not None and now >= record.blocked_until:
                record.blocked_until = None
            if not record.windows and record.blocked_until is None and record.strikes == 0:
                del self._records[ip]
                removed += 1

        self._last_sweep = now
        if removed:
            security_logger.debug("DdosGuard sweep evicted %d idle client(s)", removed)
        return removed

    def reset(self) -> None:
        """Forget every client."""
        with self._lock:
            self._records.clear()
            self._last_sweep = None


_guard: DdosGuard | None = None
_guard_lock = threading.Lock()


def get_ddos_guard() -> DdosGuard:
    """Return the process-wide DdosGuard, creating it on first use."""
    global _guard
    if _guard is None:
        with _guard_lock:
            if _guard is None:
                _guard = DdosGuard.from_settings()
    return _guard


class DdosGuardThrottle(BaseThrottle):
    """
    Throttle backed by the process-wide DdosGuard.

    Rate: blocks after >10 req/s sustained for 30s
    Penalty: 15 min, growing by half per prior strike up to 45 min

    Applied to: /api/students/register/
    Purpose: Cut off sustained floods against public forms
    """

    message = "Your IP has been temporarily blocked due to unusual activity"
    verdict: DdosVerdict | None = None

    def allow_request(self, request, view) -> bool:
        if bypass_requested(request, DDOS_BYPASS_HEADER):
            return True
        self.ip = get_client_ip(request)
        self.verdict = get_ddos_guard().check(self.ip)
        return self.verdict.allowed

    def wait(self) -> float | None:
        return self.verdict.retry_after if self.verdict else None

    def rejection(self) -> RateLimitError:
        verdict = self.verdict
        retry_after = max(1, math.ceil(verdict.retry_after))

        if verdict.newly_blocked:
            data = {
                "blockMs": int(verdict.block_duration * 1000),
                "strikes": verdict.strikes,
            }
        else:
            security_logger.info("DdosGuard rejected %s, %ds remaining", self.ip, retry_after)
            data = {
                "remainingMs": int(verdict.retry_after * 1000),
                "remainingMin": math.ceil(verdict.retry_after / 60),
            }
        return RateLimitError(self.message, data=data, retry_after=retry_after)


# =============================================================================
# Fixed-window rate limits
# =============================================================================

_RATE_PERIOD = re.compile(r"^(\d*)\s*([smhd])[a-z]*$")
_PERIOD_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class FixedWindowRateThrottle(SimpleRateThrottle):
    """
    Fixed-window counter keyed by scope and normalized client IP.

    The window opens on a client's first request and resets once it has
    elapsed. The window start and the counter live in Django's cache and
    change only through ``add`` and ``incr``, so pointing ``CACHES`` at a
    shared backend shares the limit across processes. Rates accept a
    multiplier on the period, e.g. ``"20/15m"``.
    """

    cache = default_cache
    cache_format = "campus_throttle_%(scope)s_%(ident)s"
    message = "Too many requests, please try again later"

    def get_rate(self):
        return api_settings.DEFAULT_THROTTLE_RATES.get(self.scope)

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        match = _RATE_PERIOD.match(period.strip().lower())
        if match is None:
            raise ValueError(f"Invalid throttle rate: {rate!r}")
        multiplier = int(match.group(1) or 1)
        return (int(num), multiplier * _PERIOD_SECONDS[match.group(2)])

    def get_cache_key(self, request, view):
        return self.cache_format % {"scope": self.scope, "ident": get_client_ip(request)}

    def allow_request(self, request, view) -> bool:
        if self.rate is None:
            return True
        if bypass_requested(request, RATE_LIMIT_BYPASS_HEADER):
            return True

        self.key = self.get_cache_key(request, view)
        self.now = self.timer()

        started_at = self._window_start()
        self.reset_at = started_at + self.duration
        ttl = max(1, math.ceil(self.reset_at - self.now))

        counter_key = f"{self.key}:{started_at!r}"
        self.cache.add(counter_key, 0, ttl)
        try:
            count = self.cache.incr(counter_key)
        except ValueError:
            # Evicted between add and incr
            self.cache.add(counter_key, 1, ttl)
            count = 1
        return count <= self.num_requests

    def _window_start(self) -> float:
        """Start of the client's current window, opening a new one if needed."""
        anchor_key = f"{self.key}:start"
        started_at = self.cache.get(anchor_key)
        if started_at is not None and self.now < started_at + self.duration:
            return started_at
        if started_at is not None:
            self.cache.delete(anchor_key)
        if self.cache.add(anchor_key, self.now, self.duration):
            return self.now
        # Another request opened the window first
        return self.cache.get(anchor_key, self.now)

    def wait(self) -> int:
        return max(1, math.ceil(self.reset_at - self.now))

    def rejection(self) -> RateLimitError:
        remaining = self.wait()
        security_logger.info("Rate limit %s exceeded by key %s", self.scope, self.key)
        return RateLimitError(
            self.message, data={"remainingSec": remaining}, retry_after=remaining
        )


class StudentRegistrationThrottle(FixedWindowRateThrottle):
    """
    Throttle for public student registration submissions (IP-based).

    Rate: 3 requests per minute (default)
    Scope: 'student_registration'

    Applied to: /api/students/register/
    Purpose: Stop form spam from a single address
    """

    scope = "student_registration"
    message = "Too many registration attempts, please try again later"


class ImageUploadThrottle(FixedWindowRateThrottle):
    """
    Throttle for image uploads (IP-based).

    Rate: 20 requests per 15 minutes (default)
    Scope: 'image_upload'

    Applied to: /api/images/upload/, /api/images/upload-temp/
    Purpose: Bound image processing work and disk usage
    """

    scope = "image_upload"
    message = "Too many uploads. Please try again later."


class LoginRateThrottle(FixedWindowRateThrottle):
    """
    Throttle for login attempts (IP-based).

    Rate: 10 requests per minute (default)
    Scope: 'login'

    Applied to: /api/users/auth/login/
    Purpose: Slow down password guessing
    """

    scope = "login"
    message = "Too many login attempts, please try again later"
