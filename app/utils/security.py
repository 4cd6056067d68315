"""
Request throttling for public booking submissions
"""

import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from app.core.config import settings

WINDOW_SECONDS = 60

# client ip -> timestamps of accepted submissions inside the window
booking_attempts: Dict[str, Deque[float]] = defaultdict(deque)
_last_sweep = 0.0

def _sweep_idle_clients(now: float):
    """Forget clients with no submission inside the window"""
    cutoff = now - WINDOW_SECONDS
    idle = [ip for ip, attempts in booking_attempts.items() if not attempts or attempts[-1] <= cutoff]
    for ip in idle:
        del booking_attempts[ip]

def rate_limit_check(client_ip: str, limit: Optional[int] = None, now: Optional[float] = None) -> bool:
    """Sliding-window limit on booking submissions per client IP"""
    global _last_sweep
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE
    if now is None:
        now = time.monotonic()

    if now - _last_sweep >= WINDOW_SECONDS:
        _sweep_idle_clients(now)
        _last_sweep = now

    attempts = booking_attempts[client_ip]
    while attempts and attempts[0] <= now - WINDOW_SECONDS:
        attempts.popleft()

    if len(attempts) >= limit:
        return False

    attempts.append(now)
    return True

def get_client_ip(request) -> str:
    """Client IP, preferring proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
