"""
Admin token, webhook secret and rate limiting helpers
"""

import secrets
import time
from collections import defaultdict

from fastapi import Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from wedding_rsvp.core.config import settings
from wedding_rsvp.utils.responses import unauthorized_error

# Simple in-memory rate limiter: client ip -> request timestamps
rate_limiter = defaultdict(list)

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        unauthorized_error("Invalid admin token")
    return credentials.credentials

def verify_webhook_secret(x_webhook_secret: str | None = Header(default=None)):
    """Reject webhook calls without the shared secret; none configured means none accepted"""
    expected = settings.WEBHOOK_SECRET
    if not expected or not x_webhook_secret or not secrets.compare_digest(x_webhook_secret, expected):
        unauthorized_error()
    return x_webhook_secret

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Drop clients with no request inside the window
    stale = [ip for ip, times in rate_limiter.items() if not times or times[-1] <= minute_ago]
    for ip in stale:
        del rate_limiter[ip]

    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
