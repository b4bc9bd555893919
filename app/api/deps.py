from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional
import logging

import redis

from ..core.config import Settings
from ..core.database import get_redis
from ..core.errors import ForbiddenError, RateLimitExceededError, UnauthenticatedError
from ..core.security import (
    security, verify_token, identity_from_payload, Identity, UserRole
)

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Extract and verify the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    token_payload = verify_token(credentials.credentials, settings)
    if token_payload is None:
        raise ForbiddenError("Invalid or expired token")

    identity = identity_from_payload(token_payload)
    if identity is None:
        raise ForbiddenError("Invalid or expired token")

    return identity


# Role-based access control dependencies
def require_role(expected: UserRole):
    """Create a dependency that admits only callers holding ``expected``."""
    async def role_checker(
        identity: Identity = Depends(get_current_identity)
    ) -> Identity:
        if identity.role is not expected:
            raise ForbiddenError()
        return identity

    return role_checker


# Specific role dependencies
async def get_admin(
    identity: Identity = Depends(require_role(UserRole.ADMIN))
) -> Identity:
    """Require admin role."""
    return identity


async def get_patient(
    identity: Identity = Depends(require_role(UserRole.PATIENT))
) -> Identity:
    """Require patient role."""
    return identity


# Rate limiting dependencies
def rate_limit(scope: str, limit_setting: str):
    """Fixed-window request counter per client IP, stored in Redis."""
    def rate_limit_check(
        request: Request,
        settings: Settings = Depends(get_settings),
        redis_client=Depends(get_redis),
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return

        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{scope}:{client_ip}"
        limit = getattr(settings, limit_setting)

        try:
            current_requests = redis_client.incr(key)
            if current_requests == 1:
                redis_client.expire(key, settings.RATE_LIMIT_WINDOW_SECONDS)
        except redis.RedisError as e:
            # Counters are unavailable; serve the request unlimited
            logger.warning(f"Rate limit '{scope}' skipped, Redis unavailable: {str(e)}")
            return

        if current_requests > limit:
            logger.warning(f"Rate limit '{scope}' exceeded for {client_ip}")
            if scope == "login":
                raise RateLimitExceededError("Too many login attempts, please try again later")
            raise RateLimitExceededError()

    return rate_limit_check


general_rate_limit = rate_limit("general", "RATE_LIMIT_GENERAL")
login_rate_limit = rate_limit("login", "RATE_LIMIT_LOGIN")
