"""FastAPI dependencies for the asset routes."""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Depends, Request

from assetvault.container import AssetServices
from assetvault.core.errors import InvalidRequestError, RateLimitExceededError
from assetvault.core.rate_limiter import RateLimitCategory


def get_services(request: Request) -> AssetServices:
    """Return the service container attached to the application."""
    return request.app.state.services


def get_owner_id(
    request: Request,
    services: AssetServices = Depends(get_services),
) -> str | None:
    """Read the caller's owner id from the owner header.

    The id is an opaque, unauthenticated string. A repeated header is
    rejected; a missing header means an anonymous requester.
    """
    values = request.headers.getlist(services.settings.OWNER_HEADER)
    if len(values) > 1:
        raise InvalidRequestError(
            f"Multiple {services.settings.OWNER_HEADER} headers are not allowed",
            code="MULTIPLE_OWNER_HEADERS",
        )
    return values[0] if values else None


def rate_limit_key(request: Request, services: AssetServices) -> str:
    """Owner id when present, otherwise the client address."""
    owner_id = request.headers.get(services.settings.OWNER_HEADER)
    if owner_id:
        return f"owner:{owner_id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


def rate_limit(category: RateLimitCategory) -> Callable[..., Awaitable[None]]:
    """Build a dependency enforcing the limiter for ``category``."""

    async def dependency(
        request: Request,
        services: AssetServices = Depends(get_services),
    ) -> None:
        if not services.rate_limits.check(category, rate_limit_key(request, services)):
            raise RateLimitExceededError()

    return dependency
