"""Observability middleware for context enrichment."""

import typing as t
import uuid

import structlog
from django.conf import settings
from django.http import HttpRequest, HttpResponse

# URL kwargs worth having on every log line of a request
ROUTE_CONTEXT_KWARGS = ("category_id", "submission_id")


class StructlogContextMiddleware:
    """Binds request metadata to the structlog context for the request lifecycle.

    Every log event emitted while handling a request carries its request id, and once the
    route is resolved also the award category or submission it targets.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Bind the request context, then clear it once the response is ready."""
        if not settings.ENABLE_OBSERVABILITY:
            return self.get_response(request)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
            ip_address=self._get_client_ip(request),
        )
        # JWT users are only resolved inside the API, so this catches session (admin) users
        if hasattr(request, "user") and request.user.is_authenticated:
            structlog.contextvars.bind_contextvars(user_id=str(request.user.id))

        try:
            response = self.get_response(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response["X-Request-ID"] = request_id
        return response

    def process_view(
        self,
        request: HttpRequest,
        view_func: t.Callable[..., t.Any],
        view_args: tuple[t.Any, ...],
        view_kwargs: dict[str, t.Any],
    ) -> None:
        """Bind the category or submission addressed by the resolved route."""
        if not settings.ENABLE_OBSERVABILITY:
            return None
        route_context = {key: str(view_kwargs[key]) for key in ROUTE_CONTEXT_KWARGS if key in view_kwargs}
        if route_context:
            structlog.contextvars.bind_contextvars(**route_context)
        return None

    def _get_client_ip(self, request: HttpRequest) -> str:
        """Client IP, preferring the first X-Forwarded-For hop."""
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            return str(x_forwarded_for.split(",")[0].strip())
        return str(request.META.get("REMOTE_ADDR", "unknown"))
