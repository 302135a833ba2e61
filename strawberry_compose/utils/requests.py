from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from django.http.request import HttpRequest


def get_request(context: Any) -> Optional[HttpRequest]:
    """Return the request from an execution context.

    description:
    Return the request object for both WSGI and ASGI implementations.
    It tends to move based on the environment.
    """
    if context is None:
        return None

    try:
        return context.request
    except AttributeError:
        pass

    try:
        return context.get("request")
    except AttributeError:
        return None


def get_request_headers(request: Optional[HttpRequest]) -> dict[str, str]:
    if request is None:
        return {}

    return {k.lower(): v for k, v in request.headers.items()}
