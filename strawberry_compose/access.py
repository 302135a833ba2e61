"""Per request access gate for GraphQL endpoints.

GraphQL queries can become arbitrarily expensive, so endpoints are gated before
anything gets executed. A request is admitted when either:

- the user has the configured permission, or
- the request carries the configured shared secret in the token header. This
  lets a trusted server side proxy (e.g. a frontend rendering server) query the
  endpoint on behalf of anonymous visitors without logging them in.

The gate is about load, not confidentiality: producers still apply their own
access checks to what they return.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Optional

from django.utils.crypto import constant_time_compare

from .settings import strawberry_compose_settings

if TYPE_CHECKING:
    from .utils.typing import Headers, UserType

logger = logging.getLogger(__name__)


class AccessResult(enum.Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"

    def __bool__(self) -> bool:
        return self is AccessResult.ALLOWED


class AccessGate:
    DEFAULT_ERROR_MESSAGE = "You are not allowed to execute GraphQL requests."

    def __init__(
        self,
        permission: Optional[str],
        *,
        token: Optional[str] = None,
        header: str = "x-graphql-token",
        message: Optional[str] = None,
    ):
        self.permission = permission
        self.token = token
        self.header = header.lower()
        self.message = message if message is not None else self.DEFAULT_ERROR_MESSAGE

    @classmethod
    def from_settings(cls) -> AccessGate:
        settings = strawberry_compose_settings()
        return cls(
            settings["ACCESS_PERMISSION"],
            token=settings["ACCESS_TOKEN"],
            header=settings["ACCESS_TOKEN_HEADER"],
        )

    def has_permission(self, user: Optional[UserType]) -> bool:
        if not self.permission or user is None:
            return False
        return user.has_perm(self.permission)

    def has_valid_token(self, headers: Headers) -> bool:
        if not self.token:
            return False

        value = next(
            (v for k, v in headers.items() if k.lower() == self.header),
            None,
        )
        if not value:
            return False

        return constant_time_compare(self.token, value)

    def check(self, user: Optional[UserType], headers: Headers) -> AccessResult:
        if self.has_permission(user):
            return AccessResult.ALLOWED

        if self.has_valid_token(headers):
            return AccessResult.ALLOWED

        logger.info("GraphQL request denied for %s", user or "unknown user")
        return AccessResult.FORBIDDEN
