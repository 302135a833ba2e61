from __future__ import annotations

import contextvars
import functools
import inspect
from typing import TYPE_CHECKING, Any, TypeVar

from asgiref.sync import sync_to_async
from django.db import models
from django.db.models.manager import BaseManager
from strawberry.utils.inspect import in_async_context
from typing_extensions import ParamSpec

if TYPE_CHECKING:
    from collections.abc import Callable

_R = TypeVar("_R")
_P = ParamSpec("_P")

resolving_async: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "resolving-async",
    default=False,
)


def fetch_results(value: Any) -> Any:
    """Evaluate managers and querysets so the result is safe to iterate anywhere."""
    if isinstance(value, BaseManager):
        value = value.all()

    if isinstance(value, models.QuerySet):
        if value._result_cache is None:  # type: ignore
            value._fetch_all()  # type: ignore

    return value


def django_resolver(resolver: Callable[_P, _R]) -> Callable[_P, _R]:
    """Django resolver for handling both sync and async.

    This decorator is used to make sure that resolver is always called from
    sync context.  sync_to_async helper in used if function is called from
    async context. This is useful especially with Django ORM, which does not
    support async. Coroutines are not wrapped.
    """
    if inspect.iscoroutinefunction(resolver) or inspect.isasyncgenfunction(resolver):
        return resolver

    def sync_resolver(*args, **kwargs):
        return fetch_results(resolver(*args, **kwargs))

    @sync_to_async
    def async_resolver(*args, **kwargs):
        token = resolving_async.set(True)
        try:
            return sync_resolver(*args, **kwargs)
        finally:
            resolving_async.reset(token)

    @functools.wraps(resolver)
    def inner_wrapper(*args, **kwargs):
        f = (
            async_resolver
            if in_async_context() and not resolving_async.get()
            else sync_resolver
        )
        return f(*args, **kwargs)

    return inner_wrapper
