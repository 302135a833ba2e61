"""Per request state shared by every data producer of one GraphQL operation."""

from __future__ import annotations

import contextvars
import dataclasses
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Set, Tuple, Union

from django.conf import settings
from django.utils import translation
from strawberry.django.context import StrawberryDjangoContext

from .utils.requests import get_request, get_request_headers

if TYPE_CHECKING:
    from django.http.request import HttpRequest
    from graphql.pyutils import Path

    from .utils.typing import Headers, UserType

FieldPath = Tuple[Union[str, int], ...]

#: Varies by the negotiated interface language.
LANGUAGE_INTERFACE = "languages:language_interface"
#: Varies by the user making the request.
USER = "user"
#: Varies by the permissions of the user making the request.
USER_PERMISSIONS = "user.permissions"


def static_language(langcode: str) -> str:
    return f"static:language:{langcode}"


class CacheContexts:
    """Accumulates the cache contexts a response varies by.

    The set only grows during one request, and the merged result does not depend
    on the order in which tokens were appended.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens: Set[str] = set(tokens)

    def append(self, *tokens: str) -> None:
        self._tokens.update(tokens)

    def update(self, other: CacheContexts) -> None:
        self._tokens.update(other._tokens)

    def merge(self) -> frozenset[str]:
        return frozenset(self._tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"<CacheContexts {sorted(self._tokens)!r}>"


@dataclasses.dataclass
class RequestState:
    language: Optional[str] = None
    user: Optional[UserType] = None
    headers: Headers = dataclasses.field(default_factory=dict)
    cache_contexts: CacheContexts = dataclasses.field(default_factory=CacheContexts)
    field_values: Dict[FieldPath, Dict[str, Any]] = dataclasses.field(
        default_factory=dict,
    )

    @classmethod
    def from_request(cls, request: Optional[HttpRequest]) -> RequestState:
        if request is None:
            return cls(language=translation.get_language() or settings.LANGUAGE_CODE)

        language = (
            getattr(request, "LANGUAGE_CODE", None)
            or translation.get_language()
            or settings.LANGUAGE_CODE
        )
        return cls(
            language=language,
            user=getattr(request, "user", None),
            headers=get_request_headers(request),
        )

    def context_values(self) -> Dict[str, Any]:
        return {"language": self.language, "user": self.user}


class FieldContext:
    """Context of one field being resolved.

    Values set here are visible to the field itself and to every field nested
    below it. Cache contexts go straight to the request accumulator.
    """

    def __init__(self, state: RequestState, path: FieldPath = ()):
        self.state = state
        self.path = path

    @classmethod
    def for_path(cls, state: RequestState, path: Optional[Path]) -> FieldContext:
        return cls(state, tuple(path.as_list()) if path is not None else ())

    def add_cache_contexts(self, tokens: Iterable[str]) -> None:
        self.state.cache_contexts.append(*tokens)

    def add_cacheable_dependency(self, dependency: Any) -> None:
        tokens = getattr(dependency, "cache_contexts", None)
        if tokens:
            self.add_cache_contexts(tokens)

    def set_context_value(self, name: str, value: Any) -> None:
        self.state.field_values.setdefault(self.path, {})[name] = value

    def get_context_value(self, name: str, default: Any = None) -> Any:
        values = self.state.field_values
        for i in range(len(self.path), -1, -1):
            scope = values.get(self.path[:i])
            if scope is not None and name in scope:
                return scope[name]

        value = self.state.context_values().get(name)
        return default if value is None else value

    def __repr__(self) -> str:
        return f"<FieldContext path={self.path!r}>"


@dataclasses.dataclass
class ComposeContext(StrawberryDjangoContext):
    state: RequestState = dataclasses.field(default_factory=RequestState)


current_state: contextvars.ContextVar[Optional[RequestState]] = (
    contextvars.ContextVar("compose-request-state", default=None)
)


def get_request_state(context: Any) -> RequestState:
    """Return the state attached to an execution context, creating one if needed."""
    state = getattr(context, "state", None)
    if isinstance(state, RequestState):
        return state

    if isinstance(context, dict):
        state = context.get("state")
        if isinstance(state, RequestState):
            return state

    return RequestState.from_request(get_request(context))


def ensure_request_state(execution_context: Any) -> RequestState:
    """Return the state of an operation, binding it on first use."""
    state = getattr(execution_context, "compose_state", None)
    if state is None:
        state = get_request_state(execution_context.context)
        execution_context.compose_state = state
    return state
