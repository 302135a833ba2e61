from typing import Any, Optional

from strawberry_compose.context import FieldContext, RequestState


def make_field_context(
    *path: Any,
    language: Optional[str] = "en",
    user: Any = None,
    state: Optional[RequestState] = None,
) -> FieldContext:
    if state is None:
        state = RequestState(language=language, user=user)
    return FieldContext(state, tuple(path))


class FakeUser:
    """User stand-in granting a fixed set of permissions."""

    def __init__(self, *perms: str):
        self.perms = set(perms)
        self.is_authenticated = True

    def has_perm(self, perm: str, obj: Any = None) -> bool:
        return perm in self.perms

    def __str__(self):
        return "fake-user"
