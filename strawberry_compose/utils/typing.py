from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Union

if TYPE_CHECKING:
    from django.contrib.auth.base_user import AbstractBaseUser
    from django.contrib.auth.models import AnonymousUser
    from typing_extensions import TypeAlias

UserType: TypeAlias = Union["AbstractBaseUser", "AnonymousUser"]
Headers: TypeAlias = Mapping[str, str]
