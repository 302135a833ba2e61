from __future__ import annotations

from typing import Optional

import strawberry


@strawberry.type(description="A date and time with its timezone.")
class DateTime:
    time: str = strawberry.field(description="RFC 3339 formatted date and time.")
    timezone: str = strawberry.field(description="Name of the timezone.")
    timestamp: int = strawberry.field(description="Unix timestamp.")


@strawberry.type(description="A start and end date and time.")
class DateRange:
    start: Optional[DateTime]
    end: Optional[DateTime]


@strawberry.type(description="The environment the site is running in.")
class Environment:
    name: str
    fg_color: Optional[str] = None
    bg_color: Optional[str] = None
