from __future__ import annotations

import datetime
import zoneinfo
from typing import TYPE_CHECKING, Any, Optional, Union

from strawberry_compose.exceptions import ProducerError
from strawberry_compose.settings import strawberry_compose_settings
from strawberry_compose.types import DateRange, DateTime

from .base import DataProducer, InputSlot, ProducerDefinition

if TYPE_CHECKING:
    from strawberry_compose.context import FieldContext

DateValue = Union[str, int, float, datetime.date, datetime.datetime]

#: Date only values don't carry a time, they are anchored at noon UTC so every
#: timezone renders the same calendar day.
DATE_ONLY_TIME = datetime.time(12, 0)

DATE_ONLY = "date"
DATE_AND_TIME = "datetime"
ALL_DAY = "allday"


def _site_timezone() -> datetime.tzinfo:
    name = strawberry_compose_settings()["DEFAULT_TIMEZONE"]
    if name == "UTC":
        return datetime.timezone.utc
    return zoneinfo.ZoneInfo(name)


def _timezone_name(value: datetime.datetime) -> str:
    tz = value.tzinfo
    key = getattr(tz, "key", None)
    if key:
        return key
    return value.tzname() or "UTC"


def to_datetime(value: DateValue, datetime_type: str = DATE_AND_TIME) -> datetime.datetime:
    """Normalize a stored date value to an aware datetime.

    Timestamps and aware datetimes are rendered in the site timezone, stored
    strings and naive datetimes are UTC. All day values are always UTC.
    """
    tz = datetime.timezone.utc if datetime_type == ALL_DAY else _site_timezone()

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.datetime.fromtimestamp(value, tz=tz)

    if isinstance(value, str):
        try:
            if datetime_type == DATE_ONLY:
                value = datetime.date.fromisoformat(value[:10])
            else:
                value = datetime.datetime.fromisoformat(value)
        except ValueError:
            raise ProducerError(f"Invalid date value: {value!r}") from None

    if isinstance(value, datetime.datetime):
        if datetime_type == DATE_ONLY:
            value = value.date()
        elif value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        else:
            return value.astimezone(tz)

    if isinstance(value, datetime.date):
        return datetime.datetime.combine(
            value,
            DATE_ONLY_TIME,
            tzinfo=datetime.timezone.utc,
        )

    raise ProducerError(f"Unsupported date value: {value!r}")


def format_datetime(value: datetime.datetime) -> DateTime:
    return DateTime(
        time=value.isoformat(timespec="seconds"),
        timezone=_timezone_name(value),
        timestamp=int(value.timestamp()),
    )


class DateTimeProducer(DataProducer):
    definition = ProducerDefinition(
        id="date_time",
        produces="DateTime",
        name="Date and time",
        consumes=(
            InputSlot("value"),
            InputSlot(
                "datetime_type",
                type="string",
                required=False,
                default=DATE_AND_TIME,
            ),
        ),
    )

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> DateTime:
        return format_datetime(to_datetime(inputs["value"], inputs["datetime_type"]))


class DateRangeProducer(DataProducer):
    definition = ProducerDefinition(
        id="date_range",
        produces="DateRange",
        name="Date range",
        consumes=(
            InputSlot("value"),
            InputSlot("end_value", required=False),
            InputSlot(
                "datetime_type",
                type="string",
                required=False,
                default=DATE_AND_TIME,
            ),
        ),
    )

    def resolve(self, *, field_context: FieldContext, **inputs: Any) -> DateRange:
        datetime_type = inputs["datetime_type"]
        end: Optional[DateTime] = None
        if inputs["end_value"] is not None:
            end = format_datetime(to_datetime(inputs["end_value"], datetime_type))

        return DateRange(
            start=format_datetime(to_datetime(inputs["value"], datetime_type)),
            end=end,
        )
