"""Primitive datatypes.

Each wraps one python value. Pydantic parses ISO strings for the temporal
types, so ``DateType(value="1990-04-12")`` holds a ``datetime.date``.

FHIR dates may also be given to year or month precision (``"1990"``,
``"1990-04"``), and dateTimes additionally as a bare date. Such partial
values are kept as the original string so they render back unchanged.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any, Optional, Union

from pydantic import SerializationInfo, StringConstraints, model_serializer

from resource_mapper.fhir.base import PrimitiveType

PartialDate = Annotated[str, StringConstraints(pattern=r"^\d{4}(-\d{2})?$")]
PartialDateTime = Annotated[
    str, StringConstraints(pattern=r"^\d{4}(-\d{2}(-\d{2})?)?$")
]


def _iso(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else value.isoformat()


class StringType(PrimitiveType):
    value: Optional[str] = None


class CodeType(PrimitiveType):
    value: Optional[str] = None


class IdType(PrimitiveType):
    value: Optional[str] = None


class UriType(PrimitiveType):
    value: Optional[str] = None


class UrlType(PrimitiveType):
    value: Optional[str] = None


class BooleanType(PrimitiveType):
    value: Optional[bool] = None

    def __str__(self) -> str:
        if self.value is None:
            return ""
        return "true" if self.value else "false"


class IntegerType(PrimitiveType):
    value: Optional[int] = None


class DecimalType(PrimitiveType):
    value: Optional[Decimal] = None

    @model_serializer(mode="plain")
    def serialize_value(self, info: SerializationInfo) -> Any:
        # FHIR JSON carries decimals as numbers
        if self.value is None or not info.mode_is_json():
            return self.value
        if self.value.as_tuple().exponent >= 0:
            return int(self.value)
        return float(self.value)


class DateType(PrimitiveType):
    value: Optional[Union[PartialDate, date]] = None

    def __str__(self) -> str:
        return _iso(self.value)


class DateTimeType(PrimitiveType):
    value: Optional[Union[PartialDateTime, datetime]] = None

    def __str__(self) -> str:
        return _iso(self.value)


class TimeType(PrimitiveType):
    value: Optional[time] = None

    def __str__(self) -> str:
        return _iso(self.value)
