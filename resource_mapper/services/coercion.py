"""Answer coercion rules keyed by destination type.

A single question can map onto a composite element. The rule for the
destination's main type reshapes the answer before it is written:

- CodeableConcept: a Coding becomes a CodeableConcept holding that coding,
  with the coding's display as text
- IdType: a StringType becomes an IdType with the same value
- other primitives: unchanged
- other complex types: unchanged (their values are built from group items)

Rules are looked up once per field when the type catalog is built.
"""

from enum import Enum
from typing import Any, Callable, Dict

from resource_mapper.core.exceptions import CatalogError
from resource_mapper.fhir import (
    BooleanType,
    CodeableConcept,
    CodeType,
    Coding,
    DateTimeType,
    DateType,
    DecimalType,
    Element,
    IdType,
    IntegerType,
    PrimitiveType,
    StringType,
    TimeType,
    UriType,
    UrlType,
)

CoercionRule = Callable[[Any], Any]


def passthrough(value: Any) -> Any:
    return value


def coding_to_codeable_concept(value: Any) -> Any:
    if isinstance(value, Coding):
        return CodeableConcept.from_coding(value)
    return value


def string_to_id(value: Any) -> Any:
    if isinstance(value, StringType):
        return IdType(value=value.value)
    return value


COERCION_RULES: Dict[type, CoercionRule] = {
    CodeableConcept: coding_to_codeable_concept,
    IdType: string_to_id,
    StringType: passthrough,
    CodeType: passthrough,
    UriType: passthrough,
    UrlType: passthrough,
    BooleanType: passthrough,
    IntegerType: passthrough,
    DecimalType: passthrough,
    DateType: passthrough,
    DateTimeType: passthrough,
    TimeType: passthrough,
}


def rule_for(main_type: type) -> CoercionRule:
    """Return the coercion rule for a destination main type.

    Raises:
        CatalogError: If the type is a primitive without a rule, or is neither
            a model type nor an enumeration
    """
    rule = COERCION_RULES.get(main_type)
    if rule is not None:
        return rule
    if issubclass(main_type, Enum):
        return passthrough
    if issubclass(main_type, Element) and not issubclass(main_type, PrimitiveType):
        return passthrough
    raise CatalogError(f"No coercion rule for destination type {main_type.__name__}")
