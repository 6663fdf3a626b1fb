"""Complex datatypes."""

from typing import List, Optional

from pydantic import Field

from resource_mapper.fhir.base import Element
from resource_mapper.fhir.enums import (
    AddressType,
    AddressUse,
    ContactPointSystem,
    ContactPointUse,
    IdentifierUse,
    NameUse,
)
from resource_mapper.fhir.primitives import (
    BooleanType,
    CodeType,
    DateTimeType,
    StringType,
    UriType,
)


class Coding(Element):
    """A code defined by a terminology system."""

    system: Optional[UriType] = None
    version: Optional[StringType] = None
    code: Optional[CodeType] = None
    display: Optional[StringType] = None
    user_selected: Optional[BooleanType] = Field(default=None, alias="userSelected")

    @property
    def code_value(self) -> Optional[str]:
        return self.code.value if self.code is not None else None

    @property
    def display_value(self) -> Optional[str]:
        return self.display.value if self.display is not None else None


class CodeableConcept(Element):
    """Concept given by one or more codings plus free text."""

    coding: List[Coding] = Field(default_factory=list)
    text: Optional[StringType] = None

    @classmethod
    def from_coding(cls, coding: Coding) -> "CodeableConcept":
        text = coding.display_value
        return cls(
            coding=[coding],
            text=StringType(value=text) if text is not None else None,
        )


class Period(Element):
    start: Optional[DateTimeType] = None
    end: Optional[DateTimeType] = None


class Identifier(Element):
    use: Optional[IdentifierUse] = None
    type: Optional[CodeableConcept] = None
    system: Optional[UriType] = None
    value: Optional[StringType] = None
    period: Optional[Period] = None


class HumanName(Element):
    use: Optional[NameUse] = None
    text: Optional[StringType] = None
    family: Optional[StringType] = None
    given: List[StringType] = Field(default_factory=list)
    prefix: List[StringType] = Field(default_factory=list)
    suffix: List[StringType] = Field(default_factory=list)
    period: Optional[Period] = None


class ContactPoint(Element):
    system: Optional[ContactPointSystem] = None
    value: Optional[StringType] = None
    use: Optional[ContactPointUse] = None
    period: Optional[Period] = None


class Address(Element):
    use: Optional[AddressUse] = None
    type: Optional[AddressType] = None
    text: Optional[StringType] = None
    line: List[StringType] = Field(default_factory=list)
    city: Optional[StringType] = None
    district: Optional[StringType] = None
    state: Optional[StringType] = None
    postal_code: Optional[StringType] = Field(default=None, alias="postalCode")
    country: Optional[StringType] = None
    period: Optional[Period] = None
