"""FHIR R4-shaped target model used as the extraction destination."""

from resource_mapper.fhir.base import (
    BackboneElement,
    Base,
    DomainResource,
    Element,
    PrimitiveType,
    Resource,
)
from resource_mapper.fhir.datatypes import (
    Address,
    CodeableConcept,
    Coding,
    ContactPoint,
    HumanName,
    Identifier,
    Period,
)
from resource_mapper.fhir.enums import (
    AddressType,
    AddressUse,
    AdministrativeGender,
    ContactPointSystem,
    ContactPointUse,
    IdentifierUse,
    NameUse,
    ObservationStatus,
)
from resource_mapper.fhir.primitives import (
    BooleanType,
    CodeType,
    DateTimeType,
    DateType,
    DecimalType,
    IdType,
    IntegerType,
    StringType,
    TimeType,
    UriType,
    UrlType,
)
from resource_mapper.fhir.resources import (
    Observation,
    Patient,
    PatientContact,
    RelatedPerson,
)

__all__ = [
    "BackboneElement",
    "Base",
    "DomainResource",
    "Element",
    "PrimitiveType",
    "Resource",
    "Address",
    "CodeableConcept",
    "Coding",
    "ContactPoint",
    "HumanName",
    "Identifier",
    "Period",
    "AddressType",
    "AddressUse",
    "AdministrativeGender",
    "ContactPointSystem",
    "ContactPointUse",
    "IdentifierUse",
    "NameUse",
    "ObservationStatus",
    "BooleanType",
    "CodeType",
    "DateTimeType",
    "DateType",
    "DecimalType",
    "IdType",
    "IntegerType",
    "StringType",
    "TimeType",
    "UriType",
    "UrlType",
    "Observation",
    "Patient",
    "PatientContact",
    "RelatedPerson",
]
