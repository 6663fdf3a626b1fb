"""Resources available as extraction roots."""

from typing import ClassVar, List, Optional

from pydantic import Field

from resource_mapper.fhir.base import BackboneElement, DomainResource
from resource_mapper.fhir.datatypes import (
    Address,
    CodeableConcept,
    ContactPoint,
    HumanName,
    Identifier,
    Period,
)
from resource_mapper.fhir.enums import AdministrativeGender, ObservationStatus
from resource_mapper.fhir.primitives import (
    BooleanType,
    DateTimeType,
    DateType,
    DecimalType,
    IdType,
    IntegerType,
    StringType,
    TimeType,
    UriType,
)


class PatientContact(BackboneElement):
    """A contact party (guardian, partner, friend) for the patient."""

    relationship: List[CodeableConcept] = Field(default_factory=list)
    name: Optional[HumanName] = None
    telecom: List[ContactPoint] = Field(default_factory=list)
    address: Optional[Address] = None
    gender: Optional[AdministrativeGender] = None
    period: Optional[Period] = None


class Patient(DomainResource):
    resource_type: ClassVar[str] = "Patient"

    id: Optional[IdType] = None
    implicit_rules: Optional[UriType] = Field(
        default=None, alias="implicitRules", frozen=True
    )
    identifier: List[Identifier] = Field(default_factory=list)
    active: Optional[BooleanType] = None
    name: List[HumanName] = Field(default_factory=list)
    telecom: List[ContactPoint] = Field(default_factory=list)
    gender: Optional[AdministrativeGender] = None
    birth_date: Optional[DateType] = Field(default=None, alias="birthDate")
    deceased_date_time: Optional[DateTimeType] = Field(
        default=None, alias="deceasedDateTime"
    )
    address: List[Address] = Field(default_factory=list)
    marital_status: Optional[CodeableConcept] = Field(
        default=None, alias="maritalStatus"
    )
    multiple_birth_integer: Optional[IntegerType] = Field(
        default=None, alias="multipleBirthInteger"
    )
    contact: List[PatientContact] = Field(default_factory=list)


class RelatedPerson(DomainResource):
    resource_type: ClassVar[str] = "RelatedPerson"

    id: Optional[IdType] = None
    identifier: List[Identifier] = Field(default_factory=list)
    active: Optional[BooleanType] = None
    relationship: List[CodeableConcept] = Field(default_factory=list)
    name: List[HumanName] = Field(default_factory=list)
    telecom: List[ContactPoint] = Field(default_factory=list)
    gender: Optional[AdministrativeGender] = None
    birth_date: Optional[DateType] = Field(default=None, alias="birthDate")
    address: List[Address] = Field(default_factory=list)
    period: Optional[Period] = None


class Observation(DomainResource):
    resource_type: ClassVar[str] = "Observation"

    id: Optional[IdType] = None
    identifier: List[Identifier] = Field(default_factory=list)
    status: Optional[ObservationStatus] = None
    category: List[CodeableConcept] = Field(default_factory=list)
    code: Optional[CodeableConcept] = None
    effective_date_time: Optional[DateTimeType] = Field(
        default=None, alias="effectiveDateTime"
    )
    value_string: Optional[StringType] = Field(default=None, alias="valueString")
    value_boolean: Optional[BooleanType] = Field(default=None, alias="valueBoolean")
    value_integer: Optional[IntegerType] = Field(default=None, alias="valueInteger")
    value_time: Optional[TimeType] = Field(default=None, alias="valueTime")
    value_date_time: Optional[DateTimeType] = Field(
        default=None, alias="valueDateTime"
    )
    value_decimal: Optional[DecimalType] = Field(default=None, alias="valueDecimal")
    value_codeable_concept: Optional[CodeableConcept] = Field(
        default=None, alias="valueCodeableConcept"
    )
    interpretation: List[CodeableConcept] = Field(default_factory=list)
    note: List[StringType] = Field(default_factory=list)
