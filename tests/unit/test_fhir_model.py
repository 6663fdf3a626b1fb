"""Tests for the FHIR target model."""

import json
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from resource_mapper.fhir import (
    AdministrativeGender,
    BooleanType,
    CodeableConcept,
    Coding,
    DateTimeType,
    DateType,
    DecimalType,
    HumanName,
    IntegerType,
    Observation,
    Patient,
    Resource,
    StringType,
    TimeType,
)


class TestPrimitives:
    """Tests for primitive datatypes."""

    def test_validates_bare_value(self):
        """Primitives validate from the bare JSON value."""
        assert DateType.model_validate("1990-04-12").value == date(1990, 4, 12)
        assert TimeType.model_validate("08:30:00").value == time(8, 30)
        assert IntegerType.model_validate(3).value == 3
        assert DecimalType.model_validate("72.5").value == Decimal("72.5")

    def test_rejects_unparseable_value(self):
        """Values that do not parse raise ValidationError."""
        with pytest.raises(ValidationError):
            DateType.model_validate("not a date")

    def test_partial_dates_kept_as_written(self):
        """Year and year-month dates keep their precision."""
        assert DateType.model_validate("1990").value == "1990"
        assert DateType.model_validate("1990-04").value == "1990-04"
        assert str(DateType.model_validate("1990-04")) == "1990-04"

    def test_partial_date_times_kept_as_written(self):
        assert DateTimeType.model_validate("2021").value == "2021"
        assert DateTimeType.model_validate("2021-03-05").value == "2021-03-05"
        assert DateTimeType.model_validate("2021-03-05T10:30:00Z").value == datetime(
            2021, 3, 5, 10, 30, tzinfo=timezone.utc
        )

    def test_rejects_malformed_partial_date(self):
        with pytest.raises(ValidationError):
            DateType.model_validate("1990-4")

    def test_string_form(self):
        """str() gives the FHIR string form of the value."""
        assert str(StringType(value="male")) == "male"
        assert str(BooleanType(value=True)) == "true"
        assert str(DateType(value=date(2001, 2, 3))) == "2001-02-03"
        assert str(StringType()) == ""

    def test_equality_is_by_value(self):
        """Two primitives with the same value compare equal."""
        assert StringType(value="Doe") == StringType(value="Doe")
        assert StringType(value="Doe") != StringType(value="Roe")


class TestComplexTypes:
    """Tests for complex datatypes."""

    def test_coding_from_bare_primitives(self):
        """Coding validates from FHIR JSON with bare primitive values."""
        coding = Coding.model_validate(
            {"system": "http://hl7.org/fhir/administrative-gender", "code": "male"}
        )

        assert coding.code_value == "male"
        assert coding.display_value is None

    def test_codeable_concept_from_coding(self):
        """from_coding keeps the coding and uses its display as text."""
        coding = Coding.model_validate({"code": "M", "display": "Married"})

        concept = CodeableConcept.from_coding(coding)

        assert concept.coding == [coding]
        assert concept.text == StringType(value="Married")

    def test_codeable_concept_without_display_has_no_text(self):
        concept = CodeableConcept.from_coding(Coding.model_validate({"code": "M"}))
        assert concept.text is None

    def test_aliases_accepted(self):
        """Models accept FHIR element names as well as attribute names."""
        patient = Patient.model_validate({"birthDate": "1990-04-12"})
        assert patient.birth_date == DateType(value=date(1990, 4, 12))


class TestResourceRegistry:
    """Tests for resource auto-registration."""

    def test_resources_registered_by_type(self):
        registered = Resource.get_registered_resources()

        assert registered["Patient"] is Patient
        assert registered["Observation"] is Observation

    def test_intermediate_bases_not_registered(self):
        registered = Resource.get_registered_resources()

        assert "Resource" not in registered
        assert "DomainResource" not in registered


class TestSerialization:
    """Tests for FHIR JSON rendering."""

    def test_to_fhir_dict(self):
        """Resources render with resourceType, aliases and flattened primitives."""
        patient = Patient(
            gender=AdministrativeGender.FEMALE,
            birth_date=DateType(value=date(1985, 1, 2)),
            name=[HumanName(family=StringType(value="Roe"), given=[StringType(value="Jane")])],
        )

        assert patient.to_fhir_dict() == {
            "resourceType": "Patient",
            "name": [{"family": "Roe", "given": ["Jane"]}],
            "gender": "female",
            "birthDate": "1985-01-02",
        }

    def test_decimal_rendered_as_number(self):
        """Decimals render as JSON numbers."""
        observation = Observation(value_decimal=DecimalType(value=Decimal("72.5")))

        assert observation.to_fhir_dict() == {
            "resourceType": "Observation",
            "valueDecimal": 72.5,
        }
        assert json.loads(json.dumps(observation.to_fhir_dict()))["valueDecimal"] == 72.5

    def test_integral_decimal_rendered_as_integer(self):
        observation = Observation(value_decimal=DecimalType(value=Decimal("80")))

        assert observation.to_fhir_dict()["valueDecimal"] == 80
        assert isinstance(observation.to_fhir_dict()["valueDecimal"], int)

    def test_decimal_kept_in_python_dump(self):
        assert DecimalType(value=Decimal("72.50")).model_dump() == Decimal("72.50")

    def test_partial_dates_round_trip(self):
        patient = Patient.model_validate({"birthDate": "1990-04"})

        assert patient.to_fhir_dict() == {"resourceType": "Patient", "birthDate": "1990-04"}

    def test_empty_resource(self):
        assert Observation().to_fhir_dict() == {"resourceType": "Observation"}

    def test_round_trip_through_model_validate(self):
        """FHIR JSON produced by to_fhir_dict validates back to an equal model."""
        patient = Patient(
            active=BooleanType(value=True),
            marital_status=CodeableConcept.from_coding(
                Coding.model_validate({"code": "M", "display": "Married"})
            ),
        )

        data = patient.to_fhir_dict()
        data.pop("resourceType")

        assert Patient.model_validate(data) == patient
