"""
Shared test fixtures.

Builds questionnaires and responses in memory; file-based fixtures live in the
integration tests.
"""

from typing import List, Optional

import pytest

from resource_mapper.core.config import ITEM_CONTEXT_EXTENSION_URL, ExtractionConfig
from resource_mapper.domain.models import (
    Expression,
    Extension,
    Questionnaire,
    QuestionnaireItem,
    QuestionnaireResponse,
    QuestionnaireResponseItem,
)
from resource_mapper.services.resource_mapper import ResourceMapper
from resource_mapper.services.type_catalog import get_type_catalog


def context_extension(resource_type: str, name: str = "resource") -> Extension:
    return Extension(
        url=ITEM_CONTEXT_EXTENSION_URL,
        value_expression=Expression(
            name=name, language="application/x-fhir-query", expression=resource_type
        ),
    )


@pytest.fixture
def catalog():
    """Catalog over the registered resources."""
    return get_type_catalog()


@pytest.fixture
def mapper(catalog):
    """Mapper with default (lenient) extraction config."""
    return ResourceMapper(catalog=catalog, config=ExtractionConfig())


@pytest.fixture
def strict_mapper(catalog):
    """Mapper that rejects questionnaire/response length mismatches."""
    return ResourceMapper(
        catalog=catalog, config=ExtractionConfig(strict_sibling_matching=True)
    )


@pytest.fixture
def make_questionnaire():
    """Factory for a questionnaire extracting the given resource type."""

    def _make(
        items: List[QuestionnaireItem], resource_type: Optional[str] = "Patient"
    ) -> Questionnaire:
        extensions = [context_extension(resource_type)] if resource_type else []
        return Questionnaire(id="test-questionnaire", extension=extensions, item=items)

    return _make


@pytest.fixture
def make_response():
    """Factory for a response with the given top-level items."""

    def _make(items: List[QuestionnaireResponseItem]) -> QuestionnaireResponse:
        return QuestionnaireResponse(
            id="test-response", questionnaire="test-questionnaire", item=items
        )

    return _make


@pytest.fixture
def patient_questionnaire_json():
    """Registration questionnaire in FHIR JSON form."""
    base = "http://hl7.org/fhir/StructureDefinition/Patient#"
    return {
        "resourceType": "Questionnaire",
        "id": "client-registration",
        "status": "active",
        "extension": [
            {
                "url": ITEM_CONTEXT_EXTENSION_URL,
                "valueExpression": {
                    "name": "patient",
                    "language": "application/x-fhir-query",
                    "expression": "Patient",
                },
            }
        ],
        "item": [
            {
                "linkId": "PR",
                "type": "group",
                "text": "Client info",
                "item": [
                    {
                        "linkId": "PR-name",
                        "type": "group",
                        "definition": base + "Patient.name",
                        "item": [
                            {
                                "linkId": "PR-name-given",
                                "type": "string",
                                "definition": base + "Patient.name.given",
                            },
                            {
                                "linkId": "PR-name-family",
                                "type": "string",
                                "definition": base + "Patient.name.family",
                            },
                        ],
                    },
                    {
                        "linkId": "PR-birthdate",
                        "type": "date",
                        "definition": base + "Patient.birthDate",
                    },
                    {
                        "linkId": "PR-gender",
                        "type": "choice",
                        "definition": base + "Patient.gender",
                    },
                    {
                        "linkId": "PR-marital",
                        "type": "choice",
                        "definition": base + "Patient.maritalStatus",
                    },
                    {
                        "linkId": "PR-active",
                        "type": "boolean",
                        "definition": base + "Patient.active",
                    },
                    {
                        "linkId": "PR-notes",
                        "type": "text",
                        "text": "Anything else?",
                    },
                ],
            }
        ],
    }


@pytest.fixture
def patient_response_json():
    """Response to the registration questionnaire."""
    return {
        "resourceType": "QuestionnaireResponse",
        "id": "client-registration-response",
        "questionnaire": "client-registration",
        "status": "completed",
        "item": [
            {
                "linkId": "PR",
                "item": [
                    {
                        "linkId": "PR-name",
                        "item": [
                            {"linkId": "PR-name-given", "answer": [{"valueString": "John"}]},
                            {"linkId": "PR-name-family", "answer": [{"valueString": "Doe"}]},
                        ],
                    },
                    {"linkId": "PR-birthdate", "answer": [{"valueDate": "1990-04-12"}]},
                    {
                        "linkId": "PR-gender",
                        "answer": [
                            {
                                "valueCoding": {
                                    "system": "http://hl7.org/fhir/administrative-gender",
                                    "code": "male",
                                    "display": "Male",
                                }
                            }
                        ],
                    },
                    {
                        "linkId": "PR-marital",
                        "answer": [
                            {
                                "valueCoding": {
                                    "system": "http://terminology.hl7.org/CodeSystem/v3-MaritalStatus",
                                    "code": "M",
                                    "display": "Married",
                                }
                            }
                        ],
                    },
                    {"linkId": "PR-active", "answer": [{"valueBoolean": True}]},
                    {"linkId": "PR-notes", "answer": [{"valueString": "Prefers mornings"}]},
                ],
            }
        ],
    }
