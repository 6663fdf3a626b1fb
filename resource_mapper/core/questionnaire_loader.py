"""Loader for Questionnaire and QuestionnaireResponse documents.

Documents are FHIR JSON, or the same structure written as YAML. Files ending
in .json are read with the json module, anything else with yaml.safe_load.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Union

import structlog
import yaml
from pydantic import ValidationError

from resource_mapper.core.exceptions import LoaderError
from resource_mapper.domain.models.questionnaire import Questionnaire
from resource_mapper.domain.models.response import (
    AnswerValue,
    QuestionnaireResponse,
    QuestionnaireResponseItem,
    QuestionnaireResponseItemAnswer,
)
from resource_mapper.fhir import (
    BooleanType,
    Coding,
    DateTimeType,
    DateType,
    DecimalType,
    IdType,
    IntegerType,
    StringType,
    TimeType,
    UrlType,
)

log = structlog.get_logger(__name__)

# QuestionnaireResponse.item.answer.value[x] key -> answer type
ANSWER_VALUE_TYPES: Dict[str, type] = {
    "valueString": StringType,
    "valueDate": DateType,
    "valueDateTime": DateTimeType,
    "valueTime": TimeType,
    "valueInteger": IntegerType,
    "valueDecimal": DecimalType,
    "valueBoolean": BooleanType,
    "valueUrl": UrlType,
    "valueUri": UrlType,
    "valueCoding": Coding,
    "valueId": IdType,
}


def load_questionnaire(path: Union[str, Path]) -> Questionnaire:
    """Load a Questionnaire from a JSON or YAML file.

    Raises:
        FileNotFoundError: File missing
        LoaderError: Not a valid Questionnaire
    """
    data = _read_document(path)
    questionnaire = parse_questionnaire(data)
    log.info(
        "questionnaire_loaded",
        path=str(path),
        questionnaire_id=questionnaire.id,
        items=len(questionnaire.item),
    )
    return questionnaire


def load_questionnaire_response(path: Union[str, Path]) -> QuestionnaireResponse:
    """Load a QuestionnaireResponse from a JSON or YAML file.

    Raises:
        FileNotFoundError: File missing
        LoaderError: Not a valid QuestionnaireResponse
    """
    data = _read_document(path)
    response = parse_questionnaire_response(data)
    log.info(
        "questionnaire_response_loaded",
        path=str(path),
        response_id=response.id,
        items=len(response.item),
    )
    return response


def parse_questionnaire(data: Dict[str, Any]) -> Questionnaire:
    """Build a Questionnaire from its FHIR JSON structure."""
    _check_resource_type(data, "Questionnaire")
    try:
        return Questionnaire.model_validate(data)
    except ValidationError as e:
        raise LoaderError(f"Invalid Questionnaire: {e}") from e


def parse_questionnaire_response(data: Dict[str, Any]) -> QuestionnaireResponse:
    """Build a QuestionnaireResponse from its FHIR JSON structure.

    Answers are converted from their value[x] key to the matching answer type.
    """
    _check_resource_type(data, "QuestionnaireResponse")
    try:
        return QuestionnaireResponse(
            id=data.get("id"),
            questionnaire=data.get("questionnaire"),
            status=data.get("status"),
            item=[_parse_response_item(item) for item in data.get("item") or []],
        )
    except ValidationError as e:
        raise LoaderError(f"Invalid QuestionnaireResponse: {e}") from e


def _read_document(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    with open(path) as f:
        if path.suffix.lower() == ".json":
            try:
                # Decimal keeps the written precision of valueDecimal answers
                data = json.load(f, parse_float=Decimal)
            except json.JSONDecodeError as e:
                raise LoaderError(f"Cannot parse {path}: {e}") from e
        else:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise LoaderError(f"Cannot parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise LoaderError(f"{path} does not contain a JSON/YAML object")
    return data


def _check_resource_type(data: Dict[str, Any], expected: str) -> None:
    resource_type = data.get("resourceType")
    if resource_type is not None and resource_type != expected:
        raise LoaderError(f"Expected resourceType {expected}, got {resource_type}")


def _parse_response_item(data: Dict[str, Any]) -> QuestionnaireResponseItem:
    if not isinstance(data, dict):
        raise LoaderError(f"Response item must be an object, got {type(data).__name__}")

    return QuestionnaireResponseItem(
        link_id=data.get("linkId", ""),
        text=data.get("text"),
        answer=[
            QuestionnaireResponseItemAnswer(value=_parse_answer_value(answer))
            for answer in data.get("answer") or []
        ],
        item=[_parse_response_item(child) for child in data.get("item") or []],
    )


def _parse_answer_value(answer: Dict[str, Any]) -> AnswerValue:
    """Convert one answer's value[x] entry to its answer type."""
    value_keys = [key for key in answer if key.startswith("value")]
    if len(value_keys) != 1:
        raise LoaderError(
            f"Answer must have exactly one value[x] element, found {value_keys}"
        )

    key = value_keys[0]
    answer_type = ANSWER_VALUE_TYPES.get(key)
    if answer_type is None:
        raise LoaderError(f"Unsupported answer type: {key}")

    try:
        return answer_type.model_validate(answer[key])
    except ValidationError as e:
        raise LoaderError(f"Invalid {key} answer {answer[key]!r}: {e}") from e
