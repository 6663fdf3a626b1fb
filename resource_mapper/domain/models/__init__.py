"""Domain models package."""

from .questionnaire import (
    Expression,
    Extension,
    ItemType,
    Questionnaire,
    QuestionnaireItem,
    parse_definition_path,
)
from .response import (
    AnswerValue,
    QuestionnaireResponse,
    QuestionnaireResponseItem,
    QuestionnaireResponseItemAnswer,
)

__all__ = [
    "Expression",
    "Extension",
    "ItemType",
    "Questionnaire",
    "QuestionnaireItem",
    "parse_definition_path",
    "AnswerValue",
    "QuestionnaireResponse",
    "QuestionnaireResponseItem",
    "QuestionnaireResponseItemAnswer",
]
