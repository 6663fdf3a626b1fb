"""QuestionnaireResponse (response tree) models.

A response mirrors its questionnaire item for item. Answer values are target
model primitives or codings, so a value can be written into a resource
without conversion.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

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

AnswerValue = Union[
    StringType,
    DateType,
    DateTimeType,
    TimeType,
    IntegerType,
    DecimalType,
    BooleanType,
    UrlType,
    Coding,
    IdType,
]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class QuestionnaireResponseItemAnswer(_FrozenModel):
    value: AnswerValue


class QuestionnaireResponseItem(_FrozenModel):
    """Answers to one questionnaire item, plus answers to its child items."""

    link_id: str = Field(default="", alias="linkId")
    text: Optional[str] = None
    answer: List[QuestionnaireResponseItemAnswer] = Field(default_factory=list)
    item: List["QuestionnaireResponseItem"] = Field(default_factory=list)


class QuestionnaireResponse(_FrozenModel):
    """Response tree root."""

    id: Optional[str] = None
    questionnaire: Optional[str] = None
    status: Optional[str] = None
    item: List[QuestionnaireResponseItem] = Field(default_factory=list)
