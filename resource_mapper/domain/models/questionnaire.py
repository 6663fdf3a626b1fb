"""Questionnaire (schema tree) models.

A Questionnaire is a tree of items. Items may carry a ``definition``: a
StructureDefinition URI whose fragment is a dotted element path such as
``Patient.name.given``. The Questionnaire itself names the resource type to
extract through the item extraction context extension.

Core Models:
    - ItemType: Kind of question or grouping
    - Expression / Extension: Extraction context metadata
    - QuestionnaireItem: One node of the schema tree
    - Questionnaire: Schema tree root

Instances are frozen; extraction only reads them.
"""

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from resource_mapper.core.config import ITEM_CONTEXT_EXTENSION_URL

DEFINITION_PATH_PATTERN = re.compile(r"[A-Za-z]+(\.[A-Za-z]+)+")


class ItemType(str, Enum):
    """Questionnaire item type codes.

    Unrecognised codes map to OTHER, so such items load and are extracted
    like any other non-group item.
    """

    GROUP = "group"
    DISPLAY = "display"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    INTEGER = "integer"
    DATE = "date"
    DATETIME = "dateTime"
    TIME = "time"
    STRING = "string"
    TEXT = "text"
    URL = "url"
    CHOICE = "choice"
    OPEN_CHOICE = "open-choice"
    ATTACHMENT = "attachment"
    REFERENCE = "reference"
    QUANTITY = "quantity"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):
        # Codes from later FHIR versions or local extensions
        return cls.OTHER


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Expression(_FrozenModel):
    """A named expression; for extraction context it is the resource type name."""

    name: Optional[str] = None
    language: Optional[str] = None
    expression: Optional[str] = None


class Extension(_FrozenModel):
    url: str
    value_expression: Optional[Expression] = Field(default=None, alias="valueExpression")


class QuestionnaireItem(_FrozenModel):
    """One question or group in the schema tree."""

    link_id: str = Field(default="", alias="linkId")
    text: Optional[str] = None
    type: ItemType = ItemType.STRING
    definition: Optional[str] = None
    required: bool = False
    repeats: bool = False
    item: List["QuestionnaireItem"] = Field(default_factory=list)

    @property
    def definition_field_name(self) -> Optional[str]:
        """Last dotted segment of the definition.

        ``http://hl7.org/fhir/StructureDefinition/Patient#Patient.birthDate``
        gives ``birthDate``. A definition ending in ``.`` gives ``""``.
        """
        if self.definition is None:
            return None
        return self.definition.rpartition(".")[2]

    @property
    def target_resource_and_element(self) -> Optional[List[str]]:
        """Resource type followed by the element names leading to the field.

        ``http://hl7.org/fhir/StructureDefinition/Patient#Patient.name`` gives
        ``["Patient", "name"]``. Returns None when the definition is absent or
        its path is not of the form ``Type.element[.element...]``.
        """
        if self.definition is None:
            return None
        return parse_definition_path(self.definition)


class Questionnaire(_FrozenModel):
    """Schema tree root."""

    id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    extension: List[Extension] = Field(default_factory=list)
    item: List[QuestionnaireItem] = Field(default_factory=list)

    def item_context_name_to_expression(
        self, extension_url: str = ITEM_CONTEXT_EXTENSION_URL
    ) -> Dict[str, str]:
        """Map expression names to expressions of the item extraction context.

        Insertion order follows the extension order, so the first value is the
        first declared context.
        """
        context: Dict[str, str] = {}
        for extension in self.extension:
            if extension.url != extension_url or extension.value_expression is None:
                continue
            expression = extension.value_expression
            if expression.expression is None:
                continue
            context[expression.name or ""] = expression.expression
        return context


def parse_definition_path(definition: str) -> Optional[List[str]]:
    """Split a definition into its resource type and element chain.

    Everything up to and including ``#`` is dropped when present. The rest must
    match ``Type.element[.element...]`` (letters only), otherwise None.
    """
    _, separator, fragment = definition.partition("#")
    path = fragment if separator else definition
    if not DEFINITION_PATH_PATTERN.fullmatch(path):
        return None
    return path.split(".")
