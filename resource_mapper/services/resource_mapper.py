"""
Definition-based extraction of FHIR resources from questionnaire responses.

Pipeline:
1. Read the resource type from the questionnaire's item extraction context
2. Create an empty resource of that type
3. Walk questionnaire items and response items in parallel, depth first
4. For each item with a definition, resolve the target field and write the
   first answer (or, for groups, a nested object built from child items)

Lenient: items whose definition is malformed or points at an
unknown element, and questions without answers, are skipped. A missing
extraction context, an unknown type, a rejected value or an invalid code
aborts the whole extraction.

See http://build.fhir.org/ig/HL7/sdc/extraction.html#definition-based-extraction
"""

from typing import List, Optional

import structlog

from resource_mapper.core.config import ExtractionConfig, extraction_config
from resource_mapper.core.exceptions import (
    NoExtractionContextError,
    ResponseMismatchError,
)
from resource_mapper.domain.models.questionnaire import (
    ItemType,
    Questionnaire,
    QuestionnaireItem,
)
from resource_mapper.domain.models.response import (
    QuestionnaireResponse,
    QuestionnaireResponseItem,
)
from resource_mapper.fhir import Base
from resource_mapper.services.field_resolver import FieldResolver
from resource_mapper.services.field_writer import FieldWriter
from resource_mapper.services.type_catalog import TypeCatalog, get_type_catalog

log = structlog.get_logger(__name__)


class ResourceMapper:
    """
    Maps QuestionnaireResponses to FHIR resources.

    Holds no per-call state: one mapper can serve concurrent extractions.
    """

    def __init__(
        self,
        catalog: Optional[TypeCatalog] = None,
        config: Optional[ExtractionConfig] = None,
    ):
        """
        Initialize resource mapper.

        Args:
            catalog: Type catalog of the target model (default: all registered
                resources)
            config: Extraction behaviour (default: extraction_config.yaml)
        """
        self.catalog = catalog or get_type_catalog()
        self.config = config or extraction_config
        self.resolver = FieldResolver(self.catalog)
        self.writer = FieldWriter(self.catalog)

    def extract(
        self,
        questionnaire: Questionnaire,
        questionnaire_response: QuestionnaireResponse,
    ) -> Base:
        """
        Extract a resource from a questionnaire and its response.

        Assumes the response yields a single resource, whose type is the
        expression of the first item extraction context.

        Args:
            questionnaire: Questionnaire with item extraction context
            questionnaire_response: Response to that questionnaire

        Returns:
            Newly created resource populated from the answers

        Raises:
            NoExtractionContextError: Questionnaire has no extraction context
            UnknownTypeError: Context or definition names an unknown type
            NoSuchMutatorError: A resolved field rejects the answer
            InvalidCodeError: An answer code is not in the field's value set
            ResponseMismatchError: Sibling counts differ (strict mode only)
        """
        context = questionnaire.item_context_name_to_expression(
            self.config.item_context_extension_url
        )
        if not context:
            raise NoExtractionContextError(
                f"Questionnaire {questionnaire.id or questionnaire.url or '<anonymous>'} "
                f"has no {self.config.item_context_extension_url} extension"
            )

        type_name = next(iter(context.values()))
        resource = self.catalog.construct(type_name)

        log.info(
            "extraction_started",
            questionnaire_id=questionnaire.id,
            resource_type=type_name,
        )

        self._extract_fields(resource, questionnaire.item, questionnaire_response.item)

        log.info(
            "extraction_completed",
            questionnaire_id=questionnaire.id,
            resource_type=type_name,
        )
        return resource

    def _extract_fields(
        self,
        target: Base,
        items: List[QuestionnaireItem],
        response_items: List[QuestionnaireResponseItem],
    ) -> None:
        """Pair items with response items by position and extract each pair.

        Pairs stop at the end of the shorter list.
        """
        if len(items) != len(response_items):
            link_ids = [item.link_id for item in items]
            if self.config.strict_sibling_matching:
                raise ResponseMismatchError(
                    f"{len(items)} questionnaire items but {len(response_items)} "
                    f"response items (linkIds {link_ids})"
                )
            # TODO: pair by linkId instead of position once responses are
            # guaranteed to carry them
            log.debug(
                "sibling_count_mismatch",
                questionnaire_items=len(items),
                response_items=len(response_items),
                link_ids=link_ids,
            )

        for item, response_item in zip(items, response_items):
            self._extract_field(target, item, response_item)

    def _extract_field(
        self,
        target: Base,
        item: QuestionnaireItem,
        response_item: QuestionnaireResponseItem,
    ) -> None:
        """Extract one item's answer (or nested group) into target."""
        if item.definition is None:
            # Structural item: the mapped fields are further down
            self._extract_fields(target, item.item, response_item.item)
            return

        field_name = item.definition_field_name
        if not field_name:
            self._skip(item, "empty_field_name")
            return

        if item.target_resource_and_element is None:
            self._skip(item, "malformed_definition")
            return

        descriptor = self.resolver.resolve(item.definition)
        if descriptor is None:
            self._skip(item, "unresolved_field")
            return

        if item.type == ItemType.GROUP:
            nested = self.catalog.instantiate(descriptor.main_type)
            self._extract_fields(nested, item.item, response_item.item)
            self.writer.write(target, field_name, descriptor, nested)
            return

        if not response_item.answer:
            self._skip(item, "no_answer")
            return

        # Copied so the output graph shares nothing with the response
        value = response_item.answer[0].value.model_copy(deep=True)

        if descriptor.is_enum:
            self.writer.write_enum(target, field_name, descriptor, value)
        else:
            self.writer.write(target, field_name, descriptor, value)

    @staticmethod
    def _skip(item: QuestionnaireItem, reason: str) -> None:
        log.debug(
            "field_skipped",
            link_id=item.link_id,
            definition=item.definition,
            reason=reason,
        )


def extract(
    questionnaire: Questionnaire,
    questionnaire_response: QuestionnaireResponse,
    catalog: Optional[TypeCatalog] = None,
) -> Base:
    """Extract a resource with a default-configured ResourceMapper."""
    return ResourceMapper(catalog=catalog).extract(questionnaire, questionnaire_response)
