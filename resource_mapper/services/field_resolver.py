"""Resolves an item definition to the field it targets.

``http://hl7.org/fhir/StructureDefinition/Patient#Patient.contact.name`` is
resolved by starting at the Patient type and descending through ``contact``
(main type PatientContact) to ``name``. The descriptor of the last field is
returned; the resource type only anchors the descent.
"""

from typing import Optional

import structlog

from resource_mapper.domain.models.questionnaire import parse_definition_path
from resource_mapper.services.type_catalog import FieldDescriptor, TypeCatalog

log = structlog.get_logger(__name__)


class FieldResolver:
    """Looks up definition paths in a type catalog."""

    def __init__(self, catalog: TypeCatalog):
        self.catalog = catalog

    def resolve(self, definition: str) -> Optional[FieldDescriptor]:
        """Return the descriptor of the field a definition points at.

        Args:
            definition: Definition URI or bare path (``Patient.birthDate``)

        Returns:
            FieldDescriptor, or None if the path is malformed or any element
            along it does not exist

        Raises:
            UnknownTypeError: If the path's resource type is not in the catalog
        """
        path = parse_definition_path(definition)
        if path is None:
            return None

        current_type = self.catalog.type_for(path[0])
        descriptor: Optional[FieldDescriptor] = None

        for field_name in path[1:]:
            descriptor = self.catalog.declared_field(current_type, field_name)
            if descriptor is None:
                log.debug(
                    "field_not_declared",
                    definition=definition,
                    type_name=current_type.__name__,
                    field_name=field_name,
                )
                return None
            current_type = descriptor.main_type

        return descriptor
