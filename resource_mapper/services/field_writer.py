"""Writes answer values into resolved fields.

Two paths, chosen by the field's main type:

- enumerations: the answer's code (a Coding's code, otherwise the answer's
  string form) is resolved to an enum member and passed to the plain setter
- everything else: the answer is reshaped by the field's coercion rule, then
  passed to the element setter if the field has one, otherwise to the plain
  setter (wrapped in a one-element list for collection fields)

A resolved field without a usable setter is an error, not a skip.
"""

from typing import Any

import structlog

from resource_mapper.core.exceptions import NoSuchMutatorError
from resource_mapper.fhir import Base, Coding
from resource_mapper.services.type_catalog import FieldDescriptor, TypeCatalog

log = structlog.get_logger(__name__)


class FieldWriter:
    """Applies values to target objects through field descriptors."""

    def __init__(self, catalog: TypeCatalog):
        self.catalog = catalog

    def write(
        self, target: Base, field_name: str, descriptor: FieldDescriptor, value: Any
    ) -> None:
        """Coerce a value to the field's shape and set it on target.

        Raises:
            NoSuchMutatorError: If the field is read-only or no setter accepts
                the coerced value
        """
        descriptor = self._descriptor_for(target, field_name, descriptor)
        shaped = descriptor.coerce(value)

        if descriptor.element_setter is not None:
            descriptor.element_setter(target, shaped)
        elif descriptor.setter is not None:
            descriptor.setter(target, [shaped] if descriptor.is_collection else shaped)
        else:
            raise self._read_only(descriptor, field_name)

        log.debug(
            "field_written",
            field=descriptor.qualified_name,
            value_type=type(shaped).__name__,
        )

    def write_enum(
        self, target: Base, field_name: str, descriptor: FieldDescriptor, value: Any
    ) -> None:
        """Resolve an answer to a member of the field's enumeration and set it.

        Raises:
            InvalidCodeError: If the code is not a member of the enumeration
            NoSuchMutatorError: If the field is read-only
        """
        descriptor = self._descriptor_for(target, field_name, descriptor)
        code = value.code_value if isinstance(value, Coding) else str(value)
        member = self.catalog.from_code(descriptor.main_type, code)

        if descriptor.setter is None:
            raise self._read_only(descriptor, field_name)
        descriptor.setter(target, member)

        log.debug("field_written", field=descriptor.qualified_name, code=code)

    def _descriptor_for(
        self, target: Base, field_name: str, descriptor: FieldDescriptor
    ) -> FieldDescriptor:
        """The descriptor to write through on this particular target.

        A definition may resolve to a field of another type than the object
        being filled (e.g. ``Patient.contact.gender`` outside a contact group).
        The target's own field of that name is used if it has the same shape.
        """
        if isinstance(target, descriptor.owner):
            return descriptor

        own = self.catalog.declared_field(type(target), field_name)
        if (
            own is None
            or own.main_type is not descriptor.main_type
            or own.is_collection != descriptor.is_collection
        ):
            raise NoSuchMutatorError(
                f"{type(target).__name__} has no setter for {field_name} taking "
                f"{descriptor.main_type.__name__}",
                type_name=type(target).__name__,
                field_name=field_name,
            )
        return own

    @staticmethod
    def _read_only(descriptor: FieldDescriptor, field_name: str) -> NoSuchMutatorError:
        return NoSuchMutatorError(
            f"No setter for {descriptor.owner.__name__}.{field_name}",
            type_name=descriptor.owner.__name__,
            field_name=field_name,
        )
