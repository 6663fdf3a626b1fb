"""Type catalog for the target model.

Built once from the resource classes: every resource and every complex type
reachable through its fields gets a name entry and one FieldDescriptor per
field. Descriptors carry the field's mutators and coercion rule, so
extraction never looks anything up by method name.

The catalog is read-only after construction and safe to share between
threads.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Callable, Dict, Iterable, Optional, Union
from typing import get_args, get_origin

import structlog
from pydantic.fields import FieldInfo

from resource_mapper.core.exceptions import (
    CatalogError,
    InvalidCodeError,
    NoSuchMutatorError,
    UnknownTypeError,
)
from resource_mapper.fhir import Base, PrimitiveType, Resource
from resource_mapper.services.coercion import CoercionRule, rule_for

log = structlog.get_logger(__name__)

Mutator = Callable[[Any, Any], None]


# =============================================================================
# Type classification helpers
# =============================================================================


def _unwrap_annotated(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        args = get_args(annotation)
        if args:
            return args[0]
    return annotation


def _unwrap_optional(annotation: Any) -> Any:
    annotation = _unwrap_annotated(annotation)
    if get_origin(annotation) is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap_annotated(args[0])
    return annotation


def is_collection_annotation(annotation: Any) -> bool:
    """Whether a field annotation is list-typed (``List[X]``, ``Optional[list[X]]``)."""
    return get_origin(_unwrap_optional(annotation)) is list


def main_type_of(annotation: Any) -> Any:
    """The element type of a field, unwrapping one level of collection.

    ``List[HumanName]`` and ``Optional[HumanName]`` both give ``HumanName``.
    """
    annotation = _unwrap_optional(annotation)
    if get_origin(annotation) is list:
        args = get_args(annotation)
        return _unwrap_optional(args[0]) if args else Any
    return annotation


def is_model_type(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Base)


def is_enum_type(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Enum)


# =============================================================================
# Field descriptors
# =============================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """A settable field of a model type.

    Attributes:
        owner: Model class declaring the field
        name: Element name as used in definition paths (e.g. "birthDate")
        attribute: Python attribute name (e.g. "birth_date")
        main_type: Element type, one level of list unwrapped
        is_collection: Field holds a list of main_type
        coerce: Coercion rule applied to answers before writing
        setter: Plain setter; takes a list for collections. None if read-only
        element_setter: Setter taking a main_type primitive directly. Only
            present on writable single-valued primitive fields
    """

    owner: type
    name: str
    attribute: str
    main_type: type
    is_collection: bool
    coerce: CoercionRule
    setter: Optional[Mutator] = None
    element_setter: Optional[Mutator] = None

    @property
    def is_enum(self) -> bool:
        return is_enum_type(self.main_type)

    @property
    def qualified_name(self) -> str:
        return f"{self.owner.__name__}.{self.name}"


def _type_label(value: Any) -> str:
    return type(value).__name__


def _check_target(owner: type, name: str, target: Any) -> None:
    if not isinstance(target, owner):
        raise NoSuchMutatorError(
            f"{_type_label(target)} has no setter for {owner.__name__}.{name}",
            type_name=_type_label(target),
            field_name=name,
        )


def _make_element_setter(
    owner: type, attribute: str, name: str, main_type: type
) -> Mutator:
    def set_element(target: Base, value: Any) -> None:
        _check_target(owner, name, target)
        if not isinstance(value, main_type):
            raise NoSuchMutatorError(
                f"{owner.__name__}.{name} element setter takes {main_type.__name__}, "
                f"got {_type_label(value)}",
                type_name=owner.__name__,
                field_name=name,
            )
        setattr(target, attribute, value)

    return set_element


def _make_setter(
    owner: type, attribute: str, name: str, main_type: type, is_collection: bool
) -> Mutator:
    if is_collection:

        def set_list(target: Base, value: Any) -> None:
            _check_target(owner, name, target)
            if not isinstance(value, list) or not all(
                isinstance(item, main_type) for item in value
            ):
                raise NoSuchMutatorError(
                    f"{owner.__name__}.{name} setter takes a list of "
                    f"{main_type.__name__}, got {_type_label(value)}",
                    type_name=owner.__name__,
                    field_name=name,
                )
            setattr(target, attribute, list(value))

        return set_list

    def set_value(target: Base, value: Any) -> None:
        _check_target(owner, name, target)
        if value is not None and not isinstance(value, main_type):
            raise NoSuchMutatorError(
                f"{owner.__name__}.{name} setter takes {main_type.__name__}, "
                f"got {_type_label(value)}",
                type_name=owner.__name__,
                field_name=name,
            )
        setattr(target, attribute, value)

    return set_value


def describe_field(owner: type, attribute: str, info: FieldInfo) -> FieldDescriptor:
    """Build the descriptor for one pydantic field.

    Raises:
        CatalogError: If the field's main type is not a class or has no
            coercion rule
    """
    annotation = info.annotation
    main_type = main_type_of(annotation)
    if main_type is Any or not isinstance(main_type, type):
        raise CatalogError(
            f"{owner.__name__}.{attribute}: unsupported annotation {annotation!r}"
        )

    is_collection = is_collection_annotation(annotation)
    name = info.alias or attribute
    coerce = rule_for(main_type)

    if info.frozen:
        return FieldDescriptor(
            owner=owner,
            name=name,
            attribute=attribute,
            main_type=main_type,
            is_collection=is_collection,
            coerce=coerce,
        )

    element_setter = None
    if not is_collection and issubclass(main_type, PrimitiveType):
        element_setter = _make_element_setter(owner, attribute, name, main_type)

    return FieldDescriptor(
        owner=owner,
        name=name,
        attribute=attribute,
        main_type=main_type,
        is_collection=is_collection,
        coerce=coerce,
        setter=_make_setter(owner, attribute, name, main_type, is_collection),
        element_setter=element_setter,
    )


# =============================================================================
# Catalog
# =============================================================================


class TypeCatalog:
    """Name and field registry over the target model.

    Example:
        catalog = TypeCatalog()
        patient = catalog.construct("Patient")
        descriptor = catalog.declared_field(Patient, "birthDate")
    """

    def __init__(self, resources: Optional[Iterable[type]] = None):
        """Build the catalog.

        Args:
            resources: Root model classes. Defaults to every registered
                Resource subclass.

        Raises:
            CatalogError: If two classes share a name or a field cannot be
                described
        """
        if resources is None:
            resources = Resource.get_registered_resources().values()

        self._types: Dict[str, type] = {}
        self._fields: Dict[type, Dict[str, FieldDescriptor]] = {}

        for model in resources:
            self._register(model)

        log.info(
            "type_catalog_built",
            types=len(self._types),
            fields=sum(len(fields) for fields in self._fields.values()),
        )

    @staticmethod
    def type_name(model: type) -> str:
        return getattr(model, "resource_type", None) or model.__name__

    def _add_name(self, model: type) -> None:
        name = self.type_name(model)
        existing = self._types.get(name)
        if existing is not None and existing is not model:
            raise CatalogError(
                f"Type name {name} used by both {existing.__module__}.{existing.__qualname__} "
                f"and {model.__module__}.{model.__qualname__}"
            )
        self._types[name] = model

    def _register(self, model: type) -> None:
        if not is_model_type(model):
            raise CatalogError(f"{model!r} is not a model class")
        if model in self._fields:
            return

        self._add_name(model)
        descriptors: Dict[str, FieldDescriptor] = {}
        # Registered before descending so self-referencing types terminate
        self._fields[model] = descriptors

        if issubclass(model, PrimitiveType):
            return

        for attribute, info in model.model_fields.items():
            descriptor = describe_field(model, attribute, info)
            descriptors[descriptor.name] = descriptor
            if is_model_type(descriptor.main_type):
                self._register(descriptor.main_type)

    def type_for(self, type_name: str) -> type:
        """Return the model class registered under a name.

        Raises:
            UnknownTypeError: If no type has that name
        """
        model = self._types.get(type_name)
        if model is None:
            raise UnknownTypeError(f"Unknown type: {type_name}", type_name=type_name)
        return model

    def instantiate(self, model: Any) -> Base:
        """Create an empty instance of a model class.

        Raises:
            UnknownTypeError: If the class is not a model type (e.g. an enum)
        """
        if not is_model_type(model):
            label = getattr(model, "__name__", repr(model))
            raise UnknownTypeError(
                f"Type {label} cannot be constructed", type_name=label
            )
        return model()

    def construct(self, type_name: str) -> Base:
        """Create an empty instance of the type registered under a name."""
        return self.instantiate(self.type_for(type_name))

    def declared_field(
        self, model: type, field_name: str
    ) -> Optional[FieldDescriptor]:
        """Descriptor of a field by element name, or None if the type lacks it."""
        return self._fields.get(model, {}).get(field_name)

    def from_code(self, enum_type: type, code: Optional[str]) -> Optional[Enum]:
        """Resolve a code to an enum member.

        An empty code resolves to None.

        Raises:
            InvalidCodeError: If the code is not a member of enum_type
        """
        if not code:
            return None
        try:
            return enum_type(code)
        except ValueError as e:
            raise InvalidCodeError(
                f"'{code}' is not a valid {enum_type.__name__} code",
                type_name=enum_type.__name__,
                code=code,
            ) from e


# Module-level cache (the target model doesn't change at runtime)
_default_catalog: Optional[TypeCatalog] = None


def get_type_catalog() -> TypeCatalog:
    """Catalog over every registered resource, built on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = TypeCatalog()
    return _default_catalog
