"""Base classes for the FHIR R4-shaped target model.

Element names used in definition paths (``birthDate``, ``maritalStatus``) are
carried as pydantic aliases on snake_case attributes.

Core classes:
- Base: root of every model class
- Element / BackboneElement: complex datatypes and nested resource parts
- PrimitiveType: single-value wrapper (StringType, DateType, ...)
- Resource / DomainResource: extractable roots, auto-registered by resource_type
"""

from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, model_serializer, model_validator


class Base(BaseModel):
    """Root of the target model hierarchy."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_fhir_dict(self) -> Dict[str, Any]:
        """Render as FHIR JSON with empty elements omitted."""
        body = self.model_dump(mode="json", by_alias=True, exclude_defaults=True)
        return _prune_empty(body)


class Element(Base):
    """Base for datatypes."""


class BackboneElement(Element):
    """Element nested inside a resource definition (e.g. Patient.contact)."""


class PrimitiveType(Element):
    """Single-value element.

    Validates from a bare value as found in FHIR JSON (``"1990-04-12"``) and
    serializes back to it. ``str()`` gives the string form of the value, so a
    primitive answer can stand in for a code.
    """

    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_value(cls, data: Any) -> Any:
        if isinstance(data, (dict, PrimitiveType)):
            return data
        return {"value": data}

    @model_serializer(mode="plain")
    def serialize_value(self) -> Any:
        return self.value

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


class Resource(Base):
    """Extractable root type.

    Subclasses defining ``resource_type`` are registered automatically and
    become constructible by name.

    Subclass pattern:
        class Patient(DomainResource):
            resource_type: ClassVar[str] = "Patient"
    """

    resource_type: ClassVar[str]

    _registry: ClassVar[Dict[str, type["Resource"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Only register if resource_type is defined (skip intermediate bases)
        if "resource_type" in cls.__dict__:
            Resource._registry[cls.resource_type] = cls

    @classmethod
    def get_registered_resources(cls) -> Dict[str, type["Resource"]]:
        """Return resource_type -> class for every registered resource."""
        return dict(Resource._registry)

    def to_fhir_dict(self) -> Dict[str, Any]:
        return {"resourceType": self.resource_type, **super().to_fhir_dict()}


class DomainResource(Resource):
    """Resource with narrative and extensions (not modelled here)."""


def _prune_empty(data: Any) -> Any:
    """Drop None values and empty containers left by nested defaults."""
    if isinstance(data, dict):
        pruned = {key: _prune_empty(value) for key, value in data.items()}
        return {key: value for key, value in pruned.items() if value not in (None, {}, [])}
    if isinstance(data, list):
        pruned_items = [_prune_empty(item) for item in data]
        return [item for item in pruned_items if item not in (None, {}, [])]
    return data
