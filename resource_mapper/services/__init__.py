# noqa
from resource_mapper.services.resource_mapper import ResourceMapper, extract
from resource_mapper.services.type_catalog import (
    FieldDescriptor,
    TypeCatalog,
    get_type_catalog,
)

__all__ = [
    "ResourceMapper",
    "extract",
    "FieldDescriptor",
    "TypeCatalog",
    "get_type_catalog",
]
