"""Definition-based extraction of FHIR resources from questionnaire responses."""

from resource_mapper.services.resource_mapper import ResourceMapper, extract

__version__ = "0.1.0"

__all__ = ["ResourceMapper", "extract", "__version__"]
