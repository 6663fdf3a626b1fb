"""
Custom exception hierarchy for the resource mapper.

All application exceptions inherit from ResourceMapperError.
"""

from typing import Optional


class ResourceMapperError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ResourceMapperError):
    """Invalid or missing configuration."""

    pass


class CatalogError(ConfigurationError):
    """Target model cannot be turned into a type catalog.

    Raised while the catalog is built, never during extraction.
    """

    pass


# =============================================================================
# Loader Errors
# =============================================================================


class LoaderError(ResourceMapperError):
    """Questionnaire or response document could not be parsed."""

    pass


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(ResourceMapperError):
    """Base for errors that abort an extraction call."""

    pass


class NoExtractionContextError(ExtractionError):
    """Questionnaire carries no item extraction context."""

    pass


class UnknownTypeError(ExtractionError):
    """A type name or class is not constructible from the catalog."""

    def __init__(self, message: str, type_name: Optional[str] = None):
        super().__init__(message)
        self.type_name = type_name


class NoSuchMutatorError(ExtractionError):
    """A resolved field has no setter accepting the value."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.type_name = type_name
        self.field_name = field_name


class InvalidCodeError(ExtractionError):
    """An answer code is not a member of the destination enumeration."""

    def __init__(
        self, message: str, type_name: Optional[str] = None, code: Optional[str] = None
    ):
        super().__init__(message)
        self.type_name = type_name
        self.code = code


class ResponseMismatchError(ExtractionError):
    """Questionnaire and response sibling lists differ in length (strict mode only)."""

    def __init__(self, message: str, definition: Optional[str] = None):
        super().__init__(message)
        self.definition = definition
