"""
Application settings management.

Settings are loaded from environment variables with .env file support.
Extraction behaviour is loaded from a YAML file.
All configuration is validated using Pydantic.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resource_mapper.core.exceptions import ConfigurationError

EXTRACTION_CONFIG_FILE = "extraction_config.yaml"

ITEM_CONTEXT_EXTENSION_URL = (
    "http://hl7.org/fhir/uv/sdc/StructureDefinition/sdc-questionnaire-itemContext"
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # ==========================================================================
    # Paths
    # ==========================================================================

    config_dir: Path = Field(
        default=Path("config"),
        description="Directory containing YAML configuration files",
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    log_to_file: bool = Field(
        default=False, description="Write a per-run log file in addition to the console"
    )
    log_sessions_to_keep: int = Field(
        default=5, ge=1, le=100, description="Number of per-run log files to retain"
    )
    debug: bool = Field(default=False, description="Enable debug mode")


# ============================================================================
# Extraction Configuration (from YAML)
# ============================================================================


class ExtractionConfig(BaseModel):
    """
    Extraction behaviour loaded from extraction_config.yaml.

    The defaults reproduce lenient definition-based extraction: only the
    extraction context extension URL identifies the root resource, and
    questionnaire/response sibling lists are paired up to the shorter one.
    """

    item_context_extension_url: str = Field(
        default=ITEM_CONTEXT_EXTENSION_URL,
        description="Extension URL carrying the item extraction context",
    )
    strict_sibling_matching: bool = Field(
        default=False,
        description="Raise on questionnaire/response sibling count mismatch "
        "instead of truncating to the shorter list",
    )

    @field_validator("item_context_extension_url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("item_context_extension_url must not be blank")
        return v.strip()


def load_extraction_config(config_path: Optional[Path] = None) -> ExtractionConfig:
    """
    Load extraction configuration from YAML file.

    Args:
        config_path: Path to extraction_config.yaml. If None, looks in
            settings.config_dir, then in the project config/ directory.

    Returns:
        ExtractionConfig with validated settings (defaults if no file is found
        on the default lookup)

    Raises:
        ConfigurationError: If an explicitly given file is missing, or the
            file cannot be parsed or validated
    """
    if config_path is None:
        candidates = [
            Path(settings.config_dir) / EXTRACTION_CONFIG_FILE,
            Path(__file__).resolve().parent.parent.parent
            / "config"
            / EXTRACTION_CONFIG_FILE,
        ]
        config_path = next((path for path in candidates if path.exists()), None)
        if config_path is None:
            return ExtractionConfig()
    elif not Path(config_path).exists():
        raise ConfigurationError(f"Extraction config not found: {config_path}")

    config_path = Path(config_path).resolve()

    with open(str(config_path)) as f:
        try:
            config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

    if not config_data:
        return ExtractionConfig()
    if not isinstance(config_data, dict):
        raise ConfigurationError(f"{config_path} does not contain a YAML mapping")

    try:
        return ExtractionConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid extraction config {config_path}: {e}") from e


# Global settings instance
settings = Settings()

# Global extraction config instance
extraction_config = load_extraction_config()
