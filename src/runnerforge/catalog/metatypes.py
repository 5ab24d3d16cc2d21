"""
Metatype catalog loader.

Handles loading and validating metatype data (attribute limits and build-point
costs) from YAML files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import Field, ValidationError

from runnerforge.config import get_settings
from runnerforge.models.base import FrozenModel
from runnerforge.models.character import AttributeCode, AttributeLimits

logger = structlog.get_logger(__name__)


class CatalogLoadError(Exception):
    """Raised when catalog data cannot be read or parsed."""

    pass


class CatalogValidationError(Exception):
    """Raised when catalog data is structurally invalid."""

    pass


class Metatype(FrozenModel):
    """
    A metatype loaded from YAML data.

    Attributes:
        name: Display name (e.g., "Ork")
        bp: Build-point cost of choosing the metatype
        attributes: Natural min/max and augmented max per attribute
    """

    name: str = Field(..., description="Metatype name")
    bp: int = Field(default=0, ge=0, description="Build point cost")
    attributes: dict[AttributeCode, AttributeLimits] = Field(
        ..., description="Attribute limits keyed by attribute code"
    )


def load_yaml_file(file_path: Path) -> list[dict[str, Any]]:
    """
    Load a YAML file containing metatype definitions.

    Args:
        file_path: Path to the YAML file

    Returns:
        List of metatype dictionaries

    Raises:
        CatalogLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"File not found: {file_path}") from e
    except yaml.YAMLError as e:
        raise CatalogLoadError(f"YAML parsing error in {file_path}: {e}") from e
    except OSError as e:
        raise CatalogLoadError(f"Error loading {file_path}: {e}") from e

    if not data:
        raise CatalogLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict) or "metatypes" not in data:
        raise CatalogLoadError(f"Missing 'metatypes' key in {file_path}")

    metatypes = data["metatypes"]
    if not isinstance(metatypes, list):
        raise CatalogLoadError(f"'metatypes' must be a list in {file_path}")

    return metatypes


def validate_metatype_data(metatype_data: dict[str, Any], file_path: Path) -> None:
    """
    Validate that a metatype dictionary has all required fields.

    Args:
        metatype_data: Dictionary containing metatype data
        file_path: Path to the source file (for error messages)

    Raises:
        CatalogValidationError: If required fields are missing or invalid
    """
    name = metatype_data.get("name", "unknown")

    for field in ("name", "attributes"):
        if field not in metatype_data:
            raise CatalogValidationError(
                f"Metatype '{name}' in {file_path} missing required field: {field}"
            )

    attributes = metatype_data["attributes"]
    if not isinstance(attributes, dict):
        raise CatalogValidationError(
            f"Metatype '{name}' in {file_path} has invalid attributes (must be a dict)"
        )

    for code, limits in attributes.items():
        if not isinstance(limits, dict):
            raise CatalogValidationError(
                f"Metatype '{name}' in {file_path} has invalid limits for '{code}'"
            )
        low, high, aug = limits.get("min", 1), limits.get("max", 6), limits.get("aug", 9)
        if not low <= high <= aug:
            raise CatalogValidationError(
                f"Metatype '{name}' in {file_path} has inconsistent limits for '{code}' "
                f"(need min <= max <= aug, got {low}/{high}/{aug})"
            )


def create_metatype_from_data(metatype_data: dict[str, Any]) -> Metatype:
    """
    Create a Metatype instance from dictionary data.

    Raises:
        CatalogValidationError: If Pydantic validation fails
    """
    try:
        return Metatype(**metatype_data)
    except ValidationError as e:
        raise CatalogValidationError(
            f"Failed to create metatype '{metatype_data.get('name', 'unknown')}': {e}"
        ) from e


def load_metatypes(path: Path | None = None) -> dict[str, Metatype]:
    """
    Load the metatype catalog.

    Args:
        path: YAML file to read; defaults to the configured metatype path

    Returns:
        Dictionary mapping metatype name to Metatype

    Raises:
        CatalogLoadError: If the file can't be loaded
        CatalogValidationError: If a metatype entry is invalid or duplicated
    """
    file_path = path or get_settings().metatype_path
    metatypes: dict[str, Metatype] = {}

    for metatype_data in load_yaml_file(file_path):
        if not isinstance(metatype_data, dict):
            raise CatalogValidationError(f"Metatype entries must be mappings in {file_path}")
        validate_metatype_data(metatype_data, file_path)
        metatype = create_metatype_from_data(metatype_data)

        if metatype.name in metatypes:
            raise CatalogValidationError(
                f"Duplicate metatype '{metatype.name}' found in {file_path}"
            )

        metatypes[metatype.name] = metatype

    logger.debug("metatypes_loaded", path=str(file_path), count=len(metatypes))
    return metatypes


@lru_cache
def _cached_metatypes(path: Path) -> dict[str, Metatype]:
    return load_metatypes(path)


def get_metatype(name: str) -> Metatype | None:
    """
    Look up a metatype by case-insensitive name from the configured catalog.

    Returns:
        The Metatype, or None if no metatype has that name
    """
    wanted = name.strip().lower()
    for metatype in _cached_metatypes(get_settings().metatype_path).values():
        if metatype.name.lower() == wanted:
            return metatype
    return None
