"""Attribute resolution and metatype selection."""

import structlog

from runnerforge.catalog.effects import ImprovementTarget
from runnerforge.catalog.metatypes import Metatype
from runnerforge.models.character import AttributeCode, AttributeValue, Character
from runnerforge.rules.improvements import Improvement, aggregate
from runnerforge.rules.stacking import total_for

logger = structlog.get_logger(__name__)


def augmentation_bonus(
    character: Character,
    code: AttributeCode,
    improvements: list[Improvement] | None = None,
) -> int:
    """Get the stacked improvement bonus for one attribute."""
    if improvements is None:
        improvements = aggregate(character)
    return total_for(improvements, ImprovementTarget(code.value))


def resolve_attribute(
    character: Character,
    code: AttributeCode,
    improvements: list[Improvement] | None = None,
) -> int:
    """Calculate an attribute's effective value.

    The result is base + manual bonus + stacked improvements. Limits are
    reported by validation rather than clamped here. Magic and Resonance
    resolve to 0 for characters without the matching sub-record.

    Args:
        character: The character to read
        code: Attribute to resolve
        improvements: Pre-aggregated improvements, to avoid re-walking equipment

    Returns:
        The effective attribute value
    """
    if code == AttributeCode.MAG and not character.is_awakened:
        return 0
    if code == AttributeCode.RES and not character.is_technomancer:
        return 0

    return character.attribute(code).total + augmentation_bonus(character, code, improvements)


def resolve_attributes(
    character: Character, improvements: list[Improvement] | None = None
) -> dict[AttributeCode, int]:
    """Resolve every attribute code in one pass."""
    if improvements is None:
        improvements = aggregate(character)
    return {code: resolve_attribute(character, code, improvements) for code in AttributeCode}


def set_metatype(character: Character, metatype: Metatype) -> Character:
    """Switch a character to a new metatype.

    Replaces the identity's metatype, the attribute limits and the metatype
    build-point allocation. Attribute bases below the new minimum are raised to
    it; bases above the new maximum are left for validation to report.

    Args:
        character: The character to update
        metatype: The metatype to apply

    Returns:
        Updated copy of the character
    """
    limits = {**character.attribute_limits, **metatype.attributes}

    attributes: dict[AttributeCode, AttributeValue] = {}
    for code, value in character.attributes.items():
        minimum = limits[code].min if code in limits else value.base
        attributes[code] = value if value.base >= minimum else value.with_changes(base=minimum)

    updated = character.with_changes(
        identity=character.identity.with_changes(metatype=metatype.name, metavariant=None),
        attribute_limits=limits,
        attributes=attributes,
        build_points_spent=character.build_points_spent.with_changes(metatype=metatype.bp),
    )

    logger.info(
        "metatype_selected",
        character_id=character.id,
        metatype=metatype.name,
        bp=metatype.bp,
    )

    return updated
