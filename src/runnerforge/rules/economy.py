"""Economy ledger: build points to nuyen, karma advancement costs.

Resources bought with build points follow a tier table rather than a linear
rate, so 7 BP buys exactly what 5 BP buys. Karma costs are flat ruleset
constants and only apply in career mode.
"""

from enum import IntEnum

import structlog

from runnerforge.models.character import Character
from runnerforge.rules.results import ActionResult

logger = structlog.get_logger(__name__)

# (bp threshold, nuyen), ascending
BP_TO_NUYEN_TIERS: tuple[tuple[int, int], ...] = (
    (0, 0),
    (5, 20_000),
    (10, 50_000),
    (20, 90_000),
    (30, 150_000),
    (40, 225_000),
    (50, 275_000),
)

MAX_RESOURCES_BP = 50


class KarmaCost(IntEnum):
    """Karma prices for career advancement."""

    NEW_SKILL = 4
    IMPROVE_SKILL_MULTIPLIER = 2
    NEW_SKILL_GROUP = 10
    IMPROVE_SKILL_GROUP_MULTIPLIER = 5
    NEW_KNOWLEDGE_SKILL = 2
    IMPROVE_KNOWLEDGE_SKILL_MULTIPLIER = 1
    IMPROVE_ATTRIBUTE_MULTIPLIER = 5
    SPECIALIZATION = 2
    NEW_SPELL = 5
    NEW_COMPLEX_FORM = 5
    INITIATION_BASE = 10
    INITIATION_MULTIPLIER = 3


def bp_to_nuyen(bp: int) -> int:
    """
    Get the nuyen bought by spending ``bp`` on resources.

    Examples:
        >>> bp_to_nuyen(10)
        50000
        >>> bp_to_nuyen(7)
        20000
        >>> bp_to_nuyen(100)
        275000
        >>> bp_to_nuyen(-5)
        0
    """
    for threshold, nuyen in reversed(BP_TO_NUYEN_TIERS):
        if bp >= threshold:
            return nuyen
    return 0


def nuyen_to_bp(nuyen: int) -> int:
    """Get the BP tier whose nuyen value is the largest not exceeding ``nuyen``."""
    for threshold, tier_nuyen in reversed(BP_TO_NUYEN_TIERS):
        if nuyen >= tier_nuyen:
            return threshold
    return 0


def format_nuyen(amount: int) -> str:
    """
    Format a nuyen amount for display.

    Examples:
        >>> format_nuyen(275000)
        '275,000¥'
        >>> format_nuyen(-1500)
        '-1,500¥'
    """
    return f"{amount:,}¥"


def skill_improvement_cost(new_rating: int) -> int:
    return new_rating * KarmaCost.IMPROVE_SKILL_MULTIPLIER


def skill_group_improvement_cost(new_rating: int) -> int:
    return new_rating * KarmaCost.IMPROVE_SKILL_GROUP_MULTIPLIER


def knowledge_skill_improvement_cost(new_rating: int) -> int:
    return new_rating * KarmaCost.IMPROVE_KNOWLEDGE_SKILL_MULTIPLIER


def attribute_improvement_cost(new_rating: int) -> int:
    return new_rating * KarmaCost.IMPROVE_ATTRIBUTE_MULTIPLIER


def initiation_cost(new_grade: int) -> int:
    return KarmaCost.INITIATION_BASE + new_grade * KarmaCost.INITIATION_MULTIPLIER


def set_resources_bp(character: Character, bp: int) -> ActionResult:
    """
    Spend build points on resources during creation.

    BP is clamped to 0-50. Starting nuyen is re-derived from the tier table and
    current nuyen shifts by the same amount, so money already spent on gear
    stays spent.

    Args:
        character: The character in creation mode
        bp: Build points to allocate to resources

    Returns:
        ActionResult with the updated character
    """
    if character.is_career:
        return ActionResult.fail(character, "Resources can only be bought during creation")

    clamped = max(0, min(MAX_RESOURCES_BP, bp))
    starting = bp_to_nuyen(clamped)
    spent = character.starting_nuyen - character.nuyen

    updated = character.with_changes(
        build_points_spent=character.build_points_spent.with_changes(resources=clamped),
        starting_nuyen=starting,
        nuyen=starting - spent,
    )

    logger.info(
        "resources_set",
        character_id=character.id,
        bp=clamped,
        starting_nuyen=starting,
        nuyen=updated.nuyen,
    )

    return ActionResult.ok(updated)
