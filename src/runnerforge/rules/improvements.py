"""Improvement aggregation.

Walks a character's installed cyberware (including subsystems), bioware,
qualities and adept powers, looks each one up in the effect catalog and emits
flat bonus records. Improvements are derived data: they are rebuilt on every
call and never stored on the character.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from runnerforge.catalog.effects import (
    EffectMatch,
    ImprovementSource,
    ImprovementTarget,
    find_effect,
)
from runnerforge.models.character import Character

logger = structlog.get_logger(__name__)

_AUGMENTATION_SOURCES = frozenset({ImprovementSource.CYBERWARE, ImprovementSource.BIOWARE})


@dataclass(frozen=True)
class Improvement:
    """A single named bonus to one stat."""

    id: str
    source: ImprovementSource
    source_name: str
    target: ImprovementTarget
    value: int
    conditional: str | None = None


def _emit(
    record_id: str,
    name: str,
    catalog_id: str | None,
    record_rating: int,
    allowed: frozenset[ImprovementSource],
) -> list[Improvement]:
    match: EffectMatch | None = find_effect(name, catalog_id)
    if match is None or match.definition.source not in allowed:
        logger.debug("improvement_effect_unmatched", name=name, catalog_id=catalog_id)
        return []

    definition = match.definition
    # A rating written into the name wins over the record's own rating
    rating = match.embedded_rating or record_rating or 1

    return [
        Improvement(
            id=f"{record_id}:{definition.key}:{formula.target}",
            source=definition.source,
            source_name=name,
            target=formula.target,
            value=formula.value(rating),
            conditional=formula.conditional,
        )
        for formula in definition.formulas
    ]


def aggregate(character: Character) -> list[Improvement]:
    """Collect every improvement granted by a character's augmentations, qualities and powers.

    Records that have no catalog entry contribute nothing.

    Args:
        character: The character to inspect

    Returns:
        Flat list of improvements, in equipment-then-quality-then-power order
    """
    improvements: list[Improvement] = []

    implants = [*character.equipment.all_cyberware(), *character.equipment.bioware]
    for implant in implants:
        improvements.extend(
            _emit(
                implant.id,
                implant.name,
                implant.catalog_id,
                implant.rating,
                _AUGMENTATION_SOURCES,
            )
        )

    for quality in character.qualities:
        improvements.extend(
            _emit(
                quality.id,
                quality.name,
                quality.catalog_id,
                quality.rating,
                frozenset({ImprovementSource.QUALITY}),
            )
        )

    if character.magic is not None:
        for power in character.magic.powers:
            improvements.extend(
                _emit(
                    power.id,
                    power.name,
                    power.catalog_id,
                    power.level,
                    frozenset({ImprovementSource.ADEPT_POWER}),
                )
            )

    return improvements


def improvements_for(
    improvements: Iterable[Improvement], target: ImprovementTarget | str
) -> list[Improvement]:
    """Filter improvements down to one target."""
    return [imp for imp in improvements if imp.target == target]


def improvement_summary(improvements: list[Improvement]) -> dict[str, list[str]]:
    """Group improvement descriptions by target for display.

    Examples:
        {"initiative": ["+2 from Wired Reflexes 2 (cyberware)"]}
    """
    summary: dict[str, list[str]] = {}
    for imp in improvements:
        sign = "+" if imp.value >= 0 else ""
        line = f"{sign}{imp.value} from {imp.source_name} ({imp.source})"
        if imp.conditional:
            line += f" [{imp.conditional}]"
        summary.setdefault(str(imp.target), []).append(line)
    return summary
