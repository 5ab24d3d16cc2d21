"""One-call pipeline from a character record to a finished sheet."""

from dataclasses import asdict, dataclass
from typing import Any

import structlog

from runnerforge.models.character import AttributeCode, Character
from runnerforge.rules.attributes import resolve_attributes
from runnerforge.rules.derived import DerivedStats, derive_all
from runnerforge.rules.improvements import Improvement, aggregate
from runnerforge.rules.validation import ValidationResult, validate_character

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CharacterSheet:
    """A character together with everything computed from it."""

    character: Character
    improvements: tuple[Improvement, ...]
    attributes: dict[AttributeCode, int]
    stats: DerivedStats
    validation: ValidationResult

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for JSON output."""
        return {
            "id": self.character.id,
            "name": self.character.name,
            "metatype": self.character.identity.metatype,
            "mode": str(self.character.mode),
            "attributes": {str(code): value for code, value in self.attributes.items()},
            "stats": asdict(self.stats),
            "improvements": [
                {**asdict(imp), "source": str(imp.source), "target": str(imp.target)}
                for imp in self.improvements
            ],
            "validation": {
                "valid": self.validation.valid,
                "errors": self.validation.errors,
                "warnings": self.validation.warnings,
                "info": self.validation.info,
                "codes": self.validation.codes(),
                "issues": [
                    {**asdict(issue), "severity": str(issue.severity)}
                    for issue in self.validation.issues
                ],
            },
        }


def build_sheet(character: Character) -> CharacterSheet:
    """Aggregate improvements once, then resolve, derive and validate from them."""
    improvements = aggregate(character)

    sheet = CharacterSheet(
        character=character,
        improvements=tuple(improvements),
        attributes=resolve_attributes(character, improvements),
        stats=derive_all(character, improvements),
        validation=validate_character(character, improvements),
    )

    logger.debug(
        "sheet_built",
        character_id=character.id,
        improvements=len(improvements),
        valid=sheet.validation.valid,
    )

    return sheet
