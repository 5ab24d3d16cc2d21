"""Validation engine.

Checks a character against creation-mode budgets, metatype limits and
equipment legality. Problems are reported as issues rather than raised:
validation never blocks derived-stat calculation.

Budget, natural-limit and availability checks only apply in creation mode.
"""

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from runnerforge.catalog.effects import ImprovementTarget
from runnerforge.catalog.grades import grade_multiplier
from runnerforge.models.character import (
    CORE_ATTRIBUTES,
    AttributeCode,
    Character,
    QualityCategory,
)
from runnerforge.rules.attributes import resolve_attribute
from runnerforge.rules.essence import ESSENCE_MAX, essence
from runnerforge.rules.improvements import Improvement, aggregate
from runnerforge.rules.stacking import total_for

logger = structlog.get_logger(__name__)

POSITIVE_QUALITY_CAP = 35
NEGATIVE_QUALITY_CAP = 35
RESOURCES_CAP = 50
CREATION_SKILL_MAX = 6
CONTACT_RATING_RANGE = (1, 6)

EXCLUSIVE_QUALITIES = (
    ("magician", "technomancer"),
    ("adept", "technomancer"),
    ("mystic adept", "technomancer"),
    ("immunity (natural)", "allergy"),
    ("lucky", "unlucky"),
)
AWAKENED_QUALITIES = ("magician", "adept", "mystic adept")

_RESTRICTION_PATTERN = re.compile(r"([RF])$", re.IGNORECASE)


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """One reported problem.

    Attributes:
        code: Stable machine-readable code (e.g. "AVAIL_TOO_HIGH")
        severity: Errors make the character invalid; warnings and info do not
        category: Sheet section the issue belongs to
        message: Human-readable summary
        item_id: Offending equipment record, when there is one
    """

    code: str
    severity: Severity
    category: str
    message: str
    details: str | None = None
    item_id: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def errors(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.ERROR)

    @property
    def warnings(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.WARNING)

    @property
    def info(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.INFO)

    @property
    def valid(self) -> bool:
        return self.errors == 0

    def codes(self) -> list[str]:
        return [issue.code for issue in self.issues]


@dataclass(frozen=True)
class Availability:
    rating: int
    restriction: str | None = None

    @property
    def forbidden(self) -> bool:
        return self.restriction == "F"


def parse_availability(text: str | None) -> Availability:
    """
    Parse an availability string into a rating and restriction flag.

    A trailing R (restricted) or F (forbidden) is stripped, case-insensitive.
    The remainder may be a number or a ``+``-only sum. Anything unparseable
    reads as rating 0.

    Examples:
        >>> parse_availability("12R")
        Availability(rating=12, restriction='R')
        >>> parse_availability("8+2")
        Availability(rating=10, restriction=None)
        >>> parse_availability("-")
        Availability(rating=0, restriction=None)
    """
    text = (text or "").strip()
    if not text or text in ("-", "0"):
        return Availability(rating=0)

    restriction = None
    match = _RESTRICTION_PATTERN.search(text)
    if match:
        restriction = match.group(1).upper()
        text = text[: match.start()].strip()

    # A leading "+" marks an accessory modifier, e.g. "+2"
    terms = [term.strip() for term in text.split("+") if term.strip()]

    rating = 0
    for term in terms:
        if not term.isdigit():
            return Availability(rating=0, restriction=restriction)
        rating += int(term)

    return Availability(rating=rating, restriction=restriction)


def _issue(
    code: str,
    severity: Severity,
    category: str,
    message: str,
    details: str | None = None,
    item_id: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(code, severity, category, message, details, item_id)


def _priced_items(character: Character) -> Iterator[tuple[str, str, str, int]]:
    """Yield (id, name, availability text, grade modifier) for every purchasable item."""
    equipment = character.equipment
    for weapon in equipment.weapons:
        yield weapon.id, weapon.name, weapon.avail, 0
    for armor in equipment.armor:
        yield armor.id, armor.name, armor.avail, 0
    for implant in equipment.all_cyberware():
        multiplier = grade_multiplier(implant)
        yield implant.id, implant.name, implant.avail, multiplier.availability if multiplier else 0
    for implant in equipment.bioware:
        multiplier = grade_multiplier(implant)
        yield implant.id, implant.name, implant.avail, multiplier.availability if multiplier else 0
    for gear in equipment.gear:
        yield gear.id, gear.name, gear.avail, 0
    for vehicle in equipment.vehicles:
        yield vehicle.id, vehicle.name, vehicle.avail, 0


def validate_availability(character: Character) -> list[ValidationIssue]:
    """
    Check equipment legality against the character's creation settings.

    Career-mode characters always pass. An item can produce both
    AVAIL_TOO_HIGH and FORBIDDEN_ITEM.

    Args:
        character: The character to check

    Returns:
        List of availability issues
    """
    if character.is_career:
        return []

    settings = character.settings
    issues: list[ValidationIssue] = []

    for item_id, name, avail_text, modifier in _priced_items(character):
        avail = parse_availability(avail_text)
        rating = max(0, avail.rating + modifier) if avail.rating else 0

        if rating > settings.max_availability:
            issues.append(
                _issue(
                    "AVAIL_TOO_HIGH",
                    Severity.ERROR,
                    "Equipment",
                    f"{name} exceeds maximum availability",
                    f"Availability: {rating}, Maximum: {settings.max_availability}",
                    item_id,
                )
            )

        if avail.forbidden and not settings.allow_forbidden:
            issues.append(
                _issue(
                    "FORBIDDEN_ITEM",
                    Severity.ERROR,
                    "Equipment",
                    f"{name} is Forbidden",
                    "Forbidden items are not allowed during creation",
                    item_id,
                )
            )

    return issues


def validate_identity(character: Character) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not character.identity.name.strip():
        issues.append(_issue("NO_NAME", Severity.WARNING, "Identity", "Character has no name"))
    if not character.identity.metatype.strip():
        issues.append(
            _issue("NO_METATYPE", Severity.ERROR, "Identity", "No metatype selected")
        )
    return issues


def validate_build_points(character: Character) -> list[ValidationIssue]:
    """Check BP totals and per-category caps. Creation mode only."""
    if character.is_career:
        return []

    issues: list[ValidationIssue] = []
    spent = character.build_points_spent

    if spent.total > character.build_points:
        issues.append(
            _issue(
                "BP_OVERSPENT",
                Severity.ERROR,
                "Build Points",
                f"Overspent by {spent.total - character.build_points} BP",
                f"Total spent: {spent.total}, Available: {character.build_points}",
            )
        )

    positive = sum(q.bp for q in character.qualities if q.category == QualityCategory.POSITIVE)
    if positive > POSITIVE_QUALITY_CAP:
        issues.append(
            _issue(
                "POSITIVE_QUALITY_CAP",
                Severity.ERROR,
                "Qualities",
                f"Positive qualities exceed {POSITIVE_QUALITY_CAP} BP limit",
                f"Current: {positive} BP",
            )
        )

    negative = abs(
        sum(q.bp for q in character.qualities if q.category == QualityCategory.NEGATIVE)
    )
    if negative > NEGATIVE_QUALITY_CAP:
        issues.append(
            _issue(
                "NEGATIVE_QUALITY_CAP",
                Severity.ERROR,
                "Qualities",
                f"Negative qualities exceed {NEGATIVE_QUALITY_CAP} BP limit",
                f"Current: {negative} BP",
            )
        )

    if spent.resources > RESOURCES_CAP:
        issues.append(
            _issue(
                "RESOURCES_CAP",
                Severity.ERROR,
                "Resources",
                f"Resources exceed {RESOURCES_CAP} BP maximum",
                f"Current: {spent.resources} BP",
            )
        )

    return issues


def validate_attributes(
    character: Character, improvements: list[Improvement] | None = None
) -> list[ValidationIssue]:
    """Check attributes against metatype limits and essence."""
    if improvements is None:
        improvements = aggregate(character)

    issues: list[ValidationIssue] = []
    creation = not character.is_career

    for code in CORE_ATTRIBUTES:
        value = character.attribute(code)
        limits = character.limits(code)
        label = code.upper()

        if creation and value.base < limits.min:
            issues.append(
                _issue(
                    "ATTR_BELOW_MIN",
                    Severity.ERROR,
                    "Attributes",
                    f"{label} below minimum",
                    f"Current: {value.base}, Minimum: {limits.min}",
                )
            )
        if creation and value.base > limits.max:
            issues.append(
                _issue(
                    "ATTR_ABOVE_MAX",
                    Severity.ERROR,
                    "Attributes",
                    f"{label} exceeds natural maximum",
                    f"Current: {value.base}, Maximum: {limits.max}",
                )
            )

        total = resolve_attribute(character, code, improvements)
        augmented_max = limits.aug
        if code == AttributeCode.EDG:
            # Edge qualities such as Lucky raise the ceiling along with the value
            augmented_max += total_for(improvements, ImprovementTarget.EDG)
        if total > augmented_max:
            issues.append(
                _issue(
                    "ATTR_ABOVE_AUG",
                    Severity.ERROR,
                    "Attributes",
                    f"{label} exceeds augmented maximum",
                    f"Current total: {total}, Augmented max: {augmented_max}",
                )
            )

    magic = resolve_attribute(character, AttributeCode.MAG, improvements)
    if character.is_awakened and magic > character.limits(AttributeCode.MAG).aug:
        issues.append(
            _issue(
                "MAG_ABOVE_MAX",
                Severity.ERROR,
                "Attributes",
                "Magic exceeds maximum",
                f"Current: {magic}, Maximum: {character.limits(AttributeCode.MAG).aug}",
            )
        )

    resonance = resolve_attribute(character, AttributeCode.RES, improvements)
    if character.is_technomancer and resonance > character.limits(AttributeCode.RES).aug:
        issues.append(
            _issue(
                "RES_ABOVE_MAX",
                Severity.ERROR,
                "Attributes",
                "Resonance exceeds maximum",
                f"Current: {resonance}, Maximum: {character.limits(AttributeCode.RES).aug}",
            )
        )

    ess = essence(character)
    if ess < 0:
        issues.append(
            _issue(
                "ESSENCE_NEGATIVE",
                Severity.ERROR,
                "Attributes",
                "Essence cannot be negative",
                f"Current: {ess:.2f}",
            )
        )

    if character.is_awakened and ess < ESSENCE_MAX and magic > math.floor(ess):
        issues.append(
            _issue(
                "MAG_EXCEEDS_ESSENCE",
                Severity.ERROR,
                "Attributes",
                "Magic cannot exceed Essence",
                f"Magic: {magic}, Max (floor of Essence): {math.floor(ess)}",
            )
        )

    return issues


def validate_skills(character: Character) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for skill in character.skills:
        if skill.rating > CREATION_SKILL_MAX and not character.is_career:
            issues.append(
                _issue(
                    "SKILL_ABOVE_MAX",
                    Severity.ERROR,
                    "Skills",
                    f"{skill.name} exceeds maximum rating of {CREATION_SKILL_MAX}",
                    f"Current rating: {skill.rating}",
                )
            )
        if skill.rating < 0:
            issues.append(
                _issue(
                    "SKILL_NEGATIVE",
                    Severity.ERROR,
                    "Skills",
                    f"{skill.name} has negative rating",
                    f"Current rating: {skill.rating}",
                )
            )

    if character.find_skill("Perception") is None:
        issues.append(
            _issue(
                "NO_PERCEPTION",
                Severity.WARNING,
                "Skills",
                "No Perception skill",
                "Consider adding Perception for awareness tests",
            )
        )

    return issues


def validate_qualities(character: Character) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    names = {quality.name.lower() for quality in character.qualities}

    for first, second in EXCLUSIVE_QUALITIES:
        if first in names and second in names:
            issues.append(
                _issue(
                    "QUALITY_EXCLUSIVE",
                    Severity.ERROR,
                    "Qualities",
                    f"Cannot have both {first} and {second}",
                    "These qualities are mutually exclusive",
                )
            )

    awakened = any(
        name in AWAKENED_QUALITIES or name.startswith("aspected magician") for name in names
    )
    if awakened and not character.is_awakened:
        issues.append(
            _issue(
                "MAGIC_NOT_INITIALIZED",
                Severity.WARNING,
                "Magic",
                "Awakened quality selected but Magic not initialized",
                "Select a tradition",
            )
        )

    if any("technomancer" in name for name in names) and not character.is_technomancer:
        issues.append(
            _issue(
                "RESONANCE_NOT_INITIALIZED",
                Severity.WARNING,
                "Resonance",
                "Technomancer quality selected but Resonance not initialized",
                "Select a stream",
            )
        )

    return issues


def validate_magic(character: Character) -> list[ValidationIssue]:
    magic = character.magic
    if magic is None:
        return []

    issues: list[ValidationIssue] = []
    if not magic.tradition:
        issues.append(
            _issue("NO_TRADITION", Severity.WARNING, "Magic", "No magical tradition selected")
        )

    if magic.power_points > 0:
        if magic.power_points_used > magic.power_points:
            issues.append(
                _issue(
                    "POWER_POINTS_OVERSPENT",
                    Severity.ERROR,
                    "Magic",
                    "Power points exceeded",
                    f"Used: {magic.power_points_used}, Available: {magic.power_points}",
                )
            )
        if not magic.powers:
            issues.append(
                _issue("NO_POWERS", Severity.INFO, "Magic", "No adept powers selected")
            )

    return issues


def validate_resonance(character: Character) -> list[ValidationIssue]:
    resonance = character.resonance
    if resonance is None:
        return []

    issues: list[ValidationIssue] = []
    if not resonance.stream:
        issues.append(
            _issue("NO_STREAM", Severity.WARNING, "Resonance", "No technomancer stream selected")
        )
    if not resonance.complex_forms:
        issues.append(
            _issue("NO_COMPLEX_FORMS", Severity.INFO, "Resonance", "No complex forms selected")
        )
    return issues


def validate_equipment(character: Character) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    equipment = character.equipment

    if not equipment.weapons:
        issues.append(_issue("NO_WEAPONS", Severity.INFO, "Equipment", "No weapons purchased"))
    if not equipment.armor:
        issues.append(_issue("NO_ARMOR", Severity.WARNING, "Equipment", "No armor purchased"))
    if equipment.lifestyle is None:
        issues.append(
            _issue("NO_LIFESTYLE", Severity.WARNING, "Equipment", "No lifestyle selected")
        )
    if character.nuyen < 0:
        issues.append(
            _issue(
                "NEGATIVE_NUYEN",
                Severity.ERROR,
                "Equipment",
                "Negative nuyen balance",
                f"Current: {character.nuyen}¥",
            )
        )

    return issues


def validate_contacts(character: Character) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    low, high = CONTACT_RATING_RANGE

    if not character.contacts and not character.is_career:
        issues.append(_issue("NO_CONTACTS", Severity.INFO, "Contacts", "No contacts defined"))

    for contact in character.contacts:
        if not low <= contact.loyalty <= high:
            issues.append(
                _issue(
                    "CONTACT_LOYALTY_INVALID",
                    Severity.ERROR,
                    "Contacts",
                    f"{contact.name} has invalid loyalty rating",
                    f"Current: {contact.loyalty}, Valid: {low}-{high}",
                )
            )
        if not low <= contact.connection <= high:
            issues.append(
                _issue(
                    "CONTACT_CONNECTION_INVALID",
                    Severity.ERROR,
                    "Contacts",
                    f"{contact.name} has invalid connection rating",
                    f"Current: {contact.connection}, Valid: {low}-{high}",
                )
            )

    return issues


def validate_character(
    character: Character, improvements: list[Improvement] | None = None
) -> ValidationResult:
    """
    Run every check against a character.

    Args:
        character: The character to validate
        improvements: Pre-aggregated improvements

    Returns:
        ValidationResult; ``valid`` is False when any error-severity issue exists
    """
    if improvements is None:
        improvements = aggregate(character)

    issues = [
        *validate_identity(character),
        *validate_build_points(character),
        *validate_attributes(character, improvements),
        *validate_skills(character),
        *validate_qualities(character),
        *validate_magic(character),
        *validate_resonance(character),
        *validate_equipment(character),
        *validate_contacts(character),
        *validate_availability(character),
    ]
    result = ValidationResult(issues=tuple(issues))

    logger.debug(
        "character_validated",
        character_id=character.id,
        errors=result.errors,
        warnings=result.warnings,
        info=result.info,
    )

    return result
