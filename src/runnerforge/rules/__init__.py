"""Rules engine: every entry point is a pure function of a Character."""

from .advancement import (
    add_specialization,
    award_karma,
    award_nuyen,
    enter_career_mode,
    improve_attribute,
    improve_knowledge_skill,
    improve_skill,
    initiate,
    learn_knowledge_skill,
    learn_new_skill,
    learn_spell,
    spend_nuyen,
)
from .attributes import resolve_attribute, resolve_attributes, set_metatype
from .derived import ArmorTotals, DerivedStats, armor_totals, derive_all, dice_pool, wound_modifier
from .economy import KarmaCost, bp_to_nuyen, format_nuyen, nuyen_to_bp, set_resources_bp
from .essence import essence, essence_cost, remove_augmentation, try_install
from .improvements import Improvement, aggregate
from .results import ActionResult
from .sheet import CharacterSheet, build_sheet
from .stacking import total_for
from .validation import (
    Severity,
    ValidationIssue,
    ValidationResult,
    parse_availability,
    validate_availability,
    validate_character,
)

__all__ = [
    "ActionResult",
    "ArmorTotals",
    "CharacterSheet",
    "DerivedStats",
    "Improvement",
    "KarmaCost",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "add_specialization",
    "aggregate",
    "armor_totals",
    "award_karma",
    "award_nuyen",
    "bp_to_nuyen",
    "build_sheet",
    "derive_all",
    "dice_pool",
    "enter_career_mode",
    "essence",
    "essence_cost",
    "format_nuyen",
    "improve_attribute",
    "improve_knowledge_skill",
    "improve_skill",
    "initiate",
    "learn_knowledge_skill",
    "learn_new_skill",
    "learn_spell",
    "nuyen_to_bp",
    "parse_availability",
    "remove_augmentation",
    "resolve_attribute",
    "resolve_attributes",
    "set_metatype",
    "set_resources_bp",
    "spend_nuyen",
    "total_for",
    "try_install",
    "validate_availability",
    "validate_character",
    "wound_modifier",
]
