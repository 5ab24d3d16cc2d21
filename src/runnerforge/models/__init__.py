"""Immutable character records for Runnerforge."""

from runnerforge.models.base import FrozenModel, new_id
from runnerforge.models.character import (
    ATTRIBUTE_NAMES,
    CORE_ATTRIBUTES,
    MENTAL_ATTRIBUTES,
    PHYSICAL_ATTRIBUTES,
    AdeptPower,
    AttributeCode,
    AttributeLimits,
    AttributeValue,
    BuildPointAllocation,
    Character,
    CharacterMode,
    CharacterSettings,
    ComplexForm,
    Condition,
    Contact,
    ExpenseEntry,
    ExpenseKind,
    Identity,
    KnowledgeSkill,
    Magic,
    Quality,
    QualityCategory,
    Resonance,
    Skill,
    Spell,
    default_attribute_limits,
    default_attributes,
    new_character,
)
from runnerforge.models.item import (
    Armor,
    Bioware,
    BiowareGrade,
    Cyberware,
    CyberwareGrade,
    Equipment,
    Gear,
    Lifestyle,
    Vehicle,
    Weapon,
)

__all__ = [
    "ATTRIBUTE_NAMES",
    "CORE_ATTRIBUTES",
    "MENTAL_ATTRIBUTES",
    "PHYSICAL_ATTRIBUTES",
    "AdeptPower",
    "Armor",
    "AttributeCode",
    "AttributeLimits",
    "AttributeValue",
    "Bioware",
    "BiowareGrade",
    "BuildPointAllocation",
    "Character",
    "CharacterMode",
    "CharacterSettings",
    "ComplexForm",
    "Condition",
    "Contact",
    "Cyberware",
    "CyberwareGrade",
    "Equipment",
    "ExpenseEntry",
    "ExpenseKind",
    "FrozenModel",
    "Gear",
    "Identity",
    "KnowledgeSkill",
    "Lifestyle",
    "Magic",
    "Quality",
    "QualityCategory",
    "Resonance",
    "Skill",
    "Spell",
    "Vehicle",
    "Weapon",
    "default_attribute_limits",
    "default_attributes",
    "new_character",
    "new_id",
]
