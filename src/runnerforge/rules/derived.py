"""Derived statistics: condition monitors, initiative, limits, pools and armor.

All functions are pure. Each accepts pre-aggregated improvements so that
``derive_all`` walks the character's equipment only once.
"""

import math
from dataclasses import dataclass

from runnerforge.catalog.effects import ImprovementTarget
from runnerforge.models.character import AttributeCode, Character
from runnerforge.models.item import Armor
from runnerforge.rules.attributes import resolve_attributes
from runnerforge.rules.essence import essence
from runnerforge.rules.improvements import Improvement, aggregate
from runnerforge.rules.stacking import total_for

A = AttributeCode
T = ImprovementTarget

BASE_CONDITION_MONITOR = 8
ASTRAL_INITIATIVE_DICE = 2
# Hot-sim VR
MATRIX_INITIATIVE_DICE = 3


@dataclass(frozen=True)
class ArmorTotals:
    ballistic: int
    impact: int
    encumbrance: int


@dataclass(frozen=True)
class DerivedStats:
    """Snapshot of every derived value for one character."""

    # Condition monitors
    physical_cm: int
    stun_cm: int
    overflow: int
    wound_modifier: int

    # Initiative
    initiative: int
    initiative_bonus: int
    initiative_dice: int
    astral_initiative: int
    astral_initiative_dice: int
    matrix_initiative: int
    matrix_initiative_dice: int

    # Movement
    walk: int
    run: int

    # Limits
    physical_limit: int
    mental_limit: int
    social_limit: int

    # Attribute-only tests
    composure: int
    judge_intentions: int
    memory: int
    lift_carry: int

    # Combat
    defense: int
    dodge: int
    armor_ballistic: int
    armor_impact: int
    encumbrance: int
    damage_resistance_bonus: int
    spell_resistance_bonus: int

    # Magic and resonance
    drain_resistance: int
    fading_resistance: int
    essence: float


def _context(
    character: Character, improvements: list[Improvement] | None
) -> tuple[list[Improvement], dict[AttributeCode, int]]:
    if improvements is None:
        improvements = aggregate(character)
    return improvements, resolve_attributes(character, improvements)


def physical_cm(character: Character, improvements: list[Improvement] | None = None) -> int:
    """Physical condition monitor boxes: ceil(BOD / 2) + 8."""
    improvements, attrs = _context(character, improvements)
    return (
        math.ceil(attrs[A.BOD] / 2)
        + BASE_CONDITION_MONITOR
        + total_for(improvements, T.PHYSICAL_CM)
    )


def stun_cm(character: Character, improvements: list[Improvement] | None = None) -> int:
    """Stun condition monitor boxes: ceil(WIL / 2) + 8."""
    improvements, attrs = _context(character, improvements)
    return math.ceil(attrs[A.WIL] / 2) + BASE_CONDITION_MONITOR + total_for(improvements, T.STUN_CM)


def overflow(character: Character, improvements: list[Improvement] | None = None) -> int:
    _, attrs = _context(character, improvements)
    return attrs[A.BOD]


def wound_modifier(character: Character) -> int:
    """Dice-pool penalty: -1 per 3 boxes of combined physical and stun damage.

    Examples:
        3 physical -> -1
        6 physical, 3 stun -> -3
        No damage -> 0
    """
    damage = character.condition.physical_damage + character.condition.stun_damage
    return -(damage // 3)


def initiative(character: Character, improvements: list[Improvement] | None = None) -> int:
    improvements, attrs = _context(character, improvements)
    return attrs[A.REA] + attrs[A.INT] + total_for(improvements, T.INITIATIVE)


def initiative_dice(character: Character, improvements: list[Improvement] | None = None) -> int:
    if improvements is None:
        improvements = aggregate(character)
    return 1 + total_for(improvements, T.INITIATIVE_DICE)


def astral_initiative(character: Character, improvements: list[Improvement] | None = None) -> int:
    _, attrs = _context(character, improvements)
    return attrs[A.INT] * 2


def matrix_initiative(character: Character, improvements: list[Improvement] | None = None) -> int:
    _, attrs = _context(character, improvements)
    return attrs[A.INT] + attrs[A.RES]


def physical_limit(character: Character, improvements: list[Improvement] | None = None) -> int:
    """ceil((STR * 2 + BOD + REA) / 3)"""
    improvements, attrs = _context(character, improvements)
    base = math.ceil((attrs[A.STR] * 2 + attrs[A.BOD] + attrs[A.REA]) / 3)
    return base + total_for(improvements, T.PHYSICAL_LIMIT)


def mental_limit(character: Character, improvements: list[Improvement] | None = None) -> int:
    """ceil((LOG * 2 + INT + WIL) / 3)"""
    improvements, attrs = _context(character, improvements)
    base = math.ceil((attrs[A.LOG] * 2 + attrs[A.INT] + attrs[A.WIL]) / 3)
    return base + total_for(improvements, T.MENTAL_LIMIT)


def social_limit(character: Character, improvements: list[Improvement] | None = None) -> int:
    """ceil((CHA * 2 + WIL + floor(ESS)) / 3)"""
    improvements, attrs = _context(character, improvements)
    ess = math.floor(essence(character))
    base = math.ceil((attrs[A.CHA] * 2 + attrs[A.WIL] + ess) / 3)
    return base + total_for(improvements, T.SOCIAL_LIMIT)


def dice_pool(
    character: Character,
    skill_name: str,
    attribute: AttributeCode,
    improvements: list[Improvement] | None = None,
) -> int:
    """Calculate a skill + attribute dice pool.

    An unknown skill defaults to attribute - 1. The wound modifier applies
    either way, and the pool never drops below zero.

    Args:
        character: The character rolling
        skill_name: Active skill name, matched case-insensitively
        attribute: Linked attribute
        improvements: Pre-aggregated improvements

    Returns:
        Number of dice to roll
    """
    _, attrs = _context(character, improvements)
    attr = attrs[attribute]
    skill = character.find_skill(skill_name)

    if skill is None:
        pool = attr - 1
    else:
        pool = skill.rating + attr + skill.bonus

    return max(0, pool + wound_modifier(character))


def _layered(pieces: list[Armor]) -> tuple[int, int]:
    """Layer the two strongest armor pieces; anything beyond the second is ignored."""
    if not pieces:
        return 0, 0

    ranked = sorted(pieces, key=lambda piece: (piece.ballistic, piece.impact), reverse=True)
    primary = ranked[0]
    if len(ranked) == 1:
        return primary.ballistic, primary.impact

    secondary = ranked[1]
    return (
        primary.ballistic + secondary.ballistic // 2,
        primary.impact + secondary.impact // 2,
    )


def armor_totals(
    character: Character, improvements: list[Improvement] | None = None
) -> ArmorTotals:
    """Calculate worn armor ratings plus armor improvements.

    The highest-ballistic equipped piece counts in full and the runner-up at
    half (rounded down); impact pairs with those same two pieces. Encumbrance
    is how far worn ballistic armor exceeds Body.

    Examples:
        {8 ballistic, 6 impact} + {4, 3} -> ballistic 10, impact 7
    """
    improvements, attrs = _context(character, improvements)
    worn_ballistic, worn_impact = _layered(character.equipment.equipped_armor)

    return ArmorTotals(
        ballistic=worn_ballistic + total_for(improvements, T.ARMOR_BALLISTIC),
        impact=worn_impact + total_for(improvements, T.ARMOR_IMPACT),
        encumbrance=max(0, worn_ballistic - attrs[A.BOD]),
    )


def drain_resistance(character: Character, improvements: list[Improvement] | None = None) -> int:
    """WIL + LOG for hermetic and chaos traditions, WIL + CHA otherwise, 0 if mundane."""
    if character.magic is None:
        return 0

    _, attrs = _context(character, improvements)
    tradition = character.magic.tradition.lower()
    if "hermetic" in tradition or "chaos" in tradition:
        return attrs[A.WIL] + attrs[A.LOG]
    return attrs[A.WIL] + attrs[A.CHA]


def fading_resistance(character: Character, improvements: list[Improvement] | None = None) -> int:
    if character.resonance is None:
        return 0

    _, attrs = _context(character, improvements)
    return attrs[A.RES] + attrs[A.WIL]


def derive_all(character: Character, improvements: list[Improvement] | None = None) -> DerivedStats:
    """Calculate every derived value for a character in one call.

    Args:
        character: The character to calculate
        improvements: Pre-aggregated improvements; aggregated here if omitted

    Returns:
        DerivedStats snapshot
    """
    improvements, attrs = _context(character, improvements)
    armor = armor_totals(character, improvements)
    initiative_bonus = total_for(improvements, T.INITIATIVE)

    return DerivedStats(
        physical_cm=physical_cm(character, improvements),
        stun_cm=stun_cm(character, improvements),
        overflow=attrs[A.BOD],
        wound_modifier=wound_modifier(character),
        initiative=attrs[A.REA] + attrs[A.INT] + initiative_bonus,
        initiative_bonus=initiative_bonus,
        initiative_dice=initiative_dice(character, improvements),
        astral_initiative=attrs[A.INT] * 2,
        astral_initiative_dice=ASTRAL_INITIATIVE_DICE,
        matrix_initiative=attrs[A.INT] + attrs[A.RES],
        matrix_initiative_dice=MATRIX_INITIATIVE_DICE,
        walk=attrs[A.AGI] * 2,
        run=attrs[A.AGI] * 4,
        physical_limit=physical_limit(character, improvements),
        mental_limit=mental_limit(character, improvements),
        social_limit=social_limit(character, improvements),
        composure=attrs[A.CHA] + attrs[A.WIL] + total_for(improvements, T.COMPOSURE),
        judge_intentions=(
            attrs[A.CHA] + attrs[A.INT] + total_for(improvements, T.JUDGE_INTENTIONS)
        ),
        memory=attrs[A.LOG] + attrs[A.WIL] + total_for(improvements, T.MEMORY),
        lift_carry=attrs[A.BOD] + attrs[A.STR],
        defense=attrs[A.REA] + attrs[A.INT] + total_for(improvements, T.DEFENSE),
        dodge=dice_pool(character, "Dodge", A.REA, improvements),
        armor_ballistic=armor.ballistic,
        armor_impact=armor.impact,
        encumbrance=armor.encumbrance,
        damage_resistance_bonus=total_for(improvements, T.DAMAGE_RESISTANCE),
        spell_resistance_bonus=total_for(improvements, T.SPELL_RESISTANCE),
        drain_resistance=drain_resistance(character, improvements),
        fading_resistance=fading_resistance(character, improvements),
        essence=essence(character),
    )
