"""Effect catalog: which stat bonuses an augmentation, quality or power grants.

Entries are keyed by a stable slug (``wired_reflexes``) and hold
rating-parameterized formulas. Records may carry that slug as ``catalog_id``;
records without one are matched by display name, where a trailing number is
read as the rating ("Wired Reflexes 2" -> ``wired_reflexes``, rating 2).
"""

import re
from dataclasses import dataclass
from enum import StrEnum


class ImprovementSource(StrEnum):
    """Coarse bonus category. Bonuses from one category do not stack."""

    CYBERWARE = "cyberware"
    BIOWARE = "bioware"
    QUALITY = "quality"
    ADEPT_POWER = "adept_power"
    GEAR = "gear"
    SPELL = "spell"
    SPIRIT = "spirit"
    FOCUS = "focus"


class ImprovementTarget(StrEnum):
    """Stats an improvement can modify."""

    BOD = "bod"
    AGI = "agi"
    REA = "rea"
    STR = "str"
    CHA = "cha"
    INT = "int"
    LOG = "log"
    WIL = "wil"
    EDG = "edg"
    MAG = "mag"
    RES = "res"
    INITIATIVE = "initiative"
    INITIATIVE_DICE = "initiative_dice"
    ARMOR_BALLISTIC = "armor_ballistic"
    ARMOR_IMPACT = "armor_impact"
    PHYSICAL_CM = "physical_cm"
    STUN_CM = "stun_cm"
    PHYSICAL_LIMIT = "physical_limit"
    MENTAL_LIMIT = "mental_limit"
    SOCIAL_LIMIT = "social_limit"
    DAMAGE_RESISTANCE = "damage_resistance"
    SPELL_RESISTANCE = "spell_resistance"
    MEMORY = "memory"
    COMPOSURE = "composure"
    JUDGE_INTENTIONS = "judge_intentions"
    DEFENSE = "defense"


@dataclass(frozen=True)
class RatingBonus:
    """Bonus of ``rating * per_rating``."""

    target: ImprovementTarget
    per_rating: int = 1
    conditional: str | None = None

    def value(self, rating: int) -> int:
        return rating * self.per_rating


@dataclass(frozen=True)
class FixedBonus:
    """Bonus that ignores rating."""

    target: ImprovementTarget
    amount: int
    conditional: str | None = None

    def value(self, rating: int) -> int:
        return self.amount


Formula = RatingBonus | FixedBonus


@dataclass(frozen=True)
class EffectDefinition:
    key: str
    name: str
    source: ImprovementSource
    formulas: tuple[Formula, ...]
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class EffectMatch:
    """A catalog hit plus the rating embedded in the record's name, if any."""

    definition: EffectDefinition
    embedded_rating: int | None = None


T = ImprovementTarget
S = ImprovementSource


def _rated_armor() -> tuple[Formula, ...]:
    return (RatingBonus(T.ARMOR_BALLISTIC), RatingBonus(T.ARMOR_IMPACT))


def _fixed_armor(amount: int) -> tuple[Formula, ...]:
    return (FixedBonus(T.ARMOR_BALLISTIC, amount), FixedBonus(T.ARMOR_IMPACT, amount))


_DEFINITIONS: tuple[EffectDefinition, ...] = (
    # Cyberware
    EffectDefinition(
        "wired_reflexes",
        "Wired Reflexes",
        S.CYBERWARE,
        (RatingBonus(T.INITIATIVE), RatingBonus(T.INITIATIVE_DICE)),
    ),
    EffectDefinition(
        "move_by_wire",
        "Move-by-Wire",
        S.CYBERWARE,
        (
            RatingBonus(T.INITIATIVE, per_rating=2),
            RatingBonus(T.INITIATIVE_DICE),
            RatingBonus(T.REA),
        ),
        aliases=("Move-by-Wire System",),
    ),
    EffectDefinition(
        "reaction_enhancers",
        "Reaction Enhancers",
        S.CYBERWARE,
        (RatingBonus(T.REA),),
        aliases=("Reaction Enhancer",),
    ),
    EffectDefinition(
        "muscle_replacement",
        "Muscle Replacement",
        S.CYBERWARE,
        (RatingBonus(T.STR), RatingBonus(T.AGI)),
    ),
    EffectDefinition("dermal_plating", "Dermal Plating", S.CYBERWARE, _rated_armor()),
    EffectDefinition(
        "bone_lacing_plastic", "Bone Lacing (Plastic)", S.CYBERWARE, _fixed_armor(1)
    ),
    EffectDefinition(
        "bone_lacing_aluminum", "Bone Lacing (Aluminum)", S.CYBERWARE, _fixed_armor(2)
    ),
    EffectDefinition(
        "bone_lacing_titanium", "Bone Lacing (Titanium)", S.CYBERWARE, _fixed_armor(3)
    ),
    # Bioware
    EffectDefinition(
        "synaptic_booster",
        "Synaptic Booster",
        S.BIOWARE,
        (RatingBonus(T.INITIATIVE), RatingBonus(T.INITIATIVE_DICE)),
    ),
    EffectDefinition("muscle_toner", "Muscle Toner", S.BIOWARE, (RatingBonus(T.AGI),)),
    EffectDefinition(
        "muscle_augmentation", "Muscle Augmentation", S.BIOWARE, (RatingBonus(T.STR),)
    ),
    EffectDefinition("cerebral_booster", "Cerebral Booster", S.BIOWARE, (RatingBonus(T.LOG),)),
    EffectDefinition(
        "mnemonic_enhancer", "Mnemonic Enhancer", S.BIOWARE, (RatingBonus(T.MEMORY),)
    ),
    EffectDefinition("orthoskin", "Orthoskin", S.BIOWARE, _rated_armor()),
    EffectDefinition(
        "platelet_factories",
        "Platelet Factories",
        S.BIOWARE,
        (FixedBonus(T.DAMAGE_RESISTANCE, 1),),
    ),
    EffectDefinition(
        "pain_editor",
        "Pain Editor",
        S.BIOWARE,
        (FixedBonus(T.DAMAGE_RESISTANCE, 2, conditional="Ignores wound modifiers"),),
    ),
    # Qualities
    EffectDefinition("toughness", "Toughness", S.QUALITY, (FixedBonus(T.PHYSICAL_CM, 1),)),
    EffectDefinition("will_to_live", "Will to Live", S.QUALITY, (RatingBonus(T.PHYSICAL_CM),)),
    EffectDefinition(
        "high_pain_tolerance",
        "High Pain Tolerance",
        S.QUALITY,
        (RatingBonus(T.DAMAGE_RESISTANCE, conditional="Reduces wound modifiers"),),
    ),
    EffectDefinition(
        "natural_immunity",
        "Natural Immunity",
        S.QUALITY,
        (FixedBonus(T.DAMAGE_RESISTANCE, 2, conditional="Toxin/disease resistance"),),
    ),
    EffectDefinition(
        "magic_resistance",
        "Magic Resistance",
        S.QUALITY,
        (RatingBonus(T.SPELL_RESISTANCE, per_rating=2),),
    ),
    EffectDefinition(
        "lucky", "Lucky", S.QUALITY, (FixedBonus(T.EDG, 1, conditional="One extra Edge point"),)
    ),
    # Adept powers
    EffectDefinition(
        "improved_reflexes",
        "Improved Reflexes",
        S.ADEPT_POWER,
        (RatingBonus(T.INITIATIVE), RatingBonus(T.INITIATIVE_DICE)),
    ),
    EffectDefinition(
        "combat_sense",
        "Combat Sense",
        S.ADEPT_POWER,
        (RatingBonus(T.DEFENSE, conditional="Defense and surprise tests only"),),
    ),
    EffectDefinition("mystic_armor", "Mystic Armor", S.ADEPT_POWER, _rated_armor()),
    EffectDefinition(
        "pain_resistance",
        "Pain Resistance",
        S.ADEPT_POWER,
        (RatingBonus(T.DAMAGE_RESISTANCE, conditional="Ignores wound modifiers"),),
    ),
)

EFFECT_CATALOG: dict[str, EffectDefinition] = {d.key: d for d in _DEFINITIONS}

_NAME_PATTERN = re.compile(
    r"^(?P<base>.*?)(?:\s*\(?\s*(?:rating\s*)?(?P<rating>\d+)\s*\)?)?\s*$", re.IGNORECASE
)
_NUMBER_PATTERN = re.compile(r"\d+")


def slugify(text: str) -> str:
    """Normalize a display name into a catalog key."""
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


def _build_name_index() -> dict[str, EffectDefinition]:
    index: dict[str, EffectDefinition] = {}
    for definition in _DEFINITIONS:
        for name in (definition.name, *definition.aliases):
            index[slugify(name)] = definition
    return index


_NAME_INDEX = _build_name_index()
# Longest names first so "bone_lacing_titanium" beats any shorter prefix
_PREFIXES = sorted(_NAME_INDEX, key=len, reverse=True)


def parse_item_name(name: str) -> tuple[str, int | None]:
    """
    Split a display name into its base name and embedded rating.

    Examples:
        >>> parse_item_name("Wired Reflexes 2")
        ('Wired Reflexes', 2)
        >>> parse_item_name("Will to Live (Rating 3)")
        ('Will to Live', 3)
        >>> parse_item_name("Bone Lacing (Titanium)")
        ('Bone Lacing (Titanium)', None)
    """
    match = _NAME_PATTERN.match(name.strip())
    if match is None or not match.group("base"):
        return name.strip(), None
    rating = match.group("rating")
    return match.group("base").strip(), int(rating) if rating is not None else None


def find_effect(name: str, catalog_id: str | None = None) -> EffectMatch | None:
    """
    Find the catalog entry for a record.

    Args:
        name: Display name of the item, quality or power
        catalog_id: Stable catalog key, checked before the name

    Returns:
        EffectMatch, or None when nothing in the catalog applies
    """
    base, rating = parse_item_name(name)

    if catalog_id is not None and catalog_id in EFFECT_CATALOG:
        return EffectMatch(EFFECT_CATALOG[catalog_id], rating)

    definition = _NAME_INDEX.get(slugify(base))
    if definition is not None:
        return EffectMatch(definition, rating)

    full_slug = slugify(name)
    for prefix in _PREFIXES:
        if full_slug == prefix or full_slug.startswith(prefix + "_"):
            remainder = full_slug[len(prefix) :]
            number = _NUMBER_PATTERN.search(remainder)
            return EffectMatch(_NAME_INDEX[prefix], int(number.group()) if number else None)

    return None
