"""Static reference data: metatypes, augmentation grades and the effect catalog."""

from .effects import (
    EFFECT_CATALOG,
    EffectDefinition,
    EffectMatch,
    FixedBonus,
    ImprovementSource,
    ImprovementTarget,
    RatingBonus,
    find_effect,
    parse_item_name,
)
from .grades import BIOWARE_GRADES, CYBERWARE_GRADES, GradeMultiplier, grade_multiplier
from .metatypes import (
    CatalogLoadError,
    CatalogValidationError,
    Metatype,
    get_metatype,
    load_metatypes,
)

__all__ = [
    "BIOWARE_GRADES",
    "CYBERWARE_GRADES",
    "EFFECT_CATALOG",
    "CatalogLoadError",
    "CatalogValidationError",
    "EffectDefinition",
    "EffectMatch",
    "FixedBonus",
    "GradeMultiplier",
    "ImprovementSource",
    "ImprovementTarget",
    "Metatype",
    "RatingBonus",
    "find_effect",
    "get_metatype",
    "grade_multiplier",
    "load_metatypes",
    "parse_item_name",
]
