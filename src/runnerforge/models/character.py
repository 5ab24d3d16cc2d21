"""Character record: the aggregate root every rules calculation reads from.

Characters are immutable. Every change produces a new value through
``with_changes`` (copy-on-write); nothing in the engine edits a record in place.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import Field, model_validator

from .base import FrozenModel, new_id
from .item import Equipment

if TYPE_CHECKING:
    from runnerforge.config import Settings


class AttributeCode(StrEnum):
    """Attribute codes used throughout the rules."""

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


PHYSICAL_ATTRIBUTES = (AttributeCode.BOD, AttributeCode.AGI, AttributeCode.REA, AttributeCode.STR)
MENTAL_ATTRIBUTES = (AttributeCode.CHA, AttributeCode.INT, AttributeCode.LOG, AttributeCode.WIL)
CORE_ATTRIBUTES = PHYSICAL_ATTRIBUTES + MENTAL_ATTRIBUTES + (AttributeCode.EDG,)

ATTRIBUTE_NAMES = {
    AttributeCode.BOD: "Body",
    AttributeCode.AGI: "Agility",
    AttributeCode.REA: "Reaction",
    AttributeCode.STR: "Strength",
    AttributeCode.CHA: "Charisma",
    AttributeCode.INT: "Intuition",
    AttributeCode.LOG: "Logic",
    AttributeCode.WIL: "Willpower",
    AttributeCode.EDG: "Edge",
    AttributeCode.MAG: "Magic",
    AttributeCode.RES: "Resonance",
}


class CharacterMode(StrEnum):
    """Lifecycle mode. Budgets and availability only apply during creation."""

    CREATION = "creation"
    CAREER = "career"


class QualityCategory(StrEnum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"


class ExpenseKind(StrEnum):
    KARMA = "karma"
    NUYEN = "nuyen"


class AttributeValue(FrozenModel):
    """
    One attribute's components.

    ``karma`` records how much karma was spent raising the attribute; it is
    provenance only and never part of the total.
    """

    base: int = 0
    bonus: int = 0
    karma: int = 0

    @model_validator(mode="before")
    @classmethod
    def _from_bare_int(cls, data: Any) -> Any:
        # Character files may write an attribute as just its base: `bod: 6`
        if isinstance(data, int) and not isinstance(data, bool):
            return {"base": data}
        return data

    @property
    def total(self) -> int:
        return self.base + self.bonus


class AttributeLimits(FrozenModel):
    """Metatype limits for one attribute: natural min/max and augmented max."""

    min: int = 1
    max: int = 6
    aug: int = 9


def default_attribute_limits() -> dict[AttributeCode, AttributeLimits]:
    """Human attribute limits, used until a metatype is selected."""
    limits = {code: AttributeLimits() for code in PHYSICAL_ATTRIBUTES + MENTAL_ATTRIBUTES}
    limits[AttributeCode.EDG] = AttributeLimits(min=2, max=7, aug=7)
    limits[AttributeCode.MAG] = AttributeLimits(min=1, max=6, aug=6)
    limits[AttributeCode.RES] = AttributeLimits(min=1, max=6, aug=6)
    return limits


def default_attributes() -> dict[AttributeCode, AttributeValue]:
    """Core attributes at their human minimum."""
    limits = default_attribute_limits()
    return {code: AttributeValue(base=limits[code].min) for code in CORE_ATTRIBUTES}


class Identity(FrozenModel):
    name: str = ""
    alias: str = ""
    metatype: str = "Human"
    metavariant: str | None = None


class Skill(FrozenModel):
    """An active skill. ``bonus`` is a flat dice-pool modifier."""

    name: str
    rating: int = 0
    bonus: int = 0
    group: str | None = None
    specialization: str | None = None


class KnowledgeSkill(FrozenModel):
    id: str = Field(default_factory=new_id)
    name: str
    category: str = "Street"
    rating: int = 1


class Quality(FrozenModel):
    """A positive or negative quality. ``bp`` is negative for negative qualities."""

    id: str = Field(default_factory=new_id)
    name: str
    category: QualityCategory = QualityCategory.POSITIVE
    bp: int = 0
    rating: int = 1
    catalog_id: str | None = None


class Contact(FrozenModel):
    id: str = Field(default_factory=new_id)
    name: str
    loyalty: int = 1
    connection: int = 1


class AdeptPower(FrozenModel):
    id: str = Field(default_factory=new_id)
    name: str
    points: float = 0.0
    level: int = 1
    catalog_id: str | None = None


class Spell(FrozenModel):
    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""


class Magic(FrozenModel):
    """Magic sub-record; present only for awakened characters."""

    tradition: str = ""
    initiate_grade: int = 0
    power_points: float = 0.0
    powers: tuple[AdeptPower, ...] = ()
    spells: tuple[Spell, ...] = ()

    @property
    def power_points_used(self) -> float:
        return sum(power.points for power in self.powers)


class ComplexForm(FrozenModel):
    id: str = Field(default_factory=new_id)
    name: str
    rating: int = 1


class Resonance(FrozenModel):
    """Resonance sub-record; present only for technomancers."""

    stream: str = ""
    submersion_grade: int = 0
    complex_forms: tuple[ComplexForm, ...] = ()


class Condition(FrozenModel):
    """Damage boxes currently filled."""

    physical_damage: int = 0
    stun_damage: int = 0


class CharacterSettings(FrozenModel):
    max_availability: int = 12
    allow_forbidden: bool = False


class BuildPointAllocation(FrozenModel):
    """How build points have been distributed during creation."""

    metatype: int = 0
    attributes: int = 0
    skills: int = 0
    skill_groups: int = 0
    knowledge_skills: int = 0
    qualities: int = 0
    spells: int = 0
    complex_forms: int = 0
    contacts: int = 0
    resources: int = 0
    mentor: int = 0
    martial_arts: int = 0

    @property
    def total(self) -> int:
        return sum(self.model_dump().values())


class ExpenseEntry(FrozenModel):
    """A career-mode karma or nuyen transaction."""

    id: str = Field(default_factory=new_id)
    kind: ExpenseKind
    amount: int
    reason: str = ""


class Character(FrozenModel):
    """
    A complete character record.

    Attributes:
        attributes: Raw attribute block keyed by code; missing codes read as 0
        attribute_limits: Metatype limits keyed by code
        magic: None for mundane characters
        resonance: None for non-technomancers
        nuyen: Currency remaining; starting_nuyen is what resources bought
        karma: Unspent karma; total_karma is lifetime karma earned
    """

    id: str = Field(default_factory=new_id)
    identity: Identity = Field(default_factory=Identity)
    mode: CharacterMode = CharacterMode.CREATION

    build_points: int = 400
    build_points_spent: BuildPointAllocation = Field(default_factory=BuildPointAllocation)

    attributes: dict[AttributeCode, AttributeValue] = Field(default_factory=default_attributes)
    attribute_limits: dict[AttributeCode, AttributeLimits] = Field(
        default_factory=default_attribute_limits
    )

    skills: tuple[Skill, ...] = ()
    knowledge_skills: tuple[KnowledgeSkill, ...] = ()
    qualities: tuple[Quality, ...] = ()
    contacts: tuple[Contact, ...] = ()

    magic: Magic | None = None
    resonance: Resonance | None = None

    equipment: Equipment = Field(default_factory=Equipment)
    condition: Condition = Field(default_factory=Condition)

    nuyen: int = 0
    starting_nuyen: int = 0
    karma: int = 0
    total_karma: int = 0

    settings: CharacterSettings = Field(default_factory=CharacterSettings)
    expense_log: tuple[ExpenseEntry, ...] = ()

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def is_career(self) -> bool:
        return self.mode == CharacterMode.CAREER

    @property
    def is_awakened(self) -> bool:
        return self.magic is not None

    @property
    def is_technomancer(self) -> bool:
        return self.resonance is not None

    def attribute(self, code: AttributeCode) -> AttributeValue:
        """Get an attribute's components, reading missing attributes as zero."""
        return self.attributes.get(code, AttributeValue())

    def limits(self, code: AttributeCode) -> AttributeLimits:
        """Get an attribute's metatype limits."""
        return self.attribute_limits.get(code, AttributeLimits())

    def find_skill(self, name: str) -> Skill | None:
        """Find an active skill by case-insensitive name."""
        wanted = name.lower()
        for skill in self.skills:
            if skill.name.lower() == wanted:
                return skill
        return None

    def with_attribute(self, code: AttributeCode, value: AttributeValue) -> "Character":
        """Return a copy with one attribute replaced."""
        return self.with_changes(attributes={**self.attributes, code: value})

    def with_equipment(self, **changes) -> "Character":
        """Return a copy with equipment fields replaced."""
        return self.with_changes(equipment=self.equipment.with_changes(**changes))


def new_character(name: str = "", settings: "Settings | None" = None) -> Character:
    """
    Create a fresh character in creation mode.

    Args:
        name: Character name
        settings: Settings to seed build points and creation limits from

    Returns:
        A new Character with human attribute minimums
    """
    if settings is None:
        from runnerforge.config import get_settings

        settings = get_settings()

    return Character(
        identity=Identity(name=name),
        build_points=settings.default_build_points,
        settings=CharacterSettings(
            max_availability=settings.default_max_availability,
            allow_forbidden=settings.default_allow_forbidden,
        ),
    )
