"""Equipment records: weapons, armor, augmentations, gear, vehicles and lifestyle."""

from enum import StrEnum

from pydantic import Field

from .base import FrozenModel, new_id


class CyberwareGrade(StrEnum):
    """Cyberware grades trading essence cost against nuyen cost."""

    STANDARD = "Standard"
    ALPHAWARE = "Alphaware"
    BETAWARE = "Betaware"
    DELTAWARE = "Deltaware"
    USED = "Used"


class BiowareGrade(StrEnum):
    """Bioware grades."""

    STANDARD = "Standard"
    CULTURED = "Cultured"


class Weapon(FrozenModel):
    """A weapon owned by a character."""

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    damage: str = ""
    ap: str = ""
    avail: str = ""
    cost: int = 0


class Armor(FrozenModel):
    """A piece of worn armor. Only equipped pieces count toward armor totals."""

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    ballistic: int = 0
    impact: int = 0
    equipped: bool = True
    avail: str = ""
    cost: int = 0


class Cyberware(FrozenModel):
    """
    An installed (or candidate) cyberware implant.

    Attributes:
        essence: Base essence cost before the grade multiplier
        cost: Nuyen cost paid at purchase (base cost for candidates)
        rating: Item rating, 0 when the item is unrated
        catalog_id: Stable effect-catalog key; falls back to name matching
        subsystems: Nested implants (e.g. cybereye enhancements)
    """

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    grade: CyberwareGrade = CyberwareGrade.STANDARD
    rating: int = 0
    essence: float = 0.0
    cost: int = 0
    avail: str = ""
    catalog_id: str | None = None
    subsystems: tuple["Cyberware", ...] = ()


class Bioware(FrozenModel):
    """An installed (or candidate) bioware implant."""

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    grade: BiowareGrade = BiowareGrade.STANDARD
    rating: int = 0
    essence: float = 0.0
    cost: int = 0
    avail: str = ""
    catalog_id: str | None = None


class Gear(FrozenModel):
    """Miscellaneous gear."""

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    rating: int = 0
    quantity: int = 1
    avail: str = ""
    cost: int = 0


class Vehicle(FrozenModel):
    """A vehicle or drone."""

    id: str = Field(default_factory=new_id)
    name: str
    category: str = ""
    avail: str = ""
    cost: int = 0


class Lifestyle(FrozenModel):
    """The character's lifestyle."""

    id: str = Field(default_factory=new_id)
    name: str
    level: str = ""
    monthly_cost: int = 0
    months_prepaid: int = 1


class Equipment(FrozenModel):
    """All equipment carried or installed on a character."""

    weapons: tuple[Weapon, ...] = ()
    armor: tuple[Armor, ...] = ()
    cyberware: tuple[Cyberware, ...] = ()
    bioware: tuple[Bioware, ...] = ()
    gear: tuple[Gear, ...] = ()
    vehicles: tuple[Vehicle, ...] = ()
    lifestyle: Lifestyle | None = None

    @property
    def equipped_armor(self) -> list[Armor]:
        """Armor pieces currently worn."""
        return [piece for piece in self.armor if piece.equipped]

    def all_cyberware(self) -> list[Cyberware]:
        """Installed cyberware flattened with its nested subsystems."""
        flattened: list[Cyberware] = []
        stack = list(reversed(self.cyberware))
        while stack:
            implant = stack.pop()
            flattened.append(implant)
            stack.extend(reversed(implant.subsystems))
        return flattened


Cyberware.model_rebuild()
