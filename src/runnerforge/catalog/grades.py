"""Augmentation grade tables.

Each grade scales an implant's essence cost, nuyen cost and availability.
"""

from dataclasses import dataclass

from runnerforge.models.item import Bioware, BiowareGrade, Cyberware, CyberwareGrade


@dataclass(frozen=True)
class GradeMultiplier:
    """Multipliers applied to an implant's base essence and nuyen cost."""

    name: str
    essence: float
    cost: float
    availability: int = 0


CYBERWARE_GRADES: dict[CyberwareGrade, GradeMultiplier] = {
    CyberwareGrade.STANDARD: GradeMultiplier("Standard", essence=1.0, cost=1),
    CyberwareGrade.ALPHAWARE: GradeMultiplier("Alphaware", essence=0.8, cost=2),
    CyberwareGrade.BETAWARE: GradeMultiplier("Betaware", essence=0.7, cost=4),
    CyberwareGrade.DELTAWARE: GradeMultiplier("Deltaware", essence=0.5, cost=10),
    CyberwareGrade.USED: GradeMultiplier("Used", essence=1.2, cost=0.5, availability=-1),
}

BIOWARE_GRADES: dict[BiowareGrade, GradeMultiplier] = {
    BiowareGrade.STANDARD: GradeMultiplier("Standard", essence=1.0, cost=1),
    BiowareGrade.CULTURED: GradeMultiplier("Cultured", essence=0.75, cost=4),
}


def grade_multiplier(
    item: Cyberware | Bioware, grade: CyberwareGrade | BiowareGrade | None = None
) -> GradeMultiplier | None:
    """
    Look up the multiplier for an implant's grade.

    Args:
        item: The implant being priced
        grade: Grade override; defaults to the item's own grade

    Returns:
        The GradeMultiplier, or None when the grade does not apply to the
        implant's kind (e.g. Cultured cyberware)
    """
    grade = grade if grade is not None else item.grade
    table: dict[str, GradeMultiplier] = (
        BIOWARE_GRADES if isinstance(item, Bioware) else CYBERWARE_GRADES
    )
    # Grade enums are str-valued, so a shared name like "Standard" resolves in both tables
    return table.get(grade)
