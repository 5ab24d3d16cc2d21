"""Essence ledger: augmentation essence costs and the install/remove gate.

Essence is never stored. It is recomputed from installed cyberware (with
nested subsystems) and bioware, which share a single 6.0 pool.
"""

import math

import structlog

from runnerforge.catalog.grades import grade_multiplier
from runnerforge.models.character import Character, ExpenseEntry, ExpenseKind
from runnerforge.models.item import Bioware, BiowareGrade, Cyberware, CyberwareGrade
from runnerforge.rules.results import ActionResult

logger = structlog.get_logger(__name__)

ESSENCE_MAX = 6.0
# Float noise from grade multipliers must not reject an exact fit
ESSENCE_TOLERANCE = 1e-9

Augmentation = Cyberware | Bioware
Grade = CyberwareGrade | BiowareGrade


def _essence_multiplier(item: Augmentation, grade: Grade | None = None) -> float:
    multiplier = grade_multiplier(item, grade)
    return multiplier.essence if multiplier is not None else 1.0


def essence_cost(item: Augmentation, grade: Grade | None = None) -> float:
    """Calculate the essence an implant consumes, including nested subsystems.

    Args:
        item: Cyberware or bioware
        grade: Grade override for the top-level item; subsystems use their own

    Returns:
        Grade-adjusted essence cost
    """
    cost = item.essence * _essence_multiplier(item, grade)
    if isinstance(item, Cyberware):
        cost += sum(essence_cost(sub) for sub in item.subsystems)
    return cost


def essence(character: Character) -> float:
    """Calculate a character's current essence."""
    spent = sum(essence_cost(implant) for implant in character.equipment.cyberware)
    spent += sum(essence_cost(implant) for implant in character.equipment.bioware)
    return round(ESSENCE_MAX - spent, 6)


def nuyen_cost(item: Augmentation, grade: Grade | None = None) -> int:
    """Grade-adjusted nuyen price of a single implant, rounded down."""
    multiplier = grade_multiplier(item, grade)
    factor = multiplier.cost if multiplier is not None else 1
    return math.floor(item.cost * factor)


def _priced(item: Augmentation, grade: Grade | None = None) -> Augmentation:
    """Copy of an implant with its grade set and cost replaced by the price paid."""
    changes: dict = {"cost": nuyen_cost(item, grade)}
    if grade is not None:
        changes["grade"] = grade
    if isinstance(item, Cyberware):
        changes["subsystems"] = tuple(_priced(sub) for sub in item.subsystems)
    return item.with_changes(**changes)


def _tree_cost(item: Augmentation) -> int:
    if isinstance(item, Cyberware):
        return item.cost + sum(_tree_cost(sub) for sub in item.subsystems)
    return item.cost


def _record_expense(character: Character, amount: int, reason: str) -> tuple[ExpenseEntry, ...]:
    if not character.is_career:
        return character.expense_log
    entry = ExpenseEntry(kind=ExpenseKind.NUYEN, amount=amount, reason=reason)
    return (*character.expense_log, entry)


def try_install(
    character: Character, item: Augmentation, grade: Grade | None = None
) -> ActionResult:
    """Install cyberware or bioware if essence and nuyen allow it.

    Checks happen before anything is committed: on failure the returned result
    carries the unchanged character.

    Args:
        character: The character receiving the implant
        item: Candidate implant with its base essence and base cost
        grade: Grade to install at; defaults to the item's own grade

    Returns:
        ActionResult with the updated character, or the reason for refusal
    """
    kind = "bioware" if isinstance(item, Bioware) else "cyberware"
    grade = grade if grade is not None else item.grade

    if grade_multiplier(item, grade) is None:
        logger.debug("augmentation_rejected", character_id=character.id, reason="invalid_grade")
        return ActionResult.fail(character, f"Grade {grade} is not available for {kind}")
    grade = BiowareGrade(grade) if isinstance(item, Bioware) else CyberwareGrade(grade)

    cost = essence_cost(item, grade)
    current = essence(character)
    if current - cost < -ESSENCE_TOLERANCE:
        logger.debug(
            "augmentation_rejected",
            character_id=character.id,
            reason="insufficient_essence",
            essence=current,
            essence_cost=cost,
        )
        return ActionResult.fail(
            character,
            f"Insufficient essence: {item.name} costs {cost:.2f}, {current:.2f} remaining",
        )

    installed = _priced(item, grade)
    price = _tree_cost(installed)
    if price > character.nuyen:
        logger.debug(
            "augmentation_rejected",
            character_id=character.id,
            reason="insufficient_nuyen",
            nuyen=character.nuyen,
            price=price,
        )
        return ActionResult.fail(
            character, f"Insufficient nuyen: {item.name} costs {price}¥, have {character.nuyen}¥"
        )

    equipment = character.equipment
    if isinstance(installed, Bioware):
        equipment = equipment.with_changes(bioware=(*equipment.bioware, installed))
    else:
        equipment = equipment.with_changes(cyberware=(*equipment.cyberware, installed))

    updated = character.with_changes(
        equipment=equipment,
        nuyen=character.nuyen - price,
        expense_log=_record_expense(character, -price, f"Installed {item.name}"),
    )

    logger.info(
        "augmentation_installed",
        character_id=character.id,
        item=item.name,
        kind=kind,
        grade=str(grade),
        essence_cost=cost,
        price=price,
    )

    return ActionResult.ok(updated)


def _without(
    implants: tuple[Cyberware, ...], item_id: str
) -> tuple[tuple[Cyberware, ...], Cyberware | None]:
    """Remove one implant (at any nesting depth) from a cyberware tree."""
    kept: list[Cyberware] = []
    removed: Cyberware | None = None
    for implant in implants:
        if removed is None and implant.id == item_id:
            removed = implant
            continue
        if removed is None and implant.subsystems:
            subsystems, found = _without(implant.subsystems, item_id)
            if found is not None:
                removed = found
                implant = implant.with_changes(subsystems=subsystems)
        kept.append(implant)
    return tuple(kept), removed


def remove_augmentation(character: Character, item_id: str) -> ActionResult:
    """Remove an installed implant and refund what was paid for it.

    Removing a cyberware item also removes its subsystems. Essence recovers
    automatically since it is derived from what remains installed.

    Args:
        character: The character to update
        item_id: Id of the cyberware, cyberware subsystem or bioware to remove

    Returns:
        ActionResult with the updated character, or an error if nothing matched
    """
    equipment = character.equipment
    cyberware, removed = _without(equipment.cyberware, item_id)
    removed_item: Augmentation | None = removed

    if removed is not None:
        equipment = equipment.with_changes(cyberware=cyberware)
    else:
        bioware = tuple(implant for implant in equipment.bioware if implant.id != item_id)
        if len(bioware) == len(equipment.bioware):
            return ActionResult.fail(character, f"No installed augmentation with id {item_id}")
        removed_item = next(implant for implant in equipment.bioware if implant.id == item_id)
        equipment = equipment.with_changes(bioware=bioware)

    refund = _tree_cost(removed_item)
    updated = character.with_changes(
        equipment=equipment,
        nuyen=character.nuyen + refund,
        expense_log=_record_expense(character, refund, f"Removed {removed_item.name}"),
    )

    logger.info(
        "augmentation_removed",
        character_id=character.id,
        item=removed_item.name,
        refund=refund,
    )

    return ActionResult.ok(updated)
