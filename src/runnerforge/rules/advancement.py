"""Career-mode advancement: karma and nuyen awards, spending and improvement.

Every operation returns an ActionResult. Failed operations leave the character
unchanged. Karma and nuyen movements are recorded in the expense log.
"""

import structlog

from runnerforge.models.character import (
    AttributeCode,
    Character,
    CharacterMode,
    ExpenseEntry,
    ExpenseKind,
    KnowledgeSkill,
    Skill,
    Spell,
)
from runnerforge.rules.economy import (
    KarmaCost,
    attribute_improvement_cost,
    initiation_cost,
    knowledge_skill_improvement_cost,
    skill_improvement_cost,
)
from runnerforge.rules.results import ActionResult

logger = structlog.get_logger(__name__)

MAX_SKILL_RATING = 6
MAX_KNOWLEDGE_SKILL_RATING = 6


def _log_entry(
    character: Character, kind: ExpenseKind, amount: int, reason: str
) -> tuple[ExpenseEntry, ...]:
    return (*character.expense_log, ExpenseEntry(kind=kind, amount=amount, reason=reason))


def _require_career(character: Character) -> ActionResult | None:
    if not character.is_career:
        return ActionResult.fail(character, "Character is not in career mode")
    return None


def _spend_karma(character: Character, cost: int, reason: str, **changes) -> ActionResult:
    """Debit karma, apply the changes and log the spend."""
    if character.karma < cost:
        logger.debug(
            "karma_spend_rejected",
            character_id=character.id,
            cost=cost,
            karma=character.karma,
            reason=reason,
        )
        return ActionResult.fail(
            character, f"Not enough karma: {reason} costs {cost}, have {character.karma}"
        )

    updated = character.with_changes(
        karma=character.karma - cost,
        expense_log=_log_entry(character, ExpenseKind.KARMA, -cost, reason),
        **changes,
    )

    logger.info("karma_spent", character_id=character.id, cost=cost, reason=reason)
    return ActionResult.ok(updated)


def _replace(items: tuple, old, new) -> tuple:
    return tuple(new if item is old else item for item in items)


def enter_career_mode(character: Character) -> ActionResult:
    """Finish creation. Budgets and availability limits stop applying."""
    if character.is_career:
        return ActionResult.fail(character, "Character is already in career mode")

    logger.info("career_mode_entered", character_id=character.id)
    return ActionResult.ok(character.with_changes(mode=CharacterMode.CAREER))


def award_karma(character: Character, amount: int, reason: str = "") -> ActionResult:
    """Add karma to both the spendable pool and the lifetime total."""
    failure = _require_career(character)
    if failure is not None:
        return failure
    if amount <= 0:
        return ActionResult.fail(character, "Karma award must be positive")

    updated = character.with_changes(
        karma=character.karma + amount,
        total_karma=character.total_karma + amount,
        expense_log=_log_entry(character, ExpenseKind.KARMA, amount, reason),
    )

    logger.info("karma_awarded", character_id=character.id, amount=amount, reason=reason)
    return ActionResult.ok(updated)


def award_nuyen(character: Character, amount: int, reason: str = "") -> ActionResult:
    failure = _require_career(character)
    if failure is not None:
        return failure
    if amount <= 0:
        return ActionResult.fail(character, "Nuyen award must be positive")

    updated = character.with_changes(
        nuyen=character.nuyen + amount,
        expense_log=_log_entry(character, ExpenseKind.NUYEN, amount, reason),
    )

    logger.info("nuyen_awarded", character_id=character.id, amount=amount, reason=reason)
    return ActionResult.ok(updated)


def spend_nuyen(character: Character, amount: int, reason: str = "") -> ActionResult:
    failure = _require_career(character)
    if failure is not None:
        return failure
    if amount <= 0:
        return ActionResult.fail(character, "Nuyen spend must be positive")
    if amount > character.nuyen:
        return ActionResult.fail(
            character, f"Not enough nuyen: need {amount}, have {character.nuyen}"
        )

    updated = character.with_changes(
        nuyen=character.nuyen - amount,
        expense_log=_log_entry(character, ExpenseKind.NUYEN, -amount, reason),
    )

    logger.info("nuyen_spent", character_id=character.id, amount=amount, reason=reason)
    return ActionResult.ok(updated)


def improve_attribute(character: Character, code: AttributeCode) -> ActionResult:
    """
    Raise an attribute's base by one point.

    Costs new rating x 5 karma. The natural maximum from the metatype limits
    caps the base; Magic and Resonance need their sub-record.

    Args:
        character: The character in career mode
        code: Attribute to raise

    Returns:
        ActionResult with the updated character
    """
    failure = _require_career(character)
    if failure is not None:
        return failure
    if code == AttributeCode.MAG and not character.is_awakened:
        return ActionResult.fail(character, "Character is not awakened")
    if code == AttributeCode.RES and not character.is_technomancer:
        return ActionResult.fail(character, "Character is not a technomancer")

    current = character.attribute(code)
    new_rating = current.base + 1
    maximum = character.limits(code).max
    if new_rating > maximum:
        return ActionResult.fail(character, f"{code.upper()} is already at its maximum ({maximum})")

    cost = attribute_improvement_cost(new_rating)
    improved = current.with_changes(base=new_rating, karma=current.karma + cost)
    return _spend_karma(
        character,
        cost,
        f"Improve {code.upper()} to {new_rating}",
        attributes={**character.attributes, code: improved},
    )


def improve_skill(character: Character, skill_name: str) -> ActionResult:
    """Raise an active skill by one rating for new rating x 2 karma."""
    failure = _require_career(character)
    if failure is not None:
        return failure

    skill = character.find_skill(skill_name)
    if skill is None:
        return ActionResult.fail(character, f"Unknown skill: {skill_name}")

    new_rating = skill.rating + 1
    if new_rating > MAX_SKILL_RATING:
        return ActionResult.fail(
            character, f"{skill.name} is already at its maximum ({MAX_SKILL_RATING})"
        )

    return _spend_karma(
        character,
        skill_improvement_cost(new_rating),
        f"Improve {skill.name} to {new_rating}",
        skills=_replace(character.skills, skill, skill.with_changes(rating=new_rating)),
    )


def learn_new_skill(
    character: Character, skill_name: str, group: str | None = None
) -> ActionResult:
    """Learn an active skill at rating 1."""
    failure = _require_career(character)
    if failure is not None:
        return failure
    if character.find_skill(skill_name) is not None:
        return ActionResult.fail(character, f"Already has skill: {skill_name}")

    return _spend_karma(
        character,
        KarmaCost.NEW_SKILL,
        f"Learn {skill_name}",
        skills=(*character.skills, Skill(name=skill_name, rating=1, group=group)),
    )


def add_specialization(
    character: Character, skill_name: str, specialization: str
) -> ActionResult:
    failure = _require_career(character)
    if failure is not None:
        return failure

    skill = character.find_skill(skill_name)
    if skill is None:
        return ActionResult.fail(character, f"Unknown skill: {skill_name}")
    if skill.specialization:
        return ActionResult.fail(
            character, f"{skill.name} already has a specialization ({skill.specialization})"
        )

    return _spend_karma(
        character,
        KarmaCost.SPECIALIZATION,
        f"Specialize {skill.name} ({specialization})",
        skills=_replace(
            character.skills, skill, skill.with_changes(specialization=specialization)
        ),
    )


def learn_knowledge_skill(
    character: Character, skill_name: str, category: str = "Street"
) -> ActionResult:
    """Learn a knowledge skill at rating 1."""
    failure = _require_career(character)
    if failure is not None:
        return failure

    wanted = skill_name.lower()
    if any(known.name.lower() == wanted for known in character.knowledge_skills):
        return ActionResult.fail(character, f"Already has knowledge skill: {skill_name}")

    skill = KnowledgeSkill(name=skill_name, category=category, rating=1)
    return _spend_karma(
        character,
        KarmaCost.NEW_KNOWLEDGE_SKILL,
        f"Learn {skill_name}",
        knowledge_skills=(*character.knowledge_skills, skill),
    )


def improve_knowledge_skill(character: Character, skill_id: str) -> ActionResult:
    failure = _require_career(character)
    if failure is not None:
        return failure

    skill = next((known for known in character.knowledge_skills if known.id == skill_id), None)
    if skill is None:
        return ActionResult.fail(character, f"Unknown knowledge skill: {skill_id}")

    new_rating = skill.rating + 1
    if new_rating > MAX_KNOWLEDGE_SKILL_RATING:
        return ActionResult.fail(
            character, f"{skill.name} is already at its maximum ({MAX_KNOWLEDGE_SKILL_RATING})"
        )

    return _spend_karma(
        character,
        knowledge_skill_improvement_cost(new_rating),
        f"Improve {skill.name} to {new_rating}",
        knowledge_skills=_replace(
            character.knowledge_skills, skill, skill.with_changes(rating=new_rating)
        ),
    )


def learn_spell(character: Character, spell_name: str, category: str = "") -> ActionResult:
    """Learn a spell. Awakened characters only."""
    failure = _require_career(character)
    if failure is not None:
        return failure
    if character.magic is None:
        return ActionResult.fail(character, "Character is not awakened")

    wanted = spell_name.lower()
    if any(spell.name.lower() == wanted for spell in character.magic.spells):
        return ActionResult.fail(character, f"Already knows spell: {spell_name}")

    magic = character.magic.with_changes(
        spells=(*character.magic.spells, Spell(name=spell_name, category=category))
    )
    return _spend_karma(character, KarmaCost.NEW_SPELL, f"Learn spell {spell_name}", magic=magic)


def initiate(character: Character) -> ActionResult:
    """Raise initiate grade by one for 10 + new grade x 3 karma."""
    failure = _require_career(character)
    if failure is not None:
        return failure
    if character.magic is None:
        return ActionResult.fail(character, "Character is not awakened")

    new_grade = character.magic.initiate_grade + 1
    return _spend_karma(
        character,
        initiation_cost(new_grade),
        f"Initiate to grade {new_grade}",
        magic=character.magic.with_changes(initiate_grade=new_grade),
    )
