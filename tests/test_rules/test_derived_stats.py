"""Tests for derived statistics."""

import pytest

from runnerforge.models import (
    AdeptPower,
    Armor,
    AttributeCode,
    Bioware,
    Condition,
    Cyberware,
    Magic,
    Quality,
    Skill,
)
from runnerforge.rules.derived import (
    armor_totals,
    derive_all,
    dice_pool,
    drain_resistance,
    fading_resistance,
    initiative,
    initiative_dice,
    mental_limit,
    physical_cm,
    physical_limit,
    social_limit,
    stun_cm,
    wound_modifier,
)

A = AttributeCode


class TestConditionMonitors:
    """Tests for physical and stun condition monitors."""

    @pytest.mark.parametrize("bod,expected", [(1, 9), (2, 9), (3, 10), (4, 10), (5, 11), (6, 11)])
    def test_physical_cm(self, make_character, bod, expected):
        """Test physical CM is ceil(BOD / 2) + 8."""
        character = make_character(bod=bod)
        assert physical_cm(character) == expected
        assert physical_cm(character) == expected

    def test_stun_cm(self, make_character):
        """Test stun CM uses willpower."""
        assert stun_cm(make_character(wil=5)) == 11

    def test_toughness_adds_box(self, make_character):
        """Test Toughness adds a physical box."""
        character = make_character(bod=4, qualities=(Quality(name="Toughness"),))
        assert physical_cm(character) == 11

    def test_will_to_live_scales_with_rating(self, make_character):
        """Test Will to Live adds rating boxes but shares a source with Toughness."""
        character = make_character(
            bod=4,
            qualities=(Quality(name="Toughness"), Quality(name="Will to Live", rating=3)),
        )
        assert physical_cm(character) == 13


class TestWoundModifier:
    """Tests for the damage penalty."""

    @pytest.mark.parametrize(
        "physical,stun,expected",
        [(0, 0, 0), (2, 0, 0), (3, 0, -1), (6, 3, -3), (2, 2, -1)],
    )
    def test_wound_modifier(self, runner, physical, stun, expected):
        """Test -1 per 3 combined boxes of damage."""
        character = runner.with_changes(
            condition=Condition(physical_damage=physical, stun_damage=stun)
        )
        assert wound_modifier(character) == expected


class TestInitiative:
    """Tests for initiative score and dice."""

    def test_base_initiative(self, make_character):
        """Test initiative is REA + INT with one die."""
        character = make_character(rea=4, int=5)
        assert initiative(character) == 9
        assert initiative_dice(character) == 1

    def test_wired_reflexes(self, make_character):
        """Test Wired Reflexes adds initiative and dice."""
        character = make_character(rea=4, int=5).with_equipment(
            cyberware=(Cyberware(name="Wired Reflexes 2"),)
        )
        assert initiative(character) == 11
        assert initiative_dice(character) == 3

    def test_move_by_wire_raises_reaction_too(self, make_character):
        """Test Move-by-Wire bonus appears through both REA and initiative."""
        character = make_character(rea=4, int=5).with_equipment(
            cyberware=(Cyberware(name="Move-by-Wire 1"),)
        )
        # REA 5 + INT 5 + 2
        assert initiative(character) == 12
        assert initiative_dice(character) == 2

    def test_cyberware_and_adept_power_stack(self, make_character):
        """Test dice from different sources add."""
        character = make_character(
            magic=Magic(powers=(AdeptPower(name="Improved Reflexes", level=1),))
        ).with_equipment(cyberware=(Cyberware(name="Wired Reflexes 1"),))
        assert initiative_dice(character) == 3


class TestLimits:
    """Tests for physical, mental and social limits."""

    def test_physical_limit(self, make_character):
        """Test ceil((STR*2 + BOD + REA) / 3)."""
        assert physical_limit(make_character(str=4, bod=3, rea=3)) == 5

    def test_mental_limit(self, make_character):
        """Test ceil((LOG*2 + INT + WIL) / 3)."""
        assert mental_limit(make_character(log=5, int=3, wil=4)) == 6

    def test_social_limit_uses_floor_of_essence(self, make_character):
        """Test essence is floored before entering the social limit."""
        character = make_character(cha=3, wil=3).with_equipment(
            cyberware=(Cyberware(name="Datajack", essence=0.1),)
        )
        # ceil((6 + 3 + 5) / 3)
        assert social_limit(character) == 5
        assert social_limit(make_character(cha=3, wil=3)) == 5


class TestDicePool:
    """Tests for skill dice pools."""

    def test_skill_pool(self, make_character):
        """Test rating + attribute + bonus."""
        character = make_character(agi=4, skills=(Skill(name="Pistols", rating=3, bonus=2),))
        assert dice_pool(character, "pistols", A.AGI) == 9

    def test_defaulting(self, make_character):
        """Test an unknown skill defaults to attribute - 1."""
        assert dice_pool(make_character(agi=4), "Pistols", A.AGI) == 3

    def test_wound_modifier_applied(self, make_character):
        """Test damage reduces the pool."""
        character = make_character(
            agi=4,
            skills=(Skill(name="Pistols", rating=3),),
            condition=Condition(physical_damage=6),
        )
        assert dice_pool(character, "Pistols", A.AGI) == 5

    def test_floored_at_zero(self, make_character):
        """Test heavy wounds cannot make a pool negative."""
        character = make_character(agi=1, condition=Condition(physical_damage=9, stun_damage=9))
        assert dice_pool(character, "Pistols", A.AGI) == 0


class TestArmor:
    """Tests for armor layering."""

    def test_two_pieces(self, make_character):
        """Test the primary counts in full and the secondary at half."""
        character = make_character(bod=4).with_equipment(
            armor=(
                Armor(name="Helmet", ballistic=4, impact=3),
                Armor(name="Armor Jacket", ballistic=8, impact=6),
            )
        )
        totals = armor_totals(character)
        assert totals.ballistic == 10
        assert totals.impact == 7
        assert totals.encumbrance == 6

    def test_only_two_pieces_count(self, make_character):
        """Test a third equipped piece is ignored."""
        character = make_character(bod=10).with_equipment(
            armor=(
                Armor(name="Armor Jacket", ballistic=8, impact=6),
                Armor(name="Helmet", ballistic=4, impact=3),
                Armor(name="Shield", ballistic=2, impact=2),
            )
        )
        assert armor_totals(character).ballistic == 10

    def test_unequipped_ignored(self, make_character):
        character = make_character().with_equipment(
            armor=(Armor(name="Armor Jacket", ballistic=8, impact=6, equipped=False),)
        )
        totals = armor_totals(character)
        assert (totals.ballistic, totals.impact, totals.encumbrance) == (0, 0, 0)

    def test_dermal_plating_adds(self, make_character):
        """Test armor improvements add on top of worn armor."""
        character = make_character(bod=5).with_equipment(
            armor=(Armor(name="Armor Vest", ballistic=6, impact=4),),
            cyberware=(Cyberware(name="Dermal Plating 2"),),
        )
        totals = armor_totals(character)
        assert totals.ballistic == 8
        assert totals.impact == 6
        assert totals.encumbrance == 1

    def test_armor_sources_stack_across_categories(self, make_character):
        """Test cyberware and bioware armor add, two cyberware do not."""
        character = make_character().with_equipment(
            cyberware=(Cyberware(name="Dermal Plating 2"), Cyberware(name="Bone Lacing (Titanium)")),
            bioware=(Bioware(name="Orthoskin 1"),),
        )
        assert armor_totals(character).ballistic == 4


class TestMagicAndResonance:
    """Tests for drain and fading resistance."""

    def test_mundane_drain(self, runner):
        assert drain_resistance(runner) == 0

    def test_hermetic_drain(self, make_character):
        """Test hermetic drain uses WIL + LOG."""
        character = make_character(wil=4, log=5, cha=2, mag=3, magic=Magic(tradition="Hermetic"))
        assert drain_resistance(character) == 9

    def test_shamanic_drain(self, make_character):
        """Test shamanic drain uses WIL + CHA."""
        character = make_character(wil=4, log=5, cha=2, mag=3, magic=Magic(tradition="Shamanic"))
        assert drain_resistance(character) == 6

    def test_fading(self, technomancer, runner):
        """Test fading is RES + WIL for technomancers only."""
        assert fading_resistance(technomancer) == 7
        assert fading_resistance(runner) == 0


class TestDeriveAll:
    """Tests for the full snapshot."""

    def test_snapshot(self, make_character):
        """Test a snapshot combines every formula."""
        character = make_character(
            bod=4,
            agi=5,
            rea=4,
            str=3,
            cha=2,
            int=4,
            log=3,
            wil=3,
            qualities=(Quality(name="Magic Resistance", rating=1),),
        ).with_equipment(cyberware=(Cyberware(name="Wired Reflexes 1", essence=2.0),))

        stats = derive_all(character)

        assert stats.physical_cm == 10
        assert stats.stun_cm == 10
        assert stats.overflow == 4
        assert stats.initiative == 9
        assert stats.initiative_bonus == 1
        assert stats.initiative_dice == 2
        assert (stats.walk, stats.run) == (10, 20)
        assert stats.astral_initiative == 8
        assert stats.astral_initiative_dice == 2
        assert stats.matrix_initiative == 4
        assert stats.matrix_initiative_dice == 3
        assert stats.composure == 5
        assert stats.judge_intentions == 6
        assert stats.memory == 6
        assert stats.lift_carry == 7
        assert stats.defense == 8
        assert stats.dodge == 3
        assert stats.spell_resistance_bonus == 2
        assert stats.essence == pytest.approx(4.0)
        assert stats.drain_resistance == 0
        assert stats.fading_resistance == 0

    def test_combat_sense_raises_defense(self, make_character):
        """Test Combat Sense feeds defense rather than reaction."""
        character = make_character(
            rea=3, int=3, magic=Magic(powers=(AdeptPower(name="Combat Sense", level=2),))
        )
        stats = derive_all(character)
        assert stats.defense == 8
        assert stats.initiative == 6

    def test_pure(self, make_character):
        """Test repeated calls agree."""
        character = make_character().with_equipment(cyberware=(Cyberware(name="Wired Reflexes 2"),))
        assert derive_all(character) == derive_all(character)
