"""Tests for resources and karma pricing."""

import pytest

from runnerforge.models import CharacterMode
from runnerforge.rules.economy import (
    BP_TO_NUYEN_TIERS,
    KarmaCost,
    attribute_improvement_cost,
    bp_to_nuyen,
    format_nuyen,
    initiation_cost,
    knowledge_skill_improvement_cost,
    nuyen_to_bp,
    set_resources_bp,
    skill_group_improvement_cost,
    skill_improvement_cost,
)


class TestResourceTiers:
    """Tests for the BP to nuyen table."""

    @pytest.mark.parametrize(
        "bp,nuyen",
        [(0, 0), (5, 20_000), (10, 50_000), (20, 90_000), (30, 150_000), (40, 225_000), (50, 275_000)],
    )
    def test_tier_values(self, bp, nuyen):
        assert bp_to_nuyen(bp) == nuyen
        assert nuyen_to_bp(nuyen) == bp

    def test_between_tiers_rounds_down(self):
        """Test partial tiers buy the lower tier."""
        assert bp_to_nuyen(7) == 20_000
        assert bp_to_nuyen(4) == 0
        assert nuyen_to_bp(60_000) == 10

    def test_out_of_range(self):
        """Test negatives read as 0 and anything past 50 caps."""
        assert bp_to_nuyen(-5) == 0
        assert bp_to_nuyen(100) == bp_to_nuyen(50) == 275_000
        assert nuyen_to_bp(-1) == 0
        assert nuyen_to_bp(1_000_000) == 50

    def test_monotonic(self):
        """Test more BP never buys less nuyen."""
        values = [bp_to_nuyen(bp) for bp in range(-2, 60)]
        assert values == sorted(values)

    def test_tiers_ascending(self):
        thresholds = [bp for bp, _ in BP_TO_NUYEN_TIERS]
        assert thresholds == sorted(thresholds)


class TestKarmaCosts:
    """Tests for karma prices."""

    def test_constants(self):
        assert KarmaCost.NEW_SKILL == 4
        assert KarmaCost.NEW_SKILL_GROUP == 10
        assert KarmaCost.NEW_KNOWLEDGE_SKILL == 2
        assert KarmaCost.SPECIALIZATION == 2
        assert KarmaCost.NEW_SPELL == 5
        assert KarmaCost.NEW_COMPLEX_FORM == 5

    def test_improvement_costs(self):
        """Test rating-scaled costs use the new rating."""
        assert skill_improvement_cost(4) == 8
        assert skill_group_improvement_cost(3) == 15
        assert knowledge_skill_improvement_cost(5) == 5
        assert attribute_improvement_cost(5) == 25

    def test_initiation_cost(self):
        """Test 10 + grade x 3."""
        assert initiation_cost(1) == 13
        assert initiation_cost(3) == 19


class TestSetResources:
    """Tests for buying resources during creation."""

    def test_sets_nuyen_and_bp(self, runner):
        result = set_resources_bp(runner, 20)

        assert result.success
        assert result.character.starting_nuyen == 90_000
        assert result.character.nuyen == 90_000
        assert result.character.build_points_spent.resources == 20

    def test_clamped(self, runner):
        """Test BP outside 0-50 is clamped."""
        high = set_resources_bp(runner, 80).character
        assert high.build_points_spent.resources == 50
        assert high.starting_nuyen == 275_000

        low = set_resources_bp(runner, -3).character
        assert low.build_points_spent.resources == 0
        assert low.nuyen == 0

    def test_spent_money_stays_spent(self, runner):
        """Test changing resources shifts nuyen by the tier difference."""
        bought = set_resources_bp(runner, 10).character.with_changes(nuyen=30_000)
        updated = set_resources_bp(bought, 20).character
        assert updated.starting_nuyen == 90_000
        assert updated.nuyen == 70_000

    def test_career_rejected(self, runner):
        """Test resources cannot be bought after creation."""
        career = runner.with_changes(mode=CharacterMode.CAREER)
        result = set_resources_bp(career, 10)
        assert not result.success
        assert result.character is career


class TestFormatNuyen:
    @pytest.mark.parametrize(
        "amount,expected", [(0, "0¥"), (275_000, "275,000¥"), (-1500, "-1,500¥")]
    )
    def test_format(self, amount, expected):
        assert format_nuyen(amount) == expected
