"""Tests for the effect catalog and name matching."""

import pytest

from runnerforge.catalog.effects import (
    EFFECT_CATALOG,
    FixedBonus,
    ImprovementSource,
    ImprovementTarget,
    RatingBonus,
    find_effect,
    parse_item_name,
    slugify,
)


class TestParseItemName:
    """Tests for splitting display names."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Wired Reflexes 2", ("Wired Reflexes", 2)),
            ("Wired Reflexes (Rating 3)", ("Wired Reflexes", 3)),
            ("Will to Live (2)", ("Will to Live", 2)),
            ("Bone Lacing (Titanium)", ("Bone Lacing (Titanium)", None)),
            ("Toughness", ("Toughness", None)),
        ],
    )
    def test_parse(self, name, expected):
        """Test base name and trailing rating extraction."""
        assert parse_item_name(name) == expected


class TestSlugify:
    def test_slugify(self):
        """Test punctuation and case collapse to underscores."""
        assert slugify("Move-by-Wire") == "move_by_wire"
        assert slugify("Bone Lacing (Titanium)") == "bone_lacing_titanium"


class TestFindEffect:
    """Tests for catalog lookup."""

    def test_catalog_id_wins(self):
        """Test a stable catalog key is used regardless of display name."""
        match = find_effect("Custom Reflex Boosters", catalog_id="wired_reflexes")
        assert match.definition.key == "wired_reflexes"

    def test_name_with_embedded_rating(self):
        """Test 'Wired Reflexes 2' matches with rating 2."""
        match = find_effect("Wired Reflexes 2")
        assert match.definition.key == "wired_reflexes"
        assert match.embedded_rating == 2

    def test_exact_name_case_insensitive(self):
        """Test name matching ignores case."""
        match = find_effect("muscle toner")
        assert match.definition.key == "muscle_toner"
        assert match.embedded_rating is None

    def test_alias(self):
        """Test singular alias for Reaction Enhancers."""
        assert find_effect("Reaction Enhancer 1").definition.key == "reaction_enhancers"

    def test_longest_prefix(self):
        """Test a decorated name falls back to the longest known prefix."""
        match = find_effect("Wired Reflexes 2 (Alphaware)")
        assert match.definition.key == "wired_reflexes"
        assert match.embedded_rating == 2

    def test_bone_lacing_variants(self):
        """Test each bone lacing material has its own entry."""
        assert find_effect("Bone Lacing (Titanium)").definition.key == "bone_lacing_titanium"
        assert find_effect("Bone Lacing (Plastic)").definition.key == "bone_lacing_plastic"

    def test_unknown_name(self):
        """Test unknown items produce no match."""
        assert find_effect("Datajack") is None

    def test_prefix_requires_word_boundary(self):
        """Test 'Luckyshot' is not read as the Lucky quality."""
        assert find_effect("Luckyshot") is None


class TestCatalogContent:
    """Tests for formula definitions."""

    def test_move_by_wire_formulas(self):
        """Test Move-by-Wire gives initiative x2, dice and reaction."""
        definition = EFFECT_CATALOG["move_by_wire"]
        values = {formula.target: formula.value(2) for formula in definition.formulas}
        assert values == {
            ImprovementTarget.INITIATIVE: 4,
            ImprovementTarget.INITIATIVE_DICE: 2,
            ImprovementTarget.REA: 2,
        }

    def test_muscle_toner_is_bioware(self):
        """Test Muscle Toner is sourced as bioware."""
        assert EFFECT_CATALOG["muscle_toner"].source == ImprovementSource.BIOWARE

    def test_magic_resistance_doubles_rating(self):
        """Test Magic Resistance gives spell resistance rating x 2."""
        (formula,) = EFFECT_CATALOG["magic_resistance"].formulas
        assert isinstance(formula, RatingBonus)
        assert formula.value(3) == 6

    def test_fixed_bonus_ignores_rating(self):
        """Test fixed bonuses are constant."""
        formula = FixedBonus(ImprovementTarget.PHYSICAL_CM, 1)
        assert formula.value(1) == formula.value(5) == 1

    def test_combat_sense_targets_defense(self):
        """Test Combat Sense is a conditional defense bonus."""
        (formula,) = EFFECT_CATALOG["combat_sense"].formulas
        assert formula.target == ImprovementTarget.DEFENSE
        assert formula.conditional

    def test_keys_match_definitions(self):
        """Test each catalog key is its definition's key."""
        for key, definition in EFFECT_CATALOG.items():
            assert definition.key == key
