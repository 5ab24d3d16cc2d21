"""Tests for metatype catalog loading."""

from pathlib import Path

import pytest

from runnerforge.catalog.metatypes import (
    CatalogLoadError,
    CatalogValidationError,
    get_metatype,
    load_metatypes,
    load_yaml_file,
)
from runnerforge.models import AttributeCode


def write_yaml(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "metatypes.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestBundledCatalog:
    """Tests against the metatype data shipped with the package."""

    def test_loads_five_metatypes(self):
        """Test the bundled file holds the five core metatypes."""
        metatypes = load_metatypes()
        assert set(metatypes) == {"Human", "Elf", "Dwarf", "Ork", "Troll"}

    def test_troll_limits(self):
        """Test troll body limits and BP cost."""
        troll = load_metatypes()["Troll"]
        assert troll.bp == 40
        limits = troll.attributes[AttributeCode.BOD]
        assert (limits.min, limits.max, limits.aug) == (5, 10, 15)

    def test_every_metatype_has_consistent_limits(self):
        """Test min <= max <= aug for every attribute."""
        for metatype in load_metatypes().values():
            for limits in metatype.attributes.values():
                assert limits.min <= limits.max <= limits.aug

    def test_get_metatype_case_insensitive(self):
        """Test name lookup ignores case."""
        assert get_metatype("elf").name == "Elf"

    def test_get_metatype_unknown(self):
        """Test unknown names return None."""
        assert get_metatype("Centaur") is None

    def test_metatype_file_override(self, tmp_path, monkeypatch):
        """Test RUNNERFORGE_METATYPE_FILE points the catalog elsewhere."""
        path = write_yaml(
            tmp_path,
            "metatypes:\n"
            "  - name: Gnome\n"
            "    bp: 25\n"
            "    attributes:\n"
            "      bod: {min: 1, max: 4, aug: 6}\n",
        )
        monkeypatch.setenv("RUNNERFORGE_METATYPE_FILE", str(path))

        assert get_metatype("Gnome").bp == 25
        assert get_metatype("Human") is None


class TestLoadErrors:
    """Tests for malformed catalog files."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises CatalogLoadError."""
        with pytest.raises(CatalogLoadError, match="File not found"):
            load_yaml_file(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        """Test an empty file raises CatalogLoadError."""
        with pytest.raises(CatalogLoadError, match="Empty"):
            load_yaml_file(write_yaml(tmp_path, ""))

    def test_missing_key(self, tmp_path):
        """Test a file without the metatypes key is rejected."""
        with pytest.raises(CatalogLoadError, match="Missing 'metatypes'"):
            load_yaml_file(write_yaml(tmp_path, "races: []\n"))

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors are wrapped."""
        with pytest.raises(CatalogLoadError, match="YAML parsing error"):
            load_yaml_file(write_yaml(tmp_path, "metatypes: [unclosed\n"))

    def test_inconsistent_limits(self, tmp_path):
        """Test max above aug is rejected."""
        path = write_yaml(
            tmp_path,
            "metatypes:\n"
            "  - name: Broken\n"
            "    attributes:\n"
            "      bod: {min: 1, max: 8, aug: 6}\n",
        )
        with pytest.raises(CatalogValidationError, match="inconsistent limits"):
            load_metatypes(path)

    def test_unknown_attribute_code(self, tmp_path):
        """Test pydantic errors surface as CatalogValidationError."""
        path = write_yaml(
            tmp_path,
            "metatypes:\n"
            "  - name: Broken\n"
            "    attributes:\n"
            "      xyz: {min: 1, max: 6, aug: 9}\n",
        )
        with pytest.raises(CatalogValidationError, match="Failed to create metatype"):
            load_metatypes(path)

    def test_duplicate_names(self, tmp_path):
        """Test duplicate metatype names are rejected."""
        entry = "  - name: Human\n    attributes:\n      bod: {min: 1, max: 6, aug: 9}\n"
        path = write_yaml(tmp_path, "metatypes:\n" + entry + entry)
        with pytest.raises(CatalogValidationError, match="Duplicate"):
            load_metatypes(path)
