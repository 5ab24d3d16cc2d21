"""Shared fixtures for all tests."""

import pytest

from runnerforge.catalog.metatypes import _cached_metatypes
from runnerforge.config import Settings, get_settings
from runnerforge.models import (
    AttributeCode,
    AttributeValue,
    Character,
    CharacterMode,
    Magic,
    Resonance,
    new_character,
)


@pytest.fixture(autouse=True)
def reset_caches():
    """Clear cached settings and catalog data so env overrides in one test don't leak."""
    get_settings.cache_clear()
    _cached_metatypes.cache_clear()
    yield
    get_settings.cache_clear()
    _cached_metatypes.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with default values, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def make_character(settings):
    """Factory for characters with chosen attribute bases.

    Unspecified core attributes default to 3.

    Example:
        make_character(bod=5, wil=2, nuyen=10000)
    """

    def _make(
        name: str = "Test Runner",
        mode: CharacterMode = CharacterMode.CREATION,
        **fields,
    ) -> Character:
        character = new_character(name, settings=settings)
        attributes = {code: AttributeValue(base=3) for code in character.attributes}

        for code in AttributeCode:
            if code.value in fields:
                attributes[code] = AttributeValue(base=fields.pop(code.value))

        return character.with_changes(attributes=attributes, mode=mode, **fields)

    return _make


@pytest.fixture
def runner(make_character) -> Character:
    """A mundane creation-mode character with every core attribute at 3."""
    return make_character()


@pytest.fixture
def career_runner(make_character) -> Character:
    """A career-mode character with karma and nuyen to spend."""
    return make_character(mode=CharacterMode.CAREER, karma=100, total_karma=100, nuyen=50_000)


@pytest.fixture
def hermetic_mage(make_character) -> Character:
    """An awakened character following a hermetic tradition."""
    return make_character(mag=4, magic=Magic(tradition="Hermetic"))


@pytest.fixture
def technomancer(make_character) -> Character:
    return make_character(res=4, resonance=Resonance(stream="Cyberadept"))
