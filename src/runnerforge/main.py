"""Command-line entry point: load a character file and print its sheet."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from runnerforge.catalog.metatypes import CatalogLoadError, CatalogValidationError, get_metatype
from runnerforge.config import Settings, get_settings
from runnerforge.models.character import ATTRIBUTE_NAMES, Character
from runnerforge.rules.economy import format_nuyen
from runnerforge.rules.sheet import CharacterSheet, build_sheet

logger = structlog.get_logger(__name__)


class CharacterLoadError(Exception):
    """Raised when a character file cannot be read or does not describe a character."""

    pass


def configure_logging(settings: Settings) -> None:
    """Configure structlog from settings. Logs go to stderr so stdout stays parseable."""
    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def load_character_file(file_path: Path) -> Character:
    """
    Load a character from a YAML or JSON file.

    When the file gives no attribute limits, they are taken from the metatype
    catalog for the character's metatype.

    Args:
        file_path: Path to the character file

    Returns:
        The parsed Character

    Raises:
        CharacterLoadError: If the file is missing, unparseable or invalid
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise CharacterLoadError(f"File not found: {file_path}") from e
    except OSError as e:
        raise CharacterLoadError(f"Could not read {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CharacterLoadError(f"File is not valid UTF-8: {file_path}") from e
    except yaml.YAMLError as e:
        raise CharacterLoadError(f"Parsing error in {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise CharacterLoadError(f"Character file must contain a mapping: {file_path}")

    try:
        character = Character.model_validate(data)
    except ValidationError as e:
        raise CharacterLoadError(f"Invalid character in {file_path}: {e}") from e

    if "attribute_limits" not in data:
        metatype = get_metatype(character.identity.metatype)
        if metatype is not None:
            limits = {**character.attribute_limits, **metatype.attributes}
            character = character.with_changes(attribute_limits=limits)

    logger.info("character_loaded", path=str(file_path), character_id=character.id)
    return character


def format_sheet(sheet: CharacterSheet) -> str:
    """Render a sheet as plain text."""
    character = sheet.character
    stats = sheet.stats
    lines = [
        f"{character.name or 'Unnamed'} ({character.identity.metatype}, {character.mode})",
        "",
        "Attributes:",
    ]
    for code, value in sheet.attributes.items():
        lines.append(f"  {ATTRIBUTE_NAMES[code]:<10} {value}")

    lines += [
        "",
        f"Essence:            {stats.essence:.2f}",
        f"Initiative:         {stats.initiative} + {stats.initiative_dice}D6",
        f"Condition monitor:  {stats.physical_cm} physical / {stats.stun_cm} stun",
        f"Wound modifier:     {stats.wound_modifier}",
        f"Limits:             physical {stats.physical_limit}, mental {stats.mental_limit}, "
        f"social {stats.social_limit}",
        f"Armor:              {stats.armor_ballistic}/{stats.armor_impact}"
        f" (encumbrance {stats.encumbrance})",
        f"Movement:           {stats.walk}/{stats.run}",
        f"Nuyen:              {format_nuyen(character.nuyen)}",
        f"Karma:              {character.karma} (total {character.total_karma})",
    ]
    if character.magic is not None:
        lines.append(f"Drain resistance:   {stats.drain_resistance}")
    if character.resonance is not None:
        lines.append(f"Fading resistance:  {stats.fading_resistance}")

    validation = sheet.validation
    lines += [
        "",
        f"Validation: {'valid' if validation.valid else 'INVALID'} "
        f"({validation.errors} errors, {validation.warnings} warnings, {validation.info} info)",
    ]
    for issue in validation.issues:
        lines.append(f"  [{issue.severity}] {issue.code}: {issue.message}")

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runnerforge", description="Calculate and validate a character sheet"
    )
    parser.add_argument("character_file", type=Path, help="Character file (YAML or JSON)")
    parser.add_argument("--json", action="store_true", help="Print the sheet as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit status: 0 on success, 1 if the character could not be loaded
    """
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    try:
        character = load_character_file(args.character_file)
        sheet = build_sheet(character)
    except (CharacterLoadError, CatalogLoadError, CatalogValidationError) as e:
        logger.error("character_load_failed", path=str(args.character_file), error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(sheet.to_dict(), indent=2))
    else:
        print(format_sheet(sheet))

    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
