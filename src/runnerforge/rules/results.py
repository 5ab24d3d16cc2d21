"""Result type for copy-on-write character mutations."""

from dataclasses import dataclass

from runnerforge.models.character import Character


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a mutation.

    On failure ``character`` is the unchanged input and ``error`` says why.
    """

    success: bool
    character: Character
    error: str | None = None

    @classmethod
    def ok(cls, character: Character) -> "ActionResult":
        return cls(success=True, character=character)

    @classmethod
    def fail(cls, character: Character, error: str) -> "ActionResult":
        return cls(success=False, character=character, error=error)
