"""Bonus stacking.

Bonuses from the same source category do not stack: only the largest counts.
Bonuses from different categories add. So a character with two cyberware
initiative boosts uses the better one, but cyberware plus an adept power both
apply.
"""

from collections.abc import Iterable

from runnerforge.catalog.effects import ImprovementSource, ImprovementTarget
from runnerforge.rules.improvements import Improvement, improvements_for


def stacked_value(improvements: Iterable[Improvement]) -> int:
    """Reduce improvements to one number: max within each source, summed across sources.

    Examples:
        Two cyberware bonuses of 2 and 3 -> 3
        Cyberware 2 plus adept power 2 -> 4
        No improvements -> 0
    """
    best_by_source: dict[ImprovementSource, int] = {}
    for imp in improvements:
        current = best_by_source.get(imp.source)
        if current is None or imp.value > current:
            best_by_source[imp.source] = imp.value
    return sum(best_by_source.values())


def total_for(improvements: Iterable[Improvement], target: ImprovementTarget | str) -> int:
    """Get the stacked total of every improvement aimed at ``target``."""
    return stacked_value(improvements_for(improvements, target))


def totals(improvements: Iterable[Improvement]) -> dict[ImprovementTarget, int]:
    """Get stacked totals for every target that has at least one improvement."""
    by_target: dict[ImprovementTarget, list[Improvement]] = {}
    for imp in improvements:
        by_target.setdefault(imp.target, []).append(imp)
    return {target: stacked_value(group) for target, group in by_target.items()}
