"""Enumeration of candidate bullet combinations for a single story."""

from itertools import combinations
from typing import List, Sequence, Tuple

from resume_planner.contexts.targeting.data_structures import Bullet


def generate_bullet_combinations(bullets: Sequence[Bullet]) -> List[Tuple[Bullet, ...]]:
    """
    Generate every non-empty subset of a story's bullets.

    Subsets are arbitrary (not only contiguous runs) and keep the story's bullet
    order. They are produced smallest first, then by position, so the singletons
    come first and the full story comes last.

    The result has 2^n - 1 entries; callers are responsible for bounding n.

    Args:
        bullets: The story's bullets in authored order

    Returns:
        List of combinations (empty when there are no bullets)

    Example:
        >>> [[b.id for b in c] for c in generate_bullet_combinations([a, b, c])]
        [['a'], ['b'], ['c'], ['a', 'b'], ['a', 'c'], ['b', 'c'], ['a', 'b', 'c']]
    """
    bullets = tuple(bullets)
    return [
        combo
        for size in range(1, len(bullets) + 1)
        for combo in combinations(bullets, size)
    ]
