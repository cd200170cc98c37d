"""
Hybrid Selection (Greedy + Knapsack)

Two-phase selection:
1. Greedy phase: spends floor(max_lines * skill_match_ratio) lines on the bullets
   that best match target skills.
2. Knapsack phase: fills the remaining lines with the highest-value coherent
   combinations from the bullets the greedy phase left behind.

Bullet budget: unless the caller passes max_bullets, the knapsack phase runs
with config.phase2_bullet_cap (1000 by default), so the combined selection is
not held to any bullet budget. Passing max_bullets counts greedy picks against
it and gives the knapsack phase only what remains.
"""

import math
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set

from resume_planner.contexts.targeting.config import DEFAULT_CONFIG, SelectionConfig
from resume_planner.contexts.targeting.data_structures import (
    RankedStory,
    SelectionResult,
    SkillTargets,
    Story,
    StorySelection,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.greedy import select_greedy
from resume_planner.contexts.targeting.knapsack import solve_knapsack
from resume_planner.contexts.targeting.logger import (
    _log_debug,
    _log_warning,
    log_selection_result,
)
from resume_planner.contexts.targeting.scoring import (
    build_story_values,
    covered_skill_names,
    estimate_lines,
)


def split_line_budget(max_lines: int, skill_match_ratio: float) -> int:
    """Lines given to the greedy phase."""
    return int(math.floor(max_lines * skill_match_ratio))


def count_selected_lines(
    selections: Sequence[StorySelection],
    stories: Sequence[Story],
    config: SelectionConfig = DEFAULT_CONFIG,
) -> int:
    """Total estimated lines of the selected bullets (unknown IDs count nothing)."""
    lengths = {
        (story.id, bullet.id): bullet.length_chars for story in stories for bullet in story.bullets
    }
    return sum(
        estimate_lines(lengths[(sel.story_id, bid)], config.chars_per_line)
        for sel in selections
        for bid in sel.bullet_ids
        if (sel.story_id, bid) in lengths
    )


def filter_used_bullets(stories: Sequence[Story], used: Set[str]) -> List[Story]:
    """Stories with already-used bullets removed; stories left empty are dropped."""
    filtered = []
    for story in stories:
        remaining = tuple(b for b in story.bullets if b.id not in used)
        if remaining:
            filtered.append(replace(story, bullets=remaining))
    return filtered


def merge_selections(
    stories: Sequence[Story], *phases: Sequence[StorySelection]
) -> List[StorySelection]:
    """
    Combine per-story bullet lists from several phases.

    Bullet IDs are concatenated in phase order; stories follow the input story order.
    """
    merged: Dict[str, List[str]] = {}
    for selections in phases:
        for sel in selections:
            merged.setdefault(sel.story_id, []).extend(sel.bullet_ids)

    ordered = []
    for story in stories:
        if story.id in merged:
            ordered.append(StorySelection(story.id, tuple(merged.pop(story.id))))
    # Selections for IDs outside the story list keep their discovery order
    ordered.extend(StorySelection(sid, tuple(ids)) for sid, ids in merged.items())
    return ordered


def select_hybrid(
    stories: Sequence[Story],
    ranked_stories: Sequence[RankedStory],
    skill_targets: Optional[SkillTargets],
    max_lines: int,
    skill_match_ratio: float = DEFAULT_CONFIG.skill_match_ratio,
    max_bullets: Optional[int] = None,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> SelectionResult:
    """
    Select bullets with a greedy skill pass followed by a knapsack value pass.

    Args:
        stories: Candidate stories, in priority order
        ranked_stories: Relevance rankings; every story needs one
        skill_targets: Optional job skill targets
        max_lines: Total line budget
        skill_match_ratio: Share of max_lines for the greedy phase (0-1)
        max_bullets: Optional bullet budget enforced across both phases
        config: Selection weights and limits

    Returns:
        Merged SelectionResult; score is greedy score + knapsack score.
        If the knapsack phase is skipped, fits nothing, or fails, the greedy
        result is returned unchanged.

    Raises:
        SelectionError: On malformed input (no stories, non-positive budgets,
                        ratio outside 0-1, duplicate or unranked stories)
    """
    if not stories:
        raise SelectionError("No stories to select from")
    if max_lines <= 0:
        raise SelectionError(f"max_lines must be positive, got: {max_lines}")
    if max_bullets is not None and max_bullets <= 0:
        raise SelectionError(f"max_bullets must be positive, got: {max_bullets}")
    if not 0.0 <= skill_match_ratio <= 1.0:
        raise SelectionError(f"skill_match_ratio must be between 0 and 1, got: {skill_match_ratio}")

    ranked_by_id = {r.story_id: r for r in ranked_stories}
    seen = set()
    for story in stories:
        if story.id in seen:
            raise SelectionError("Duplicate story ID", story_id=story.id)
        if story.id not in ranked_by_id:
            raise SelectionError("Story has no relevance ranking", story_id=story.id)
        seen.add(story.id)

    # Phase 1: greedy skill matching
    greedy_budget = split_line_budget(max_lines, skill_match_ratio)
    greedy = select_greedy(
        stories, ranked_stories, skill_targets, greedy_budget, max_bullets=max_bullets, config=config
    )
    used_lines = count_selected_lines(greedy.selections, stories, config)
    log_selection_result("greedy", greedy, used_lines)

    remaining_lines = max_lines - used_lines
    if remaining_lines <= 0:
        _log_debug("hybrid: greedy phase used the whole line budget; skipping knapsack phase")
        return greedy

    if max_bullets is None:
        remaining_bullets = config.phase2_bullet_cap
    else:
        remaining_bullets = max_bullets - len(greedy.bullet_ids)
        if remaining_bullets <= 0:
            _log_debug("hybrid: greedy phase used the whole bullet budget; skipping knapsack phase")
            return greedy

    # Phase 2: knapsack over what the greedy phase left
    used_ids = set(greedy.bullet_ids)
    filtered = filter_used_bullets(stories, used_ids)
    if not filtered:
        _log_debug("hybrid: no bullets left for knapsack phase")
        return greedy

    chosen_bullets = [b for story in stories for b in story.bullets if b.id in used_ids]
    met_skills = covered_skill_names(chosen_bullets, skill_targets)

    story_values = build_story_values(filtered, ranked_by_id, skill_targets, met_skills, config)
    try:
        knapsack = solve_knapsack(filtered, story_values, remaining_bullets, remaining_lines)
    except SelectionError as exc:
        _log_warning(f"hybrid: knapsack phase failed, keeping greedy result ({exc})")
        return greedy

    log_selection_result("knapsack", knapsack, count_selected_lines(knapsack.selections, filtered, config))
    if not knapsack.selections:
        return greedy

    return SelectionResult(
        selections=merge_selections(stories, greedy.selections, knapsack.selections),
        score=greedy.score + knapsack.score,
    )
