"""
Greedy Skill Selection

Fast first pass that spends a line budget on the individual bullets that best
match the job's target skills, ignoring which story they come from.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from resume_planner.contexts.targeting.config import DEFAULT_CONFIG, SelectionConfig
from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    RankedStory,
    SelectionResult,
    SkillTargets,
    Story,
    StorySelection,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.scoring import (
    effective_weight,
    estimate_lines,
    skill_match_quality,
)


@dataclass(frozen=True)
class _Candidate:
    story_index: int
    position: int
    story_id: str
    bullet: Bullet
    relevance: float
    contribution: float
    lines: int


def bullet_skill_contribution(
    bullet: Bullet,
    skill_targets: Optional[SkillTargets],
    config: SelectionConfig = DEFAULT_CONFIG,
) -> float:
    """
    Share of the total (specificity-weighted) skill weight a single bullet matches.

    Returns:
        Contribution in [0, 1]; 0.0 without skill targets
    """
    if skill_targets is None or not skill_targets.skills:
        return 0.0

    total = 0.0
    matched = 0.0
    for skill in skill_targets.skills:
        weight = effective_weight(skill, config.specificity_weight)
        total += weight
        matched += weight * skill_match_quality(bullet, skill, config.text_match_quality)

    return matched / total if total else 0.0


def select_greedy(
    stories: Sequence[Story],
    ranked_stories: Sequence[RankedStory],
    skill_targets: Optional[SkillTargets],
    max_lines: int,
    max_bullets: Optional[int] = None,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> SelectionResult:
    """
    Pick individual bullets by skill match until the line budget is spent.

    Bullets are ranked by descending skill contribution, then by higher story
    relevance, then by shorter length. Each bullet that still fits the running
    line total (and the optional bullet cap) is taken; bullets matching no
    target skill are never taken.

    Args:
        stories: Candidate stories
        ranked_stories: Relevance rankings (stories without one rank as 0 relevance)
        skill_targets: Job skill targets; without them nothing is selected
        max_lines: Line budget for this pass (0 selects nothing)
        max_bullets: Optional bullet cap for this pass
        config: Selection weights

    Returns:
        SelectionResult with stories in input order and each story's bullets in
        their authored order; score is the sum of contributions

    Raises:
        SelectionError: If a budget is negative
    """
    if max_lines < 0:
        raise SelectionError(f"max_lines must not be negative, got: {max_lines}")
    if max_bullets is not None and max_bullets < 0:
        raise SelectionError(f"max_bullets must not be negative, got: {max_bullets}")

    relevance_by_id = {r.story_id: r.relevance_score for r in ranked_stories}

    candidates: List[_Candidate] = []
    for story_index, story in enumerate(stories):
        for position, bullet in enumerate(story.bullets):
            contribution = bullet_skill_contribution(bullet, skill_targets, config)
            if contribution <= 0:
                continue
            candidates.append(
                _Candidate(
                    story_index=story_index,
                    position=position,
                    story_id=story.id,
                    bullet=bullet,
                    relevance=relevance_by_id.get(story.id, 0.0),
                    contribution=contribution,
                    lines=estimate_lines(bullet.length_chars, config.chars_per_line),
                )
            )

    candidates.sort(key=lambda c: (-c.contribution, -c.relevance, c.bullet.length_chars))

    chosen: List[_Candidate] = []
    lines_used = 0
    score = 0.0
    for candidate in candidates:
        if lines_used >= max_lines:
            break
        if max_bullets is not None and len(chosen) >= max_bullets:
            break
        if lines_used + candidate.lines > max_lines:
            continue

        chosen.append(candidate)
        lines_used += candidate.lines
        score += candidate.contribution

    # Report in story order, bullets in authored order
    chosen.sort(key=lambda c: (c.story_index, c.position))
    by_story: Dict[str, List[str]] = {}
    for candidate in chosen:
        by_story.setdefault(candidate.story_id, []).append(candidate.bullet.id)

    selections = [StorySelection(story_id, tuple(ids)) for story_id, ids in by_story.items()]
    return SelectionResult(selections=selections, score=score)
