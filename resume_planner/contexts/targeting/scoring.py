"""
Value Scoring

Computes the value and cost of selecting a combination of bullets from one story.

Value of a combination:
    relevance_weight * relevance * completeness  +  skill_weight * coverage

- completeness is the share of the story's printed lines the combination uses,
  so fuller renditions of a relevant story are worth more.
- coverage is the specificity-weighted share of target skills the combination
  matches that are not already met elsewhere (0 when no skill targets are given).

Adding a bullet strictly raises cost (every bullet costs at least one line) and
never lowers value, so the knapsack can trade value against space.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from resume_planner.contexts.targeting.combinations import generate_bullet_combinations
from resume_planner.contexts.targeting.config import DEFAULT_CONFIG, SelectionConfig
from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    RankedStory,
    Skill,
    SkillTargets,
    Story,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.logger import _log_warning


@dataclass(frozen=True)
class StoryValue:
    """
    Value and cost of selecting one bullet combination from a story.

    Attributes:
        bullet_ids: Chosen bullet IDs in story order
        length_chars: Total characters of the chosen bullets
        cost_lines: Estimated printed lines
        cost_bullets: Number of bullets
        value: Score contributed if selected
    """

    bullet_ids: Tuple[str, ...]
    length_chars: int
    cost_lines: int
    cost_bullets: int
    value: float


def estimate_lines(length_chars: int, chars_per_line: int = DEFAULT_CONFIG.chars_per_line) -> int:
    """Estimated printed lines for a bullet; never less than one."""
    if length_chars <= 0:
        return 1
    return math.ceil(length_chars / chars_per_line)


def normalize_skill(name: str) -> str:
    return name.strip().lower()


def skill_match_quality(
    bullet: Bullet, skill: Skill, text_match_quality: float = DEFAULT_CONFIG.text_match_quality
) -> float:
    """
    How well a bullet evidences a skill.

    Returns:
        1.0 for an explicit skill tag, text_match_quality when the skill name only
        appears in the bullet text, 0.0 otherwise
    """
    name = normalize_skill(skill.name)
    if not name:
        return 0.0

    if any(normalize_skill(tag) == name for tag in bullet.skills):
        return 1.0

    if name in bullet.text.lower():
        return text_match_quality

    return 0.0


def effective_weight(skill: Skill, specificity_weight: float) -> float:
    """Skill weight boosted by its specificity."""
    return max(skill.weight, 0.0) * (1.0 + specificity_weight * skill.specificity)


def compute_skill_coverage(
    bullets: Iterable[Bullet],
    skill_targets: Optional[SkillTargets],
    met_skills: Iterable[str] = (),
    config: SelectionConfig = DEFAULT_CONFIG,
) -> float:
    """
    Normalized, specificity-weighted coverage of target skills by a set of bullets.

    Each target skill counts once, at the best match quality any bullet achieves.
    Skills listed in met_skills are already covered elsewhere and earn nothing,
    though they still count toward the normalizing total.

    Args:
        bullets: Bullets to evaluate
        skill_targets: Job skill targets (None or empty → 0.0)
        met_skills: Skill names already covered (case-insensitive)
        config: Selection weights

    Returns:
        Coverage in [0, 1]
    """
    if skill_targets is None or not skill_targets.skills:
        return 0.0

    bullets = list(bullets)
    met = {normalize_skill(name) for name in met_skills}

    total_weight = 0.0
    covered_weight = 0.0
    for skill in skill_targets.skills:
        weight = effective_weight(skill, config.specificity_weight)
        total_weight += weight

        if normalize_skill(skill.name) in met:
            continue
        best = max(
            (skill_match_quality(b, skill, config.text_match_quality) for b in bullets),
            default=0.0,
        )
        covered_weight += weight * best

    if total_weight == 0:
        return 0.0
    return covered_weight / total_weight


def covered_skill_names(
    bullets: Iterable[Bullet], skill_targets: Optional[SkillTargets]
) -> List[str]:
    """Target skill names explicitly tagged on at least one of the bullets."""
    if skill_targets is None:
        return []

    tags = {normalize_skill(tag) for b in bullets for tag in b.skills}
    return [s.name for s in skill_targets.skills if normalize_skill(s.name) in tags]


def score_combination(
    ranked_story: RankedStory,
    combination: Sequence[Bullet],
    story_lines: int,
    skill_targets: Optional[SkillTargets] = None,
    met_skills: Iterable[str] = (),
    config: SelectionConfig = DEFAULT_CONFIG,
) -> StoryValue:
    """
    Compute the value and cost of selecting a combination of a story's bullets.

    Args:
        ranked_story: Relevance ranking for the story
        combination: Non-empty subset of the story's bullets, in story order
        story_lines: Estimated lines of the full story (completeness denominator)
        skill_targets: Optional job skill targets
        met_skills: Skills already covered elsewhere in the resume
        config: Selection weights

    Returns:
        StoryValue for the combination
    """
    if not combination:
        raise SelectionError("Cannot score an empty combination", story_id=ranked_story.story_id)

    cost_lines = sum(estimate_lines(b.length_chars, config.chars_per_line) for b in combination)
    relevance = min(max(ranked_story.relevance_score, 0.0), 1.0)
    completeness = min(cost_lines / story_lines, 1.0) if story_lines > 0 else 1.0

    value = config.relevance_weight * relevance * completeness
    if skill_targets is not None and skill_targets.skills:
        coverage = compute_skill_coverage(combination, skill_targets, met_skills, config)
        value += config.skill_weight * coverage

    return StoryValue(
        bullet_ids=tuple(b.id for b in combination),
        length_chars=sum(b.length_chars for b in combination),
        cost_lines=cost_lines,
        cost_bullets=len(combination),
        value=value,
    )


def build_story_values(
    stories: Sequence[Story],
    ranked_by_id: Mapping[str, RankedStory],
    skill_targets: Optional[SkillTargets] = None,
    met_skills: Iterable[str] = (),
    config: SelectionConfig = DEFAULT_CONFIG,
) -> Dict[int, List[StoryValue]]:
    """
    Enumerate and score every combination of every story.

    Stories longer than config.max_bullets_per_story are cut to their first
    bullets before enumeration, since the number of combinations doubles
    with each bullet.

    Args:
        stories: Stories to score, in solver order
        ranked_by_id: Story ID → RankedStory
        skill_targets: Optional job skill targets
        met_skills: Skills already covered elsewhere in the resume
        config: Selection weights and limits

    Returns:
        Story index → scored combinations (in enumeration order)

    Raises:
        SelectionError: If a story has no ranking
    """
    met_skills = tuple(met_skills)
    story_values: Dict[int, List[StoryValue]] = {}

    for index, story in enumerate(stories):
        ranked = ranked_by_id.get(story.id)
        if ranked is None:
            raise SelectionError("Story has no relevance ranking", story_id=story.id)

        bullets = story.bullets
        if len(bullets) > config.max_bullets_per_story:
            _log_warning(
                f"Story {story.id} has {len(bullets)} bullets; considering only the first "
                f"{config.max_bullets_per_story}"
            )
            bullets = bullets[: config.max_bullets_per_story]

        story_lines = sum(estimate_lines(b.length_chars, config.chars_per_line) for b in bullets)
        story_values[index] = [
            score_combination(ranked, combo, story_lines, skill_targets, met_skills, config)
            for combo in generate_bullet_combinations(bullets)
        ]

    return story_values
