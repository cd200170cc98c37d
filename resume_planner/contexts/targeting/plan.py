"""
Resume Plan Assembly

Turns an experience bank, story rankings, skill targets and a space budget into
a ResumePlan: which stories and bullets to print, how many lines each takes,
and which target skills the selection covers.
"""

from typing import List, Optional, Sequence

from resume_planner.contexts.targeting.config import DEFAULT_CONFIG, SelectionConfig
from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    Coverage,
    ExperienceBank,
    RankedStory,
    ResumePlan,
    SelectedBullet,
    SelectedStory,
    SkillTargets,
    SpaceBudget,
)
from resume_planner.contexts.targeting.exceptions import MaterializationError
from resume_planner.contexts.targeting.hybrid import select_hybrid
from resume_planner.contexts.targeting.logger import _log_info, _log_warning
from resume_planner.contexts.targeting.scoring import (
    compute_skill_coverage,
    estimate_lines,
    normalize_skill,
)


def compute_coverage(
    selected_bullets: Sequence[Bullet],
    skill_targets: Optional[SkillTargets],
    config: SelectionConfig = DEFAULT_CONFIG,
) -> Coverage:
    """
    Skill coverage metrics for the selected bullets.

    Args:
        selected_bullets: Bullets in the plan
        skill_targets: Job skill targets (None → empty coverage)
        config: Selection weights (top_skills_limit caps the reported list)

    Returns:
        Coverage with tagged target skills ordered by weight (highest first)
        and the normalized coverage score
    """
    if skill_targets is None or not skill_targets.skills:
        return Coverage()

    tags = {normalize_skill(tag) for bullet in selected_bullets for tag in bullet.skills}

    # Highest weight per skill name, first-listed name wins on equal weights
    covered = {}
    for skill in skill_targets.skills:
        if normalize_skill(skill.name) in tags and skill.weight > covered.get(skill.name, float("-inf")):
            covered[skill.name] = skill.weight

    top_skills = sorted(covered, key=lambda name: covered[name], reverse=True)
    return Coverage(
        top_skills_covered=top_skills[: config.top_skills_limit],
        coverage_score=compute_skill_coverage(selected_bullets, skill_targets, config=config),
    )


def select_plan(
    experience_bank: ExperienceBank,
    ranked_stories: Sequence[RankedStory],
    skill_targets: Optional[SkillTargets],
    space_budget: SpaceBudget,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> ResumePlan:
    """
    Select stories and bullets for a resume plan.

    Stories are considered in ranked order; rankings for stories missing from
    the experience bank are ignored. Selection runs the hybrid greedy + knapsack
    strategy. The plan's max_bullets is only carried into selection when
    config.enforce_max_bullets is set.

    Args:
        experience_bank: All available stories
        ranked_stories: Story rankings, best first
        skill_targets: Optional job skill targets
        space_budget: Line/bullet budget and greedy share
        config: Selection weights and limits

    Returns:
        ResumePlan (empty when there is nothing to rank)

    Raises:
        SelectionError: On a malformed budget
    """
    story_map = experience_bank.story_map()

    stories = []
    rankings = []
    seen = set()
    for ranked in ranked_stories:
        if ranked.story_id in seen:
            _log_warning(f"Ranked story {ranked.story_id} listed more than once; keeping first ranking")
            continue
        story = story_map.get(ranked.story_id)
        if story is None:
            _log_warning(f"Ranked story {ranked.story_id} not found in experience bank; skipping")
            continue
        seen.add(ranked.story_id)
        stories.append(story)
        rankings.append(ranked)

    if not stories:
        _log_info("No ranked stories to plan; returning empty plan")
        return ResumePlan(selected_stories=[], space_budget=space_budget)

    ratio = space_budget.skill_match_ratio or config.skill_match_ratio
    max_bullets = space_budget.max_bullets if config.enforce_max_bullets else None
    result = select_hybrid(
        stories,
        rankings,
        skill_targets,
        space_budget.max_lines,
        skill_match_ratio=ratio,
        max_bullets=max_bullets,
        config=config,
    )

    selected_stories: List[SelectedStory] = []
    selected_bullets: List[Bullet] = []
    for selection in result.selections:
        story = story_map.get(selection.story_id)
        if story is None:
            continue

        bullets = {b.id: b for b in story.bullets}
        chosen = [bullets[bid] for bid in selection.bullet_ids if bid in bullets]
        selected_bullets.extend(chosen)
        selected_stories.append(
            SelectedStory(
                story_id=selection.story_id,
                bullet_ids=list(selection.bullet_ids),
                estimated_lines=sum(estimate_lines(b.length_chars, config.chars_per_line) for b in chosen),
            )
        )

    plan = ResumePlan(
        selected_stories=selected_stories,
        space_budget=space_budget,
        coverage=compute_coverage(selected_bullets, skill_targets, config),
        score=result.score,
    )
    _log_info(
        f"Planned {plan.total_bullets} bullets from {len(selected_stories)} stories "
        f"({plan.total_lines}/{space_budget.max_lines} lines, score {plan.score:.4f})"
    )
    if plan.total_bullets > space_budget.max_bullets:
        _log_warning(
            f"Plan has {plan.total_bullets} bullets, over the budget of {space_budget.max_bullets}"
        )
    return plan


def materialize_bullets(plan: ResumePlan, experience_bank: ExperienceBank) -> List[SelectedBullet]:
    """
    Resolve a plan's bullet IDs to their experience-bank content, in plan order.

    Raises:
        MaterializationError: If the plan references a story or bullet that does not exist
    """
    story_map = experience_bank.story_map()

    result = []
    for selected_story in plan.selected_stories:
        story = story_map.get(selected_story.story_id)
        if story is None:
            raise MaterializationError(
                "Story not found in experience bank", story_id=selected_story.story_id
            )

        bullets = {b.id: b for b in story.bullets}
        for bullet_id in selected_story.bullet_ids:
            bullet = bullets.get(bullet_id)
            if bullet is None:
                raise MaterializationError(
                    "Bullet not found in story", story_id=story.id, bullet_id=bullet_id
                )
            result.append(
                SelectedBullet(
                    id=bullet.id,
                    story_id=story.id,
                    text=bullet.text,
                    skills=list(bullet.skills),
                    length_chars=bullet.length_chars,
                    metrics=bullet.metrics or None,
                )
            )

    return result
