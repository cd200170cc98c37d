"""Unit tests for hybrid (greedy + knapsack) selection."""

import pytest

from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    RankedStory,
    Skill,
    SkillTargets,
    Story,
    StorySelection,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.greedy import select_greedy
from resume_planner.contexts.targeting.hybrid import (
    count_selected_lines,
    filter_used_bullets,
    merge_selections,
    select_hybrid,
    split_line_budget,
)
from resume_planner.contexts.targeting.knapsack import solve_knapsack
from resume_planner.contexts.targeting.scoring import build_story_values

STORIES = [
    Story(
        "story1",
        (
            Bullet("b1", 50, skills=("Python",), text="Python development"),
            Bullet("b2", 50, skills=("Kubernetes",), text="Kubernetes orchestration"),
        ),
    ),
    Story("story2", (Bullet("b3", 50, skills=("AWS",), text="Cloud infrastructure with AWS"),)),
    Story("story3", (Bullet("b4", 50, text="General high impact work without specific skills"),)),
]
RANKED = [
    RankedStory("story1", 0.8),
    RankedStory("story2", 0.7),
    RankedStory("story3", 1.0),
]
TARGETS = SkillTargets(
    skills=(Skill("Python", 10.0), Skill("Kubernetes", 8.0), Skill("AWS", 5.0))
)


def _selected_ids(result):
    return [bid for sel in result.selections for bid in sel.bullet_ids]


@pytest.mark.unit
@pytest.mark.parametrize(
    "max_lines, ratio, expected",
    [(40, 0.8, 32), (4, 0.5, 2), (5, 0.5, 2), (10, 0.0, 0), (10, 1.0, 10)],
)
def test_split_line_budget(max_lines, ratio, expected):
    assert split_line_budget(max_lines, ratio) == expected


@pytest.mark.unit
def test_greedy_skills_then_knapsack_value():
    result = select_hybrid(STORIES, RANKED, TARGETS, max_lines=4, skill_match_ratio=0.5)

    assert result.selections == [
        StorySelection("story1", ("b1", "b2")),
        StorySelection("story2", ("b3",)),
        StorySelection("story3", ("b4",)),
    ]
    # Greedy covers Python + Kubernetes; knapsack adds b3 (AWS bonus) and b4 (relevance 1.0)
    expected = 18 / 23 + (0.6 * 0.7 + 0.4 * 5 / 23) + 0.6 * 1.0
    assert result.score == pytest.approx(expected)


@pytest.mark.unit
def test_knapsack_phase_skipped_when_greedy_fills_budget():
    stories = [
        Story(f"skill{i}", (Bullet(f"s{i}", 1000, skills=(name,)),))
        for i, name in enumerate(["Python", "Kubernetes", "AWS", "Go"])
    ] + [Story("filler", (Bullet("f1", 50),))]
    ranked = [RankedStory(s.id, 0.5) for s in stories]
    targets = SkillTargets(skills=TARGETS.skills + (Skill("Go", 2.0),))

    greedy = select_greedy(stories, ranked, targets, max_lines=40)
    result = select_hybrid(stories, ranked, targets, max_lines=40, skill_match_ratio=1.0)

    assert count_selected_lines(greedy.selections, stories) == 40
    assert result.selections == greedy.selections
    assert result.score == greedy.score


@pytest.mark.unit
def test_greedy_share_leaves_room_for_knapsack():
    stories = [
        Story(f"skill{i}", (Bullet(f"s{i}", 1000, skills=(name,)),))
        for i, name in enumerate(["Python", "Kubernetes", "AWS", "Go"])
    ] + [Story("filler", (Bullet("f1", 50),))]
    ranked = [RankedStory(s.id, 0.5) for s in stories]
    targets = SkillTargets(skills=TARGETS.skills + (Skill("Go", 2.0),))

    result = select_hybrid(stories, ranked, targets, max_lines=40, skill_match_ratio=0.8)

    # 32 greedy lines hold three 10-line bullets; the knapsack gets the last 10
    assert _selected_ids(result)[:3] == ["s0", "s1", "s2"]
    assert count_selected_lines(result.selections, stories) <= 40
    assert len(_selected_ids(result)) == 4


@pytest.mark.unit
def test_without_skill_targets_matches_plain_knapsack():
    ranked_by_id = {r.story_id: r for r in RANKED}
    knapsack = solve_knapsack(STORIES, build_story_values(STORIES, ranked_by_id), 1000, 3)

    result = select_hybrid(STORIES, RANKED, None, max_lines=3)

    assert result.selections == knapsack.selections
    assert result.score == pytest.approx(knapsack.score)


@pytest.mark.unit
def test_unranked_story_rejected_before_any_phase():
    # story3 has no ranking
    with pytest.raises(SelectionError, match="no relevance ranking") as exc_info:
        select_hybrid(STORIES, RANKED[:2], TARGETS, max_lines=4, skill_match_ratio=0.5)
    assert exc_info.value.story_id == "story3"


@pytest.mark.unit
def test_duplicate_story_rejected():
    stories = STORIES + [STORIES[0]]

    with pytest.raises(SelectionError, match="Duplicate story ID") as exc_info:
        select_hybrid(stories, RANKED, TARGETS, max_lines=10, skill_match_ratio=0.5)
    assert exc_info.value.story_id == "story1"


@pytest.mark.unit
def test_nothing_left_for_knapsack_returns_greedy():
    stories = STORIES[:2]
    result = select_hybrid(stories, RANKED, TARGETS, max_lines=10, skill_match_ratio=0.8)

    assert _selected_ids(result) == ["b1", "b2", "b3"]
    assert result.score == pytest.approx(1.0)


@pytest.mark.unit
def test_default_bullet_cap_is_not_the_callers_budget():
    """Without max_bullets the knapsack phase may exceed any caller bullet budget."""
    result = select_hybrid(STORIES, RANKED, TARGETS, max_lines=10, skill_match_ratio=0.2)
    assert len(_selected_ids(result)) == 4


@pytest.mark.unit
@pytest.mark.parametrize("max_bullets", [1, 2, 3])
def test_max_bullets_enforced_across_phases(max_bullets):
    result = select_hybrid(
        STORIES, RANKED, TARGETS, max_lines=10, skill_match_ratio=0.2, max_bullets=max_bullets
    )
    assert len(_selected_ids(result)) == max_bullets


@pytest.mark.unit
@pytest.mark.parametrize("max_lines", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("ratio", [0.0, 0.5, 0.8, 1.0])
def test_line_budget_respected(max_lines, ratio):
    result = select_hybrid(STORIES, RANKED, TARGETS, max_lines=max_lines, skill_match_ratio=ratio)

    assert count_selected_lines(result.selections, STORIES) <= max_lines
    story_ids = [s.story_id for s in result.selections]
    assert len(story_ids) == len(set(story_ids))


@pytest.mark.unit
def test_filter_used_bullets_drops_empty_stories():
    filtered = filter_used_bullets(STORIES, {"b1", "b3"})

    assert [s.id for s in filtered] == ["story1", "story3"]
    assert [b.id for b in filtered[0].bullets] == ["b2"]
    # Inputs untouched
    assert len(STORIES[0].bullets) == 2


@pytest.mark.unit
def test_merge_concatenates_phases_in_story_order():
    phase1 = [StorySelection("story2", ("b3",)), StorySelection("story1", ("b2",))]
    phase2 = [StorySelection("story1", ("b1",)), StorySelection("story3", ("b4",))]

    merged = merge_selections(STORIES, phase1, phase2)

    assert merged == [
        StorySelection("story1", ("b2", "b1")),
        StorySelection("story2", ("b3",)),
        StorySelection("story3", ("b4",)),
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        {"stories": [], "max_lines": 10},
        {"stories": STORIES, "max_lines": 0},
        {"stories": STORIES, "max_lines": 10, "skill_match_ratio": 1.5},
        {"stories": STORIES, "max_lines": 10, "max_bullets": 0},
    ],
)
def test_malformed_input_rejected(kwargs):
    with pytest.raises(SelectionError):
        select_hybrid(ranked_stories=RANKED, skill_targets=TARGETS, **kwargs)
