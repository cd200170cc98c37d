"""Unit tests for value scoring of bullet combinations."""

import pytest

from resume_planner.contexts.targeting.combinations import generate_bullet_combinations
from resume_planner.contexts.targeting.config import SelectionConfig
from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    RankedStory,
    Skill,
    SkillTargets,
    Story,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.scoring import (
    build_story_values,
    compute_skill_coverage,
    covered_skill_names,
    estimate_lines,
    score_combination,
    skill_match_quality,
)

TARGETS = SkillTargets(skills=(Skill("Python", 10.0), Skill("Go", 10.0)))


class TestEstimateLines:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "length, expected",
        [(0, 1), (-5, 1), (1, 1), (50, 1), (100, 1), (101, 2), (250, 3), (1000, 10)],
    )
    def test_default_line_width(self, length, expected):
        assert estimate_lines(length) == expected

    @pytest.mark.unit
    def test_custom_line_width(self):
        assert estimate_lines(120, chars_per_line=50) == 3


class TestSkillMatchQuality:
    @pytest.mark.unit
    def test_tag_match_is_case_insensitive(self):
        bullet = Bullet("b1", 50, skills=(" python ",))
        assert skill_match_quality(bullet, Skill("Python", 1.0)) == 1.0

    @pytest.mark.unit
    def test_text_mention_scores_lower(self):
        bullet = Bullet("b1", 50, text="Migrated services to Kubernetes")
        assert skill_match_quality(bullet, Skill("kubernetes", 1.0)) == pytest.approx(0.8)

    @pytest.mark.unit
    def test_no_match(self):
        bullet = Bullet("b1", 50, skills=("Go",), text="Built APIs")
        assert skill_match_quality(bullet, Skill("Rust", 1.0)) == 0.0

    @pytest.mark.unit
    def test_blank_skill_never_matches(self):
        bullet = Bullet("b1", 50, skills=("",), text="anything")
        assert skill_match_quality(bullet, Skill("  ", 1.0)) == 0.0


class TestSkillCoverage:
    @pytest.mark.unit
    def test_no_targets(self):
        assert compute_skill_coverage([Bullet("b1", 50, skills=("Python",))], None) == 0.0
        assert compute_skill_coverage([Bullet("b1", 50)], SkillTargets()) == 0.0

    @pytest.mark.unit
    def test_half_of_equal_weights(self):
        bullets = [Bullet("b1", 50, skills=("Python",))]
        assert compute_skill_coverage(bullets, TARGETS) == pytest.approx(0.5)

    @pytest.mark.unit
    def test_skill_counted_once_across_bullets(self):
        bullets = [Bullet("b1", 50, skills=("Python",)), Bullet("b2", 50, skills=("Python",))]
        assert compute_skill_coverage(bullets, TARGETS) == pytest.approx(0.5)

    @pytest.mark.unit
    def test_met_skills_earn_nothing(self):
        bullets = [Bullet("b1", 50, skills=("Python", "Go"))]
        assert compute_skill_coverage(bullets, TARGETS, met_skills=["PYTHON"]) == pytest.approx(0.5)

    @pytest.mark.unit
    def test_specificity_boosts_weight(self):
        targets = SkillTargets(skills=(Skill("CUDA", 1.0, specificity=1.0), Skill("Go", 1.0)))
        bullets = [Bullet("b1", 50, skills=("CUDA",))]
        config = SelectionConfig(specificity_weight=0.5)

        # CUDA weighs 1.5, Go weighs 1.0
        assert compute_skill_coverage(bullets, targets, config=config) == pytest.approx(0.6)

    @pytest.mark.unit
    def test_covered_skill_names_uses_tags_only(self):
        bullets = [Bullet("b1", 50, skills=("go",), text="python scripts")]
        assert covered_skill_names(bullets, TARGETS) == ["Go"]
        assert covered_skill_names(bullets, None) == []


class TestScoreCombination:
    @pytest.mark.unit
    def test_relevance_and_completeness_without_targets(self):
        ranked = RankedStory("s1", 0.5)
        combo = [Bullet("b1", 50)]

        value = score_combination(ranked, combo, story_lines=2)

        assert value.bullet_ids == ("b1",)
        assert value.cost_bullets == 1
        assert value.cost_lines == 1
        assert value.length_chars == 50
        assert value.value == pytest.approx(0.6 * 0.5 * 0.5)

    @pytest.mark.unit
    def test_skill_bonus_with_targets(self):
        ranked = RankedStory("s1", 1.0)
        combo = [Bullet("b1", 50, skills=("Python",))]

        value = score_combination(ranked, combo, story_lines=1, skill_targets=TARGETS)

        assert value.value == pytest.approx(0.6 + 0.4 * 0.5)

    @pytest.mark.unit
    def test_relevance_is_clamped(self):
        combo = [Bullet("b1", 50)]
        high = score_combination(RankedStory("s1", 1.7), combo, story_lines=1)
        low = score_combination(RankedStory("s1", -0.3), combo, story_lines=1)

        assert high.value == pytest.approx(0.6)
        assert low.value == 0.0

    @pytest.mark.unit
    def test_empty_combination_rejected(self):
        with pytest.raises(SelectionError):
            score_combination(RankedStory("s1", 0.5), [], story_lines=1)

    @pytest.mark.unit
    def test_adding_bullets_raises_cost_and_never_lowers_value(self):
        bullets = [
            Bullet("b1", 80, skills=("Python",)),
            Bullet("b2", 250, skills=("Go",)),
            Bullet("b3", 40),
            Bullet("b4", 130, text="some go code"),
        ]
        ranked = RankedStory("s1", 0.7)
        story_lines = sum(estimate_lines(b.length_chars) for b in bullets)
        combos = generate_bullet_combinations(bullets)
        values = {
            frozenset(b.id for b in combo): score_combination(
                ranked, combo, story_lines, skill_targets=TARGETS
            )
            for combo in combos
        }

        for smaller, small_value in values.items():
            for larger, large_value in values.items():
                if smaller < larger:
                    assert large_value.cost_lines > small_value.cost_lines
                    assert large_value.cost_bullets > small_value.cost_bullets
                    assert large_value.value >= small_value.value


class TestBuildStoryValues:
    @pytest.mark.unit
    def test_one_entry_per_combination(self):
        stories = [
            Story("s1", (Bullet("a", 50), Bullet("b", 50), Bullet("c", 50))),
            Story("s2", (Bullet("d", 50),)),
        ]
        ranked = {"s1": RankedStory("s1", 0.9), "s2": RankedStory("s2", 0.4)}

        values = build_story_values(stories, ranked)

        assert set(values) == {0, 1}
        assert len(values[0]) == 7
        assert len(values[1]) == 1
        assert values[0][-1].bullet_ids == ("a", "b", "c")

    @pytest.mark.unit
    def test_long_story_is_truncated(self):
        stories = [Story("s1", tuple(Bullet(f"b{i}", 50) for i in range(5)))]
        ranked = {"s1": RankedStory("s1", 0.9)}
        config = SelectionConfig(max_bullets_per_story=2)

        values = build_story_values(stories, ranked, config=config)

        assert [v.bullet_ids for v in values[0]] == [("b0",), ("b1",), ("b0", "b1")]

    @pytest.mark.unit
    def test_missing_ranking_rejected(self):
        with pytest.raises(SelectionError, match="s9"):
            build_story_values([Story("s9", (Bullet("a", 50),))], {})
