"""
Targeting Context

Responsibilities:
- Scores bullet combinations by story relevance and job skill coverage
- Selects which bullets to include under line and bullet budgets
  (greedy skill pass + multiple-choice knapsack)
- Assembles the resume plan handed to rewriting and rendering

Owns: Value scoring, combination generation, selection algorithms, plan assembly
Never: Parses job descriptions, rewrites bullet text, or renders documents
"""

from resume_planner.contexts.targeting.combinations import generate_bullet_combinations
from resume_planner.contexts.targeting.config import SelectionConfig, load_selection_config
from resume_planner.contexts.targeting.data_structures import (
    Bullet,
    Coverage,
    ExperienceBank,
    RankedStory,
    ResumePlan,
    SelectedBullet,
    SelectedStory,
    SelectionResult,
    Skill,
    SkillTargets,
    SpaceBudget,
    Story,
    StorySelection,
)
from resume_planner.contexts.targeting.exceptions import (
    ArtifactLoadError,
    MaterializationError,
    SelectionError,
)
from resume_planner.contexts.targeting.greedy import select_greedy
from resume_planner.contexts.targeting.hybrid import select_hybrid
from resume_planner.contexts.targeting.knapsack import solve_knapsack
from resume_planner.contexts.targeting.plan import (
    compute_coverage,
    materialize_bullets,
    select_plan,
)
from resume_planner.contexts.targeting.scoring import (
    StoryValue,
    build_story_values,
    estimate_lines,
    score_combination,
)

__all__ = [
    "ArtifactLoadError",
    "Bullet",
    "Coverage",
    "ExperienceBank",
    "MaterializationError",
    "RankedStory",
    "ResumePlan",
    "SelectedBullet",
    "SelectedStory",
    "SelectionConfig",
    "SelectionError",
    "SelectionResult",
    "Skill",
    "SkillTargets",
    "SpaceBudget",
    "Story",
    "StorySelection",
    "StoryValue",
    "build_story_values",
    "compute_coverage",
    "estimate_lines",
    "generate_bullet_combinations",
    "load_selection_config",
    "materialize_bullets",
    "score_combination",
    "select_greedy",
    "select_hybrid",
    "select_plan",
    "solve_knapsack",
]
