"""
Targeting Data Structures

Defines the inputs the selection engine reads (stories, bullets, rankings, skill
targets, space budget) and the outputs it produces (story selections and the
resume plan artifact). Inputs are frozen: the engine never mutates them.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from resume_planner.contexts.targeting.exceptions import ArtifactLoadError


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    """Fetch a required key from an artifact dict, naming the record kind on failure."""
    if key not in data or data[key] is None:
        raise ArtifactLoadError(f"{kind} is missing required field '{key}'")
    return data[key]


# =============================================================================
# INPUTS
# =============================================================================


@dataclass(frozen=True)
class Bullet:
    """
    A single resume line item.

    Attributes:
        id: Stable bullet identifier
        length_chars: Printed length in characters (drives line estimates)
        skills: Skill tags attached to the bullet
        text: Bullet text, used as a fallback for skill matching
        metrics: Quantified outcome, if any
    """

    id: str
    length_chars: int
    skills: Tuple[str, ...] = ()
    text: str = ""
    metrics: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bullet":
        text = data.get("text") or ""
        length = data.get("length_chars")
        return cls(
            id=str(_require(data, "id", "Bullet")),
            length_chars=int(length) if length is not None else len(text),
            skills=tuple(data.get("skills") or ()),
            text=text,
            metrics=data.get("metrics") or "",
        )


@dataclass(frozen=True)
class Story:
    """
    A job or project entry owning an ordered group of bullets.

    Attributes:
        id: Stable story identifier
        bullets: Bullets in their authored order
        company, role, start_date, end_date: Display metadata (not used for scoring)
    """

    id: str
    bullets: Tuple[Bullet, ...] = ()
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Story":
        return cls(
            id=str(_require(data, "id", "Story")),
            bullets=tuple(Bullet.from_dict(b) for b in data.get("bullets") or ()),
            company=data.get("company") or "",
            role=data.get("role") or "",
            start_date=data.get("start_date") or "",
            end_date=data.get("end_date") or "",
        )


@dataclass(frozen=True)
class ExperienceBank:
    """All stories available to the planner."""

    stories: Tuple[Story, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperienceBank":
        return cls(stories=tuple(Story.from_dict(s) for s in data.get("stories") or ()))

    def story_map(self) -> Dict[str, Story]:
        """Map story ID → Story (first occurrence wins on duplicate IDs)."""
        stories: Dict[str, Story] = {}
        for story in self.stories:
            stories.setdefault(story.id, story)
        return stories


@dataclass(frozen=True)
class RankedStory:
    """
    Upstream relevance ranking for one story.

    Attributes:
        story_id: Story being ranked
        relevance_score: Relevance to the job, 0-1
        matched_skills: Skills the ranker matched (informational)
        notes: Free-form ranker notes
    """

    story_id: str
    relevance_score: float
    matched_skills: Tuple[str, ...] = ()
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankedStory":
        return cls(
            story_id=str(_require(data, "story_id", "RankedStory")),
            relevance_score=float(_require(data, "relevance_score", "RankedStory")),
            matched_skills=tuple(data.get("matched_skills") or ()),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class Skill:
    """
    A weighted skill the job posting calls for.

    Attributes:
        name: Skill name (matched case-insensitively)
        weight: Priority weight (higher = more important)
        source: Where the skill came from (e.g., "required", "preferred")
        specificity: 0.0 (generic) to 1.0 (highly specific)
    """

    name: str
    weight: float
    source: str = ""
    specificity: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Skill":
        return cls(
            name=str(_require(data, "name", "Skill")),
            weight=float(_require(data, "weight", "Skill")),
            source=data.get("source") or "",
            specificity=float(data.get("specificity") or 0.0),
        )


@dataclass(frozen=True)
class SkillTargets:
    """Weighted set of skills derived from the job's requirements."""

    skills: Tuple[Skill, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkillTargets":
        return cls(skills=tuple(Skill.from_dict(s) for s in data.get("skills") or ()))


@dataclass
class SpaceBudget:
    """
    Space constraints for the resume.

    Attributes:
        max_bullets: Maximum number of bullets
        max_lines: Maximum estimated printed lines
        skill_match_ratio: Share of max_lines given to the greedy skill pass
                           (0 means "use the configured default")
        sections: Optional per-section line allowances (passed through)
    """

    max_bullets: int
    max_lines: int
    skill_match_ratio: float = 0.0
    sections: Dict[str, int] = field(default_factory=dict)


# =============================================================================
# OUTPUTS
# =============================================================================


@dataclass(frozen=True)
class StorySelection:
    """Bullets chosen from one story, in output order."""

    story_id: str
    bullet_ids: Tuple[str, ...]


@dataclass
class SelectionResult:
    """
    Outcome of a selection pass (knapsack, greedy or hybrid).

    An empty selection list with score 0.0 means nothing fit the budget.
    """

    selections: List[StorySelection] = field(default_factory=list)
    score: float = 0.0

    @property
    def bullet_ids(self) -> List[str]:
        """All selected bullet IDs, story by story."""
        return [bid for sel in self.selections for bid in sel.bullet_ids]


@dataclass
class SelectedStory:
    """A story entry in the resume plan."""

    story_id: str
    bullet_ids: List[str]
    section: str = "experience"
    estimated_lines: int = 0


@dataclass
class Coverage:
    """Skill coverage achieved by the selected bullets."""

    top_skills_covered: List[str] = field(default_factory=list)
    coverage_score: float = 0.0


@dataclass
class ResumePlan:
    """
    Selection contract handed to later pipeline stages (rewriting, rendering).

    Serialized with to_dict() as the persisted JSON artifact.
    """

    selected_stories: List[SelectedStory]
    space_budget: SpaceBudget
    coverage: Coverage = field(default_factory=Coverage)
    score: float = 0.0

    @property
    def total_bullets(self) -> int:
        return sum(len(s.bullet_ids) for s in self.selected_stories)

    @property
    def total_lines(self) -> int:
        return sum(s.estimated_lines for s in self.selected_stories)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SelectedBullet:
    """A plan bullet resolved back to its experience-bank content."""

    id: str
    story_id: str
    text: str
    skills: List[str]
    length_chars: int
    metrics: Optional[str] = None
