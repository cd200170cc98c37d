"""
Artifact loading and persistence for the targeting context.

Input artifacts (experience bank, ranked stories, skill targets) are YAML or
JSON files; OmegaConf reads both. The resume plan is written as indented JSON
for the downstream rewriting and rendering stages.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from omegaconf import OmegaConf

from resume_planner.contexts.targeting.data_structures import (
    ExperienceBank,
    RankedStory,
    ResumePlan,
    SkillTargets,
)
from resume_planner.contexts.targeting.exceptions import ArtifactLoadError


def _load_mapping(path: Path, required_key: str) -> Dict[str, Any]:
    """Load a YAML/JSON file as a plain dict and check its top-level key."""
    path = Path(path)
    if not path.exists():
        raise ArtifactLoadError("Artifact file does not exist", path=path)

    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    if not isinstance(data, dict) or required_key not in data:
        raise ArtifactLoadError(f"Artifact has no top-level '{required_key}' list", path=path)
    return data


def load_experience_bank(path: Path) -> ExperienceBank:
    """Load stories from an experience bank file ({"stories": [...]})."""
    data = _load_mapping(path, "stories")
    try:
        return ExperienceBank.from_dict(data)
    except ArtifactLoadError as exc:
        raise ArtifactLoadError(exc.message, path=Path(path)) from exc


def load_ranked_stories(path: Path) -> List[RankedStory]:
    """Load story rankings ({"ranked": [...]}), preserving file order."""
    data = _load_mapping(path, "ranked")
    try:
        return [RankedStory.from_dict(entry) for entry in data["ranked"] or ()]
    except ArtifactLoadError as exc:
        raise ArtifactLoadError(exc.message, path=Path(path)) from exc


def load_skill_targets(path: Path) -> SkillTargets:
    """Load job skill targets ({"skills": [...]})."""
    data = _load_mapping(path, "skills")
    try:
        return SkillTargets.from_dict(data)
    except ArtifactLoadError as exc:
        raise ArtifactLoadError(exc.message, path=Path(path)) from exc


def write_plan(plan: ResumePlan, output_path: Path) -> Path:
    """
    Persist a resume plan as JSON.

    Args:
        plan: Plan to write
        output_path: Destination file (parent directories are created)

    Returns:
        The written path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(plan.to_dict(), f, indent=2)
        f.write("\n")
    return output_path
