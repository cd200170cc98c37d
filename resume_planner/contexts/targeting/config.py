"""
Selection Configuration

Tunable weights and limits for the selection engine. Defaults are defined on the
SelectionConfig dataclass; a YAML file can override any subset of them.

Examples:
    # Defaults only
    >>> config = load_selection_config()

    # Override from a file (same keys as configs/selection.yaml)
    >>> config = load_selection_config(Path("configs/selection.yaml"))
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from resume_planner.contexts.targeting.exceptions import SelectionError

load_dotenv()
SELECTION_CONFIG_PATH = os.getenv("SELECTION_CONFIG_PATH")


@dataclass
class SelectionConfig:
    """
    Weights and limits for scoring and selection.

    Attributes:
        chars_per_line: Characters that fit on one printed line
        relevance_weight: Weight of story relevance in a combination's value
        skill_weight: Weight of skill coverage in a combination's value
        specificity_weight: Extra weight given to highly specific skills
        text_match_quality: Match quality when a skill only appears in bullet text
        skill_match_ratio: Default share of lines given to the greedy skill pass
        phase2_bullet_cap: Bullet cap handed to the knapsack pass when the caller
                           does not enforce max_bullets across both passes
        max_bullets_per_story: Bullets per story considered for combinations
        top_skills_limit: Number of covered skills reported in plan coverage
        enforce_max_bullets: Carry the plan's max_bullets into both hybrid passes
    """

    chars_per_line: int = 100
    relevance_weight: float = 0.6
    skill_weight: float = 0.4
    specificity_weight: float = 0.5
    text_match_quality: float = 0.8
    skill_match_ratio: float = 0.8
    phase2_bullet_cap: int = 1000
    max_bullets_per_story: int = 8
    top_skills_limit: int = 10
    enforce_max_bullets: bool = False


DEFAULT_CONFIG = SelectionConfig()


def validate_config(config: SelectionConfig) -> SelectionConfig:
    """
    Reject settings the engine cannot work with.

    Raises:
        SelectionError: If a limit is non-positive or a weight/ratio is out of range
    """
    if config.chars_per_line <= 0:
        raise SelectionError(f"chars_per_line must be positive, got: {config.chars_per_line}")
    if config.max_bullets_per_story <= 0:
        raise SelectionError(
            f"max_bullets_per_story must be positive, got: {config.max_bullets_per_story}"
        )
    if config.phase2_bullet_cap <= 0:
        raise SelectionError(f"phase2_bullet_cap must be positive, got: {config.phase2_bullet_cap}")
    if not 0.0 <= config.skill_match_ratio <= 1.0:
        raise SelectionError(
            f"skill_match_ratio must be between 0 and 1, got: {config.skill_match_ratio}"
        )
    for name in ("relevance_weight", "skill_weight", "specificity_weight", "text_match_quality"):
        if getattr(config, name) < 0:
            raise SelectionError(f"{name} must be non-negative, got: {getattr(config, name)}")
    return config


def load_selection_config(config_path: Optional[Path] = None) -> SelectionConfig:
    """
    Load selection config, layering a YAML file over the dataclass defaults.

    Args:
        config_path: Optional YAML file (defaults to SELECTION_CONFIG_PATH env variable;
                     if neither is set, defaults are returned)

    Returns:
        Validated SelectionConfig

    Raises:
        omegaconf.errors.ConfigKeyError: If the file contains unknown keys
        SelectionError: If a value is out of range
    """
    if config_path is None and SELECTION_CONFIG_PATH:
        config_path = Path(SELECTION_CONFIG_PATH)

    schema = OmegaConf.structured(SelectionConfig)
    if config_path is not None:
        schema = OmegaConf.merge(schema, OmegaConf.load(config_path))

    return validate_config(OmegaConf.to_object(schema))
