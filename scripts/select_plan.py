#!/usr/bin/env python3
"""
Select stories and bullets for a resume plan and write the plan artifact.

Usage:
    python scripts/select_plan.py --experience data/experience_bank.yaml \\
        --ranked outs/ranked_stories.json --skills outs/skill_targets.json \\
        --max-lines 40 --max-bullets 16 --output outs/resume_plan.json
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from resume_planner.contexts.targeting import (
    SelectionError,
    SpaceBudget,
    load_selection_config,
    select_plan,
)
from resume_planner.contexts.targeting.artifacts import (
    load_experience_bank,
    load_ranked_stories,
    load_skill_targets,
    write_plan,
)
from resume_planner.contexts.targeting.logger import (
    _log_error,
    _log_success,
    setup_targeting_logger,
)

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(add_completion=False, help="Select resume content under a space budget.")


@app.command()
def main(
    experience: Path = typer.Option(..., "--experience", "-e", help="Experience bank (YAML/JSON)"),
    ranked: Path = typer.Option(..., "--ranked", "-r", help="Ranked stories (YAML/JSON)"),
    skills: Optional[Path] = typer.Option(None, "--skills", "-s", help="Skill targets (YAML/JSON)"),
    max_lines: int = typer.Option(..., "--max-lines", help="Maximum estimated printed lines"),
    max_bullets: int = typer.Option(..., "--max-bullets", help="Maximum number of bullets"),
    ratio: float = typer.Option(
        0.0, "--ratio", help="Share of lines for the greedy skill pass (0 = config default)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Selection config YAML"),
    output: Path = typer.Option(Path("outs/resume_plan.json"), "--output", "-o", help="Plan output path"),
    log_dir: Path = typer.Option(LOGS_PATH / "select_plan", "--log-dir", help="Log directory"),
):
    """Run hybrid selection and write the resume plan JSON."""
    log_file = setup_targeting_logger(
        log_dir, budget={"Max lines": max_lines, "Max bullets": max_bullets, "Ratio": ratio}
    )

    try:
        selection_config = load_selection_config(config)
        bank = load_experience_bank(experience)
        rankings = load_ranked_stories(ranked)
        targets = load_skill_targets(skills) if skills else None
        budget = SpaceBudget(max_bullets=max_bullets, max_lines=max_lines, skill_match_ratio=ratio)
        plan = select_plan(bank, rankings, targets, budget, selection_config)
    except SelectionError as exc:
        _log_error(f"Planning failed: {exc}")
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(1)

    write_plan(plan, output)
    _log_success(
        f"Plan written to {output}: {plan.total_bullets} bullets, {plan.total_lines} lines, score {plan.score:.4f}"
    )

    typer.echo(f"\n=== Plan ({len(plan.selected_stories)} stories) ===")
    for story in plan.selected_stories:
        typer.echo(f"  {story.story_id}: {', '.join(story.bullet_ids)} ({story.estimated_lines} lines)")

    typer.echo("\n=== Budget ===")
    typer.echo(f"  Lines: {plan.total_lines}/{max_lines}")
    typer.echo(f"  Bullets: {plan.total_bullets}/{max_bullets}")
    typer.echo(f"  Score: {plan.score:.4f}")

    if plan.coverage.top_skills_covered:
        typer.echo("\n=== Coverage ===")
        typer.echo(f"  Skills: {', '.join(plan.coverage.top_skills_covered)}")
        typer.echo(f"  Score: {plan.coverage.coverage_score:.2f}")

    typer.echo(f"\nPlan: {output}")
    typer.echo(f"Log: {log_file}")
    typer.secho("\n✓ Plan written", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
