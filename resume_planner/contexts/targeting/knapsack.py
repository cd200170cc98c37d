"""
Knapsack Selection

Multiple-choice, two-dimensional knapsack over stories: pick at most one bullet
combination per story so that the chosen bullet counts sum to at most max_bullets,
the estimated lines sum to at most max_lines, and total value is maximal.

The DP sweeps stories in order over a sparse grid of reachable
(bullets_used, lines_used) cells. Every cell points into an append-only arena
of DPState nodes; a node records only the selection made at that step and the
index of its parent, so full paths are never copied. Backtracking from the best
final node rebuilds the selection list.

Ties: the first path to reach a cell keeps it unless a later one scores strictly
higher. Skipping a story is always discovered before including it, and cells
and combinations are visited in a fixed order, so results are deterministic.

A budget that fits nothing is not an error: the result is empty with score 0.0.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from resume_planner.contexts.targeting.data_structures import (
    SelectionResult,
    Story,
    StorySelection,
)
from resume_planner.contexts.targeting.exceptions import SelectionError
from resume_planner.contexts.targeting.logger import _log_debug
from resume_planner.contexts.targeting.scoring import StoryValue

Cell = Tuple[int, int]  # (bullets_used, lines_used)


@dataclass(frozen=True)
class DPState:
    """
    Node in the DP solution graph.

    Attributes:
        score: Total value of the path ending here
        parent: Arena index of the previous node (None for the root)
        selection: Story selection made at this step (None for the root)
    """

    score: float
    parent: Optional[int] = None
    selection: Optional[StorySelection] = None


class StateArena:
    """Append-only store of DPState nodes addressed by index. Index 0 is the root."""

    ROOT = 0

    def __init__(self):
        self.nodes: List[DPState] = [DPState(score=0.0)]

    def add(self, score: float, parent: int, selection: StorySelection) -> int:
        self.nodes.append(DPState(score=score, parent=parent, selection=selection))
        return len(self.nodes) - 1

    def __getitem__(self, index: int) -> DPState:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)


def backtrack(arena: StateArena, index: int) -> List[StorySelection]:
    """
    Reconstruct selections by following parent links from a node to the root.

    Args:
        arena: Arena holding the DP nodes
        index: Index of the final node

    Returns:
        Selections in the order they were decided (oldest first); empty for the root
    """
    selections = []
    current: Optional[int] = index
    while current is not None:
        state = arena[current]
        if state.selection is not None:
            selections.append(state.selection)
        current = state.parent

    selections.reverse()
    return selections


def find_best_state(layer: Mapping[Cell, int], arena: StateArena) -> int:
    """
    Index of the highest-scoring node in the final layer.

    Cells are scanned in ascending (bullets, lines) order and only a strictly
    higher score replaces the incumbent, so the cheapest cell wins ties.
    """
    best = StateArena.ROOT
    for cell in sorted(layer):
        index = layer[cell]
        if arena[index].score > arena[best].score:
            best = index
    return best


def _validate_inputs(
    stories: Sequence[Story],
    story_values: Mapping[int, Sequence[StoryValue]],
    max_bullets: int,
    max_lines: int,
) -> None:
    if not stories:
        raise SelectionError("No stories to select from")
    if max_bullets <= 0:
        raise SelectionError(f"max_bullets must be positive, got: {max_bullets}")
    if max_lines <= 0:
        raise SelectionError(f"max_lines must be positive, got: {max_lines}")

    seen = set()
    for story in stories:
        if story.id in seen:
            raise SelectionError("Duplicate story ID", story_id=story.id)
        seen.add(story.id)

    for index, options in story_values.items():
        if not 0 <= index < len(stories):
            raise SelectionError(
                f"Story values reference story index {index}, but only {len(stories)} stories given"
            )
        for option in options:
            if option.cost_bullets <= 0 or option.cost_lines <= 0:
                raise SelectionError(
                    f"Combination {list(option.bullet_ids)} has non-positive cost",
                    story_id=stories[index].id,
                )


def solve_knapsack(
    stories: Sequence[Story],
    story_values: Mapping[int, Sequence[StoryValue]],
    max_bullets: int,
    max_lines: int,
) -> SelectionResult:
    """
    Select at most one combination per story maximizing total value within both budgets.

    Args:
        stories: Stories in solver order
        story_values: Story index → candidate combinations (stories without an
                      entry can only be skipped)
        max_bullets: Bullet budget
        max_lines: Line budget

    Returns:
        SelectionResult with one entry per story that received a combination,
        in story order. Empty with score 0.0 when nothing fits.

    Raises:
        SelectionError: On malformed input (no stories, non-positive budgets,
                        values for unknown stories, non-positive option costs)
    """
    _validate_inputs(stories, story_values, max_bullets, max_lines)

    arena = StateArena()
    layer: Dict[Cell, int] = {(0, 0): StateArena.ROOT}

    for story_index, story in enumerate(stories):
        options = story_values.get(story_index, ())

        # Skipping the story carries every cell forward unchanged
        next_layer = dict(layer)

        for bullets_used, lines_used in sorted(layer):
            parent = layer[(bullets_used, lines_used)]
            parent_score = arena[parent].score

            for option in options:
                new_bullets = bullets_used + option.cost_bullets
                new_lines = lines_used + option.cost_lines
                if new_bullets > max_bullets or new_lines > max_lines:
                    continue

                score = parent_score + option.value
                cell = (new_bullets, new_lines)
                incumbent = next_layer.get(cell)
                if incumbent is None or score > arena[incumbent].score:
                    next_layer[cell] = arena.add(
                        score, parent, StorySelection(story.id, option.bullet_ids)
                    )

        layer = next_layer

    best = find_best_state(layer, arena)
    selections = backtrack(arena, best)

    _log_debug(
        f"knapsack: {len(stories)} stories, {len(layer)} reachable cells, "
        f"{len(arena)} states, best score {arena[best].score:.4f}"
    )
    return SelectionResult(selections=selections, score=arena[best].score)
