"""Stack ranking logic for VisualMemory.

Scores every incomplete task with the DPS, sorts by score (highest first)
and tracks how far each task moved since the previous ranking cycle.
Python's sort is stable, so equal scores keep their collection order.
"""

from datetime import datetime
from typing import Dict, List, Optional

from visualmemory.models.task import AppTask, RankedTask
from visualmemory.engine.scoring import calculate_dps
from visualmemory.engine.danger_zone import filter_danger_zone


class RankingResult:
    """Result of one ranking cycle."""

    def __init__(self, computed_at: datetime):
        self.computed_at = computed_at
        self.ranked_tasks: List[RankedTask] = []
        self.danger_zone_tasks: List[RankedTask] = []

    @property
    def ranks(self) -> Dict[str, int]:
        return {ranked.id: ranked.rank for ranked in self.ranked_tasks}


def snapshot_previous_ranks(tasks: List[AppTask]) -> Dict[str, int]:
    """Map task id -> rank recorded by the previous cycle (incomplete tasks only)."""
    return {
        task.id: task.last_rank_position
        for task in tasks
        if not task.is_completed and task.last_rank_position is not None
    }


def rank_tasks(
    tasks: List[AppTask],
    now: datetime,
    previous_ranks: Optional[Dict[str, int]] = None,
) -> List[RankedTask]:
    """Rank incomplete tasks by DPS.

    This function does not modify the tasks.

    Args:
        tasks: Task collection (completed tasks are skipped)
        now: Instant to score against
        previous_ranks: Rank per task id from the previous cycle

    Returns:
        Ranked projections sorted by score (highest first). A task with no
        previous rank shows zero movement.
    """
    previous_ranks = previous_ranks or {}

    scored = [(task, calculate_dps(task, now)) for task in tasks if not task.is_completed]

    # Sort by score descending (highest = most urgent)
    scored.sort(key=lambda item: item[1], reverse=True)

    ranked: List[RankedTask] = []
    for index, (task, score) in enumerate(scored):
        rank = index + 1
        previous_rank = previous_ranks.get(task.id, rank)
        ranked.append(
            RankedTask(
                task=task.model_copy(update={"last_rank_position": rank}),
                score=score,
                rank=rank,
                movement=previous_rank - rank,  # Positive = moved up
            )
        )
    return ranked


def run_ranking_cycle(tasks: List[AppTask], now: datetime) -> RankingResult:
    """Run a full ranking cycle over a task collection.

    Recomputes ranks and the danger zone, then writes each new rank back
    into the task's `last_rank_position` (cleared for completed tasks) so
    the next cycle can report movement.

    Args:
        tasks: Authoritative task collection (updated in place)
        now: Instant to score against

    Returns:
        RankingResult with ranked and danger zone tasks
    """
    result = RankingResult(computed_at=now)

    previous_ranks = snapshot_previous_ranks(tasks)
    result.ranked_tasks = rank_tasks(tasks, now, previous_ranks)
    result.danger_zone_tasks = filter_danger_zone(result.ranked_tasks, now)

    new_ranks = result.ranks
    for task in tasks:
        task.last_rank_position = None if task.is_completed else new_ranks.get(task.id)

    return result
