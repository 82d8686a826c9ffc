"""Priority engine for VisualMemory."""

from visualmemory.engine.scoring import calculate_dps, base_priority_score, frequency_weight, urgency_multiplier
from visualmemory.engine.ranking import rank_tasks, run_ranking_cycle, RankingResult
from visualmemory.engine.danger_zone import filter_danger_zone, is_in_danger_zone, is_routine_task
from visualmemory.engine.priority_engine import TaskPriorityEngine

__all__ = [
    "calculate_dps",
    "base_priority_score",
    "frequency_weight",
    "urgency_multiplier",
    "rank_tasks",
    "run_ranking_cycle",
    "RankingResult",
    "filter_danger_zone",
    "is_in_danger_zone",
    "is_routine_task",
    "TaskPriorityEngine",
]
