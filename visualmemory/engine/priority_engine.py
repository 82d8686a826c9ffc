"""Priority engine facade for VisualMemory.

`TaskPriorityEngine` owns the authoritative task list. Every mutation goes
through it and triggers a synchronous ranking cycle before returning, so
callers never observe stale ranks. While started, a timer re-runs the
cycle every RECALC_INTERVAL_SECONDS so time-driven urgency keeps moving.

All access is serialized behind one re-entrant lock; the timer thread takes
the same lock, so it never interleaves with a mutation.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from threading import RLock, Timer
from typing import Callable, List, Optional

from visualmemory.config import RECALC_INTERVAL_SECONDS
from visualmemory.database.repository import InMemoryTaskStore, TaskStore
from visualmemory.engine.ranking import run_ranking_cycle
from visualmemory.models.onboarding import OnboardingTask
from visualmemory.models.task import AppTask, RankedTask
from visualmemory.recurrence.next_due import build_task_from_onboarding

logger = logging.getLogger(__name__)

Listener = Callable[["TaskPriorityEngine"], None]


class TaskPriorityEngine:
    """Ranks tasks by Dynamic Priority Score and keeps the ranking current."""

    def __init__(
        self,
        store: Optional[TaskStore] = None,
        clock: Callable[[], datetime] = datetime.now,
        interval_seconds: float = RECALC_INTERVAL_SECONDS,
    ):
        self.store = store if store is not None else InMemoryTaskStore()
        self.clock = clock
        self.interval_seconds = interval_seconds

        self._lock = RLock()
        self._tasks: List[AppTask] = []
        self._ranked: List[RankedTask] = []
        self._danger_zone: List[RankedTask] = []
        self._last_updated: datetime = clock()
        self._listeners: List[Listener] = []

        self._running = False
        self._generation = 0
        self._timer: Optional[Timer] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load the collection from the store and rank it.

        Malformed persisted state is treated as "no tasks" rather than an error.
        """
        with self._lock:
            try:
                tasks = list(self.store.load())
            except Exception as e:
                logger.warning(f"Discarding unreadable task store: {type(e).__name__}: {str(e)}")
                tasks = []
            self._tasks = tasks
            logger.info(f"Loaded {len(tasks)} tasks")
            self.recalculate()

    def start(self) -> None:
        """Start the periodic ranking cycle (runs one cycle immediately)."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            logger.info(f"Starting ranking cycle every {self.interval_seconds:g}s")
            self._schedule_next(self._generation)
            self.recalculate()

    def stop(self) -> None:
        """Stop the periodic cycle. No timer callback recomputes after this returns."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            logger.info("Stopped ranking cycle")

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def _schedule_next(self, generation: int) -> None:
        timer = Timer(self.interval_seconds, self._on_timer, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            # A stop() (or stop/start) since this timer was armed invalidates it
            if not self._running or generation != self._generation:
                return
            try:
                self.recalculate()
            except Exception:
                logger.exception("Periodic ranking cycle failed")
            finally:
                self._schedule_next(generation)

    # ------------------------------------------------------------------
    # Ranking cycle
    # ------------------------------------------------------------------

    def recalculate(self) -> List[RankedTask]:
        """Run one ranking cycle, persist the collection and notify listeners."""
        with self._lock:
            now = self.clock()
            result = run_ranking_cycle(self._tasks, now)
            self._ranked = result.ranked_tasks
            self._danger_zone = result.danger_zone_tasks
            self._last_updated = now

            self.store.save(self._tasks)
            self._notify()
            return list(self._ranked)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(engine)` after every ranking cycle.

        Returns:
            A callable that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception(f"Ranking listener {listener!r} failed")

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def all_tasks(self) -> List[AppTask]:
        with self._lock:
            return [task.model_copy() for task in self._tasks]

    @property
    def ranked_tasks(self) -> List[RankedTask]:
        with self._lock:
            return list(self._ranked)

    @property
    def danger_zone_tasks(self) -> List[RankedTask]:
        with self._lock:
            return list(self._danger_zone)

    @property
    def last_updated(self) -> datetime:
        with self._lock:
            return self._last_updated

    def get_task(self, task_id: str) -> Optional[AppTask]:
        with self._lock:
            task = self._find(task_id)
            return task.model_copy() if task is not None else None

    def top_tasks(self, count: int) -> List[RankedTask]:
        with self._lock:
            return list(self._ranked[:max(count, 0)])

    def completed_today(self, now: Optional[datetime] = None) -> List[AppTask]:
        """Tasks completed since local midnight."""
        now = now or self.clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        with self._lock:
            return [
                task.model_copy()
                for task in self._tasks
                if task.is_completed and task.completed_at is not None and task.completed_at >= start_of_day
            ]

    # ------------------------------------------------------------------
    # Mutations (each one re-ranks before returning)
    # ------------------------------------------------------------------

    def _find(self, task_id: str) -> Optional[AppTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    @contextmanager
    def _mutation(self, action: str):
        """Hold the lock and restore the previous state if the mutation fails.

        A failed ranking cycle or store save leaves the collection, the
        ranking and `last_updated` exactly as they were before the call.
        """
        with self._lock:
            tasks = [task.model_copy() for task in self._tasks]
            ranked, danger_zone, last_updated = self._ranked, self._danger_zone, self._last_updated
            try:
                yield
            except Exception as e:
                self._tasks = tasks
                self._ranked, self._danger_zone, self._last_updated = ranked, danger_zone, last_updated
                logger.error(f"{action} failed, previous state restored: {type(e).__name__}: {str(e)}")
                raise

    def add_task(self, task: AppTask) -> None:
        """Add a task. Adding an id that already exists is a no-op."""
        with self._mutation("add_task"):
            if self._find(task.id) is not None:
                logger.debug(f"Task {task.id} already exists, not adding")
                return
            new_task = task.model_copy()
            # Rank history belongs to the engine
            new_task.last_rank_position = None
            self._tasks.append(new_task)
            logger.debug(f"Added task {task.id}: {task.title[:50]}")
            self.recalculate()

    def complete_task(self, task_id: str) -> None:
        with self._mutation("complete_task"):
            task = self._find(task_id)
            if task is None:
                logger.debug(f"complete_task: task {task_id} not found")
                return
            task.is_completed = True
            task.completed_at = self.clock()
            task.last_rank_position = None
            logger.debug(f"Completed task {task_id}")
            self.recalculate()

    def uncomplete_task(self, task_id: str) -> None:
        with self._mutation("uncomplete_task"):
            task = self._find(task_id)
            if task is None:
                logger.debug(f"uncomplete_task: task {task_id} not found")
                return
            task.is_completed = False
            task.completed_at = None
            logger.debug(f"Reopened task {task_id}")
            self.recalculate()

    def delete_task(self, task_id: str) -> None:
        with self._mutation("delete_task"):
            if self._find(task_id) is None:
                logger.debug(f"delete_task: task {task_id} not found")
                return
            self._tasks = [task for task in self._tasks if task.id != task_id]
            logger.debug(f"Deleted task {task_id}")
            self.recalculate()

    def update_task(self, task: AppTask) -> None:
        """Replace the stored task with the same id.

        Completion fields are normalized so that `completed_at` is set iff
        `is_completed`; the engine keeps its own rank history.
        """
        with self._mutation("update_task"):
            for index, existing in enumerate(self._tasks):
                if existing.id != task.id:
                    continue
                updated = task.model_copy()
                if updated.is_completed:
                    updated.completed_at = updated.completed_at or existing.completed_at or self.clock()
                    updated.last_rank_position = None
                else:
                    updated.completed_at = None
                    updated.last_rank_position = existing.last_rank_position
                self._tasks[index] = updated
                logger.debug(f"Updated task {task.id}: {task.title[:50]}")
                self.recalculate()
                return
            logger.debug(f"update_task: task {task.id} not found")

    def bulk_import(self, onboarding_tasks: List[OnboardingTask]) -> List[AppTask]:
        """Import selected onboarding tasks, skipping ids that already exist.

        Returns:
            The tasks that were actually added
        """
        with self._mutation("bulk_import"):
            now = self.clock()
            existing_ids = {task.id for task in self._tasks}
            imported: List[AppTask] = []
            for proto in onboarding_tasks:
                if not proto.is_selected or proto.id in existing_ids:
                    continue
                task = build_task_from_onboarding(proto, now)
                self._tasks.append(task)
                existing_ids.add(task.id)
                imported.append(task.model_copy())
            logger.info(f"Imported {len(imported)} of {len(onboarding_tasks)} onboarding tasks")
            self.recalculate()
            return imported

    def clear_all(self) -> None:
        """Remove every task and wipe the store."""
        with self._mutation("clear_all"):
            self._tasks = []
            self.store.clear()
            logger.info("Cleared all tasks")
            self.recalculate()
