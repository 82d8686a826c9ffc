"""Repository layer for task persistence.

The priority engine talks to any object implementing `TaskStore`:
`load()` at startup, `save(tasks)` after every ranking cycle and
`clear()` when the user wipes their tasks.
"""

import logging
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session

from visualmemory.models.task import AppTask
from visualmemory.database.models import TaskDB

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    """Persistence boundary used by the priority engine."""

    def load(self) -> List[AppTask]:
        ...

    def save(self, tasks: List[AppTask]) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryTaskStore:
    """Process-local store (tests and ephemeral sessions).

    Stores copies so callers never share objects with the engine.
    """

    def __init__(self, tasks: Optional[List[AppTask]] = None):
        self._tasks: List[AppTask] = [t.model_copy() for t in (tasks or [])]
        self.save_count = 0

    def load(self) -> List[AppTask]:
        return [t.model_copy() for t in self._tasks]

    def save(self, tasks: List[AppTask]) -> None:
        self._tasks = [t.model_copy() for t in tasks]
        self.save_count += 1

    def clear(self) -> None:
        self._tasks = []


class TaskRepository:
    """Repository for AppTask database operations."""

    def __init__(self, db: Session):
        self.db = db

    def load(self) -> List[AppTask]:
        """Load the whole collection in engine order."""
        try:
            tasks_db = self.db.query(TaskDB).order_by(TaskDB.position).all()
            return [task_db.to_pydantic() for task_db in tasks_db]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to load tasks: {type(e).__name__}: {str(e)}")
            raise

    def get(self, task_id: str) -> Optional[AppTask]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def save(self, tasks: List[AppTask]) -> None:
        """Replace the stored collection with `tasks` in one transaction."""
        try:
            # Only ids are read back, so a row with unreadable columns can still be replaced
            existing_ids = {row.id for row in self.db.query(TaskDB.id).all()}
            stale_ids = existing_ids - {task.id for task in tasks}
            if stale_ids:
                self.db.query(TaskDB).filter(TaskDB.id.in_(stale_ids)).delete(synchronize_session="fetch")
            for position, task in enumerate(tasks):
                if task.id in existing_ids:
                    self.db.query(TaskDB).filter(TaskDB.id == task.id).update(
                        TaskDB.column_values(task, position=position), synchronize_session=False
                    )
                else:
                    self.db.add(TaskDB.from_pydantic(task, position=position))
            self.db.commit()
            logger.debug(f"Saved {len(tasks)} tasks")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save {len(tasks)} tasks: {type(e).__name__}: {str(e)}")
            raise

    def clear(self) -> None:
        """Delete every stored task."""
        try:
            affected = self.db.query(TaskDB).delete()
            self.db.commit()
            logger.debug(f"Cleared {affected} tasks")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to clear tasks: {type(e).__name__}: {str(e)}")
            raise
