"""SQLAlchemy database models for VisualMemory."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime

from visualmemory.database.database import Base
from visualmemory.models.task import BasePriority, Frequency, enum_to_value, parse_base_priority, parse_frequency


class TaskDB(Base):
    """Database model for AppTask.

    Scores and ranks are never stored; only `last_rank_position` survives
    between ranking cycles.
    """

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True)

    # Position in the engine's collection (keeps tie order stable across reloads)
    position = Column(Integer, nullable=False, default=0, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    category = Column(String, nullable=True)

    # Stored as raw strings; decoded tolerantly so unknown values never fail a load
    base_priority = Column(String, nullable=False, default=BasePriority.MEDIUM.value)
    frequency = Column(String, nullable=False, default=Frequency.ONCE.value)

    # Scheduling fields
    due_at = Column(DateTime, nullable=True)
    duration_min = Column(Integer, nullable=False, default=30)

    # Completion
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    # Movement tracking
    last_rank_position = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from visualmemory.models.task import AppTask

        task = AppTask(
            id=self.id,
            title=self.title,
            base_priority=parse_base_priority(self.base_priority),
            frequency=parse_frequency(self.frequency),
            due_at=self.due_at,
            duration_min=self.duration_min if self.duration_min is not None else 30,
            is_completed=bool(self.is_completed),
            completed_at=self.completed_at,
            last_rank_position=self.last_rank_position,
            created_at=self.created_at or datetime.now(),
        )
        if self.category:
            task.category = self.category
        return task

    @staticmethod
    def column_values(task, position: int = 0) -> dict:
        """Column values (except `id`) for a Pydantic task."""
        return {
            "position": position,
            "title": task.title,
            "category": task.category,
            # Handle enum values (Pydantic with use_enum_values=True returns strings)
            "base_priority": enum_to_value(task.base_priority),
            "frequency": enum_to_value(task.frequency),
            "due_at": task.due_at,
            "duration_min": task.duration_min,
            "is_completed": task.is_completed,
            "completed_at": task.completed_at,
            "last_rank_position": task.last_rank_position,
            "created_at": task.created_at,
        }

    @classmethod
    def from_pydantic(cls, task, position: int = 0):
        """Create database model from Pydantic model."""
        return cls(id=task.id, **cls.column_values(task, position=position))
