"""FastAPI feed for VisualMemory.

Exposes the priority engine to a presentation layer: read the ranking and
the danger zone, and issue mutations that re-rank synchronously.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field, ValidationError, field_validator

from visualmemory.engine.priority_engine import TaskPriorityEngine
from visualmemory.models.onboarding import OnboardingTask
from visualmemory.models.task import AppTask, BasePriority, Frequency, RankedTask, ScoreUrgency, UrgencyLevel
from visualmemory.models.task_factory import create_task


# Request / response models
class TaskCreateRequest(BaseModel):
    """Request body for POST /tasks."""
    title: str = Field(..., min_length=1)
    base_priority: BasePriority = BasePriority.MEDIUM
    frequency: Frequency = Frequency.ONCE
    due_at: Optional[datetime] = None
    category: Optional[str] = None
    duration_min: Optional[int] = Field(None, ge=0)


class TaskUpdateRequest(BaseModel):
    """Request body for PUT /tasks/{task_id} (only provided fields change)."""
    title: Optional[str] = Field(None, min_length=1)
    base_priority: Optional[BasePriority] = None
    frequency: Optional[Frequency] = None
    due_at: Optional[datetime] = None
    category: Optional[str] = None
    duration_min: Optional[int] = Field(None, ge=0)

    @field_validator("title", "base_priority", "frequency", "category", "duration_min")
    @classmethod
    def _reject_null(cls, v):
        # Only `due_at` may be cleared with an explicit null
        if v is None:
            raise ValueError("may not be null")
        return v


class RankedTaskView(BaseModel):
    """One row of the ranked feed."""
    task: AppTask
    score: float
    rank: int
    movement: int
    movement_display: str
    score_display: str
    score_urgency: ScoreUrgency
    urgency_level: UrgencyLevel
    time_remaining_display: str
    relative_time_display: Optional[str] = None


class RankingResponse(BaseModel):
    """Response for ranking reads."""
    last_updated: datetime
    tasks: List[RankedTaskView]


class ImportResponse(BaseModel):
    """Response for onboarding import."""
    imported_count: int
    tasks: List[AppTask]


def _view(ranked: RankedTask, now: datetime) -> RankedTaskView:
    return RankedTaskView(
        task=ranked.task,
        score=ranked.score,
        rank=ranked.rank,
        movement=ranked.movement,
        movement_display=ranked.movement_display,
        score_display=ranked.score_display,
        score_urgency=ranked.score_urgency,
        urgency_level=ranked.task.urgency_level(now),
        time_remaining_display=ranked.task.time_remaining_display(now),
        relative_time_display=ranked.task.relative_time_display(now),
    )


def _ranking_response(engine: TaskPriorityEngine, ranked: List[RankedTask]) -> RankingResponse:
    now = engine.clock()
    return RankingResponse(
        last_updated=engine.last_updated,
        tasks=[_view(r, now) for r in ranked],
    )


def _default_engine_resources():
    """Build an engine backed by the configured database."""
    from visualmemory.database.database import SessionLocal, init_db
    from visualmemory.database.repository import TaskRepository

    init_db()
    session = SessionLocal()
    return TaskPriorityEngine(store=TaskRepository(session)), session


def get_engine(request: Request) -> TaskPriorityEngine:
    """Resolve the engine owned by the running application."""
    return request.app.state.engine


def create_app(priority_engine: Optional[TaskPriorityEngine] = None) -> FastAPI:
    """Build the FastAPI application around an engine instance.

    Without an explicit engine, one backed by `DATABASE_URL` is built at startup.
    The engine is loaded and started in the lifespan and stopped on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = None
        engine = priority_engine
        if engine is None:
            engine, session = _default_engine_resources()
        engine.load()
        engine.start()
        app.state.engine = engine
        try:
            yield
        finally:
            engine.stop()
            if session is not None:
                session.close()

    app = FastAPI(
        title="VisualMemory API",
        description="Dynamic priority ranking for personal tasks",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/tasks", response_model=List[AppTask])
    async def list_tasks(engine: TaskPriorityEngine = Depends(get_engine)):
        return engine.all_tasks

    @app.get("/tasks/completed-today", response_model=List[AppTask])
    async def completed_today(engine: TaskPriorityEngine = Depends(get_engine)):
        return engine.completed_today()

    @app.get("/ranked", response_model=RankingResponse)
    async def ranked(limit: Optional[int] = None, engine: TaskPriorityEngine = Depends(get_engine)):
        tasks = engine.top_tasks(limit) if limit is not None else engine.ranked_tasks
        return _ranking_response(engine, tasks)

    @app.get("/danger-zone", response_model=RankingResponse)
    async def danger_zone(engine: TaskPriorityEngine = Depends(get_engine)):
        return _ranking_response(engine, engine.danger_zone_tasks)

    @app.post("/tasks", response_model=AppTask, status_code=201)
    async def add_task(request: TaskCreateRequest, engine: TaskPriorityEngine = Depends(get_engine)):
        task = create_task(
            title=request.title,
            base_priority=request.base_priority,
            frequency=request.frequency,
            due_at=request.due_at,
            category=request.category,
            duration_min=request.duration_min,
        )
        engine.add_task(task)
        return engine.get_task(task.id)

    @app.get("/tasks/{task_id}", response_model=AppTask)
    async def get_task(task_id: str, engine: TaskPriorityEngine = Depends(get_engine)):
        task = engine.get_task(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        return task

    @app.put("/tasks/{task_id}", response_model=AppTask)
    async def update_task(
        task_id: str,
        request: TaskUpdateRequest,
        engine: TaskPriorityEngine = Depends(get_engine),
    ):
        existing = engine.get_task(task_id)
        if existing is None:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        changes = request.model_dump(exclude_unset=True)
        try:
            updated = AppTask(**{**existing.model_dump(), **changes})
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=jsonable_encoder(e.errors()))
        engine.update_task(updated)
        return engine.get_task(task_id)

    @app.post("/tasks/{task_id}/complete", response_model=AppTask)
    async def complete_task(task_id: str, engine: TaskPriorityEngine = Depends(get_engine)):
        if engine.get_task(task_id) is None:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        engine.complete_task(task_id)
        return engine.get_task(task_id)

    @app.post("/tasks/{task_id}/uncomplete", response_model=AppTask)
    async def uncomplete_task(task_id: str, engine: TaskPriorityEngine = Depends(get_engine)):
        if engine.get_task(task_id) is None:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        engine.uncomplete_task(task_id)
        return engine.get_task(task_id)

    @app.delete("/tasks/{task_id}", status_code=204)
    async def delete_task(task_id: str, engine: TaskPriorityEngine = Depends(get_engine)):
        if engine.get_task(task_id) is None:
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        engine.delete_task(task_id)

    @app.delete("/tasks", status_code=204)
    async def clear_tasks(engine: TaskPriorityEngine = Depends(get_engine)):
        engine.clear_all()

    @app.post("/import", response_model=ImportResponse)
    async def import_tasks(tasks: List[OnboardingTask], engine: TaskPriorityEngine = Depends(get_engine)):
        imported = engine.bulk_import(tasks)
        return ImportResponse(imported_count=len(imported), tasks=imported)

    return app


app = create_app()
