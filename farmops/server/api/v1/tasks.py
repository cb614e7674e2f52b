"""
Task Endpoints.

This module handles the production task board: listing and calendar views,
status changes and the completion log that advances order items through
their grow stages.
"""

from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Query

from farmops.core.database.entities import Task
from farmops.core.database.repositories import TaskRepository
from farmops.core.errors import NotFoundError, ValidationError
from farmops.core.models.domain import TaskStatus, TaskType
from farmops.core.models.io import ApiResponse, ErrorResponse
from farmops.core.models.io.tasks import TaskComplete, TaskRead, TaskUpdate
from farmops.server.services.deps import AnyRole, ManagerRole, SessionDep
from farmops.server.services.tasks import TaskService

router = APIRouter()


def _day_start(value: Optional[date]) -> Optional[datetime]:
    return datetime.combine(value, time.min) if value else None


def _day_end(value: Optional[date]) -> Optional[datetime]:
    return datetime.combine(value, time.max) if value else None


async def _load_task(session: SessionDep, farm_id: str, task_id: str) -> Task:
    task = await TaskRepository(session).get_in_farm(farm_id, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


@router.get(
    "",
    response_model=ApiResponse[List[TaskRead]],
    summary="List Tasks",
    description="List tasks ordered by due date, with their order item, product and order.",
    response_description="Matching tasks.",
)
async def list_tasks(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    task_type: Optional[TaskType] = Query(default=None, alias="type"),
    order_item_id: Optional[str] = Query(default=None),
    from_date: Optional[date] = Query(default=None, description="First due date to include"),
    to_date: Optional[date] = Query(default=None, description="Last due date to include"),
) -> ApiResponse[List[TaskRead]]:
    tasks = await TaskRepository(session).search(
        farm_id,
        status=status_filter,
        task_type=task_type,
        order_item_id=order_item_id,
        from_date=_day_start(from_date),
        to_date=_day_end(to_date),
    )
    return ApiResponse(data=await TaskService(session).to_reads(tasks))


@router.get(
    "/calendar",
    response_model=ApiResponse[List[TaskRead]],
    summary="Task Calendar",
    description="Tasks due between two dates (both inclusive) for the calendar view.",
    response_description="Tasks in the date range.",
    responses={400: {"model": ErrorResponse, "description": "Missing date range"}},
)
async def task_calendar(
    farm_id: str,
    context: AnyRole,
    session: SessionDep,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
) -> ApiResponse[List[TaskRead]]:
    if start_date is None or end_date is None:
        raise ValidationError("start_date and end_date are required")
    tasks = await TaskRepository(session).search(
        farm_id, from_date=_day_start(start_date), to_date=_day_end(end_date)
    )
    return ApiResponse(data=await TaskService(session).to_reads(tasks))


@router.patch(
    "/{task_id}",
    response_model=ApiResponse[TaskRead],
    summary="Update Task",
    description="Change a task's status, priority, title, description or due date.",
    response_description="The updated task.",
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def update_task(
    farm_id: str, task_id: str, task_in: TaskUpdate, context: ManagerRole, session: SessionDep
) -> ApiResponse[TaskRead]:
    """
    Update a task.

    Setting the status to `COMPLETED` stamps the completion time and moves the
    linked order item to the next grow stage.
    """
    service = TaskService(session)
    task = await _load_task(session, farm_id, task_id)
    task = await service.update_task(task, task_in)
    return ApiResponse(data=(await service.to_reads([task]))[0])


@router.post(
    "/{task_id}/complete",
    response_model=ApiResponse[TaskRead],
    summary="Complete Task",
    description="Complete a task and log who did it and what was produced.",
    response_description="The completed task.",
    responses={400: {"model": ErrorResponse, "description": "completed_by missing"}},
)
async def complete_task(
    farm_id: str, task_id: str, complete_in: TaskComplete, context: ManagerRole, session: SessionDep
) -> ApiResponse[TaskRead]:
    """
    Complete a task.

    - **completed_by**: Who did the work (required)
    - **actual_trays** / **seed_lot**: Recorded on the item for seeding tasks
    - **actual_yield_oz**: Harvested weight; with `actual_trays` it refines the product's yield per tray
    """
    service = TaskService(session)
    task = await _load_task(session, farm_id, task_id)
    task = await service.complete_task(task, complete_in)
    return ApiResponse(data=(await service.to_reads([task]))[0])
