"""Tasks API router — the REST surface for the task resource.

- GET    /tasks        list every task
- GET    /tasks/{id}   one task or 404
- POST   /tasks        create (status forced to todo)
- PUT    /tasks/{id}   update the fields present in the body
- DELETE /tasks/{id}   hard delete, reports success even for a missing id

Errors raised by the service are rendered by the handlers registered in
api.errors as ``{"error": message}``.
"""

from fastapi import APIRouter, Depends

from verticals.tasks.models.schemas import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskUpdate,
)
from verticals.tasks.service import TaskService, get_task_service

router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("/tasks")
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """List all tasks in insertion order."""
    return await service.list()


@router.get("/tasks/{task_id}", responses=_NOT_FOUND)
async def get_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    return await service.get(task_id)


@router.post("/tasks")
async def create_task(
    request: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a task. Any status in the body is ignored."""
    return await service.create(request)


@router.put("/tasks/{task_id}", responses=_NOT_FOUND)
async def update_task(
    task_id: int,
    request: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Update a task; ``deadline: null`` clears the deadline."""
    return await service.update(task_id, request)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    await service.delete(task_id)
    return MessageResponse(message="Task deleted")
