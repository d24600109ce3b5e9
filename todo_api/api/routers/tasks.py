"""Task list endpoints, all behind Basic auth."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from todo_api.api.auth import require_credentials
from todo_api.services import TaskService, get_task_service

router = APIRouter(tags=["tasks"], dependencies=[Depends(require_credentials)])

JSON_MEDIA_TYPE = "application/json"


@router.get("/list")
async def list_tasks(
    background_tasks: BackgroundTasks,
    service: TaskService = Depends(get_task_service),
) -> Response:
    """Get all tasks.

    Logic:
    1. Serve the cached snapshot verbatim if present
    2. Otherwise serialize the store
    3. Populate the cache after the response is sent, unless a write got there first
    """
    result = await service.list_tasks()
    if not result.from_cache:
        background_tasks.add_task(service.populate_cache, result.body)
    return Response(content=result.body, media_type=JSON_MEDIA_TYPE)


@router.post("/task")
async def create_task(request: Request, service: TaskService = Depends(get_task_service)) -> Response:
    """Append a task and echo it back."""
    body = await service.create_task(await request.body())
    return Response(content=body, media_type=JSON_MEDIA_TYPE)


@router.put("/task")
async def update_task(request: Request, service: TaskService = Depends(get_task_service)) -> Response:
    """Replace the description of the first task with the given id.

    Unknown ids are a silent no-op; the submitted task is echoed either way.
    """
    body = await service.update_task(await request.body())
    return Response(content=body, media_type=JSON_MEDIA_TYPE)


@router.delete("/task")
async def delete_task(request: Request, service: TaskService = Depends(get_task_service)) -> Response:
    """Remove the first task with the given id (only id is read from the body)."""
    body = await service.delete_task(await request.body())
    return Response(content=body, media_type=JSON_MEDIA_TYPE)
