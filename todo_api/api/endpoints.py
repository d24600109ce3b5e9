"""Route aggregation for the Task List API."""

from fastapi import APIRouter

from todo_api.api.routers import health, tasks

router = APIRouter()
router.include_router(health.router)
router.include_router(tasks.router)
