"""
Flip task — HTTP routes.

Function-level auth is enforced by the Functions host (x-functions-key),
not by the app.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from imageflip.task import controller
from imageflip.task.dependencies import get_flip_service
from imageflip.task.service import FlipTaskService

router = APIRouter(prefix="/api", tags=["tasks"])


@router.get(
    "/RotateImg",
    response_class=PlainTextResponse,
    summary="Flip a task's image",
    description=(
        "Reads the TaskState record with the given id, rotates its source "
        "image by 180 degrees, uploads <name>_flipped.<ext> next to it and "
        "returns the uploaded blob URL as plain text."
    ),
)
async def rotate_image(
    task_id: str = Query(alias="id", min_length=1, description="TaskState record id"),
    service: FlipTaskService = Depends(get_flip_service),
) -> PlainTextResponse:
    return await controller.rotate_image(task_id, service)
