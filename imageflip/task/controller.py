"""
Flip task — controller layer.

Thin glue between the route and the orchestrator.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.responses import PlainTextResponse

if TYPE_CHECKING:
    from imageflip.task.service import FlipTaskService

logger = logging.getLogger(__name__)


async def rotate_image(task_id: str, service: FlipTaskService) -> PlainTextResponse:
    logger.info("RotateImg requested for task %s", task_id)
    url = await service.run(task_id)
    return PlainTextResponse(url)
