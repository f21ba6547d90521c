"""
Flip task — FastAPI dependencies.

Builds the orchestrator from the lazily created Azure clients. Tests
override get_flip_service with a service wired to in-memory fakes.
"""
from functools import lru_cache

from fastapi import Depends

from imageflip.config import Settings
from imageflip.database import get_task_container
from imageflip.storage import BlobStore
from imageflip.task.service import FlipTaskService
from imageflip.task.store import TaskStore


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_flip_service(settings: Settings = Depends(get_settings)) -> FlipTaskService:
    return FlipTaskService(
        settings,
        TaskStore(get_task_container(settings)),
        BlobStore.from_settings(settings),
    )
