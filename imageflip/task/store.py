"""
Flip task — Cosmos DB record access.

Exactly-one lookup and two-field patches on TaskState documents.  Azure SDK
errors are translated to the service's HTTP exceptions here so the
orchestrator never sees SDK types.
"""
from __future__ import annotations

import logging

from azure.cosmos.aio import ContainerProxy
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError
from azure.core.exceptions import AzureError

from imageflip.exceptions import StorageAccessDenied, TaskAmbiguous, TaskNotFound, TaskStoreError
from imageflip.task.constants import PROCESSED_PATH_FIELD, STATE_FIELD, TaskState
from imageflip.task.schemas import TaskRecord

logger = logging.getLogger(__name__)

_BY_ID_QUERY = "SELECT * FROM c WHERE c.id = @id"


class TaskStore:
    def __init__(self, container: ContainerProxy) -> None:
        self._container = container

    async def get_one(self, task_id: str) -> TaskRecord:
        """Return the single record with *task_id*; raise TaskNotFound on zero matches."""
        items: list[dict] = []
        try:
            async for item in self._container.query_items(
                query=_BY_ID_QUERY,
                parameters=[{"name": "@id", "value": task_id}],
                partition_key=task_id,
            ):
                items.append(item)
        except CosmosHttpResponseError as exc:
            raise _translate(exc, task_id)
        except AzureError as exc:
            logger.error("Task query failed for %s: %s", task_id, exc)
            raise TaskStoreError()

        if not items:
            raise TaskNotFound(task_id)
        if len(items) > 1:
            raise TaskAmbiguous(task_id, len(items))
        logger.info("Read task %s", task_id)
        return TaskRecord.model_validate(items[0])

    async def patch_state(
        self,
        task_id: str,
        state: TaskState,
        processed_file_path: str,
    ) -> TaskRecord:
        """Set state and processedFilePath; last writer wins."""
        # "set" also creates processedFilePath when the upstream writer omitted it
        operations = [
            {"op": "set", "path": f"/{STATE_FIELD}", "value": state.value},
            {"op": "set", "path": f"/{PROCESSED_PATH_FIELD}", "value": processed_file_path},
        ]
        try:
            updated = await self._container.patch_item(
                item=task_id,
                partition_key=task_id,
                patch_operations=operations,
            )
        except CosmosHttpResponseError as exc:
            raise _translate(exc, task_id)
        except AzureError as exc:
            logger.error("Task patch failed for %s: %s", task_id, exc)
            raise TaskStoreError()
        logger.info("Task %s -> %s", task_id, state.value)
        return TaskRecord.model_validate(updated)


def _translate(exc: CosmosHttpResponseError, task_id: str) -> Exception:
    if isinstance(exc, CosmosResourceNotFoundError):
        return TaskNotFound(task_id)
    if exc.status_code in (401, 403):
        return StorageAccessDenied()
    logger.error("Cosmos request failed for %s (%s): %s", task_id, exc.status_code, exc)
    return TaskStoreError()
