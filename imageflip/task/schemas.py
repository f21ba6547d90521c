"""
Flip task — Pydantic V2 document schemas.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from imageflip.task.constants import TaskState


class TaskRecord(BaseModel):
    """A TaskState document as stored in Cosmos DB."""
    model_config = ConfigDict(
        populate_by_name=True,
        # Cosmos adds _rid, _self, _etag, _attachments, _ts
        extra="ignore",
    )

    id: str = Field(min_length=1)
    file_name: str = Field(alias="fileName", min_length=1)
    state: TaskState = TaskState.PENDING
    original_file_path: str = Field(default="", alias="originalFilePath")
    processed_file_path: str = Field(default="", alias="processedFilePath")
