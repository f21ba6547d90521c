"""
Flip task — orchestration.

Zero FastAPI imports. Receives settings and store handles via the
constructor. Fully testable with in-memory containers.

Sequence for one task id:
  1. Read the record (exactly one match, else TaskNotFound / TaskAmbiguous).
  2. Mark it "In progress" and clear processedFilePath.
  3. Download the source blob into a fresh scratch directory.
  4. Rotate 180 degrees and encode at the configured format/quality.
  5. Upload as <basename>_flipped.<ext> in the same container.
  6. Mark it "Done" with the uploaded blob URL.
  7. Return that URL.

Any failure is logged here and re-raised unchanged. Unless
mark_failed_on_error is set, a failure after step 2 leaves the record
"In progress".
"""
from __future__ import annotations

import asyncio
import logging
import posixpath
import tempfile
from pathlib import Path

from PIL import Image

from imageflip.config import Settings
from imageflip.exceptions import ImageDecodeError
from imageflip.imaging import derive_flipped_name, open_image, save_flipped
from imageflip.storage import BlobStore
from imageflip.task.constants import TaskState
from imageflip.task.store import TaskStore

logger = logging.getLogger(__name__)


class FlipTaskService:
    def __init__(self, settings: Settings, tasks: TaskStore, blobs: BlobStore) -> None:
        self._settings = settings
        self._tasks = tasks
        self._blobs = blobs

    async def run(self, task_id: str) -> str:
        # Patches target the caller's id verbatim; Cosmos ids are not normalised
        try:
            task = await self._tasks.get_one(task_id)
            await self._tasks.patch_state(task_id, TaskState.IN_PROGRESS, "")
            try:
                url = await self._flip_blob(task.file_name)
                updated = await self._tasks.patch_state(task_id, TaskState.DONE, url)
            except Exception:
                if self._settings.mark_failed_on_error:
                    await self._mark_failed(task_id)
                raise
        except Exception:
            logger.exception("Flip failed for task %s", task_id)
            raise

        logger.info("Task %s done: %s", task_id, updated.processed_file_path)
        return updated.processed_file_path

    async def _flip_blob(self, file_name: str) -> str:
        flipped_name = derive_flipped_name(file_name, self._settings.flipped_suffix)

        # Unique per invocation; concurrent runs on the same file never share paths
        with tempfile.TemporaryDirectory(prefix="imageflip-") as scratch:
            src = Path(scratch, "source-" + posixpath.basename(file_name))
            dst = Path(scratch, "flipped-" + posixpath.basename(flipped_name))

            await self._blobs.download_to_path(file_name, src)

            # Pillow is CPU-bound → offload to thread
            loop = asyncio.get_running_loop()
            try:
                image = await loop.run_in_executor(None, open_image, src)
            except (OSError, Image.DecompressionBombError) as exc:
                raise ImageDecodeError(file_name) from exc

            await loop.run_in_executor(
                None,
                lambda: save_flipped(
                    image,
                    dst,
                    image_format=self._settings.output_format,
                    quality=self._settings.output_quality,
                ),
            )

            return await self._blobs.upload_from_path(
                flipped_name, dst, self._settings.output_content_type,
            )

    async def _mark_failed(self, task_id: str) -> None:
        try:
            await self._tasks.patch_state(task_id, TaskState.FAILED, "")
        except Exception:
            logger.exception("Failed to update error status for task %s", task_id)
