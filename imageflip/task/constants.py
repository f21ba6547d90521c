"""
Flip task — static constants and enum types.
"""
import enum


class TaskState(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In progress"
    DONE = "Done"
    # Only written when MarkFailedOnError is enabled
    FAILED = "Failed"


# Cosmos DB partition key path for the TaskState container
PARTITION_KEY_PATH = "/id"

# Document fields patched by the flip flow
STATE_FIELD = "state"
PROCESSED_PATH_FIELD = "processedFilePath"
