from __future__ import annotations

import logging

from azure.cosmos import PartitionKey
from azure.cosmos.aio import ContainerProxy, CosmosClient

from imageflip.config import Settings
from imageflip.exceptions import StorageCredentialsMissing
from imageflip.task.constants import PARTITION_KEY_PATH

logger = logging.getLogger(__name__)

_client: CosmosClient | None = None
_container: ContainerProxy | None = None


def init_db(settings: Settings) -> CosmosClient:
    """Return (and lazily create) the module-level async Cosmos client."""
    global _client
    if _client is None:
        if not settings.cosmos_endpoint:
            raise StorageCredentialsMissing("CosmosDBEndpoint")
        if not settings.cosmos_key:
            raise StorageCredentialsMissing("CosmosDBKey")
        _client = CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)
    return _client


async def provision(settings: Settings) -> ContainerProxy:
    """Create the database and task container if they do not exist yet."""
    global _container
    client = init_db(settings)
    database = await client.create_database_if_not_exists(id=settings.cosmos_database)
    _container = await database.create_container_if_not_exists(
        id=settings.cosmos_container,
        partition_key=PartitionKey(path=PARTITION_KEY_PATH),
    )
    logger.info(
        "Cosmos container ready: %s/%s", settings.cosmos_database, settings.cosmos_container,
    )
    return _container


def get_task_container(settings: Settings) -> ContainerProxy:
    global _container
    if _container is None:
        client = init_db(settings)
        database = client.get_database_client(settings.cosmos_database)
        _container = database.get_container_client(settings.cosmos_container)
    return _container


async def close_db() -> None:
    global _client, _container
    if _client is not None:
        await _client.close()
        _client = None
        _container = None
        logger.info("Cosmos client closed")
