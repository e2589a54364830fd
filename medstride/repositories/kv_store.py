"""Key-value persistence port and its Cosmos DB implementation."""

import logging
from typing import Any, Protocol

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from medstride.db import get_store_container

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """JSON values keyed by string. Last write wins; no transactions."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class CosmosKeyValueStore:
    """Stores each key as one document: {"id": key, "value": <json>}.

    The container is expected to be partitioned on /id.
    """

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the store with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_store_container()
        return self._container

    def get(self, key: str) -> Any | None:
        """Return the value stored under `key`, or None when absent."""
        try:
            item = self.container.read_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            return None
        return item.get("value")

    def set(self, key: str, value: Any) -> None:
        self.container.upsert_item(body={"id": key, "value": value})

    def delete(self, key: str) -> None:
        """Delete `key`. Deleting an absent key is not an error."""
        try:
            self.container.delete_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            logger.debug("Key %s already absent from store", key)


# Singleton instance
_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Get the key-value store singleton."""
    global _store
    if _store is None:
        _store = CosmosKeyValueStore()
    return _store
