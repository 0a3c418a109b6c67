"""StarAPI storage components."""

from .backend import InMemoryKeyValueStore, JSONFileKeyValueStore, KeyValueStore
from .endpoints import EndpointStore

__all__ = [
    "EndpointStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "KeyValueStore",
]
