"""
Saved Endpoint Store

Owns the persisted, ordered library of saved request descriptors. Every
mutation rewrites the full snapshot into a single key-value slot.
"""

import json
import time
from typing import Callable, List, Optional

from pydantic import ValidationError as ModelValidationError

from ..core.config import DEFAULT_STORE_KEY
from ..core.exceptions import NotFoundError, StorageError, ValidationError
from ..core.logging import get_logger
from ..core.models import RequestDescriptor, SavedEndpoint
from .backend import KeyValueStore

logger = get_logger(__name__)


class EndpointStore:
    """
    Persisted sequence of SavedEndpoint records in save order.

    Records are deserialized fresh on every read, so callers never share
    mutable state with the store. Not safe for concurrent writers: save and
    delete perform read-modify-write on the whole snapshot.

    Attributes:
        was_corrupt: True when the last read found a stored value that could
            not be decoded and was treated as an empty collection
    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = DEFAULT_STORE_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.backend = backend
        self.key = key
        self.was_corrupt = False
        self._clock = clock
        self._last_id = 0

    def list(self) -> List[SavedEndpoint]:
        """
        List saved endpoints in save order.

        Never raises: an absent, unreadable or corrupt stored value yields an
        empty list and sets :attr:`was_corrupt` accordingly.
        """
        return self._load()

    def get(self, endpoint_id: str) -> SavedEndpoint:
        """
        Get a saved endpoint by id.

        Raises:
            NotFoundError: If no endpoint has this id
        """
        for endpoint in self._load():
            if endpoint.id == endpoint_id:
                return endpoint
        raise NotFoundError(f"Saved endpoint not found: {endpoint_id}")

    def save(
        self, descriptor: RequestDescriptor, display_name: Optional[str] = None
    ) -> SavedEndpoint:
        """
        Save a request descriptor at the end of the library.

        Args:
            descriptor: Request to save
            display_name: Label; defaults to ``"{method} {url}"`` when blank

        Returns:
            The created SavedEndpoint

        Raises:
            ValidationError: If the URL is empty (nothing is written)
            StorageError: If the snapshot cannot be written
        """
        if not descriptor.url.strip():
            raise ValidationError("Cannot save an endpoint without a URL")

        endpoints = self._load()
        if self.was_corrupt:
            logger.warning(f"Overwriting unreadable endpoint collection '{self.key}'")

        endpoint = SavedEndpoint(
            id=self._next_id(endpoints),
            url=descriptor.url,
            method=descriptor.method,
            body=(descriptor.body or "").strip() or None,
            name=(display_name or "").strip() or descriptor.default_name(),
        )
        endpoints.append(endpoint)
        self._persist(endpoints)

        logger.info(f"Saved endpoint: {endpoint.name} ({endpoint.id})")
        return endpoint

    def delete(self, endpoint_id: str) -> None:
        """
        Delete a saved endpoint. Unknown ids are ignored.

        Raises:
            StorageError: If the snapshot cannot be written
        """
        endpoints = self._load()
        remaining = [e for e in endpoints if e.id != endpoint_id]
        if len(remaining) == len(endpoints):
            logger.debug(f"Delete ignored, endpoint not found: {endpoint_id}")
            return

        self._persist(remaining)
        logger.info(f"Deleted endpoint: {endpoint_id}")

    def _next_id(self, endpoints: List[SavedEndpoint]) -> str:
        """Millisecond timestamp, bumped past every id issued or stored."""
        floor = max(
            [self._last_id]
            + [int(e.id) for e in endpoints if e.id.isascii() and e.id.isdigit()]
        )
        candidate = int(self._clock() * 1000)
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return str(candidate)

    def _load(self) -> List[SavedEndpoint]:
        self.was_corrupt = False

        try:
            raw = self.backend.get(self.key)
        except StorageError as e:
            self.was_corrupt = True
            logger.warning(f"Failed to read saved endpoints: {e}")
            return []

        if raw is None or not raw.strip():
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError(f"expected a JSON array, got {type(records).__name__}")
            return [SavedEndpoint.model_validate(record) for record in records]
        except (ValueError, ModelValidationError, ValidationError) as e:
            self.was_corrupt = True
            logger.warning(f"Failed to load saved endpoints from '{self.key}': {e}")
            return []

    def _persist(self, endpoints: List[SavedEndpoint]) -> None:
        value = json.dumps([e.to_record() for e in endpoints], ensure_ascii=False)
        self.backend.set(self.key, value)
        self.was_corrupt = False
