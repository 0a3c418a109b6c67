"""
Repeater Session

Composes the endpoint store and the request executor: running a saved
endpoint, loading its fields for editing, and copying it as text.
"""

from typing import Optional

from ..core.logging import get_logger
from ..core.models import RequestDescriptor, ResponseResult
from ..storage.endpoints import EndpointStore
from .editor import EndpointFormatter
from .executor import RequestExecutor

logger = get_logger(__name__)


class RepeaterSession:
    """
    Front-end facing operations over a store and an executor.

    The session holds no request state of its own; every operation takes
    the descriptor or the endpoint id it works on.
    """

    def __init__(
        self, store: EndpointStore, executor: Optional[RequestExecutor] = None
    ) -> None:
        self.store = store
        self.executor = executor or RequestExecutor()

    async def send(self, descriptor: RequestDescriptor) -> ResponseResult:
        """Send an unsaved request."""
        return await self.executor.send(descriptor)

    async def run(self, endpoint_id: str) -> ResponseResult:
        """
        Send a saved endpoint.

        Args:
            endpoint_id: Id of the saved endpoint

        Returns:
            ResponseResult of the round-trip

        Raises:
            NotFoundError: If no endpoint has this id
            NetworkError: If the request cannot be completed
        """
        endpoint = self.store.get(endpoint_id)
        logger.info(f"Running saved endpoint: {endpoint.name} ({endpoint.id})")
        return await self.executor.send(endpoint.to_descriptor())

    def load(self, endpoint_id: str) -> RequestDescriptor:
        """Return a copy of a saved endpoint's request fields."""
        return self.store.get(endpoint_id).to_descriptor()

    def copy_text(self, endpoint_id: str) -> str:
        """Return the copy-as-text rendering of a saved endpoint."""
        return EndpointFormatter.to_text(self.store.get(endpoint_id))
