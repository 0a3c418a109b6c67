"""
Demo script showing how to use the StarAPI executor and endpoint store.

This demonstrates:
- Saving endpoints to a library
- Copying an endpoint as text and importing it back
- Running a saved endpoint against a live API
- Degrading a corrupt library to an empty one
"""

import asyncio
import tempfile
from pathlib import Path

from starapi.core.exceptions import NetworkError
from starapi.core.models import RequestDescriptor
from starapi.repeater import EndpointParser, RepeaterSession
from starapi.storage import EndpointStore, InMemoryKeyValueStore, JSONFileKeyValueStore


def demo_library(store: EndpointStore):
    """Demonstrate saving and listing endpoints."""
    print("=" * 60)
    print("Demo 1: Saved Endpoint Library")
    print("=" * 60)

    store.save(RequestDescriptor(method="GET", url="https://httpbin.org/get"), "Echo GET")
    store.save(
        RequestDescriptor(
            method="POST", url="https://httpbin.org/post", body='{"name": "Ada"}'
        )
    )

    for endpoint in store.list():
        print(f"  • {endpoint.name} [{endpoint.id}]")


def demo_copy(session: RepeaterSession):
    """Demonstrate copy-as-text and importing the copy."""
    print("\n" + "=" * 60)
    print("Demo 2: Copy as Text")
    print("=" * 60)

    endpoint = session.store.list()[-1]
    text = session.copy_text(endpoint.id)
    print(text)

    duplicate = session.store.save(EndpointParser.parse_text(text), "Duplicate")
    print(f"\nImported as: {duplicate.name} [{duplicate.id}]")


async def demo_run(session: RepeaterSession):
    """Demonstrate running a saved endpoint."""
    print("\n" + "=" * 60)
    print("Demo 3: Run Saved Endpoint")
    print("=" * 60)

    endpoint = session.store.list()[0]
    try:
        result = await session.run(endpoint.id)
    except NetworkError as e:
        print(f"  Request failed: {e.message}")
        return

    print(f"  {result.status} {result.status_text}")
    print(f"  content-type: {result.headers.get('content-type')}")
    print(f"  data: {type(result.data).__name__}")


def demo_corruption():
    """Demonstrate that an unreadable library lists as empty."""
    print("\n" + "=" * 60)
    print("Demo 4: Corrupt Library")
    print("=" * 60)

    store = EndpointStore(InMemoryKeyValueStore({"starapi-endpoints": "{oops"}))
    print(f"  endpoints: {store.list()}")
    print(f"  was_corrupt: {store.was_corrupt}")


def main():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = EndpointStore(JSONFileKeyValueStore(Path(temp_dir) / "storage.json"))
        session = RepeaterSession(store)

        demo_library(store)
        demo_copy(session)
        asyncio.run(demo_run(session))
        demo_corruption()


if __name__ == "__main__":
    main()
