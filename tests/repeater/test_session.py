"""
Tests for running and copying saved endpoints through a repeater session.
"""

import pytest

from starapi.core.exceptions import NotFoundError
from starapi.core.models import RequestDescriptor
from starapi.repeater.session import RepeaterSession


class TestRepeaterSession:
    """Tests for composite operations."""

    @pytest.mark.asyncio
    async def test_run_saved_get_endpoint(self, echo_server, endpoint_store):
        session = RepeaterSession(endpoint_store)
        endpoint = endpoint_store.save(
            RequestDescriptor(method="GET", url=echo_server.url("/echo")), "Ping"
        )

        assert [e.name for e in endpoint_store.list()] == ["Ping"]

        result = await session.run(endpoint.id)

        assert result.status == 200
        assert echo_server.received[-1] == {
            "method": "GET",
            "body": "",
            "content_type": "application/json",
        }

    @pytest.mark.asyncio
    async def test_run_sends_saved_body(self, echo_server, endpoint_store):
        session = RepeaterSession(endpoint_store)
        endpoint = endpoint_store.save(
            RequestDescriptor(
                method="POST", url=echo_server.url("/echo"), body='  {"a": 1}  '
            )
        )

        result = await session.run(endpoint.id)

        assert result.data == {"method": "POST", "body": '{"a": 1}'}

    @pytest.mark.asyncio
    async def test_run_does_not_mutate_store(self, echo_server, endpoint_store, memory_backend):
        session = RepeaterSession(endpoint_store)
        endpoint = endpoint_store.save(
            RequestDescriptor(method="GET", url=echo_server.url("/json"))
        )
        before = memory_backend.get(endpoint_store.key)

        await session.run(endpoint.id)

        assert memory_backend.get(endpoint_store.key) == before

    @pytest.mark.asyncio
    async def test_run_unknown_endpoint_raises_not_found(self, endpoint_store):
        session = RepeaterSession(endpoint_store)

        with pytest.raises(NotFoundError):
            await session.run("does-not-exist")

    @pytest.mark.asyncio
    async def test_send_unsaved_request(self, echo_server, endpoint_store):
        session = RepeaterSession(endpoint_store)

        result = await session.send(
            RequestDescriptor(method="GET", url=echo_server.url("/text"))
        )

        assert result.data == "not json"
        assert endpoint_store.list() == []

    def test_load_returns_request_fields(self, endpoint_store):
        session = RepeaterSession(endpoint_store)
        endpoint = endpoint_store.save(
            RequestDescriptor(method="PATCH", url="http://x/y", body="{}"), "Patch it"
        )

        descriptor = session.load(endpoint.id)

        assert descriptor == RequestDescriptor(method="PATCH", url="http://x/y", body="{}")

    def test_load_copy_is_independent_of_store(self, endpoint_store):
        session = RepeaterSession(endpoint_store)
        endpoint = endpoint_store.save(RequestDescriptor(method="GET", url="http://x"))

        descriptor = session.load(endpoint.id)
        descriptor.url = "http://changed"

        assert endpoint_store.get(endpoint.id).url == "http://x"

    def test_copy_text(self, endpoint_store):
        session = RepeaterSession(endpoint_store)
        with_body = endpoint_store.save(
            RequestDescriptor(method="POST", url="http://x/y", body='{"a":1}')
        )
        without_body = endpoint_store.save(RequestDescriptor(method="GET", url="http://x/z"))

        assert session.copy_text(with_body.id) == 'POST http://x/y\n{"a":1}'
        assert session.copy_text(without_body.id) == "GET http://x/z"

    def test_copy_text_unknown_endpoint_raises_not_found(self, endpoint_store):
        session = RepeaterSession(endpoint_store)

        with pytest.raises(NotFoundError):
            session.copy_text("missing")

