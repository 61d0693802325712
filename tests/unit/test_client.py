"""Tests for CodaClient endpoint mapping, cache invalidation and lifecycle."""

import pytest

from coda_sdk import ClientConfig, CodaClient
from coda_sdk.exceptions import ConfigurationError, UnauthorizedError
from coda_sdk.transport import HttpxTransport
from coda_sdk.types.mutation import MutationStatus

BASE = "https://coda.io/apis/v1"


@pytest.fixture
def client(config, transport):
    return CodaClient(config, transport=transport)


class TestConstruction:
    def test_rejects_non_transport(self, config):
        with pytest.raises(ConfigurationError):
            CodaClient(config, transport=object())

    def test_requires_token(self, empty_env):
        with pytest.raises(UnauthorizedError):
            CodaClient(ClientConfig(), token_source=empty_env)

    def test_token_from_environment(self, api_token, transport):
        from coda_sdk.config import EnvironmentTokenSource

        source = EnvironmentTokenSource(environ={"CODA_API_TOKEN": api_token})
        client = CodaClient(transport=transport, token_source=source)

        assert client.engine._headers()["Authorization"] == f"Bearer {api_token}"

    def test_default_transport(self, config):
        client = CodaClient(config)
        assert isinstance(client.engine.transport, HttpxTransport)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_transport_left_open(self, client, transport):
        async with client:
            pass
        assert transport.closed is False

    @pytest.mark.asyncio
    async def test_owned_transport_closed(self, config):
        client = CodaClient(config)
        transport = client.engine.transport
        closed = []

        async def aclose():
            closed.append(True)

        transport.aclose = aclose
        async with client:
            pass

        assert closed == [True]


class TestReadEndpoints:
    @pytest.mark.asyncio
    async def test_whoami(self, client, transport, json_response):
        transport.queue(json_response({"name": "Ada", "loginId": "ada@x.io"}))

        me = await client.whoami()

        assert me["name"] == "Ada"
        assert transport.calls[0]["url"] == f"{BASE}/whoami"

    @pytest.mark.asyncio
    async def test_list_docs_params(self, client, transport, json_response):
        transport.queue(json_response({"items": []}))

        await client.list_docs(is_owner=True, query="plan", limit=10)

        assert transport.calls[0]["url"] == (
            f"{BASE}/docs?isOwner=true&limit=10&query=plan"
        )

    @pytest.mark.asyncio
    async def test_list_tables_joins_types(self, client, transport, json_response):
        transport.queue(json_response({"items": []}))

        await client.list_tables("d1", table_types=["table", "view"])

        assert transport.calls[0]["url"] == (
            f"{BASE}/docs/d1/tables?tableTypes=table%2Cview"
        )

    @pytest.mark.asyncio
    async def test_list_rows_params(self, client, transport, json_response):
        transport.queue(json_response({"items": []}))

        await client.list_rows(
            "d1",
            "t1",
            use_column_names=True,
            value_format="simple",
            limit=50,
            page_token="p2",
        )

        assert transport.calls[0]["url"] == (
            f"{BASE}/docs/d1/tables/t1/rows"
            "?limit=50&pageToken=p2&useColumnNames=true&valueFormat=simple"
        )

    @pytest.mark.asyncio
    async def test_path_segments_are_encoded(self, client, transport, json_response):
        transport.queue(json_response({"id": "c1"}))

        await client.get_column("d1", "My Table", "c/1")

        assert transport.calls[0]["url"] == (
            f"{BASE}/docs/d1/tables/My%20Table/columns/c%2F1"
        )

    @pytest.mark.asyncio
    async def test_get_row(self, client, transport, json_response):
        transport.queue(json_response({"id": "i-1", "values": {}}))

        row = await client.get_row("d1", "t1", "i-1", use_column_names=True)

        assert row["id"] == "i-1"
        assert transport.calls[0]["url"] == (
            f"{BASE}/docs/d1/tables/t1/rows/i-1?useColumnNames=true"
        )

    @pytest.mark.asyncio
    async def test_reads_are_cached(self, client, transport, json_response):
        transport.queue(json_response({"id": "d1"}))

        await client.get_doc("d1")
        await client.get_doc("d1")

        assert transport.call_count == 1


class TestWriteEndpoints:
    @pytest.mark.asyncio
    async def test_create_doc(self, client, transport, json_response):
        transport.queue(json_response({"id": "d2"}, status=201))

        doc = await client.create_doc("Plan", folder_id="fl-1")

        assert doc["id"] == "d2"
        assert transport.calls[0]["method"] == "POST"
        assert transport.body() == {"title": "Plan", "folderId": "fl-1"}

    @pytest.mark.asyncio
    async def test_insert_rows(self, client, transport, json_response):
        transport.queue(json_response({"requestId": "r1", "addedRowIds": ["i-1"]}))
        rows = [{"cells": [{"column": "Name", "value": "Ada"}]}]

        result = await client.insert_rows(
            "d1", "t1", rows, key_columns=["Name"], disable_parsing=True
        )

        assert result["requestId"] == "r1"
        assert transport.calls[0]["url"] == f"{BASE}/docs/d1/tables/t1/rows"
        assert transport.body() == {
            "rows": rows,
            "keyColumns": ["Name"],
            "disableParsing": True,
        }

    @pytest.mark.asyncio
    async def test_update_row(self, client, transport, json_response):
        transport.queue(json_response({"requestId": "r1", "id": "i-1"}))
        row = {"cells": [{"column": "Name", "value": "Bea"}]}

        await client.update_row("d1", "t1", "i-1", row)

        assert transport.calls[0]["method"] == "PUT"
        assert transport.calls[0]["url"] == f"{BASE}/docs/d1/tables/t1/rows/i-1"
        assert transport.body() == {"row": row}

    @pytest.mark.asyncio
    async def test_delete_rows(self, client, transport, json_response):
        transport.queue(json_response({"requestId": "r1", "rowIds": ["i-1"]}))

        await client.delete_rows("d1", "t1", ["i-1", "i-2"])

        assert transport.calls[0]["method"] == "DELETE"
        assert transport.body() == {"rowIds": ["i-1", "i-2"]}

    @pytest.mark.asyncio
    async def test_delete_row(self, client, transport, json_response):
        transport.queue(json_response({"requestId": "r1", "id": "i-1"}))

        await client.delete_row("d1", "t1", "i-1")

        assert transport.calls[0]["method"] == "DELETE"
        assert transport.calls[0]["body"] is None


class TestCacheInvalidation:
    @pytest.mark.asyncio
    async def test_row_write_evicts_table_reads(self, client, transport, json_response):
        transport.queue(
            json_response({"items": [{"id": "i-1"}]}),
            json_response({"id": "t1"}),
            json_response({"requestId": "r1"}),
            json_response({"items": [{"id": "i-1"}, {"id": "i-2"}]}),
        )

        await client.list_rows("d1", "t1")
        await client.get_table("d1", "t1")
        await client.insert_rows("d1", "t1", [{"cells": []}])
        rows = await client.list_rows("d1", "t1")

        assert len(rows["items"]) == 2
        assert transport.call_count == 4
        assert "GET /docs/d1/tables/t1" not in client.engine.cache

    @pytest.mark.asyncio
    async def test_row_write_keeps_other_tables(self, client, transport, json_response):
        transport.queue(
            json_response({"items": []}),
            json_response({"requestId": "r1"}),
        )

        await client.list_rows("d1", "t2")
        await client.delete_row("d1", "t1", "i-1")
        await client.list_rows("d1", "t2")

        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_doc_write_evicts_doc_listing(self, client, transport, json_response):
        transport.queue(
            json_response({"items": []}),
            json_response({"id": "d2"}),
            json_response({"items": [{"id": "d2"}]}),
        )

        await client.list_docs()
        await client.create_doc("New")
        docs = await client.list_docs()

        assert docs["items"] == [{"id": "d2"}]

    @pytest.mark.asyncio
    async def test_clear_cache(self, client, transport, json_response):
        transport.queue(json_response({"id": "d1"}), json_response({"id": "d1"}))

        await client.get_doc("d1")
        client.clear_cache()
        await client.get_doc("d1")

        assert transport.call_count == 2


class TestMutationsAndStats:
    @pytest.mark.asyncio
    async def test_get_mutation_status(self, client, transport, json_response):
        transport.queue(json_response({"id": "r1", "status": "complete"}))

        handle = await client.get_mutation_status("r1")

        assert handle.status is MutationStatus.COMPLETE

    @pytest.mark.asyncio
    async def test_wait_for_mutation(self, client, transport, json_response):
        transport.queue(json_response({"status": "failed", "error": "nope"}))

        handle = await client.wait_for_mutation("r1", max_wait_time=5)

        assert handle.status is MutationStatus.FAILED

    @pytest.mark.asyncio
    async def test_stats_and_reset(self, client, transport, json_response):
        transport.queue(json_response({"name": "Ada"}))
        await client.whoami()

        assert client.get_stats()["metrics"]["total_requests"] == 1

        client.reset_metrics()

        assert client.get_stats()["metrics"]["total_requests"] == 0
