"""Tests for the FastMCP tool server."""

from __future__ import annotations

import json
import logging

import pytest
from fastmcp import Client

from insumer.catalog import CATALOG
from insumer.config import Settings
from tools.mcp_server import SERVER_NAME, InsumerTool, build_tool, create_server

from conftest import TEST_API_KEY


@pytest.fixture
def server(api):
    return create_server(Settings(api_key=TEST_API_KEY), transport=api.transport)


@pytest.fixture
def keyless_server(api):
    return create_server(Settings(), transport=api.transport)


def _text(result) -> str:
    return result.content[0].text


class TestToolListing:
    @pytest.mark.asyncio
    async def test_every_catalog_operation_is_listed(self, server):
        async with Client(server) as client:
            tools = await client.list_tools()
        assert {tool.name for tool in tools} == {operation.name for operation in CATALOG}

    @pytest.mark.asyncio
    async def test_input_schema_advertises_constraints(self, server):
        async with Client(server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        limit = tools["insumer_list_merchants"].input_schema["properties"]["limit"]
        assert limit["type"] == "integer"
        assert limit["minimum"] == 1
        assert limit["maximum"] == 200
        assert "anyOf" not in limit

        code = tools["insumer_validate_code"].input_schema
        assert code["required"] == ["code"]
        assert code["properties"]["code"]["pattern"] == "^INSR-[A-Z0-9]{5}$"

    @pytest.mark.asyncio
    async def test_annotations(self, server):
        async with Client(server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        assert tools["insumer_get_merchant"].annotations.read_only_hint is True
        assert tools["insumer_attest"].annotations.read_only_hint is False
        assert tools["insumer_attest"].annotations.open_world_hint is True

    def test_server_name(self, server):
        assert server.name == SERVER_NAME

    def test_build_tool_copies_catalog_entry(self, client):
        operation = CATALOG[0]
        tool = build_tool(operation, client)
        assert isinstance(tool, InsumerTool)
        assert tool.name == operation.name
        assert tool.description == operation.description
        assert tool.parameters == operation.input_schema()


class TestToolCalls:
    @pytest.mark.asyncio
    async def test_success_relays_upstream_json(self, server, api):
        body = {"ok": True, "data": {"valid": True, "code": "INSR-AB12C"}}
        api.respond_with(json=body)

        async with Client(server) as client:
            result = await client.call_tool_mcp("insumer_validate_code", {"code": "INSR-AB12C"})

        assert not result.is_error
        assert json.loads(_text(result)) == body
        assert api.last.url.path == "/v1/codes/INSR-AB12C"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_error_result(self, server, api):
        api.respond_with(404, json={"ok": False, "error": "Merchant not found"})

        async with Client(server) as client:
            result = await client.call_tool_mcp("insumer_get_merchant", {"id": "ghost"})

        assert result.is_error
        assert "Merchant not found" in _text(result)

    @pytest.mark.asyncio
    async def test_validation_failure_never_reaches_network(self, server, api):
        async with Client(server) as client:
            result = await client.call_tool_mcp(
                "insumer_list_merchants", {"token": "UNI", "limit": 250}
            )

        assert result.is_error
        assert "VALIDATION_ERROR" in _text(result)
        assert "limit" in _text(result)
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_missing_key_is_error_result(self, keyless_server, api):
        async with Client(keyless_server) as client:
            result = await client.call_tool_mcp("insumer_credits", {})

        assert result.is_error
        assert "INSUMER_API_KEY" in _text(result)
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_free_tool_without_key(self, keyless_server, api):
        api.respond_with(json={"ok": True, "data": {"templates": []}})

        async with Client(keyless_server) as client:
            result = await client.call_tool_mcp("insumer_compliance_templates", {})

        assert not result.is_error
        assert api.last.url.path == "/v1/compliance/templates"

    @pytest.mark.asyncio
    async def test_null_argument_survives_mcp_layer(self, server, api):
        async with Client(server) as client:
            result = await client.call_tool_mcp(
                "insumer_configure_tokens", {"id": "acme", "ownToken": None}
            )

        assert not result.is_error
        assert api.last.url.path == "/v1/merchants/acme/tokens"
        assert api.last_json() == {"ownToken": None}


class TestCallLogging:
    @pytest.mark.asyncio
    async def test_status_logged_before_response(self, server, api, caplog):
        with caplog.at_level(logging.INFO, logger="insumer.mcp"):
            async with Client(server) as client:
                await client.call_tool_mcp("insumer_get_merchant", {"id": "acme"})

        messages = [record.getMessage() for record in caplog.records if record.name == "insumer.mcp"]
        request = next(i for i, m in enumerate(messages) if "insumer_get_merchant called with" in m)
        status = next(i for i, m in enumerate(messages) if "HTTP 200" in m)
        response = next(i for i, m in enumerate(messages) if "insumer_get_merchant response:" in m)
        assert request < status < response

    @pytest.mark.asyncio
    async def test_no_status_line_without_http_response(self, keyless_server, caplog):
        with caplog.at_level(logging.INFO, logger="insumer.mcp"):
            async with Client(keyless_server) as client:
                await client.call_tool_mcp("insumer_credits", {})

        messages = [record.getMessage() for record in caplog.records if record.name == "insumer.mcp"]
        assert not any("HTTP" in m for m in messages)
        assert any("insumer_credits response:" in m for m in messages)
