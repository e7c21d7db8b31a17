"""Tests for MCP server wiring."""

import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from mcp.shared.memory import create_connected_server_and_client_session

from hn_mcp.server import _dump, build_client, create_server
from hn_mcp.utils.config import get_settings


def test_build_client_uses_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HACKERNEWS_API_BASE_URL", "https://example.test/v0/")
    monkeypatch.setenv("HACKERNEWS_API_TIMEOUT", "2500")

    client = build_client(get_settings())

    assert client.base_url == "https://example.test/v0"
    assert client.timeout_ms == 2500


def test_dump_passes_strings_through():
    assert _dump("No comments found for post 1") == "No comments found for post 1"
    assert json.loads(_dump({"a": [1, 2]})) == {"a": [1, 2]}


@pytest.mark.asyncio
async def test_registers_all_tools(client):
    server = create_server(client)

    tools = await server.list_tools()

    assert {tool.name for tool in tools} == {
        "search_posts",
        "get_post",
        "search_user",
        "search_trending",
        "search_comments",
    }


@pytest.mark.asyncio
async def test_registers_static_resources(client):
    server = create_server(client)

    uris = {str(resource.uri).rstrip("/") for resource in await server.list_resources()}

    assert {
        "hackernews://stories/top",
        "hackernews://stories/jobs",
        "hackernews://updates",
        "hackernews://max-item",
        "hackernews://cache/stats",
    } <= uris


@pytest.mark.asyncio
async def test_registers_resource_templates(client):
    server = create_server(client)

    templates = {t.uriTemplate for t in await server.list_resource_templates()}

    assert {
        "hackernews://item/{item_id}",
        "hackernews://story/{item_id}",
        "hackernews://user/{username}",
        "hackernews://user-stats/{username}",
        "hackernews://comments/{item_id}",
    } <= templates


@pytest.mark.asyncio
async def test_registers_prompts(client):
    server = create_server(client)

    prompts = {prompt.name: prompt for prompt in await server.list_prompts()}

    assert set(prompts) == {
        "analyze-story",
        "analyze-user-profile",
        "summarize-trending-topics",
    }
    story_args = {arg.name: arg.required for arg in prompts["analyze-story"].arguments}
    assert story_args == {
        "story_id": True,
        "include_comments": False,
        "analysis_depth": False,
    }


@pytest.mark.asyncio
async def test_get_prompt_renders_story_analysis(client, hn_api):
    hn_api.add_item(1, type="story", title="Rust in production", by="pg", score=42,
                    time=1_700_000_000, descendants=0)
    server = create_server(client)

    result = await server.get_prompt(
        "analyze-story", {"story_id": "1", "include_comments": "false", "analysis_depth": "basic"}
    )

    (message,) = result.messages
    assert message.role == "user"
    assert "- Title: Rust in production" in message.content.text
    assert "Analyze the posting timing" not in message.content.text


@pytest.mark.asyncio
async def test_missing_post_raises_tool_error(client):
    server = create_server(client)

    with pytest.raises(ToolError, match="Post 1 not found or is not a post"):
        await server.call_tool("get_post", {"id": 1})


@pytest.mark.asyncio
async def test_missing_post_reported_as_error_result(client):
    server = create_server(client)

    async with create_connected_server_and_client_session(server._mcp_server) as session:
        result = await session.call_tool("get_post", {"id": 1})

    assert result.isError is True
    assert "Post 1 not found or is not a post" in result.content[0].text
