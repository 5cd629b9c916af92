"""Tests for the MCP server adapter."""

import pytest
from mcp import types
from pydantic import AnyUrl, ValidationError

from petstores_server.cart_store import CartStore
from petstores_server.catalog import Catalog
from petstores_server.config import WIDGET_MIME_TYPE, WIDGET_URI
from petstores_server.server import (
    AddToCartInput,
    OpenShopInput,
    UpdateQuantityInput,
    create_server,
    run_tool,
    to_tool_result,
    tool_definitions,
)
from petstores_server.shop import Shop

WIDGET_HTML = "<html><body>widget</body></html>"
SESSION = "test-session"


@pytest.fixture
def mcp_server(shop: Shop):
    """MCP server with a fixed fallback session."""
    return create_server(shop, WIDGET_HTML, default_session_id=SESSION)


async def call(server, name: str, arguments: dict) -> types.CallToolResult:
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root


class TestInputSchemas:
    """Tests for tool input validation."""

    def test_add_to_cart_alias(self) -> None:
        """productId is accepted by its wire name."""
        params = AddToCartInput.model_validate({"productId": "dog-1"})
        assert params.product_id == "dog-1"
        assert params.quantity is None

    def test_add_to_cart_rejects_empty_id(self) -> None:
        with pytest.raises(ValidationError):
            AddToCartInput.model_validate({"productId": ""})

    def test_add_to_cart_rejects_zero_quantity(self) -> None:
        with pytest.raises(ValidationError):
            AddToCartInput.model_validate({"productId": "dog-1", "quantity": 0})

    def test_update_quantity_requires_quantity(self) -> None:
        with pytest.raises(ValidationError):
            UpdateQuantityInput.model_validate({"productId": "dog-1"})

    def test_update_quantity_allows_zero(self) -> None:
        assert UpdateQuantityInput.model_validate({"productId": "dog-1", "quantity": 0}).quantity == 0

    def test_open_shop_rejects_unknown_category(self) -> None:
        with pytest.raises(ValidationError):
            OpenShopInput.model_validate({"category": "fish"})


class TestToolDefinitions:
    """Tests for the advertised tools."""

    def test_tool_names(self) -> None:
        names = [tool.name for tool in tool_definitions()]
        assert names == ["open_shop", "add_to_cart", "remove_from_cart", "update_quantity", "checkout"]

    def test_tools_point_at_widget(self) -> None:
        """Every tool renders with the shop widget."""
        for tool in tool_definitions():
            assert tool.title
            assert tool.meta["openai/outputTemplate"] == WIDGET_URI
            assert tool.meta["openai/toolInvocation/invoking"]
            assert tool.meta["openai/toolInvocation/invoked"]

    def test_schemas(self) -> None:
        """Schemas use wire names and constraints."""
        tools = {tool.name: tool for tool in tool_definitions()}
        add_schema = tools["add_to_cart"].inputSchema
        assert add_schema["required"] == ["productId"]
        assert add_schema["properties"]["productId"]["minLength"] == 1
        assert tools["update_quantity"].inputSchema["required"] == ["productId", "quantity"]
        assert tools["checkout"].inputSchema["properties"] == {}


class TestRunTool:
    """Tests for tool dispatch."""

    def test_open_shop(self, shop: Shop) -> None:
        state = run_tool(shop, "open_shop", {"category": "cat"}, SESSION)
        assert state.current_category == "cat"

    def test_open_shop_without_arguments(self, shop: Shop) -> None:
        state = run_tool(shop, "open_shop", None, SESSION)
        assert state.current_category == "all"

    def test_cart_flow(self, shop: Shop) -> None:
        run_tool(shop, "add_to_cart", {"productId": "dog-1", "quantity": 2}, SESSION)
        run_tool(shop, "update_quantity", {"productId": "dog-1", "quantity": 1}, SESSION)
        state = run_tool(shop, "checkout", {}, SESSION)
        assert state.order_confirmation.item_count == 1

    def test_remove(self, shop: Shop) -> None:
        run_tool(shop, "add_to_cart", {"productId": "cat-3"}, SESSION)
        state = run_tool(shop, "remove_from_cart", {"productId": "cat-3"}, SESSION)
        assert state.cart.items == []

    def test_unknown_tool(self, shop: Shop) -> None:
        with pytest.raises(ValueError, match="Unknown tool"):
            run_tool(shop, "fly_to_moon", {}, SESSION)


class TestToolResult:
    """Tests for the MCP result wrapper."""

    def test_result_shape(self, shop: Shop) -> None:
        result = to_tool_result(shop.add(SESSION, "dog-1"), SESSION)
        assert result.content[0].text == "Added 1x Royal Canin Adult Dog to cart."
        assert result.structuredContent["cart"]["itemCount"] == 1
        assert result.meta == {"openai/widgetSessionId": SESSION}

    def test_no_message_no_content(self, catalog: Catalog) -> None:
        shop = Shop(catalog, CartStore())
        state = shop.composer.compose(SESSION)
        assert to_tool_result(state, SESSION).content == []


class TestServerHandlers:
    """Tests for the registered MCP request handlers."""

    @pytest.mark.asyncio
    async def test_call_tool(self, mcp_server) -> None:
        """Tool calls return text, shop state and the widget session."""
        await call(mcp_server, "add_to_cart", {"productId": "dog-1", "quantity": 2})
        result = await call(mcp_server, "add_to_cart", {"productId": "dog-1", "quantity": 1})

        assert not result.isError
        assert result.content[0].text == "Added 1x Royal Canin Adult Dog to cart."
        cart = result.structuredContent["cart"]
        assert cart["itemCount"] == 3
        assert cart["total"] == 269.97
        assert result.meta == {"openai/widgetSessionId": SESSION}

    @pytest.mark.asyncio
    async def test_call_tool_checkout(self, mcp_server) -> None:
        await call(mcp_server, "add_to_cart", {"productId": "dog-2"})
        result = await call(mcp_server, "checkout", {})
        confirmation = result.structuredContent["orderConfirmation"]
        assert confirmation["total"] == 74.99
        assert confirmation["itemCount"] == 1
        assert confirmation["status"] == "confirmed"
        assert result.structuredContent["cart"] == {"items": [], "total": 0.0, "itemCount": 0}

    @pytest.mark.asyncio
    async def test_call_tool_invalid_input(self, mcp_server) -> None:
        """Invalid input is an error result, not a crash."""
        result = await call(mcp_server, "add_to_cart", {"productId": ""})
        assert result.isError

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, mcp_server) -> None:
        result = await call(mcp_server, "fly_to_moon", {})
        assert result.isError

    @pytest.mark.asyncio
    async def test_list_tools(self, mcp_server) -> None:
        handler = mcp_server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))
        assert len(result.root.tools) == 5

    @pytest.mark.asyncio
    async def test_list_resources(self, mcp_server) -> None:
        handler = mcp_server.request_handlers[types.ListResourcesRequest]
        result = await handler(types.ListResourcesRequest(method="resources/list"))
        resource = result.root.resources[0]
        assert str(resource.uri) == WIDGET_URI
        assert resource.mimeType == WIDGET_MIME_TYPE

    @pytest.mark.asyncio
    async def test_read_widget(self, mcp_server) -> None:
        """Widget is served unchanged."""
        handler = mcp_server.request_handlers[types.ReadResourceRequest]
        request = types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri=AnyUrl(WIDGET_URI)),
        )
        result = await handler(request)
        contents = result.root.contents[0]
        assert contents.text == WIDGET_HTML
        assert contents.mimeType == WIDGET_MIME_TYPE
        assert contents.meta == {"openai/widgetPrefersBorder": True}
