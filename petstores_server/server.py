"""MCP Server for the Petstores pet food shop."""

import asyncio
import logging
import uuid
from typing import Any, Literal, Optional

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import CallToolResult, Resource, TextContent, Tool
from pydantic import AnyUrl, BaseModel, ConfigDict, Field

from . import __version__
from .cart_store import CartStore
from .catalog import Catalog
from .config import WIDGET_MIME_TYPE, WIDGET_URI, ServerConfig
from .models import ShopState
from .shop import Shop

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("petstores-mcp-server")

SESSION_HEADER = "mcp-session-id"
CLIENT_SESSION_HEADER = "x-session-id"
MISSING_SESSION = (
    "Error: No session. Send an X-Session-Id header so your cart is kept between calls."
)


# Tool input schemas
class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OpenShopInput(ToolInput):
    """Input schema for open_shop tool."""

    category: Optional[Literal["all", "dog", "cat"]] = Field(
        None,
        description="Filter products by category: 'dog', 'cat', or 'all'.",
    )


class AddToCartInput(ToolInput):
    """Input schema for add_to_cart tool."""

    product_id: str = Field(..., alias="productId", min_length=1, description="Product ID, e.g. 'dog-1'.")
    quantity: Optional[int] = Field(None, ge=1, description="Quantity to add (default: 1).")


class RemoveFromCartInput(ToolInput):
    """Input schema for remove_from_cart tool."""

    product_id: str = Field(..., alias="productId", min_length=1, description="Product ID to remove.")


class UpdateQuantityInput(ToolInput):
    """Input schema for update_quantity tool."""

    product_id: str = Field(..., alias="productId", min_length=1, description="Product ID in the cart.")
    quantity: int = Field(..., ge=0, description="New quantity. Set to 0 to remove.")


class CheckoutInput(ToolInput):
    """Input schema for checkout tool (no arguments)."""


def _tool(
    name: str,
    title: str,
    description: str,
    schema: type[BaseModel],
    invoking: str,
    invoked: str,
) -> Tool:
    return Tool(
        name=name,
        title=title,
        description=description,
        inputSchema=schema.model_json_schema(by_alias=True),
        _meta={
            "openai/outputTemplate": WIDGET_URI,
            "openai/toolInvocation/invoking": invoking,
            "openai/toolInvocation/invoked": invoked,
        },
    )


def tool_definitions() -> list[Tool]:
    """Definitions of every shop tool."""
    return [
        _tool(
            "open_shop",
            "Open Petstores Shop",
            "Opens the Petstores pet food shop. Optionally filter by category: 'dog', 'cat', or 'all'.",
            OpenShopInput,
            "Opening shop...",
            "Shop ready",
        ),
        _tool(
            "add_to_cart",
            "Add to Cart",
            "Adds a product to the shopping cart by product ID.",
            AddToCartInput,
            "Adding to cart...",
            "Added to cart",
        ),
        _tool(
            "remove_from_cart",
            "Remove from Cart",
            "Removes a product from the shopping cart.",
            RemoveFromCartInput,
            "Removing from cart...",
            "Removed from cart",
        ),
        _tool(
            "update_quantity",
            "Update Quantity",
            "Updates the quantity of a product in the cart. Set to 0 to remove.",
            UpdateQuantityInput,
            "Updating quantity...",
            "Quantity updated",
        ),
        _tool(
            "checkout",
            "Checkout",
            "Processes the checkout and places the order.",
            CheckoutInput,
            "Processing order...",
            "Order placed!",
        ),
    ]


def run_tool(shop: Shop, name: str, arguments: Optional[dict[str, Any]], session_id: str) -> ShopState:
    """Validate tool arguments and run the matching shop operation."""
    arguments = arguments or {}

    if name == "open_shop":
        params = OpenShopInput.model_validate(arguments)
        return shop.browse(session_id, params.category)

    elif name == "add_to_cart":
        params = AddToCartInput.model_validate(arguments)
        return shop.add(session_id, params.product_id, params.quantity)

    elif name == "remove_from_cart":
        params = RemoveFromCartInput.model_validate(arguments)
        return shop.remove(session_id, params.product_id)

    elif name == "update_quantity":
        params = UpdateQuantityInput.model_validate(arguments)
        return shop.update_quantity(session_id, params.product_id, params.quantity)

    elif name == "checkout":
        CheckoutInput.model_validate(arguments)
        return shop.checkout(session_id)

    raise ValueError(f"Unknown tool: {name}")


def to_tool_result(state: ShopState, session_id: str) -> CallToolResult:
    """Wrap a shop state as an MCP tool result for the widget."""
    content = [TextContent(type="text", text=state.message)] if state.message else []
    return CallToolResult(
        content=content,
        structuredContent=state.to_payload(),
        _meta={"openai/widgetSessionId": session_id},
    )


def create_server(
    shop: Shop,
    widget_html: str,
    name: str = "petstores-shop",
    default_session_id: Optional[str] = None,
) -> Server:
    """Create an MCP server exposing the shop tools and widget resource.

    Args:
        shop: Shop whose carts the tools operate on
        widget_html: Widget template served as the UI resource
        name: MCP server name
        default_session_id: Cart key for stdio, where the process is the
            session. A random ID is used if omitted. HTTP requests are keyed
            by their mcp-session-id or X-Session-Id header instead.
    """
    app = Server(name, version=__version__)
    fallback_session_id = default_session_id or str(uuid.uuid4())

    def current_session_id() -> Optional[str]:
        """Resolve the cart key for the request being handled, None if unknown."""
        try:
            request = app.request_context.request
        except LookupError:
            return fallback_session_id

        if request is None:
            return fallback_session_id

        for header in (SESSION_HEADER, CLIENT_SESSION_HEADER):
            session_id = request.headers.get(header)
            if session_id:
                return session_id
        return None

    @app.list_resources()
    async def list_resources() -> list[Resource]:
        """List available resources."""
        return [
            Resource(
                uri=AnyUrl(WIDGET_URI),
                name=name,
                mimeType=WIDGET_MIME_TYPE,
                description="Petstores shop widget",
                _meta={"openai/widgetPrefersBorder": True},
            )
        ]

    @app.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        """Read a resource by URI."""
        if str(uri) == WIDGET_URI:
            return [
                ReadResourceContents(
                    content=widget_html,
                    mime_type=WIDGET_MIME_TYPE,
                    meta={"openai/widgetPrefersBorder": True},
                )
            ]

        raise ValueError(f"Unknown resource: {uri}")

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return tool_definitions()

    @app.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        """Handle tool calls."""
        session_id = current_session_id()
        if session_id is None:
            logger.warning(f"Rejected {name}: HTTP request without a session header")
            return CallToolResult(content=[TextContent(type="text", text=MISSING_SESSION)], isError=True)

        try:
            state = run_tool(shop, name, arguments, session_id)
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=True)
            return CallToolResult(
                content=[TextContent(type="text", text=f"Error: {str(e)}")],
                isError=True,
            )

        return to_tool_result(state, session_id)

    return app


async def main() -> None:
    """Main entry point for the MCP server."""
    config = ServerConfig()
    logging.getLogger().setLevel(config.log_level)

    store = CartStore()
    shop = Shop(Catalog.default(), store)
    app = create_server(shop, config.load_widget_html(), name=config.server_name)

    logger.info(f"Starting Petstores MCP Server ({config.server_name})...")

    # Import and run the server
    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        store.close()


if __name__ == "__main__":
    asyncio.run(main())
