"""HTTP server for Petstores MCP Server with streamable HTTP transport."""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Literal, Optional

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from . import __version__
from .cart_store import CartStore
from .catalog import Catalog
from .config import ServerConfig
from .models import ShopState
from .server import (
    AddToCartInput,
    RemoveFromCartInput,
    UpdateQuantityInput,
    create_server,
)
from .shop import Shop

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("petstores-http-server")

MCP_PATH = "/mcp"
REST_SESSION_HEADER = "X-Session-Id"
DEFAULT_REST_SESSION = "default"


class MCPTransport:
    """ASGI endpoint handing /mcp requests to the MCP session manager."""

    def __init__(self, app: FastAPI) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        session_manager = getattr(self.app.state, "session_manager", None)
        if session_manager is None:
            response = PlainTextResponse("MCP transport is not running", status_code=503)
            await response(scope, receive, send)
            return
        await session_manager.handle_request(scope, receive, send)


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """Create the FastAPI app serving MCP over HTTP plus a REST mirror of the tools."""
    config = config or ServerConfig()

    store = CartStore()
    shop = Shop(Catalog.default(), store)
    mcp_server = create_server(shop, config.load_widget_html(), name=config.server_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown."""
        # Startup
        logger.info("Starting Petstores HTTP Server...")
        session_manager = StreamableHTTPSessionManager(
            app=mcp_server,
            json_response=True,
            stateless=config.stateless_http,
        )
        async with session_manager.run():
            app.state.session_manager = session_manager
            logger.info(f"MCP endpoint ready at {MCP_PATH} (stateless={config.stateless_http})")
            yield
            app.state.session_manager = None

        # Shutdown
        logger.info("Shutting down Petstores HTTP Server...")
        store.close()

    app = FastAPI(
        title="Petstores MCP Server",
        description="Petstores pet food shop exposed over MCP and HTTP",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.shop = shop
    app.state.session_manager = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET", "OPTIONS", "DELETE"],
        allow_headers=["content-type", "mcp-session-id", "x-session-id"],
        expose_headers=["Mcp-Session-Id"],
    )

    app.add_route(MCP_PATH, MCPTransport(app), methods=["GET", "POST", "DELETE"], include_in_schema=False)

    def respond(operation: Callable[..., ShopState], *args) -> dict:
        try:
            return operation(*args).to_payload()
        except Exception as e:
            logger.error(f"{operation.__name__} error: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

    # Root endpoint
    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint."""
        return "Petstores MCP server"

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "carts": len(store),
            "mcp_transport": "running" if app.state.session_manager else "stopped",
        }

    # Shop endpoints
    @app.get("/shop")
    async def open_shop(
        category: Optional[Literal["all", "dog", "cat"]] = None,
        session_id: str = Header(DEFAULT_REST_SESSION, alias=REST_SESSION_HEADER),
    ):
        """Browse the catalog and the current cart."""
        return respond(shop.browse, session_id, category)

    @app.post("/cart/add")
    async def add_to_cart(
        request: AddToCartInput,
        session_id: str = Header(DEFAULT_REST_SESSION, alias=REST_SESSION_HEADER),
    ):
        """Add a product to the cart."""
        return respond(shop.add, session_id, request.product_id, request.quantity)

    @app.post("/cart/remove")
    async def remove_from_cart(
        request: RemoveFromCartInput,
        session_id: str = Header(DEFAULT_REST_SESSION, alias=REST_SESSION_HEADER),
    ):
        """Remove a product from the cart."""
        return respond(shop.remove, session_id, request.product_id)

    @app.post("/cart/update")
    async def update_quantity(
        request: UpdateQuantityInput,
        session_id: str = Header(DEFAULT_REST_SESSION, alias=REST_SESSION_HEADER),
    ):
        """Update product quantity in cart."""
        return respond(shop.update_quantity, session_id, request.product_id, request.quantity)

    @app.post("/checkout")
    async def checkout(session_id: str = Header(DEFAULT_REST_SESSION, alias=REST_SESSION_HEADER)):
        """Place an order for the cart contents."""
        return respond(shop.checkout, session_id)

    return app


app = create_app()


def run_http_server(host: str = "0.0.0.0", port: int = 8787, reload: bool = False):
    """
    Run the HTTP server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8787)
        reload: Enable hot reloading (default: False)
    """
    import uvicorn

    logger.info(f"Starting server on {host}:{port} (reload={'enabled' if reload else 'disabled'})")
    logger.info(f"Petstores MCP server listening on http://{host}:{port}{MCP_PATH}")

    if reload:
        # Hot reloading - watches for file changes
        uvicorn.run(
            "petstores_server.http_server:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["petstores_server"],
            log_level="info",
        )
    else:
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_http_server()
