"""Art marketplace ordering API.

Serves the cart and order routes synchronously over HTTP. Every request runs
inside the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

Environment:
    PROTEAN_ENV        test / development / production (default: development)
    STRIPE_SECRET_KEY  enables Stripe; payments are simulated without it
    LOG_LEVEL          overrides the level derived from PROTEAN_ENV
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api.errors import register_ordering_exception_handlers
from ordering.api.routes import cart_router, order_router
from ordering.domain import ordering
from ordering.services import OrderingServices, build_services
from ordering.utils.logging import add_context, clear_context, configure_logging, current_env

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
ordering.init()


def create_app(services: OrderingServices | None = None) -> FastAPI:
    """Build the API around one set of ordering services.

    Collaborators are created once here and shared by every request.
    """
    app = FastAPI(
        title="Art Marketplace Ordering API",
        description="Carts, orders and payment orchestration",
    )
    app.state.ordering_services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context and bind request log context."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        with ordering.domain_context():
            response = await call_next(request)
        return response

    register_ordering_exception_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": ordering.name,
                "payments": type(app.state.ordering_services.payments).__name__,
            }
        )

    return app


configure_logging(log_dir=None if current_env() == "test" else "logs")

app = create_app()
