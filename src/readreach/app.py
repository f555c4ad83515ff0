"""ReadReach FastAPI application.

``create_app()`` wires the identity provider, the payment processor and the
service settings into ``app.state``; tests pass fakes explicitly. Every
request runs inside the Protean domain context.

Usage:
    readreach serve
    uvicorn --factory readreach.app:build --port 3000
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from protean.integrations.fastapi import register_exception_handlers

from readreach.auth import FakeTokenVerifier, build_verifier
from readreach.auth.tokens import IdentityProviderError, TokenVerifier
from readreach.domain import readreach
from readreach.payments.gateway import FakeGateway, build_gateway
from readreach.payments.gateway.port import GatewayError, PaymentGateway
from readreach.settings import Settings
from readreach.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    verifier: TokenVerifier | None = None,
    gateway: PaymentGateway | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    verifier = verifier or build_verifier(settings)
    gateway = gateway or build_gateway(settings)

    if isinstance(verifier, FakeTokenVerifier):
        logger.warning("fake_identity_provider_in_use", env=settings.env)
    if isinstance(gateway, FakeGateway):
        logger.warning("fake_payment_gateway_in_use", env=settings.env)

    app = FastAPI(
        title="ReadReach API",
        description="Library marketplace: catalogue, users, orders and payments",
    )
    app.state.settings = settings
    app.state.verifier = verifier
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context and bind request details for logging."""
        add_context(
            request_id=request.headers.get("X-Request-ID") or uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        try:
            with readreach.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error("payment_processor_failed", error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Payment processor unavailable"})

    @app.exception_handler(IdentityProviderError)
    async def identity_provider_error_handler(request: Request, exc: IdentityProviderError):
        logger.error("identity_provider_failed", error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Identity provider unavailable"})

    from readreach.api.books import router as book_router
    from readreach.api.orders import router as order_router
    from readreach.api.payments import router as payment_router
    from readreach.api.users import router as user_router

    app.include_router(book_router)
    app.include_router(user_router)
    app.include_router(order_router)
    app.include_router(payment_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "ReadReach server is running"

    @app.get("/health")
    async def health():
        return {"status": "ok", "domain": readreach.name}

    return app


def build() -> FastAPI:
    """Initialise the domain and build the application from the environment."""
    readreach.init()
    return create_app()
