"""
FastAPI Application - Klaviyo Metrics Dashboard API

Client login, client administration, live Klaviyo metrics and rendered
dashboards.

Usage:
    # Development
    uvicorn klaviyo_dashboard.api.app:app --reload --port 3001

    # Production
    klaviyo-dashboard serve --host 0.0.0.0 --port 3001

API Documentation:
    http://localhost:3001/docs (Swagger UI)
    http://localhost:3001/redoc (ReDoc)
"""

from typing import Any, Literal

from fastapi import Depends, FastAPI, HTTPException, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse

from klaviyo_dashboard import __version__
from klaviyo_dashboard.api.dependencies import require_admin, require_client
from klaviyo_dashboard.api.middleware import (
    CacheControlMiddleware,
    RateLimitMiddleware,
    RequestIDMiddleware,
    add_cors_middleware,
)
from klaviyo_dashboard.api.schemas import (
    AdminLoginResponse,
    ClientCreatedResponse,
    ClientCreateRequest,
    ClientListItem,
    HealthResponse,
    LoginRequest,
    LoginResponse,
)
from klaviyo_dashboard.collectors import CATEGORY_TYPES, collect_metrics
from klaviyo_dashboard.core import (
    capture_exception,
    get_config,
    get_logger,
    setup_logging,
    setup_observability,
    validate_config_on_startup,
)
from klaviyo_dashboard.dashboards import render_detailed_dashboard, render_simple_dashboard
from klaviyo_dashboard.domain import Client, DashboardMetrics, SimpleSummary
from klaviyo_dashboard.security import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CLIENT, TokenClaims, ValidationError, issue_token
from klaviyo_dashboard.storage import (
    AdminRepository,
    ClientNotFoundError,
    ClientRepository,
    DuplicateEmailError,
    init_database,
)

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    server_config = get_config().get_server_config()
    setup_logging(level=server_config.log_level, json_output=server_config.json_logs)
    setup_observability(environment=server_config.environment)

    app = FastAPI(
        title="Klaviyo Metrics Dashboard API",
        description="Per-client Klaviyo campaign, flow, event, profile and revenue metrics",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters - last added is executed first)
    app.add_middleware(CacheControlMiddleware)  # Cache headers (innermost)
    app.add_middleware(RequestIDMiddleware)  # Request tracking
    app.add_middleware(RateLimitMiddleware, requests_per_minute=60, requests_per_hour=1000)
    add_cors_middleware(app, server_config.cors_origins)  # CORS (outermost)

    clients = ClientRepository()
    admins = AdminRepository()

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration and create tables."""
        validate_config_on_startup(["auth", "database", "klaviyo"])
        init_database()
        logger.info("Klaviyo Metrics API starting up", extra={"version": __version__})

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("Klaviyo Metrics API shutting down")

    def _load_client(claims: TokenClaims) -> tuple[Client, str]:
        """Client record and Klaviyo key for a token, 404 if the client is gone."""
        try:
            return clients.get_by_id(claims.id), clients.get_api_key(claims.id)
        except ClientNotFoundError:
            logger.warning("Token for unknown client", extra={"client_id": claims.id})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

    async def _collect(client: Client, api_key: str, scope: str) -> Any:
        try:
            result = await collect_metrics(api_key, scope)
        except Exception as e:
            capture_exception(e, {"client_id": client.id, "scope": scope})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to fetch {scope} metrics"
            )
        logger.info("Metrics served", extra={"client_id": client.id, "scope": scope})
        return result

    async def _metrics_for(claims: TokenClaims, scope: str) -> Any:
        # SQLite lookups run in the threadpool
        client, api_key = await run_in_threadpool(_load_client, claims)
        return await _collect(client, api_key, scope)

    # ============================================================
    # Health Check
    # ============================================================

    @app.get("/api/health", tags=["Health"], response_model=HealthResponse)
    async def health_check():
        """Liveness check (no authentication)."""
        return {"status": "ok", "message": "Server is running"}

    # ============================================================
    # Authentication
    # ============================================================

    @app.post("/api/auth/login", tags=["Authentication"], response_model=LoginResponse)
    def login(body: LoginRequest):
        """Exchange client credentials for a bearer token."""
        client = clients.authenticate(body.email, body.password)
        if client is None:
            logger.warning("Client login failed", extra={"email": body.email})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        token = issue_token(client.id, client.email, TOKEN_TYPE_CLIENT)
        logger.info("Client logged in", extra={"client_id": client.id})
        return {"token": token, "client": client.to_public_dict()}

    @app.post("/api/auth/admin/login", tags=["Authentication"], response_model=AdminLoginResponse)
    def admin_login(body: LoginRequest):
        """Exchange admin credentials for an admin bearer token."""
        admin = admins.authenticate(body.email, body.password)
        if admin is None:
            logger.warning("Admin login failed", extra={"email": body.email})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        token = issue_token(admin["id"], admin["email"], TOKEN_TYPE_ADMIN)
        logger.info("Admin logged in", extra={"admin_id": admin["id"]})
        return {"token": token, "admin": admin}

    # ============================================================
    # Client Administration
    # ============================================================

    @app.post(
        "/api/admin/clients",
        tags=["Administration"],
        status_code=status.HTTP_201_CREATED,
        response_model=ClientCreatedResponse,
    )
    def create_client(body: ClientCreateRequest, admin: TokenClaims = Depends(require_admin)):
        """Register a client and its Klaviyo private key."""
        try:
            client = clients.create(body.name, body.email, body.password, body.klaviyo_private_key)
        except DuplicateEmailError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Client with this email already exists"
            )
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        logger.info("Client registered", extra={"client_id": client.id, "admin_id": admin.id})
        return {"message": "Client created successfully", "client": client.to_public_dict()}

    @app.get("/api/admin/clients", tags=["Administration"], response_model=list[ClientListItem])
    def list_clients(admin: TokenClaims = Depends(require_admin)):
        """All clients, newest first (no secrets)."""
        return [client.to_public_dict(include_created_at=True) for client in clients.list_clients()]

    @app.delete("/api/admin/clients/{client_id}", tags=["Administration"], status_code=status.HTTP_204_NO_CONTENT)
    def delete_client(client_id: int, admin: TokenClaims = Depends(require_admin)):
        """Remove a client; its tokens stop working for metrics."""
        try:
            clients.delete(client_id)
        except ClientNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

        logger.info("Client removed", extra={"client_id": client_id, "admin_id": admin.id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ============================================================
    # Metrics Endpoints
    # ============================================================

    @app.get("/api/metrics/all", tags=["Metrics"])
    async def get_all_metrics(claims: TokenClaims = Depends(require_client)):
        """All five metric categories."""
        metrics: DashboardMetrics = await _metrics_for(claims, "all")
        return metrics.to_dict()

    @app.get("/api/metrics/simple", tags=["Metrics"])
    async def get_simple_metrics(claims: TokenClaims = Depends(require_client)):
        """Headline summary: emails sent, subscribers, revenue, open/click/conversion rates."""
        summary: SimpleSummary = await _metrics_for(claims, "simple")
        return summary.to_dict()

    @app.get("/api/metrics/{category}", tags=["Metrics"])
    async def get_metric_category(category: str, claims: TokenClaims = Depends(require_client)):
        """One of campaign, flow, event, profile or revenue."""
        if category not in CATEGORY_TYPES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid metric category")
        metrics = await _metrics_for(claims, category)
        return metrics.to_dict()

    # ============================================================
    # Dashboard
    # ============================================================

    @app.get("/api/dashboard", tags=["Dashboard"], response_class=HTMLResponse)
    async def get_dashboard(
        view: Literal["detailed", "simple"] = "detailed", claims: TokenClaims = Depends(require_client)
    ):
        """Rendered HTML dashboard for the authenticated client."""
        client, api_key = await run_in_threadpool(_load_client, claims)
        if view == "simple":
            summary = await _collect(client, api_key, "simple")
            html = render_simple_dashboard(client.name, summary, detailed_view_url="/api/dashboard?view=detailed")
        else:
            metrics = await _collect(client, api_key, "all")
            html = render_detailed_dashboard(client.name, metrics, simple_view_url="/api/dashboard?view=simple")
        return HTMLResponse(content=html)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    server_config = get_config().get_server_config()
    uvicorn.run("klaviyo_dashboard.api.app:app", host=server_config.host, port=server_config.port, reload=True)
