"""
main.py

Application entrypoint for the GuardHub API.
- Initializes structured logging
- Sets up FastAPI application and middlewares
- Registers all API routers and the realtime (SOS, chat) WebSockets
- Integrates rate limiting via SlowAPI
- Adds common security headers
- Configures CORS
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from guardhub.audit.routes import router as audit_router
from guardhub.auth.routes import router as auth_router
from guardhub.billing.routes import router as billing_router
from guardhub.checkin.routes import router as checkin_router
from guardhub.company.routes import router as company_router
from guardhub.core.config import settings
from guardhub.core.limiter import limiter
from guardhub.core.logging import init_logging
from guardhub.core.redis_client import close_redis_client
from guardhub.database.session import engine
from guardhub.equipment.routes import router as equipment_router
from guardhub.incident.routes import router as incident_router
from guardhub.lead.routes import router as lead_router
from guardhub.messaging.routes import router as messaging_router
from guardhub.messaging.websocket import router as chat_ws_router
from guardhub.patrol.routes import router as patrol_router
from guardhub.payment.routes import router as payment_router
from guardhub.pricing.routes import router as pricing_router
from guardhub.report.routes import router as report_router
from guardhub.shift.routes import router as shift_router
from guardhub.site.routes import router as site_router
from guardhub.sos.routes import router as sos_router
from guardhub.sos.websocket import router as sos_ws_router
from guardhub.staff.routes import router as staff_router
from guardhub.tracking.routes import router as tracking_router

# -----------------------------
# FastAPI App Initialization
# -----------------------------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Shutdown: release the Redis pool and database connections
    await close_redis_client()
    await engine.dispose()


app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

# -----------------------------
# Middleware Configuration
# -----------------------------
init_logging()
app.state.limiter = limiter


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    return _rate_limit_exceeded_handler(request, exc)  # type: ignore[arg-type]


app.add_exception_handler(429, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# -----------------------------
# Security Headers Middleware
# -----------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add common security headers to responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


app.add_middleware(SecurityHeadersMiddleware)

# -----------------------------
# CORSMiddleware Configuration
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# API Router Registration
# -----------------------------
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(site_router)
app.include_router(staff_router)
app.include_router(shift_router)
app.include_router(incident_router)
app.include_router(sos_router)
app.include_router(patrol_router)
app.include_router(checkin_router)
app.include_router(equipment_router)
app.include_router(billing_router)
app.include_router(payment_router)
app.include_router(lead_router)
app.include_router(audit_router)
app.include_router(report_router)
app.include_router(pricing_router)
app.include_router(tracking_router)
app.include_router(messaging_router)

app.include_router(sos_ws_router)
app.include_router(chat_ws_router)


# -----------------------------
# Root Endpoint
# -----------------------------
@app.get("/")
async def home() -> Any:
    return {"name": settings.APP_NAME, "status": "ok", "docs": "/docs"}
