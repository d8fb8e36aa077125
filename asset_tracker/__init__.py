"""Application wiring for the Asset Tracker API.

This module assembles the FastAPI application from its parts:

*What:* database tables, middleware, exception handlers and the two API
routers (equipment and users).
*When:* on import, so ``asset_tracker.app`` is ready for uvicorn and for
the test client without extra setup calls.
*Why:* keeping the wiring in one place shows the whole request path at a
glance: middleware, then authentication dependencies, then the store.
*How:* tables are created with ``create_all`` and older SQLite files are
upgraded by ``run_migrations``; every router is included without a prefix
because each one declares its own.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.errors import register_exception_handlers
from .db.migrate import run_migrations
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Importing the models registers their tables on ``Base.metadata``.
from .models import equipment as _equipment  # noqa: F401
from .models import user as _user  # noqa: F401

# ---------- App init ----------
app = FastAPI(title=settings.APP_NAME)

# ---------- DB init/migrations ----------
Base.metadata.create_all(bind=engine)
run_migrations(engine)

# ---------- Middleware ----------
# Starlette runs the last added middleware first: CORS answers preflights
# before anything else, the request id wraps the rest.
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# ---------- Routers ----------
from .routers import api_equipment as api_equipment_router  # noqa: E402

app.include_router(api_equipment_router.router)

from .routers import api_users as api_users_router  # noqa: E402

app.include_router(api_users_router.router)

# ---------- Exception handling ----------
register_exception_handlers(app)


__all__ = ["app"]
