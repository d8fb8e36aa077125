from __future__ import annotations

import logging

from prometheus_fastapi_instrumentator import Instrumentator

from .core.config import settings
from .core.logging import configure_logging
from .crud.users import seed_admin_user
from .db.session import SessionLocal
from . import app as base_app

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("asset_tracker.main")

app = base_app
Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


@app.on_event("startup")
def _seed_admin() -> None:
    db = SessionLocal()
    try:
        seed_admin_user(db, settings.SEED_ADMIN_EMAIL, settings.SEED_ADMIN_PASSWORD)
    finally:
        db.close()
    logger.info("app.started", extra={"extra_data": {"host": settings.HOST, "port": settings.PORT}})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("asset_tracker.main:app", host=settings.HOST, port=settings.PORT)
