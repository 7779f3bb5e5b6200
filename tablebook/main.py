"""FastAPI entrypoint for the table availability service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from tablebook.api.v1.api import api_router
from tablebook.core.config import settings
from tablebook.db import session as db_session
from tablebook.db.base import Base
from tablebook.db.seed import ensure_admin_user

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            admin_present = ensure_admin_user(session)
            logger.info("[BOOTSTRAP] admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin bootstrap failed; continuing startup.")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
