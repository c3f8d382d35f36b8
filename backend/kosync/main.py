# kosync/main.py
import logging

from fastapi import FastAPI

from kosync.config import settings
from kosync.core.db import init_db, close_db
from kosync.core.bootstrap import ensure_default_admin
from kosync.core.client_ip import install_client_ip_middleware
from kosync.core.errors import install_exception_handlers
from kosync.repositories import TortoiseKosyncRepository

from kosync.api.v1.routers import health, users, syncs, manage

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

install_client_ip_middleware(app)
install_exception_handlers(app)

@app.on_event("startup")
async def on_startup():
    await init_db()
    # The reserved admin account must exist before the first request
    await ensure_default_admin(TortoiseKosyncRepository(), settings)
    if not settings.registration_enabled:
        logger.info("Public registration is disabled")
    if settings.trusted_proxies:
        logger.info("Trusted proxies: %s", ", ".join(settings.trusted_proxies))

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# KOReader sync protocol (paths fixed by the client, no prefix)
app.include_router(health.router)
app.include_router(users.router)
app.include_router(syncs.router)

# Administration
app.include_router(manage.router)


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("kosync.main:app", host=settings.host, port=settings.port)
