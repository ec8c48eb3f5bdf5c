# campus_social/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_social.config import CORS_ORIGINS
from campus_social.db.mongo import ensure_follow_edge_index, init_db_indexes
from campus_social.services import notify
from campus_social.utils.errors import register_error_handlers
from campus_social.utils.logging import setup_logging

# Routers
from campus_social.routes.auth import router as auth_router
from campus_social.routes.users import router as users_router
from campus_social.routes.posts import router as posts_router
from campus_social.routes.stories import router as stories_router
from campus_social.routes.events import router as events_router
from campus_social.routes.groups import router as groups_router
from campus_social.routes.notifications import router as notifications_router
from campus_social.routes.search import router as search_router
from campus_social.routes.announcements import router as announcements_router

setup_logging()
logger = logging.getLogger(__name__)

# ---------------------------
# Build FastAPI app
# ---------------------------
fastapi_app = FastAPI(title="Campus Social API", version="1.0.0")

fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    # Browsers reject credentials with a wildcard origin
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(fastapi_app)


@fastapi_app.get("/api/health", tags=["Health"])
async def health_check():
    return {"status": "OK", "message": "Campus Social API is running."}


# ---------------------------
# Routers
# ---------------------------
for router in (
    auth_router,
    users_router,
    posts_router,
    stories_router,
    events_router,
    groups_router,
    notifications_router,
    search_router,
    announcements_router,
):
    fastapi_app.include_router(router, prefix="/api")


# ---------------------------
# Startup / shutdown
# ---------------------------
@fastapi_app.on_event("startup")
async def on_startup():
    try:
        await init_db_indexes()
    except Exception:
        logger.exception("Index init failed")
        # Serve without the secondary indexes, never without the follow edge constraint
        await ensure_follow_edge_index()


@fastapi_app.on_event("shutdown")
async def on_shutdown():
    await notify.drain()


app = fastapi_app
