# dutyfree/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from dutyfree.core.config import get_settings
from dutyfree.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from dutyfree.models import user as _user_models  # noqa: F401
from dutyfree.models import product as _product_models  # noqa: F401
from dutyfree.models import cart as _cart_models  # noqa: F401
from dutyfree.models import order as _order_models  # noqa: F401
from dutyfree.models import collection as _collection_models  # noqa: F401
from dutyfree.models import content as _content_models  # noqa: F401

# Routers
from dutyfree.routers.users import router as users_router
from dutyfree.routers.products import router as products_router
from dutyfree.routers.collections import router as collections_router
from dutyfree.routers.cart import router as cart_router, CART_COUNT_HEADER
from dutyfree.routers.orders import router as orders_router
from dutyfree.routers.content import router as content_router
from dutyfree.routers.uploads import router as uploads_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to Supabase Postgres...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CART_COUNT_HEADER],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(collections_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(content_router, prefix=settings.API_V1_STR)
app.include_router(uploads_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "dutyfree-backend"}
