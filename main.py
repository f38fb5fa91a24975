import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import database
import seed
from auth_helper import MissingSecretError
from auth_routes import router as auth_router
from category_routes import router as category_router
from config import settings
from middleware import EnvelopeError, envelope_error_handler
from product_routes import router as product_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def prepare_database():
    if database.db is None:
        logger.warning("DATABASE_URL/DATABASE_NAME not set; API calls will fail until configured")
        return
    database.ensure_indexes()
    if settings.seed_database:
        try:
            seed.populate()
        except Exception as exc:
            logger.warning("Seeding failed: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.jwt_secret:
        raise MissingSecretError("JWT_SECRET environment variable is not set; refusing to start")
    prepare_database()
    yield


app = FastAPI(title="Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(EnvelopeError, envelope_error_handler)

app.include_router(auth_router)
app.include_router(category_router)
app.include_router(product_router)


# Health
@app.get("/")
def read_root():
    return {"message": "Storefront API running"}


@app.get("/health")
def health():
    response = {
        "backend": "ok",
        "database": "not_configured",
        "database_url": "set" if settings.database_url else "not_set",
        "collections": [],
    }
    try:
        if database.db is not None:
            response["collections"] = database.db.list_collection_names()[:10]
            response["database"] = "ok"
    except Exception as e:
        response["database"] = f"error: {str(e)[:80]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
