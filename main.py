import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database
from pymongo.errors import PyMongoError

import asset_requests
import assets
import auth
import employees
import payments
import users
from config import configure_logging, settings
from database import ensure_indexes, get_db
from errors import register_error_handlers

configure_logging()
settings.warn_insecure_defaults()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = app.dependency_overrides.get(get_db, get_db)()
    try:
        ensure_indexes(database)
    except PyMongoError as e:
        logger.error("Could not create indexes: %s", e)
    yield


# ----------------------------
# FastAPI App
# ----------------------------
app = FastAPI(title="Asset Management API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(employees.router)
app.include_router(assets.router)
app.include_router(asset_requests.router)
app.include_router(payments.router)


# ----------------------------
# Health/Test Endpoints
# ----------------------------
@app.get("/")
def root():
    return {"message": "Asset Management Backend Running"}


@app.get("/test")
def test_database(db: Database = Depends(get_db)):
    try:
        collections = db.list_collection_names()
        return {
            "backend": "ok",
            "database": "ok",
            "collections": collections,
        }
    except PyMongoError as e:
        logger.error("Database check failed: %s", e)
        return {"backend": "ok", "database": f"error: {str(e)}"}


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting server on port %d", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
