import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from roastery.core.config import settings
from roastery.db.database import create_db_and_tables
from roastery.routers.catalog import router as catalog_router
from roastery.routers.inventory import router as inventory_router
from roastery.schemas.errors import ErrorBody

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("Tables ready, freshness window is %s days", settings.catalog_max_age_days)
    yield


app = FastAPI(
    title="Roastery Inventory API",
    description="Raw bean inventory and bagged coffee catalog",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Keep the {"error": ...} shape instead of FastAPI's default 422 detail list
    errors = exc.errors()
    messages = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in errors
    )
    if any(err.get("type") == "json_invalid" for err in errors):
        messages = f"Malformed JSON body: {messages}"
    return JSONResponse(status_code=400, content=ErrorBody(error=messages or "Malformed request").model_dump())


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# Raw bean lots
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

# Bagged coffee for sale
app.include_router(catalog_router, prefix="/catalog", tags=["catalog"])

if __name__ == "__main__":
    uvicorn.run("roastery.main:app", host=settings.host, port=settings.port, reload=True)
