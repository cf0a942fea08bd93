"""
RenoQuote Pricing API
FastAPI backend for renovation labour quotes, materials pricing and the
universal bathroom configuration, over async PostgreSQL.
"""
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load .env before config reads the environment
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from renoquote import config
from renoquote.errors import CatalogStoreError, PackageNotFoundError, QuoteValidationError
from renoquote.services.logging_config import setup_logging
from renoquote.services.middleware import RequestTimingMiddleware, SecurityHeadersMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_FORMAT != "text")
logger = logging.getLogger("renoquote-api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from renoquote.db import engine, init_db
    try:
        await init_db()
    except Exception as e:
        logger.warning(f"init_db failed, store calls will error until the DB is reachable: {e}")
    yield
    await engine.dispose()


app = FastAPI(
    title="RenoQuote Pricing API",
    version="1.0.0",
    description="Labour quotes, materials pricing and catalog rules for bathroom renovations",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Error taxonomy -> HTTP
# ---------------------------------------------------------------------------

@app.exception_handler(QuoteValidationError)
async def validation_error_handler(request: Request, exc: QuoteValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": "validation_error", "field": exc.field},
    )


@app.exception_handler(PackageNotFoundError)
async def package_not_found_handler(request: Request, exc: PackageNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "error": "not_found"})


@app.exception_handler(CatalogStoreError)
async def store_error_handler(request: Request, exc: CatalogStoreError):
    return JSONResponse(
        status_code=503,
        content={"detail": "Catalog store unavailable", "error": "store_unavailable"},
    )


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
)
app.add_middleware(SecurityHeadersMiddleware)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

# Routers
from renoquote.api.quote_routes import router as quote_router
from renoquote.api.materials_routes import router as materials_router
from renoquote.api.settings_routes import router as settings_router

app.include_router(quote_router)
app.include_router(materials_router)
app.include_router(settings_router)


@app.get("/health")
async def health_check():
    return {"status": "active", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("renoquote.main:app", host="0.0.0.0", port=8000, reload=True)
