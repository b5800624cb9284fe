from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import logging

import config
from database import init_db_with_retry
from errors import CatalogError
from routes import auth, library, search

# ----------------------------------------------------------------------
# LOGGING
# ----------------------------------------------------------------------
logger = logging.getLogger("uvicorn")
logger.setLevel(logging.INFO)

# ----------------------------------------------------------------------
# FASTAPI INITIALISATION
# ----------------------------------------------------------------------
app = FastAPI(
    title="Bibliothèque API",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# ----------------------------------------------------------------------
# CORS CONFIGURATION
# ----------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "https://localhost:3000",
        *config.CORS_ORIGINS,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------
# DATABASE
# ----------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    init_db_with_retry()

# ----------------------------------------------------------------------
# ERREURS MÉTIER
# ----------------------------------------------------------------------
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    # Le message interne reste dans les logs, le client ne voit que `detail`
    logger.info(f"{request.method} {request.url.path} → {exc.status_code} ({type(exc).__name__}: {exc})")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# ----------------------------------------------------------------------
# ROUTES
# ----------------------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(search.router)
app.include_router(library.router)
