"""
DesignCrafter - FastAPI Backend

Main entry point. Sets up logging, CORS, includes all routes, initializes DB.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from config import CORS_ORIGINS, LOG_LEVEL
from database import init_db

# Import route modules
from routes.auth import router as auth_router
from routes.designs import router as designs_router
from routes.preferences import router as preferences_router
from routes.catalog import router as catalog_router
from routes.editor import router as editor_router

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    await init_db()
    logger.info("Database ready")
    yield


app = FastAPI(
    title="DesignCrafter",
    description="Design room layouts in 2D and 3D and save them",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report payload validation failures as 400 with the error list."""
    return JSONResponse(status_code=400, content={"errors": jsonable_encoder(exc.errors())})


# Include routers
app.include_router(auth_router)
app.include_router(designs_router)
app.include_router(preferences_router)
app.include_router(catalog_router)
app.include_router(editor_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    from config import HOST, PORT
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
