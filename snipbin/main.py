"""
Snipbin - Main FastAPI application.
"""
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from snipbin.config import settings, validate_settings
from snipbin.database import db
from snipbin.routes import health, pastes
from snipbin.scheduler import shutdown_scheduler, start_scheduler

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Create FastAPI app
app = FastAPI(
    title="Snipbin",
    description="Short-lived text pastes with automatic expiry",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Report validation errors without echoing the rejected input.

    The default handler returns each field's input, which can't be rendered
    when it holds text that isn't valid UTF-8.
    """
    errors = [
        {key: value for key, value in error.items() if key not in ("input", "ctx")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.on_event("startup")
async def startup_event():
    """Prepare storage and start the expiration sweep."""
    logger.info("Snipbin application starting...")
    try:
        validate_settings()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        raise
    db.init_storage()
    if db.is_healthy():
        logger.info(f"STORAGE: {db.layout.root.resolve()}")
    else:
        logger.warning(f"STORAGE: {db.layout.root.resolve()} is not writable, saves will fail")
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Snipbin application shutting down...")
    shutdown_scheduler()


@app.get("/", response_class=FileResponse)
async def root():
    """Serve the create paste HTML page."""
    return FileResponse(TEMPLATES_DIR / "create.html", media_type="text/html")


@app.get("/about", response_class=FileResponse)
async def about():
    return FileResponse(TEMPLATES_DIR / "about.html", media_type="text/html")


@app.get("/legal", response_class=FileResponse)
async def legal():
    return FileResponse(TEMPLATES_DIR / "legal.html", media_type="text/html")


# Catch-all /{paste_id} lives in the pastes router, so it goes last
app.include_router(health.router)
app.include_router(pastes.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "snipbin.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
