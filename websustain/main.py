import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from websustain.api_routers.v1 import api_router
from websustain.features.health.routes.health import router as health_router
from websustain.platform.config import settings
from websustain.platform.exceptions import add_exception_handlers

# Configure logging to show INFO level messages
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Scores a website's sustainability from performance data and CO2 estimates",
    version="1.0.0",
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

# Browser UI
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
def root():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/info", tags=["Info"])
def info():
    return {
        "app_name": f"{settings.APP_NAME} API",
        "description": "Scores a website's sustainability from performance data and CO2 estimates.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api/v1",
    }


app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
