import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import StorageMode, get_settings
from .routers import ads, health, images, users

settings = get_settings()

app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(images.router)
app.include_router(images.admin_router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(ads.router, prefix=settings.api_prefix)


@app.on_event("startup")
def _log_storage_mode() -> None:
    location = settings.resolved_images_dir if settings.image_storage is StorageMode.FILESYSTEM else "images.data"
    logging.getLogger("uvicorn").info("Serving images from %s (%s mode)", location, settings.image_storage.value)
