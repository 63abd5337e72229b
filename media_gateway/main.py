from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from media_gateway.config import get_settings
from media_gateway.handlers import media_handler
from media_gateway.services.media import MediaServiceError

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Media Gateway API")

app.include_router(media_handler.router)


@app.exception_handler(MediaServiceError)
async def media_service_error_handler(request: Request, exc: MediaServiceError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
