import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, load_settings, setup_logging
from routes import api
from services.deals import DealService
from services.errors import ValidationError
from services.storage import Storage

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, service: DealService | None = None) -> FastAPI:
    settings = settings or load_settings()
    deal_service = service or DealService(Storage(settings.data_file))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        deal_service.storage.ensure_directory()
        logger.info(
            f"ASIN Watcher API running on port {settings.port}, "
            f"deals file {deal_service.storage.path}"
        )
        yield

    app = FastAPI(title="ASIN Watcher Backend", version="1.0.0", lifespan=lifespan)
    app.state.deal_service = deal_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    app.include_router(api.router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "ASIN Watcher backend is running"}

    return app


settings = load_settings()
setup_logging(settings.log_level)
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
