"""
Tutoring booking API.

Builds the ASGI application: lesson listing/search/update, order
placement and lesson images. The inventory backend (database or
in-memory fallback) is chosen once at startup and kept on
``app.state.inventory``; every response reports it through the
``X-Inventory-Mode`` header so clients can tell when bookings are not
durable.

    uvicorn main:app
"""
import time
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.config.settings import Settings
from shared.observability import setup_observability
from services.inventory_service.backend import open_inventory
from services.lesson_service.router import router as lesson_router
from services.order_service.router import router as order_router
from services.image_service.router import router as image_router

logger = structlog.get_logger(__name__)

MODE_HEADER = "X-Inventory-Mode"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "booking_service", settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        inventory = getattr(request.app.state, "inventory", None)
        if inventory is not None:
            response.headers[MODE_HEADER] = inventory.mode.value
        logger.info(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    # Malformed bodies are a client error like any other validation failure
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    app.include_router(lesson_router)
    app.include_router(order_router)
    app.include_router(image_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Backend API is running. Try GET /lessons"

    @app.get("/health")
    async def health_check(request: Request):
        inventory = request.app.state.inventory
        return {"service": "booking", "status": "running", "mode": inventory.mode.value}

    @app.on_event("startup")
    async def startup_event():
        app.state.inventory = await open_inventory(settings)

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.inventory.close()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
