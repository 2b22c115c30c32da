from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice.core.config import settings
from backoffice.core.logging_config import configure_logging
import backoffice.models  # noqa: F401  # force model registration

from backoffice.api.errors import register_exception_handlers
from backoffice.api.v1.payments import router as payments_router
from backoffice.api.v1.clients import router as clients_router
from backoffice.api.v1.sales import router as sales_router
from backoffice.api.v1.performance import router as performance_router


def create_application() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Property Back Office API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "service": "property-backoffice"}

    # Routers
    app.include_router(payments_router, prefix="/api/v1")
    app.include_router(clients_router, prefix="/api/v1")
    app.include_router(sales_router, prefix="/api/v1")
    app.include_router(performance_router, prefix="/api/v1")

    return app


app = create_application()
