from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.tasks.router import router as tasks_router
from app.exception_handlers import register_exception_handlers
from app.log_config import configure_logging
from app.settings import get_settings

settings = get_settings()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Team Tasks API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_DEBUG else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(tasks_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
