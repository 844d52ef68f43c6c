import uvicorn
from fastapi import FastAPI

from battlestacks.api.routes.admin_registrations import router as admin_registrations_router
from battlestacks.api.routes.admin_tournaments import router as admin_tournaments_router
from battlestacks.api.routes.health import router as health_router
from battlestacks.api.routes.tournaments import router as tournaments_router
from battlestacks.api.routes.users import router as users_router
from battlestacks.api.routes.wallet import router as wallet_router
from battlestacks.core.config import get_settings
from battlestacks.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.app_env != "dev")

    app = FastAPI(
        title="BattleStacks API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(tournaments_router)
    app.include_router(wallet_router)
    app.include_router(users_router)
    app.include_router(admin_tournaments_router)
    app.include_router(admin_registrations_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "battlestacks.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
