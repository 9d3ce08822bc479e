from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from pokedex.api.routers.creatures import router as creatures_router
from pokedex.config import Settings, load_settings
from pokedex.core.assets import PUBLIC_PREFIX, AssetStore
from pokedex.core.errors import CatalogError
from pokedex.db.init_db import init_db

READY_TEXT = "API Pokémon Ready!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    assets = AssetStore(settings.assets_dir, settings.public_base_url)
    # StaticFiles проверяет каталог при создании
    assets.ensure()

    app = FastAPI(title="Pokédex API", lifespan=lifespan)
    app.state.settings = settings
    app.state.assets = assets

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/", response_class=PlainTextResponse)
    def ready():
        return READY_TEXT

    app.include_router(creatures_router)
    app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.assets_dir), name="assets")

    return app


app = create_app()
